"""
"Stress" tests, which perform a large number of add/delete
operations, and validate the tree after each one.

These should compliment, static unit tests, in that
they exercise many more delete orders, and thus expose rebalancing
issues that unit-tests can't catch.
"""
import logging
import itertools
import math
import random

from typing import List, Sequence

from .btree import BTree
from .constants import EXIT_SUCCESS, DEFAULT_MAX_CHILDREN, STRESS_NUM_PERMS, STRESS_RANDOM_SEED


STRESS_TEST_CASES = [
    [1, 2, 3, 4],
    [64, 5, 13, 82],
    [82, 13, 5, 2, 0],
    [10, 20, 30, 40, 50, 60, 70],
    [72, 79, 96, 38, 47],
    [432, 507, 311, 35, 246, 950, 956, 929, 769, 744, 994, 438],
    [159, 597, 520, 189, 822, 725, 504, 397, 218, 134, 516],
    [159, 597, 520, 189, 822, 725, 504, 397],
    [960, 267, 947, 400, 795, 327, 464, 884, 667, 870, 92],
    [793, 651, 165, 282, 177, 439, 593],
    [229, 653, 248, 298, 801, 947, 63, 619, 475, 422, 856, 57, 38],
    [103, 394, 484, 380, 834, 677, 604, 611, 952, 71, 568, 291, 433, 305],
    [114, 464, 55, 450, 729, 646, 95, 649, 59, 412, 546, 340, 667, 274, 477, 363, 333, 897, 772, 508, 182, 305,
     428, 180, 22],
    [15, 382, 653, 668, 139, 70, 828, 17, 891, 121, 175, 642, 491, 281, 920],
    [967, 163, 791, 938, 939, 196, 104, 465, 886, 355, 58, 251, 928, 758, 535, 737, 357, 125, 171, 838, 572, 745,
     999, 417, 393, 458, 292, 904, 158, 286, 900, 859, 668, 183],
    [726, 361, 583, 121, 908, 789, 842, 67, 871, 461, 522, 394, 225, 637, 792, 393, 656, 748, 39, 696],
    [54, 142, 440, 783, 619, 273, 95, 961, 692, 369, 447, 825, 555, 908, 483, 356, 40, 110, 519, 599],
    [413, 748, 452, 666, 956, 926, 94, 813, 245, 237, 264, 709, 706, 872, 535, 214, 561, 882, 646],
]


def max_height(num_elements: int, max_children: int) -> int:
    """
    upper bound on height of a tree holding `num_elements`,
    i.e. ceil(log_{min_children}(num_elements + 1)) + 1
    """
    min_children = (max_children + 1) // 2
    # integer search, since float log can overshoot exact powers
    height = 1
    while min_children ** (height - 1) < num_elements + 1:
        height += 1
    return height


def run_add_del_stress_test(tree: BTree, insert_keys: Sequence[int], del_keys: Sequence[int]):
    """
    insert `insert_keys`, then delete `del_keys`, validating
    the tree, and it's contents after each op.

    NOTE: keys are ints, and hence their own hash; duplicates in `insert_keys`
    are skipped, i.e. they are expected to be rejected by the tree

    :param tree:
    :param insert_keys:
    :param del_keys:
    :return:
    """
    tree.clear()
    logging.info(f"running test case: {list(insert_keys)} {list(del_keys)}")

    inserted = set()
    for key in insert_keys:
        if key in inserted:
            assert tree.contains(key)
            continue
        tree.insert(key)
        inserted.add(key)
        tree.validate()
        assert tree.height <= max_height(tree.count, tree.max_children), (
            f"height {tree.height} exceeds bound for {tree.count} elements"
        )

    logging.debug(f"tree after inserts:\n{tree.dump()}")
    assert tree.count == len(inserted), f"expected count {len(inserted)}; received {tree.count}"

    remaining = set(inserted)
    for key in del_keys:
        removed = tree.remove(key)
        if key in remaining:
            assert removed == key, f"expected to remove [{key}]; received [{removed}]"
            remaining.remove(key)
        else:
            assert removed is None, f"removed [{removed}] for absent key [{key}]"

        logging.debug(f"tree after deleting [{key}]:\n{tree.dump()}")
        # ensure tree is valid
        tree.validate()

        # check if all keys we expect are there in result
        expected = sorted(remaining)
        actual = tree.to_list()
        assert actual == expected, f"expected: {expected}; received {actual}"
        assert tree.count == len(expected)

    if not remaining:
        assert tree.height == 0 and tree.root is None, "expected empty tree"


def delete_orders(insert_keys: List[int], num_perms: int, rng: random.Random) -> List[List[int]]:
    """
    generate delete orders for `insert_keys`:
    `num_perms` permutations at a fixed step, plus as many random shuffles
    """
    # there is a large number of perms ~O(n!)
    # and they are generated in a predictable order
    # we'll skip based on fixed step
    total_perms = math.factorial(len(insert_keys))
    step_size = max(1, min(total_perms // num_perms, 10))
    perm_iter = itertools.permutations(insert_keys)

    del_perms = []
    for perm in itertools.islice(perm_iter, step_size - 1, None, step_size):
        del_perms.append(list(perm))
        if len(del_perms) == num_perms:
            break

    for _ in range(num_perms):
        shuffled = insert_keys[:]
        rng.shuffle(shuffled)
        del_perms.append(shuffled)
    return del_perms


def run_add_del_stress_suite(max_children: int = DEFAULT_MAX_CHILDREN, num_perms: int = STRESS_NUM_PERMS,
                             seed: int = STRESS_RANDOM_SEED) -> int:
    """
    Perform a large number of add/del operation
    and validate btree correctness.
    :return: exit code
    """
    rng = random.Random(seed)
    tree = BTree(max_children)

    for test_case in STRESS_TEST_CASES:
        insert_keys = test_case
        for del_keys in delete_orders(insert_keys, num_perms, rng):
            try:
                run_add_del_stress_test(tree, insert_keys, del_keys)
            except Exception as e:
                logging.error(
                    f"Stress test failed on: {insert_keys} {del_keys} with {e}"
                )
                raise

    logging.info(f"stress suite passed for max_children: {max_children}")
    return EXIT_SUCCESS
