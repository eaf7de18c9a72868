"""
Runs the add/delete stress suite for a few branching factors
"""
import random

import pytest

from .context import BTree, EXIT_SUCCESS, run_add_del_stress_suite, run_add_del_stress_test, max_height, delete_orders


@pytest.mark.parametrize("max_children", [3, 4, 5, 6])
def test_stress_suite(max_children):
    assert run_add_del_stress_suite(max_children, num_perms=1) == EXIT_SUCCESS


def test_stress_with_duplicate_and_absent_keys():
    tree = BTree(3)
    run_add_del_stress_test(tree, [5, 3, 5, 8, 1], [42, 5, 3, 5, 8, 1])
    assert tree.count == 0


def test_max_height():
    assert max_height(1, 3) == 2
    assert max_height(3, 3) == 3
    assert max_height(7, 3) == 4


def test_delete_orders():
    keys = [1, 2, 3, 4]
    orders = delete_orders(keys, 2, random.Random(1))
    assert len(orders) == 4
    for order in orders:
        assert sorted(order) == keys
