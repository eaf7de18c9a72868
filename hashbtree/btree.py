from __future__ import annotations

"""
Contains the implementation of the btree
"""
import logging

from dataclasses import dataclass
from typing import Any, Hashable, Iterable, Iterator, List, Optional

from .constants import DEFAULT_MAX_CHILDREN


logger = logging.getLogger(__name__)


# section: errors


class DataStructureError(Exception):
    pass


class AlreadyPresent(DataStructureError):
    """The key derived from an element is already stored in the tree"""
    pass


class NotPresent(DataStructureError):
    """
    Reserved for symmetry with AlreadyPresent.
    NOTE: find and remove report a missing key by returning None; they never raise this.
    """
    pass


class TreeValidationError(AssertionError):
    pass


# section: node payloads


@dataclass(frozen=True)
class KeyValue:
    """
    A stored element together with the key derived from it.
    A pair is never mutated; replacing an element swaps in a new pair.
    """
    key: int
    element: Any


@dataclass
class Split:
    """
    Result of splitting an overfull node. The caller
    replaces the split node with `left` and `right`, and
    adds `separator` between them.
    """
    separator: KeyValue
    left: Node
    right: Node


@dataclass
class Steal:
    """
    A pair (and for internal nodes, a child) given up by
    a sibling with spare capacity
    """
    separator: KeyValue
    child: Optional[Node]


class Node:
    """
    A btree node. A node owns an ordered list of pairs, and
    for internal nodes, exactly len(pairs) + 1 children. A node
    with no children is a leaf.

    All structural algorithms live here; the BTree only handles
    growing a new root after a split, and collapsing/clearing the root
    after a removal.
    """

    def __init__(self, max_children: int, pairs: List[KeyValue] = None, children: List[Node] = None):
        self.max_children = max_children
        self.pairs = pairs if pairs is not None else []
        self.children = children if children is not None else []

    @property
    def max_elements(self) -> int:
        return self.max_children - 1

    @property
    def min_children(self) -> int:
        return (self.max_children + 1) // 2

    @property
    def min_elements(self) -> int:
        return self.min_children - 1

    def is_leaf(self) -> bool:
        return len(self.children) == 0

    def is_undersized(self) -> bool:
        return len(self.pairs) < self.min_elements

    def is_overfull(self) -> bool:
        return len(self.pairs) > self.max_elements

    # section: lookup

    def find_index(self, key: int) -> int:
        """
        binary search for the position of the first pair whose key >= `key`.
        This is the position of `key`, if it exists, otherwise the
        insertion position, which is also the index of the child whose range brackets `key`.

        :param key:
        :return: index in range [0, len(pairs)]
        """
        left_closed_index = 0
        # 'open' since it's one past right index
        right_open_index = len(self.pairs)
        while left_closed_index != right_open_index:
            index = left_closed_index + (right_open_index - left_closed_index) // 2
            key_at_index = self.pairs[index].key
            if key == key_at_index:
                return index
            if key < key_at_index:
                right_open_index = index
            else:
                left_closed_index = index + 1

        return left_closed_index

    def find(self, key: int) -> Optional[KeyValue]:
        index = self.find_index(key)
        if index < len(self.pairs) and self.pairs[index].key == key:
            return self.pairs[index]
        if self.is_leaf():
            return None
        return self.children[index].find(key)

    # section: insert

    def insert(self, pair: KeyValue, replace: bool) -> Optional[Split]:
        """
        insert `pair` into the subtree rooted at self.

        :param pair:
        :param replace: whether an existing pair with the same key is overwritten;
            if False, AlreadyPresent is raised before anything is modified
        :return: Split if self overflowed and was split, else None
        """
        index = self.find_index(pair.key)
        if index < len(self.pairs) and self.pairs[index].key == pair.key:
            if not replace:
                raise AlreadyPresent(f"key [{pair.key}] already present")
            self.pairs[index] = pair
            return None

        if self.is_leaf():
            self.pairs.insert(index, pair)
        else:
            split = self.children[index].insert(pair, replace)
            if split is None:
                return None
            self.pairs.insert(index, split.separator)
            self.children[index] = split.left
            self.children.insert(index + 1, split.right)

        if not self.is_overfull():
            return None
        return self.split()

    def split(self) -> Split:
        """
        split self around the middle pair, which becomes the separator.
        NOTE: self is discarded by the caller; both halves are new nodes
        """
        mid = len(self.pairs) // 2
        left = Node(self.max_children, self.pairs[:mid])
        right = Node(self.max_children, self.pairs[mid + 1:])
        if not self.is_leaf():
            left.children = self.children[:mid + 1]
            right.children = self.children[mid + 1:]
        logger.debug(f"split node {self.keys()} around key [{self.pairs[mid].key}]")
        return Split(self.pairs[mid], left, right)

    # section: delete

    def remove(self, key: int) -> Optional[KeyValue]:
        """
        remove `key` from the subtree rooted at self. Any child
        that is left undersized is rebalanced via `shrink`. Self
        may be left undersized; that is for the parent to handle.

        :param key:
        :return: removed pair, or None if key is not in the subtree
        """
        index = self.find_index(key)
        if index < len(self.pairs) and self.pairs[index].key == key:
            removed = self.pairs[index]
            if self.is_leaf():
                return self.pairs.pop(index)
            # the predecessor takes the place of the removed pair
            self.pairs[index] = self.children[index].remove_max()
        else:
            if self.is_leaf():
                return None
            removed = self.children[index].remove(key)
            if removed is None:
                return None

        if self.children[index].is_undersized():
            self.shrink(index)
        return removed

    def remove_max(self) -> KeyValue:
        """
        remove and return the max pair in the subtree rooted at self
        """
        if self.is_leaf():
            return self.pairs.pop()
        last = self.children[-1]
        max_pair = last.remove_max()
        if last.is_undersized():
            self.shrink(len(self.pairs))
        return max_pair

    def lend_last(self) -> Optional[Steal]:
        """give up last pair (and last child), if self can spare one"""
        if len(self.pairs) <= self.min_elements:
            return None
        child = self.children.pop() if self.children else None
        return Steal(self.pairs.pop(), child)

    def lend_first(self) -> Optional[Steal]:
        """give up first pair (and first child), if self can spare one"""
        if len(self.pairs) <= self.min_elements:
            return None
        child = self.children.pop(0) if self.children else None
        return Steal(self.pairs.pop(0), child)

    def shrink(self, index: int):
        """
        rebalance child at `index`, which has fewer than min_elements pairs.

        Options are tried in order:
            1) steal from left sibling: left's last pair replaces separator,
                and the separator becomes child's first pair
            2) steal from right sibling: symmetric
            3) merge with a sibling; with the left sibling if one exists,
                otherwise with the right sibling. The separator between the two
                descends into the merged node.

        :param index: child position
        """
        child = self.children[index]

        if index > 0:
            steal = self.children[index - 1].lend_last()
            if steal is not None:
                child.pairs.insert(0, self.pairs[index - 1])
                self.pairs[index - 1] = steal.separator
                if steal.child is not None:
                    child.children.insert(0, steal.child)
                logger.debug(f"child [{index}] stole key [{steal.separator.key}] from left sibling")
                return

        if index + 1 < len(self.children):
            steal = self.children[index + 1].lend_first()
            if steal is not None:
                child.pairs.append(self.pairs[index])
                self.pairs[index] = steal.separator
                if steal.child is not None:
                    child.children.append(steal.child)
                logger.debug(f"child [{index}] stole key [{steal.separator.key}] from right sibling")
                return

        # position of left node of the merged pair
        left_index = index - 1 if index > 0 else index
        separator = self.pairs.pop(left_index)
        left = self.children.pop(left_index)
        right = self.children[left_index]
        self.children[left_index] = Node.merge(separator, left, right)
        logger.debug(f"merged children [{left_index}] and [{left_index + 1}] around key [{separator.key}]")

    @staticmethod
    def merge(separator: KeyValue, left: Node, right: Node) -> Node:
        return Node(
            left.max_children,
            left.pairs + [separator] + right.pairs,
            left.children + right.children,
        )

    # section: traversal and introspection

    def keys(self) -> List[int]:
        return [pair.key for pair in self.pairs]

    def iter_elements(self) -> Iterator[Any]:
        """in-order traversal: child 0, pair 0, child 1, ..., last child"""
        if self.is_leaf():
            for pair in self.pairs:
                yield pair.element
            return
        for child, pair in zip(self.children, self.pairs):
            yield from child.iter_elements()
            yield pair.element
        yield from self.children[-1].iter_elements()

    def count(self) -> int:
        return len(self.pairs) + sum(child.count() for child in self.children)

    def height(self) -> int:
        height = 1
        node = self
        while node.children:
            node = node.children[0]
            height += 1
        return height

    def dump(self, depth: int) -> List[str]:
        lines = [f"{BTree.depth_to_indent(depth)}{self.keys()}"]
        for child in self.children:
            lines.extend(child.dump(depth + 1))
        return lines

    # section: validation

    def validate(self, is_root: bool, lower_bound: float, upper_bound: float) -> int:
        """
        validate subtree rooted at self.

        :param is_root: root is exempt from lower bounds on size
        :param lower_bound: all keys in subtree must be strictly greater
        :param upper_bound: all keys in subtree must be strictly less
        :return: height of subtree
            raises TreeValidationError on failure
        """
        keys = self.keys()
        if len(self.pairs) > self.max_elements:
            raise TreeValidationError(f"node {keys} has more than {self.max_elements} pairs")
        if not is_root and len(self.pairs) < self.min_elements:
            raise TreeValidationError(f"node {keys} has fewer than {self.min_elements} pairs")

        for idx, key in enumerate(keys):
            if not lower_bound < key < upper_bound:
                raise TreeValidationError(
                    f"node {keys}: key [{key}] not within bounds ({lower_bound}, {upper_bound})"
                )
            if idx > 0 and keys[idx - 1] >= key:
                raise TreeValidationError(f"node {keys}: keys must be strictly increasing")

        if self.is_leaf():
            return 1

        if len(self.children) != len(self.pairs) + 1:
            raise TreeValidationError(
                f"internal node {keys} has {len(self.children)} children; expected {len(self.pairs) + 1}"
            )
        if len(self.children) > self.max_children:
            raise TreeValidationError(f"node {keys} has more than {self.max_children} children")
        if not is_root and len(self.children) < self.min_children:
            raise TreeValidationError(f"node {keys} has fewer than {self.min_children} children")

        heights = set()
        for idx, child in enumerate(self.children):
            child_lower_bound = keys[idx - 1] if idx > 0 else lower_bound
            child_upper_bound = keys[idx] if idx < len(keys) else upper_bound
            heights.add(child.validate(False, child_lower_bound, child_upper_bound))
        if len(heights) != 1:
            raise TreeValidationError(f"children of node {keys} have unequal heights {sorted(heights)}")
        return heights.pop() + 1


class BTree:
    """
    An in-memory btree of hashable elements. Each element is keyed by
    its hash, which is computed once on insertion.

    NOTE: distinct elements must have distinct hashes, and an element's
    hash must not change while it is stored; otherwise one element will
    shadow another, or the key order will be corrupted.

    The public interface consists of `find`, `insert`, `replace`, `remove`,
    bulk conversion, introspection and validators. `Node` implements the
    algorithms; this class owns the root and handles the cases where the
    root itself is created, replaced, or discarded.
    """

    def __init__(self, max_children: int = DEFAULT_MAX_CHILDREN, validate_on_write: bool = False):
        """
        :param max_children: branching factor; must be greater than 2
        :param validate_on_write: whether to validate the tree after every mutation
        """
        if max_children <= 2:
            raise ValueError(f"max_children must be greater than 2; received {max_children}")
        self.max_children = max_children
        self.validate_on_write = validate_on_write
        self.root: Optional[Node] = None

    # section : public interface

    def find(self, key: int) -> Optional[Any]:
        """
        :param key:
        :return: element stored under `key`, or None
        """
        if self.root is None:
            return None
        pair = self.root.find(key)
        return pair.element if pair is not None else None

    def __getitem__(self, key: int) -> Optional[Any]:
        return self.find(key)

    def contains_key(self, key: int) -> bool:
        return self.root is not None and self.root.find(key) is not None

    def contains(self, element: Hashable) -> bool:
        """
        whether `element` is stored, i.e. its key is present
        and the element stored under the key is equal to it
        """
        if self.root is None:
            return False
        pair = self.root.find(hash(element))
        return pair is not None and pair.element == element

    def __contains__(self, element: Hashable) -> bool:
        return self.contains(element)

    def insert(self, element: Hashable):
        """
        insert `element`

        :param element:
        :return:
            raises AlreadyPresent if element's key is already present;
            the tree is not modified in that case
        """
        self._insert(KeyValue(hash(element), element), replace=False)

    def replace(self, element: Hashable):
        """
        insert `element`, overwriting any element stored under the same key
        """
        self._insert(KeyValue(hash(element), element), replace=True)

    def _insert(self, pair: KeyValue, replace: bool):
        if self.root is None:
            self.root = Node(self.max_children, [pair])
        else:
            split = self.root.insert(pair, replace)
            if split is not None:
                self.root = Node(self.max_children, [split.separator], [split.left, split.right])
                logger.debug(f"grew new root with key [{split.separator.key}]")
        self._check_valid()

    def remove(self, key: int) -> Optional[Any]:
        """
        remove element stored under `key`

        :param key:
        :return: removed element, or None if `key` is not present
        """
        if self.root is None:
            return None
        pair = self.root.remove(key)
        if len(self.root.children) == 1:
            # root was emptied by a merge
            self.root = self.root.children[0]
            logger.debug("collapsed root into its only child")
        elif not self.root.pairs and not self.root.children:
            self.root = None
        self._check_valid()
        return pair.element if pair is not None else None

    def clear(self):
        self.root = None

    # section: bulk conversion

    def to_list(self) -> List[Any]:
        return list(self)

    def __iter__(self) -> Iterator[Any]:
        if self.root is None:
            return iter([])
        return self.root.iter_elements()

    @property
    def elements(self) -> List[Any]:
        return self.to_list()

    @elements.setter
    def elements(self, elements: Iterable[Hashable]):
        """
        replace contents with `elements`; elements whose key
        is already present are skipped, i.e. first one wins
        """
        self.clear()
        for element in elements:
            try:
                self.insert(element)
            except AlreadyPresent:
                logger.debug(f"skipping duplicate element [{element}]")

    # section: introspection

    @property
    def count(self) -> int:
        return self.root.count() if self.root is not None else 0

    def __len__(self) -> int:
        return self.count

    @property
    def height(self) -> int:
        """number of levels; 0 for empty tree"""
        return self.root.height() if self.root is not None else 0

    # section: btree debugging utilities

    @staticmethod
    def depth_to_indent(depth: int) -> str:
        return "\t" * depth

    def dump(self) -> str:
        """
        one line per node, listing the node's keys, indented by depth
        """
        if self.root is None:
            return f"{self.__class__.__name__}\n..."
        return "\n".join([self.__class__.__name__] + self.root.dump(depth=1))

    def print_tree(self):
        print(self.dump())

    def __str__(self):
        return self.dump()

    def __repr__(self):
        return f"{self.__class__.__name__}(max_children={self.max_children}, count={self.count})"

    def validate(self):
        """
        validate structural invariants

        :return:
            raises TreeValidationError on failure
            True on success
        """
        if self.root is not None:
            self.root.validate(True, float("-inf"), float("inf"))
        return True

    @property
    def valid(self) -> bool:
        try:
            return self.validate()
        except TreeValidationError as e:
            logger.error(f"tree validation failed: {e}")
            return False

    def _check_valid(self):
        if self.validate_on_write:
            self.validate()
