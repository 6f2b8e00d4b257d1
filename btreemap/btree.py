from __future__ import annotations

"""
Contains the implementation of the btree
"""
import logging

from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .constants import DEFAULT_T, MIN_T


class InvalidNodeError(Exception):
    """
    A node was used in a way its type doesn't permit,
    e.g. reading a child of a leaf. This indicates a bug
    in the tree algorithms, and is not recoverable.
    """
    pass


def natural_compare(key1, key2) -> int:
    """
    compare keys by their natural ordering

    :return: negative if key1 < key2, 0 if equal, positive if key1 > key2
    """
    if key1 < key2:
        return -1
    if key1 > key2:
        return 1
    return 0


class Entry:
    """
    A key-value pair stored in a node.
    The key is fixed once the entry is created; the value
    can be replaced in place.
    """

    def __init__(self, key: Any, value: Any):
        self._key = key
        self.value = value

    @property
    def key(self) -> Any:
        return self._key

    def __str__(self):
        return f"{self.key}:{self.value}"

    def __repr__(self):
        return f"Entry({self.key!r}, {self.value!r})"


@dataclass
class NodeSearchResult:
    """
    Result of searching a key within a single node
    """

    # whether key exists in node
    found: bool
    # if found, position of entry; otherwise position where key
    # would be inserted, i.e. the child whose subtree must contain key
    index: int
    value: Any = None


class Node:
    """
    A btree node. Holds entries in ascending key order and, if internal,
    one more child than it has entries. `children[i]` holds keys strictly
    between `entries[i-1].key` and `entries[i].key`.

    A node only knows how to search and splice its own entries and children;
    all balancing is done by Tree.
    """

    def __init__(self, compare: Callable[[Any, Any], int], is_leaf: bool = False):
        """
        :param compare: key comparison function shared by every node of a tree
        :param is_leaf:
        """
        self.compare = compare
        self.is_leaf = is_leaf
        self.entries: List[Entry] = []
        self.children: List[Node] = []

    def size(self) -> int:
        """
        number of entries
        """
        return len(self.entries)

    def keys(self) -> list:
        return [entry.key for entry in self.entries]

    # section: entries

    def search(self, key) -> NodeSearchResult:
        """
        binary search for key

        :param key:
        :return: NodeSearchResult
        """
        low = 0
        high = len(self.entries) - 1
        while low <= high:
            mid = (low + high) // 2
            entry = self.entries[mid]
            cmp = self.compare(entry.key, key)
            if cmp == 0:
                return NodeSearchResult(True, mid, entry.value)
            elif cmp > 0:
                high = mid - 1
            else:
                low = mid + 1
        return NodeSearchResult(False, low)

    def entry_at(self, index: int) -> Entry:
        return self.entries[index]

    def add_entry(self, entry: Entry):
        """
        append entry at the end; caller must ensure ordering holds
        """
        self.entries.append(entry)

    def insert_entry(self, entry: Entry, index: int):
        """
        insert entry at index; caller must ensure the key is not a duplicate
        """
        self.entries.insert(index, entry)

    def remove_entry(self, index: int) -> Entry:
        return self.entries.pop(index)

    def insert_new_entry(self, entry: Entry) -> bool:
        """
        insert entry at its ordered position

        :return: False if key already exists, True otherwise
        """
        result = self.search(entry.key)
        if result.found:
            return False
        self.insert_entry(entry, result.index)
        return True

    def put_entry(self, entry: Entry) -> Optional[Any]:
        """
        update the value if the key exists, otherwise insert entry

        :return: previous value if the key existed, else None
        """
        result = self.search(entry.key)
        if result.found:
            existing = self.entries[result.index]
            old_value = existing.value
            existing.value = entry.value
            return old_value
        self.insert_entry(entry, result.index)
        return None

    # section: children

    def child_at(self, index: int) -> Node:
        if self.is_leaf:
            raise InvalidNodeError("leaf node doesn't have children")
        return self.children[index]

    def add_child(self, child: Node):
        self.children.append(child)

    def insert_child(self, child: Node, index: int):
        self.children.insert(index, child)

    def remove_child(self, index: int) -> Node:
        return self.children.pop(index)

    def __repr__(self):
        kind = "leaf" if self.is_leaf else "internal"
        return f"Node({kind}, keys={self.keys()})"


class Tree:
    """
    In-memory ordered map, backed by a btree of minimum degree `t`.

    Every non-root node holds between t-1 and 2t-1 entries; the root holds
    between 0 and 2t-1. All leaves are at the same depth.

    The public interface consists of `search`, `insert`, `put`
    and `delete`, and validators. The remaining methods should not
    be invoked by external actors.

    Both insert and delete rebalance top-down: a full child is split
    before it's entered on insert, and a child with only t-1 entries
    is topped up (borrow or merge) before it's entered on delete.
    Thus, no fix-up pass is ever needed on the way back up.
    """

    def __init__(self, t: int = DEFAULT_T, comparator: Optional[Callable[[Any, Any], int]] = None):
        """
        :param t: minimum degree, must be >= 2
        :param comparator: optional cmp(a, b) -> int; if not provided keys'
            natural ordering is used
        """
        if isinstance(t, bool) or not isinstance(t, int) or t < MIN_T:
            raise ValueError(f"Expected minimum degree t to be an integer >= {MIN_T}; received [{t!r}]")
        self.t = t
        # every non-root node must satisfy: min_key_size <= num entries <= max_key_size
        self.min_key_size = t - 1
        self.max_key_size = 2 * t - 1
        self.comparator = comparator
        self.compare = comparator if comparator is not None else natural_compare
        self.root = self.new_node(is_leaf=True)

    def new_node(self, is_leaf: bool) -> Node:
        return Node(self.compare, is_leaf=is_leaf)

    # section : public interface: search, insert, put, and delete
    # NB: the helper methods are clustered along these methods

    def search(self, key) -> Optional[Any]:
        """
        find value for `key`

        :param key:
        :return: value if key exists, else None
        """
        return self.search_subtree(self.root, key)

    def search_subtree(self, node: Node, key) -> Optional[Any]:
        entry = self.find_entry(node, key)
        if entry is None:
            return None
        return entry.value

    def find_entry(self, node: Node, key) -> Optional[Entry]:
        """
        find entry for key in subtree rooted at `node`
        """
        result = node.search(key)
        if result.found:
            return node.entry_at(result.index)
        if node.is_leaf:
            return None
        return self.find_entry(node.child_at(result.index), key)

    def contains(self, key) -> bool:
        return self.find_entry(self.root, key) is not None

    def insert(self, key, value) -> bool:
        """
        insert `key` if it doesn't exist

        Algorithm:
            If the root is full, the tree grows: a new root is created with
            the old root as its only child, and the old root is split. This is
            the only way the tree gains height.

            Then descend from the root; before entering a full child, split it,
            so the parent of every split always has room for the promoted median.
            Once at a leaf, insert the entry.

        :return: False if key already exists (tree is unchanged), else True
        """
        # a duplicate must not trigger any eager splits along the path
        if self.contains(key):
            return False
        self.grow_if_root_full()
        return self.insert_not_full(self.root, Entry(key, value))

    def put(self, key, value) -> Optional[Any]:
        """
        insert `key`, or update its value if it exists

        :return: previous value if key existed, else None
        """
        self.grow_if_root_full()
        return self.put_not_full(self.root, Entry(key, value))

    def delete(self, key) -> Optional[Entry]:
        """
        delete `key`

        Algorithm (node N, with precondition that non-root N has at least t entries):
            A) key is in N, and N is a leaf: remove it

            B) key is in N, and N is internal; let L, R be the children
               left and right of key
               1) L has at least t entries: replace key with its predecessor,
                  and recursively delete the predecessor from L
               2) R has at least t entries: replace key with its successor,
                  and recursively delete the successor from R
               3) both have t-1 entries: merge key and R into L, and
                  recursively delete key from L

            C) key is not in N, and N is internal; let C be the child
               whose subtree must contain key. If C has t-1 entries, first:
               1) if the right (then left) sibling has at least t entries,
                  rotate one entry from sibling via N into C
               2) otherwise, merge C with the right sibling (or left if
                  C is the last child), pulling down the separating entry
               then recursively delete key from C

            If N is the root and becomes empty after a merge, the merged node
            becomes the root. This is the only way the tree loses height.

        :return: removed entry, or None if key doesn't exist (tree is unchanged)
        """
        # a missing key must not trigger any eager rebalancing along the path
        if not self.contains(key):
            logging.debug(f"key [{key}] not found; nothing to delete")
            return None
        return self.delete_from_subtree(self.root, key)

    # section: insert/put helpers

    def grow_if_root_full(self):
        """
        split root if it's full. The new root has
        a single entry, i.e. the old root's median
        """
        if self.root.size() < self.max_key_size:
            return
        new_root = self.new_node(is_leaf=False)
        new_root.add_child(self.root)
        self.split_node(new_root, self.root, 0)
        self.root = new_root
        logging.debug(f"split full root; new root has key {self.root.keys()}")

    def split_node(self, parent: Node, child: Node, index: int):
        """
        split full `child`, which is `parent`'s child at `index`.

        entries [t, 2t-2] of child, and children [t, 2t-1] if internal, are
        moved to a new right sibling. The median, i.e. entry t-1, is moved to
        parent at `index`, and the sibling becomes parent's child at `index` + 1.
        Both child and sibling are left with t-1 entries.

        :param parent: must not be full
        :param child: must be full
        :param index: child's position among parent's children
        """
        assert child.size() == self.max_key_size, (
            f"split of non-full node; expected {self.max_key_size} entries, found {child.size()}"
        )
        t = self.t
        sibling = self.new_node(is_leaf=child.is_leaf)
        for i in range(self.min_key_size):
            sibling.add_entry(child.entry_at(t + i))
        median = child.entry_at(t - 1)
        for i in range(self.max_key_size - 1, t - 2, -1):
            child.remove_entry(i)

        if not child.is_leaf:
            for i in range(self.min_key_size + 1):
                sibling.add_child(child.child_at(t + i))
            for i in range(self.max_key_size, t - 1, -1):
                child.remove_child(i)

        parent.insert_entry(median, index)
        parent.insert_child(sibling, index + 1)

    def insert_not_full(self, node: Node, entry: Entry) -> bool:
        """
        insert entry in subtree rooted at non-full `node`
        """
        assert node.size() < self.max_key_size

        if node.is_leaf:
            return node.insert_new_entry(entry)

        result = node.search(entry.key)
        if result.found:
            return False

        child = node.child_at(result.index)
        if child.size() == self.max_key_size:
            self.split_node(node, child, result.index)
            # determine which half the entry belongs in, relative to the promoted median
            cmp = self.compare(entry.key, node.entry_at(result.index).key)
            if cmp == 0:
                return False
            if cmp > 0:
                child = node.child_at(result.index + 1)
        return self.insert_not_full(child, entry)

    def put_not_full(self, node: Node, entry: Entry) -> Optional[Any]:
        """
        upsert entry in subtree rooted at non-full `node`
        """
        assert node.size() < self.max_key_size

        if node.is_leaf:
            return node.put_entry(entry)

        result = node.search(entry.key)
        if result.found:
            return node.put_entry(entry)

        child = node.child_at(result.index)
        if child.size() == self.max_key_size:
            self.split_node(node, child, result.index)
            cmp = self.compare(entry.key, node.entry_at(result.index).key)
            if cmp == 0:
                # key was child's median, and now lives in node
                return node.put_entry(entry)
            if cmp > 0:
                child = node.child_at(result.index + 1)
        return self.put_not_full(child, entry)

    # section: delete helpers

    def delete_from_subtree(self, node: Node, key) -> Optional[Entry]:
        """
        delete key from subtree rooted at `node`
        """
        assert node is self.root or node.size() >= self.t, (
            f"non-root node entered with {node.size()} entries; expected at least {self.t}"
        )

        result = node.search(key)
        if result.found:
            if node.is_leaf:
                # case A
                return node.remove_entry(result.index)
            return self.delete_from_internal(node, result.index, key)

        if node.is_leaf:
            return None

        # case C
        child = self.ensure_child_has_spare(node, result.index)
        return self.delete_from_subtree(child, key)

    def delete_from_internal(self, node: Node, index: int, key) -> Optional[Entry]:
        """
        case B: delete entry at `index` of internal `node`
        """
        left = node.child_at(index)
        if left.size() >= self.t:
            # B1: substitute with predecessor
            removed = node.remove_entry(index)
            predecessor = self.max_entry(left)
            node.insert_entry(predecessor, index)
            self.delete_from_subtree(left, predecessor.key)
            return removed

        right = node.child_at(index + 1)
        if right.size() >= self.t:
            # B2: substitute with successor
            removed = node.remove_entry(index)
            successor = self.min_entry(right)
            node.insert_entry(successor, index)
            self.delete_from_subtree(right, successor.key)
            return removed

        # B3: both children are minimal; merge them around the entry
        merged = self.merge_children(node, index)
        self.collapse_root_if_empty(node, merged)
        return self.delete_from_subtree(merged, key)

    def ensure_child_has_spare(self, node: Node, index: int) -> Node:
        """
        ensure `node`'s child at `index` has at least t entries,
        borrowing from or merging with a sibling if needed.

        :return: the node to descend into
        """
        child = node.child_at(index)
        if child.size() >= self.t:
            return child

        has_right = index < node.size()
        has_left = index > 0

        # C1: borrow; right sibling is checked before left
        if has_right and node.child_at(index + 1).size() >= self.t:
            self.borrow_from_right(node, index)
            return child
        if has_left and node.child_at(index - 1).size() >= self.t:
            self.borrow_from_left(node, index)
            return child

        # C2: merge; with right sibling if one exists
        if has_right:
            merged = self.merge_children(node, index)
        else:
            merged = self.merge_children(node, index - 1)
        self.collapse_root_if_empty(node, merged)
        return merged

    def borrow_from_right(self, node: Node, index: int):
        """
        rotate left: separator at `index` moves down to the end of child,
        right sibling's first entry moves up into node
        """
        child = node.child_at(index)
        sibling = node.child_at(index + 1)
        child.add_entry(node.remove_entry(index))
        node.insert_entry(sibling.remove_entry(0), index)
        if not sibling.is_leaf:
            child.add_child(sibling.remove_child(0))
        logging.debug(f"borrowed from right sibling; child now has {child.keys()}")

    def borrow_from_left(self, node: Node, index: int):
        """
        rotate right: separator at `index` - 1 moves down to the front of child,
        left sibling's last entry moves up into node
        """
        child = node.child_at(index)
        sibling = node.child_at(index - 1)
        child.insert_entry(node.remove_entry(index - 1), 0)
        node.insert_entry(sibling.remove_entry(sibling.size() - 1), index - 1)
        if not sibling.is_leaf:
            child.insert_child(sibling.remove_child(len(sibling.children) - 1), 0)
        logging.debug(f"borrowed from left sibling; child now has {child.keys()}")

    def merge_children(self, node: Node, index: int) -> Node:
        """
        merge `node`'s children at `index` and `index` + 1, with the
        separating entry pulled down between them. The right child is absorbed.

        :return: merged node
        """
        left = node.child_at(index)
        right = node.child_at(index + 1)
        left.add_entry(node.remove_entry(index))
        node.remove_child(index + 1)
        for i in range(right.size()):
            left.add_entry(right.entry_at(i))
        if not right.is_leaf:
            for i in range(right.size() + 1):
                left.add_child(right.child_at(i))
        logging.debug(f"merged children at {index}; merged node has {left.keys()}")
        return left

    def collapse_root_if_empty(self, node: Node, merged: Node):
        """
        if the root was emptied by a merge, its only child becomes the new root
        """
        if node is self.root and node.size() == 0:
            self.root = merged
            logging.debug("root emptied by merge; tree height shrinks by one")

    @staticmethod
    def max_entry(node: Node) -> Entry:
        """
        max entry in subtree rooted at `node`
        """
        while not node.is_leaf:
            node = node.child_at(node.size())
        return node.entry_at(node.size() - 1)

    @staticmethod
    def min_entry(node: Node) -> Entry:
        """
        min entry in subtree rooted at `node`
        """
        while not node.is_leaf:
            node = node.child_at(0)
        return node.entry_at(0)

    # section: btree debugging utilities

    @staticmethod
    def depth_to_indent(depth: int) -> str:
        return " " * (depth * 4)

    def print_tree(self, node: Node = None, depth: int = 0):
        """
        print entire tree node by node, starting at an optional node

        :param node: root of this invocation; not necessarily global root
        :param depth: depth of current invocation (used for formatting indentation)
        """
        if node is None:
            node = self.root

        indent = self.depth_to_indent(depth)
        if node.is_leaf:
            print(f"{indent}leaf (size: {node.size()})")
            for i, entry in enumerate(node.entries):
                print(f"{indent}{i} - {entry}")
        else:
            body = f".. internal (size: {node.size()}, children: {len(node.children)}) .."
            divider = f"{indent}{len(body) * '.'}"
            print(divider)
            print(f"{indent}{body}")
            for i, entry in enumerate(node.entries):
                print(f"{indent}{i}-key: {entry}")
            print(divider)
            for child in node.children:
                self.print_tree(child, depth=depth + 1)

    def validate(self):
        """
        invoke all sub-validators

        raises AssertionError on first violated invariant
        """
        self.validate_occupancy()
        self.validate_depth()
        self.validate_ordering()

    def validate_occupancy(self) -> bool:
        """
        validate:
            1) each non-root node has [t-1, 2t-1] entries; root has at most 2t-1
            2) leaf flag is consistent with children, and internal nodes
               have one more child than entries
        """
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node is not self.root:
                assert node.size() >= self.min_key_size, (
                    f"node {node} underflows; expected at least {self.min_key_size} entries"
                )
            assert node.size() <= self.max_key_size, (
                f"node {node} overflows; expected at most {self.max_key_size} entries"
            )
            if node.is_leaf:
                assert len(node.children) == 0, f"leaf {node} has children"
            else:
                assert len(node.children) == node.size() + 1, (
                    f"internal node {node} has {len(node.children)} children; expected {node.size() + 1}"
                )
                stack.extend(node.children)
        return True

    def validate_depth(self) -> bool:
        """
        validate all leaves are at the same depth
        """
        leaf_depths = set()
        stack = [(self.root, 0)]
        while stack:
            node, depth = stack.pop()
            if node.is_leaf:
                leaf_depths.add(depth)
            else:
                stack.extend((child, depth + 1) for child in node.children)
        assert len(leaf_depths) == 1, f"leaves found at different depths: {sorted(leaf_depths)}"
        return True

    def validate_ordering(self) -> bool:
        """
        traverse the tree, starting at root, and ensure entries are ordered as expected, i.e.
        strictly ascending within a node, and within the bounds set by ancestors' entries

        :return:
            raises AssertionError on failure
            True on success
        """
        # bounds are open; None means unbounded
        stack = [(self.root, None, None)]
        while stack:
            node, lower_bound, upper_bound = stack.pop()
            for idx, entry in enumerate(node.entries):
                if lower_bound is not None:
                    assert self.compare(lower_bound, entry.key) < 0, (
                        f"validation: global lower bound [{lower_bound}] constraint violated [{entry.key}]"
                    )
                if upper_bound is not None:
                    assert self.compare(entry.key, upper_bound) < 0, (
                        f"validation: global upper bound [{upper_bound}] constraint violated [{entry.key}]"
                    )
                if idx > 0:
                    prev_key = node.entry_at(idx - 1).key
                    assert self.compare(prev_key, entry.key) < 0, (
                        f"validation: node entries must be strictly ascending; key: {entry.key}. "
                        f"prev_key: {prev_key}"
                    )

            if node.is_leaf:
                continue

            for child_num, child in enumerate(node.children):
                child_lower_bound = node.entry_at(child_num - 1).key if child_num > 0 else lower_bound
                child_upper_bound = node.entry_at(child_num).key if child_num < node.size() else upper_bound
                stack.append((child, child_lower_bound, child_upper_bound))
        return True
