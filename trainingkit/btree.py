"""B-tree of integer keys with range queries and sorted traversal."""

from __future__ import annotations

from bisect import bisect_left, bisect_right, insort
from dataclasses import dataclass, field
from typing import Iterator, List


@dataclass
class _Node:
    leaf: bool
    keys: List[int] = field(default_factory=list)
    children: List["_Node"] = field(default_factory=list)


class BTree:
    """B-tree of minimum degree ``t``: each node holds at most ``2t - 1`` keys."""

    def __init__(self, t: int) -> None:
        if t < 2:
            raise ValueError("minimum degree must be at least 2")
        self.t = t
        self.root = _Node(leaf=True)

    @property
    def _max_keys(self) -> int:
        return 2 * self.t - 1

    def insert(self, key: int) -> None:
        if len(self.root.keys) == self._max_keys:
            new_root = _Node(leaf=False, children=[self.root])
            self._split_child(new_root, 0)
            self.root = new_root
        self._insert_non_full(self.root, key)

    def _split_child(self, parent: _Node, i: int) -> None:
        t = self.t
        child = parent.children[i]
        median = child.keys[t - 1]
        sibling = _Node(leaf=child.leaf, keys=child.keys[t:], children=child.children[t:])
        del child.keys[t - 1:]
        del child.children[t:]
        parent.keys.insert(i, median)
        parent.children.insert(i + 1, sibling)

    def _insert_non_full(self, node: _Node, key: int) -> None:
        while not node.leaf:
            i = bisect_right(node.keys, key)
            if len(node.children[i].keys) == self._max_keys:
                self._split_child(node, i)
                if key > node.keys[i]:
                    i += 1
            node = node.children[i]
        insort(node.keys, key)

    def search(self, key: int) -> bool:
        node = self.root
        while True:
            i = bisect_left(node.keys, key)
            if i < len(node.keys) and node.keys[i] == key:
                return True
            if node.leaf:
                return False
            node = node.children[i]

    def delete(self, key: int) -> None:
        """Remove one occurrence of ``key``; absent keys are ignored."""
        self._delete(self.root, key)

    def _delete(self, node: _Node, key: int) -> None:
        i = bisect_left(node.keys, key)
        if i < len(node.keys) and node.keys[i] == key:
            if node.leaf:
                del node.keys[i]
            else:
                self._delete_internal(node, i)
        elif not node.leaf:
            self._delete(node.children[i], key)

    def _delete_internal(self, node: _Node, i: int) -> None:
        key = node.keys[i]
        left = node.children[i]
        if len(left.keys) >= self.t:
            predecessor = self._rightmost(left)
            node.keys[i] = predecessor
            self._delete(left, predecessor)
            return
        right = node.children[i + 1]
        if len(right.keys) >= self.t:
            successor = self._leftmost(right)
            node.keys[i] = successor
            self._delete(right, successor)
            return
        self._merge_children(node, i)
        self._delete(node.children[i], key)

    @staticmethod
    def _rightmost(node: _Node) -> int:
        while node.children:
            node = node.children[-1]
        return node.keys[-1]

    @staticmethod
    def _leftmost(node: _Node) -> int:
        while node.children:
            node = node.children[0]
        return node.keys[0]

    @staticmethod
    def _merge_children(node: _Node, i: int) -> None:
        child = node.children[i]
        sibling = node.children[i + 1]
        child.keys.append(node.keys[i])
        child.keys.extend(sibling.keys)
        if not child.leaf:
            child.children.extend(sibling.children)
        del node.keys[i]
        del node.children[i + 1]

    def range_query(self, low: int, high: int) -> List[int]:
        """Keys ``k`` with ``low <= k <= high`` in ascending order."""
        result: List[int] = []
        self._range(self.root, low, high, result)
        return result

    def _range(self, node: _Node, low: int, high: int, result: List[int]) -> None:
        for i, key in enumerate(node.keys):
            if not node.leaf and low < key:
                self._range(node.children[i], low, high, result)
            if low <= key <= high:
                result.append(key)
            if key > high:
                return
        if not node.leaf:
            self._range(node.children[len(node.keys)], low, high, result)

    def in_order(self) -> List[int]:
        """All keys in ascending order."""
        return list(self._walk(self.root))

    def _walk(self, node: _Node) -> Iterator[int]:
        for i, key in enumerate(node.keys):
            if not node.leaf:
                yield from self._walk(node.children[i])
            yield key
        if not node.leaf:
            yield from self._walk(node.children[len(node.keys)])

    def visualize(self) -> str:
        """Indented listing of each node's keys, one node per line."""
        lines: List[str] = []

        def visit(node: _Node, level: int) -> None:
            lines.append("  " * level + str(node.keys))
            if not node.leaf:
                for child in node.children:
                    visit(child, level + 1)

        visit(self.root, 0)
        return "\n".join(lines)