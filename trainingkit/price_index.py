"""B-tree index from prices to the product identifiers that carry them."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from itertools import islice
from typing import Iterator, List, Optional


@dataclass
class _Entry:
    price: float
    ids: List[str]


@dataclass
class _Node:
    leaf: bool
    entries: List[_Entry] = field(default_factory=list)
    children: List["_Node"] = field(default_factory=list)


def _price(entry: _Entry) -> float:
    return entry.price


def _lower(node: _Node, price: float) -> int:
    return bisect_left(node.entries, price, key=_price)


def _upper(node: _Node, price: float) -> int:
    return bisect_right(node.entries, price, key=_price)


class PriceIndex:
    """B-tree of minimum degree ``t`` keyed by price.

    Each distinct price is stored once and holds the identifiers of every
    product at that price, in the order they were added.
    """

    def __init__(self, t: int) -> None:
        if t < 2:
            raise ValueError("minimum degree must be at least 2")
        self.t = t
        self.root = _Node(leaf=True)

    @property
    def _max_entries(self) -> int:
        return 2 * self.t - 1

    def _find(self, price: float) -> Optional[_Entry]:
        node = self.root
        while True:
            i = _lower(node, price)
            if i < len(node.entries) and node.entries[i].price == price:
                return node.entries[i]
            if node.leaf:
                return None
            node = node.children[i]

    def insert(self, price: float, product_id: str) -> None:
        """Index ``product_id`` under ``price``."""
        existing = self._find(price)
        if existing is not None:
            existing.ids.append(product_id)
            return
        if len(self.root.entries) == self._max_entries:
            new_root = _Node(leaf=False, children=[self.root])
            self._split_child(new_root, 0)
            self.root = new_root
        self._insert_non_full(self.root, price, product_id)

    def _split_child(self, parent: _Node, i: int) -> None:
        t = self.t
        child = parent.children[i]
        median = child.entries[t - 1]
        sibling = _Node(
            leaf=child.leaf,
            entries=child.entries[t:],
            children=[] if child.leaf else child.children[t:],
        )
        del child.entries[t - 1:]
        if not child.leaf:
            del child.children[t:]
        parent.entries.insert(i, median)
        parent.children.insert(i + 1, sibling)

    def _insert_non_full(self, node: _Node, price: float, product_id: str) -> None:
        while not node.leaf:
            i = _upper(node, price)
            if len(node.children[i].entries) == self._max_entries:
                self._split_child(node, i)
                if price > node.entries[i].price:
                    i += 1
            node = node.children[i]
        node.entries.insert(_upper(node, price), _Entry(price, [product_id]))

    def delete(self, price: float, product_id: str) -> None:
        """Remove ``product_id`` from ``price``; the price goes once it has no ids."""
        self._delete(self.root, price, product_id)

    def _delete(self, node: _Node, price: float, product_id: str) -> None:
        i = _lower(node, price)
        if i < len(node.entries) and node.entries[i].price == price:
            entry = node.entries[i]
            if product_id in entry.ids:
                entry.ids.remove(product_id)
            if entry.ids:
                return
            self._remove_at(node, i)
        elif not node.leaf:
            self._delete(node.children[i], price, product_id)

    def _remove_at(self, node: _Node, i: int) -> None:
        if node.leaf:
            del node.entries[i]
        else:
            self._remove_internal(node, i)

    def _remove_price(self, node: _Node, price: float) -> None:
        i = _lower(node, price)
        if i < len(node.entries) and node.entries[i].price == price:
            self._remove_at(node, i)
        elif not node.leaf:
            self._remove_price(node.children[i], price)

    def _remove_internal(self, node: _Node, i: int) -> None:
        price = node.entries[i].price
        left = node.children[i]
        if len(left.entries) >= self.t:
            predecessor = self._rightmost(left)
            node.entries[i] = predecessor
            self._remove_price(left, predecessor.price)
            return
        right = node.children[i + 1]
        if len(right.entries) >= self.t:
            successor = self._leftmost(right)
            node.entries[i] = successor
            self._remove_price(right, successor.price)
            return
        self._merge_children(node, i)
        self._remove_price(node.children[i], price)

    @staticmethod
    def _rightmost(node: _Node) -> _Entry:
        while node.children:
            node = node.children[-1]
        return node.entries[-1]

    @staticmethod
    def _leftmost(node: _Node) -> _Entry:
        while node.children:
            node = node.children[0]
        return node.entries[0]

    @staticmethod
    def _merge_children(node: _Node, i: int) -> None:
        child = node.children[i]
        sibling = node.children[i + 1]
        child.entries.append(node.entries[i])
        child.entries.extend(sibling.entries)
        if not child.leaf:
            child.children.extend(sibling.children)
        del node.entries[i]
        del node.children[i + 1]

    def range_query(self, low: float, high: float) -> List[str]:
        """Ids of products priced between ``low`` and ``high`` inclusive, by price."""
        return list(self._range(self.root, low, high))

    def _range(self, node: _Node, low: float, high: float) -> Iterator[str]:
        entries = node.entries
        i = _lower(node, low)
        while i < len(entries) and entries[i].price <= high:
            if not node.leaf:
                yield from self._range(node.children[i], low, high)
            if entries[i].price >= low:
                yield from entries[i].ids
            i += 1
        if not node.leaf:
            yield from self._range(node.children[i], low, high)

    def in_order(self) -> List[str]:
        """All ids ordered by price."""
        return list(self._walk(self.root))

    def _walk(self, node: _Node) -> Iterator[str]:
        for i, entry in enumerate(node.entries):
            if not node.leaf:
                yield from self._walk(node.children[i])
            yield from entry.ids
        if not node.leaf:
            yield from self._walk(node.children[len(node.entries)])

    def in_order_page(self, offset: int, limit: int) -> List[str]:
        """At most ``limit`` ids ordered by price, skipping the first ``offset``."""
        if limit <= 0:
            return []
        start = max(offset, 0)
        return list(islice(self._walk(self.root), start, start + limit))