"""Fibonacci heap ordered by a caller-supplied comparison."""

from __future__ import annotations

from typing import Callable, Dict, Generic, Iterator, Optional, TypeVar

from trainingkit.minheap import HeapEmptyError

T = TypeVar("T")


class _Node(Generic[T]):
    __slots__ = ("value", "degree", "parent", "child", "left", "right", "marked")

    def __init__(self, value: T) -> None:
        self.value = value
        self.degree = 0
        self.parent: Optional[_Node[T]] = None
        self.child: Optional[_Node[T]] = None
        self.left: _Node[T] = self
        self.right: _Node[T] = self
        self.marked = False


def _ring(start: _Node[T]) -> Iterator[_Node[T]]:
    node = start
    while True:
        yield node
        node = node.right
        if node is start:
            return


class FibonacciHeap(Generic[T]):
    """Lazy-merging heap; ``less(a, b)`` says whether ``a`` comes first."""

    def __init__(self, less: Callable[[T, T], bool]) -> None:
        self._less = less
        self._min: Optional[_Node[T]] = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._size == 0

    def _splice(self, node: _Node[T]) -> None:
        """Put ``node`` into the root list just left of the minimum."""
        head = self._min
        node.left = head.left
        node.right = head
        head.left.right = node
        head.left = node

    def insert(self, value: T) -> None:
        node = _Node(value)
        if self._min is None:
            self._min = node
        else:
            self._splice(node)
            if self._less(value, self._min.value):
                self._min = node
        self._size += 1

    def extract_min(self) -> T:
        top = self._min
        if top is None:
            raise HeapEmptyError("heap is empty")

        if top.child is not None:
            for child in list(_ring(top.child)):
                child.parent = None
                self._splice(child)
            top.child = None

        top.left.right = top.right
        top.right.left = top.left

        if top.right is top:
            self._min = None
        else:
            self._min = top.right
            self._consolidate()

        self._size -= 1
        return top.value

    def _consolidate(self) -> None:
        by_degree: Dict[int, _Node[T]] = {}
        for root in list(_ring(self._min)):
            x = root
            degree = x.degree
            while degree in by_degree:
                y = by_degree.pop(degree)
                if self._less(y.value, x.value):
                    x, y = y, x
                self._link(y, x)
                degree += 1
            by_degree[degree] = x

        self._min = None
        for degree in sorted(by_degree):
            node = by_degree[degree]
            if self._min is None:
                node.left = node.right = node
                self._min = node
            else:
                self._splice(node)
                if self._less(node.value, self._min.value):
                    self._min = node

    @staticmethod
    def _link(child: _Node[T], parent: _Node[T]) -> None:
        child.left.right = child.right
        child.right.left = child.left

        child.parent = parent
        if parent.child is None:
            parent.child = child
            child.left = child.right = child
        else:
            first = parent.child
            child.left = first.left
            child.right = first
            first.left.right = child
            first.left = child
        parent.degree += 1
        child.marked = False