"""Binary min-heap ordered by a caller-supplied comparison."""

from __future__ import annotations

from typing import Callable, Generic, List, TypeVar

T = TypeVar("T")


class HeapEmptyError(IndexError):
    """Raised when reading from an empty heap."""


class MinHeap(Generic[T]):
    """Array-backed binary heap; ``less(a, b)`` says whether ``a`` comes first.

    ``data`` is the heap array itself; after changing entries in place, call
    ``heapify_down`` from the last parent back to the root to restore order.
    """

    def __init__(self, less: Callable[[T, T], bool]) -> None:
        self.data: List[T] = []
        self._less = less

    def __len__(self) -> int:
        return len(self.data)

    def insert(self, value: T) -> None:
        self.data.append(value)
        self._heapify_up(len(self.data) - 1)

    def _heapify_up(self, index: int) -> None:
        data = self.data
        while index > 0:
            parent = (index - 1) // 2
            if not self._less(data[index], data[parent]):
                return
            data[index], data[parent] = data[parent], data[index]
            index = parent

    def extract_min(self) -> T:
        if not self.data:
            raise HeapEmptyError("heap is empty")
        data = self.data
        top = data[0]
        last = data.pop()
        if data:
            data[0] = last
            self.heapify_down(0)
        return top

    def heapify_down(self, index: int) -> None:
        data = self.data
        size = len(data)
        while True:
            left, right = 2 * index + 1, 2 * index + 2
            smallest = index
            if left < size and self._less(data[left], data[smallest]):
                smallest = left
            if right < size and self._less(data[right], data[smallest]):
                smallest = right
            if smallest == index:
                return
            data[index], data[smallest] = data[smallest], data[index]
            index = smallest

    def peek(self) -> T:
        if not self.data:
            raise HeapEmptyError("heap is empty")
        return self.data[0]

    def update(self, index: int, value: T) -> None:
        """Replace the entry at ``index`` and move it to its proper place."""
        if not 0 <= index < len(self.data):
            raise IndexError("invalid index")
        self.data[index] = value
        self._heapify_up(index)
        self.heapify_down(index)