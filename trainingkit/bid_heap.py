"""Thread-safe max-heap of bids ordered by amount."""

from __future__ import annotations

import heapq
import itertools
import threading
from typing import List, Optional, Tuple

from trainingkit.auction_models import Bid
from trainingkit.minheap import HeapEmptyError


class BidHeap:
    """Keeps bids so that the highest amount is always on top."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: List[Tuple[float, int, Bid]] = []
        self._counter = itertools.count()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def push(self, bid: Bid) -> None:
        with self._lock:
            heapq.heappush(self._entries, (-bid.amount, next(self._counter), bid))

    def pop(self) -> Bid:
        """Remove and return the highest bid."""
        with self._lock:
            if not self._entries:
                raise HeapEmptyError("bid heap is empty")
            return heapq.heappop(self._entries)[2]

    def peek(self) -> Optional[Bid]:
        """The highest bid, or ``None`` when the heap is empty."""
        with self._lock:
            return self._entries[0][2] if self._entries else None