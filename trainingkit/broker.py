"""Fan-out of new bids to everyone watching an item."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Dict, Optional, Set

from trainingkit.auction_models import Bid

WATCHER_BUFFER = 10

Watcher = "queue.Queue[Bid]"


class Broker:
    """Delivers each broadcast bid to the watchers registered for its item.

    Every watcher is a bounded queue; a watcher that has fallen behind misses
    the bid rather than holding up the others.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._watchers: Dict[int, Set["queue.Queue[Bid]"]] = {}

    def add_watcher(self, item_id: int) -> "queue.Queue[Bid]":
        """Register and return a new queue that receives bids on ``item_id``."""
        watcher: "queue.Queue[Bid]" = queue.Queue(maxsize=WATCHER_BUFFER)
        with self._lock:
            self._watchers.setdefault(item_id, set()).add(watcher)
        return watcher

    def remove_watcher(self, item_id: int, watcher: "queue.Queue[Bid]") -> None:
        """Stop delivering to ``watcher``; unknown watchers are ignored."""
        with self._lock:
            watchers = self._watchers.get(item_id)
            if watchers is None:
                return
            watchers.discard(watcher)
            if not watchers:
                del self._watchers[item_id]

    def broadcast(self, item_id: int, bid: Bid) -> None:
        """Offer ``bid`` to every watcher of ``item_id`` without blocking."""
        with self._lock:
            targets = list(self._watchers.get(item_id, ()))
        for watcher in targets:
            try:
                watcher.put_nowait(bid)
            except queue.Full:
                self._logger.warning("Channel is full, skipping bid %s", bid)