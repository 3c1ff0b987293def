"""Coordinates bidding, retraction and closing of auctions."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from trainingkit.auction_models import STATUS_ACTIVE, STATUS_ENDED, AuctionStats, Bid, Item
from trainingkit.bid_heap import BidHeap
from trainingkit.category import CategoryTree
from trainingkit.users import UserError, UserManager

Broadcast = Callable[[int, Bid], None]


class AuctionError(Exception):
    """Raised when an auction operation is refused."""


@dataclass
class _ItemContext:
    item: Item
    heap: BidHeap = field(default_factory=BidHeap)
    lock: threading.Lock = field(default_factory=threading.Lock)


def _is_open(item: Item) -> bool:
    if item.start_time is None or item.end_time is None:
        return False
    now = datetime.now(item.start_time.tzinfo)
    return item.start_time <= now <= item.end_time and item.status == STATUS_ACTIVE


class AuctionManager:
    """Holds registered items and applies bids with one lock per item."""

    def __init__(
        self,
        users: UserManager,
        categories: CategoryTree,
        broadcast: Optional[Broadcast] = None,
    ) -> None:
        self.users = users
        self.categories = categories
        self._broadcast = broadcast
        self._items: Dict[int, _ItemContext] = {}
        self._lock = threading.Lock()
        self._id_lock = threading.Lock()
        self._last_id = 0

    def _next_bid_id(self) -> int:
        with self._id_lock:
            self._last_id = max(time.time_ns(), self._last_id + 1)
            return self._last_id

    def _context(self, item_id: int) -> _ItemContext:
        with self._lock:
            ctx = self._items.get(item_id)
        if ctx is None:
            raise AuctionError(f"item {item_id} not found")
        return ctx

    def register_item(self, item: Item) -> None:
        with self._lock:
            self._items[item.id] = _ItemContext(item)

    def place_bid(self, item_id: int, user_id: int, amount: float) -> Bid:
        """Validate and record a bid, charging the bidder straight away."""
        ctx = self._context(item_id)
        with ctx.lock:
            item = ctx.item
            if not _is_open(item):
                raise AuctionError("auction is not currently active")
            if item.current_bid is not None and amount <= item.current_bid.amount:
                raise AuctionError(
                    f"bid amount {amount:.2f} must be greater than current bid "
                    f"{item.current_bid.amount:.2f}"
                )
            if amount <= item.start_price:
                raise AuctionError(
                    f"bid amount {amount:.2f} must be greater than start price "
                    f"{item.start_price:.2f}"
                )
            self.users.deduct_balance(user_id, amount)
            bid = Bid(
                id=self._next_bid_id(),
                item_id=item_id,
                user_id=user_id,
                amount=amount,
                timestamp=datetime.now(),
            )
            item.add_bid(bid)
            ctx.heap.push(bid)
            try:
                self.users.push_undo(user_id, bid)
            except UserError:
                self.users.restore_balance(user_id, amount)
                raise
        if self._broadcast is not None:
            self._broadcast(item_id, bid)
        return bid

    def retract_bid(self, item_id: int, user_id: int) -> None:
        """Undo the user's last bid, which must be the item's leading bid."""
        ctx = self._context(item_id)
        with ctx.lock:
            bid_id = self.users.pop_undo(user_id)
            item = ctx.item
            if item.current_bid is None or item.current_bid.id != bid_id:
                raise AuctionError(
                    "can only retract the current leading bid if it was your last bid"
                )
            refund = item.current_bid.amount
            if item.history:
                item.history.pop(0)
                item.current_bid = item.history[0] if item.history else None
            if len(ctx.heap) > 0:
                ctx.heap.pop()
            self.users.restore_balance(user_id, refund)

    def end_auction(self, item_id: int) -> Optional[Bid]:
        """Close the auction and return the winning bid, if any."""
        ctx = self._context(item_id)
        with ctx.lock:
            ctx.item.status = STATUS_ENDED
            if len(ctx.heap) == 0:
                return None
            return ctx.heap.pop()

    def browse_category(self, path: Sequence[str]) -> List[Item]:
        """Items in the category at ``path`` or any category beneath it."""
        node = self.categories.find_category(path)
        wanted = set(node.all_names())
        with self._lock:
            return [ctx.item for ctx in self._items.values() if ctx.item.category in wanted]

    def get_item(self, item_id: int) -> Item:
        return self._context(item_id).item

    def bids_for_item(self, item_id: int) -> List[Bid]:
        """The item's bids, newest first."""
        ctx = self._context(item_id)
        with ctx.lock:
            return ctx.item.bid_history()

    def stats(self) -> AuctionStats:
        with self._lock:
            contexts = list(self._items.values())
        stats = AuctionStats()
        for ctx in contexts:
            stats.total_items += 1
            if ctx.item.status == STATUS_ACTIVE:
                stats.active_items += 1
            elif ctx.item.status == STATUS_ENDED:
                stats.ended_items += 1
            stats.total_bids += len(ctx.heap)
            if ctx.item.current_bid is not None:
                stats.total_revenue += ctx.item.current_bid.amount
        return stats