"""Users, bids, auction items and summary statistics, with JSON-ready dictionaries."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

STATUS_ACTIVE = "Active"
STATUS_ENDED = "Ended"
STATUS_CANCELLED = "Cancelled"

_ZERO_TIME = "0001-01-01T00:00:00Z"
_TIME_RE = re.compile(
    r"^(?P<base>\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d)(?:\.(?P<frac>\d+))?(?P<tz>Z|[+-]\d\d:\d\d)?$"
)


def _parse_time(text: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp; the zero time and blanks mean no time at all."""
    if not text:
        return None
    match = _TIME_RE.match(text)
    if match is None:
        raise ValueError(f"invalid timestamp: {text!r}")
    fraction = (match["frac"] or "")[:6].ljust(6, "0")
    zone = match["tz"] or ""
    if zone == "Z":
        zone = "+00:00"
    moment = datetime.fromisoformat(f"{match['base']}.{fraction}{zone}")
    if moment.replace(tzinfo=None) == datetime(1, 1, 1):
        return None
    return moment


def _format_time(moment: Optional[datetime]) -> str:
    return _ZERO_TIME if moment is None else moment.isoformat()


@dataclass
class User:
    """A bidder; ``active_bids`` is the stack of bid ids that can be undone."""

    id: int = 0
    name: str = ""
    balance: float = 0.0
    active_bids: List[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=int(data.get("id", 0)),
            name=data.get("name", ""),
            balance=float(data.get("balance", 0.0)),
            active_bids=list(data.get("active_bids") or []),
        )


@dataclass
class Bid:
    id: int = 0
    item_id: int = 0
    user_id: int = 0
    amount: float = 0.0
    timestamp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "item_id": self.item_id,
            "user_id": self.user_id,
            "amount": self.amount,
            "timestamp": _format_time(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bid":
        return cls(
            id=int(data.get("id", 0)),
            item_id=int(data.get("item_id", 0)),
            user_id=int(data.get("user_id", 0)),
            amount=float(data.get("amount", 0.0)),
            timestamp=_parse_time(data.get("timestamp")),
        )


@dataclass
class AuctionStats:
    total_items: int = 0
    active_items: int = 0
    ended_items: int = 0
    total_bids: int = 0
    total_revenue: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_items": self.total_items,
            "active_items": self.active_items,
            "ended_items": self.ended_items,
            "total_bids": self.total_bids,
            "total_revenue": self.total_revenue,
        }


@dataclass
class Item:
    """An auctioned item; ``history`` holds its bids, newest first."""

    id: int = 0
    name: str = ""
    category: str = ""
    description: str = ""
    seller_id: int = 0
    start_price: float = 0.0
    current_bid: Optional[Bid] = None
    history: List[Bid] = field(default_factory=list)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    status: str = ""

    def add_bid(self, bid: Bid) -> None:
        """Record ``bid`` as the newest and leading bid."""
        self.history.insert(0, bid)
        self.current_bid = bid

    def bid_history(self) -> List[Bid]:
        """Bids from newest to oldest."""
        return list(self.history)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bid_history": [b.to_dict() for b in self.history] if self.history else None,
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "seller_id": self.seller_id,
            "start_price": self.start_price,
            "current_bid": self.current_bid.to_dict() if self.current_bid else None,
            "start_time": _format_time(self.start_time),
            "end_time": _format_time(self.end_time),
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Item":
        current = data.get("current_bid")
        return cls(
            id=int(data.get("id", 0)),
            name=data.get("name", ""),
            category=data.get("category", ""),
            description=data.get("description", ""),
            seller_id=int(data.get("seller_id", 0)),
            start_price=float(data.get("start_price", 0.0)),
            current_bid=Bid.from_dict(current) if current else None,
            history=[Bid.from_dict(b) for b in data.get("bid_history") or []],
            start_time=_parse_time(data.get("start_time")),
            end_time=_parse_time(data.get("end_time")),
            status=data.get("status", ""),
        )