"""Registry of bidders with balances and per-user bid undo stacks."""

from __future__ import annotations

import threading
from typing import Dict

from trainingkit.auction_models import Bid, User


class UserError(Exception):
    """Raised for unknown users, duplicates, empty undo stacks and low balances."""


class UserManager:
    """Thread-safe store of users keyed by id."""

    def __init__(self) -> None:
        self._users: Dict[int, User] = {}
        self._lock = threading.RLock()

    def add_user(self, user: User) -> None:
        with self._lock:
            if user.id in self._users:
                raise UserError(f"user with ID {user.id} already exists")
            self._users[user.id] = user

    def get_user(self, user_id: int) -> User:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                raise UserError(f"user with ID {user_id} not found")
            return user

    def push_undo(self, user_id: int, bid: Bid) -> None:
        """Remember ``bid`` as the user's most recent bid."""
        with self._lock:
            self.get_user(user_id).active_bids.append(bid.id)

    def pop_undo(self, user_id: int) -> int:
        """Forget and return the id of the user's most recent bid."""
        with self._lock:
            user = self.get_user(user_id)
            if not user.active_bids:
                raise UserError("no bids to undo")
            return user.active_bids.pop()

    def deduct_balance(self, user_id: int, amount: float) -> None:
        with self._lock:
            user = self.get_user(user_id)
            if user.balance < amount:
                raise UserError(
                    f"insufficient balance: have {user.balance:.2f}, need {amount:.2f}"
                )
            user.balance -= amount

    def restore_balance(self, user_id: int, amount: float) -> None:
        with self._lock:
            self.get_user(user_id).balance += amount