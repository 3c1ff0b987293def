"""End-to-end bidding simulation used to populate a running auction server."""

from __future__ import annotations

import random
import sys
import threading
import time
from contextlib import suppress
from datetime import datetime, timedelta
from typing import Optional, TextIO

from trainingkit.auction import AuctionError, AuctionManager
from trainingkit.auction_models import STATUS_ACTIVE, Bid, Item, User
from trainingkit.category import CategoryTree
from trainingkit.users import UserError, UserManager

NUM_USERS = 100
ITEM_ID = 101
SPECIAL_USER_ID = 999


def _kitchen(moment: Optional[datetime]) -> str:
    if moment is None:
        return ""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d}{suffix}"


def _leading(item: Item) -> str:
    bid = item.current_bid
    if bid is None:
        return "none"
    return f"${bid.amount:.2f} (ID: {bid.user_id})"


def _bidder(auctions: AuctionManager, user_id: int) -> None:
    for attempt in range(random.randint(1, 5)):
        amount = float(500 + user_id * 10 + attempt * 5)
        with suppress(AuctionError, UserError):
            auctions.place_bid(ITEM_ID, user_id, amount)
        time.sleep(random.randrange(10) / 1000)


def seed(
    users: UserManager,
    categories: CategoryTree,
    auctions: AuctionManager,
    out: Optional[TextIO] = None,
) -> Optional[Bid]:
    """Register an item and bidders, bid concurrently, retract, then close the auction.

    Returns the winning bid, if any.
    """
    out = out if out is not None else sys.stdout

    def say(text: str = "") -> None:
        print(text, file=out)

    say("=== Bidding System: End-to-End Simulation ===")
    categories.add_category(["Electronics", "Phones"])

    now = datetime.now()
    item = Item(
        id=ITEM_ID,
        name="Super Smartphone",
        category="Phones",
        start_price=100,
        status=STATUS_ACTIVE,
        start_time=now - timedelta(hours=1),
        end_time=now + timedelta(hours=1),
    )
    auctions.register_item(item)

    for uid in range(1, NUM_USERS + 1):
        with suppress(UserError):
            users.add_user(User(id=uid, name=f"User{uid}", balance=1_000_000))

    say(f"\n--- [Phase 1] Simulating {NUM_USERS} Concurrent Bidders ---")
    started = time.perf_counter()
    bidders = [
        threading.Thread(target=_bidder, args=(auctions, uid))
        for uid in range(1, NUM_USERS + 1)
    ]
    for thread in bidders:
        thread.start()
    for thread in bidders:
        thread.join()
    say(f"Phase 1 Complete in {time.perf_counter() - started:.3f}s")

    say("\n--- [Phase 2] Testing Bid Retraction ---")
    with suppress(UserError):
        users.add_user(User(id=SPECIAL_USER_ID, name="Charlie", balance=50_000))

    high_amount = 10_000.0
    say(f"Charlie placing high bid of ${high_amount:.2f}...")
    try:
        auctions.place_bid(ITEM_ID, SPECIAL_USER_ID, high_amount)
    except (AuctionError, UserError) as exc:
        say(f"Error: {exc}")

    say(f"Current Leading Bid: {_leading(item)}")

    say("Charlie retracting his last bid...")
    try:
        auctions.retract_bid(ITEM_ID, SPECIAL_USER_ID)
    except (AuctionError, UserError) as exc:
        say(f"Retraction Failed: {exc}")
    else:
        say(f"Retraction Success! New Leading Bid: {_leading(item)}")

    say("\n--- [Phase 3] Ending Auction & Winner Determination ---")
    winner: Optional[Bid] = None
    try:
        winner = auctions.end_auction(ITEM_ID)
    except AuctionError as exc:
        say(f"Error ending auction: {exc}")
    else:
        if winner is not None:
            try:
                name = users.get_user(winner.user_id).name
            except UserError:
                name = ""
            say("WINNER FOUND!")
            say(f"  Name:   {name}")
            say(f"  Bid:    ${winner.amount:.2f}")
            say(f"  Time:   {_kitchen(winner.timestamp)}")
        else:
            say("No qualified winner found for this item.")

    say("\n=== Simulation Finished Successfully ===")
    return winner