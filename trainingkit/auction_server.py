"""HTTP front end of the auction system as a WSGI application."""

from __future__ import annotations

import argparse
import json
import logging
import queue
import re
import threading
import time
from dataclasses import dataclass
from http import HTTPStatus
from socketserver import ThreadingMixIn
from typing import Any, Callable, Dict, Iterator, List, Optional, Pattern, Sequence
from urllib.parse import parse_qs
from wsgiref.simple_server import WSGIServer, make_server

from trainingkit.auction import AuctionError, AuctionManager
from trainingkit.auction_models import Bid, Item, User
from trainingkit.broker import Broker
from trainingkit.category import CategoryNotFoundError, CategoryTree
from trainingkit.rate_limit import (
    RateLimiterRegistry,
    auth_middleware,
    logging_middleware,
    panic_recovery_middleware,
    rate_limit_middleware,
)
from trainingkit.seed import seed
from trainingkit.users import UserError, UserManager

_ID_RE = re.compile(r"\s*([+-]?\d+)")
_PARAMS = "trainingkit.path_params"
SEED_INTERVAL = 10


def _status_line(status: HTTPStatus) -> str:
    return f"{status.value} {status.phrase}"


def _plain(start_response, status: HTTPStatus, message: str) -> List[bytes]:
    body = (message + "\n").encode("utf-8")
    start_response(
        _status_line(status),
        [
            ("Content-Type", "text/plain; charset=utf-8"),
            ("X-Content-Type-Options", "nosniff"),
            ("Content-Length", str(len(body))),
        ],
    )
    return [body]


def _json(start_response, payload: Any, status: HTTPStatus = HTTPStatus.OK) -> List[bytes]:
    body = (json.dumps(payload) + "\n").encode("utf-8")
    start_response(
        _status_line(status),
        [("Content-Type", "application/json"), ("Content-Length", str(len(body)))],
    )
    return [body]


def _empty(start_response, status: HTTPStatus) -> List[bytes]:
    start_response(_status_line(status), [("Content-Length", "0")])
    return []


def _read_json(environ: Dict[str, Any]) -> Any:
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    raw = environ["wsgi.input"].read(length) if length > 0 else b""
    return json.loads(raw)


def _item_id(environ: Dict[str, Any]) -> Optional[int]:
    text = environ.get(_PARAMS, {}).get("id", "")
    match = _ID_RE.match(text)
    return int(match.group(1)) if match else None


class _EventStream:
    """Server-sent events carrying each new bid on one item."""

    def __init__(self, broker: Broker, item_id: int, watcher: "queue.Queue[Bid]") -> None:
        self._broker = broker
        self._item_id = item_id
        self._watcher = watcher
        self._closed = False

    def __iter__(self) -> Iterator[bytes]:
        while not self._closed:
            bid = self._watcher.get()
            yield f"data: {json.dumps(bid.to_dict())}\n\n".encode("utf-8")

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._broker.remove_watcher(self._item_id, self._watcher)


@dataclass
class _Route:
    method: str
    pattern: Pattern[str]
    app: Callable[..., Any]


class AuctionApp:
    """Routes requests to the auction manager behind auth, logging and recovery."""

    def __init__(
        self,
        users: UserManager,
        categories: CategoryTree,
        auctions: AuctionManager,
        broker: Broker,
        registry: Optional[RateLimiterRegistry] = None,
    ) -> None:
        self.users = users
        self.categories = categories
        self.auctions = auctions
        self.broker = broker
        self.registry = registry if registry is not None else RateLimiterRegistry()
        self._logger = logging.getLogger("trainingkit.auction")
        item = r"/items/(?P<id>[^/]+)"
        table = [
            ("POST", "/users", self._create_user, False),
            ("GET", "/items", self._items_by_category, False),
            ("POST", "/items", self._create_item, False),
            ("POST", item + "/bid", self._place_bid, True),
            ("DELETE", item + "/bid/last", self._retract_bid, False),
            ("GET", item, self._get_item, False),
            ("GET", item + "/bids", self._bids_by_item, False),
            ("POST", item + "/end", self._end_auction, False),
            ("GET", "/stats", self._stats, False),
            ("GET", item + "/live", self._live_bids, False),
        ]
        self._routes: List[_Route] = []
        for method, pattern, handler, limited in table:
            app = panic_recovery_middleware(handler)
            if limited:
                app = rate_limit_middleware(app, self.registry)
            app = auth_middleware(logging_middleware(app))
            self._routes.append(_Route(method, re.compile(pattern), app))

    def __call__(self, environ, start_response):
        method = environ.get("REQUEST_METHOD", "GET")
        path = environ.get("PATH_INFO", "") or "/"
        allowed: List[str] = []
        for route in self._routes:
            match = route.pattern.fullmatch(path)
            if match is None:
                continue
            if route.method == method:
                environ[_PARAMS] = match.groupdict()
                return route.app(environ, start_response)
            allowed.append(route.method)
        if allowed:
            body = b"Method Not Allowed\n"
            start_response(
                _status_line(HTTPStatus.METHOD_NOT_ALLOWED),
                [
                    ("Allow", ", ".join(sorted(set(allowed)))),
                    ("Content-Type", "text/plain; charset=utf-8"),
                    ("Content-Length", str(len(body))),
                ],
            )
            return [body]
        return _plain(start_response, HTTPStatus.NOT_FOUND, "404 page not found")

    def _create_user(self, environ, start_response):
        try:
            user = User.from_dict(_read_json(environ))
        except (ValueError, TypeError, AttributeError) as exc:
            self._logger.info("Error decoding user: %s", exc)
            return _plain(start_response, HTTPStatus.BAD_REQUEST, str(exc))
        try:
            self.users.add_user(user)
        except UserError as exc:
            self._logger.info("Error adding user: %s", exc)
            return _plain(start_response, HTTPStatus.BAD_REQUEST, str(exc))
        return _empty(start_response, HTTPStatus.CREATED)

    def _create_item(self, environ, start_response):
        try:
            item = Item.from_dict(_read_json(environ))
        except (ValueError, TypeError, AttributeError) as exc:
            self._logger.info("Error decoding item: %s", exc)
            return _plain(start_response, HTTPStatus.BAD_REQUEST, str(exc))
        self.auctions.register_item(item)
        return _empty(start_response, HTTPStatus.CREATED)

    def _place_bid(self, environ, start_response):
        try:
            bid = Bid.from_dict(_read_json(environ))
        except (ValueError, TypeError, AttributeError) as exc:
            self._logger.info("Error decoding bid: %s", exc)
            return _plain(start_response, HTTPStatus.BAD_REQUEST, str(exc))
        try:
            self.auctions.place_bid(bid.item_id, bid.user_id, bid.amount)
        except (AuctionError, UserError) as exc:
            self._logger.info("Error placing bid: %s", exc)
            return _plain(start_response, HTTPStatus.BAD_REQUEST, str(exc))
        return _empty(start_response, HTTPStatus.CREATED)

    def _retract_bid(self, environ, start_response):
        try:
            bid = Bid.from_dict(_read_json(environ))
        except (ValueError, TypeError, AttributeError) as exc:
            self._logger.info("Error decoding bid: %s", exc)
            return _plain(start_response, HTTPStatus.BAD_REQUEST, str(exc))
        try:
            self.auctions.retract_bid(bid.item_id, bid.user_id)
        except (AuctionError, UserError) as exc:
            self._logger.info("Error retracting bid: %s", exc)
            return _plain(start_response, HTTPStatus.BAD_REQUEST, str(exc))
        return _empty(start_response, HTTPStatus.OK)

    def _invalid_id(self, environ, start_response):
        self._logger.info("Invalid item ID: %s", environ.get(_PARAMS, {}).get("id", ""))
        return _plain(start_response, HTTPStatus.BAD_REQUEST, "invalid item ID")

    def _get_item(self, environ, start_response):
        item_id = _item_id(environ)
        if item_id is None:
            return self._invalid_id(environ, start_response)
        try:
            item = self.auctions.get_item(item_id)
        except AuctionError as exc:
            self._logger.info("Error fetching item: %s", exc)
            return _plain(start_response, HTTPStatus.NOT_FOUND, str(exc))
        return _json(start_response, item.to_dict())

    def _items_by_category(self, environ, start_response):
        query = parse_qs(environ.get("QUERY_STRING", ""))
        category = query.get("category", [""])[0]
        if not category:
            self._logger.info("Invalid category")
            return _plain(start_response, HTTPStatus.BAD_REQUEST, "invalid category")
        try:
            items = self.auctions.browse_category([category])
        except CategoryNotFoundError as exc:
            self._logger.info("Error fetching items by category: %s", exc)
            return _plain(start_response, HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
        return _json(start_response, [item.to_dict() for item in items] or None)

    def _bids_by_item(self, environ, start_response):
        item_id = _item_id(environ)
        if item_id is None:
            return self._invalid_id(environ, start_response)
        try:
            bids = self.auctions.bids_for_item(item_id)
        except AuctionError as exc:
            self._logger.info("Error fetching bids: %s", exc)
            return _plain(start_response, HTTPStatus.NOT_FOUND, str(exc))
        return _json(start_response, [bid.to_dict() for bid in bids] or None)

    def _end_auction(self, environ, start_response):
        item_id = _item_id(environ)
        if item_id is None:
            return self._invalid_id(environ, start_response)
        try:
            winner = self.auctions.end_auction(item_id)
        except AuctionError as exc:
            self._logger.info("Error ending auction: %s", exc)
            return _plain(start_response, HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
        return _json(start_response, winner.to_dict() if winner is not None else None)

    def _stats(self, environ, start_response):
        return _json(start_response, self.auctions.stats().to_dict())

    def _live_bids(self, environ, start_response):
        item_id = _item_id(environ)
        if item_id is None:
            return self._invalid_id(environ, start_response)
        watcher = self.broker.add_watcher(item_id)
        start_response(
            _status_line(HTTPStatus.OK),
            [("Content-Type", "text/event-stream"), ("Cache-Control", "no-cache")],
        )
        return _EventStream(self.broker, item_id, watcher)


def build_app() -> AuctionApp:
    """Wire users, categories, the auction manager and the live-bid broker together."""
    logger = logging.getLogger("trainingkit.auction")
    users = UserManager()
    categories = CategoryTree()
    broker = Broker(logger)
    auctions = AuctionManager(users, categories, broker.broadcast)
    return AuctionApp(users, categories, auctions, broker, RateLimiterRegistry())


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


def _seed_forever(app: AuctionApp) -> None:
    while True:
        time.sleep(SEED_INTERVAL)
        seed(app.users, app.categories, app.auctions)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Serve the auction API, re-running the bidding simulation every ten seconds."""
    parser = argparse.ArgumentParser(prog="auction-server", description=__doc__)
    parser.add_argument("--host", default="", help="interface to listen on")
    parser.add_argument("--port", type=int, default=8080, help="port to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="Auction: %(asctime)s %(message)s")
    app = build_app()
    threading.Thread(target=_seed_forever, args=(app,), daemon=True).start()

    with make_server(args.host, args.port, app, server_class=_ThreadingWSGIServer) as server:
        print(f"Server started on :{args.port}", flush=True)
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass


if __name__ == "__main__":
    main()