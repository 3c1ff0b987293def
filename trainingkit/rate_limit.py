"""Per-user token-bucket rate limiting and the WSGI middlewares of the auction server."""

from __future__ import annotations

import logging
import sys
import threading
import time
from http import HTTPStatus
from typing import Any, Callable, Dict, Iterable, Optional

_log = logging.getLogger(__name__)

DEFAULT_CAPACITY = 5
DEFAULT_RATE = 5

WSGIApp = Callable[[Dict[str, Any], Callable[..., Any]], Iterable[bytes]]


class RateLimiter:
    """Token bucket holding ``capacity`` tokens, refilled at ``rate`` per second."""

    def __init__(self, capacity: int, rate: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        if rate <= 0:
            raise ValueError("rate must be positive")
        self.capacity = capacity
        self.rate = rate
        self._tokens = float(capacity)
        self._updated = time.monotonic()
        self._lock = threading.Lock()

    def allow(self) -> bool:
        """Take a token if one is available."""
        with self._lock:
            now = time.monotonic()
            elapsed = now - self._updated
            self._updated = now
            self._tokens = min(float(self.capacity), self._tokens + elapsed * self.rate)
            if self._tokens >= 1:
                self._tokens -= 1
                return True
            return False


class RateLimiterRegistry:
    """One limiter per user id, created on first use."""

    def __init__(self) -> None:
        self._limiters: Dict[str, RateLimiter] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> RateLimiter:
        with self._lock:
            limiter = self._limiters.get(user_id)
            if limiter is None:
                limiter = RateLimiter(DEFAULT_CAPACITY, DEFAULT_RATE)
                self._limiters[user_id] = limiter
            return limiter

    def clear(self) -> None:
        with self._lock:
            self._limiters.clear()


def _status_line(status: HTTPStatus) -> str:
    return f"{status.value} {status.phrase}"


def _plain_error(start_response, status: HTTPStatus, message: str, exc_info=None):
    body = (message + "\n").encode("utf-8")
    headers = [
        ("Content-Type", "text/plain; charset=utf-8"),
        ("X-Content-Type-Options", "nosniff"),
        ("Content-Length", str(len(body))),
    ]
    if exc_info is None:
        start_response(_status_line(status), headers)
    else:
        start_response(_status_line(status), headers, exc_info)
    return [body]


class _ClosingResult:
    """Response iterable that runs a callback once the server closes it."""

    def __init__(self, result: Iterable[bytes], on_close: Callable[[], None]) -> None:
        self._result = result
        self._on_close = on_close

    def __iter__(self):
        return iter(self._result)

    def close(self) -> None:
        try:
            close = getattr(self._result, "close", None)
            if close is not None:
                close()
        finally:
            self._on_close()


def _user_id(environ: Dict[str, Any]) -> str:
    return environ.get("HTTP_X_USER_ID", "")


def auth_middleware(app: WSGIApp) -> WSGIApp:
    """Reject requests without an ``X-User-ID`` header."""

    def wrapped(environ, start_response):
        if not _user_id(environ):
            return _plain_error(start_response, HTTPStatus.UNAUTHORIZED, "Unauthorized")
        return app(environ, start_response)

    return wrapped


def logging_middleware(app: WSGIApp) -> WSGIApp:
    """Log method, path and duration once the response has been sent."""

    def wrapped(environ, start_response):
        started = time.perf_counter()
        method = environ.get("REQUEST_METHOD", "")
        path = environ.get("PATH_INFO", "")

        def report() -> None:
            _log.info("%s %s %.6fs", method, path, time.perf_counter() - started)

        return _ClosingResult(app(environ, start_response), report)

    return wrapped


def rate_limit_middleware(app: WSGIApp, registry: RateLimiterRegistry) -> WSGIApp:
    """Answer 429 once the requesting user has used up their tokens."""

    def wrapped(environ, start_response):
        if not registry.get(_user_id(environ)).allow():
            return _plain_error(start_response, HTTPStatus.TOO_MANY_REQUESTS, "Too many requests")
        return app(environ, start_response)

    return wrapped


def panic_recovery_middleware(app: WSGIApp) -> WSGIApp:
    """Turn an unexpected exception into a 500 response."""

    def wrapped(environ, start_response):
        try:
            return app(environ, start_response)
        except Exception as exc:
            _log.error("Panic: %s", exc)
            return _plain_error(
                start_response,
                HTTPStatus.INTERNAL_SERVER_ERROR,
                "Internal Server Error",
                sys.exc_info(),
            )

    return wrapped


def _ok_app(environ, start_response):
    start_response(_status_line(HTTPStatus.OK), [])
    return []


__all__: Optional[list] = None
del __all__