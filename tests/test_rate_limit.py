import logging
import time

import pytest

from trainingkit.rate_limit import (
    RateLimiter,
    RateLimiterRegistry,
    auth_middleware,
    logging_middleware,
    panic_recovery_middleware,
    rate_limit_middleware,
)


def ok_handler(environ, start_response):
    start_response("200 OK", [("Content-Type", "text/plain")])
    return [b"ok"]


def call(app, user_id="test-user", path="/"):
    environ = {"REQUEST_METHOD": "GET", "PATH_INFO": path}
    if user_id is not None:
        environ["HTTP_X_USER_ID"] = user_id
    captured = {}

    def start_response(status, headers, exc_info=None):
        captured["status"] = status

    result = app(environ, start_response)
    try:
        body = b"".join(result)
    finally:
        close = getattr(result, "close", None)
        if close is not None:
            close()
    return int(captured["status"].split()[0]), body


def test_rate_limit_middleware():
    registry = RateLimiterRegistry()
    registry.clear()
    app = rate_limit_middleware(ok_handler, registry)

    statuses = [call(app)[0] for _ in range(5)]
    assert statuses == [200] * 5

    assert call(app)[0] == 429

    time.sleep(1)
    assert call(app)[0] == 200


def test_rate_limited_response_body():
    registry = RateLimiterRegistry()
    app = rate_limit_middleware(ok_handler, registry)
    for _ in range(5):
        call(app)
    assert call(app) == (429, b"Too many requests\n")


def test_users_have_separate_buckets():
    registry = RateLimiterRegistry()
    app = rate_limit_middleware(ok_handler, registry)
    for _ in range(6):
        call(app, user_id="alice")
    assert call(app, user_id="alice")[0] == 429
    assert call(app, user_id="bob")[0] == 200


def test_limiter_hands_out_capacity_then_refuses():
    limiter = RateLimiter(3, 1)
    assert [limiter.allow() for _ in range(4)] == [True, True, True, False]


def test_limiter_rejects_non_positive_rate():
    with pytest.raises(ValueError):
        RateLimiter(5, 0)


def test_registry_reuses_limiter_until_cleared():
    registry = RateLimiterRegistry()
    first = registry.get("u1")
    assert registry.get("u1") is first
    registry.clear()
    assert registry.get("u1") is not first
    assert registry.get("u1").capacity == 5


def test_auth_middleware_requires_user_header():
    app = auth_middleware(ok_handler)
    assert call(app, user_id=None) == (401, b"Unauthorized\n")
    assert call(app, user_id="7") == (200, b"ok")


def test_panic_recovery_turns_exception_into_500():
    def broken(environ, start_response):
        raise RuntimeError("boom")

    app = panic_recovery_middleware(broken)
    assert call(app) == (500, b"Internal Server Error\n")


def test_panic_recovery_passes_normal_responses_through():
    app = panic_recovery_middleware(ok_handler)
    assert call(app) == (200, b"ok")


def test_logging_middleware_logs_method_and_path(caplog):
    app = logging_middleware(ok_handler)
    with caplog.at_level(logging.INFO, logger="trainingkit.rate_limit"):
        status, body = call(app, path="/ping")
    assert (status, body) == (200, b"ok")
    assert "GET /ping" in caplog.text