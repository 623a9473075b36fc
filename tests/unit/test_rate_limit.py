import pytest
from fastapi import HTTPException
from starlette.requests import Request

from eventdesk.utils.rate_limit import RateLimiter, client_ip, enforce_rate_limit


class _Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def _request(headers=None, client=("10.0.0.9", 5050)):
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


def test_fixed_window_blocks_after_limit_and_resets():
    clock = _Clock()
    limiter = RateLimiter(clock=clock)

    first = limiter.check("k", limit=2, window_seconds=60)
    second = limiter.check("k", limit=2, window_seconds=60)
    third = limiter.check("k", limit=2, window_seconds=60)

    assert (first.allowed, first.remaining) == (True, 1)
    assert (second.allowed, second.remaining) == (True, 0)
    assert third.allowed is False
    assert third.retry_after_seconds == 60

    clock.now += 30
    assert limiter.check("k", limit=2, window_seconds=60).retry_after_seconds == 30

    clock.now += 31
    assert limiter.check("k", limit=2, window_seconds=60).allowed is True


def test_keys_are_independent():
    limiter = RateLimiter(clock=_Clock())
    assert limiter.check("a", limit=1, window_seconds=60).allowed is True
    assert limiter.check("a", limit=1, window_seconds=60).allowed is False
    assert limiter.check("b", limit=1, window_seconds=60).allowed is True


def test_reset_clears_windows():
    limiter = RateLimiter(clock=_Clock())
    limiter.check("a", limit=1, window_seconds=60)
    limiter.reset()
    assert limiter.check("a", limit=1, window_seconds=60).allowed is True


def test_enforce_rate_limit_raises_429_with_retry_after():
    limiter = RateLimiter(clock=_Clock())
    enforce_rate_limit("x", limit=1, window_seconds=900, limiter=limiter)
    with pytest.raises(HTTPException) as exc:
        enforce_rate_limit("x", limit=1, window_seconds=900, limiter=limiter)
    assert exc.value.status_code == 429
    assert exc.value.headers == {"Retry-After": "900"}


def test_client_ip_prefers_forwarded_for():
    req = _request({"X-Forwarded-For": "203.0.113.5, 10.0.0.1", "X-Real-IP": "198.51.100.2"})
    assert client_ip(req) == "203.0.113.5"


def test_client_ip_falls_back_to_real_ip_then_peer():
    assert client_ip(_request({"X-Real-IP": "198.51.100.2"})) == "198.51.100.2"
    assert client_ip(_request()) == "10.0.0.9"
    assert client_ip(_request(client=None)) == "unknown"


def test_expired_windows_are_swept():
    clock = _Clock()
    limiter = RateLimiter(clock=clock, cleanup_interval=300)
    for i in range(1000):
        limiter.check(f"public-register:email:guest{i}@example.com", limit=5, window_seconds=900)
    assert len(limiter) == 1000

    # live windows survive a sweep
    clock.now += 400
    limiter.check("fresh", limit=5, window_seconds=900)
    assert len(limiter) == 1001

    clock.now += 10_000
    limiter.check("late", limit=5, window_seconds=900)
    assert len(limiter) == 1
