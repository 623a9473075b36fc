"""
In-process fixed-window rate limiter for anonymous endpoints.

Counters live in memory, so limits apply per worker process.
"""
from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from fastapi import HTTPException, status
from starlette.requests import Request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    retry_after_seconds: int


class RateLimiter:
    """Fixed-window counter keyed by arbitrary strings.

    Expired windows are swept at most once per ``cleanup_interval`` seconds so
    one-off keys (one per anonymous e-mail address) do not accumulate.
    """

    def __init__(self, clock=time.monotonic, cleanup_interval: float = 300.0):
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: Dict[str, Tuple[int, float]] = {}
        self._cleanup_interval = cleanup_interval
        self._last_cleanup = clock()

    def _sweep_expired(self, now: float) -> None:
        # caller holds the lock
        if now - self._last_cleanup < self._cleanup_interval:
            return
        self._last_cleanup = now
        expired = [key for key, (_count, reset_at) in self._windows.items() if reset_at <= now]
        for key in expired:
            del self._windows[key]
        if expired:
            logger.debug("rate_limit_sweep removed=%d", len(expired))

    def check(self, key: str, *, limit: int, window_seconds: float) -> RateLimitResult:
        now = self._clock()
        with self._lock:
            self._sweep_expired(now)
            count, reset_at = self._windows.get(key, (0, 0.0))
            if reset_at <= now:
                self._windows[key] = (1, now + window_seconds)
                return RateLimitResult(True, limit - 1, math.ceil(window_seconds))
            retry_after = max(1, math.ceil(reset_at - now))
            if count >= limit:
                return RateLimitResult(False, 0, retry_after)
            self._windows[key] = (count + 1, reset_at)
            return RateLimitResult(True, max(0, limit - count - 1), retry_after)

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


_limiter = RateLimiter()


def get_rate_limiter() -> RateLimiter:
    return _limiter


def client_ip(request: Request) -> str:
    """Return the caller's IP, trusting the first X-Forwarded-For hop."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip
    return request.client.host if request.client else "unknown"


def enforce_rate_limit(key: str, *, limit: int, window_seconds: float, limiter: Optional[RateLimiter] = None) -> None:
    """Raise 429 with a Retry-After header once ``key`` exceeds ``limit``."""
    result = (limiter or _limiter).check(key, limit=limit, window_seconds=window_seconds)
    if not result.allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests. Please try again later.",
            headers={"Retry-After": str(result.retry_after_seconds)},
        )
