from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from fastapi import HTTPException, Request

from toolkit_dev.config import RateLimitConfig, load_config

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_time: float  # epoch seconds at which the window resets


@dataclass
class _Window:
    count: int
    reset_time: float


def client_id_from_headers(headers: Mapping[str, str], peer: Optional[str] = None) -> str:
    """
    Identify the caller by IP as reported by the proxy in front of us.
    cf-connecting-ip wins over x-real-ip, which wins over the first
    x-forwarded-for entry. Without proxy headers the socket peer is used.
    """
    forwarded = headers.get("x-forwarded-for")
    ip = (
        headers.get("cf-connecting-ip")
        or headers.get("x-real-ip")
        or (forwarded.split(",")[0].strip() if forwarded else "")
        or peer
        or "unknown"
    )
    return f"rate_limit:{ip}"


class RateLimiter:
    """
    Fixed-window request counter per client, held in process memory.

    A window starts with the client's first request and lasts window_seconds.
    Rejected requests do not count against the window.
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 15 * 60,
        clock: Clock = time.time,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._store: Dict[str, _Window] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: RateLimitConfig, clock: Clock = time.time) -> "RateLimiter":
        return cls(config.max_requests, config.window_seconds, clock)

    def now(self) -> float:
        return self._clock()

    def check(self, client_id: str) -> RateLimitResult:
        now = self.now()
        with self._lock:
            entry = self._store.get(client_id)
            if entry is None or now > entry.reset_time:
                entry = _Window(count=0, reset_time=now + self.window_seconds)
                self._store[client_id] = entry

            allowed = entry.count < self.max_requests
            if allowed:
                entry.count += 1

            return RateLimitResult(
                allowed=allowed,
                remaining=max(0, self.max_requests - entry.count),
                reset_time=entry.reset_time,
            )

    def cleanup(self) -> int:
        """Drop expired windows. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, v in self._store.items() if v.reset_time < now]
            for key in expired:
                del self._store[key]
        return len(expired)


class RateLimitDependency:
    """
    FastAPI dependency that rejects over-limit callers with 429.

    The limiter is looked up lazily so an app can swap it (tests do).
    """

    def __init__(self, get_limiter: Callable[[], RateLimiter]) -> None:
        self._get_limiter = get_limiter

    def __call__(self, request: Request) -> RateLimitResult:
        limiter = self._get_limiter()
        peer = request.client.host if request.client else None
        client_id = client_id_from_headers(request.headers, peer)
        result = limiter.check(client_id)
        if not result.allowed:
            retry_after = max(0, int(result.reset_time - limiter.now()))
            logger.warning("Rate limit exceeded for %s", client_id)
            raise HTTPException(
                status_code=429,
                detail="Too many requests",
                headers={
                    "Retry-After": str(retry_after),
                    "X-RateLimit-Remaining": "0",
                },
            )
        return result


_default_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    global _default_limiter
    if _default_limiter is None:
        _default_limiter = RateLimiter.from_config(load_config().rate_limit)
    return _default_limiter


def set_rate_limiter(limiter: Optional[RateLimiter]) -> None:
    global _default_limiter
    _default_limiter = limiter


rate_limit = RateLimitDependency(get_rate_limiter)
