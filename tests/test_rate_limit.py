from __future__ import annotations

import pytest
from fastapi import HTTPException, Request

from toolkit_dev.config import RateLimitConfig
from toolkit_dev.rate_limit import RateLimitDependency, RateLimiter, client_id_from_headers


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_eleventh_request_in_window_is_rejected() -> None:
    limiter = RateLimiter(clock=FakeClock())
    results = [limiter.check("rate_limit:1.2.3.4") for _ in range(11)]

    assert all(r.allowed for r in results[:10])
    assert [r.remaining for r in results[:3]] == [9, 8, 7]
    assert results[9].remaining == 0
    assert results[10].allowed is False
    assert results[10].remaining == 0


def test_window_resets_after_expiry() -> None:
    clock = FakeClock()
    limiter = RateLimiter(max_requests=2, window_seconds=60, clock=clock)
    first = limiter.check("c")
    limiter.check("c")
    assert limiter.check("c").allowed is False

    clock.now += 60
    assert limiter.check("c").allowed is False  # reset only once strictly past reset_time

    clock.now += 1
    again = limiter.check("c")
    assert again.allowed is True
    assert again.remaining == 1
    assert again.reset_time > first.reset_time


def test_clients_are_counted_separately() -> None:
    limiter = RateLimiter(max_requests=1, clock=FakeClock())
    assert limiter.check("a").allowed
    assert limiter.check("b").allowed
    assert not limiter.check("a").allowed


def test_cleanup_drops_expired_windows() -> None:
    clock = FakeClock()
    limiter = RateLimiter.from_config(RateLimitConfig(max_requests=5, window_seconds=10), clock=clock)
    limiter.check("a")
    clock.now += 5
    limiter.check("b")
    clock.now += 6

    assert limiter.cleanup() == 1
    assert limiter.check("b").remaining == 3


def test_client_id_header_precedence() -> None:
    assert client_id_from_headers({"cf-connecting-ip": "1.1.1.1", "x-real-ip": "2.2.2.2"}) == "rate_limit:1.1.1.1"
    assert client_id_from_headers({"x-real-ip": "2.2.2.2", "x-forwarded-for": "3.3.3.3"}) == "rate_limit:2.2.2.2"
    assert client_id_from_headers({"x-forwarded-for": "3.3.3.3, 10.0.0.1"}) == "rate_limit:3.3.3.3"
    assert client_id_from_headers({}) == "rate_limit:unknown"


def test_socket_peer_is_used_without_proxy_headers() -> None:
    assert client_id_from_headers({}, peer="5.6.7.8") == "rate_limit:5.6.7.8"
    assert client_id_from_headers({"x-real-ip": "2.2.2.2"}, peer="5.6.7.8") == "rate_limit:2.2.2.2"


def test_dependency_buckets_direct_callers_by_peer() -> None:
    limiter = RateLimiter(max_requests=1)
    dependency = RateLimitDependency(lambda: limiter)

    def request(host: str) -> Request:
        return Request({"type": "http", "method": "POST", "path": "/", "headers": [], "client": (host, 4000)})

    assert dependency(request("10.0.0.1")).allowed is True
    assert dependency(request("10.0.0.2")).allowed is True
    with pytest.raises(HTTPException) as excinfo:
        dependency(request("10.0.0.1"))
    assert excinfo.value.status_code == 429
