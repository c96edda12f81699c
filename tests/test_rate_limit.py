"""Tests for rate limiting middleware."""
from __future__ import annotations

from starlette.requests import Request

from config.settings import settings
from mealops.middleware.rate_limit import RateLimitStore, _get_client_ip


def test_allows_within_limit():
    store = RateLimitStore()
    for i in range(5):
        allowed, count = store.check_and_record("test-key", 10, 60)
        assert allowed is True
        assert count == i + 1


def test_blocks_over_limit():
    store = RateLimitStore()
    for _ in range(10):
        store.check_and_record("block-key", 10, 60)
    allowed, count = store.check_and_record("block-key", 10, 60)
    assert allowed is False
    assert count == 10


def test_separate_keys():
    store = RateLimitStore()
    for _ in range(10):
        store.check_and_record("key-a", 10, 60)
    allowed, _ = store.check_and_record("key-b", 10, 60)
    assert allowed is True


def test_cleanup_removes_stale():
    store = RateLimitStore()
    store._windows["stale-key"]  # Create empty window
    store._cleanup_interval = 0  # Force cleanup on next check
    store.check_and_record("active-key", 10, 60)
    assert "stale-key" not in store._windows


# Integration tests via API client

async def test_rate_limit_headers(client):
    resp = await client.get("/api/v1/ingredients")
    assert resp.headers["x-ratelimit-limit"] == "120"
    assert "x-ratelimit-remaining" in resp.headers


async def test_health_not_rate_limited(client):
    for _ in range(5):
        resp = await client.get("/health")
        assert resp.status_code == 200
    assert "x-ratelimit-limit" not in resp.headers


async def test_login_brute_force_blocked(client):
    body = {"email": "nobody@example.com", "password": "guess"}
    for _ in range(settings.AUTH_RATE_LIMIT):
        resp = await client.post("/api/v1/auth/login", json=body)
        assert resp.status_code == 401
    resp = await client.post("/api/v1/auth/login", json=body)
    assert resp.status_code == 429
    assert resp.json()["error"] == "rate_limited"
    assert resp.headers["retry-after"] == "60"


async def test_auth_limit_does_not_block_api(client):
    body = {"email": "nobody@example.com", "password": "guess"}
    for _ in range(settings.AUTH_RATE_LIMIT + 1):
        await client.post("/api/v1/auth/login", json=body)
    resp = await client.get("/api/v1/ingredients")
    assert resp.status_code == 200


def _request(peer: str, forwarded: str | None = None) -> Request:
    headers = [(b"x-forwarded-for", forwarded.encode())] if forwarded else []
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers, "client": (peer, 4321)})


def test_forwarded_for_ignored_from_untrusted_peer(monkeypatch):
    monkeypatch.setattr(settings, "TRUSTED_PROXIES", [])
    assert _get_client_ip(_request("198.51.100.9", "1.2.3.4")) == "198.51.100.9"


def test_forwarded_for_from_trusted_proxy(monkeypatch):
    monkeypatch.setattr(settings, "TRUSTED_PROXIES", ["10.0.0.1", "10.0.0.2"])
    # Client-forged first hop is skipped; the address our proxy saw wins
    req = _request("10.0.0.1", "6.6.6.6, 203.0.113.7, 10.0.0.2")
    assert _get_client_ip(req) == "203.0.113.7"
    assert _get_client_ip(_request("10.0.0.1")) == "10.0.0.1"


async def test_rotating_forwarded_for_does_not_bypass_login_limit(client, monkeypatch):
    monkeypatch.setattr(settings, "TRUSTED_PROXIES", [])
    body = {"email": "nobody@example.com", "password": "guess"}
    for i in range(settings.AUTH_RATE_LIMIT):
        resp = await client.post("/api/v1/auth/login", json=body, headers={"X-Forwarded-For": f"10.9.0.{i}"})
        assert resp.status_code == 401
    resp = await client.post("/api/v1/auth/login", json=body, headers={"X-Forwarded-For": "10.9.1.1"})
    assert resp.status_code == 429
