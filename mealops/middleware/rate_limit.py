"""Rate limiting middleware — in-memory with sliding window.

Protects the credential endpoints against brute force and the rest of the API
against runaway clients. State is per-process; a multi-instance deployment
needs a shared backend instead of ``_store``.
"""
from __future__ import annotations

import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from config.settings import settings

logger = logging.getLogger(__name__)


@dataclass
class _RateWindow:
    """Sliding window counter for a single client."""
    timestamps: list[float] = field(default_factory=list)

    def count_in_window(self, window_seconds: float) -> int:
        cutoff = time.monotonic() - window_seconds
        self.timestamps = [t for t in self.timestamps if t > cutoff]
        return len(self.timestamps)

    def record(self) -> None:
        self.timestamps.append(time.monotonic())


class RateLimitStore:
    """In-memory rate limit storage with periodic cleanup."""

    def __init__(self):
        self._windows: dict[str, _RateWindow] = defaultdict(_RateWindow)
        self._last_cleanup = time.monotonic()
        self._cleanup_interval = 300  # 5 minutes

    def check_and_record(self, key: str, limit: int, window_seconds: float) -> tuple[bool, int]:
        """Check if request is allowed, record it if so.

        Returns (allowed, current_count).
        """
        self._maybe_cleanup()
        window = self._windows[key]
        count = window.count_in_window(window_seconds)
        if count >= limit:
            return False, count
        window.record()
        return True, count + 1

    def reset(self) -> None:
        self._windows.clear()

    def _maybe_cleanup(self):
        now = time.monotonic()
        if now - self._last_cleanup < self._cleanup_interval:
            return
        self._last_cleanup = now
        stale = [k for k, w in self._windows.items() if not w.timestamps]
        for k in stale:
            del self._windows[k]


_store = RateLimitStore()


def reset_store():
    """Reset rate limit state — used in tests."""
    _store.reset()


# (path_prefix, requests, window_seconds); first match wins
_RATE_LIMITS: list[tuple[str, int, int]] = [
    ("/api/v1/auth/", settings.AUTH_RATE_LIMIT, 60),
    ("/api/", 120, 60),
]

_EXEMPT = {"/health", "/ready", "/docs", "/openapi.json"}


def _get_client_ip(request: Request) -> str:
    """Extract client IP; X-Forwarded-For counts only when sent by a trusted proxy.

    Hops are read right to left and the first address that is not one of our
    own proxies wins, so a client-forged prefix of the header is ignored.
    """
    peer = request.client.host if request.client else "unknown"
    forwarded = request.headers.get("x-forwarded-for")
    if not forwarded or peer not in settings.TRUSTED_PROXIES:
        return peer
    hops = [h.strip() for h in forwarded.split(",") if h.strip()]
    for hop in reversed(hops):
        if hop not in settings.TRUSTED_PROXIES:
            return hop
    return hops[0] if hops else peer


def _find_limit(path: str) -> tuple[int, int] | None:
    if path in _EXEMPT:
        return None
    for prefix, limit, window in _RATE_LIMITS:
        if path.startswith(prefix):
            return limit, window
    return None


class RateLimitMiddleware(BaseHTTPMiddleware):
    """IP-based rate limiting."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        rate = _find_limit(path)
        if rate is None:
            return await call_next(request)

        limit, window = rate
        client_ip = _get_client_ip(request)
        key = f"{client_ip}:auth" if path.startswith("/api/v1/auth/") else f"{client_ip}:api"

        allowed, count = _store.check_and_record(key, limit, window)
        if not allowed:
            logger.warning("Rate limited: %s on %s (%d/%d in %ds)", client_ip, path, count, limit, window)
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limited",
                    "message": "Too many requests. Please try again later.",
                    "retry_after": window,
                },
                headers={"Retry-After": str(window)},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(max(0, limit - count))
        return response
