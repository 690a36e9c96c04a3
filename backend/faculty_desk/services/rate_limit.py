from __future__ import annotations

from collections import defaultdict, deque
from threading import Lock
import time

from fastapi import Request

from faculty_desk.core.exceptions import AppError


class RateLimitExceededError(AppError):
    kind = "rate_limited"

    def __init__(self, scope: str, retry_after: int) -> None:
        super().__init__(
            f"Too many requests for {scope}. Try again in {retry_after} second(s).",
            status_code=429,
            details={"retry_after": retry_after},
        )
        self.retry_after = retry_after


class SlidingWindowLimiter:
    """Per-key request timestamps kept for ``window_seconds``. Process-local."""

    def __init__(self) -> None:
        self._hits: dict[str, deque[float]] = defaultdict(deque)
        self._lock = Lock()

    def hit(self, key: str, *, limit: int, window_seconds: int) -> int | None:
        """Record a request. Returns seconds to wait when ``limit`` is already reached."""
        now = time.monotonic()
        with self._lock:
            hits = self._hits[key]
            while hits and hits[0] <= now - window_seconds:
                hits.popleft()
            if len(hits) >= limit:
                return max(1, int(hits[0] + window_seconds - now))
            hits.append(now)
        return None

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


_limiter = SlidingWindowLimiter()


def client_address(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def enforce_rate_limit(
    *,
    request: Request,
    scope: str,
    limit: int,
    window_seconds: int,
    identity: str | None = None,
) -> None:
    key = f"{scope}|{client_address(request)}|{(identity or '').strip().lower()}"
    retry_after = _limiter.hit(key, limit=limit, window_seconds=window_seconds)
    if retry_after is not None:
        raise RateLimitExceededError(scope, retry_after)


def clear_rate_limiter() -> None:
    _limiter.reset()
