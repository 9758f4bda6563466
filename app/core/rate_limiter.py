"""
In-memory request throttling for the auth endpoints.

Sliding window per (limit type, client IP). State lives in this process only;
several instances behind a load balancer each keep their own window.
"""

import time
import logging
from dataclasses import dataclass
from threading import Lock
from typing import Dict, List, Optional, Sequence, Tuple

from fastapi import HTTPException, Request, status

from app.core.config import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitConfig:
    """Configuration for rate limiting."""
    max_requests: int  # Maximum requests allowed
    window_seconds: int  # Time window in seconds


DEFAULT_LIMITS: Dict[str, RateLimitConfig] = {
    "auth_register": RateLimitConfig(max_requests=5, window_seconds=60),
    "auth_login": RateLimitConfig(max_requests=5, window_seconds=60),
    "auth_refresh": RateLimitConfig(max_requests=10, window_seconds=60),
}


class RateLimiter:
    """
    Thread-safe sliding-window limiter.

    A key is dropped as soon as its window holds no requests, and every key is
    swept once per longest window, so idle clients do not accumulate.
    """

    def __init__(self, configs: Optional[Dict[str, RateLimitConfig]] = None):
        self._requests: Dict[str, List[float]] = {}
        self._lock = Lock()
        self.configs = dict(configs or DEFAULT_LIMITS)
        self._sweep_interval = max(c.window_seconds for c in self.configs.values())
        self._last_sweep = 0.0

    def _cleanup_old_requests(self, key: str, window_seconds: int, now: float) -> None:
        """Remove timestamps outside the current window, and the key once empty."""
        cutoff = now - window_seconds
        recent = [ts for ts in self._requests.get(key, []) if ts > cutoff]
        if recent:
            self._requests[key] = recent
        else:
            self._requests.pop(key, None)

    def _evict_expired(self, now: float) -> None:
        for key in list(self._requests):
            limit_type = key.split(":", 1)[0]
            self._cleanup_old_requests(key, self.configs[limit_type].window_seconds, now)
        self._last_sweep = now

    def is_allowed(self, limit_type: str, identifier: str) -> Tuple[bool, int]:
        """
        Record a request and report whether it fits in the window.

        Returns:
            Tuple of (is_allowed, retry_after_seconds)
        """
        config = self.configs.get(limit_type)
        if config is None:
            raise KeyError(f"Unknown rate limit type: {limit_type}")

        key = f"{limit_type}:{identifier}"

        with self._lock:
            now = time.time()
            if now - self._last_sweep >= self._sweep_interval:
                self._evict_expired(now)
            self._cleanup_old_requests(key, config.window_seconds, now)

            timestamps = self._requests.get(key, [])
            if len(timestamps) >= config.max_requests:
                retry_after = int(min(timestamps) + config.window_seconds - now) + 1
                return False, max(retry_after, 1)

            self._requests.setdefault(key, []).append(now)
            return True, 0

    def clear(self) -> None:
        """Forget every recorded request."""
        with self._lock:
            self._requests.clear()
            self._last_sweep = 0.0


# Global rate limiter instance
rate_limiter = RateLimiter()


def get_client_ip(request: Request, trusted_proxies: Sequence[str] = ()) -> str:
    """
    Extract the client IP from a request.

    ``X-Forwarded-For`` and ``X-Real-IP`` are read only when the direct peer
    is listed in ``trusted_proxies``; otherwise the peer address is used.
    """
    peer = request.client.host if request.client else "unknown"
    if peer not in trusted_proxies:
        return peer

    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # First entry is the originating client
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return peer


def rate_limit(limit_type: str):
    """Build a route dependency that throttles by client IP."""

    async def dependency(request: Request) -> None:
        settings = get_settings()
        if not settings.rate_limit_enabled:
            return
        client_ip = get_client_ip(request, settings.trusted_proxies_list)
        allowed, retry_after = rate_limiter.is_allowed(limit_type, client_ip)
        if not allowed:
            logger.warning(f"Rate limit exceeded for {limit_type}: {client_ip}")
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=f"Too many requests. Please try again in {retry_after} seconds.",
                headers={"Retry-After": str(retry_after)},
            )

    return dependency
