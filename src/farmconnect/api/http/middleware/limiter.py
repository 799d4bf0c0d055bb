"""Rate limiting helpers used by the HTTP layer."""

from __future__ import annotations

import asyncio
import time
from collections import defaultdict, deque
from collections.abc import Awaitable, Callable
from functools import lru_cache
from typing import Any

from fastapi import HTTPException, Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from loguru import logger

from src.farmconnect.core.security import client_ip
from src.farmconnect.runtime.context import get_config

RateLimiterType = Callable[[Request, Response], Awaitable[Any]]

RateLimiterFactory = Callable[[int, int, bool, bool], RateLimiterType]

_rate_limiter_factory: RateLimiterFactory | None = None
_local_limiters: list[DefaultLocalRateLimiter] = []
_factory_counter: int = 0


class DefaultLocalRateLimiter:
    """Sliding-window limiter kept in process memory, used when Redis isn't available."""

    def __init__(
        self, times: int, milliseconds: int, per_endpoint: bool, per_method: bool
    ) -> None:
        self._hits: defaultdict[str, deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._times = times
        self._seconds = milliseconds / 1000
        self._per_endpoint = per_endpoint
        self._per_method = per_method
        self._last_cleanup = time.monotonic()
        self._cleanup_interval = 60.0

    @property
    def tracked_keys(self) -> int:
        return len(self._hits)

    async def __call__(self, request: Request, response: Response) -> None:
        await self._throttle(self.make_key(request))

    def make_key(self, request: Request) -> str:
        """Identify the caller by signed-in user id, falling back to client IP."""
        user_id = getattr(request.state, "user_id", None)
        parts = [f"user:{user_id}" if user_id else f"ip:{client_ip(request) or 'anonymous'}"]

        if self._per_method:
            parts.append(request.method)
        if self._per_endpoint:
            route = request.scope.get("route")
            template = getattr(route, "path", None)
            parts.append((template or request.url.path).rstrip("/"))
        return ":".join(parts)

    def _cleanup_old_keys(self, now: float) -> None:
        if now - self._last_cleanup < self._cleanup_interval:
            return
        self._last_cleanup = now

        stale = []
        for key, hits in self._hits.items():
            while hits and hits[0] <= now - self._seconds:
                hits.popleft()
            if not hits:
                stale.append(key)
        for key in stale:
            del self._hits[key]

    async def cleanup(self) -> None:
        async with self._lock:
            tracked = len(self._hits)
            self._hits.clear()
        logger.debug("Cleaned up local rate limiter with {} tracked keys", tracked)

    async def _throttle(self, key: str) -> None:
        now = time.monotonic()
        window_start = now - self._seconds
        async with self._lock:
            self._cleanup_old_keys(now)
            hits = self._hits[key]
            while hits and hits[0] <= window_start:
                hits.popleft()
            if len(hits) >= self._times:
                retry_after = max(0, int(self._seconds - (now - hits[0])))
                raise HTTPException(
                    status_code=429,
                    detail="Too Many Requests",
                    headers={"Retry-After": str(retry_after)},
                )
            hits.append(now)


def _local_rate_limiter_factory(
    times: int, milliseconds: int, per_endpoint: bool, per_method: bool
) -> RateLimiterType:
    limiter = DefaultLocalRateLimiter(times, milliseconds, per_endpoint, per_method)
    _local_limiters.append(limiter)
    return limiter


def _redis_rate_limiter_factory(
    times: int, milliseconds: int, per_endpoint: bool, per_method: bool
) -> RateLimiterType:
    # fastapi-limiter keys on route path and method on its own
    return RateLimiter(times=times, milliseconds=milliseconds)


def configure_rate_limiter(limiter_factory: RateLimiterFactory | None = None) -> None:
    """Choose the limiter implementation.

    Without a factory the Redis-backed limiter from fastapi-limiter is used;
    ``FastAPILimiter.init`` must have been awaited first.
    """
    global _rate_limiter_factory, _factory_counter

    _create_rate_limiter.cache_clear()
    _factory_counter += 1

    if limiter_factory is not None:
        _rate_limiter_factory = limiter_factory
        logger.info("Using local in-memory rate limiter")
    else:
        _rate_limiter_factory = _redis_rate_limiter_factory
        logger.info("Using Redis-backed rate limiter from fastapi-limiter package")


def use_local_rate_limiter() -> None:
    configure_rate_limiter(limiter_factory=_local_rate_limiter_factory)


@lru_cache(maxsize=100)
def _create_rate_limiter(
    requests: int,
    window_ms: int,
    per_endpoint: bool,
    per_method: bool,
    factory_id: int,
) -> RateLimiterType:
    if _rate_limiter_factory is None:
        raise RuntimeError("Rate limiter not configured")
    return _rate_limiter_factory(requests, window_ms, per_endpoint, per_method)


def get_rate_limiter(
    requests: int | None = None,
    window_ms: int | None = None,
) -> RateLimiterType:
    """Get the (cached) limiter for a quota, defaulting to the configured one."""
    config = get_config().rate_limiter
    if _rate_limiter_factory is None:
        logger.warning("Rate limiter used before startup; falling back to in-memory limiter")
        use_local_rate_limiter()

    return _create_rate_limiter(
        requests if requests is not None else config.requests,
        window_ms if window_ms is not None else config.window_ms,
        config.per_endpoint,
        config.per_method,
        _factory_counter,
    )


def rate_limit(
    requests: int | None = None,
    window_ms: int | None = None,
) -> RateLimiterType:
    """Return a dependency enforcing request quotas.

    Quotas left as None are read from ``rate_limiter`` config at request time.
    """

    async def dependency(request: Request, response: Response) -> Any:
        if not get_config().rate_limiter.enabled:
            return None
        limiter = get_rate_limiter(requests, window_ms)
        return await limiter(request, response)

    return dependency


async def close_rate_limiter() -> None:
    """Drop cached limiters and close the fastapi-limiter Redis connection."""
    global _rate_limiter_factory

    _create_rate_limiter.cache_clear()

    if _local_limiters:
        logger.info("Cleaning up {} local rate limiter instances", len(_local_limiters))
        for limiter in _local_limiters:
            await limiter.cleanup()
        _local_limiters.clear()

    if _rate_limiter_factory is _redis_rate_limiter_factory:
        try:
            await FastAPILimiter.close()
            logger.info("Closed FastAPILimiter Redis connections")
        except Exception as e:
            logger.warning("Error closing FastAPILimiter: {}", e)

    _rate_limiter_factory = None
    logger.info("Rate limiter cleanup completed")
