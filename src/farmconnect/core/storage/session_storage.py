"""Session storage interface and implementations.

The same store keeps signed-in user sessions (``user:{id}``) and shopping
carts (``cart:{client_id}``). Redis is used when configured, otherwise an
in-process dictionary with TTL bookkeeping.
"""

from __future__ import annotations

import fnmatch
import json
import time
from abc import ABC, abstractmethod
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from src.farmconnect.runtime.config.config_data import ConfigData

T = TypeVar("T", bound=BaseModel)


class SessionStorage(ABC):
    """Abstract interface for key/value storage backends."""

    @abstractmethod
    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        """Store a value with TTL.

        Args:
            key: Storage key
            value: Data to store (Pydantic model)
            ttl_seconds: Time to live in seconds
        """

    @abstractmethod
    async def get(self, key: str, model_class: type[T]) -> T | None:
        """Retrieve a value.

        Args:
            key: Storage key
            model_class: Pydantic model class to deserialize to

        Returns:
            Stored data or None if not found/expired
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a value. Missing keys are ignored."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if a non-expired value is stored under ``key``."""

    @abstractmethod
    async def cleanup_expired(self) -> int:
        """Clean up expired entries.

        Returns:
            Number of entries removed
        """

    @abstractmethod
    async def list_keys(self, pattern: str) -> list[str]:
        """List keys matching a glob pattern (e.g. ``"cart:*"``)."""

    @abstractmethod
    async def ping(self) -> bool:
        """Check that the backend answers."""


class InMemorySessionStorage(SessionStorage):
    """In-memory storage with TTL support."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}

    def _live_entry(self, key: str) -> dict[str, Any] | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        if time.time() > entry["expires_at"]:
            del self._data[key]
            return None
        return entry

    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        self._data[key] = {
            "data": json.loads(value.model_dump_json()),
            "expires_at": time.time() + ttl_seconds,
        }

    async def get(self, key: str, model_class: type[T]) -> T | None:
        entry = self._live_entry(key)
        if entry is None:
            return None
        try:
            return model_class.model_validate(entry["data"])
        except ValidationError:
            logger.warning("Discarding unreadable entry {}", key)
            del self._data[key]
            return None

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def exists(self, key: str) -> bool:
        return self._live_entry(key) is not None

    async def cleanup_expired(self) -> int:
        now = time.time()
        expired_keys = [
            key for key, entry in self._data.items() if now > entry["expires_at"]
        ]
        for key in expired_keys:
            del self._data[key]
        return len(expired_keys)

    async def list_keys(self, pattern: str) -> list[str]:
        return [
            key
            for key in list(self._data)
            if fnmatch.fnmatch(key, pattern) and self._live_entry(key) is not None
        ]

    async def ping(self) -> bool:
        return True


class RedisSessionStorage(SessionStorage):
    """Redis-based storage with JSON serialization."""

    def __init__(self, redis_client) -> None:
        self._redis = redis_client

    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        try:
            await self._redis.setex(key, ttl_seconds, value.model_dump_json())
        except Exception as e:
            raise RuntimeError(f"Redis set failed: {e}") from e

    async def get(self, key: str, model_class: type[T]) -> T | None:
        try:
            data = await self._redis.get(key)
        except Exception as e:
            raise RuntimeError(f"Redis get failed: {e}") from e
        if data is None:
            return None
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        try:
            return model_class.model_validate_json(data)
        except ValidationError:
            logger.warning("Discarding unreadable entry {}", key)
            await self.delete(key)
            return None

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except Exception as e:
            raise RuntimeError(f"Redis delete failed: {e}") from e

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self._redis.exists(key))
        except Exception as e:
            raise RuntimeError(f"Redis exists failed: {e}") from e

    async def cleanup_expired(self) -> int:
        """Redis handles expiration automatically."""
        return 0

    async def list_keys(self, pattern: str) -> list[str]:
        try:
            keys = []
            cursor = 0
            while True:
                cursor, batch = await self._redis.scan(cursor, match=pattern, count=100)
                keys.extend(batch)
                if cursor == 0:
                    break
            return keys
        except Exception as e:
            raise RuntimeError(f"Redis scan failed: {e}") from e

    async def ping(self) -> bool:
        try:
            await self._redis.ping()
            return True
        except Exception as e:
            logger.warning("Redis ping failed: {}", e)
            return False


async def create_session_storage(config: ConfigData) -> SessionStorage:
    """Connect to Redis when it is enabled, otherwise use in-memory storage."""
    if not config.redis.enabled or not config.redis.url:
        logger.info("Session storage: in-memory")
        return InMemorySessionStorage()

    import redis.asyncio as redis

    client = redis.from_url(
        config.redis.connection_string,
        encoding="utf-8",
        decode_responses=config.redis.decode_responses,
        socket_connect_timeout=2,
        socket_timeout=2,
    )
    storage = RedisSessionStorage(client)
    if await storage.ping():
        logger.info("Session storage: Redis connected")
        return storage

    logger.warning("Redis unavailable, using in-memory session storage")
    return InMemorySessionStorage()
