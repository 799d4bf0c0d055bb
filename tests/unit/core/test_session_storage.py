"""Tests for the in-memory and Redis session storage backends."""

import time
from unittest.mock import AsyncMock

import pytest
from pydantic import BaseModel

from src.farmconnect.core.storage.session_storage import (
    InMemorySessionStorage,
    RedisSessionStorage,
    create_session_storage,
)
from src.farmconnect.runtime.config.config_data import ConfigData, RedisConfig


class Basket(BaseModel):
    owner: str
    items: list[str] = []


class TestInMemorySessionStorage:
    @pytest.mark.asyncio
    async def test_set_get_delete(self):
        storage = InMemorySessionStorage()
        await storage.set("cart:abc", Basket(owner="abc", items=["rice"]), 60)

        assert await storage.exists("cart:abc")
        assert await storage.get("cart:abc", Basket) == Basket(owner="abc", items=["rice"])

        await storage.delete("cart:abc")
        assert await storage.get("cart:abc", Basket) is None
        # Deleting again is fine
        await storage.delete("cart:abc")

    @pytest.mark.asyncio
    async def test_expired_entries_are_invisible(self, monkeypatch):
        storage = InMemorySessionStorage()
        await storage.set("user:1", Basket(owner="1"), 10)

        later = time.time() + 11
        monkeypatch.setattr(time, "time", lambda: later)

        assert await storage.get("user:1", Basket) is None
        assert not await storage.exists("user:1")

    @pytest.mark.asyncio
    async def test_cleanup_expired(self):
        storage = InMemorySessionStorage()
        await storage.set("user:old", Basket(owner="old"), -1)
        await storage.set("user:new", Basket(owner="new"), 60)

        assert await storage.cleanup_expired() == 1
        assert await storage.list_keys("user:*") == ["user:new"]

    @pytest.mark.asyncio
    async def test_list_keys_by_pattern(self):
        storage = InMemorySessionStorage()
        await storage.set("user:1", Basket(owner="1"), 60)
        await storage.set("cart:1", Basket(owner="1"), 60)

        assert await storage.list_keys("cart:*") == ["cart:1"]

    @pytest.mark.asyncio
    async def test_unreadable_entry_is_discarded(self):
        class Other(BaseModel):
            required: int

        storage = InMemorySessionStorage()
        await storage.set("cart:1", Basket(owner="1"), 60)

        assert await storage.get("cart:1", Other) is None
        assert not await storage.exists("cart:1")


class TestRedisSessionStorage:
    @pytest.mark.asyncio
    async def test_set_uses_setex(self):
        redis = AsyncMock()
        storage = RedisSessionStorage(redis)

        await storage.set("cart:1", Basket(owner="1"), 30)

        redis.setex.assert_awaited_once_with("cart:1", 30, Basket(owner="1").model_dump_json())

    @pytest.mark.asyncio
    async def test_get_decodes_bytes(self):
        redis = AsyncMock()
        redis.get.return_value = Basket(owner="1").model_dump_json().encode()
        storage = RedisSessionStorage(redis)

        assert await storage.get("cart:1", Basket) == Basket(owner="1")

    @pytest.mark.asyncio
    async def test_errors_are_wrapped(self):
        redis = AsyncMock()
        redis.get.side_effect = ConnectionError("down")
        storage = RedisSessionStorage(redis)

        with pytest.raises(RuntimeError, match="Redis get failed"):
            await storage.get("cart:1", Basket)

    @pytest.mark.asyncio
    async def test_list_keys_follows_scan_cursor(self):
        redis = AsyncMock()
        redis.scan.side_effect = [(5, ["user:1"]), (0, ["user:2"])]
        storage = RedisSessionStorage(redis)

        assert await storage.list_keys("user:*") == ["user:1", "user:2"]

    @pytest.mark.asyncio
    async def test_ping_failure_is_reported(self):
        redis = AsyncMock()
        redis.ping.side_effect = ConnectionError("down")
        assert await RedisSessionStorage(redis).ping() is False


class TestCreateSessionStorage:
    @pytest.mark.asyncio
    async def test_in_memory_without_redis(self):
        storage = await create_session_storage(ConfigData(redis=RedisConfig(enabled=False)))
        assert isinstance(storage, InMemorySessionStorage)
