"""Unit tests for RedisSecretStore (mocked client) plus a live round trip."""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from mindwell_identity.infrastructure.secrets import RedisSecretStore
from mindwell_identity.repositories import SecretStoreError


class TestRedisSecretStore:
    def setup_method(self):
        self.client = MagicMock()
        self.client.set = AsyncMock(return_value=True)
        self.client.get = AsyncMock(return_value=None)
        self.client.delete = AsyncMock(return_value=1)
        self.client.ping = AsyncMock(return_value=True)
        self.client.aclose = AsyncMock()
        self.store = RedisSecretStore(self.client)

    @pytest.mark.asyncio
    async def test_set_uses_expiry(self):
        await self.store.set("session:u1", "{}", ttl_seconds=604800)

        self.client.set.assert_awaited_once_with("session:u1", "{}", ex=604800)

    @pytest.mark.asyncio
    async def test_get_decodes_bytes(self):
        self.client.get.return_value = b"123456"

        assert await self.store.get("verification:email_verification:u1") == "123456"

    @pytest.mark.asyncio
    async def test_delete_without_keys_skips_call(self):
        await self.store.delete()

        self.client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_replace_keeps_ttl_and_requires_existing_key(self):
        self.client.set.return_value = None

        assert await self.store.replace("session:u1", "{}") is False
        self.client.set.assert_awaited_once_with(
            "session:u1", "{}", xx=True, keepttl=True
        )

    @pytest.mark.asyncio
    async def test_increment_runs_in_transaction(self):
        pipe = MagicMock()
        pipe.execute = AsyncMock(return_value=[True, 3])
        pipeline_cm = MagicMock()
        pipeline_cm.__aenter__ = AsyncMock(return_value=pipe)
        pipeline_cm.__aexit__ = AsyncMock(return_value=False)
        self.client.pipeline = MagicMock(return_value=pipeline_cm)

        count = await self.store.increment("ratelimit:password_reset:u1", 86400)

        assert count == 3
        self.client.pipeline.assert_called_once_with(transaction=True)
        pipe.set.assert_called_once_with(
            "ratelimit:password_reset:u1", 0, ex=86400, nx=True
        )
        pipe.incr.assert_called_once_with("ratelimit:password_reset:u1")

    @pytest.mark.asyncio
    async def test_redis_errors_become_secret_store_errors(self):
        self.client.get.side_effect = RedisConnectionError("connection refused")

        with pytest.raises(SecretStoreError, match="get failed"):
            await self.store.get("session:u1")

    @pytest.mark.asyncio
    async def test_close_closes_client(self):
        await self.store.close()

        self.client.aclose.assert_awaited_once()


@pytest.mark.redis
class TestRedisSecretStoreLive:
    """Round trip against a real server (RUN_REDIS=1)."""

    @pytest.mark.asyncio
    async def test_round_trip(self):
        store = RedisSecretStore.from_url(
            os.environ.get("REDIS_URL", "redis://localhost:6379/15"),
        )
        try:
            await store.set("test:key", "value", ttl_seconds=30)
            assert await store.get("test:key") == "value"
            assert await store.replace("test:key", "other") is True
            assert await store.increment("test:counter", ttl_seconds=30) == 1
            assert await store.increment("test:counter", ttl_seconds=30) == 2
        finally:
            await store.delete("test:key", "test:counter")
            await store.close()
