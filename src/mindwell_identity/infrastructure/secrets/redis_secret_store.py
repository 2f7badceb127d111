"""Redis implementation of the SecretStore."""

import logging
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar

import redis.asyncio as redis
from redis.exceptions import RedisError

from mindwell_identity.repositories import SecretStore, SecretStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _translate_errors(
    func: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await func(*args, **kwargs)
        except RedisError as e:
            msg = f"Secret store {func.__name__} failed: {e}"
            raise SecretStoreError(msg) from e

    return wrapper


class RedisSecretStore(SecretStore):
    """Secret store backed by Redis key expiry.

    The client is thread safe and connections are taken from its pool at
    the time a command is executed; this class only adds key semantics and
    error translation.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._redis = client

    @classmethod
    def from_url(cls, url: str) -> "RedisSecretStore":
        logger.debug("New Redis connection pool for %s", url)
        return cls(redis.Redis.from_url(url, decode_responses=True))

    @_translate_errors
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._redis.set(key, value, ex=ttl_seconds)

    @_translate_errors
    async def replace(self, key: str, value: str) -> bool:
        result = await self._redis.set(key, value, xx=True, keepttl=True)
        return bool(result)

    @_translate_errors
    async def get(self, key: str) -> str | None:
        value = await self._redis.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    @_translate_errors
    async def delete(self, *keys: str) -> None:
        if keys:
            await self._redis.delete(*keys)

    @_translate_errors
    async def increment(self, key: str, ttl_seconds: int) -> int:
        # SET NX EX creates the window once; INCR keeps the existing TTL
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.set(key, 0, ex=ttl_seconds, nx=True)
            pipe.incr(key)
            _, count = await pipe.execute()
        return int(count)

    @_translate_errors
    async def ping(self) -> None:
        await self._redis.ping()

    async def close(self) -> None:
        await self._redis.aclose()
        logger.info("Redis connections closed")
