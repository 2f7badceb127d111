"""In-process implementation of the SecretStore.

Suitable for local development and tests only: entries live in this
process and are not shared between workers.
"""

import logging
import time
from typing import Callable

from mindwell_identity.repositories import SecretStore

logger = logging.getLogger(__name__)


class InMemorySecretStore(SecretStore):
    """Dictionary-backed secret store with lazy expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = (value, self._clock() + ttl_seconds)

    async def replace(self, key: str, value: str) -> bool:
        if await self.get(key) is None:
            return False
        self._entries[key] = (value, self._entries[key][1])
        return True

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if self._clock() >= expires_at:
            # Expired - clean up
            del self._entries[key]
            return None
        return value

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self._entries.pop(key, None)

    async def increment(self, key: str, ttl_seconds: int) -> int:
        current = await self.get(key)
        if current is None:
            count = 1
            expires_at = self._clock() + ttl_seconds
        else:
            count = int(current) + 1
            expires_at = self._entries[key][1]
        self._entries[key] = (str(count), expires_at)
        return count

    async def ping(self) -> None:
        return None

    async def close(self) -> None:
        self._entries.clear()
        logger.debug("In-memory secret store cleared")
