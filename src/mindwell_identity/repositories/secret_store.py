"""Abstract interface for the volatile keyed store with per-key expiry."""

from abc import ABC, abstractmethod


class SecretStoreError(Exception):
    """Raised when the secret store backend cannot be reached or fails."""


class SecretStore(ABC):
    """Keyed store with per-entry expiry.

    Holds sessions, verification codes, password reset tokens and
    rate-limit counters. Expired entries read as absent. Writes are plain
    overwrites: last writer wins.
    """

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value under a key, replacing any previous value.

        Parameters
        ----------
        key
            Namespaced key (see ``SecretKeys``)
        value
            The value to store
        ttl_seconds
            Seconds until the entry expires
        """

    @abstractmethod
    async def replace(self, key: str, value: str) -> bool:
        """Overwrite the value of a live key, keeping its remaining TTL.

        Returns False (and writes nothing) if the key is absent or expired.
        """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the live value for a key, or None if absent or expired."""

    @abstractmethod
    async def delete(self, *keys: str) -> None:
        """Delete keys. Deleting a missing key is not an error."""

    @abstractmethod
    async def increment(self, key: str, ttl_seconds: int) -> int:
        """Atomically increment a counter and return the new value.

        The TTL is applied when the counter is created and is not extended
        by later increments, giving a fixed rate-limit window.
        """

    @abstractmethod
    async def ping(self) -> None:
        """Verify connectivity (raises ``SecretStoreError`` on failure)."""

    @abstractmethod
    async def close(self) -> None:
        """Release backend connections."""


class SecretKeys:
    """Key namespace for everything kept in the secret store."""

    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"

    @staticmethod
    def session(user_id: str) -> str:
        return f"session:{user_id}"

    @staticmethod
    def verification(purpose: str, user_id: str) -> str:
        return f"verification:{purpose}:{user_id}"

    @staticmethod
    def password_reset(token_hash: str) -> str:
        return f"password_reset:{token_hash}"

    @staticmethod
    def rate_limit(purpose: str, user_id: str) -> str:
        return f"ratelimit:{purpose}:{user_id}"
