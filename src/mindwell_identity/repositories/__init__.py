"""Repository interfaces for short-lived identity state."""

from mindwell_identity.repositories.secret_store import (
    SecretKeys,
    SecretStore,
    SecretStoreError,
)

__all__ = [
    "SecretKeys",
    "SecretStore",
    "SecretStoreError",
]
