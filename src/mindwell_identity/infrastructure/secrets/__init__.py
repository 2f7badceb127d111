"""Secret store implementations."""

from mindwell_identity.infrastructure.secrets.memory_secret_store import (
    InMemorySecretStore,
)
from mindwell_identity.infrastructure.secrets.redis_secret_store import (
    RedisSecretStore,
)

__all__ = [
    "InMemorySecretStore",
    "RedisSecretStore",
]
