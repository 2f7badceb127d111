"""SQLAlchemy implementation for mindwell_identity persistence.

Provides:
- IdentityBase: Declarative base for identity models
- UserModel: SQLAlchemy model for users
- UserRepositorySQLAlchemy: Repository implementation for users
"""

from mindwell_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase
from mindwell_identity.infrastructure.persistence.sqlalchemy.models import UserModel
from mindwell_identity.infrastructure.persistence.sqlalchemy.repositories import (
    UserRepositorySQLAlchemy,
)

__all__ = [
    "IdentityBase",
    "UserModel",
    "UserRepositorySQLAlchemy",
]
