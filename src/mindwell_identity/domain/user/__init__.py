"""User domain manages user identity only.

This domain handles:
- User aggregate (identity: id, name, email, user type, verification flag)
- Password hash ownership (never exposed in views)
- Repository port for durable storage
"""

from mindwell_identity.domain.user.aggregates import User
from mindwell_identity.domain.user.exceptions import (
    EmailAlreadyExistsError,
    InvalidEmailError,
    UserNotFoundError,
)
from mindwell_identity.domain.user.repositories import UserRepository
from mindwell_identity.domain.user.value_objects import (
    Email,
    UserType,
)

__all__ = [
    "Email",
    "EmailAlreadyExistsError",
    "InvalidEmailError",
    "User",
    "UserNotFoundError",
    "UserRepository",
    "UserType",
]
