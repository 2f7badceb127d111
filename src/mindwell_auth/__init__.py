"""MindWell Auth - Credential engine.

This package provides authentication primitives that are independent
of the user domain. It handles:
- Password hashing (bcrypt)
- Signed session token creation and verification (JWT, HS256)

Architecture:
    mindwell_auth/
    ├── services/           # Pure logic (password hashing, JWT)
    ├── schemas.py          # Token claims
    └── exceptions.py       # Auth exceptions and error codes

Usage:
    from mindwell_auth import PasswordHashingService, JWTService
"""

from mindwell_auth.exceptions import (
    AuthError,
    ErrorCode,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    WeakPasswordError,
)
from mindwell_auth.schemas import CLAIMS_VERSION, TokenClaims
from mindwell_auth.services import JWTService, PasswordHashingService

__all__ = [
    # Services
    "PasswordHashingService",
    "JWTService",
    # Schemas
    "CLAIMS_VERSION",
    "TokenClaims",
    # Exceptions
    "AuthError",
    "ErrorCode",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "TokenExpiredError",
    "WeakPasswordError",
]
