"""Authentication services.

Provides password hashing and session token management.
"""

from mindwell_auth.services.jwt_service import JWTService
from mindwell_auth.services.password_service import PasswordHashingService

__all__ = [
    "PasswordHashingService",
    "JWTService",
]
