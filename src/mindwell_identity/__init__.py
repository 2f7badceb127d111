"""MindWell Identity - Users, sessions and account recovery.

This module handles all identity-related concerns:
- User management (registration, user type, email verification flag)
- Sessions (server-side records paired with signed tokens, guests)
- Email verification codes
- Password reset (hashed reset tokens, session invalidation)
- Email notifications (verification codes, reset links)

Credential primitives (bcrypt, JWT) live in mindwell_auth.
"""

from mindwell_identity.application.context import UserContext
from mindwell_identity.application.services import (
    AuthenticationService,
    EmailVerificationService,
    PasswordResetService,
    SessionService,
)
from mindwell_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    InvalidEmailError,
    User,
    UserNotFoundError,
    UserRepository,
    UserType,
)
from mindwell_identity.exceptions import (
    AuthError,
    EmailNotVerifiedError,
    ErrorCode,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidResetTokenError,
    InvalidTokenError,
    InvalidVerificationCodeError,
    MissingTokenError,
    RateLimitExceededError,
    SessionExpiredError,
    TokenExpiredError,
    WeakPasswordError,
)
from mindwell_identity.repositories import SecretKeys, SecretStore, SecretStoreError
from mindwell_identity.schemas import SessionData

__all__ = [
    # Domain - User
    "Email",
    "EmailAlreadyExistsError",
    "InvalidEmailError",
    "User",
    "UserNotFoundError",
    "UserRepository",
    "UserType",
    # Exceptions
    "AuthError",
    "EmailNotVerifiedError",
    "ErrorCode",
    "ForbiddenError",
    "InvalidCredentialsError",
    "InvalidResetTokenError",
    "InvalidTokenError",
    "InvalidVerificationCodeError",
    "MissingTokenError",
    "RateLimitExceededError",
    "SessionExpiredError",
    "TokenExpiredError",
    "WeakPasswordError",
    # Repositories
    "SecretKeys",
    "SecretStore",
    "SecretStoreError",
    # Schemas
    "SessionData",
    # Application Context
    "UserContext",
    # Application Services
    "AuthenticationService",
    "EmailVerificationService",
    "PasswordResetService",
    "SessionService",
]
