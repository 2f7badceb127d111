"""Identity and authentication exceptions.

These exceptions are raised by the mindwell_identity package and should be
caught and handled by the presentation layer. Each carries a stable
``ErrorCode`` used for the HTTP mapping.
"""

from collections.abc import Iterable

from mindwell_auth.exceptions import (
    AuthError,
    ErrorCode,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    WeakPasswordError,
)


class MissingTokenError(AuthError):
    """Raised when a protected operation is called without a bearer token."""

    code = ErrorCode.NO_TOKEN

    def __init__(self, message: str = "Access denied. No token provided."):
        super().__init__(message)


class SessionExpiredError(AuthError):
    """Raised when no live session backs an otherwise valid token.

    Covers explicit logout, reset-triggered invalidation, replacement by a
    newer login, and natural TTL expiry of the session record.
    """

    code = ErrorCode.SESSION_EXPIRED

    def __init__(self, message: str = "Session expired. Please log in again."):
        super().__init__(message)


class InvalidVerificationCodeError(AuthError):
    """Raised when an email verification code is absent, wrong, or expired."""

    code = ErrorCode.INVALID_OR_EXPIRED_CODE

    def __init__(self, message: str = "Invalid or expired verification code"):
        super().__init__(message)


class InvalidResetTokenError(AuthError):
    """Raised when a password reset token is invalid or expired."""

    code = ErrorCode.INVALID_OR_EXPIRED_TOKEN

    def __init__(self, message: str = "Invalid or expired reset token"):
        super().__init__(message)


class ForbiddenError(AuthError):
    """Raised when an authenticated actor lacks the required role."""

    code = ErrorCode.FORBIDDEN

    def __init__(self, message: str = "Access denied."):
        super().__init__(message)

    @classmethod
    def for_user_types(cls, allowed: Iterable[str]) -> "ForbiddenError":
        names = " or ".join(sorted(allowed))
        return cls(f"Access denied. {names} role required.")


class EmailNotVerifiedError(AuthError):
    """Raised when an operation requires a verified email address."""

    code = ErrorCode.EMAIL_NOT_VERIFIED

    def __init__(
        self,
        message: str = "Please verify your email address to continue.",
    ):
        super().__init__(message)


class RateLimitExceededError(AuthError):
    """Raised when a user requests too many short-lived secrets."""

    code = ErrorCode.RATE_LIMITED

    def __init__(self, message: str = "Too many requests. Try again later."):
        super().__init__(message)


__all__ = [
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
]
