"""Authentication exceptions.

These exceptions are raised by the mindwell_auth package and should be
caught and handled by the application layer (AuthenticationService) or
mapped to HTTP responses by the presentation layer.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes for API clients.

    These codes are part of the public API contract. Should not be changed.
    """

    # Validation / request errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MALFORMED_REQUEST = "MALFORMED_REQUEST"
    WEAK_PASSWORD = "WEAK_PASSWORD"

    # Conflicts (400 - clients treat as a validation-style failure)
    EMAIL_IN_USE = "EMAIL_IN_USE"

    # Short-lived secrets (400)
    INVALID_OR_EXPIRED_CODE = "INVALID_OR_EXPIRED_CODE"
    INVALID_OR_EXPIRED_TOKEN = "INVALID_OR_EXPIRED_TOKEN"

    # Authentication (401)
    NO_TOKEN = "NO_TOKEN"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    # Authorization (403)
    FORBIDDEN = "FORBIDDEN"
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"

    # Throttling (429)
    RATE_LIMITED = "RATE_LIMITED"

    # General Errors
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AuthError(Exception):
    """Base exception for all authentication errors."""

    code: ErrorCode = ErrorCode.INVALID_TOKEN

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class InvalidTokenError(AuthError):
    """Raised when a session token is invalid or malformed."""

    code = ErrorCode.INVALID_TOKEN

    def __init__(self, message: str = "Invalid token."):
        super().__init__(message)


class TokenExpiredError(InvalidTokenError):
    """Raised when a session token's embedded expiry has passed."""

    code = ErrorCode.TOKEN_EXPIRED

    def __init__(self, message: str = "Token has expired."):
        super().__init__(message)


class WeakPasswordError(AuthError):
    """Raised when a password doesn't meet strength requirements."""

    code = ErrorCode.WEAK_PASSWORD

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Raised when email or password is incorrect during login."""

    code = ErrorCode.INVALID_CREDENTIALS

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)
