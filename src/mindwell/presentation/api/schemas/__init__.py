"""Pydantic schemas for API request/response models."""

from mindwell.presentation.api.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    GuestResponse,
    IdentityResponse,
    LoginRequest,
    MeResponse,
    ResetPasswordRequest,
    SignupRequest,
    UserResponse,
    VerifyEmailRequest,
    VerifyEmailResponse,
)
from mindwell.presentation.api.schemas.common import (
    ApiModel,
    ErrorResponse,
    FieldError,
    HealthResponse,
    MessageResponse,
    ValidationErrorResponse,
)

__all__ = [
    # Common
    "ApiModel",
    "ErrorResponse",
    "FieldError",
    "HealthResponse",
    "MessageResponse",
    "ValidationErrorResponse",
    # Auth
    "AuthResponse",
    "ForgotPasswordRequest",
    "GuestResponse",
    "IdentityResponse",
    "LoginRequest",
    "MeResponse",
    "ResetPasswordRequest",
    "SignupRequest",
    "UserResponse",
    "VerifyEmailRequest",
    "VerifyEmailResponse",
]
