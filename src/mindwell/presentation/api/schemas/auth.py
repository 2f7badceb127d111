"""Authentication schemas for request/response models.

Request models are the request validation layer: every rule reports its
own message so a failed request lists each violated field.
"""

import re
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import (
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.functional_validators import ModelWrapValidatorHandler
from pydantic_core import InitErrorDetails, PydanticCustomError

from mindwell.presentation.api.schemas.common import ApiModel
from mindwell_auth import PasswordHashingService, WeakPasswordError
from mindwell_identity.application.context import UserContext
from mindwell_identity.domain.user import Email, InvalidEmailError, User, UserType

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
VERIFICATION_CODE_PATTERN = re.compile(r"[0-9]{6}")
_USER_TYPE_VALUES = frozenset(t.value for t in UserType)

_password_rules = PasswordHashingService()


def _check_email(value: str) -> str:
    try:
        return Email(value).value
    except InvalidEmailError as e:
        raise PydanticCustomError("email_invalid", "Please provide a valid email") from e


def _check_password_strength(value: str) -> str:
    try:
        _password_rules.validate_strength(value)
    except WeakPasswordError as e:
        raise PydanticCustomError("weak_password", e.message) from e
    return value


def _raw_field(data: Any, alias: str, name: str) -> Any:
    if not isinstance(data, dict):
        return getattr(data, name, "")
    return data.get(alias, data.get(name, ""))


def _as_line_error(error: Any) -> InitErrorDetails:
    # Re-raise an already rendered error unchanged (type name and message)
    return InitErrorDetails(
        type=PydanticCustomError(error["type"], error["msg"]),
        loc=tuple(error["loc"]),
        input=error.get("input"),
    )


class SignupRequest(ApiModel):
    """Request schema for account registration."""

    name: str = Field("", validate_default=True)
    email: str = Field("", validate_default=True)
    password: str = Field("", validate_default=True)
    confirm_password: str = Field("", validate_default=True)
    user_type: UserType = Field("", validate_default=True)  # type: ignore[assignment]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Ann",
                "email": "ann@example.com",
                "password": "Passw0rd",
                "confirmPassword": "Passw0rd",
                "userType": "patient",
            },
        },
    )

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        v = v.strip()
        if not NAME_MIN_LENGTH <= len(v) <= NAME_MAX_LENGTH:
            raise PydanticCustomError(
                "name_length",
                "Name must be between 2 and 50 characters",
            )
        return v

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def _validate_password(cls, v: str) -> str:
        return _check_password_strength(v)

    @field_validator("user_type", mode="before")
    @classmethod
    def _validate_user_type(cls, v: Any) -> Any:
        value = v.value if isinstance(v, UserType) else v
        if not isinstance(value, str) or value not in _USER_TYPE_VALUES:
            raise PydanticCustomError(
                "user_type",
                "User type must be either patient or therapist",
            )
        return v

    @model_validator(mode="wrap")
    @classmethod
    def _validate_confirmation(
        cls,
        data: Any,
        handler: ModelWrapValidatorHandler["SignupRequest"],
    ) -> "SignupRequest":
        """Compare the confirmation with the password exactly as sent.

        Runs whether or not the password passed its own rules, so a weak
        password and a wrong confirmation are both reported.
        """
        mismatch: list[InitErrorDetails] = []
        confirm_password = _raw_field(data, "confirmPassword", "confirm_password")
        if confirm_password != _raw_field(data, "password", "password"):
            mismatch.append(
                InitErrorDetails(
                    type=PydanticCustomError("password_mismatch", "Passwords do not match"),
                    loc=("confirmPassword",),
                    input=confirm_password,
                ),
            )

        try:
            request = handler(data)
        except ValidationError as e:
            if not mismatch:
                raise
            line_errors = [_as_line_error(error) for error in e.errors()]
            raise ValidationError.from_exception_data(
                cls.__name__,
                line_errors + mismatch,
            ) from None

        if mismatch:
            raise ValidationError.from_exception_data(cls.__name__, mismatch)
        return request


class LoginRequest(ApiModel):
    """Request schema for user login."""

    email: str = Field("", validate_default=True)
    password: str = Field("", validate_default=True)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"email": "ann@example.com", "password": "Passw0rd"},
        },
    )

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def _validate_password(cls, v: str) -> str:
        if not v:
            raise PydanticCustomError("password_required", "Password is required")
        return v


class VerifyEmailRequest(ApiModel):
    """Request schema for redeeming an email verification code."""

    code: str = Field("", validate_default=True)

    @field_validator("code")
    @classmethod
    def _validate_code(cls, v: str) -> str:
        if not VERIFICATION_CODE_PATTERN.fullmatch(v):
            raise PydanticCustomError(
                "verification_code",
                "Verification code must be 6 digits",
            )
        return v


class ForgotPasswordRequest(ApiModel):
    """Request schema for requesting a password reset email."""

    email: str = Field("", validate_default=True)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str) -> str:
        return _check_email(v)


class ResetPasswordRequest(ApiModel):
    """Request schema for resetting a password with a token."""

    token: str = Field("", validate_default=True)
    new_password: str = Field("", validate_default=True)

    @field_validator("token")
    @classmethod
    def _validate_token(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise PydanticCustomError("token_required", "Reset token is required")
        return v

    @field_validator("new_password")
    @classmethod
    def _validate_new_password(cls, v: str) -> str:
        return _check_password_strength(v)


class UserResponse(ApiModel):
    """Public view of a user. The password hash is never part of it."""

    id: UUID
    name: str
    email: str
    user_type: str
    is_email_verified: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            user_type=user.user_type.value,
            is_email_verified=user.is_email_verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthResponse(ApiModel):
    """Response schema for signup and login."""

    user: UserResponse
    token: str
    message: str


class VerifyEmailResponse(ApiModel):
    user: UserResponse
    message: str


class GuestResponse(ApiModel):
    guest_token: str
    message: str


class IdentityResponse(ApiModel):
    """The identity resolved from a session token."""

    user_id: str
    email: str
    user_type: str
    is_guest: bool
    is_email_verified: bool

    @classmethod
    def from_context(cls, context: UserContext) -> "IdentityResponse":
        return cls(
            user_id=context.user_id,
            email=context.email,
            user_type=context.user_type,
            is_guest=context.is_guest,
            is_email_verified=context.is_email_verified,
        )


class MeResponse(ApiModel):
    identity: IdentityResponse
