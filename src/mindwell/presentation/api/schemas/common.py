"""Common schemas shared across API endpoints."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model for the public API: camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    message: str = Field(..., description="Error message")
    code: str | None = Field(None, description="Error code for programmatic handling")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"message": "Invalid email or password", "code": "INVALID_CREDENTIALS"},
        },
    )


class FieldError(BaseModel):
    """One violated field in a request body."""

    field: str
    message: str


class ValidationErrorResponse(ErrorResponse):
    """Every field-level violation found in a request body."""

    errors: list[FieldError] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Validation failed",
                "code": "VALIDATION_ERROR",
                "errors": [
                    {"field": "email", "message": "Please provide a valid email"},
                    {"field": "confirmPassword", "message": "Passwords do not match"},
                ],
            },
        },
    )


class MessageResponse(BaseModel):
    """Response carrying only a human-readable message."""

    message: str


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
