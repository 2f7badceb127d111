"""Centralized exception handlers for the FastAPI application.

Domain and auth exceptions are mapped to HTTP responses with a consistent
error format.

Error Response Format:
    {
        "message": "Human-readable error message",
        "code": "MACHINE_READABLE_ERROR_CODE"
    }

Validation failures additionally list every violated field:
    {
        "message": "Validation failed",
        "code": "VALIDATION_ERROR",
        "errors": [{"field": "email", "message": "Please provide a valid email"}]
    }

Usage:
    from mindwell.presentation.api.exception_handlers import setup_exception_handlers

    app = FastAPI()
    setup_exception_handlers(app)
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mindwell_identity.domain.user import (
    EmailAlreadyExistsError,
    InvalidEmailError,
    UserNotFoundError,
)
from mindwell_identity.exceptions import (
    AuthError,
    ErrorCode,
    InvalidTokenError,
    TokenExpiredError,
)
from mindwell_identity.repositories import SecretStoreError

logger = logging.getLogger(__name__)


# =============================================================================
# Error Code to HTTP Status Mapping
# =============================================================================

ERROR_CODE_TO_STATUS: dict[ErrorCode, int] = {
    # 400 Bad Request - validation errors and spent secrets
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.MALFORMED_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorCode.WEAK_PASSWORD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EMAIL_IN_USE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_OR_EXPIRED_CODE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_OR_EXPIRED_TOKEN: status.HTTP_400_BAD_REQUEST,
    # 401 Unauthorized - authentication errors
    ErrorCode.NO_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.TOKEN_EXPIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.SESSION_EXPIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    # 403 Forbidden - authorization errors
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.EMAIL_NOT_VERIFIED: status.HTTP_403_FORBIDDEN,
    # 404 Not Found
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    # 429 Too Many Requests
    ErrorCode.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    # 500 Internal Server Error
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

VALIDATION_FAILED_MESSAGE = "Validation failed"
MALFORMED_JSON_MESSAGE = "Malformed JSON in request body"
INTERNAL_ERROR_MESSAGE = "Internal server error"


def _create_error_response(
    status_code: int,
    message: str,
    code: str | None = None,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> JSONResponse:
    """Create a standardized error response."""
    content: dict[str, Any] = {"message": message}
    if code is not None:
        content["code"] = code
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _field_name(loc: tuple[Any, ...]) -> str:
    # ("body", "confirmPassword") -> "confirmPassword"; ("body",) -> "body"
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


def _validation_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    return [
        {"field": _field_name(tuple(error.get("loc", ()))), "message": error["msg"]}
        for error in exc.errors()
    ]


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI application.

    Parameters
    ----------
    app
        The FastAPI application instance
    """

    @app.exception_handler(AuthError)
    async def auth_exception_handler(
        request: Request,
        exc: AuthError,
    ) -> JSONResponse:
        """Handle all auth exceptions with structured response."""
        status_code = ERROR_CODE_TO_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST)

        message = exc.message
        if isinstance(exc, InvalidTokenError) and not isinstance(exc, TokenExpiredError):
            # Decoder details stay in the log
            message = InvalidTokenError().message

        logger.warning(
            "Auth exception on %s %s: %s (code=%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.code.value,
        )

        headers = None
        if status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}

        return _create_error_response(
            status_code=status_code,
            message=message,
            code=exc.code.value,
            headers=headers,
        )

    @app.exception_handler(EmailAlreadyExistsError)
    async def email_exists_handler(
        request: Request,
        exc: EmailAlreadyExistsError,
    ) -> JSONResponse:
        logger.info("Registration rejected, email in use: %s", exc.email)
        return _create_error_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            message="User with this email already exists",
            code=ErrorCode.EMAIL_IN_USE.value,
        )

    @app.exception_handler(InvalidEmailError)
    async def invalid_email_handler(
        request: Request,
        exc: InvalidEmailError,
    ) -> JSONResponse:
        return _create_error_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=VALIDATION_FAILED_MESSAGE,
            code=ErrorCode.VALIDATION_ERROR.value,
            errors=[{"field": "email", "message": "Please provide a valid email"}],
        )

    @app.exception_handler(UserNotFoundError)
    async def user_not_found_handler(
        request: Request,
        exc: UserNotFoundError,
    ) -> JSONResponse:
        logger.warning("User not found on %s %s: %s", request.method, request.url.path, exc)
        return _create_error_response(
            status_code=status.HTTP_404_NOT_FOUND,
            message="User not found",
            code=ErrorCode.NOT_FOUND.value,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Report every violated field, or a parse error for broken JSON."""
        if any(error.get("type") == "json_invalid" for error in exc.errors()):
            logger.debug("Malformed JSON on %s %s", request.method, request.url.path)
            return _create_error_response(
                status_code=status.HTTP_400_BAD_REQUEST,
                message=MALFORMED_JSON_MESSAGE,
                code=ErrorCode.MALFORMED_REQUEST.value,
            )

        errors = _validation_errors(exc)
        logger.debug(
            "Validation failed on %s %s: %s",
            request.method,
            request.url.path,
            errors,
        )
        return _create_error_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=VALIDATION_FAILED_MESSAGE,
            code=ErrorCode.VALIDATION_ERROR.value,
            errors=errors,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        message = str(exc.detail)
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = "Route not found"
        return _create_error_response(
            status_code=exc.status_code,
            message=message,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SecretStoreError)
    async def secret_store_exception_handler(
        request: Request,
        exc: SecretStoreError,
    ) -> JSONResponse:
        logger.error(
            "Secret store failure on %s %s: %s",
            request.method,
            request.url.path,
            exc,
        )
        return _create_error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=INTERNAL_ERROR_MESSAGE,
            code=ErrorCode.INTERNAL_ERROR.value,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unhandled exceptions with consistent error format.

        This is the catch-all handler for any exceptions not handled by
        the specific handlers above. Details are logged, never returned.
        """
        logger.exception(
            "Unhandled exception on %s %s: %s",
            request.method,
            request.url.path,
            exc,
        )
        return _create_error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=INTERNAL_ERROR_MESSAGE,
            code=ErrorCode.INTERNAL_ERROR.value,
        )
