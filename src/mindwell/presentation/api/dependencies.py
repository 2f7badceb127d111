"""FastAPI dependency injection for the MindWell API.

Provides dependencies for:
- Shared resources created by the app lifespan (settings, database,
  secret store, email service)
- Service instances
- Authentication (current identity from token + live session)
- Authorization gates (user type, registered user, verified email)
"""

import logging
from typing import Annotated, AsyncGenerator, Callable, Coroutine

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from mindwell_auth import JWTService, PasswordHashingService
from mindwell_config.settings import Settings
from mindwell_identity.application.context import UserContext
from mindwell_identity.application.services import (
    AuthenticationService,
    EmailVerificationService,
    PasswordResetService,
    SessionService,
)
from mindwell_identity.domain.user import UserType
from mindwell_identity.exceptions import (
    AuthError,
    EmailNotVerifiedError,
    ForbiddenError,
    MissingTokenError,
)
from mindwell_identity.infrastructure.email import EmailService
from mindwell_identity.infrastructure.persistence.sqlalchemy import (
    UserRepositorySQLAlchemy,
)
from mindwell_identity.repositories import SecretStore

logger = logging.getLogger(__name__)

# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

BearerCredentials = Annotated[
    HTTPAuthorizationCredentials | None,
    Depends(security),
]


# -----------------------------------------------------------------------------
# Shared Resources (created once by the app lifespan)
# -----------------------------------------------------------------------------


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_app_settings)]


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Creates an async session for the request from the shared session maker.
    Routers commit on success; anything not committed is rolled back when
    the session closes.

    Yields
    ------
    AsyncSession for database operations
    """
    async with request.app.state.session_maker() as session:
        yield session


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_secret_store(request: Request) -> SecretStore:
    return request.app.state.secret_store


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


SecretStoreDep = Annotated[SecretStore, Depends(get_secret_store)]
EmailServiceDep = Annotated[EmailService, Depends(get_email_service)]


# -----------------------------------------------------------------------------
# Authentication Services
# -----------------------------------------------------------------------------


def get_jwt_service(settings: SettingsDep) -> JWTService:
    """Get JWT service configured with application settings."""
    return JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        token_expire_days=settings.jwt_token_expire_days,
    )


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    """Get password hashing service."""
    return PasswordHashingService(rounds=settings.password_hash_rounds)


JWTServiceDep = Annotated[JWTService, Depends(get_jwt_service)]
PasswordServiceDep = Annotated[PasswordHashingService, Depends(get_password_service)]


def get_user_repository(session: DBSession) -> UserRepositorySQLAlchemy:
    return UserRepositorySQLAlchemy(session)


UserRepositoryDep = Annotated[UserRepositorySQLAlchemy, Depends(get_user_repository)]


def get_session_service(
    secret_store: SecretStoreDep,
    jwt_service: JWTServiceDep,
    settings: SettingsDep,
) -> SessionService:
    return SessionService(
        secret_store=secret_store,
        jwt_service=jwt_service,
        session_ttl_days=settings.session_ttl_days,
        guest_session_ttl_hours=settings.guest_session_ttl_hours,
    )


SessionServiceDep = Annotated[SessionService, Depends(get_session_service)]


def get_email_verification_service(  # noqa: PLR0913
    user_repo: UserRepositoryDep,
    secret_store: SecretStoreDep,
    jwt_service: JWTServiceDep,
    session_service: SessionServiceDep,
    email_service: EmailServiceDep,
    settings: SettingsDep,
) -> EmailVerificationService:
    return EmailVerificationService(
        user_repository=user_repo,
        secret_store=secret_store,
        jwt_service=jwt_service,
        session_service=session_service,
        email_service=email_service,
        code_ttl_minutes=settings.verification_code_ttl_minutes,
        max_codes_per_hour=settings.verification_max_per_hour,
    )


VerificationService = Annotated[
    EmailVerificationService,
    Depends(get_email_verification_service),
]


def get_authentication_service(
    user_repo: UserRepositoryDep,
    password_service: PasswordServiceDep,
    session_service: SessionServiceDep,
    verification_service: VerificationService,
) -> AuthenticationService:
    """
    Get authentication service with all dependencies.

    This service orchestrates registration, login, logout and guest
    sessions.
    """
    return AuthenticationService(
        user_repository=user_repo,
        password_service=password_service,
        session_service=session_service,
        verification_service=verification_service,
    )


# Type alias for injected auth service
AuthService = Annotated[AuthenticationService, Depends(get_authentication_service)]


def get_password_reset_service(  # noqa: PLR0913
    user_repo: UserRepositoryDep,
    secret_store: SecretStoreDep,
    password_service: PasswordServiceDep,
    session_service: SessionServiceDep,
    email_service: EmailServiceDep,
    settings: SettingsDep,
) -> PasswordResetService:
    return PasswordResetService(
        user_repository=user_repo,
        secret_store=secret_store,
        password_service=password_service,
        session_service=session_service,
        email_service=email_service,
        frontend_base_url=settings.frontend_base_url,
        token_ttl_minutes=settings.password_reset_ttl_minutes,
        max_resets_per_day=settings.password_reset_max_per_day,
    )


ResetService = Annotated[PasswordResetService, Depends(get_password_reset_service)]


# -----------------------------------------------------------------------------
# Current Identity (token + live session)
# -----------------------------------------------------------------------------


async def get_current_identity(
    credentials: BearerCredentials,
    session_service: SessionServiceDep,
) -> UserContext:
    """
    FastAPI dependency resolving the authenticated actor.

    Extracts the bearer token from the Authorization header, verifies it,
    and checks it against the live session record.

    Returns
    -------
    The resolved UserContext (user or guest)

    Raises
    ------
    MissingTokenError
        If no bearer token was sent
    InvalidTokenError
        If the token is tampered with, malformed or expired
    SessionExpiredError
        If the session was logged out, replaced or invalidated by a reset
    """
    if credentials is None:
        raise MissingTokenError

    try:
        return await session_service.resolve(credentials.credentials)
    except AuthError as e:
        logger.warning("Rejected token: %s", e)
        raise


# Type alias for injected identity
CurrentIdentity = Annotated[UserContext, Depends(get_current_identity)]


def require_user_type(
    *allowed: UserType | str,
) -> Callable[[UserContext], Coroutine[None, None, UserContext]]:
    """Build a dependency admitting only the given user types.

    Examples
    --------
    >>> TherapistOnly = Annotated[
    ...     UserContext, Depends(require_user_type(UserType.THERAPIST))
    ... ]
    """
    allowed_values = frozenset(UserType(value).value for value in allowed)

    async def _require_user_type(identity: CurrentIdentity) -> UserContext:
        if identity.user_type not in allowed_values:
            raise ForbiddenError.for_user_types(allowed_values)
        return identity

    return _require_user_type


async def require_registered_user(identity: CurrentIdentity) -> UserContext:
    """Reject guest sessions."""
    if identity.is_guest:
        raise ForbiddenError("Access denied. Please create an account first.")
    return identity


RegisteredIdentity = Annotated[UserContext, Depends(require_registered_user)]


async def require_verified_email(identity: CurrentIdentity) -> UserContext:
    """Reject registered users whose email is not verified yet.

    Guest sessions pass: they have no email to verify.
    """
    if not identity.is_guest and not identity.is_email_verified:
        raise EmailNotVerifiedError
    return identity


VerifiedIdentity = Annotated[UserContext, Depends(require_verified_email)]
