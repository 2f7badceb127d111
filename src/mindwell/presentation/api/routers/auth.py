"""Authentication router for signup, login, sessions and account recovery."""

import logging

from fastapi import APIRouter, status

from mindwell.presentation.api.dependencies import (
    AuthService,
    BearerCredentials,
    CurrentIdentity,
    DBSession,
    RegisteredIdentity,
    ResetService,
    VerificationService,
)
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
    ErrorResponse,
    MessageResponse,
    ValidationErrorResponse,
)
from mindwell_identity.exceptions import MissingTokenError

logger = logging.getLogger(__name__)

router = APIRouter()

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, we sent a reset link"

_UNAUTHORIZED = {401: {"model": ErrorResponse, "description": "Not authenticated"}}
_VALIDATION = {400: {"model": ValidationErrorResponse, "description": "Invalid input"}}


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
    responses={
        201: {"description": "Account created, verification code emailed"},
        400: {
            "model": ValidationErrorResponse,
            "description": "Invalid input or email already registered",
        },
    },
)
async def signup(
    request: SignupRequest,
    auth_service: AuthService,
    session: DBSession,
) -> AuthResponse:
    """
    Create an account and start a session.

    The new user is unverified; a 6-digit code is emailed. A failed email
    does not fail the signup (the code can be re-sent).
    """
    user, token = await auth_service.register(
        name=request.name,
        email=request.email,
        password=request.password,
        user_type=request.user_type,
    )
    await session.commit()

    return AuthResponse(
        user=UserResponse.from_user(user),
        token=token,
        message=(
            "Account created successfully. "
            "Please check your email for verification code."
        ),
    )


@router.post(
    "/login",
    summary="Login with email and password",
    responses={
        200: {"description": "Login successful"},
        **_VALIDATION,
        401: {"model": ErrorResponse, "description": "Invalid email or password"},
    },
)
async def login(
    request: LoginRequest,
    auth_service: AuthService,
) -> AuthResponse:
    """
    Authenticate and start a session.

    Replaces any previous session of the same user.
    """
    user, token = await auth_service.login(
        email=request.email,
        password=request.password,
    )
    return AuthResponse(
        user=UserResponse.from_user(user),
        token=token,
        message="Login successful",
    )


@router.post(
    "/logout",
    summary="End the current session",
    responses=_UNAUTHORIZED,
)
async def logout(
    identity: CurrentIdentity,
    auth_service: AuthService,
) -> MessageResponse:
    await auth_service.logout(identity.user_id)
    return MessageResponse(message="Logout successful")


@router.post(
    "/verify-email",
    summary="Verify email address with the emailed code",
    responses={
        200: {"description": "Email verified"},
        400: {"model": ErrorResponse, "description": "Invalid or expired code"},
        **_UNAUTHORIZED,
    },
)
async def verify_email(
    request: VerifyEmailRequest,
    verification_service: VerificationService,
    credentials: BearerCredentials,
) -> VerifyEmailResponse:
    """
    Redeem a verification code.

    Authenticates with the bearer token alone; the session gate is not
    applied because the account is not fully activated yet.
    """
    if credentials is None:
        raise MissingTokenError

    user = await verification_service.verify(credentials.credentials, request.code)

    return VerifyEmailResponse(
        user=UserResponse.from_user(user),
        message="Email verified successfully",
    )


@router.post(
    "/resend-verification",
    summary="Send a new email verification code",
    responses={
        200: {"description": "Code sent (or email already verified)"},
        **_UNAUTHORIZED,
        403: {"model": ErrorResponse, "description": "Guest sessions cannot verify"},
        429: {"model": ErrorResponse, "description": "Too many codes requested"},
    },
)
async def resend_verification(
    identity: RegisteredIdentity,
    verification_service: VerificationService,
) -> MessageResponse:
    sent = await verification_service.resend(identity.user_id)
    if not sent:
        return MessageResponse(message="Email is already verified")
    return MessageResponse(message="Verification code sent. Please check your email.")


@router.post(
    "/forgot-password",
    summary="Request a password reset email",
    responses={
        200: {"description": "Always the same acknowledgment"},
        **_VALIDATION,
    },
)
async def forgot_password(
    request: ForgotPasswordRequest,
    reset_service: ResetService,
) -> MessageResponse:
    """
    Request a password reset link.

    The response never reveals whether the email belongs to an account.
    """
    await reset_service.request_reset(request.email)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post(
    "/reset-password",
    summary="Set a new password with a reset token",
    responses={
        200: {"description": "Password changed, sessions ended"},
        400: {
            "model": ValidationErrorResponse,
            "description": "Invalid or expired token, or weak password",
        },
    },
)
async def reset_password(
    request: ResetPasswordRequest,
    reset_service: ResetService,
) -> MessageResponse:
    # The service commits before it consumes the token
    await reset_service.reset_password(request.token, request.new_password)
    return MessageResponse(
        message="Password reset successful. Please log in with your new password.",
    )


@router.post(
    "/guest",
    summary="Continue as guest",
    responses={200: {"description": "Guest session created"}},
)
async def continue_as_guest(auth_service: AuthService) -> GuestResponse:
    """
    Start a 24-hour guest session.

    No account is created and email verification never applies.
    """
    _, token = await auth_service.continue_as_guest()
    return GuestResponse(guest_token=token, message="Guest session created successfully")


@router.get(
    "/me",
    summary="Get the current identity",
    responses=_UNAUTHORIZED,
)
async def get_me(identity: CurrentIdentity) -> MeResponse:
    return MeResponse(identity=IdentityResponse.from_context(identity))
