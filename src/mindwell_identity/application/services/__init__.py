"""Application services for identity management."""

from mindwell_identity.application.services.authentication_service import (
    AuthenticationService,
)
from mindwell_identity.application.services.email_verification_service import (
    EmailVerificationService,
)
from mindwell_identity.application.services.password_reset_service import (
    PasswordResetService,
)
from mindwell_identity.application.services.session_service import SessionService

__all__ = [
    "AuthenticationService",
    "EmailVerificationService",
    "PasswordResetService",
    "SessionService",
]
