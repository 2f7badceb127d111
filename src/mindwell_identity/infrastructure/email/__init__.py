"""Outbound email (the notifier used for codes and reset links)."""

from mindwell_identity.infrastructure.email.email_service import (
    EmailDeliveryError,
    EmailService,
)
from mindwell_identity.infrastructure.email.templates import (
    PASSWORD_RESET_EMAIL,
    VERIFICATION_EMAIL,
    EmailTemplate,
)

__all__ = [
    "EmailDeliveryError",
    "EmailService",
    "EmailTemplate",
    "PASSWORD_RESET_EMAIL",
    "VERIFICATION_EMAIL",
]
