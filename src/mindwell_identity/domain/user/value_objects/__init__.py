"""Value objects for the user domain having identity concerns only."""

from mindwell_identity.domain.user.value_objects.email import Email
from mindwell_identity.domain.user.value_objects.user_type import UserType

__all__ = [
    "Email",
    "UserType",
]
