"""User context for request-scoped user identity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mindwell_identity.domain.user import User
    from mindwell_identity.schemas import SessionData


@dataclass(frozen=True)
class UserContext:
    """Immutable context for the current authenticated actor.

    ``user_id`` is a string because guest identities (``guest_<uuid>``) have
    no durable User record.
    """

    user_id: str
    email: str
    user_type: str
    is_guest: bool = False
    is_email_verified: bool = False

    @classmethod
    def create(cls, user: User) -> UserContext:
        return cls(
            user_id=str(user.id),
            email=user.email,
            user_type=user.user_type.value,
            is_guest=False,
            is_email_verified=user.is_email_verified,
        )

    @classmethod
    def from_session(cls, session: SessionData) -> UserContext:
        return cls(
            user_id=session.user_id,
            email=session.email,
            user_type=session.user_type,
            is_guest=session.is_guest,
            is_email_verified=session.is_email_verified,
        )

    def __str__(self) -> str:
        return f"UserContext({self.email})"

    def __repr__(self) -> str:
        return (
            f"UserContext(user_id={self.user_id!r}, email={self.email!r}, "
            f"user_type={self.user_type!r}, is_guest={self.is_guest})"
        )
