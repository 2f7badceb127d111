"""Auth schemas and data structures.

These are simple data classes used for transferring token
data between components.
"""

from dataclasses import dataclass
from datetime import datetime

CLAIMS_VERSION = 1


@dataclass(frozen=True)
class TokenClaims:
    """Decoded session token payload.

    This represents the data extracted from a verified token. The shape is
    closed and versioned so writers and readers cannot drift apart.

    Attributes
    ----------
    user_id
        The user's identifier (a UUID string, or a ``guest_`` id)
    email
        The user's email address
    user_type
        The user's type (``patient`` or ``therapist``)
    session_id
        Random id binding the token to one live session record
    exp
        Token expiration timestamp
    version
        Claims layout version
    """

    user_id: str
    email: str
    user_type: str
    session_id: str
    exp: datetime
    version: int = CLAIMS_VERSION

    def is_expired(self) -> bool:
        """Check if the token has expired."""
        return datetime.now(tz=self.exp.tzinfo) > self.exp
