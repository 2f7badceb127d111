"""Identity schemas and data structures.

These are simple data classes used for transferring identity
data between components and the secret store.
"""

import json
from dataclasses import asdict, dataclass

SESSION_RECORD_VERSION = 1


class InvalidSessionRecordError(ValueError):
    """Raised when a stored session record cannot be read."""


@dataclass(frozen=True)
class SessionData:
    """Server-side session record stored under ``session:<user_id>``.

    Attributes
    ----------
    user_id
        The user's identifier (UUID string or guest id)
    email
        The user's email address
    user_type
        ``patient`` or ``therapist``
    is_guest
        True for anonymous guest sessions
    session_id
        Random id that the matching token must carry
    is_email_verified
        Verification state captured at issue time (refreshed on verification)
    version
        Record layout version
    """

    user_id: str
    email: str
    user_type: str
    is_guest: bool
    session_id: str
    is_email_verified: bool = False
    version: int = SESSION_RECORD_VERSION

    def to_json(self) -> str:
        return json.dumps(asdict(self), separators=(",", ":"))

    @classmethod
    def from_json(cls, raw: str) -> "SessionData":
        try:
            data = json.loads(raw)
            if data.get("version") != SESSION_RECORD_VERSION:
                msg = f"Unsupported session record version: {data.get('version')!r}"
                raise InvalidSessionRecordError(msg)
            return cls(
                user_id=str(data["user_id"]),
                email=str(data["email"]),
                user_type=str(data["user_type"]),
                is_guest=bool(data["is_guest"]),
                session_id=str(data["session_id"]),
                is_email_verified=bool(data.get("is_email_verified", False)),
                version=data["version"],
            )
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            msg = f"Malformed session record: {e}"
            raise InvalidSessionRecordError(msg) from e
