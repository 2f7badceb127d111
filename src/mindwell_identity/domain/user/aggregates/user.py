"""User aggregate for identity concerns only."""

from datetime import datetime
from typing import Union
from uuid import UUID, uuid4

from mindwell.domain.shared.time import utc_now
from mindwell_identity.domain.user.value_objects import UserType
from mindwell_identity.domain.user.value_objects.email import Email


class User:
    """
    User aggregate root.

    Holds the durable identity record. The email and user type are fixed
    at creation; the only mutations are the one-way email verification
    flag and password hash replacement. The password hash never leaves
    the aggregate through ``repr`` or any response view.
    """

    MAX_NAME_LENGTH = 50

    def __init__(  # noqa: PLR0913
        self,
        name: str,
        email: Union[str, Email],
        password_hash: str,
        user_type: Union[str, UserType] = UserType.PATIENT,
        is_email_verified: bool = False,
        id: UUID | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._name = name.strip()[: self.MAX_NAME_LENGTH]
        self._email = email if isinstance(email, Email) else Email(email)
        self._password_hash = password_hash
        self._user_type = (
            user_type if isinstance(user_type, UserType) else UserType(user_type)
        )
        self._is_email_verified = is_email_verified
        self._id = id or uuid4()
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or self._created_at

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def email_obj(self) -> Email:
        return self._email

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def user_type(self) -> UserType:
        return self._user_type

    @property
    def is_email_verified(self) -> bool:
        return self._is_email_verified

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def mark_email_verified(self) -> bool:
        """Flip the verification flag; returns False if it was already set."""
        if self._is_email_verified:
            return False
        self._is_email_verified = True
        self._updated_at = utc_now()
        return True

    def change_password_hash(self, password_hash: str) -> None:
        self._password_hash = password_hash
        self._updated_at = utc_now()

    @classmethod
    def create(
        cls,
        name: str,
        email: Union[str, Email],
        password_hash: str,
        user_type: Union[str, UserType] = UserType.PATIENT,
    ) -> "User":
        return cls(
            name=name,
            email=email,
            password_hash=password_hash,
            user_type=user_type,
        )

    @classmethod
    def reconstitute(  # noqa: PLR0913
        cls,
        id: UUID,
        name: str,
        email: Union[str, Email],
        password_hash: str,
        user_type: Union[str, UserType],
        is_email_verified: bool,
        created_at: datetime,
        updated_at: datetime,
    ) -> "User":
        return cls(
            id=id,
            name=name,
            email=email,
            password_hash=password_hash,
            user_type=user_type,
            is_email_verified=is_email_verified,
            created_at=created_at,
            updated_at=updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"User(id={self._id}, email={self._email.value})"
