"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Union
from uuid import UUID

from mindwell_identity.domain.user.aggregates.user import User
from mindwell_identity.domain.user.value_objects.email import Email


class UserRepository(ABC):
    """Repository interface for User aggregates.

    Implementations must enforce uniqueness of the normalized email so
    that concurrent registrations resolve to exactly one record.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        """Find a user by their ID."""

    @abstractmethod
    async def find_by_email(self, email: Union[str, Email]) -> Optional[User]:
        """Find a user by their email address (case-insensitive)."""

    @abstractmethod
    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        """Check if a user exists with the given email."""

    @abstractmethod
    async def add(self, user: User) -> None:
        """Insert a new user.

        Raises
        ------
        EmailAlreadyExistsError
            If another user already holds the email
        """

    @abstractmethod
    async def save(self, user: User) -> None:
        """Persist changes to an existing user."""

    @abstractmethod
    async def commit(self) -> None:
        """Make every pending change durable.

        Callers commit before consuming one-time secrets, so a failed
        commit never burns a code or token.
        """
