"""SQLAlchemy implementation of UserRepository."""

import logging
from typing import Any, Union
from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mindwell_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    User,
    UserNotFoundError,
    UserRepository,
)
from mindwell_identity.infrastructure.persistence.sqlalchemy.models import UserModel

logger = logging.getLogger(__name__)


def _normalized(email: Union[str, Email]) -> str:
    return email.value if isinstance(email, Email) else Email(email).value


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface.

    Writes are flushed; nothing is durable until ``commit`` is called.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: UUID) -> User | None:
        model = await self._one_or_none(UserModel.id == user_id)
        return None if model is None else self._to_domain(model)

    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        model = await self._one_or_none(UserModel.email == _normalized(email))
        return None if model is None else self._to_domain(model)

    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        stmt = select(exists().where(UserModel.email == _normalized(email)))
        return bool(await self._session.scalar(stmt))

    async def add(self, user: User) -> None:
        self._session.add(
            UserModel(
                id=user.id,
                name=user.name,
                email=user.email,
                password_hash=user.password_hash,
                user_type=user.user_type.value,
                is_email_verified=user.is_email_verified,
                created_at=user.created_at,
                updated_at=user.updated_at,
            ),
        )
        try:
            await self._session.flush()
        except IntegrityError as e:
            # The email column is the only unique constraint besides the key
            await self._session.rollback()
            raise EmailAlreadyExistsError(user.email) from e

        logger.info("Registered user %s (%s)", user.id, user.user_type.value)

    async def save(self, user: User) -> None:
        model = await self._one_or_none(UserModel.id == user.id)
        if model is None:
            raise UserNotFoundError(str(user.id))

        # email and user_type are fixed at registration
        model.name = user.name
        model.password_hash = user.password_hash
        model.is_email_verified = user.is_email_verified
        model.updated_at = user.updated_at
        await self._session.flush()

    async def commit(self) -> None:
        await self._session.commit()

    async def _one_or_none(self, criterion: Any) -> UserModel | None:
        result = await self._session.execute(select(UserModel).where(criterion))
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User.reconstitute(
            id=model.id,
            name=model.name,
            email=model.email,
            password_hash=model.password_hash,
            user_type=model.user_type,
            is_email_verified=model.is_email_verified,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
