"""Authentication service for registration, login, logout and guests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mindwell_identity.domain.user import EmailAlreadyExistsError, User, UserType
from mindwell_identity.exceptions import InvalidCredentialsError

if TYPE_CHECKING:
    from mindwell_auth import PasswordHashingService
    from mindwell_identity.application.context import UserContext
    from mindwell_identity.application.services.email_verification_service import (
        EmailVerificationService,
    )
    from mindwell_identity.application.services.session_service import (
        SessionService,
    )
    from mindwell_identity.domain.user import UserRepository

logger = logging.getLogger(__name__)


class AuthenticationService:
    """
    Application service for user authentication.

    Orchestrates mindwell_auth primitives (password hashing, signed tokens)
    with the User domain and the secret store to provide:
    - Registration (with an emailed verification code)
    - Login with password
    - Logout
    - Guest sessions

    None of these operations is transactional end-to-end: a user row may
    outlive a failed notification, and an issued session is not retracted
    if the client disconnects.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
        session_service: SessionService,
        verification_service: EmailVerificationService,
    ):
        self._user_repo = user_repository
        self._password_service = password_service
        self._session_service = session_service
        self._verification_service = verification_service

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        user_type: UserType | str = UserType.PATIENT,
    ) -> tuple[User, str]:
        if await self._user_repo.exists_by_email(email):
            raise EmailAlreadyExistsError(email)

        password_hash = self._password_service.hash(password)
        user = User.create(
            name=name,
            email=email,
            password_hash=password_hash,
            user_type=user_type,
        )
        # Unique index on email settles a concurrent registration
        await self._user_repo.add(user)

        await self._verification_service.issue_code(user)
        token = await self._session_service.issue_for_user(user)

        logger.info("User registered: %s (type: %s)", user.email, user.user_type.value)
        return user, token

    async def login(self, email: str, password: str) -> tuple[User, str]:
        user = await self._user_repo.find_by_email(email)
        if user is None:
            raise InvalidCredentialsError

        if not self._password_service.verify(password, user.password_hash):
            raise InvalidCredentialsError

        token = await self._session_service.issue_for_user(user)

        logger.info("User logged in: %s", user.email)
        return user, token

    async def logout(self, user_id: str) -> None:
        await self._session_service.revoke(user_id)
        logger.info("User logged out: %s", user_id)

    async def continue_as_guest(self) -> tuple[UserContext, str]:
        context, token = await self._session_service.issue_for_guest()
        logger.info("Guest session created: %s", context.user_id)
        return context, token
