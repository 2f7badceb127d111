"""Session issuance, revocation and resolution."""

from __future__ import annotations

import logging
import secrets
import uuid
from dataclasses import replace
from datetime import timedelta
from typing import TYPE_CHECKING

from mindwell_identity.application.context import UserContext
from mindwell_identity.domain.user import UserType
from mindwell_identity.exceptions import SessionExpiredError
from mindwell_identity.repositories import SecretKeys, SecretStore
from mindwell_identity.schemas import InvalidSessionRecordError, SessionData

if TYPE_CHECKING:
    from mindwell_auth import JWTService
    from mindwell_identity.domain.user import User

logger = logging.getLogger(__name__)


class SessionService:
    """
    Server-side sessions paired with signed tokens.

    A token is only honored while the session record stored under
    ``session:<user_id>`` is live and carries the same session id as the
    token's ``sid`` claim. Issuing a new session for a user overwrites the
    previous record, so at most one session per user is active.
    """

    GUEST_ID_PREFIX = "guest_"
    GUEST_EMAIL = "guest@example.com"

    def __init__(
        self,
        secret_store: SecretStore,
        jwt_service: JWTService,
        session_ttl_days: int = 7,
        guest_session_ttl_hours: int = 24,
    ):
        self._store = secret_store
        self._jwt_service = jwt_service
        self._session_ttl = timedelta(days=session_ttl_days)
        self._guest_session_ttl = timedelta(hours=guest_session_ttl_hours)

    async def _issue(
        self,
        context: UserContext,
        ttl: timedelta,
        token_ttl: timedelta | None = None,
    ) -> str:
        session_id = secrets.token_urlsafe(16)
        session = SessionData(
            user_id=context.user_id,
            email=context.email,
            user_type=context.user_type,
            is_guest=context.is_guest,
            session_id=session_id,
            is_email_verified=context.is_email_verified,
        )
        await self._store.set(
            SecretKeys.session(context.user_id),
            session.to_json(),
            int(ttl.total_seconds()),
        )
        return self._jwt_service.create_token(
            user_id=context.user_id,
            email=context.email,
            user_type=context.user_type,
            session_id=session_id,
            expires_delta=token_ttl,
        )

    async def issue_for_user(self, user: User) -> str:
        """Start a session for a registered user and return its token."""
        return await self._issue(UserContext.create(user), self._session_ttl)

    async def issue_for_guest(self) -> tuple[UserContext, str]:
        """Start a guest session. No User record is created."""
        context = UserContext(
            user_id=f"{self.GUEST_ID_PREFIX}{uuid.uuid4()}",
            email=self.GUEST_EMAIL,
            user_type=UserType.PATIENT.value,
            is_guest=True,
        )
        token = await self._issue(
            context,
            self._guest_session_ttl,
            token_ttl=self._guest_session_ttl,
        )
        return context, token

    async def revoke(self, user_id: str) -> None:
        await self._store.delete(SecretKeys.session(user_id))

    async def resolve(self, token: str) -> UserContext:
        """Authenticate a bearer token against its live session.

        Raises
        ------
        InvalidTokenError
            If the token is tampered with or malformed
        TokenExpiredError
            If the token's embedded expiry has passed
        SessionExpiredError
            If no matching live session exists for the token
        """
        claims = self._jwt_service.verify_token(token)

        raw = await self._store.get(SecretKeys.session(claims.user_id))
        if raw is None:
            raise SessionExpiredError

        try:
            session = SessionData.from_json(raw)
        except InvalidSessionRecordError as e:
            logger.warning("Discarding unreadable session for %s: %s", claims.user_id, e)
            raise SessionExpiredError from e

        if session.session_id != claims.session_id:
            logger.debug("Token for %s belongs to a replaced session", claims.user_id)
            raise SessionExpiredError

        return UserContext.from_session(session)

    async def mark_email_verified(self, user_id: str) -> None:
        """Refresh the live session record after email verification."""
        key = SecretKeys.session(user_id)
        raw = await self._store.get(key)
        if raw is None:
            return

        try:
            session = SessionData.from_json(raw)
        except InvalidSessionRecordError:
            return

        await self._store.replace(
            key,
            replace(session, is_email_verified=True).to_json(),
        )
