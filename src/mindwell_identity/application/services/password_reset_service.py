import hashlib
import logging
import secrets
import uuid
from datetime import timedelta

from mindwell_auth import PasswordHashingService
from mindwell_identity.application.services.session_service import SessionService
from mindwell_identity.domain.user import UserRepository
from mindwell_identity.exceptions import InvalidResetTokenError
from mindwell_identity.infrastructure.email import EmailDeliveryError, EmailService
from mindwell_identity.repositories import SecretKeys, SecretStore

logger = logging.getLogger(__name__)


class PasswordResetService:
    """Service for handling password reset requests and token validation.

    Reset tokens are stored by their SHA-256 hash
    (``password_reset:<hash> -> user_id``) so a reset is a single lookup.
    ``verification:password_reset:<user_id>`` points at the live hash so a
    newer request can retire the older token.
    """

    RATE_LIMIT_WINDOW = timedelta(days=1)

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        secret_store: SecretStore,
        password_service: PasswordHashingService,
        session_service: SessionService,
        email_service: EmailService,
        frontend_base_url: str,
        token_ttl_minutes: int = 60,
        max_resets_per_day: int = 3,
    ):
        self._user_repo = user_repository
        self._store = secret_store
        self._password_service = password_service
        self._session_service = session_service
        self._email_service = email_service
        self._frontend_base_url = frontend_base_url.rstrip("/")
        self._token_ttl_minutes = token_ttl_minutes
        self._max_resets_per_day = max_resets_per_day

    def _hash_token(self, raw_token: str) -> str:
        return hashlib.sha256(raw_token.encode()).hexdigest()

    async def request_reset(self, email: str) -> None:
        user = await self._user_repo.find_by_email(email)
        if not user:
            # Silent fail to prevent email enumeration
            logger.debug("Password reset requested for unknown email: %s", email)
            return

        user_id = str(user.id)

        # Rate limit check
        count = await self._store.increment(
            SecretKeys.rate_limit(SecretKeys.PASSWORD_RESET, user_id),
            int(self.RATE_LIMIT_WINDOW.total_seconds()),
        )
        if count > self._max_resets_per_day:
            logger.warning("Rate limit exceeded for password reset: %s", email)
            # Still silent fail for security
            return

        raw_token = secrets.token_urlsafe(32)
        token_hash = self._hash_token(raw_token)
        ttl_seconds = self._token_ttl_minutes * 60
        pointer_key = SecretKeys.verification(SecretKeys.PASSWORD_RESET, user_id)

        # Retire the previous token, then store the new one
        previous_hash = await self._store.get(pointer_key)
        if previous_hash:
            await self._store.delete(SecretKeys.password_reset(previous_hash))
        await self._store.set(SecretKeys.password_reset(token_hash), user_id, ttl_seconds)
        await self._store.set(pointer_key, token_hash, ttl_seconds)

        reset_link = f"{self._frontend_base_url}/reset-password?token={raw_token}"
        try:
            await self._email_service.send_password_reset_email(
                to_email=user.email,
                name=user.name,
                reset_link=reset_link,
                ttl_minutes=self._token_ttl_minutes,
            )
            logger.info("Password reset email sent to %s", user.email)
        except EmailDeliveryError as e:
            logger.error("Failed to send password reset email: %s", e)
            # Don't raise - we already created the token

    async def reset_password(self, token: str, new_password: str) -> None:
        token_hash = self._hash_token(token)
        token_key = SecretKeys.password_reset(token_hash)

        user_id = await self._store.get(token_key)
        if not user_id:
            raise InvalidResetTokenError

        try:
            user = await self._user_repo.find_by_id(uuid.UUID(user_id))
        except ValueError as e:
            raise InvalidResetTokenError from e
        if user is None:
            raise InvalidResetTokenError

        user.change_password_hash(self._password_service.hash(new_password))
        await self._user_repo.save(user)
        await self._user_repo.commit()

        await self._store.delete(
            token_key,
            SecretKeys.verification(SecretKeys.PASSWORD_RESET, user_id),
        )
        await self._session_service.revoke(user_id)
        logger.info("Password reset completed for user: %s", user_id)
