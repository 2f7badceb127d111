import logging
import secrets
import uuid
from datetime import timedelta

from mindwell_auth import JWTService
from mindwell_identity.application.services.session_service import SessionService
from mindwell_identity.domain.user import User, UserNotFoundError, UserRepository
from mindwell_identity.exceptions import (
    InvalidVerificationCodeError,
    RateLimitExceededError,
)
from mindwell_identity.infrastructure.email import EmailDeliveryError, EmailService
from mindwell_identity.repositories import SecretKeys, SecretStore

logger = logging.getLogger(__name__)


class EmailVerificationService:
    """Issues and redeems the 6-digit email verification codes."""

    CODE_LENGTH = 6
    RATE_LIMIT_WINDOW = timedelta(hours=1)

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        secret_store: SecretStore,
        jwt_service: JWTService,
        session_service: SessionService,
        email_service: EmailService,
        code_ttl_minutes: int = 10,
        max_codes_per_hour: int = 5,
    ):
        self._user_repo = user_repository
        self._store = secret_store
        self._jwt_service = jwt_service
        self._session_service = session_service
        self._email_service = email_service
        self._code_ttl_minutes = code_ttl_minutes
        self._max_codes_per_hour = max_codes_per_hour

    def _generate_code(self) -> str:
        return f"{secrets.randbelow(10**self.CODE_LENGTH):0{self.CODE_LENGTH}d}"

    async def issue_code(self, user: User) -> str:
        """Store a fresh code for the user and email it.

        The new code replaces any earlier one. A delivery failure is logged
        and swallowed: the code stays valid and can be re-sent.

        Raises
        ------
        RateLimitExceededError
            If the user has requested too many codes in the current hour
        """
        user_id = str(user.id)

        count = await self._store.increment(
            SecretKeys.rate_limit(SecretKeys.EMAIL_VERIFICATION, user_id),
            int(self.RATE_LIMIT_WINDOW.total_seconds()),
        )
        if count > self._max_codes_per_hour:
            logger.warning("Rate limit exceeded for verification codes: %s", user.email)
            raise RateLimitExceededError

        code = self._generate_code()
        await self._store.set(
            SecretKeys.verification(SecretKeys.EMAIL_VERIFICATION, user_id),
            code,
            self._code_ttl_minutes * 60,
        )

        try:
            await self._email_service.send_verification_email(
                to_email=user.email,
                name=user.name,
                code=code,
                ttl_minutes=self._code_ttl_minutes,
            )
        except EmailDeliveryError as e:
            logger.error("Failed to send verification email: %s", e)

        return code

    async def verify(self, token: str, code: str) -> User:
        """Redeem a verification code for the token's user.

        Raises
        ------
        InvalidTokenError
            If the bearer token is missing its signature or malformed
        InvalidVerificationCodeError
            If no live code exists for the user or it does not match
        """
        claims = self._jwt_service.verify_token(token)
        key = SecretKeys.verification(SecretKeys.EMAIL_VERIFICATION, claims.user_id)

        stored = await self._store.get(key)
        if stored is None or not secrets.compare_digest(stored, code):
            raise InvalidVerificationCodeError

        try:
            user_id = uuid.UUID(claims.user_id)
        except ValueError as e:
            raise InvalidVerificationCodeError from e

        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise InvalidVerificationCodeError

        user.mark_email_verified()
        await self._user_repo.save(user)
        await self._user_repo.commit()
        await self._store.delete(key)
        await self._session_service.mark_email_verified(claims.user_id)

        logger.info("Email verified: %s", user.email)
        return user

    async def resend(self, user_id: str) -> bool:
        """Issue a new code for an unverified user.

        Returns False without sending anything if the user is already
        verified.
        """
        user = await self._user_repo.find_by_id(uuid.UUID(user_id))
        if user is None:
            raise UserNotFoundError(user_id)

        if user.is_email_verified:
            return False

        await self.issue_code(user)
        logger.info("Verification code re-sent: %s", user.email)
        return True
