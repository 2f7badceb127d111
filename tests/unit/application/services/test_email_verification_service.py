"""Unit tests for EmailVerificationService."""

from unittest.mock import AsyncMock, Mock

import pytest

from mindwell_auth import InvalidTokenError, JWTService
from mindwell_identity.application.services import (
    EmailVerificationService,
    SessionService,
)
from mindwell_identity.domain.user import User, UserNotFoundError
from mindwell_identity.exceptions import (
    InvalidVerificationCodeError,
    RateLimitExceededError,
)
from mindwell_identity.infrastructure.email import EmailDeliveryError, EmailService
from mindwell_identity.infrastructure.secrets import InMemorySecretStore
from mindwell_identity.repositories import SecretKeys


class TestEmailVerificationServiceBase:
    def setup_method(self):
        self.user = User.create("Ann", "ann@x.com", "hash")
        self.user_id = str(self.user.id)

        self.user_repo = AsyncMock()
        self.user_repo.find_by_id.return_value = self.user
        self.store = InMemorySecretStore()
        self.jwt_service = JWTService(secret_key="test-secret")
        self.session_service = Mock(spec=SessionService)
        self.email_service = Mock(spec=EmailService)

        self.service = EmailVerificationService(
            user_repository=self.user_repo,
            secret_store=self.store,
            jwt_service=self.jwt_service,
            session_service=self.session_service,
            email_service=self.email_service,
            code_ttl_minutes=10,
            max_codes_per_hour=3,
        )

    def _token_for(self, user_id: str) -> str:
        return self.jwt_service.create_token(user_id, "ann@x.com", "patient", "sid")

    async def _stored_code(self) -> str | None:
        return await self.store.get(
            SecretKeys.verification(SecretKeys.EMAIL_VERIFICATION, self.user_id),
        )


class TestIssueCode(TestEmailVerificationServiceBase):
    @pytest.mark.asyncio
    async def test_code_is_six_digits_and_stored(self):
        code = await self.service.issue_code(self.user)

        assert len(code) == 6
        assert code.isdigit()
        assert await self._stored_code() == code

    @pytest.mark.asyncio
    async def test_code_is_emailed(self):
        code = await self.service.issue_code(self.user)

        self.email_service.send_verification_email.assert_awaited_once_with(
            to_email="ann@x.com", name="Ann", code=code, ttl_minutes=10
        )

    @pytest.mark.asyncio
    async def test_new_code_supersedes_previous(self):
        await self.service.issue_code(self.user)
        second = await self.service.issue_code(self.user)

        assert await self._stored_code() == second

    @pytest.mark.asyncio
    async def test_delivery_failure_is_swallowed(self):
        self.email_service.send_verification_email.side_effect = EmailDeliveryError(
            "ann@x.com", "smtp down"
        )

        code = await self.service.issue_code(self.user)

        assert await self._stored_code() == code

    @pytest.mark.asyncio
    async def test_rate_limit(self):
        for _ in range(3):
            await self.service.issue_code(self.user)

        with pytest.raises(RateLimitExceededError):
            await self.service.issue_code(self.user)


class TestVerify(TestEmailVerificationServiceBase):
    @pytest.mark.asyncio
    async def test_correct_code_verifies_user_once(self):
        code = await self.service.issue_code(self.user)
        token = self._token_for(self.user_id)

        user = await self.service.verify(token, code)

        assert user.is_email_verified is True
        self.user_repo.save.assert_awaited_once_with(self.user)
        self.session_service.mark_email_verified.assert_awaited_once_with(self.user_id)
        assert await self._stored_code() is None

        # Code is consumed
        with pytest.raises(InvalidVerificationCodeError):
            await self.service.verify(token, code)

    @pytest.mark.asyncio
    async def test_failed_commit_keeps_code(self):
        code = await self.service.issue_code(self.user)
        self.user_repo.commit.side_effect = RuntimeError("database unavailable")

        with pytest.raises(RuntimeError):
            await self.service.verify(self._token_for(self.user_id), code)

        assert await self._stored_code() == code
        self.session_service.mark_email_verified.assert_not_called()

    @pytest.mark.asyncio
    async def test_wrong_code_raises_and_keeps_stored_code(self):
        code = await self.service.issue_code(self.user)
        wrong = "000000" if code != "000000" else "111111"

        with pytest.raises(InvalidVerificationCodeError):
            await self.service.verify(self._token_for(self.user_id), wrong)

        assert await self._stored_code() == code
        self.user_repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_code_issued_raises(self):
        with pytest.raises(InvalidVerificationCodeError):
            await self.service.verify(self._token_for(self.user_id), "123456")

    @pytest.mark.asyncio
    async def test_invalid_token_raises(self):
        with pytest.raises(InvalidTokenError):
            await self.service.verify("not-a-token", "123456")

    @pytest.mark.asyncio
    async def test_guest_token_has_no_code(self):
        with pytest.raises(InvalidVerificationCodeError):
            await self.service.verify(self._token_for("guest_abc"), "123456")


class TestResend(TestEmailVerificationServiceBase):
    @pytest.mark.asyncio
    async def test_resend_issues_new_code(self):
        assert await self.service.resend(self.user_id) is True
        assert await self._stored_code() is not None

    @pytest.mark.asyncio
    async def test_resend_for_verified_user_is_noop(self):
        self.user.mark_email_verified()

        assert await self.service.resend(self.user_id) is False
        self.email_service.send_verification_email.assert_not_called()

    @pytest.mark.asyncio
    async def test_resend_for_missing_user_raises(self):
        self.user_repo.find_by_id.return_value = None

        with pytest.raises(UserNotFoundError):
            await self.service.resend(self.user_id)
