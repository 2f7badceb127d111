"""Unit tests for SessionService (real JWT + in-memory store)."""

from datetime import timedelta

import pytest

from mindwell_auth import InvalidTokenError, JWTService, TokenExpiredError
from mindwell_identity.application.services import SessionService
from mindwell_identity.domain.user import User
from mindwell_identity.exceptions import SessionExpiredError
from mindwell_identity.infrastructure.secrets import InMemorySecretStore
from mindwell_identity.repositories import SecretKeys
from mindwell_identity.schemas import SessionData


class TestSessionService:
    def setup_method(self):
        self.store = InMemorySecretStore()
        self.jwt_service = JWTService(secret_key="test-secret")
        self.service = SessionService(
            secret_store=self.store,
            jwt_service=self.jwt_service,
        )
        self.user = User.create("Ann", "ann@x.com", "hash", user_type="therapist")

    @pytest.mark.asyncio
    async def test_issue_for_user_stores_session_and_returns_bound_token(self):
        token = await self.service.issue_for_user(self.user)

        claims = self.jwt_service.verify_token(token)
        raw = await self.store.get(SecretKeys.session(str(self.user.id)))
        session = SessionData.from_json(raw)

        assert claims.user_id == str(self.user.id)
        assert claims.email == "ann@x.com"
        assert claims.user_type == "therapist"
        assert claims.session_id == session.session_id
        assert session.is_guest is False

    @pytest.mark.asyncio
    async def test_resolve_returns_identity(self):
        token = await self.service.issue_for_user(self.user)

        identity = await self.service.resolve(token)

        assert identity.user_id == str(self.user.id)
        assert identity.user_type == "therapist"
        assert identity.is_guest is False

    @pytest.mark.asyncio
    async def test_resolve_after_revoke_raises_session_expired(self):
        token = await self.service.issue_for_user(self.user)

        await self.service.revoke(str(self.user.id))

        with pytest.raises(SessionExpiredError):
            await self.service.resolve(token)

    @pytest.mark.asyncio
    async def test_revoke_without_session_is_not_an_error(self):
        await self.service.revoke("nobody")

    @pytest.mark.asyncio
    async def test_new_session_replaces_previous_one(self):
        """Only the most recent login's token is honored."""
        first = await self.service.issue_for_user(self.user)
        second = await self.service.issue_for_user(self.user)

        assert (await self.service.resolve(second)).user_id == str(self.user.id)
        with pytest.raises(SessionExpiredError):
            await self.service.resolve(first)

    @pytest.mark.asyncio
    async def test_resolve_tampered_token_raises_invalid_token(self):
        token = await self.service.issue_for_user(self.user)

        with pytest.raises(InvalidTokenError):
            await self.service.resolve(token.rsplit(".", 1)[0] + ".invalidsignature")

    @pytest.mark.asyncio
    async def test_resolve_expired_token_raises_token_expired(self):
        token = self.jwt_service.create_token(
            str(self.user.id), "ann@x.com", "patient", "sid",
            expires_delta=timedelta(seconds=-1),
        )

        with pytest.raises(TokenExpiredError):
            await self.service.resolve(token)

    @pytest.mark.asyncio
    async def test_unreadable_session_record_counts_as_expired(self):
        token = await self.service.issue_for_user(self.user)
        await self.store.set(SecretKeys.session(str(self.user.id)), "garbage", 60)

        with pytest.raises(SessionExpiredError):
            await self.service.resolve(token)

    @pytest.mark.asyncio
    async def test_guest_session(self):
        context, token = await self.service.issue_for_guest()

        identity = await self.service.resolve(token)
        claims = self.jwt_service.verify_token(token)

        assert context.user_id.startswith(SessionService.GUEST_ID_PREFIX)
        assert identity.is_guest is True
        assert identity.user_type == "patient"
        assert identity.email == SessionService.GUEST_EMAIL
        assert claims.exp - claims.exp.now(tz=claims.exp.tzinfo) <= timedelta(hours=24)

    @pytest.mark.asyncio
    async def test_guest_ids_are_unique(self):
        first, _ = await self.service.issue_for_guest()
        second, _ = await self.service.issue_for_guest()

        assert first.user_id != second.user_id

    @pytest.mark.asyncio
    async def test_mark_email_verified_updates_live_session(self):
        token = await self.service.issue_for_user(self.user)

        await self.service.mark_email_verified(str(self.user.id))

        identity = await self.service.resolve(token)
        assert identity.is_email_verified is True

    @pytest.mark.asyncio
    async def test_mark_email_verified_without_session_is_noop(self):
        await self.service.mark_email_verified(str(self.user.id))

        assert await self.store.get(SecretKeys.session(str(self.user.id))) is None
