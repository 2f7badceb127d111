"""Pytest fixtures for API integration tests.

The app runs its real lifespan (in-memory SQLite, in-memory secret store);
only outbound email is replaced, so tests can read the codes and links
that would have been sent.
"""

from typing import Annotated, Any
from unittest.mock import Mock
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi import APIRouter, Depends, FastAPI
from fastapi.testclient import TestClient
from pydantic import SecretStr

from mindwell.presentation.api.app import API_V1_PREFIX, create_app
from mindwell.presentation.api.dependencies import (
    VerifiedIdentity,
    get_email_service,
    require_user_type,
)
from mindwell_config.settings import Settings
from mindwell_identity.application.context import UserContext
from mindwell_identity.domain.user import UserType
from mindwell_identity.infrastructure.email import EmailService

TEST_JWT_SECRET = "test-jwt-secret-for-testing-only"

TherapistIdentity = Annotated[
    UserContext,
    Depends(require_user_type(UserType.THERAPIST)),
]


@pytest.fixture
def api_v1_prefix() -> str:
    """Get the API v1 prefix for building URLs."""
    return API_V1_PREFIX


@pytest.fixture
def auth_url(api_v1_prefix):
    def _url(path: str) -> str:
        return f"{api_v1_prefix}/auth/{path.lstrip('/')}"

    return _url


@pytest.fixture
def api_settings() -> Settings:
    """Test API settings: everything in memory, cheap hashing."""
    return Settings(
        jwt_secret_key=SecretStr(TEST_JWT_SECRET),
        database_url_override="sqlite+aiosqlite:///:memory:",
        secret_store_backend="memory",
        password_hash_rounds=4,
        smtp_enabled=False,
        api_debug=True,
        api_cors_origins="http://localhost:3000",
        frontend_base_url="http://localhost:3000",
    )


@pytest.fixture
def email_service() -> Mock:
    """Outbound email double; async methods become AsyncMocks."""
    return Mock(spec=EmailService)


def _add_protected_routes(app: FastAPI) -> None:
    """Routes standing in for the rest of the app behind the auth gates."""
    router = APIRouter()

    @router.get("/therapist-only")
    async def therapist_only(identity: TherapistIdentity) -> dict[str, Any]:
        return {"userId": identity.user_id}

    @router.get("/verified-only")
    async def verified_only(identity: VerifiedIdentity) -> dict[str, Any]:
        return {"userId": identity.user_id}

    app.include_router(router, prefix="/test")


@pytest.fixture
def app(api_settings, email_service) -> FastAPI:
    app = create_app(settings=api_settings)
    app.dependency_overrides[get_email_service] = lambda: email_service
    _add_protected_routes(app)
    return app


@pytest.fixture
def test_client(app):
    """Create a test client; entering it runs the app lifespan."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def signup_payload() -> dict[str, str]:
    return {
        "name": "Ann",
        "email": "ann@x.com",
        "password": "Passw0rd",
        "confirmPassword": "Passw0rd",
        "userType": "patient",
    }


@pytest.fixture
def last_verification_code(email_service):
    def _code() -> str:
        return email_service.send_verification_email.call_args.kwargs["code"]

    return _code


@pytest.fixture
def last_reset_token(email_service):
    def _token() -> str:
        link = email_service.send_password_reset_email.call_args.kwargs["reset_link"]
        return parse_qs(urlparse(link).query)["token"][0]

    return _token
