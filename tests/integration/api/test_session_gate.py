"""HTTP tests for the session gate and the authorization dependencies."""

from unittest.mock import AsyncMock, Mock

from fastapi.testclient import TestClient

from mindwell.presentation.api.dependencies import get_secret_store
from mindwell_identity.repositories import SecretStore, SecretStoreError


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _signup(test_client, auth_url, signup_payload, **overrides) -> str:
    response = test_client.post(auth_url("signup"), json={**signup_payload, **overrides})
    assert response.status_code == 201
    return response.json()["token"]


class TestSessionGate:
    def test_me_returns_identity(self, test_client, auth_url, signup_payload):
        token = _signup(test_client, auth_url, signup_payload)

        response = test_client.get(auth_url("me"), headers=_bearer(token))

        assert response.status_code == 200
        identity = response.json()["identity"]
        assert identity["email"] == "ann@x.com"
        assert identity["userType"] == "patient"
        assert identity["isGuest"] is False
        assert identity["isEmailVerified"] is False

    def test_missing_token(self, test_client, auth_url):
        response = test_client.get(auth_url("me"))

        assert response.status_code == 401
        assert response.json()["code"] == "NO_TOKEN"

    def test_non_bearer_scheme_counts_as_missing(self, test_client, auth_url):
        response = test_client.get(auth_url("me"), headers={"Authorization": "Basic abc"})

        assert response.status_code == 401
        assert response.json()["code"] == "NO_TOKEN"

    def test_garbage_token(self, test_client, auth_url):
        response = test_client.get(auth_url("me"), headers=_bearer("garbage"))

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid token.", "code": "INVALID_TOKEN"}


class TestUserTypeGate:
    def test_patient_is_forbidden(self, test_client, auth_url, signup_payload):
        token = _signup(test_client, auth_url, signup_payload)

        response = test_client.get("/test/therapist-only", headers=_bearer(token))

        assert response.status_code == 403
        assert response.json() == {
            "message": "Access denied. therapist role required.",
            "code": "FORBIDDEN",
        }

    def test_therapist_passes(self, test_client, auth_url, signup_payload):
        token = _signup(
            test_client, auth_url, signup_payload, email="bo@x.com", userType="therapist"
        )

        response = test_client.get("/test/therapist-only", headers=_bearer(token))

        assert response.status_code == 200

    def test_gate_still_requires_session(self, test_client):
        response = test_client.get("/test/therapist-only")

        assert response.status_code == 401


class TestVerifiedEmailGate:
    def test_unverified_user_is_forbidden(self, test_client, auth_url, signup_payload):
        token = _signup(test_client, auth_url, signup_payload)

        response = test_client.get("/test/verified-only", headers=_bearer(token))

        assert response.status_code == 403
        assert response.json()["code"] == "EMAIL_NOT_VERIFIED"

    def test_verified_user_passes(
        self, test_client, auth_url, signup_payload, last_verification_code
    ):
        token = _signup(test_client, auth_url, signup_payload)
        test_client.post(
            auth_url("verify-email"),
            json={"code": last_verification_code()},
            headers=_bearer(token),
        )

        response = test_client.get("/test/verified-only", headers=_bearer(token))

        assert response.status_code == 200

    def test_guest_passes(self, test_client, auth_url):
        guest_token = test_client.post(auth_url("guest")).json()["guestToken"]

        response = test_client.get("/test/verified-only", headers=_bearer(guest_token))

        assert response.status_code == 200


class TestGenericResponses:
    def test_unknown_route(self, test_client):
        response = test_client.get("/api/v1/nowhere")

        assert response.status_code == 404
        assert response.json() == {"message": "Route not found"}

    def test_health(self, test_client):
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_secret_store_failure_is_internal_error(self, app, auth_url):
        broken_store = Mock(spec=SecretStore)
        broken_store.set = AsyncMock(side_effect=SecretStoreError("connection refused"))
        app.dependency_overrides[get_secret_store] = lambda: broken_store

        with TestClient(app) as client:
            response = client.post(auth_url("guest"))

        assert response.status_code == 500
        assert response.json() == {
            "message": "Internal server error",
            "code": "INTERNAL_ERROR",
        }
        assert "connection refused" not in response.text
