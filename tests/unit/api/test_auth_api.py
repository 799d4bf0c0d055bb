"""HTTP tests for sign-up, sign-in, sessions and bearer tokens."""

from fastapi.testclient import TestClient

from src.farmconnect.api.http.deps import SESSION_COOKIE
from tests.utils import register, sign_in, sign_up


class TestSignUpEndpoint:
    def test_sign_up_returns_profile(self, client: TestClient):
        user = sign_up(client, "priya@example.com", user_type="farmer", full_name="Priya Sharma")

        assert user["email"] == "priya@example.com"
        assert user["profile"]["user_type"] == "farmer"
        assert user["profile"]["full_name"] == "Priya Sharma"

    def test_duplicate_email(self, client: TestClient):
        sign_up(client, "priya@example.com")
        response = client.post(
            "/auth/sign-up", json={"email": "priya@example.com", "password": "secret123"}
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "User already registered"

    def test_unknown_user_type_is_rejected(self, client: TestClient):
        response = client.post(
            "/auth/sign-up",
            json={"email": "x@example.com", "password": "secret123", "user_type": "admin"},
        )
        assert response.status_code == 422

    def test_short_password(self, client: TestClient):
        response = client.post(
            "/auth/sign-up", json={"email": "x@example.com", "password": "123"}
        )
        assert response.status_code == 400


class TestSessionEndpoints:
    def test_sign_in_sets_cookie_and_returns_token(self, client: TestClient):
        sign_up(client, "asha@example.com", full_name="Asha Rao")
        result = sign_in(client, "asha@example.com")

        assert result["token_type"] == "bearer"
        assert result["access_token"]
        assert "session_id" not in result
        assert client.cookies.get(SESSION_COOKIE)

    def test_wrong_password(self, client: TestClient):
        sign_up(client, "asha@example.com")
        response = client.post(
            "/auth/sign-in", json={"email": "asha@example.com", "password": "nope"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid login credentials"

    def test_me_with_session_cookie(self, client: TestClient):
        register(client, "asha@example.com", full_name="Asha Rao")

        response = client.get("/auth/me")

        assert response.status_code == 200
        assert response.json()["profile"]["full_name"] == "Asha Rao"

    def test_me_with_bearer_token(self, client: TestClient):
        result = register(client, "asha@example.com")
        client.cookies.clear()

        response = client.get(
            "/auth/me", headers={"Authorization": f"Bearer {result['access_token']}"}
        )

        assert response.status_code == 200
        assert response.json()["email"] == "asha@example.com"

    def test_me_requires_authentication(self, client: TestClient):
        response = client.get("/auth/me")
        assert response.status_code == 401

    def test_invalid_bearer_token(self, client: TestClient):
        response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_session_bound_to_user_agent(self, client: TestClient):
        register(client, "asha@example.com")

        response = client.get("/auth/me", headers={"User-Agent": "another-browser"})
        assert response.status_code == 401
        # The mismatch revoked the session for the original client too
        assert client.get("/auth/me").status_code == 401

    def test_sign_out(self, client: TestClient):
        register(client, "asha@example.com")

        response = client.post("/auth/sign-out")

        assert response.status_code == 200
        assert client.get("/auth/me").status_code == 401

    def test_change_password(self, client: TestClient):
        register(client, "asha@example.com")

        response = client.post(
            "/auth/change-password",
            json={"current_password": "secret123", "new_password": "harvest2024"},
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Password updated successfully"}
        # The current session survives
        assert client.get("/auth/me").status_code == 200
        assert sign_in(client, "asha@example.com", password="harvest2024")

    def test_change_password_wrong_current(self, client: TestClient):
        register(client, "asha@example.com")
        response = client.post(
            "/auth/change-password",
            json={"current_password": "wrong", "new_password": "harvest2024"},
        )
        assert response.status_code == 400
