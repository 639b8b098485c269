"""
Tests for the auth service's signup, login, refresh and logout endpoints.

Token fields travel as accessToken/refreshToken on the wire.
"""

import pytest
from fastapi import status

from bookstore.services.tokens import ALREADY_INVALIDATED, LOGOUT_SUCCESSFUL


def signup_body(name: str = "alice", **extra) -> dict:
    body = {"name": name, "email": f"{name}@example.com", "password": "secret123"}
    body.update(extra)
    return body


class TestSignup:
    """Tests for POST /signup and POST /admin/signup."""

    def test_signup_returns_token_pair(self, auth_client):
        response = auth_client.post("/signup", json=signup_body())

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["accessToken"]
        assert data["refreshToken"]

    def test_signup_ignores_requested_role(self, auth_client, token_signer):
        """A client asking for admin still gets the user role."""
        response = auth_client.post("/signup", json=signup_body(role="admin"))

        claims = token_signer.decode_access(response.json()["accessToken"])
        assert claims["role"] == "user"
        assert claims["username"] == "alice"

    def test_admin_signup_forces_admin_role(self, auth_client, token_signer):
        response = auth_client.post("/admin/signup", json=signup_body("root", role="user"))

        assert response.status_code == status.HTTP_200_OK
        claims = token_signer.decode_access(response.json()["accessToken"])
        assert claims["role"] == "admin"

    def test_signup_duplicate_name(self, auth_client, sample_user):
        response = auth_client.post("/signup", json=signup_body("reader"))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == "Username already exists"

    @pytest.mark.parametrize("body", [
        {"name": "bob", "password": "secret123"},
        {"name": "bob", "email": "not-an-email", "password": "secret123"},
        {"name": "   ", "email": "bob@example.com", "password": "secret123"},
    ])
    def test_signup_validation_error(self, auth_client, body):
        response = auth_client.post("/signup", json=body)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestLogin:
    """Tests for POST /login."""

    def test_login_success(self, auth_client, sample_user, token_signer):
        response = auth_client.post(
            "/login", json={"name": "reader", "password": "reader-password"}
        )

        assert response.status_code == status.HTTP_200_OK
        claims = token_signer.decode_access(response.json()["accessToken"])
        assert claims["sub"] == str(sample_user.id)
        assert claims["email"] == "reader@example.com"

    def test_login_wrong_password(self, auth_client, sample_user):
        response = auth_client.post(
            "/login", json={"name": "reader", "password": "nope"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Invalid password"

    def test_login_unknown_user(self, auth_client):
        response = auth_client.post(
            "/login", json={"name": "nobody", "password": "nope"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Invalid credentials"
        assert response.headers["www-authenticate"] == "Bearer"


class TestRefreshAndLogout:
    """Tests for POST /refresh-token and POST /logout."""

    @pytest.fixture
    def tokens(self, auth_client, sample_user) -> dict:
        response = auth_client.post(
            "/login", json={"name": "reader", "password": "reader-password"}
        )
        return response.json()

    def test_refresh_returns_access_token(self, auth_client, tokens, token_signer):
        response = auth_client.post(
            "/refresh-token", json={"refreshToken": tokens["refreshToken"]}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert set(data) == {"accessToken"}
        assert token_signer.decode_access(data["accessToken"])["username"] == "reader"

    def test_refresh_with_access_token_fails(self, auth_client, tokens):
        response = auth_client.post(
            "/refresh-token", json={"refreshToken": tokens["accessToken"]}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Token refresh failed"

    def test_refresh_requires_token(self, auth_client):
        response = auth_client.post("/refresh-token", json={})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_logout_twice_succeeds(self, auth_client, tokens):
        body = {"refreshToken": tokens["refreshToken"]}

        first = auth_client.post("/logout", json=body)
        second = auth_client.post("/logout", json=body)

        assert first.status_code == status.HTTP_200_OK
        assert first.json()["message"] == LOGOUT_SUCCESSFUL
        assert second.status_code == status.HTTP_200_OK
        assert second.json()["message"] == ALREADY_INVALIDATED

    def test_refresh_after_logout_fails(self, auth_client, tokens):
        body = {"refreshToken": tokens["refreshToken"]}
        auth_client.post("/logout", json=body)

        response = auth_client.post("/refresh-token", json=body)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout_with_garbage_token(self, auth_client):
        response = auth_client.post("/logout", json={"refreshToken": "garbage"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Invalid refresh token"


class TestHealth:
    def test_health(self, auth_client):
        response = auth_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["service"] == "auth"
