# =============================================================================
# tests/test_auth.py - Admin Authentication Tests
# =============================================================================
# Tests for app/auth:
# - admin routes need a valid Supabase access token
# - login / logout / session / me
# =============================================================================

import pytest
from fastapi import HTTPException

from app.auth.dependencies import decode_token
from tests.conftest import make_token


class TestAdminGate:
    """Every /admin route rejects callers without a valid token."""

    @pytest.mark.parametrize("url", [
        "/api/v1/admin/products",
        "/api/v1/admin/stats",
        "/api/v1/admin/site-settings",
        "/api/v1/admin/contact-submissions/export",
    ])
    def test_no_token_is_401(self, client, url):
        response = client.get(url)

        assert response.status_code == 401
        assert response.json()["detail"] == "Not authenticated"
        assert response.headers["www-authenticate"] == "Bearer"

    def test_wrong_secret_is_401(self, client):
        token = make_token(secret="some-other-secret-that-is-long-enough")

        response = client.get("/api/v1/admin/products", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_expired_token_is_401(self, client):
        token = make_token(expires_in=-60)

        response = client.get("/api/v1/admin/products", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Token has expired"

    def test_garbage_token_is_401(self, client):
        response = client.get("/api/v1/admin/products", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_valid_token_is_allowed(self, client, admin_headers):
        response = client.get("/api/v1/admin/products", headers=admin_headers)
        assert response.status_code == 200

    def test_public_routes_need_no_token(self, client):
        assert client.get("/api/v1/products").status_code == 200
        assert client.get("/api/v1/categories").status_code == 200


class TestDecodeToken:
    """Tests for decode_token."""

    def test_extracts_user(self):
        token = make_token(sub="4a1f3c1e-0a1b-4c2d-9e8f-112233445566", email="owner@example.com")

        user = decode_token(token)

        assert str(user.id) == "4a1f3c1e-0a1b-4c2d-9e8f-112233445566"
        assert user.email == "owner@example.com"
        assert user.role == "authenticated"

    def test_non_uuid_subject(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_token(make_token(sub="not-a-uuid"))
        assert exc_info.value.status_code == 401


class TestAuthRoutes:
    """Tests for /api/v1/auth/*."""

    def test_login_success(self, client, auth_client):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "admin@example.com", "password": "correct-horse"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["access_token"] == "access-token"
        assert body["refresh_token"] == "refresh-token"
        assert body["token_type"] == "bearer"
        assert body["user"]["id"] == auth_client.user_id
        assert body["user"]["email"] == "admin@example.com"

    def test_login_wrong_password(self, client):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "admin@example.com", "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid login credentials"

    def test_login_missing_password_is_422(self, client):
        response = client.post("/api/v1/auth/login", json={"email": "admin@example.com"})
        assert response.status_code == 422

    def test_session_without_token(self, client):
        assert client.get("/api/v1/auth/session").json() == {"authenticated": False, "user": None}

    def test_session_with_bad_token_reports_false(self, client):
        response = client.get("/api/v1/auth/session", headers={"Authorization": "Bearer junk"})

        assert response.status_code == 200
        assert response.json()["authenticated"] is False

    def test_session_with_token(self, client, admin_headers):
        body = client.get("/api/v1/auth/session", headers=admin_headers).json()

        assert body["authenticated"] is True
        assert body["user"]["email"] == "admin@example.com"

    def test_me(self, client, admin_headers):
        response = client.get("/api/v1/auth/me", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["email"] == "admin@example.com"

    def test_me_requires_token(self, client):
        assert client.get("/api/v1/auth/me").status_code == 401

    def test_logout_revokes_session(self, client, store, admin_headers):
        response = client.post("/api/v1/auth/logout", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "revoked": True}
        assert store.signed_out == [admin_headers["Authorization"].split(" ", 1)[1]]
