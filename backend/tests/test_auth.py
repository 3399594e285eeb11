"""
Tests for authentication endpoints.
"""

from datetime import timedelta

import pytest

from rest_api.models import AdminLog, RegistrationAnalytics, User
from shared.security.password import hash_password, verify_password, needs_rehash
from shared.utils.dates import utcnow
from tests.conftest import ADMIN_PASSWORD, OWNER_PASSWORD


class TestPasswordHashing:
    """Test password hashing utilities."""

    def test_hash_password_returns_bcrypt_hash(self):
        """Hash should return bcrypt format."""
        hashed = hash_password("mypassword")
        assert hashed.startswith("$2b$")

    def test_verify_password_correct(self):
        hashed = hash_password("mypassword")
        assert verify_password("mypassword", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("mypassword")
        assert verify_password("wrongpassword", hashed) is False

    def test_plain_text_is_never_accepted(self):
        """Stored plain text must not verify, even on an exact match."""
        assert verify_password("plaintext", "plaintext") is False

    def test_needs_rehash_bcrypt(self):
        hashed = hash_password("mypassword")
        assert needs_rehash(hashed) is False


class TestRegister:
    """Test POST /api/auth/register."""

    def test_register_returns_login_payload(self, client, db_session):
        response = client.post(
            "/api/auth/register",
            json={
                "username": "newbie",
                "email": "newbie@test.com",
                "password": "longenough",
                "source": "referral",
                "utmCampaign": "spring",
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "Bearer"
        assert data["user"]["username"] == "newbie"
        assert data["user"]["subscriptionTier"] == "free"
        assert "refresh_token" in response.cookies

        analytics = db_session.query(RegistrationAnalytics).one()
        assert analytics.source == "referral"
        assert analytics.utm_campaign == "spring"

    def test_register_defaults_source_to_direct(self, client, db_session):
        client.post(
            "/api/auth/register",
            json={"username": "plain", "email": "plain@test.com", "password": "longenough"},
        )
        assert db_session.query(RegistrationAnalytics).one().source == "direct"

    def test_duplicate_username_is_rejected(self, client, owner):
        response = client.post(
            "/api/auth/register",
            json={"username": "owner", "email": "fresh@test.com", "password": "longenough"},
        )
        assert response.status_code == 400
        assert "already exists" in response.json()["detail"]

    def test_duplicate_email_is_rejected(self, client, owner):
        response = client.post(
            "/api/auth/register",
            json={"username": "fresh", "email": "owner@test.com", "password": "longenough"},
        )
        assert response.status_code == 400

    def test_short_password_is_rejected(self, client):
        response = client.post(
            "/api/auth/register",
            json={"username": "shorty", "email": "shorty@test.com", "password": "short"},
        )
        assert response.status_code == 400

    def test_invalid_email_is_a_bad_request(self, client):
        response = client.post(
            "/api/auth/register",
            json={"username": "bademail", "email": "not-an-email", "password": "longenough"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["detail"] == "Invalid request data"
        assert body["errors"]


class TestLogin:
    """Test POST /api/auth/login and /api/auth/admin-login."""

    def test_login_with_username(self, client, owner, db_session):
        response = client.post("/api/auth/login", json={"username": "owner", "password": OWNER_PASSWORD})
        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["expires_in"] > 0
        assert data["user"]["email"] == "owner@test.com"

        db_session.refresh(owner)
        assert owner.last_login is not None

    def test_login_with_email(self, client, owner):
        response = client.post("/api/auth/login", json={"username": "owner@test.com", "password": OWNER_PASSWORD})
        assert response.status_code == 200

    def test_login_wrong_password(self, client, owner):
        response = client.post("/api/auth/login", json={"username": "owner", "password": "wrongpass"})
        assert response.status_code == 401

    def test_login_unknown_user(self, client):
        response = client.post("/api/auth/login", json={"username": "ghost", "password": "whatever"})
        assert response.status_code == 401

    def test_login_inactive_user(self, client, owner, db_session):
        owner.is_active = False
        db_session.commit()
        response = client.post("/api/auth/login", json={"username": "owner", "password": OWNER_PASSWORD})
        assert response.status_code == 401

    def test_admin_login_rejects_owner(self, client, owner):
        response = client.post("/api/auth/admin-login", json={"username": "owner", "password": OWNER_PASSWORD})
        assert response.status_code == 403

    def test_admin_login_writes_admin_log(self, client, admin_user, db_session):
        response = client.post("/api/auth/admin-login", json={"username": "admin", "password": ADMIN_PASSWORD})
        assert response.status_code == 200
        assert response.json()["user"]["isAdmin"] is True

        log = db_session.query(AdminLog).one()
        assert log.action == "LOGIN"
        assert log.admin_id == admin_user.id


class TestTokens:
    """Test /me, refresh and logout."""

    def _login(self, client):
        response = client.post("/api/auth/login", json={"username": "owner", "password": OWNER_PASSWORD})
        assert response.status_code == 200, f"Login failed: {response.json()}"
        return response.json()

    def test_me_requires_token(self, client):
        assert client.get("/api/auth/me").status_code == 401

    def test_me_returns_user(self, client, owner):
        tokens = self._login(client)
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
        assert response.status_code == 200
        assert response.json()["username"] == "owner"

    def test_refresh_with_body_token(self, client, owner):
        tokens = self._login(client)
        client.cookies.clear()
        response = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert response.status_code == 200
        assert response.json()["access_token"]

    def test_refresh_without_token(self, client):
        response = client.post("/api/auth/refresh", json={})
        assert response.status_code == 401

    def test_access_token_cannot_refresh(self, client, owner):
        tokens = self._login(client)
        client.cookies.clear()
        response = client.post("/api/auth/refresh", json={"refresh_token": tokens["access_token"]})
        assert response.status_code == 401

    def test_logout_revokes_existing_tokens(self, client, owner):
        tokens = self._login(client)
        headers = {"Authorization": f"Bearer {tokens['access_token']}"}

        response = client.post("/api/auth/logout", headers=headers)
        assert response.status_code == 200
        assert response.json()["success"] is True

        assert client.get("/api/auth/me", headers=headers).status_code == 401
        client.cookies.clear()
        refreshed = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert refreshed.status_code == 401


class TestPasswordReset:
    """Test forgot-password and reset-password."""

    def test_forgot_password_same_message_for_unknown_email(self, client, owner):
        known = client.post("/api/auth/forgot-password", json={"email": "owner@test.com"})
        unknown = client.post("/api/auth/forgot-password", json={"email": "nobody@test.com"})
        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()

    def test_forgot_password_stores_token(self, client, owner, db_session):
        client.post("/api/auth/forgot-password", json={"email": "owner@test.com"})
        db_session.refresh(owner)
        assert owner.reset_password_token
        assert owner.reset_password_expires is not None

    def test_reset_password_flow(self, client, owner, db_session):
        client.post("/api/auth/forgot-password", json={"email": "owner@test.com"})
        db_session.refresh(owner)
        token = owner.reset_password_token

        response = client.post("/api/auth/reset-password", json={"token": token, "password": "brandnewpass"})
        assert response.status_code == 200

        db_session.refresh(owner)
        assert owner.reset_password_token is None
        assert owner.token_version == 1
        login = client.post("/api/auth/login", json={"username": "owner", "password": "brandnewpass"})
        assert login.status_code == 200

    def test_reset_password_rejects_expired_token(self, client, owner, db_session):
        owner.reset_password_token = "expired-token"
        owner.reset_password_expires = utcnow() - timedelta(minutes=1)
        db_session.commit()

        response = client.post("/api/auth/reset-password", json={"token": "expired-token", "password": "brandnewpass"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid or expired reset token"

    def test_reset_password_rejects_short_password(self, client, owner, db_session):
        owner.reset_password_token = "valid-token"
        owner.reset_password_expires = utcnow() + timedelta(minutes=30)
        db_session.commit()

        response = client.post("/api/auth/reset-password", json={"token": "valid-token", "password": "short"})
        assert response.status_code == 400

    def test_unknown_token(self, client):
        response = client.post("/api/auth/reset-password", json={"token": "nope", "password": "brandnewpass"})
        assert response.status_code == 400
