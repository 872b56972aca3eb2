"""Unit tests for authentication system."""
import pytest
from datetime import datetime, timedelta
from unittest.mock import Mock

from fastapi import Response

from quickbite.api import auth
from quickbite.core.config import settings
from quickbite.services.chat.models import Role
from quickbite.services.persistence.users import hash_password

MEMBER = auth.SessionUser(user_id=1, email="member@example.com", name="Test Member", role=Role.MEMBER)


def mock_response():
    response = Mock(spec=Response)
    response.set_cookie = Mock()
    return response


class TestPasswordHashing:
    """Test password hashing functions."""

    def test_hash_password(self):
        """Test that password is hashed correctly with SHA256."""
        hashed = hash_password("testpassword123")

        # SHA256 produces 64 character hex string
        assert len(hashed) == 64
        assert isinstance(hashed, str)

    def test_same_password_same_hash(self):
        assert hash_password("pw") == hash_password("pw")

    def test_different_passwords_different_hashes(self):
        assert hash_password("password1") != hash_password("password2")


class TestSessionManagement:
    """Test session creation and verification."""

    def test_create_session(self):
        """Test that session is created with correct structure."""
        response = mock_response()

        token = auth.create_session(response, MEMBER)

        assert len(token) >= 40
        assert token in auth._sessions
        response.set_cookie.assert_called_once()

        session = auth._sessions[token]
        assert session["user"] == MEMBER

        # Should be close to the configured TTL (within 1 minute tolerance)
        time_diff = session["expires_at"] - datetime.utcnow()
        ttl = timedelta(hours=settings.session_ttl_hours)
        assert ttl - timedelta(minutes=1) < time_diff <= ttl

    def test_verify_session_valid(self):
        token = auth.create_session(mock_response(), MEMBER)
        assert auth.verify_session(token) == MEMBER

    def test_verify_session_invalid_token(self):
        assert auth.verify_session("invalid_token_12345") is None
        assert auth.verify_session(None) is None

    def test_verify_session_expired(self):
        """Test that expired session returns None and is cleaned up."""
        token = auth.create_session(mock_response(), MEMBER)
        auth._sessions[token]["expires_at"] = datetime.utcnow() - timedelta(hours=1)

        assert auth.verify_session(token) is None
        assert token not in auth._sessions


class TestAuthAPIEndpoints:
    """Test authentication API endpoints."""

    @pytest.mark.asyncio
    async def test_register_signs_in(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "new@example.com", "name": "New Member", "password": "pw123"},
        )
        assert response.status_code == 200
        assert "session_token" in response.cookies

        session = (await client.get("/api/auth/session")).json()
        assert session["authenticated"] is True
        assert session["role"] == "Member"
        assert session["email"] == "new@example.com"

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client, member):
        response = await client.post(
            "/api/auth/register",
            json={"email": member.email, "name": "Again", "password": "pw"},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_login_success(self, client, member):
        response = await client.post(
            "/api/auth/login",
            json={"email": "member@example.com", "password": "member-pass"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["role"] == "Member"
        assert response.cookies["session_token"] in auth._sessions

    @pytest.mark.asyncio
    async def test_login_failure(self, client, member):
        response = await client.post(
            "/api/auth/login",
            json={"email": "member@example.com", "password": "wrongpassword"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"
        assert len(auth._sessions) == 0

    @pytest.mark.asyncio
    async def test_admin_login(self, admin_client):
        session = (await admin_client.get("/api/auth/session")).json()
        assert session["role"] == "Admin"

    @pytest.mark.asyncio
    async def test_logout(self, member_client):
        response = await member_client.post("/api/auth/logout")
        assert response.status_code == 200
        assert response.json()["message"] == "Logged out"
        assert len(auth._sessions) == 0

        set_cookie = response.headers.get("set-cookie", "")
        assert "max-age=0" in set_cookie.lower()

    @pytest.mark.asyncio
    async def test_get_session_status_unauthenticated(self, client):
        response = await client.get("/api/auth/session")

        assert response.status_code == 200
        data = response.json()
        assert data["authenticated"] is False
        assert data["role"] == "Guest"


class TestAccountUpdates:
    """Test password and profile updates."""

    @pytest.mark.asyncio
    async def test_update_password(self, member_client):
        response = await member_client.patch(
            "/api/auth/password",
            json={"current_password": "member-pass", "new_password": "fresh-pass"},
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Password updated"

        await member_client.post("/api/auth/logout")
        login = await member_client.post(
            "/api/auth/login",
            json={"email": "member@example.com", "password": "fresh-pass"},
        )
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_update_password_wrong_current(self, member_client):
        response = await member_client.patch(
            "/api/auth/password",
            json={"current_password": "not-it", "new_password": "fresh-pass"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Current password not matched"

    @pytest.mark.asyncio
    async def test_admin_can_update_password(self, admin_client):
        response = await admin_client.patch(
            "/api/auth/password",
            json={"current_password": settings.admin_password, "new_password": "rotated"},
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_update_password_requires_login(self, client):
        response = await client.patch(
            "/api/auth/password",
            json={"current_password": "a", "new_password": "b"},
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_get_profile(self, member_client):
        response = await member_client.get("/api/auth/profile")
        assert response.status_code == 200
        assert response.json() == {
            "email": "member@example.com",
            "name": "Test Member",
            "phone_number": None,
            "address": "1 Test Street",
        }

    @pytest.mark.asyncio
    async def test_update_profile_refreshes_session(self, member_client):
        response = await member_client.patch(
            "/api/auth/profile",
            json={"name": "Renamed Member", "phone_number": "0123456789", "address": "2 New Road"},
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Renamed Member"

        session = (await member_client.get("/api/auth/session")).json()
        assert session["name"] == "Renamed Member"

    @pytest.mark.asyncio
    async def test_admin_has_no_profile(self, admin_client):
        assert (await admin_client.get("/api/auth/profile")).status_code == 403
