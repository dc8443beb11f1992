# =============================================================================
# tests/test_auth_service.py - Supabase Auth Tests
# =============================================================================
# This module contains tests for:
# - Account creation after a verified code (session / sign-in fallback)
# - Password sign-in
# - OAuth URL generation
#
# Tests use a mocked Supabase auth client.
# =============================================================================

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from supabase import AuthError

from app.exceptions import LoginFailedError, OAuthError, SignupFailedError
from core.models.auth import OAuthProvider, SignupStatus
from core.services.auth_service import AuthService, session_to_model

EMAIL = "jane@example.com"
PASSWORD = "s3cret-pass"


def make_session(user_id: str = "user-123", email: str = EMAIL):
    """Stand-in for a supabase Session."""
    return SimpleNamespace(
        access_token="access-token",
        refresh_token="refresh-token",
        expires_in=3600,
        token_type="bearer",
        user=SimpleNamespace(id=user_id, email=email),
    )


@pytest.fixture
def auth_client():
    """Patch create_auth_client; returns the mocked client."""
    with patch("core.services.auth_service.SupabaseClient") as mock_supabase:
        client = MagicMock()
        mock_supabase.create_auth_client.return_value = client
        yield client


# =============================================================================
# Session Conversion
# =============================================================================

class TestSessionToModel:
    """Test session_to_model."""

    def test_converts_session(self):
        session = session_to_model(make_session())

        assert session.access_token == "access-token"
        assert session.user_id == "user-123"
        assert session.email == EMAIL
        assert session.token_type == "bearer"


# =============================================================================
# Complete Signup
# =============================================================================

class TestCompleteSignup:
    """Test AuthService.complete_signup."""

    def test_session_returned_by_sign_up(self, auth_client):
        """Test an immediate session makes the account active."""
        # Arrange
        auth_client.auth.sign_up.return_value = SimpleNamespace(
            session=make_session(), user=SimpleNamespace(id="user-123")
        )

        # Act
        result = AuthService.complete_signup(EMAIL, PASSWORD, "Jane")

        # Assert
        assert result.status == SignupStatus.ACTIVE
        assert result.session.access_token == "access-token"
        assert result.requires_login is False
        auth_client.auth.sign_in_with_password.assert_not_called()

    def test_sign_up_payload(self, auth_client):
        """Test redirect URL and user metadata sent to Supabase."""
        auth_client.auth.sign_up.return_value = SimpleNamespace(
            session=make_session(), user=SimpleNamespace(id="user-123")
        )

        AuthService.complete_signup(EMAIL, PASSWORD, "Jane")

        payload = auth_client.auth.sign_up.call_args[0][0]
        assert payload["email"] == EMAIL
        assert payload["password"] == PASSWORD
        assert payload["options"]["email_redirect_to"] == "http://localhost:5173/"
        assert payload["options"]["data"] == {"full_name": "Jane", "email_verified": True}

    def test_no_session_signs_in(self, auth_client):
        """Test a created user without session is signed in with the password."""
        auth_client.auth.sign_up.return_value = SimpleNamespace(
            session=None, user=SimpleNamespace(id="user-123")
        )
        auth_client.auth.sign_in_with_password.return_value = SimpleNamespace(
            session=make_session()
        )

        result = AuthService.complete_signup(EMAIL, PASSWORD)

        assert result.status == SignupStatus.ACTIVE
        assert result.session is not None
        auth_client.auth.sign_in_with_password.assert_called_once_with(
            {"email": EMAIL, "password": PASSWORD}
        )

    def test_sign_in_failure_requires_login(self, auth_client):
        """Test a failed automatic sign-in asks the user to log in."""
        auth_client.auth.sign_up.return_value = SimpleNamespace(
            session=None, user=SimpleNamespace(id="user-123")
        )
        auth_client.auth.sign_in_with_password.side_effect = AuthError(
            "Email not confirmed", "email_not_confirmed"
        )

        result = AuthService.complete_signup(EMAIL, PASSWORD)

        assert result.status == SignupStatus.CREATED
        assert result.requires_login is True
        assert result.session is None
        assert result.message == "Account created! Please sign in with your credentials."

    def test_sign_in_without_session_requires_login(self, auth_client):
        """Test a sign-in that returns no session asks the user to log in."""
        # Arrange
        auth_client.auth.sign_up.return_value = SimpleNamespace(
            session=None, user=SimpleNamespace(id="user-123")
        )
        auth_client.auth.sign_in_with_password.return_value = SimpleNamespace(
            session=None, user=None
        )

        # Act
        result = AuthService.complete_signup(EMAIL, PASSWORD)

        # Assert
        assert result.status == SignupStatus.CREATED
        assert result.requires_login is True
        assert result.session is None

    def test_provider_error_passed_through(self, auth_client):
        """Test Supabase's message is surfaced unchanged."""
        auth_client.auth.sign_up.side_effect = AuthError(
            "User already registered", "user_already_exists"
        )

        with pytest.raises(SignupFailedError) as exc_info:
            AuthService.complete_signup(EMAIL, PASSWORD)

        assert exc_info.value.message == "User already registered"

    def test_no_user_created(self, auth_client):
        auth_client.auth.sign_up.return_value = SimpleNamespace(session=None, user=None)

        with pytest.raises(SignupFailedError):
            AuthService.complete_signup(EMAIL, PASSWORD)


# =============================================================================
# Login
# =============================================================================

class TestLogin:
    """Test AuthService.login."""

    def test_success(self, auth_client):
        auth_client.auth.sign_in_with_password.return_value = SimpleNamespace(
            session=make_session()
        )

        session = AuthService.login(" JANE@example.com", PASSWORD)

        assert session.access_token == "access-token"
        auth_client.auth.sign_in_with_password.assert_called_once_with(
            {"email": EMAIL, "password": PASSWORD}
        )

    def test_invalid_credentials(self, auth_client):
        auth_client.auth.sign_in_with_password.side_effect = AuthError(
            "Invalid login credentials", "invalid_credentials"
        )

        with pytest.raises(LoginFailedError) as exc_info:
            AuthService.login(EMAIL, "wrong-pass")

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid login credentials"


# =============================================================================
# OAuth
# =============================================================================

class TestOAuthURL:
    """Test AuthService.oauth_url."""

    def test_google_url(self, auth_client):
        auth_client.auth.sign_in_with_oauth.return_value = SimpleNamespace(
            provider="google", url="https://accounts.google.com/o/oauth2/auth?x=1"
        )

        url = AuthService.oauth_url(OAuthProvider.GOOGLE)

        assert url.startswith("https://accounts.google.com")
        payload = auth_client.auth.sign_in_with_oauth.call_args[0][0]
        assert payload == {
            "provider": "google",
            "options": {"redirect_to": "http://localhost:5173/"},
        }

    def test_custom_redirect(self, auth_client):
        auth_client.auth.sign_in_with_oauth.return_value = SimpleNamespace(
            provider="google", url="https://accounts.google.com/o/oauth2/auth"
        )

        AuthService.oauth_url(OAuthProvider.GOOGLE, "http://localhost:5173/profile")

        payload = auth_client.auth.sign_in_with_oauth.call_args[0][0]
        assert payload["options"]["redirect_to"] == "http://localhost:5173/profile"

    def test_provider_error(self, auth_client):
        auth_client.auth.sign_in_with_oauth.side_effect = AuthError(
            "Unsupported provider", "validation_failed"
        )

        with pytest.raises(OAuthError):
            AuthService.oauth_url(OAuthProvider.GOOGLE)
