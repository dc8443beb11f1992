# =============================================================================
# core/services/auth_service.py - Supabase Auth Operations
# =============================================================================
# Account creation, password sign-in and OAuth URLs, all delegated to
# Supabase Auth. Provider error messages are passed through unchanged.
# =============================================================================

import logging
from typing import Any

from supabase import AuthError

from app.config import settings
from app.exceptions import LoginFailedError, OAuthError, SignupFailedError
from core.models.auth import (
    AuthSession,
    OAuthProvider,
    SignupCompleteResponse,
    SignupStatus,
)
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_email

logger = logging.getLogger(__name__)


def session_to_model(session: Any) -> AuthSession:
    """Convert a Supabase Session object into the API's AuthSession."""
    user = getattr(session, "user", None)
    return AuthSession(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=getattr(session, "expires_in", None),
        token_type=getattr(session, "token_type", None) or "bearer",
        user_id=str(user.id) if user else "",
        email=getattr(user, "email", None) if user else None,
    )


class AuthService:
    """
    Service for Supabase Auth calls.

    Each call uses a fresh anon-key client so no session state is shared
    between requests.
    """

    @staticmethod
    def _requires_login() -> SignupCompleteResponse:
        return SignupCompleteResponse(
            status=SignupStatus.CREATED,
            message="Account created! Please sign in with your credentials.",
            requires_login=True,
        )

    @staticmethod
    def complete_signup(email: str, password: str, full_name: str = "") -> SignupCompleteResponse:
        """
        Create the account for a verified email and try to sign it in.

        Outcomes:
        - sign_up returned a session -> ACTIVE with that session
        - user created, no session   -> sign in with the password;
                                        ACTIVE on success, CREATED
                                        (requires_login) on failure

        Raises:
            SignupFailedError: Supabase refused to create the account
        """
        email = normalize_email(email)
        client = SupabaseClient.create_auth_client()

        try:
            response = client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {
                    "email_redirect_to": f"{settings.FRONTEND_URL.rstrip('/')}/",
                    "data": {
                        "full_name": full_name,
                        "email_verified": True,
                    },
                },
            })
        except AuthError as e:
            logger.warning(f"Account creation failed for {email}: {e.message}")
            raise SignupFailedError(e.message)

        if response.session:
            logger.info(f"Account created and signed in: {email}")
            return SignupCompleteResponse(
                status=SignupStatus.ACTIVE,
                message="Welcome to Skin Sense. Your account is now active.",
                session=session_to_model(response.session),
            )

        if response.user is None:
            raise SignupFailedError("Account creation returned no user")

        try:
            signin = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            logger.info(f"Account created for {email}; automatic sign-in failed: {e.message}")
            return AuthService._requires_login()

        if not signin.session:
            logger.info(f"Account created for {email}; automatic sign-in returned no session")
            return AuthService._requires_login()

        logger.info(f"Account created for {email}; signed in after signup")
        return SignupCompleteResponse(
            status=SignupStatus.ACTIVE,
            message="Welcome to Skin Sense. Your account is now active.",
            session=session_to_model(signin.session),
        )

    @staticmethod
    def login(email: str, password: str) -> AuthSession:
        """
        Sign in with email and password.

        Raises:
            LoginFailedError: Wrong credentials or unconfirmed account
        """
        email = normalize_email(email)
        client = SupabaseClient.create_auth_client()

        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            logger.info(f"Sign-in failed for {email}: {e.message}")
            raise LoginFailedError(e.message)

        if not response.session:
            raise LoginFailedError("Sign-in returned no session")

        logger.info(f"Signed in: {email}")
        return session_to_model(response.session)

    @staticmethod
    def oauth_url(provider: OAuthProvider, redirect_to: str | None = None) -> str:
        """
        Build the provider's consent-screen URL.

        Args:
            provider: OAuth provider (only Google is offered)
            redirect_to: Where Supabase sends the user afterwards
                (default: the frontend root)

        Raises:
            OAuthError: Supabase could not produce a URL
        """
        client = SupabaseClient.create_auth_client()
        redirect = redirect_to or f"{settings.FRONTEND_URL.rstrip('/')}/"

        try:
            response = client.auth.sign_in_with_oauth({
                "provider": provider.value,
                "options": {"redirect_to": redirect},
            })
        except AuthError as e:
            raise OAuthError(provider.value, e.message)

        if not response.url:
            raise OAuthError(provider.value, "no URL returned")
        return response.url
