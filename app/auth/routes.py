# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for account creation and sign-in.
#
# Email signup is two steps:
#   POST /auth/signup         -> 6-digit code emailed (Resend)
#   POST /auth/signup/verify  -> code checked, Supabase account created
#
# Password and OAuth sign-in are delegated to Supabase Auth; the returned
# access token is what get_current_user verifies on every other route.
# =============================================================================

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, OAuthURLResponse, UserResponse
from core.models.auth import (
    AuthSession,
    LoginRequest,
    OAuthProvider,
    ResendOTPRequest,
    SignupCompleteResponse,
    SignupRequest,
    SignupStartResponse,
    VerifyOTPRequest,
)
from core.services.auth_service import AuthService
from core.services.otp_service import OTPService
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Email Signup
# =============================================================================

@router.post("/signup", response_model=SignupStartResponse)
async def start_signup(request: SignupRequest) -> SignupStartResponse:
    """
    Start an email signup by sending a verification code.

    The password is not stored here; send it again with the code.

    Raises:
        429: A code was sent to this address less than a minute ago
        502: The email could not be sent
    """
    return OTPService.start_signup(request.email, request.full_name)


@router.post("/signup/verify", response_model=SignupCompleteResponse)
async def verify_signup(request: VerifyOTPRequest) -> SignupCompleteResponse:
    """
    Check the verification code and create the account.

    Returns an active session when Supabase signs the new user in right
    away; otherwise `requires_login` tells the client to show the sign-in
    form.

    Raises:
        400: Incomplete, incorrect or expired code; account creation refused
        429: Too many incorrect attempts
    """
    pending = OTPService.verify(request.email, request.code)
    full_name = pending.full_name or request.full_name.strip()
    return AuthService.complete_signup(pending.email, request.password, full_name)


@router.post("/signup/resend", response_model=SignupStartResponse)
async def resend_code(request: ResendOTPRequest) -> SignupStartResponse:
    """
    Send a new verification code; the previous one stops working.

    Raises:
        400: No signup in progress for this address
        429: Asked again within the cooldown
    """
    return OTPService.resend(request.email)


# =============================================================================
# Sign-in
# =============================================================================

@router.post("/login", response_model=AuthSession)
async def login(request: LoginRequest) -> AuthSession:
    """
    Sign in with email and password.

    Raises:
        401: Invalid credentials
    """
    return AuthService.login(request.email, request.password)


@router.get("/oauth/{provider}", response_model=OAuthURLResponse)
async def oauth_url(
    provider: Annotated[OAuthProvider, Path(description="OAuth provider")],
    redirect_to: Annotated[Optional[str], Query(description="Post-login redirect URL")] = None,
) -> OAuthURLResponse:
    """
    Get the consent-screen URL for an OAuth sign-in.

    Only Google is offered; any other provider is rejected with 422.
    """
    url = AuthService.oauth_url(provider, redirect_to)
    return OAuthURLResponse(provider=provider.value, url=url)


# =============================================================================
# Current User
# =============================================================================

@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current authenticated user.

    Returns:
        UserResponse: id and email from the token, name and avatar from
        the profile

    Raises:
        401: If not authenticated
    """
    try:
        profile = SupabaseClient.fetch_profile(user.id)
    except SupabaseClientError as e:
        logger.warning(f"Could not fetch user profile: {e}")
        profile = None

    # User exists in auth but the profile trigger may not have run yet
    if not profile:
        return UserResponse(id=user.id, email=user.email)

    return UserResponse(
        id=user.id,
        email=profile.get("email") or user.email,
        full_name=profile.get("full_name"),
        avatar_url=profile.get("avatar_url"),
        created_at=profile.get("created_at"),
    )


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.

    Returns:
        dict: Confirmation with user_id

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
