# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Verifies the Supabase access token sent as "Authorization: Bearer <jwt>".
#
# Signing keys:
# - ES256 (current Supabase signing keys) looked up in the project's JWKS
# - HS256 (legacy project JWT secret) otherwise
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/profile")
#   async def profile(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
import time
from typing import Any, Optional
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.models import AuthUser

logger = logging.getLogger(__name__)

# HTTP Bearer token extractors
security = HTTPBearer()
security_optional = HTTPBearer(auto_error=False)

TOKEN_AUDIENCE = "authenticated"

# JWKS cache
_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


def _jwks_url() -> str:
    return f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict:
    """Fetch the project's JWKS, cached for an hour; stale keys beat none."""
    global _jwks_cache, _jwks_cache_time

    now = time.time()
    if _jwks_cache and (now - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        response = httpx.get(_jwks_url(), timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = now
        logger.debug("Refreshed Supabase JWKS")
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch JWKS: {e}")

    return _jwks_cache or {"keys": []}


def _signing_key(token: str) -> tuple[Any, str]:
    """
    Pick the verification key for a token from its header.

    Returns:
        Tuple of (key, algorithm)
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = header.get("alg", "HS256")
    kid = header.get("kid")

    if alg != "HS256" and kid:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg
        logger.warning(f"No JWKS key for alg={alg}, kid={kid}; trying the JWT secret")

    return settings.SUPABASE_JWT_SECRET, "HS256"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and return its user.

    Raises:
        HTTPException: 401 if the token is expired, forged, or has no
            usable user id
    """
    try:
        key, algorithm = _signing_key(token)
        payload = jwt.decode(token, key, algorithms=[algorithm], audience=TOKEN_AUDIENCE)
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {e}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise _unauthorized("Invalid token: malformed user ID")

    return AuthUser(id=user_uuid, email=payload.get("email"))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> AuthUser:
    """
    Require a signed-in user.

    Returns:
        AuthUser: The authenticated user

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    user = decode_access_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id}")
    return user


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional)
) -> Optional[AuthUser]:
    """
    The signed-in user, or None for anonymous requests.

    An invalid token is treated like no token.

    Usage:
        @router.post("/contact")
        async def contact(user: AuthUser | None = Depends(get_current_user_optional)):
            ...
    """
    if credentials is None:
        return None

    try:
        return decode_access_token(credentials.credentials)
    except HTTPException:
        return None
