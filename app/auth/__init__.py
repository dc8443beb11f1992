# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Supabase Auth for the API: token verification for protected routes, and
# the signup / sign-in endpoints.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/subscription")
#   async def subscription(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import get_current_user, get_current_user_optional
from app.auth.models import AuthUser, OAuthURLResponse, UserResponse

__all__ = [
    "get_current_user",
    "get_current_user_optional",
    "AuthUser",
    "OAuthURLResponse",
    "UserResponse",
]
