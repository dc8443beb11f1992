# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from pydantic import BaseModel
from uuid import UUID
from datetime import datetime
from typing import Optional


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    id: UUID
    email: Optional[str] = None

    class Config:
        frozen = True  # Make immutable


class UserResponse(BaseModel):
    """
    Current user for GET /auth/me.

    Token identity plus the display fields of the profiles row.
    """
    id: UUID
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None


class OAuthURLResponse(BaseModel):
    """Where to send the browser to start an OAuth sign-in."""
    provider: str
    url: str
