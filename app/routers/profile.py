# =============================================================================
# app/routers/profile.py - Profile Endpoints
# =============================================================================
# GET   /profile  - profile, plan and recent analyses
# PATCH /profile  - save name, age and gender
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from core.models.profile import Profile, ProfileOverview, ProfileUpdate
from core.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=ProfileOverview)
async def get_profile(user: AuthUser = Depends(get_current_user)):
    """
    Get everything the profile page shows.

    `profile` is null when the profile row has not been created yet.
    """
    return ProfileService.get_overview(user)


@router.patch("", response_model=Profile)
async def update_profile(
    update: ProfileUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Update name, age and gender.

    All three fields are written; empty values clear them.
    """
    return ProfileService.update(user, update)
