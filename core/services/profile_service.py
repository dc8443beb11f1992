# =============================================================================
# core/services/profile_service.py - Profile Page Business Logic
# =============================================================================
# Assembles the profile page (profile row, plan, recent analyses) and saves
# the editable fields.
# =============================================================================

import logging
from uuid import UUID

from app.auth.models import AuthUser
from app.exceptions import ProfileNotFoundError
from core.models.profile import (
    AnalysisSummary,
    Profile,
    ProfileOverview,
    ProfileUpdate,
)
from core.models.subscription import SubscriptionStatus
from core.services.subscription_service import SubscriptionService
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 10


class ProfileService:
    """
    Service for profile operations.
    """

    @staticmethod
    def get_history(user_id: UUID | str, limit: int = HISTORY_LIMIT) -> list[AnalysisSummary]:
        """
        Recent analyses, newest first.

        Raises:
            SupabaseClientError: If the query fails
        """
        rows = SupabaseClient.fetch_analysis_history(user_id, limit=limit)
        return [AnalysisSummary.model_validate(row) for row in rows]

    @staticmethod
    def get_overview(user: AuthUser) -> ProfileOverview:
        """
        Load everything the profile page shows.

        Only the profile query is fatal. A failed subscription or history
        query is logged and shown as the free plan / an empty list.

        Raises:
            SupabaseClientError: If the profile query fails
        """
        row = SupabaseClient.fetch_profile(user.id)
        profile = Profile.model_validate(row) if row else None
        if profile is None:
            logger.info(f"No profile row yet for user: {user.id}")

        try:
            subscription = SubscriptionService.get_status(user.id)
        except SupabaseClientError as e:
            logger.warning(f"Subscription lookup failed for user {user.id}: {e}")
            subscription = SubscriptionStatus()

        try:
            history = ProfileService.get_history(user.id)
        except SupabaseClientError as e:
            logger.warning(f"History lookup failed for user {user.id}: {e}")
            history = []

        return ProfileOverview(
            profile=profile,
            email=(profile.email if profile and profile.email else user.email),
            subscription=subscription,
            history=history,
        )

    @staticmethod
    def update(user: AuthUser, update: ProfileUpdate) -> Profile:
        """
        Save the editable profile fields.

        Raises:
            ProfileNotFoundError: The user has no profile row
            SupabaseClientError: If the update fails
        """
        row = SupabaseClient.update_profile(user.id, update.to_row())
        if row is None:
            raise ProfileNotFoundError(str(user.id))
        logger.info(f"Profile updated for user: {user.id}")
        return Profile.model_validate(row)
