# =============================================================================
# tests/test_profile.py - Profile Page Tests
# =============================================================================
# This module contains tests for:
# - Profile overview assembly and degraded lookups
# - Saving editable fields
# - GET/PATCH /profile routes
# =============================================================================

from unittest.mock import patch

import pytest

from app.auth.models import AuthUser
from app.exceptions import ProfileNotFoundError
from core.models.profile import ProfileUpdate
from core.models.subscription import SubscriptionStatus
from core.services.profile_service import HISTORY_LIMIT, ProfileService
from lib.supabase_client import SupabaseClientError
from tests.conftest import TEST_USER_EMAIL, TEST_USER_ID

USER = AuthUser(id=TEST_USER_ID, email=TEST_USER_EMAIL)


@pytest.fixture
def profile_row():
    return {
        "id": "profile-1",
        "user_id": str(TEST_USER_ID),
        "full_name": "Jane Doe",
        "email": "jane.doe@example.com",
        "age": 29,
        "gender": "female",
        "skin_concerns": None,
        "avatar_url": None,
        "created_at": "2024-01-01T09:00:00Z",
    }


@pytest.fixture
def history_rows():
    return [
        {"id": "an-2", "overall_score": 72, "skin_type": "Combination",
         "analyzed_at": "2024-01-16T10:00:00Z"},
        {"id": "an-1", "overall_score": 65, "skin_type": "Combination",
         "analyzed_at": "2024-01-15T10:00:00Z"},
    ]


# =============================================================================
# Overview
# =============================================================================

class TestGetOverview:
    """Test ProfileService.get_overview."""

    @patch("core.services.profile_service.SubscriptionService")
    @patch("core.services.profile_service.SupabaseClient")
    def test_full_overview(self, mock_supabase, mock_subscriptions, profile_row, history_rows):
        # Arrange
        mock_supabase.fetch_profile.return_value = profile_row
        mock_supabase.fetch_analysis_history.return_value = history_rows
        mock_subscriptions.get_status.return_value = SubscriptionStatus(
            plan="monthly", is_premium=True, has_active_subscription=True
        )

        # Act
        overview = ProfileService.get_overview(USER)

        # Assert
        assert overview.profile.full_name == "Jane Doe"
        assert overview.email == "jane.doe@example.com"
        assert overview.subscription.plan == "monthly"
        assert [h.id for h in overview.history] == ["an-2", "an-1"]
        mock_supabase.fetch_analysis_history.assert_called_once_with(
            USER.id, limit=HISTORY_LIMIT
        )

    @patch("core.services.profile_service.SubscriptionService")
    @patch("core.services.profile_service.SupabaseClient")
    def test_missing_profile_uses_token_email(self, mock_supabase, mock_subscriptions):
        """Test a user without a profile row still gets a page."""
        mock_supabase.fetch_profile.return_value = None
        mock_supabase.fetch_analysis_history.return_value = []
        mock_subscriptions.get_status.return_value = SubscriptionStatus()

        overview = ProfileService.get_overview(USER)

        assert overview.profile is None
        assert overview.email == TEST_USER_EMAIL

    @patch("core.services.profile_service.SubscriptionService")
    @patch("core.services.profile_service.SupabaseClient")
    def test_secondary_lookups_degrade(self, mock_supabase, mock_subscriptions, profile_row):
        """Test failed subscription/history queries fall back to defaults."""
        mock_supabase.fetch_profile.return_value = profile_row
        mock_supabase.fetch_analysis_history.side_effect = SupabaseClientError("timeout")
        mock_subscriptions.get_status.side_effect = SupabaseClientError("timeout")

        overview = ProfileService.get_overview(USER)

        assert overview.subscription.plan == "free"
        assert overview.history == []

    @patch("core.services.profile_service.SupabaseClient")
    def test_profile_query_failure_raises(self, mock_supabase):
        mock_supabase.fetch_profile.side_effect = SupabaseClientError(
            "Failed to fetch profile: timeout", code="FETCH_PROFILE_FAILED"
        )

        with pytest.raises(SupabaseClientError):
            ProfileService.get_overview(USER)


# =============================================================================
# Update
# =============================================================================

class TestUpdateProfile:
    """Test ProfileService.update."""

    @patch("core.services.profile_service.SupabaseClient")
    def test_writes_all_fields(self, mock_supabase, profile_row):
        mock_supabase.update_profile.return_value = {**profile_row, "age": None, "gender": None}

        profile = ProfileService.update(USER, ProfileUpdate(full_name="Jane Doe", age="", gender=""))

        mock_supabase.update_profile.assert_called_once_with(
            USER.id, {"full_name": "Jane Doe", "age": None, "gender": None}
        )
        assert profile.age is None

    @patch("core.services.profile_service.SupabaseClient")
    def test_missing_row(self, mock_supabase):
        mock_supabase.update_profile.return_value = None

        with pytest.raises(ProfileNotFoundError) as exc_info:
            ProfileService.update(USER, ProfileUpdate(full_name="Jane"))

        assert exc_info.value.status_code == 404


# =============================================================================
# Routes
# =============================================================================

class TestProfileRoutes:
    """Test /api/v1/profile."""

    @patch("core.services.profile_service.SubscriptionService")
    @patch("core.services.profile_service.SupabaseClient")
    def test_get_profile(self, mock_supabase, mock_subscriptions, client, profile_row):
        mock_supabase.fetch_profile.return_value = profile_row
        mock_supabase.fetch_analysis_history.return_value = []
        mock_subscriptions.get_status.return_value = SubscriptionStatus()

        response = client.get("/api/v1/profile")

        assert response.status_code == 200
        data = response.json()
        assert data["profile"]["full_name"] == "Jane Doe"
        assert data["subscription"]["plan_label"] == "Free Plan"

    @patch("core.services.profile_service.SupabaseClient")
    def test_profile_query_failure_is_500(self, mock_supabase, client):
        mock_supabase.fetch_profile.side_effect = SupabaseClientError(
            "Failed to fetch profile: timeout", code="FETCH_PROFILE_FAILED"
        )

        response = client.get("/api/v1/profile")

        assert response.status_code == 500
        assert response.json()["code"] == "FETCH_PROFILE_FAILED"

    @patch("core.services.profile_service.SupabaseClient")
    def test_patch_profile(self, mock_supabase, client, profile_row):
        mock_supabase.update_profile.return_value = {**profile_row, "age": 30}

        response = client.patch("/api/v1/profile", json={
            "full_name": "Jane Doe", "age": 30, "gender": "female",
        })

        assert response.status_code == 200
        assert response.json()["age"] == 30

    def test_patch_rejects_bad_age(self, client):
        response = client.patch("/api/v1/profile", json={"age": 500})

        assert response.status_code == 422
