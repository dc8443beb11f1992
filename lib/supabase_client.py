# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single service-role client
# and provides specialized methods for:
# - Profiles (account details)
# - Subscriptions (plan, status, expiry)
# - Skin analysis history
# - Contact form messages
#
# Auth calls (sign up, sign in, OAuth) need a client built on the anon key
# whose session state is not shared between requests, so those get a fresh
# client from create_auth_client().
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   profile = SupabaseClient.fetch_profile(user_id)
# =============================================================================

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: what failed and how to fix it.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one service-role client instance is shared
    across the application. All methods are class methods for easy access
    without instantiation.

    Example:
        sub = SupabaseClient.fetch_subscription(user.id)
        history = SupabaseClient.fetch_analysis_history(user.id, limit=10)
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        Every query below filters by user_id explicitly.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def create_auth_client(cls) -> Client:
        """
        Create a new anon-key client for Supabase Auth calls.

        Not cached: sign_in_* stores the session on the client, and that
        session must not leak into another user's request.

        Raises:
            SupabaseClientError: If client creation fails
        """
        try:
            return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase auth client: {e}",
                code="AUTH_CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
            )

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    @staticmethod
    def _is_not_found(error: Exception) -> bool:
        """True when a .single() query matched no rows."""
        return NO_ROWS_CODE in str(error)

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_profile(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch the profile row for a user.

        Args:
            user_id: The auth user UUID

        Returns:
            Profile dict, or None if the user has no profile row yet

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table("profiles")
                .select("*")
                .eq("user_id", user_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if cls._is_not_found(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch profile: {e}",
                code="FETCH_PROFILE_FAILED",
                suggestion="Check that the profiles table is accessible",
                details={"user_id": user_id_str}
            )

    @classmethod
    def update_profile(
        cls,
        user_id: str | UUID,
        data: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Update the profile row for a user.

        Args:
            user_id: The auth user UUID
            data: Columns to set (None values are written as NULL)

        Returns:
            Updated profile dict, or None if no row matched

        Raises:
            SupabaseClientError: If update fails
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table("profiles")
                .update(data)
                .eq("user_id", user_id_str)
                .execute()
            )
            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update profile: {e}",
                code="UPDATE_PROFILE_FAILED",
                details={"user_id": user_id_str, "fields": sorted(data)}
            )

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_subscription(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch the subscription row for a user.

        Returns:
            Subscription dict, or None if the user never subscribed

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table("subscriptions")
                .select("*")
                .eq("user_id", user_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if cls._is_not_found(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch subscription: {e}",
                code="FETCH_SUBSCRIPTION_FAILED",
                details={"user_id": user_id_str}
            )

    @classmethod
    def insert_subscription(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a new subscription row.

        Raises:
            SupabaseClientError: If insert fails or returns nothing
        """
        client = cls.get_client()

        try:
            response = client.table("subscriptions").insert(data).execute()
            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert subscription: {e}",
                code="INSERT_SUBSCRIPTION_FAILED",
                details={"user_id": data.get("user_id")}
            )

    @classmethod
    def update_subscription(
        cls,
        user_id: str | UUID,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Update the subscription row for a user.

        Raises:
            SupabaseClientError: If update fails or matches no row
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table("subscriptions")
                .update(data)
                .eq("user_id", user_id_str)
                .execute()
            )
            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Update matched no subscription",
                code="UPDATE_NO_DATA",
                details={"user_id": user_id_str}
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update subscription: {e}",
                code="UPDATE_SUBSCRIPTION_FAILED",
                details={"user_id": user_id_str}
            )

    # -------------------------------------------------------------------------
    # Skin Analysis History
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_analysis_history(
        cls,
        user_id: str | UUID,
        limit: int = 10,
    ) -> list[dict[str, Any]]:
        """
        Fetch a user's most recent analyses, newest first.

        Only the summary columns are selected; the full concern list is
        fetched per analysis by fetch_analysis().

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table("skin_analysis_history")
                .select("id, overall_score, skin_type, analyzed_at")
                .eq("user_id", user_id_str)
                .order("analyzed_at", desc=True)
                .limit(limit)
                .execute()
            )
            history = response.data or []
            logger.debug(f"Fetched {len(history)} analyses for user {user_id_str}")
            return history

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch analysis history: {e}",
                code="FETCH_HISTORY_FAILED",
                details={"user_id": user_id_str, "limit": limit}
            )

    @classmethod
    def fetch_analysis(cls, analysis_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch one analysis row with all columns.

        Returns:
            Analysis dict, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        analysis_id_str = cls._normalize_uuid(analysis_id)

        try:
            response = (
                client.table("skin_analysis_history")
                .select("*")
                .eq("id", analysis_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if cls._is_not_found(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch analysis: {e}",
                code="FETCH_ANALYSIS_FAILED",
                details={"analysis_id": analysis_id_str}
            )

    @classmethod
    def fetch_latest_analysis(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch the newest analysis row for a user.

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table("skin_analysis_history")
                .select("*")
                .eq("user_id", user_id_str)
                .order("analyzed_at", desc=True)
                .limit(1)
                .execute()
            )
            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch latest analysis: {e}",
                code="FETCH_ANALYSIS_FAILED",
                details={"user_id": user_id_str}
            )

    @classmethod
    def insert_analysis(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a completed analysis.

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()

        try:
            response = client.table("skin_analysis_history").insert(data).execute()
            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert analysis: {e}",
                code="INSERT_ANALYSIS_FAILED",
                details={"user_id": data.get("user_id")}
            )

    @classmethod
    def count_analyses_since(cls, user_id: str | UUID, since: datetime) -> int:
        """
        Count a user's analyses at or after `since`.

        Used for the daily scan limit.

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table("skin_analysis_history")
                .select("id", count="exact")
                .eq("user_id", user_id_str)
                .gte("analyzed_at", since.isoformat())
                .execute()
            )
            return response.count or 0

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to count analyses: {e}",
                code="COUNT_ANALYSES_FAILED",
                details={"user_id": user_id_str, "since": since.isoformat()}
            )

    # -------------------------------------------------------------------------
    # Contact Messages
    # -------------------------------------------------------------------------

    @classmethod
    def insert_contact_message(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Store a contact form submission.

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()

        try:
            response = client.table("contact_messages").insert(data).execute()
            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to store contact message: {e}",
                code="INSERT_CONTACT_FAILED",
                details={"email": data.get("email")}
            )
