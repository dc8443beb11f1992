# =============================================================================
# core/services/subscription_service.py - Subscription Business Logic
# =============================================================================
# Reads a user's plan and derives premium/expiry flags; records the plan
# bought through a verified payment.
# =============================================================================

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from core.models.subscription import (
    Subscription,
    SubscriptionPlan,
    SubscriptionStatus,
    plan_duration,
    plan_expiry,
    plan_label,
)
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, parse_timestamp, utc_now

logger = logging.getLogger(__name__)


class SubscriptionService:
    """
    Service for subscription management operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def build_status(
        row: dict[str, Any] | None,
        now: datetime | None = None,
    ) -> SubscriptionStatus:
        """
        Derive the status flags from a subscriptions row.

        No row means the free plan.
        """
        if not row:
            return SubscriptionStatus()

        subscription = Subscription.model_validate(row)
        now = now or utc_now()

        is_premium = subscription.plan != SubscriptionPlan.FREE.value
        expires_at = parse_timestamp(subscription.expires_at)
        is_expired = expires_at is not None and expires_at < now

        return SubscriptionStatus(
            subscription=subscription,
            plan=subscription.plan,
            plan_label=plan_label(subscription.plan),
            is_premium=is_premium,
            is_expired=is_expired,
            has_active_subscription=is_premium and not is_expired,
        )

    @staticmethod
    def get_status(user_id: UUID | str) -> SubscriptionStatus:
        """
        Get the subscription status for a user.

        Raises:
            SupabaseClientError: If the query fails
        """
        row = SupabaseClient.fetch_subscription(user_id)
        return SubscriptionService.build_status(row)

    @staticmethod
    def has_active_subscription(user_id: UUID | str) -> bool:
        """True when the user has a paid, unexpired plan."""
        return SubscriptionService.get_status(user_id).has_active_subscription

    @staticmethod
    def activate(user_id: UUID | str, plan_id: str) -> Subscription:
        """
        Record a paid plan for a user.

        Updates the user's subscription row if there is one, otherwise
        inserts it. The expiry is counted from now, not from the previous
        expiry.

        Raises:
            SupabaseClientError: If the read or write fails
        """
        user_id_str = normalize_uuid(user_id)
        months, plan = plan_duration(plan_id)
        now = utc_now()

        data = {
            "plan": plan.value,
            "status": "active",
            "expires_at": plan_expiry(months, now).isoformat(),
            "last_payment_date": now.isoformat(),
        }

        existing = SupabaseClient.fetch_subscription(user_id_str)
        if existing:
            row = SupabaseClient.update_subscription(user_id_str, data)
        else:
            row = SupabaseClient.insert_subscription({"user_id": user_id_str, **data})

        logger.info(f"Subscription set to {plan.value} ({months} months) for user: {user_id_str}")
        return Subscription.model_validate(row)
