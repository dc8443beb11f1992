# =============================================================================
# app/routers/subscription.py - Subscription Status
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from core.models.subscription import SubscriptionStatus
from core.services.subscription_service import SubscriptionService

router = APIRouter()


@router.get("", response_model=SubscriptionStatus)
async def get_subscription(user: AuthUser = Depends(get_current_user)):
    """
    Get the current user's plan.

    Users without a subscription row are on the free plan.
    """
    return SubscriptionService.get_status(user.id)
