# =============================================================================
# core/models/subscription.py - Plans, Subscriptions & Payments
# =============================================================================
# These models define:
# - SubscriptionPlan: free | monthly | quarterly | yearly
# - PlanInfo / PLAN_CATALOG: what the pricing page sells
# - Subscription: one row of the subscriptions table
# - SubscriptionStatus: derived premium/expiry flags
# - Order/verify request and response bodies for Razorpay checkout
# =============================================================================

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, Field

# Plan durations are counted in 30-day months
DAYS_PER_MONTH = 30


class SubscriptionPlan(str, Enum):
    """
    Plan stored on a subscription row.

    - free: default for every account, no expiry
    - monthly / quarterly / yearly: paid through Razorpay
    """
    FREE = "free"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


PLAN_LABELS: dict[str, str] = {
    SubscriptionPlan.FREE.value: "Free Plan",
    SubscriptionPlan.MONTHLY.value: "Monthly Premium",
    SubscriptionPlan.QUARTERLY.value: "Quarterly Premium",
    SubscriptionPlan.YEARLY.value: "Yearly Premium",
}


def plan_label(plan: str) -> str:
    """Human-readable plan name; unknown plans are shown as-is."""
    return PLAN_LABELS.get(plan, plan)


class PlanInfo(BaseModel):
    """One entry of the pricing table."""

    id: SubscriptionPlan
    name: str
    price: int = Field(..., gt=0, description="Price in rupees")
    period: str
    original_price: int | None = Field(default=None, description="Struck-through price")
    description: str
    features: list[str]
    months: int = Field(..., ge=1)
    popular: bool = False
    best: bool = False

    @property
    def amount_paise(self) -> int:
        return self.price * 100


PLAN_CATALOG: dict[str, PlanInfo] = {
    "monthly": PlanInfo(
        id=SubscriptionPlan.MONTHLY,
        name="Monthly",
        price=299,
        period="/month",
        description="Perfect for trying out",
        features=[
            "Full skin analysis reports",
            "Personalized remedies",
            "Progress tracking",
            "Email support",
        ],
        months=1,
    ),
    "quarterly": PlanInfo(
        id=SubscriptionPlan.QUARTERLY,
        name="Quarterly",
        price=699,
        period="/3 months",
        original_price=897,
        description="Most popular choice",
        features=[
            "Everything in Monthly",
            "Unlimited analyses",
            "Priority support",
            "Exclusive tips & content",
            "Save 22%",
        ],
        months=3,
        popular=True,
    ),
    "yearly": PlanInfo(
        id=SubscriptionPlan.YEARLY,
        name="Yearly",
        price=1999,
        period="/year",
        original_price=3588,
        description="Best value for serious users",
        features=[
            "Everything in Quarterly",
            "Dermatologist consultations",
            "Advanced AI insights",
            "Early feature access",
            "Save 44%",
        ],
        months=12,
        best=True,
    ),
}


def plan_duration(plan_id: str) -> tuple[int, SubscriptionPlan]:
    """
    Months granted by a paid plan.

    Unknown ids fall back to one month of the monthly plan, matching what
    a verified payment has always been credited as.
    """
    plan = PLAN_CATALOG.get(plan_id)
    if plan is None:
        return 1, SubscriptionPlan.MONTHLY
    return plan.months, plan.id


def plan_expiry(months: int, start: datetime) -> datetime:
    """Expiry timestamp for `months` 30-day months from `start`."""
    return start + timedelta(days=months * DAYS_PER_MONTH)


class Subscription(BaseModel):
    """
    One row of the subscriptions table.

    A user has at most one row; it is updated in place on renewal.
    """

    id: str | None = None
    user_id: str
    plan: str = SubscriptionPlan.FREE.value
    status: str = "active"
    started_at: datetime | None = None
    expires_at: datetime | None = None
    last_payment_date: datetime | None = None


class SubscriptionStatus(BaseModel):
    """
    Derived view of a user's subscription.

    - is_premium: plan is anything but free
    - is_expired: expires_at is in the past (False when there is no expiry)
    - has_active_subscription: premium and not expired
    """

    subscription: Subscription | None = None
    plan: str = SubscriptionPlan.FREE.value
    plan_label: str = PLAN_LABELS[SubscriptionPlan.FREE.value]
    is_premium: bool = False
    is_expired: bool = False
    has_active_subscription: bool = False


# =============================================================================
# Checkout
# =============================================================================

class CreateOrderRequest(BaseModel):
    """
    Body of POST /payments/orders.

    `amount` is optional; when given it must match the plan's price.
    """

    plan_id: str | None = None
    amount: float | None = None


class CreateOrderResponse(BaseModel):
    """What the Razorpay checkout widget needs to open."""

    success: bool = True
    order_id: str
    amount_paise: int
    currency: str
    key_id: str


class VerifyPaymentRequest(BaseModel):
    """Fields the checkout widget returns on success, plus the plan."""

    razorpay_order_id: str = ""
    razorpay_payment_id: str = ""
    razorpay_signature: str = ""
    plan_id: str = ""


class VerifyPaymentResponse(BaseModel):
    success: bool = True
    message: str = "Payment verified and subscription updated"
    subscription: Subscription | None = None
