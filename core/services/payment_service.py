# =============================================================================
# core/services/payment_service.py - Razorpay Checkout
# =============================================================================
# Two-step checkout:
# 1. create_order: open a Razorpay order for a plan; the client opens the
#    checkout widget with the returned order_id and key_id
# 2. verify_payment: check the signature the widget returned, read the order
#    back to confirm who opened it and for which plan, then activate that plan
# =============================================================================

import logging
import math
import time

from app.auth.models import AuthUser
from app.config import settings
from app.exceptions import (
    InvalidPaymentInputError,
    InvalidSignatureError,
    OrderMismatchError,
    PaymentNotConfiguredError,
    RazorpayOrderError,
    SubscriptionUpdateError,
)
from core.models.subscription import (
    PLAN_CATALOG,
    CreateOrderRequest,
    CreateOrderResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from core.services.subscription_service import SubscriptionService
from lib.razorpay_client import RazorpayClient, RazorpayError
from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)


def to_paise(amount: float) -> int:
    """Rupees to paise, rounded to the nearest paisa."""
    return int(round(amount * 100))


class PaymentService:
    """
    Service for Razorpay order creation and verification.
    """

    @staticmethod
    def resolve_amount(request: CreateOrderRequest) -> float:
        """
        Validate the order input and return the amount to charge in rupees.

        The plan's catalog price is authoritative; a client-supplied amount
        is only accepted if it is a positive finite number equal to it.

        Raises:
            InvalidPaymentInputError: Missing/unknown plan or bad amount
        """
        plan_id = (request.plan_id or "").strip()
        if not plan_id:
            raise InvalidPaymentInputError(details={"plan_id": request.plan_id})

        plan = PLAN_CATALOG.get(plan_id)
        if plan is None:
            raise InvalidPaymentInputError(details={"plan_id": plan_id})

        if request.amount is None:
            return float(plan.price)

        amount = request.amount
        if not math.isfinite(amount) or amount <= 0:
            raise InvalidPaymentInputError(details={"amount": amount})

        if to_paise(amount) != plan.amount_paise:
            raise InvalidPaymentInputError(
                details={"amount": amount, "expected": plan.price, "plan_id": plan_id}
            )
        return amount

    @staticmethod
    def create_order(user: AuthUser, request: CreateOrderRequest) -> CreateOrderResponse:
        """
        Open a Razorpay order for a plan.

        Raises:
            InvalidPaymentInputError: Bad plan or amount
            PaymentNotConfiguredError: Razorpay keys are missing
            RazorpayOrderError: Razorpay rejected the request
        """
        amount = PaymentService.resolve_amount(request)

        if not settings.razorpay_configured:
            logger.error("Razorpay env vars missing")
            raise PaymentNotConfiguredError()

        amount_paise = to_paise(amount)
        receipt = f"rcpt_{int(time.time() * 1000)}"
        notes = {
            "user_id": str(user.id),
            "plan_id": request.plan_id.strip(),
            "user_email": user.email or "",
        }

        try:
            order = RazorpayClient.create_order(
                amount_paise=amount_paise,
                receipt=receipt,
                notes=notes,
            )
        except RazorpayError as e:
            if e.code == "RAZORPAY_ENV_MISSING":
                raise PaymentNotConfiguredError()
            raise RazorpayOrderError(e.response_text or e.message)

        logger.info(f"Razorpay order created: {order.get('id')} for user: {user.id}")

        return CreateOrderResponse(
            order_id=order["id"],
            amount_paise=order.get("amount", amount_paise),
            currency=order.get("currency", settings.RAZORPAY_CURRENCY),
            key_id=settings.RAZORPAY_KEY_ID,
        )

    @staticmethod
    def order_plan(user: AuthUser, request: VerifyPaymentRequest) -> str:
        """
        Return the plan recorded on the order when it was created.

        The signature only proves Razorpay saw a payment for the order; the
        order notes tie it to the buyer and the plan that was priced.

        Raises:
            PaymentNotConfiguredError: Razorpay keys are missing
            RazorpayOrderError: The order could not be read
            OrderMismatchError: Another user's order, or a different plan
        """
        order_id = request.razorpay_order_id
        try:
            order = RazorpayClient.fetch_order(order_id)
        except RazorpayError as e:
            if e.code == "RAZORPAY_ENV_MISSING":
                raise PaymentNotConfiguredError()
            raise RazorpayOrderError(e.response_text or e.message)

        # Razorpay returns an empty list for orders without notes
        notes = order.get("notes")
        if not isinstance(notes, dict):
            notes = {}

        if notes.get("user_id") != str(user.id):
            logger.error(f"Order {order_id} was not opened by user {user.id}")
            raise OrderMismatchError(order_id)

        plan_id = notes.get("plan_id")
        if plan_id != request.plan_id.strip():
            logger.error(f"Order {order_id} is for plan {plan_id}, not {request.plan_id}")
            raise OrderMismatchError(order_id, {"plan_id": request.plan_id, "order_plan_id": plan_id})

        return plan_id

    @staticmethod
    def verify_payment(user: AuthUser, request: VerifyPaymentRequest) -> VerifyPaymentResponse:
        """
        Verify a checkout signature and activate the plan.

        Raises:
            InvalidPaymentInputError: A field is missing
            PaymentNotConfiguredError: Key secret is missing
            InvalidSignatureError: Signature does not match
            RazorpayOrderError: The order could not be read
            OrderMismatchError: The order belongs to another user or plan
            SubscriptionUpdateError: Payment verified but not recorded
        """
        if not (
            request.razorpay_order_id
            and request.razorpay_payment_id
            and request.razorpay_signature
            and request.plan_id
        ):
            raise InvalidPaymentInputError("Missing required fields")

        if not settings.RAZORPAY_KEY_SECRET:
            raise PaymentNotConfiguredError("Razorpay credentials not configured")

        valid = RazorpayClient.verify_signature(
            request.razorpay_order_id,
            request.razorpay_payment_id,
            request.razorpay_signature,
        )
        if not valid:
            logger.error(f"Signature mismatch for order {request.razorpay_order_id} (user: {user.id})")
            raise InvalidSignatureError(request.razorpay_order_id)

        logger.info(f"Payment signature verified for order {request.razorpay_order_id}")

        plan_id = PaymentService.order_plan(user, request)

        try:
            subscription = SubscriptionService.activate(user.id, plan_id)
        except SupabaseClientError as e:
            logger.error(f"Failed to update subscription for user {user.id}: {e}")
            raise SubscriptionUpdateError(e.message)

        logger.info(f"Subscription updated successfully for user: {user.id}")
        return VerifyPaymentResponse(subscription=subscription)
