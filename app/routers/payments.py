# =============================================================================
# app/routers/payments.py - Plans & Razorpay Checkout
# =============================================================================
# GET  /plans             - plan catalog for the pricing page
# POST /payments/orders   - open a Razorpay order
# POST /payments/verify   - verify the checkout signature, activate the plan
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from core.models.subscription import (
    PLAN_CATALOG,
    CreateOrderRequest,
    CreateOrderResponse,
    PlanInfo,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from core.services.payment_service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/plans", response_model=list[PlanInfo])
async def list_plans():
    """
    Get the paid plans, in display order (monthly, quarterly, yearly).
    """
    return list(PLAN_CATALOG.values())


@router.post("/payments/orders", response_model=CreateOrderResponse)
async def create_order(
    request: CreateOrderRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a Razorpay order for a plan.

    Pass the returned order_id and key_id to Razorpay Checkout.

    Raises:
        400: INVALID_INPUT (unknown plan, bad amount) or RAZORPAY_ERROR
        500: RAZORPAY_ENV_MISSING
    """
    return PaymentService.create_order(user, request)


@router.post("/payments/verify", response_model=VerifyPaymentResponse)
async def verify_payment(
    request: VerifyPaymentRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Verify a completed checkout and activate the plan.

    Raises:
        400: Missing required fields, or invalid payment signature
        500: Razorpay credentials not configured, or the subscription
             could not be saved
    """
    return PaymentService.verify_payment(user, request)
