# =============================================================================
# lib/razorpay_client.py - Razorpay REST Client
# =============================================================================
# Thin wrapper over the Razorpay operations the checkout flow needs:
# - POST /orders to open an order for the checkout widget
# - GET /orders/<id> to read back the notes of a paid order
# - HMAC-SHA256 verification of the signature the widget hands back
#
# Usage:
#   from lib.razorpay_client import RazorpayClient
#   order = RazorpayClient.create_order(amount_paise=69900, receipt="rcpt_...")
#   ok = RazorpayClient.verify_signature(order_id, payment_id, signature)
#   order = RazorpayClient.fetch_order(order_id)
# =============================================================================

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Any

import httpx

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

# Timeout for Razorpay API calls (seconds)
RAZORPAY_TIMEOUT = 20


class RazorpayError(ApplicationError):
    """
    Error talking to Razorpay.

    `response_text` holds the raw body Razorpay returned (if any) so the
    caller can pass it through unchanged.
    """

    def __init__(
        self,
        message: str,
        code: str = "RAZORPAY_ERROR",
        status_code: int | None = None,
        response_text: str = "",
    ):
        super().__init__(
            message,
            code=code,
            suggestion="Check the Razorpay dashboard and your API keys",
            details={"status_code": status_code},
        )
        self.status_code = status_code
        self.response_text = response_text


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    """
    Hex HMAC-SHA256 of "order_id|payment_id" keyed by the key secret.

    This is the signature Razorpay Checkout returns as razorpay_signature.
    """
    message = f"{order_id}|{payment_id}"
    return hmac.new(
        secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


class RazorpayClient:
    """
    Razorpay Orders API client.

    All methods are class methods; credentials come from settings at call
    time so tests can patch them.
    """

    @classmethod
    def _auth(cls) -> tuple[str, str]:
        if not settings.razorpay_configured:
            raise RazorpayError(
                "Razorpay credentials not configured",
                code="RAZORPAY_ENV_MISSING",
            )
        return settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET

    @classmethod
    def create_order(
        cls,
        amount_paise: int,
        receipt: str,
        notes: dict[str, str] | None = None,
        currency: str | None = None,
    ) -> dict[str, Any]:
        """
        Create a Razorpay order.

        Args:
            amount_paise: Amount in the smallest currency unit
            receipt: Merchant receipt id (max 40 chars)
            notes: Key/value notes stored on the order
            currency: ISO currency (default: settings.RAZORPAY_CURRENCY)

        Returns:
            The order JSON (id, amount, currency, status, ...)

        Raises:
            RazorpayError: Missing credentials, network failure or a non-2xx
                response (raw body in `response_text`)
        """
        auth = cls._auth()
        payload = {
            "amount": amount_paise,
            "currency": currency or settings.RAZORPAY_CURRENCY,
            "receipt": receipt[:40],
            "notes": notes or {},
        }
        url = f"{settings.RAZORPAY_API_URL.rstrip('/')}/orders"

        try:
            response = httpx.post(url, json=payload, auth=auth, timeout=RAZORPAY_TIMEOUT)
        except httpx.HTTPError as e:
            logger.error(f"Razorpay network error creating order: {e}")
            raise RazorpayError(f"Unable to reach Razorpay: {e}", code="RAZORPAY_UNREACHABLE")

        logger.info(f"Razorpay create order HTTP {response.status_code} (receipt={payload['receipt']})")
        return cls._parse(response, "Razorpay rejected the order request")

    @classmethod
    def fetch_order(cls, order_id: str) -> dict[str, Any]:
        """
        Read an order back from Razorpay.

        Args:
            order_id: The order_... id returned by create_order

        Returns:
            The order JSON, including the notes set at creation

        Raises:
            RazorpayError: Missing credentials, network failure or a non-2xx
                response (raw body in `response_text`)
        """
        auth = cls._auth()
        url = f"{settings.RAZORPAY_API_URL.rstrip('/')}/orders/{order_id}"

        try:
            response = httpx.get(url, auth=auth, timeout=RAZORPAY_TIMEOUT)
        except httpx.HTTPError as e:
            logger.error(f"Razorpay network error fetching order {order_id}: {e}")
            raise RazorpayError(f"Unable to reach Razorpay: {e}", code="RAZORPAY_UNREACHABLE")

        logger.info(f"Razorpay fetch order HTTP {response.status_code} ({order_id})")
        return cls._parse(response, "Razorpay could not return the order")

    @staticmethod
    def _parse(response: httpx.Response, rejected_message: str) -> dict[str, Any]:
        if response.status_code >= 400:
            logger.warning(f"{rejected_message}: {response.text[:500]}")
            raise RazorpayError(
                rejected_message,
                status_code=response.status_code,
                response_text=response.text,
            )

        try:
            return response.json()
        except ValueError:
            raise RazorpayError(
                "Razorpay returned a non-JSON response",
                status_code=response.status_code,
                response_text=response.text,
            )

    @classmethod
    def verify_signature(cls, order_id: str, payment_id: str, signature: str) -> bool:
        """
        Check a checkout signature in constant time.

        Raises:
            RazorpayError: If the key secret is not configured
        """
        if not settings.RAZORPAY_KEY_SECRET:
            raise RazorpayError(
                "Razorpay credentials not configured",
                code="RAZORPAY_ENV_MISSING",
            )
        expected = compute_signature(order_id, payment_id, settings.RAZORPAY_KEY_SECRET)
        return hmac.compare_digest(expected, signature)
