# =============================================================================
# lib/email_client.py - Resend Email Client
# =============================================================================
# Sends transactional email through the Resend HTTP API.
# Currently used for one message: the signup verification code.
#
# Usage:
#   from lib.email_client import EmailClient
#   email_id = EmailClient.send_otp_email("user@example.com", "123456")
# =============================================================================

from __future__ import annotations

import logging
import secrets

import httpx

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

# Timeout for Resend API calls (seconds)
RESEND_TIMEOUT = 10

OTP_SUBJECT = "Your Verification Code - Skin Sense"


class EmailDeliveryError(ApplicationError):
    """Resend refused or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message,
            code="EMAIL_DELIVERY_FAILED",
            suggestion="Check RESEND_API_KEY and that the sender domain is verified",
            details={"status_code": status_code},
        )
        self.status_code = status_code


def render_otp_email(otp: str, ttl_minutes: int = 10) -> str:
    """Branded HTML body carrying the verification code."""
    return f"""\
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif; background-color: #f8f4f3; margin: 0; padding: 40px 20px;">
  <div style="max-width: 400px; margin: 0 auto; background: white; border-radius: 16px; padding: 40px; box-shadow: 0 4px 20px rgba(0,0,0,0.1);">
    <div style="text-align: center; margin-bottom: 30px;">
      <h1 style="color: #1a1a1a; font-size: 24px; margin: 0;">Skin Sense</h1>
    </div>
    <h2 style="color: #333; font-size: 20px; text-align: center; margin-bottom: 10px;">Verify Your Email</h2>
    <p style="color: #666; text-align: center; margin-bottom: 30px;">Enter this code to complete your registration:</p>
    <div style="background: linear-gradient(135deg, #fff5f3, #f0faf9); border: 2px solid #e8998d; border-radius: 12px; padding: 20px; text-align: center; margin-bottom: 30px;">
      <span style="font-size: 36px; font-weight: bold; letter-spacing: 8px; color: #1a1a1a;">{otp}</span>
    </div>
    <p style="color: #999; font-size: 14px; text-align: center; margin-bottom: 0;">This code expires in {ttl_minutes} minutes.</p>
    <p style="color: #999; font-size: 14px; text-align: center;">If you didn't request this, please ignore this email.</p>
  </div>
</body>
</html>
"""


class EmailClient:
    """
    Resend API client.

    All methods are class methods; the API key is read from settings at
    call time.
    """

    @classmethod
    def send_otp_email(cls, email: str, otp: str) -> str:
        """
        Email a verification code.

        Args:
            email: Recipient address
            otp: The plaintext code

        Returns:
            The Resend message id

        Raises:
            ValueError: If email or otp is empty
            EmailDeliveryError: If Resend rejects the request or is unreachable
        """
        if not email or not otp:
            raise ValueError("Email and OTP are required")

        if not settings.resend_configured:
            if settings.is_production:
                raise EmailDeliveryError("RESEND_API_KEY is not configured")
            # Local development without a Resend account
            logger.warning(f"RESEND_API_KEY not set; verification code for {email}: {otp}")
            return f"dev-{secrets.token_hex(8)}"

        payload = {
            "from": settings.EMAIL_FROM,
            "to": [email],
            "subject": OTP_SUBJECT,
            "html": render_otp_email(otp, ttl_minutes=max(1, settings.OTP_TTL_SECONDS // 60)),
        }
        headers = {"Authorization": f"Bearer {settings.RESEND_API_KEY}"}

        try:
            response = httpx.post(
                settings.RESEND_API_URL,
                json=payload,
                headers=headers,
                timeout=RESEND_TIMEOUT,
            )
        except httpx.HTTPError as e:
            logger.error(f"Resend network error sending to {email}: {e}")
            raise EmailDeliveryError(f"Failed to send email: {e}")

        if response.status_code >= 400:
            logger.error(f"Resend API error ({response.status_code}): {response.text[:300]}")
            raise EmailDeliveryError(
                f"Failed to send email: {response.text}",
                status_code=response.status_code,
            )

        email_id = response.json().get("id", "")
        logger.info(f"Verification email sent to {email} (id={email_id})")
        return email_id
