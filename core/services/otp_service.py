# =============================================================================
# core/services/otp_service.py - Email Verification Codes
# =============================================================================
# Issues, re-issues and checks the 6-digit codes that gate email signup.
#
#   start_signup -> code emailed, PendingSignup stored
#   resend       -> new code emailed (after the cooldown)
#   verify       -> code checked; PendingSignup consumed on success
#
# Codes are never stored in plaintext: only an HMAC keyed by SECRET_KEY.
# =============================================================================

import hashlib
import hmac
import logging
import math
import secrets

from app.config import settings
from app.exceptions import (
    EmailSendError,
    IncorrectOTPError,
    InvalidOTPError,
    OTPAttemptsExceededError,
    OTPCooldownError,
    OTPExpiredError,
)
from core.models.auth import PendingSignup, SignupStartResponse
from lib.email_client import EmailClient, EmailDeliveryError
from lib.otp_store import OTPStore
from lib.utils import normalize_email, parse_timestamp, utc_now

logger = logging.getLogger(__name__)

# Shared store; tests replace it with an in-memory fake
otp_store = OTPStore()


def generate_code(length: int | None = None) -> str:
    """
    Random numeric code without a leading zero.

    For the default length of 6 this is uniform over 100000..999999.
    """
    length = length or settings.OTP_LENGTH
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


def hash_code(email: str, code: str) -> str:
    """Keyed digest of a code, bound to the email it was sent to."""
    message = f"{email}:{code}".encode("utf-8")
    return hmac.new(settings.SECRET_KEY.encode("utf-8"), message, hashlib.sha256).hexdigest()


class OTPService:
    """
    Service for signup verification codes.

    Provides a clean interface between the auth routes, Redis and Resend.
    """

    @staticmethod
    def _cooldown_remaining(pending: PendingSignup) -> int:
        sent_at = parse_timestamp(pending.sent_at)
        elapsed = (utc_now() - sent_at).total_seconds()
        return max(0, math.ceil(settings.OTP_RESEND_COOLDOWN_SECONDS - elapsed))

    @staticmethod
    def _send(email: str, code: str) -> None:
        try:
            EmailClient.send_otp_email(email, code)
        except EmailDeliveryError as e:
            logger.error(f"Failed to send verification code to {email}: {e.message}")
            raise EmailSendError(e.message)

    @staticmethod
    def _issue(email: str, full_name: str) -> SignupStartResponse:
        """Email a new code, then store it. Nothing is stored if the send fails."""
        code = generate_code()
        OTPService._send(email, code)

        pending = PendingSignup(
            email=email,
            code_hash=hash_code(email, code),
            full_name=full_name,
            attempts=0,
            sent_at=utc_now(),
        )
        otp_store.save(pending, ttl_seconds=settings.OTP_TTL_SECONDS)
        logger.info(f"Issued verification code for {email}")

        return SignupStartResponse(
            email=email,
            expires_in=settings.OTP_TTL_SECONDS,
            resend_after=settings.OTP_RESEND_COOLDOWN_SECONDS,
        )

    @staticmethod
    def start_signup(email: str, full_name: str = "") -> SignupStartResponse:
        """
        Send the first code for a signup.

        Starting again for the same email replaces the previous code, but
        not faster than the resend cooldown.

        Raises:
            OTPCooldownError: A code was sent to this email moments ago
            EmailSendError: Resend refused the message
        """
        email = normalize_email(email)

        existing = otp_store.get(email)
        if existing:
            remaining = OTPService._cooldown_remaining(existing)
            if remaining > 0:
                raise OTPCooldownError(remaining)

        return OTPService._issue(email, full_name)

    @staticmethod
    def resend(email: str) -> SignupStartResponse:
        """
        Replace the code of a pending signup with a new one.

        Raises:
            OTPExpiredError: No pending signup for this email
            OTPCooldownError: Asked again before the cooldown elapsed
            EmailSendError: Resend refused the message (old code stays valid)
        """
        email = normalize_email(email)

        pending = otp_store.get(email)
        if pending is None:
            raise OTPExpiredError(email)

        remaining = OTPService._cooldown_remaining(pending)
        if remaining > 0:
            raise OTPCooldownError(remaining)

        return OTPService._issue(email, pending.full_name)

    @staticmethod
    def verify(email: str, code: str) -> PendingSignup:
        """
        Check a submitted code.

        Returns:
            The consumed PendingSignup (carries the full name)

        Raises:
            InvalidOTPError: Code is not exactly OTP_LENGTH digits
            OTPExpiredError: No pending signup (never sent, or expired)
            IncorrectOTPError: Wrong code, attempts remain
            OTPAttemptsExceededError: Wrong code, no attempts left
        """
        email = normalize_email(email)

        # isdigit alone accepts Arabic-Indic and superscript digits
        if len(code) != settings.OTP_LENGTH or not (code.isascii() and code.isdigit()):
            raise InvalidOTPError(settings.OTP_LENGTH)

        pending = otp_store.get(email)
        if pending is None:
            raise OTPExpiredError(email)

        if not hmac.compare_digest(pending.code_hash, hash_code(email, code)):
            attempts = otp_store.record_failed_attempt(email, settings.OTP_TTL_SECONDS)
            attempts_left = settings.OTP_MAX_ATTEMPTS - attempts
            if attempts_left <= 0:
                otp_store.burn(email)
                logger.warning(f"Verification code for {email} burned after {attempts} attempts")
                raise OTPAttemptsExceededError(settings.OTP_MAX_ATTEMPTS)
            logger.info(f"Incorrect verification code for {email} ({attempts_left} attempts left)")
            raise IncorrectOTPError(attempts_left)

        otp_store.delete(email)
        logger.info(f"Verification code accepted for {email}")
        return pending
