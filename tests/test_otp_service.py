# =============================================================================
# tests/test_otp_service.py - Verification Code Tests
# =============================================================================
# This module contains tests for:
# - Code generation and hashing
# - Starting a signup (send, store, cooldown)
# - Resending codes
# - Verifying codes (attempt counting, expiry, consumption)
#
# Tests use an in-memory Redis and a mocked EmailClient.
# =============================================================================

import time
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from unittest.mock import patch

import pytest

from app.config import settings
from app.exceptions import (
    EmailSendError,
    IncorrectOTPError,
    InvalidOTPError,
    OTPAttemptsExceededError,
    OTPCooldownError,
    OTPExpiredError,
)
from core.services import otp_service
from core.services.otp_service import OTPService, generate_code, hash_code
from lib.email_client import EmailDeliveryError
from lib.otp_store import OTPStore
from lib.utils import utc_now
from tests.conftest import InMemoryRedis

EMAIL = "jane@example.com"


@pytest.fixture
def mock_email():
    """Patch the email client; the sent code is mock_email.call_args[0][1]."""
    with patch("core.services.otp_service.EmailClient") as mock:
        mock.send_otp_email.return_value = "email-id-123"
        yield mock


class SlowReadRedis(InMemoryRedis):
    """Redis double whose reads yield, so verifications interleave."""

    def get(self, key):
        value = super().get(key)
        time.sleep(0.01)
        return value


def _sent_code(mock_email) -> str:
    return mock_email.send_otp_email.call_args[0][1]


def _age_pending(otp_store, seconds: int) -> None:
    """Move the stored sent_at back in time."""
    pending = otp_store.get(EMAIL)
    pending.sent_at = utc_now() - timedelta(seconds=seconds)
    otp_store.update(pending)


# =============================================================================
# Helpers
# =============================================================================

class TestGenerateCode:
    """Test code generation."""

    def test_six_digits_without_leading_zero(self):
        """Test codes are in 100000..999999."""
        for _ in range(200):
            code = generate_code()
            assert len(code) == 6
            assert code.isdigit()
            assert 100000 <= int(code) <= 999999

    def test_custom_length(self):
        assert len(generate_code(4)) == 4


class TestHashCode:
    """Test code hashing."""

    def test_hash_is_bound_to_email(self):
        """Test the same code hashes differently for different emails."""
        assert hash_code("a@example.com", "123456") != hash_code("b@example.com", "123456")

    def test_hash_is_stable(self):
        assert hash_code(EMAIL, "123456") == hash_code(EMAIL, "123456")

    def test_hash_is_not_plaintext(self):
        assert "123456" not in hash_code(EMAIL, "123456")


# =============================================================================
# Start Signup
# =============================================================================

class TestStartSignup:
    """Test OTPService.start_signup."""

    def test_sends_and_stores_code(self, otp_store, fake_redis, mock_email):
        """Test a new signup emails a code and stores only its hash."""
        # Act
        response = OTPService.start_signup("  Jane@Example.com ", "Jane Doe")

        # Assert
        assert response.email == EMAIL
        assert response.otp_sent is True
        assert response.expires_in == settings.OTP_TTL_SECONDS
        assert response.resend_after == settings.OTP_RESEND_COOLDOWN_SECONDS

        code = _sent_code(mock_email)
        pending = otp_store.get(EMAIL)
        assert pending.full_name == "Jane Doe"
        assert pending.attempts == 0
        assert pending.code_hash == hash_code(EMAIL, code)
        assert code not in fake_redis.data[otp_store.key(EMAIL)]
        assert fake_redis.ttls[otp_store.key(EMAIL)] == settings.OTP_TTL_SECONDS

    def test_send_failure_stores_nothing(self, otp_store, mock_email):
        """Test nothing is stored if Resend refuses the message."""
        mock_email.send_otp_email.side_effect = EmailDeliveryError("Failed to send email: bad key")

        with pytest.raises(EmailSendError):
            OTPService.start_signup(EMAIL)

        assert otp_store.get(EMAIL) is None

    def test_restart_within_cooldown_rejected(self, otp_store, mock_email):
        """Test starting twice in a row hits the cooldown."""
        OTPService.start_signup(EMAIL)

        with pytest.raises(OTPCooldownError) as exc_info:
            OTPService.start_signup(EMAIL)

        assert exc_info.value.status_code == 429
        assert 0 < exc_info.value.details["retry_after"] <= settings.OTP_RESEND_COOLDOWN_SECONDS

    def test_restart_after_cooldown_replaces_code(self, otp_store, mock_email):
        """Test starting again after the cooldown issues a new code."""
        OTPService.start_signup(EMAIL, "Jane")
        _age_pending(otp_store, settings.OTP_RESEND_COOLDOWN_SECONDS + 1)

        OTPService.start_signup(EMAIL, "Jane D")

        assert mock_email.send_otp_email.call_count == 2
        assert otp_store.get(EMAIL).full_name == "Jane D"


# =============================================================================
# Resend
# =============================================================================

class TestResend:
    """Test OTPService.resend."""

    def test_no_pending_signup(self, otp_store, mock_email):
        with pytest.raises(OTPExpiredError):
            OTPService.resend(EMAIL)

        mock_email.send_otp_email.assert_not_called()

    def test_within_cooldown(self, otp_store, mock_email):
        OTPService.start_signup(EMAIL)

        with pytest.raises(OTPCooldownError):
            OTPService.resend(EMAIL)

    def test_resend_keeps_name_and_resets_attempts(self, otp_store, mock_email):
        """Test a resend replaces the code, keeps the name, resets attempts."""
        OTPService.start_signup(EMAIL, "Jane")
        first_code = _sent_code(mock_email)
        with pytest.raises(IncorrectOTPError):
            OTPService.verify(EMAIL, "000000" if first_code != "000000" else "111111")
        _age_pending(otp_store, settings.OTP_RESEND_COOLDOWN_SECONDS + 1)

        OTPService.resend(EMAIL)

        pending = otp_store.get(EMAIL)
        second_code = _sent_code(mock_email)
        assert pending.full_name == "Jane"
        assert pending.attempts == 0
        assert pending.code_hash == hash_code(EMAIL, second_code)

    def test_failed_resend_keeps_old_code(self, otp_store, mock_email):
        """Test the old code stays valid when the resend email fails."""
        OTPService.start_signup(EMAIL)
        first_code = _sent_code(mock_email)
        _age_pending(otp_store, settings.OTP_RESEND_COOLDOWN_SECONDS + 1)
        mock_email.send_otp_email.side_effect = EmailDeliveryError("Failed to send email: down")

        with pytest.raises(EmailSendError):
            OTPService.resend(EMAIL)

        assert otp_store.get(EMAIL).code_hash == hash_code(EMAIL, first_code)


# =============================================================================
# Verify
# =============================================================================

class TestVerify:
    """Test OTPService.verify."""

    @pytest.mark.parametrize(
        "code",
        [
            "", "12345", "1234567", "12a456",
            # Unicode digits
            "\u0661\u0662\u0663\u0664\u0665\u0666",
            "12345\u00b2",
            "\uff11\uff12\uff13\uff14\uff15\uff16",
        ],
    )
    def test_incomplete_code(self, otp_store, code):
        """Test codes that are not exactly six ASCII digits."""
        with pytest.raises(InvalidOTPError) as exc_info:
            OTPService.verify(EMAIL, code)

        assert exc_info.value.message == "Please enter the complete 6-digit code"

    def test_no_pending_signup(self, otp_store):
        with pytest.raises(OTPExpiredError):
            OTPService.verify(EMAIL, "123456")

    def test_correct_code_consumes_signup(self, otp_store, mock_email):
        """Test the right code returns the signup and deletes it."""
        OTPService.start_signup(EMAIL, "Jane")
        code = _sent_code(mock_email)

        pending = OTPService.verify(EMAIL, code)

        assert pending.email == EMAIL
        assert pending.full_name == "Jane"
        assert otp_store.get(EMAIL) is None

    def test_wrong_code_counts_attempt(self, otp_store, fake_redis, mock_email):
        """Test a wrong code increments attempts and keeps the TTL."""
        OTPService.start_signup(EMAIL)
        code = _sent_code(mock_email)
        wrong = "100000" if code != "100000" else "100001"

        with pytest.raises(IncorrectOTPError) as exc_info:
            OTPService.verify(EMAIL, wrong)

        assert exc_info.value.message == "The code you entered is incorrect. Please try again."
        assert exc_info.value.details["attempts_left"] == settings.OTP_MAX_ATTEMPTS - 1
        assert otp_store.get(EMAIL).attempts == 1
        assert fake_redis.ttls[otp_store.attempts_key(EMAIL)] == settings.OTP_TTL_SECONDS

    def test_attempts_exhausted(self, otp_store, mock_email):
        """Test the signup is deleted after too many wrong codes."""
        OTPService.start_signup(EMAIL)
        code = _sent_code(mock_email)
        wrong = "100000" if code != "100000" else "100001"

        for _ in range(settings.OTP_MAX_ATTEMPTS - 1):
            with pytest.raises(IncorrectOTPError):
                OTPService.verify(EMAIL, wrong)

        with pytest.raises(OTPAttemptsExceededError):
            OTPService.verify(EMAIL, wrong)

        assert otp_store.get(EMAIL) is None
        with pytest.raises(OTPExpiredError):
            OTPService.verify(EMAIL, code)

    def test_concurrent_wrong_codes_share_one_budget(self, monkeypatch, mock_email):
        """Test parallel wrong guesses cannot exceed the attempt limit."""
        # Arrange
        store = OTPStore(client=SlowReadRedis())
        monkeypatch.setattr(otp_service, "otp_store", store)
        OTPService.start_signup(EMAIL)
        code = _sent_code(mock_email)
        wrong = "100000" if code != "100000" else "100001"
        guesses = settings.OTP_MAX_ATTEMPTS * 4

        def guess(_):
            try:
                OTPService.verify(EMAIL, wrong)
            except (IncorrectOTPError, OTPAttemptsExceededError, OTPExpiredError) as e:
                return type(e)

        # Act
        with ThreadPoolExecutor(max_workers=guesses) as pool:
            outcomes = list(pool.map(guess, range(guesses)))

        # Assert
        assert outcomes.count(IncorrectOTPError) == settings.OTP_MAX_ATTEMPTS - 1
        assert OTPAttemptsExceededError in outcomes
        assert store.get(EMAIL) is None
        with pytest.raises(OTPExpiredError):
            OTPService.verify(EMAIL, code)

    def test_resend_after_burn_starts_fresh_budget(self, otp_store, mock_email):
        """Test a new code gets a new attempt budget."""
        OTPService.start_signup(EMAIL)
        wrong = "100000" if _sent_code(mock_email) != "100000" else "100001"
        for _ in range(settings.OTP_MAX_ATTEMPTS):
            with pytest.raises((IncorrectOTPError, OTPAttemptsExceededError)):
                OTPService.verify(EMAIL, wrong)

        OTPService.start_signup(EMAIL)

        assert otp_store.attempts(EMAIL) == 0
        assert OTPService.verify(EMAIL, _sent_code(mock_email)).email == EMAIL

    def test_email_is_normalised(self, otp_store, mock_email):
        OTPService.start_signup(EMAIL)
        code = _sent_code(mock_email)

        pending = OTPService.verify("JANE@example.com ", code)

        assert pending.email == EMAIL
