# =============================================================================
# tests/test_email_client.py - Resend Client Tests
# =============================================================================

from unittest.mock import MagicMock, patch

import httpx
import pytest

from app.config import settings
from lib.email_client import (
    OTP_SUBJECT,
    EmailClient,
    EmailDeliveryError,
    render_otp_email,
)

EMAIL = "jane@example.com"


def make_response(status_code: int, json_data=None, text: str = ""):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data or {}
    response.text = text
    return response


class TestRenderOtpEmail:
    """Test the HTML body."""

    def test_contains_code_and_expiry(self):
        html = render_otp_email("482913", ttl_minutes=10)

        assert "482913" in html
        assert "This code expires in 10 minutes." in html


class TestSendOtpEmail:
    """Test EmailClient.send_otp_email."""

    @pytest.mark.parametrize("email,otp", [("", "123456"), (EMAIL, ""), ("", "")])
    def test_required_fields(self, email, otp):
        with pytest.raises(ValueError, match="Email and OTP are required"):
            EmailClient.send_otp_email(email, otp)

    @patch("lib.email_client.httpx.post")
    def test_success(self, mock_post):
        """Test request shape and returned message id."""
        # Arrange
        mock_post.return_value = make_response(200, {"id": "email-id-123"})

        # Act
        email_id = EmailClient.send_otp_email(EMAIL, "482913")

        # Assert
        assert email_id == "email-id-123"
        args, kwargs = mock_post.call_args
        assert args[0] == settings.RESEND_API_URL
        assert kwargs["headers"] == {"Authorization": f"Bearer {settings.RESEND_API_KEY}"}
        assert kwargs["json"]["to"] == [EMAIL]
        assert kwargs["json"]["from"] == settings.EMAIL_FROM
        assert kwargs["json"]["subject"] == OTP_SUBJECT
        assert "482913" in kwargs["json"]["html"]

    @patch("lib.email_client.httpx.post")
    def test_rejected(self, mock_post):
        mock_post.return_value = make_response(
            422, text='{"message":"Invalid `to` field"}'
        )

        with pytest.raises(EmailDeliveryError) as exc_info:
            EmailClient.send_otp_email(EMAIL, "482913")

        assert exc_info.value.status_code == 422
        assert "Invalid `to` field" in exc_info.value.message

    @patch("lib.email_client.httpx.post")
    def test_network_error(self, mock_post):
        mock_post.side_effect = httpx.ConnectTimeout("timed out")

        with pytest.raises(EmailDeliveryError) as exc_info:
            EmailClient.send_otp_email(EMAIL, "482913")

        assert exc_info.value.status_code is None

    @patch("lib.email_client.httpx.post")
    def test_dev_without_api_key_logs_code(self, mock_post):
        """Test development mode works without a Resend account."""
        with patch.object(settings, "RESEND_API_KEY", ""):
            email_id = EmailClient.send_otp_email(EMAIL, "482913")

        assert email_id.startswith("dev-")
        mock_post.assert_not_called()

    def test_production_without_api_key(self):
        with patch.object(settings, "RESEND_API_KEY", ""), \
                patch.object(settings, "ENVIRONMENT", "production"):
            with pytest.raises(EmailDeliveryError):
                EmailClient.send_otp_email(EMAIL, "482913")
