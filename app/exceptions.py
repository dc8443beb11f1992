# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors tell the client HOW to fix the problem, not just WHAT failed.
# Provider messages (Supabase, Razorpay, Resend) are passed through as-is.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class SkinSenseException(Exception):
    """
    Base exception for the SkinSense API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "SKINSENSE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# OTP / Signup Exceptions
# =============================================================================

class InvalidOTPError(SkinSenseException):
    """Raised when the submitted code is not a complete numeric code."""

    def __init__(self, length: int):
        super().__init__(
            message=f"Please enter the complete {length}-digit code",
            code="INVALID_OTP",
            status_code=400,
            suggestion="Enter every digit from the verification email",
            details={"length": length},
        )


class IncorrectOTPError(SkinSenseException):
    """Raised when the code does not match the one that was sent."""

    def __init__(self, attempts_left: int):
        super().__init__(
            message="The code you entered is incorrect. Please try again.",
            code="INCORRECT_OTP",
            status_code=400,
            suggestion="Check the latest verification email or request a new code",
            details={"attempts_left": attempts_left},
        )


class OTPExpiredError(SkinSenseException):
    """Raised when there is no live code for this email."""

    def __init__(self, email: str):
        super().__init__(
            message="Your verification code has expired or was never requested",
            code="OTP_EXPIRED",
            status_code=400,
            suggestion="Start the signup again to receive a new code",
            details={"email": email},
        )


class OTPAttemptsExceededError(SkinSenseException):
    """Raised when too many wrong codes were entered."""

    def __init__(self, max_attempts: int):
        super().__init__(
            message="Too many incorrect attempts. The code is no longer valid.",
            code="OTP_ATTEMPTS_EXCEEDED",
            status_code=429,
            suggestion="Start the signup again to receive a new code",
            details={"max_attempts": max_attempts},
        )


class OTPCooldownError(SkinSenseException):
    """Raised when a new code is requested too soon."""

    def __init__(self, retry_after: int):
        super().__init__(
            message=f"Please wait {retry_after}s before requesting a new code",
            code="OTP_COOLDOWN",
            status_code=429,
            suggestion="Check your inbox and spam folder for the previous code",
            details={"retry_after": retry_after},
        )


class SignupFailedError(SkinSenseException):
    """Raised when Supabase refuses to create the account."""

    def __init__(self, provider_message: str):
        super().__init__(
            message=provider_message,
            code="SIGNUP_FAILED",
            status_code=400,
            suggestion="Account creation failed. Try a different email or password.",
        )


class LoginFailedError(SkinSenseException):
    """Raised when Supabase rejects the credentials."""

    def __init__(self, provider_message: str):
        super().__init__(
            message=provider_message,
            code="LOGIN_FAILED",
            status_code=401,
            suggestion="Check your email and password",
        )


class OAuthError(SkinSenseException):
    """Raised when an OAuth sign-in URL cannot be produced."""

    def __init__(self, provider: str, error: str):
        super().__init__(
            message=f"Could not start {provider} sign-in: {error}",
            code="OAUTH_FAILED",
            status_code=400,
            suggestion="Only Google sign-in is supported",
            details={"provider": provider},
        )


class EmailSendError(SkinSenseException):
    """Raised when the verification email could not be delivered."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Could not send verification code: {error}",
            code="EMAIL_SEND_FAILED",
            status_code=502,
            suggestion="Try again in a moment",
        )


# =============================================================================
# Payment Exceptions
# =============================================================================

class InvalidPaymentInputError(SkinSenseException):
    """Raised when order or verification input is missing or malformed."""

    def __init__(self, message: str = "INVALID_INPUT", details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="INVALID_INPUT",
            status_code=400,
            suggestion="Pick one of the plans returned by GET /api/v1/plans",
            details=details,
        )


class PaymentNotConfiguredError(SkinSenseException):
    """Raised when Razorpay keys are not set."""

    def __init__(self, message: str = "RAZORPAY_ENV_MISSING"):
        super().__init__(
            message=message,
            code="RAZORPAY_ENV_MISSING",
            status_code=500,
            suggestion="Set RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET",
        )


class RazorpayOrderError(SkinSenseException):
    """Raised when Razorpay rejects the order request."""

    def __init__(self, provider_response: str):
        super().__init__(
            message="RAZORPAY_ERROR",
            code="RAZORPAY_ERROR",
            status_code=400,
            details={"razorpay": provider_response},
        )


class InvalidSignatureError(SkinSenseException):
    """Raised when the checkout signature does not match."""

    def __init__(self, order_id: str):
        super().__init__(
            message="Invalid payment signature",
            code="INVALID_SIGNATURE",
            status_code=400,
            suggestion="Do not retry; contact support if you were charged",
            details={"razorpay_order_id": order_id},
        )


class OrderMismatchError(SkinSenseException):
    """Raised when a signed order was not opened by this user for this plan."""

    def __init__(self, order_id: str, details: dict | None = None):
        super().__init__(
            message="Payment does not match the order",
            code="ORDER_MISMATCH",
            status_code=400,
            suggestion="Start checkout again from the pricing page",
            details={"razorpay_order_id": order_id, **(details or {})},
        )


class SubscriptionUpdateError(SkinSenseException):
    """Raised when a verified payment could not be recorded."""

    def __init__(self, error: str):
        super().__init__(
            message="Failed to update subscription",
            code="SUBSCRIPTION_UPDATE_FAILED",
            status_code=500,
            suggestion="Your payment was received; contact support with your payment id",
            details={"error": error},
        )


# =============================================================================
# Profile Exceptions
# =============================================================================

class ProfileNotFoundError(SkinSenseException):
    """Raised when the user has no profile row to update."""

    def __init__(self, user_id: str):
        super().__init__(
            message="Profile not found",
            code="PROFILE_NOT_FOUND",
            status_code=404,
            suggestion="Sign out and sign in again to recreate your profile",
            details={"user_id": user_id},
        )


# =============================================================================
# Analysis Exceptions
# =============================================================================

class AnalysisNotFoundError(SkinSenseException):
    """Raised when an analysis id doesn't exist or isn't owned by the user."""

    def __init__(self, analysis_id: str):
        super().__init__(
            message=f"Analysis not found: {analysis_id}",
            code="ANALYSIS_NOT_FOUND",
            status_code=404,
            suggestion="Upload a photo to run your first analysis",
            details={"analysis_id": analysis_id},
        )


class InvalidImageError(SkinSenseException):
    """Raised when uploaded file is not an accepted image."""

    def __init__(self, filename: str, allowed: list[str], reason: str | None = None):
        super().__init__(
            message=reason or f"Invalid file type: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these image types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed}
        )


class ImageTooLargeError(SkinSenseException):
    """Raised when uploaded image exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a photo smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb}
        )


class DailyLimitReachedError(SkinSenseException):
    """Raised when the user has used all scans for today."""

    def __init__(self, scans_today: int, max_scans: int):
        super().__init__(
            message="You've reached today's scan limit",
            code="DAILY_LIMIT_REACHED",
            status_code=429,
            suggestion="Skin changes take time—check back tomorrow for your next analysis.",
            details={"scans_today": scans_today, "max_scans": max_scans},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def skinsense_exception_handler(
    request: Request,
    exc: SkinSenseException
) -> JSONResponse:
    """
    Convert SkinSenseException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def database_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Convert SupabaseClientError to JSON response.

    The data layer's own code is kept so the client can tell which
    query failed.
    """
    return JSONResponse(
        status_code=500,
        content={
            "detail": getattr(exc, "message", str(exc)),
            "code": getattr(exc, "code", "DATABASE_ERROR"),
        }
    )
