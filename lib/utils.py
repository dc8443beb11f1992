# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from datetime import datetime, timezone
from typing import Any
from uuid import UUID


# =============================================================================
# UUID / Email Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Example:
        user_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        user_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


def normalize_email(email: str) -> str:
    """
    Normalize an email address for use as a lookup key.

    Example:
        normalize_email("  Hello@Example.COM ")  # "hello@example.com"
    """
    return email.strip().lower()


# =============================================================================
# Time Utilities
# =============================================================================

def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def start_of_utc_day(moment: datetime | None = None) -> datetime:
    """Midnight UTC of the day containing `moment` (default: now)."""
    moment = moment or utc_now()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """
    Parse a Postgres/ISO timestamp into an aware datetime.

    Naive values are assumed to be UTC. Supabase returns "Z" and "+00:00"
    suffixes; both are accepted.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for third-party client errors.

    Provides actionable error messages: what failed and how to fix it.

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging

    Example:
        class MyClientError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="MY_CLIENT_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
