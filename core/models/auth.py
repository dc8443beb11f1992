# =============================================================================
# core/models/auth.py - Signup / Login Schemas
# =============================================================================
# These models define the API contract for the account flows:
# - SignupRequest: Start email signup (a verification code is emailed)
# - VerifyOTPRequest: Submit the code; the account is created on success
# - ResendOTPRequest: Ask for a fresh code
# - LoginRequest: Email + password sign-in
# - AuthSession: Tokens handed back to the client
# - PendingSignup: What we remember between "send code" and "verify code"
#
# Flow:
#   signup -> send-code -> verify-code -> account created (+ signed in)
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, EmailStr, Field, field_validator

# Supabase's default minimum password length
MIN_PASSWORD_LENGTH = 6


class SignupRequest(BaseModel):
    """
    Schema for starting an email signup.

    Example:
        {
            "email": "hello@example.com",
            "password": "s3cret-pass",
            "full_name": "John Doe"
        }
    """

    email: EmailStr = Field(..., description="Email address to verify")
    password: str = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        max_length=72,
        description="Password for the new account"
    )
    full_name: str = Field(
        default="",
        max_length=120,
        description="Display name stored in the user's metadata"
    )

    @field_validator("full_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class VerifyOTPRequest(BaseModel):
    """
    Schema for submitting a verification code.

    The password is sent again here; it is never stored server side
    between the two steps.
    """

    email: EmailStr
    code: str = Field(..., description="The code from the verification email")
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=72)
    full_name: str = Field(default="", max_length=120, description="Used if the signup step had none")

    @field_validator("code")
    @classmethod
    def strip_code(cls, v: str) -> str:
        return v.strip()


class ResendOTPRequest(BaseModel):
    """Schema for requesting a new code."""

    email: EmailStr


class LoginRequest(BaseModel):
    """Schema for password sign-in."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class OAuthProvider(str, Enum):
    """OAuth providers offered on the sign-in page."""
    GOOGLE = "google"


class AuthSession(BaseModel):
    """
    Session tokens returned after a successful sign-in.

    Mirrors the fields of a Supabase Auth session that the client needs.
    """

    access_token: str
    refresh_token: str
    expires_in: int | None = None
    token_type: str = "bearer"
    user_id: str
    email: str | None = None


class SignupStartResponse(BaseModel):
    """Returned when a verification code was sent."""

    email: str
    otp_sent: bool = True
    expires_in: int = Field(..., description="Seconds until the code expires")
    resend_after: int = Field(..., description="Seconds until a resend is allowed")


class SignupStatus(str, Enum):
    """
    Outcome of a successful verification.

    - active: account created and signed in (session attached)
    - created: account created but sign-in must be done manually
    """
    ACTIVE = "active"
    CREATED = "created"


class SignupCompleteResponse(BaseModel):
    """Returned after the code was accepted and the account created."""

    status: SignupStatus
    message: str
    session: AuthSession | None = None
    requires_login: bool = False


class PendingSignup(BaseModel):
    """
    Server-side state of a signup awaiting verification.

    Stored in Redis under otp:signup:{email} with a TTL equal to the
    code's lifetime. Only a keyed hash of the code is kept.
    """

    email: str
    code_hash: str
    full_name: str = ""
    attempts: int = Field(default=0, ge=0)
    sent_at: datetime
