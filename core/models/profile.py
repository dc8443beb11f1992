# =============================================================================
# core/models/profile.py - Account Profile Schemas
# =============================================================================
# These models define the API contract for the profile page:
# - Profile: one row of the profiles table
# - ProfileUpdate: the editable fields (name, age, gender)
# - AnalysisSummary: one line of the analysis history list
# - ProfileOverview: profile + subscription + recent history in one call
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from .subscription import SubscriptionStatus


class Gender(str, Enum):
    """Options offered by the profile form."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    PREFER_NOT_TO_SAY = "prefer_not_to_say"


class Profile(BaseModel):
    """
    One row of the profiles table.

    Rows are created by a database trigger when an auth user signs up,
    so every field except the ids may still be empty.
    """

    id: str
    user_id: str
    full_name: str | None = None
    email: str | None = None
    age: int | None = None
    gender: str | None = None
    skin_concerns: list[str] | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None


class ProfileUpdate(BaseModel):
    """
    Editable profile fields.

    Empty strings are stored as NULL ("Not set" on the page).

    Example:
        {"full_name": "Jane Doe", "age": 29, "gender": "female"}
    """

    full_name: str | None = Field(default=None, max_length=120)
    age: int | None = Field(default=None, ge=1, le=120)
    gender: Gender | None = None

    @field_validator("full_name", mode="before")
    @classmethod
    def blank_name_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("age", "gender", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_row(self) -> dict:
        """Columns to write; all three are always written, like the form."""
        return {
            "full_name": self.full_name,
            "age": self.age,
            "gender": self.gender.value if self.gender else None,
        }


class AnalysisSummary(BaseModel):
    """One entry of the analysis history list."""

    id: str
    overall_score: int | None = None
    skin_type: str | None = None
    analyzed_at: datetime


class ProfileOverview(BaseModel):
    """
    Everything the profile page shows.

    `profile` is None when the profiles row does not exist yet; `email`
    then falls back to the address in the access token.
    """

    profile: Profile | None = None
    email: str | None = None
    subscription: SubscriptionStatus
    history: list[AnalysisSummary] = Field(default_factory=list)
