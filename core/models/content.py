# =============================================================================
# core/models/content.py - Static Content & Contact Schemas
# =============================================================================
# Models for the content the landing and report pages render, and for the
# contact form.
# =============================================================================

from pydantic import BaseModel, EmailStr, Field, field_validator


class RemedyCategory(BaseModel):
    category: str
    tips: list[str]


class Ingredient(BaseModel):
    name: str
    benefit: str


class Food(BaseModel):
    name: str
    benefit: str


class Remedies(BaseModel):
    """The "Your Skincare Remedies" section."""

    title: str = "Your Skincare Remedies"
    categories: list[RemedyCategory]
    ingredients: list[Ingredient]
    foods: list[Food]


class UploadTip(BaseModel):
    title: str
    description: str


class ContactInfo(BaseModel):
    email: str
    email_note: str
    phone: str
    phone_hours: str
    address: list[str]


class ContactRequest(BaseModel):
    """
    Contact form submission. Every field is required and non-blank.

    Example:
        {
            "name": "Jane",
            "email": "jane@example.com",
            "subject": "Billing",
            "message": "I was charged twice"
        }
    """

    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("name", "subject", "message")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ContactResponse(BaseModel):
    success: bool = True
    title: str = "Message sent!"
    message: str = "We'll get back to you as soon as possible."
