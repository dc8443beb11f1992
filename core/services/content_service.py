# =============================================================================
# core/services/content_service.py - Static Content & Contact Form
# =============================================================================
# Serves the remedies, upload tips and contact details shown on the site,
# and stores contact form submissions.
# =============================================================================

import logging

from core.models.content import (
    ContactInfo,
    ContactRequest,
    ContactResponse,
    Food,
    Ingredient,
    RemedyCategory,
    Remedies,
    UploadTip,
)
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


# =============================================================================
# Remedies
# =============================================================================

REMEDY_CATEGORIES = [
    RemedyCategory(
        category="Morning Routine",
        tips=[
            "Gentle cleanser to remove overnight oil buildup",
            "Vitamin C serum for brightening and protection",
            "Lightweight moisturizer with SPF 30+",
            "Don't skip sunscreen even on cloudy days",
        ],
    ),
    RemedyCategory(
        category="Evening Routine",
        tips=[
            "Double cleanse to remove makeup and sunscreen",
            "Apply retinol or niacinamide serum",
            "Rich night cream for overnight repair",
            "Use a silk pillowcase to reduce friction",
        ],
    ),
    RemedyCategory(
        category="Hydration Tips",
        tips=[
            "Drink at least 8 glasses of water daily",
            "Use a humidifier in dry environments",
            "Apply hyaluronic acid on damp skin",
            "Mist face throughout the day",
        ],
    ),
    RemedyCategory(
        category="Lifestyle Habits",
        tips=[
            "Get 7-8 hours of quality sleep",
            "Reduce stress with meditation or yoga",
            "Exercise regularly for better circulation",
            "Avoid touching your face frequently",
        ],
    ),
]

INGREDIENTS = [
    Ingredient(name="Niacinamide", benefit="Reduces pores & controls oil"),
    Ingredient(name="Hyaluronic Acid", benefit="Deep hydration & plumping"),
    Ingredient(name="Vitamin C", benefit="Brightening & antioxidant"),
    Ingredient(name="Retinol", benefit="Anti-aging & cell renewal"),
]

FOODS = [
    Food(name="Avocados", benefit="Healthy fats for skin barrier"),
    Food(name="Green Tea", benefit="Antioxidants & anti-inflammatory"),
    Food(name="Berries", benefit="Vitamin C & collagen support"),
    Food(name="Fatty Fish", benefit="Omega-3 for moisture retention"),
]

UPLOAD_TIPS = [
    UploadTip(title="Good Lighting", description="Natural light works best"),
    UploadTip(title="Clear Photo", description="No filters or makeup"),
    UploadTip(title="Face Forward", description="Look directly at camera"),
]

CONTACT_INFO = ContactInfo(
    email="hello@skinsense.ai",
    email_note="We'll respond within 24 hours",
    phone="+91 98765 43210",
    phone_hours="Mon-Fri, 9am-6pm IST",
    address=["123 Tech Park, Andheri East", "Mumbai, Maharashtra 400093"],
)


class ContentService:
    """
    Service for site content and the contact form.
    """

    @staticmethod
    def get_remedies() -> Remedies:
        return Remedies(
            categories=[c.model_copy(deep=True) for c in REMEDY_CATEGORIES],
            ingredients=list(INGREDIENTS),
            foods=list(FOODS),
        )

    @staticmethod
    def get_upload_tips() -> list[UploadTip]:
        return list(UPLOAD_TIPS)

    @staticmethod
    def get_contact_info() -> ContactInfo:
        return CONTACT_INFO.model_copy(deep=True)

    @staticmethod
    def submit_contact(request: ContactRequest, user_id: str | None = None) -> ContactResponse:
        """
        Store a contact form submission.

        Args:
            request: The form fields
            user_id: Sender's account, when signed in

        Raises:
            SupabaseClientError: If the insert fails
        """
        data = request.model_dump()
        if user_id:
            data["user_id"] = user_id

        SupabaseClient.insert_contact_message(data)
        logger.info(f"Contact message stored from {request.email} ({request.subject[:40]})")
        return ContactResponse()
