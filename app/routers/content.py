# =============================================================================
# app/routers/content.py - Site Content & Contact Form
# =============================================================================
# Public endpoints, no token required.
# =============================================================================

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user_optional
from core.models.content import (
    ContactInfo,
    ContactRequest,
    ContactResponse,
    Remedies,
    UploadTip,
)
from core.services.content_service import ContentService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/content/remedies", response_model=Remedies)
async def get_remedies():
    """Routine tips, key ingredients and skin-friendly foods."""
    return ContentService.get_remedies()


@router.get("/content/upload-tips", response_model=list[UploadTip])
async def get_upload_tips():
    """Hints shown next to the photo upload."""
    return ContentService.get_upload_tips()


@router.get("/contact", response_model=ContactInfo)
async def get_contact_info():
    """Email, phone and office address."""
    return ContentService.get_contact_info()


@router.post("/contact", response_model=ContactResponse)
async def submit_contact(
    request: ContactRequest,
    user: Optional[AuthUser] = Depends(get_current_user_optional),
):
    """
    Send a message through the contact form.

    Signed-in senders are linked to their account.
    """
    user_id = str(user.id) if user else None
    return ContentService.submit_contact(request, user_id=user_id)
