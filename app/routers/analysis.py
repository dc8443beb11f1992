# =============================================================================
# app/routers/analysis.py - Skin Analysis Endpoints
# =============================================================================
# Photo upload, daily allowance, history and the report page.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile

from app.auth import AuthUser, get_current_user
from core.models.analysis import AnalysisQueued, DailyLimit, SkinReport
from core.models.profile import AnalysisSummary
from core.services.analysis_service import AnalysisService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Upload
# =============================================================================

@router.post("", response_model=AnalysisQueued, status_code=202)
async def upload_photo(
    file: Annotated[UploadFile, File(description="Face photo (JPEG, PNG or WebP)")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload a face photo and start the analysis.

    This endpoint:
    1. Validates the image (type, size)
    2. Checks today's scan allowance
    3. Queues the analysis in the background

    Poll GET /api/v1/tasks/{task_id}; on SUCCESS the result carries the
    analysis_id for GET /api/v1/analysis/{analysis_id}/report.
    """
    content = await file.read()
    logger.info(f"Processing photo upload: {file.filename} ({len(content)} bytes)")

    return AnalysisService.start_analysis(
        user=user,
        filename=file.filename,
        content_type=file.content_type,
        content=content,
    )


# =============================================================================
# Allowance & History
# =============================================================================

@router.get("/limit", response_model=DailyLimit)
async def get_daily_limit(user: AuthUser = Depends(get_current_user)):
    """
    Get scans used and remaining today (UTC).
    """
    return AnalysisService.get_daily_limit(user.id)


@router.get("/history", response_model=list[AnalysisSummary])
async def get_history(
    limit: Annotated[int, Query(ge=1, le=50, description="Max entries")] = 10,
    user: AuthUser = Depends(get_current_user),
):
    """
    Get the user's analyses, newest first.
    """
    return AnalysisService.get_history(user.id, limit=limit)


# =============================================================================
# Report
# =============================================================================

@router.get("/latest/report", response_model=SkinReport)
async def get_latest_report(user: AuthUser = Depends(get_current_user)):
    """
    Get the report for the user's most recent analysis.
    """
    return AnalysisService.get_latest_report(user)


@router.get("/{analysis_id}/report", response_model=SkinReport)
async def get_report(
    analysis_id: Annotated[UUID, Path(description="Analysis UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Get the report for one analysis.

    Premium sections (locked concerns, AI summary, routine) are withheld
    unless the user has an active subscription.
    """
    return AnalysisService.get_report(user, analysis_id)
