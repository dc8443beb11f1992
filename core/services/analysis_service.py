# =============================================================================
# core/services/analysis_service.py - Skin Analysis Business Logic
# =============================================================================
# Upload flow:
# 1. Validate the image (type, size, not empty)
# 2. Reserve one of today's scans (free vs. premium allowance)
# 3. Simulated photo quality hints
# 4. Queue run_skin_analysis on Celery and return the task id
#    (the reservation is released if queueing fails)
#
# The report is built from the stored row when it is requested, so the
# premium lock always reflects the viewer's current plan.
# =============================================================================

import hashlib
import logging
import random
from uuid import UUID

from app.auth.models import AuthUser
from app.config import settings
from app.exceptions import (
    AnalysisNotFoundError,
    DailyLimitReachedError,
    ImageTooLargeError,
    InvalidImageError,
)
from core.models.analysis import (
    AnalysisQueued,
    DailyLimit,
    QualityCheck,
    SkinReport,
)
from core.models.profile import AnalysisSummary
from core.services.report_builder import build_report
from core.services.subscription_service import SubscriptionService
from lib.scan_counter import ScanCounter
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, start_of_utc_day

logger = logging.getLogger(__name__)

# Shared counter; tests replace it with one on an in-memory fake
scan_counter = ScanCounter()


def build_daily_limit(scans_today: int, max_scans: int) -> DailyLimit:
    """Allowance for the day, with the message shown in the banner."""
    remaining = max(0, max_scans - scans_today)
    limit_reached = remaining <= 0

    if limit_reached:
        message = "You've reached today's scan limit"
    else:
        message = f"{remaining} scan{'s' if remaining != 1 else ''} remaining today"

    return DailyLimit(
        scans_today=scans_today,
        max_scans=max_scans,
        remaining=remaining,
        limit_reached=limit_reached,
        message=message,
    )


def check_quality() -> QualityCheck:
    """Simulated photo quality hints (random, never blocking)."""
    return QualityCheck(
        good_lighting=random.choice((True, False)),
        clear_photo=random.choice((True, False)),
        face_forward=random.choice((True, False)),
    )


class AnalysisService:
    """
    Service for skin analysis operations.

    Provides a clean interface between API routes, Celery and database.
    """

    @staticmethod
    def validate_image(
        filename: str | None,
        content_type: str | None,
        content: bytes,
    ) -> str:
        """
        Validate an uploaded photo.

        Returns:
            SHA-256 hex digest of the image

        Raises:
            InvalidImageError: Type not allowed, or empty file
            ImageTooLargeError: Larger than MAX_UPLOAD_SIZE_MB
        """
        filename = filename or "photo"
        allowed = settings.allowed_image_types_list
        mime = (content_type or "").split(";")[0].strip().lower()

        if mime not in allowed:
            raise InvalidImageError(filename, allowed)

        size_bytes = len(content)
        if size_bytes == 0:
            raise InvalidImageError(filename, allowed, reason="File is empty")

        if size_bytes > settings.max_upload_size_bytes:
            raise ImageTooLargeError(size_bytes / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

        return hashlib.sha256(content).hexdigest()

    @staticmethod
    def max_scans_for(user_id: UUID | str) -> int:
        """Daily allowance for the user's current plan."""
        if SubscriptionService.has_active_subscription(user_id):
            return settings.PREMIUM_DAILY_SCAN_LIMIT
        return settings.FREE_DAILY_SCAN_LIMIT

    @staticmethod
    def get_daily_limit(user_id: UUID | str) -> DailyLimit:
        """
        Scans used today (UTC) against the user's plan allowance.

        Queued scans count as soon as they are reserved, so the larger of
        the stored rows and the reservations is used.

        Raises:
            SupabaseClientError: If a query fails
        """
        user_id = normalize_uuid(user_id)
        max_scans = AnalysisService.max_scans_for(user_id)

        day = start_of_utc_day()
        stored = SupabaseClient.count_analyses_since(user_id, day)
        scans_today = max(stored, scan_counter.count(user_id, day))
        return build_daily_limit(scans_today, max_scans)

    @staticmethod
    def start_analysis(
        user: AuthUser,
        filename: str | None,
        content_type: str | None,
        content: bytes,
    ) -> AnalysisQueued:
        """
        Validate a photo, reserve one of today's scans and queue the analysis.

        Returns:
            AnalysisQueued whose `limit` already counts this scan

        Raises:
            InvalidImageError / ImageTooLargeError: Bad upload
            DailyLimitReachedError: No scans left today
        """
        image_sha256 = AnalysisService.validate_image(filename, content_type, content)
        user_id = normalize_uuid(user.id)

        max_scans = AnalysisService.max_scans_for(user_id)
        day = start_of_utc_day()
        stored = SupabaseClient.count_analyses_since(user_id, day)

        # Stored rows are a floor in case the counter was lost
        scans_today = max(scan_counter.reserve(user_id, day), stored + 1)
        if scans_today > max_scans:
            scan_counter.release(user_id, day)
            logger.info(f"Daily scan limit reached for user: {user_id}")
            raise DailyLimitReachedError(scans_today - 1, max_scans)

        quality = check_quality()

        from workers.tasks import run_skin_analysis

        try:
            task = run_skin_analysis.delay(user_id, image_sha256)
        except Exception:
            scan_counter.release(user_id, day)
            logger.exception(f"Failed to queue skin analysis for user: {user_id}")
            raise
        logger.info(f"Queued skin analysis {task.id} for user: {user_id}")

        return AnalysisQueued(
            task_id=task.id,
            quality=quality,
            limit=build_daily_limit(scans_today, max_scans),
        )

    @staticmethod
    def get_history(user_id: UUID | str, limit: int = 10) -> list[AnalysisSummary]:
        """
        Recent analyses, newest first.

        Raises:
            SupabaseClientError: If the query fails
        """
        rows = SupabaseClient.fetch_analysis_history(user_id, limit=limit)
        return [AnalysisSummary.model_validate(row) for row in rows]

    @staticmethod
    def get_report(user: AuthUser, analysis_id: UUID | str) -> SkinReport:
        """
        Report for one of the user's analyses.

        Raises:
            AnalysisNotFoundError: Missing, or owned by another user
        """
        analysis_id_str = normalize_uuid(analysis_id)
        row = SupabaseClient.fetch_analysis(analysis_id_str)

        if not row or str(row.get("user_id")) != normalize_uuid(user.id):
            raise AnalysisNotFoundError(analysis_id_str)

        is_subscribed = SubscriptionService.has_active_subscription(user.id)
        return build_report(row, is_subscribed)

    @staticmethod
    def get_latest_report(user: AuthUser) -> SkinReport:
        """
        Report for the user's newest analysis.

        Raises:
            AnalysisNotFoundError: The user has no analyses
        """
        row = SupabaseClient.fetch_latest_analysis(user.id)
        if not row:
            raise AnalysisNotFoundError("latest")

        is_subscribed = SubscriptionService.has_active_subscription(user.id)
        return build_report(row, is_subscribed)
