# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Defines background tasks for the skin analysis.
#
# Tasks:
# - run_skin_analysis: Simulated analysis; stores the result for the report
# =============================================================================

import logging
import time
from typing import Any

from celery import shared_task, current_task

from app.config import settings

logger = logging.getLogger(__name__)

ANALYSIS_STEPS = [
    "Detecting face...",
    "Measuring skin texture...",
    "Scoring skin concerns...",
    "Preparing your report...",
]


# =============================================================================
# Task State Updates
# =============================================================================

def update_progress(current: int, total: int, message: str = "Processing..."):
    """
    Update task progress for polling.

    Args:
        current: Current step number
        total: Total steps
        message: Status message
    """
    if current_task:
        current_task.update_state(
            state="PROGRESS",
            meta={
                "current": current,
                "total": total,
                "percent": int((current / total) * 100),
                "message": message,
            }
        )


# =============================================================================
# Skin Analysis Task
# =============================================================================

@shared_task(bind=True, name="workers.tasks.run_skin_analysis")
def run_skin_analysis(
    self,
    user_id: str,
    image_sha256: str,
) -> dict[str, Any]:
    """
    Run the (simulated) skin analysis for an uploaded photo.

    The analysis takes ANALYSIS_DELAY_SECONDS in total, reporting progress
    after each step, then stores the result in skin_analysis_history.

    Args:
        user_id: Owner of the photo
        image_sha256: Digest of the uploaded image

    Returns:
        Dict with:
        - analysis_id: Row id, for GET /analysis/{analysis_id}/report
        - user_id: Owner
        - overall_score: 0-100
        - skin_type: e.g. "Combination"

    Raises:
        SupabaseClientError: If the result cannot be stored (task FAILURE)
    """
    from core.services.report_builder import simulate_analysis
    from lib.supabase_client import SupabaseClient
    from lib.utils import utc_now

    logger.info(f"Analyzing image {image_sha256[:12]} for user {user_id}")

    total = len(ANALYSIS_STEPS) + 1
    step_delay = settings.ANALYSIS_DELAY_SECONDS / len(ANALYSIS_STEPS)

    for i, message in enumerate(ANALYSIS_STEPS, start=1):
        update_progress(i, total, message)
        if step_delay:
            time.sleep(step_delay)

    result = simulate_analysis()

    row = SupabaseClient.insert_analysis({
        "user_id": user_id,
        "overall_score": result["overall_score"],
        "skin_type": result["skin_type"],
        "concerns": result["concerns"],
        "analyzed_at": utc_now().isoformat(),
    })

    update_progress(total, total, "Complete")
    logger.info(f"Stored analysis {row['id']} for user {user_id} (score {result['overall_score']})")

    return {
        "analysis_id": str(row["id"]),
        "user_id": user_id,
        "overall_score": result["overall_score"],
        "skin_type": result["skin_type"],
    }

