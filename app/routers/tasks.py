# =============================================================================
# app/routers/tasks.py - Task Status Endpoints
# =============================================================================
# Polling endpoint for background analyses queued by POST /analysis.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel

from app.auth import AuthUser, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class TaskStatusResponse(BaseModel):
    """Response model for task status."""
    task_id: str
    status: str
    progress: int | None = None
    message: str | None = None
    result: dict | None = None
    error: str | None = None


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/{task_id}", response_model=TaskStatusResponse)
async def get_task_status(
    task_id: Annotated[str, Path(description="Celery task ID")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Get the status of a background analysis.

    Returns the current state of the task:
    - PENDING: Task is waiting in queue
    - STARTED: Task has been picked up by a worker
    - PROGRESS: Analysis is running (includes progress percentage)
    - SUCCESS: Done; result carries analysis_id for the report
    - FAILURE: Task failed

    A finished task started by another user reports PENDING, as if unknown.
    """
    try:
        from workers.celery_app import celery_app

        result = celery_app.AsyncResult(task_id)
        status = result.status

        response = TaskStatusResponse(task_id=task_id, status=status)

        if status == "PROGRESS":
            info = result.info or {}
            response.progress = info.get("percent", 0)
            response.message = info.get("message", "Analyzing...")

        elif status == "SUCCESS":
            data = result.result or {}
            if data.get("user_id") not in (None, str(user.id)):
                return TaskStatusResponse(
                    task_id=task_id, status="PENDING", progress=0, message="Waiting in queue..."
                )
            response.result = data
            response.progress = 100
            response.message = "Complete"

        elif status == "FAILURE":
            response.error = str(result.result) if result.result else "Unknown error"
            response.message = "Failed"

        elif status == "PENDING":
            response.progress = 0
            response.message = "Waiting in queue..."

        elif status == "STARTED":
            response.progress = 0
            response.message = "Starting..."

        return response

    except Exception as e:
        logger.error(f"Error getting task status: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to get task status: {e}")
