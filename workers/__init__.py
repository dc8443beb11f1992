# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# work that should not block a request.
#
# Components:
# - celery_app.py: Celery application configuration
# - tasks.py: Task definitions (skin analysis)
# - config.py: Worker-specific settings
#
# Usage:
#   # Start worker
#   celery -A workers.celery_app worker -Q default,analysis --loglevel=info
#
#   # Submit task (from API)
#   from workers.tasks import run_skin_analysis
#   result = run_skin_analysis.delay(user_id, image_sha256)
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
