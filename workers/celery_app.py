# =============================================================================
# workers/celery_app.py - Celery Application Configuration
# =============================================================================
# This module creates and configures the Celery application instance.
#
# Usage:
#   # Start worker (both queues)
#   celery -A workers.celery_app worker -Q default,analysis --loglevel=info
#
#   # Check status
#   celery -A workers.celery_app status
# =============================================================================

import logging

from celery import Celery
from celery.signals import task_prerun, task_postrun, task_failure
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from app.config import settings  # noqa: E402

# Set up logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _redacted(url: str) -> str:
    """Broker URL without credentials, for logs."""
    return url.split("@")[-1] if "@" in url else url


def create_celery_app() -> Celery:
    """
    Create and configure Celery application.

    Returns:
        Configured Celery app instance
    """
    app = Celery(
        "skinsense_worker",
        include=["workers.tasks"],  # Auto-discover tasks
    )

    # Broker, backend, queues and limits
    app.config_from_object("workers.config:CeleryConfig")

    logger.info(f"Celery app created with broker: {_redacted(settings.REDIS_URL)}")

    return app


# Create the Celery app instance
celery_app = create_celery_app()


@celery_app.task(bind=True, name="workers.healthcheck")
def healthcheck(self):
    """
    Simple healthcheck task to verify worker is running.

    Usage:
        from workers.celery_app import healthcheck
        result = healthcheck.delay()
        print(result.get(timeout=5))  # Should return "OK"
    """
    return "OK"


# =============================================================================
# Celery Signals (Lifecycle Hooks)
# =============================================================================

@task_prerun.connect
def task_prerun_handler(sender=None, task_id=None, task=None, args=None, kwargs=None, **extra):
    """Log when a task starts."""
    logger.info(f"Task started: {task.name} [{task_id}]")


@task_postrun.connect
def task_postrun_handler(sender=None, task_id=None, task=None, args=None, kwargs=None, retval=None, state=None, **extra):
    """Log when a task completes."""
    logger.info(f"Task completed: {task.name} [{task_id}] - State: {state}")


@task_failure.connect
def task_failure_handler(sender=None, task_id=None, exception=None, traceback=None, **extra):
    """Log when a task fails."""
    logger.error(f"Task failed: {sender.name} [{task_id}] - Error: {exception}")


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    celery_app.start()
