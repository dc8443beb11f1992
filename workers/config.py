# =============================================================================
# workers/config.py - Celery Worker Configuration
# =============================================================================
# Settings specific to Celery workers. Broker and result backend are the
# same Redis instance that holds pending signups.
# =============================================================================

from app.config import settings


class CeleryConfig:
    """
    Celery configuration settings.

    These are applied to the Celery app via app.config_from_object().
    """

    # -------------------------------------------------------------------------
    # Broker Settings (Redis)
    # -------------------------------------------------------------------------

    # Redis URL for message broker
    broker_url = settings.REDIS_URL

    # Redis URL for result backend (store task results)
    result_backend = settings.REDIS_URL

    # -------------------------------------------------------------------------
    # Task Settings
    # -------------------------------------------------------------------------

    # Acknowledge tasks after they complete (not before)
    # This prevents task loss if worker crashes mid-task
    task_acks_late = True

    # Only prefetch one task at a time
    # This ensures fair distribution across workers
    worker_prefetch_multiplier = 1

    # Task results expire after 1 hour (clients poll for the analysis id)
    result_expires = 3600

    # Hard timeout (2 minutes); an analysis takes seconds
    task_time_limit = 120

    # Soft timeout (90 seconds) - gives task time to clean up
    task_soft_time_limit = 90

    # Report STARTED so polling clients can tell queued from running
    task_track_started = True

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    # Use JSON for task serialization (safer than pickle)
    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]

    # -------------------------------------------------------------------------
    # Task Routing
    # -------------------------------------------------------------------------

    # Define task queues
    task_queues = {
        "default": {
            "exchange": "default",
            "routing_key": "default",
        },
        "analysis": {
            "exchange": "analysis",
            "routing_key": "analysis",
        },
    }

    # Analyses are slow; keep them off the default queue
    task_routes = {
        "workers.tasks.run_skin_analysis": {"queue": "analysis"},
    }

    # Default queue for unrouted tasks
    task_default_queue = "default"

    # -------------------------------------------------------------------------
    # Retry Settings
    # -------------------------------------------------------------------------

    # Retry limits for tasks that call self.retry()
    task_annotations = {
        "*": {
            "max_retries": 3,
            "default_retry_delay": 10,  # Wait 10 seconds between retries
        }
    }

    # -------------------------------------------------------------------------
    # Monitoring
    # -------------------------------------------------------------------------

    # Send task events for monitoring (Flower, etc.)
    worker_send_task_events = True
    task_send_sent_event = True

    # -------------------------------------------------------------------------
    # Timezone
    # -------------------------------------------------------------------------

    timezone = "UTC"
    enable_utc = True
