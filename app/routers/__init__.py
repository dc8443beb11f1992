# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - payments.py: Plan catalog and Razorpay checkout
# - subscription.py: Current plan
# - profile.py: Profile page and edits
# - analysis.py: Photo upload, daily limit, history, report
# - tasks.py: Background task status endpoints
# - content.py: Remedies, upload tips, contact form
#
# Auth routes live in app/auth/routes.py.
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import payments
from . import subscription
from . import profile
from . import analysis
from . import tasks
from . import content

__all__ = [
    "health",
    "payments",
    "subscription",
    "profile",
    "analysis",
    "tasks",
    "content",
]
