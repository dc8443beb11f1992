# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .otp_service import OTPService
from .auth_service import AuthService
from .subscription_service import SubscriptionService
from .payment_service import PaymentService
from .profile_service import ProfileService
from .analysis_service import AnalysisService
from .content_service import ContentService

__all__ = [
    "OTPService",
    "AuthService",
    "SubscriptionService",
    "PaymentService",
    "ProfileService",
    "AnalysisService",
    "ContentService",
]
