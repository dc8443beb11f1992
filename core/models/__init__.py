# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - auth.py: Signup / OTP / login schemas
# - subscription.py: Plan catalog, subscription rows, checkout bodies
# - profile.py: Profile row, editable fields, history entries
# - analysis.py: Upload response, daily limit, skin report
# - content.py: Remedies, upload tips, contact form
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Auth Models - Signup and sign-in
# -----------------------------------------------------------------------------
from .auth import (
    AuthSession,
    LoginRequest,
    OAuthProvider,
    PendingSignup,
    ResendOTPRequest,
    SignupCompleteResponse,
    SignupRequest,
    SignupStartResponse,
    SignupStatus,
    VerifyOTPRequest,
)

# -----------------------------------------------------------------------------
# Subscription Models - Plans and payments
# -----------------------------------------------------------------------------
from .subscription import (
    PLAN_CATALOG,
    CreateOrderRequest,
    CreateOrderResponse,
    PlanInfo,
    Subscription,
    SubscriptionPlan,
    SubscriptionStatus,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
    plan_duration,
    plan_label,
)

# -----------------------------------------------------------------------------
# Profile Models - Account page
# -----------------------------------------------------------------------------
from .profile import (
    AnalysisSummary,
    Gender,
    Profile,
    ProfileOverview,
    ProfileUpdate,
)

# -----------------------------------------------------------------------------
# Analysis Models - Upload and report
# -----------------------------------------------------------------------------
from .analysis import (
    AISummary,
    AnalysisQueued,
    ConcernResult,
    DailyLimit,
    QualityCheck,
    Routine,
    RoutineSection,
    RoutineStep,
    ScoreBand,
    SkinReport,
    score_band,
)

# -----------------------------------------------------------------------------
# Content Models - Static sections and contact form
# -----------------------------------------------------------------------------
from .content import (
    ContactInfo,
    ContactRequest,
    ContactResponse,
    Food,
    Ingredient,
    RemedyCategory,
    Remedies,
    UploadTip,
)

# -----------------------------------------------------------------------------
# __all__ - Explicit public API
# -----------------------------------------------------------------------------
__all__ = [
    # Auth
    "AuthSession",
    "LoginRequest",
    "OAuthProvider",
    "PendingSignup",
    "ResendOTPRequest",
    "SignupCompleteResponse",
    "SignupRequest",
    "SignupStartResponse",
    "SignupStatus",
    "VerifyOTPRequest",
    # Subscription
    "PLAN_CATALOG",
    "CreateOrderRequest",
    "CreateOrderResponse",
    "PlanInfo",
    "Subscription",
    "SubscriptionPlan",
    "SubscriptionStatus",
    "VerifyPaymentRequest",
    "VerifyPaymentResponse",
    "plan_duration",
    "plan_label",
    # Profile
    "AnalysisSummary",
    "Gender",
    "Profile",
    "ProfileOverview",
    "ProfileUpdate",
    # Analysis
    "AISummary",
    "AnalysisQueued",
    "ConcernResult",
    "DailyLimit",
    "QualityCheck",
    "Routine",
    "RoutineSection",
    "RoutineStep",
    "ScoreBand",
    "SkinReport",
    "score_band",
    # Content
    "ContactInfo",
    "ContactRequest",
    "ContactResponse",
    "Food",
    "Ingredient",
    "RemedyCategory",
    "Remedies",
    "UploadTip",
]
