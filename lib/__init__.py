# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains clients for the outside services:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - razorpay_client.py: Razorpay Orders API and signature checks
# - email_client.py: Transactional email through Resend
# - otp_store.py: Pending signups in Redis
# - utils.py: Shared utilities (error handling, UUID/time helpers)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.razorpay_client import RazorpayClient, RazorpayError
from lib.email_client import EmailClient, EmailDeliveryError
from lib.otp_store import OTPStore
from lib.utils import ApplicationError, normalize_uuid

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Razorpay
    "RazorpayClient",
    "RazorpayError",
    # Email
    "EmailClient",
    "EmailDeliveryError",
    # Redis
    "OTPStore",
    # Utils
    "ApplicationError",
    "normalize_uuid",
]
