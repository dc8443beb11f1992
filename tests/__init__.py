# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the SkinSense API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_otp_service.py / test_auth_*.py: Signup codes, Supabase Auth, tokens
# - test_payments.py / test_subscription_service.py: Razorpay checkout, plans
# - test_analysis.py: Uploads, daily limits, reports, worker tasks
# - test_profile.py / test_content.py / test_health.py: Remaining endpoints
#
# Run tests with: pytest
# =============================================================================
