# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the API routes:
# - models/: Pydantic schemas for data validation
# - services/: Signup codes, auth, payments, subscriptions, profiles,
#   analysis reports and site content
#
# Routes stay thin and delegate here; services talk to the outside world
# only through the clients in lib/.
# =============================================================================
