# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the SkinSense API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    SkinSenseException,
    database_exception_handler,
    skinsense_exception_handler,
)
from app.routers import analysis, content, health, payments, profile, subscription, tasks
from app.auth import routes as auth_routes
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: Log configuration gaps that disable features
    - Shutdown: Log only; clients are created lazily and need no teardown
    """
    # Startup
    logger.info(f"Starting SkinSense API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    if not settings.razorpay_configured:
        logger.warning("Razorpay keys not set; checkout will return RAZORPAY_ENV_MISSING")
    if not settings.resend_configured:
        logger.warning("RESEND_API_KEY not set; verification codes will only be logged")

    yield

    # Shutdown
    logger.info("Shutting down SkinSense API")


# Create FastAPI application
app = FastAPI(
    title="SkinSense API",
    description="""
## Skin Sense Account & Analysis API

Back end for the Skin Sense site: email signup with verification codes,
Razorpay subscriptions, profiles, and the skin analysis report.

### How It Works

1. **Sign up** - `POST /api/v1/auth/signup` emails a 6-digit code
2. **Verify** - `POST /api/v1/auth/signup/verify` creates the account
3. **Analyze** - upload a photo to `POST /api/v1/analysis`
4. **Read the report** - `GET /api/v1/analysis/{id}/report`
5. **Go premium** - `POST /api/v1/payments/orders`, then `/payments/verify`

### Plans

| Plan | Price | Daily scans |
|------|-------|-------------|
| **Free** | - | 1 |
| **Monthly** | ₹299 | 3 |
| **Quarterly** | ₹699 | 3 |
| **Yearly** | ₹1999 | 3 |

Premium unlocks every concern on the report, the AI summary and the
AM/PM routine.

### Quick Start

```bash
# 1. Start signup
curl -X POST http://localhost:8000/api/v1/auth/signup \\
  -H "Content-Type: application/json" \\
  -d '{"email": "jane@example.com", "password": "s3cret-pass", "full_name": "Jane"}'

# 2. Verify the emailed code
curl -X POST http://localhost:8000/api/v1/auth/signup/verify \\
  -H "Content-Type: application/json" \\
  -d '{"email": "jane@example.com", "code": "123456", "password": "s3cret-pass"}'

# 3. Upload a photo
curl -X POST http://localhost:8000/api/v1/analysis \\
  -H "Authorization: Bearer <access_token>" \\
  -F "file=@face.jpg"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Email signup with verification codes, sign-in and OAuth",
        },
        {
            "name": "Payments",
            "description": "Plan catalog and Razorpay checkout",
        },
        {
            "name": "Subscription",
            "description": "Current plan and expiry",
        },
        {
            "name": "Profile",
            "description": "Account details and analysis history",
        },
        {
            "name": "Analysis",
            "description": "Photo upload, daily scan limit and skin report",
        },
        {
            "name": "Tasks",
            "description": "Track background analysis progress",
        },
        {
            "name": "Content",
            "description": "Remedies, upload tips and the contact form",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(SkinSenseException)
async def handle_skinsense_exception(request: Request, exc: SkinSenseException):
    """Handle custom SkinSense exceptions."""
    return await skinsense_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_database_exception(request: Request, exc: SupabaseClientError):
    """Handle database errors that reached a route."""
    logger.error(f"Database error on {request.url.path}: {exc}")
    return await database_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Plans and checkout endpoints
app.include_router(
    payments.router,
    prefix="/api/v1",
    tags=["Payments"]
)

# Subscription status endpoint
app.include_router(
    subscription.router,
    prefix="/api/v1/subscription",
    tags=["Subscription"]
)

# Profile endpoints
app.include_router(
    profile.router,
    prefix="/api/v1/profile",
    tags=["Profile"]
)

# Skin analysis endpoints
app.include_router(
    analysis.router,
    prefix="/api/v1/analysis",
    tags=["Analysis"]
)

# Task status endpoints
app.include_router(
    tasks.router,
    prefix="/api/v1/tasks",
    tags=["Tasks"]
)

# Content and contact endpoints
app.include_router(
    content.router,
    prefix="/api/v1",
    tags=["Content"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "SkinSense API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
