# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory Redis double for the pending-signup store and scan counter
# - FastAPI TestClient with authentication overridden
# =============================================================================

import os
import threading
from uuid import UUID

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("RAZORPAY_KEY_ID", "rzp_test_key")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "test-razorpay-secret")
os.environ.setdefault("RESEND_API_KEY", "re_test_key")
os.environ.setdefault("ANALYSIS_DELAY_SECONDS", "0")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

TEST_USER_ID = UUID("11111111-2222-3333-4444-555555555555")
TEST_USER_EMAIL = "jane@example.com"


# =============================================================================
# Redis Double
# =============================================================================

class InMemoryRedis:
    """
    The subset of redis.Redis used by OTPStore and ScanCounter, kept in a dict.

    TTLs are recorded but never expire on their own; tests delete keys to
    simulate expiry. Counters are updated under a lock, like Redis INCR.
    """

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict = {}
        self._lock = threading.Lock()

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ex=None, keepttl=False):
        self.data[key] = value
        if ex is not None:
            self.ttls[key] = ex
        elif not keepttl:
            self.ttls.pop(key, None)
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    def incr(self, key, amount=1):
        with self._lock:
            value = int(self.data.get(key, 0)) + amount
            self.data[key] = str(value)
            return value

    def decr(self, key, amount=1):
        return self.incr(key, -amount)

    def expire(self, key, seconds):
        if key not in self.data:
            return False
        self.ttls[key] = seconds
        return True

    def expireat(self, key, when):
        if key not in self.data:
            return False
        self.ttls[key] = when
        return True

    def ping(self):
        return True


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_redis():
    """Fresh in-memory Redis."""
    return InMemoryRedis()


@pytest.fixture
def otp_store(fake_redis, monkeypatch):
    """Pending-signup store backed by fake_redis, installed in the OTP service."""
    from core.services import otp_service
    from lib.otp_store import OTPStore

    store = OTPStore(client=fake_redis)
    monkeypatch.setattr(otp_service, "otp_store", store)
    return store


@pytest.fixture
def scan_counter(fake_redis, monkeypatch):
    """Daily scan counter backed by fake_redis, installed in the analysis service."""
    from core.services import analysis_service
    from lib.scan_counter import ScanCounter

    counter = ScanCounter(client=fake_redis)
    monkeypatch.setattr(analysis_service, "scan_counter", counter)
    return counter


@pytest.fixture
def auth_user():
    """The signed-in user for route tests."""
    from app.auth.models import AuthUser

    return AuthUser(id=TEST_USER_ID, email=TEST_USER_EMAIL)


@pytest.fixture
def client(auth_user):
    """TestClient with get_current_user returning auth_user."""
    from fastapi.testclient import TestClient

    from app.auth.dependencies import get_current_user
    from app.main import app

    app.dependency_overrides[get_current_user] = lambda: auth_user
    try:
        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def anon_client():
    """TestClient without authentication overrides."""
    from fastapi.testclient import TestClient

    from app.main import app

    app.dependency_overrides.clear()
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def subscription_row():
    """An active quarterly subscription row."""
    return {
        "id": "sub-123",
        "user_id": str(TEST_USER_ID),
        "plan": "quarterly",
        "status": "active",
        "started_at": "2024-01-15T10:00:00Z",
        "expires_at": "2099-04-14T10:00:00Z",
        "last_payment_date": "2024-01-15T10:00:00Z",
    }


@pytest.fixture
def analysis_row():
    """A stored analysis as written by run_skin_analysis."""
    from core.services.report_builder import simulate_analysis

    return {
        "id": "aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee",
        "user_id": str(TEST_USER_ID),
        "analyzed_at": "2024-01-15T10:30:00Z",
        **simulate_analysis(),
    }
