# =============================================================================
# lib/otp_store.py - Pending Signup Store (Redis)
# =============================================================================
# Keeps the state of a signup between "code sent" and "code verified".
# Two keys per email, expiring together with the code:
#
#   otp:signup:<email>    ->  PendingSignup JSON   (TTL = OTP_TTL_SECONDS)
#   otp:attempts:<email>  ->  wrong-guess counter   (TTL = OTP_TTL_SECONDS)
#
# Wrong guesses are counted with INCR so concurrent verifications cannot
# overwrite each other's increments.
#
# Usage:
#   store = OTPStore()
#   store.save(pending, ttl_seconds=600)
#   pending = store.get("hello@example.com")
# =============================================================================

from __future__ import annotations

import logging

import redis
from pydantic import ValidationError

from app.config import settings
from core.models.auth import PendingSignup

logger = logging.getLogger(__name__)

KEY_PREFIX = "otp:signup:"
ATTEMPTS_PREFIX = "otp:attempts:"


class OTPStore:
    """
    Redis-backed store for PendingSignup records.

    The Redis connection is created lazily so importing this module (and
    constructing the service) never opens a socket. Tests pass their own
    client.
    """

    def __init__(self, client: redis.Redis | None = None):
        self._client = client

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
        return self._client

    @staticmethod
    def key(email: str) -> str:
        return f"{KEY_PREFIX}{email}"

    @staticmethod
    def attempts_key(email: str) -> str:
        return f"{ATTEMPTS_PREFIX}{email}"

    def save(self, pending: PendingSignup, ttl_seconds: int) -> None:
        """Store (or replace) a pending signup with a fresh TTL and no wrong guesses."""
        self.client.set(self.key(pending.email), pending.model_dump_json(), ex=ttl_seconds)
        self.client.delete(self.attempts_key(pending.email))
        logger.debug(f"Stored pending signup for {pending.email} (ttl={ttl_seconds}s)")

    def update(self, pending: PendingSignup) -> None:
        """Rewrite a pending signup without touching its expiry."""
        self.client.set(self.key(pending.email), pending.model_dump_json(), keepttl=True)

    def get(self, email: str) -> PendingSignup | None:
        """Return the pending signup for `email`, or None if absent/expired."""
        raw = self.client.get(self.key(email))
        if raw is None:
            return None
        try:
            pending = PendingSignup.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable pending signup for {email}: {e}")
            self.delete(email)
            return None
        pending.attempts = self.attempts(email)
        return pending

    def attempts(self, email: str) -> int:
        """Wrong guesses recorded against the current code."""
        return int(self.client.get(self.attempts_key(email)) or 0)

    def record_failed_attempt(self, email: str, ttl_seconds: int) -> int:
        """
        Count one wrong guess and return the new total.

        The increment is a single INCR, so every concurrent caller sees a
        distinct total.

        Args:
            email: Normalized email of the pending signup
            ttl_seconds: Lifetime of the counter, set on the first guess

        Returns:
            int: Wrong guesses including this one
        """
        key = self.attempts_key(email)
        total = int(self.client.incr(key))
        if total == 1:
            self.client.expire(key, ttl_seconds)
        return total

    def burn(self, email: str) -> None:
        """
        Drop the pending signup but keep its attempt counter until it expires.

        Guesses already in flight then keep counting past the limit instead
        of starting again from zero.
        """
        self.client.delete(self.key(email))

    def delete(self, email: str) -> None:
        self.client.delete(self.key(email), self.attempts_key(email))

    def ping(self) -> bool:
        return bool(self.client.ping())
