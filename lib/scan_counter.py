# =============================================================================
# lib/scan_counter.py - Daily Scan Reservations (Redis)
# =============================================================================
# Counts the scans a user has queued today. A slot is reserved when the
# photo is accepted, before the worker writes the analysis row, so uploads
# sent in quick succession cannot all pass the daily limit.
#
#   scans:<user_id>:<YYYY-MM-DD>  ->  integer   (expires at the next UTC midnight)
#
# Usage:
#   counter = ScanCounter()
#   reserved = counter.reserve(user_id, start_of_utc_day())
#   counter.release(user_id, start_of_utc_day())
# =============================================================================

from __future__ import annotations

import logging
from datetime import datetime, timedelta

import redis

from app.config import settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "scans:"


class ScanCounter:
    """
    Redis-backed per-day scan counter.

    The connection is created lazily, as in OTPStore. Tests pass their own
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
    def key(user_id: str, day: datetime) -> str:
        return f"{KEY_PREFIX}{user_id}:{day.strftime('%Y-%m-%d')}"

    def count(self, user_id: str, day: datetime) -> int:
        """Scans reserved by `user_id` on `day`."""
        return int(self.client.get(self.key(user_id, day)) or 0)

    def reserve(self, user_id: str, day: datetime) -> int:
        """
        Take one scan slot and return the day's total including it.

        INCR is atomic, so concurrent uploads each get a distinct total.

        Args:
            user_id: Normalized user id
            day: Start of the UTC day being counted

        Returns:
            int: Slots taken today, this one included
        """
        key = self.key(user_id, day)
        total = int(self.client.incr(key))
        if total == 1:
            self.client.expireat(key, day + timedelta(days=1))
        logger.debug(f"Reserved scan {total} for user {user_id} on {day.date()}")
        return total

    def release(self, user_id: str, day: datetime) -> None:
        """Give back a slot taken by reserve."""
        self.client.decr(self.key(user_id, day))
