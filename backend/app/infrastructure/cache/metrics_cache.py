"""
In-process cache for daily metrics and period aggregates.

Keys always carry the user id:
    ("daily", user_id, day)
    ("period", user_id, start, end)
Daily entries live until explicitly invalidated. Period entries also expire
after a TTL, since they may tolerate short staleness.
"""
import threading
import time
from datetime import date
from typing import Any, Dict, Hashable, Optional, Tuple

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

DAILY = "daily"
PERIOD = "period"


def daily_key(user_id: int, day: date) -> Tuple:
    return (DAILY, user_id, day)


def period_key(user_id: int, start: date, end: date) -> Tuple:
    return (PERIOD, user_id, start, end)


class MetricsCache:
    def __init__(self, period_ttl_seconds: int = None, clock=time.monotonic):
        self.period_ttl = period_ttl_seconds if period_ttl_seconds is not None else settings.PERIOD_CACHE_TTL_SECONDS
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[Any, Optional[float]]] = {}
        self._lock = threading.Lock()

    # ──── Core API ────────────────────────────────────────────────────────────
    def get(self, key: Tuple) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            # expired entries are left for the next put/invalidate to drop
            return None
        return value

    def put(self, key: Tuple, value: Any):
        expires_at = self._clock() + self.period_ttl if key[0] == PERIOD else None
        with self._lock:
            self._entries[key] = (value, expires_at)

    def invalidate(self, key: Tuple):
        with self._lock:
            self._entries.pop(key, None)

    # ──── Invalidation helpers ────────────────────────────────────────────────
    def invalidate_user_day(self, user_id: int, day: date):
        """Drops the day entry and every period entry of the user that covers day."""
        with self._lock:
            stale = [
                k for k in self._entries
                if k[1] == user_id and (
                    (k[0] == DAILY and k[2] == day)
                    or (k[0] == PERIOD and k[2] <= day <= k[3])
                )
            ]
            for k in stale:
                del self._entries[k]
        logger.debug("Metrics cache invalidated", user_id=user_id, day=str(day), entries=len(stale))

    def invalidate_user(self, user_id: int):
        with self._lock:
            stale = [k for k in self._entries if k[1] == user_id]
            for k in stale:
                del self._entries[k]

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


metrics_cache = MetricsCache()
