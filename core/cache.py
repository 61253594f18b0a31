"""
Cache and API-quota collaborators for the grading caller.

The scoring core never touches these. They are injected into the
RecommendationEngine so tests can swap in fakes; there is no module-level
instance.

    cache = TTLCache(default_ttl=300)
    quota = DailyApiQuota(daily_limit=500)
    engine = RecommendationEngine(cache=cache, quota=quota)
"""

import logging
import time
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


class QuotaExceeded(RuntimeError):
    """Daily external API budget is spent."""

    code = "QUOTA_EXCEEDED"


class GradeCache(Protocol):
    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None: ...

    def clear(self) -> None: ...


class ApiQuota(Protocol):
    def try_consume(self, units: int = 1) -> bool: ...

    def remaining(self) -> int: ...


class TTLCache:
    """
    In-memory cache with per-entry TTL (seconds).

    Expired entries are evicted lazily on read and by purge_expired().
    """

    def __init__(self, default_ttl: int = 300, clock: Callable[[], float] = time.monotonic):
        if default_ttl <= 0:
            raise ValueError("default_ttl must be > 0")
        self._default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}  # key -> (value, expires_at)
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        """Get value if present and not expired."""
        entry = self._entries.get(key)
        if entry is not None:
            value, expires_at = entry
            if self._clock() < expires_at:
                self._hits += 1
                logger.debug("Cache HIT: %s", key)
                return value
            del self._entries[key]
            logger.debug("Cache EXPIRED: %s", key)
        self._misses += 1
        return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ttl = ttl or self._default_ttl
        self._entries[key] = (value, self._clock() + ttl)
        logger.debug("Cache SET: %s (TTL: %ds)", key, ttl)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def purge_expired(self) -> int:
        now = self._clock()
        expired = [k for k, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def stats(self) -> Dict[str, Any]:
        self.purge_expired()
        return {
            "backend": "memory",
            "keys": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
        }


class DailyApiQuota:
    """
    Daily external API call budget.

    The counter resets the first time it is touched on a new calendar day
    (per the injected clock).
    """

    def __init__(self, daily_limit: int, today: Callable[[], date] = lambda: datetime.now().date()):
        if daily_limit < 0:
            raise ValueError("daily_limit must be >= 0")
        self.daily_limit = daily_limit
        self._today = today
        self._day = today()
        self._used = 0

    def _roll_day(self) -> None:
        current = self._today()
        if current != self._day:
            logger.info("API quota reset for %s (used %d/%d on %s)", current, self._used, self.daily_limit, self._day)
            self._day = current
            self._used = 0

    def try_consume(self, units: int = 1) -> bool:
        """Consume units if the budget allows; False (nothing consumed) otherwise."""
        if units <= 0:
            raise ValueError("units must be > 0")
        self._roll_day()
        if self._used + units > self.daily_limit:
            logger.warning("API quota exhausted: %d/%d used", self._used, self.daily_limit)
            return False
        self._used += units
        return True

    def remaining(self) -> int:
        self._roll_day()
        return self.daily_limit - self._used

    def stats(self) -> Dict[str, Any]:
        self._roll_day()
        return {
            "day": self._day.isoformat(),
            "used": self._used,
            "limit": self.daily_limit,
            "remaining": self.daily_limit - self._used,
        }
