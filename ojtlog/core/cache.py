"""Process-local TTL cache for paginated log reads.

Entries are keyed by plain strings such as ``logs:<user>:page:<n>`` so that
``invalidate("logs")`` can drop a whole namespace by substring match.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

logger = logging.getLogger(__name__)


class TTLCache:
    def __init__(self, ttl_seconds: float = 30.0, clock: Callable[[], float] = time.monotonic) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be greater than zero")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}

    def get(self, key: str) -> Any | None:
        """Return the cached value, or ``None`` when missing or expired.

        An entry is served while its age is strictly below the TTL; an
        expired entry is removed on the read that discovers it.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, stored_at = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            logger.debug("cache.expired", extra={"extra_data": {"key": key}})
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        # single assignment; readers never see a partial entry
        self._entries[key] = (value, self._clock())

    def invalidate(self, pattern: str | None = None) -> int:
        """Drop every key containing ``pattern`` (all keys when ``None``)."""
        if pattern is None:
            dropped = len(self._entries)
            self._entries.clear()
        else:
            doomed = [key for key in self._entries if pattern in key]
            for key in doomed:
                del self._entries[key]
            dropped = len(doomed)
        logger.debug("cache.invalidated", extra={"extra_data": {"pattern": pattern, "dropped": dropped}})
        return dropped

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
