"""
Response Cache

Short-lived, per-user memo of task-list reads. Never authoritative: every code
path that changes what a user would read next must call invalidate() for that
user, including the owners of copies reached by propagation.
"""
import asyncio
import time
from typing import Any, Callable, Dict, Optional, Tuple

from tasksync.utils.logger import StructuredLogger


class ResponseCache:
    """TTL-bounded map from user id to that user's last computed task list."""

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[StructuredLogger] = None,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._logger = logger
        self._entries: Dict[str, Tuple[float, Any]] = {}

    def get(self, user_id: str) -> Optional[Any]:
        """Return the cached value if younger than the TTL, otherwise None."""
        entry = self._entries.get(user_id)
        if entry is None:
            return None

        stored_at, data = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            self._entries.pop(user_id, None)
            return None
        return data

    def set(self, user_id: str, data: Any) -> None:
        self._entries[user_id] = (self._clock(), data)

    def invalidate(self, user_id: Optional[str]) -> None:
        if user_id is None:
            return
        self._entries.pop(user_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def sweep(self) -> int:
        """Drop expired entries; returns how many were removed."""
        now = self._clock()
        expired = [
            user_id for user_id, (stored_at, _) in self._entries.items()
            if now - stored_at >= self.ttl_seconds
        ]
        for user_id in expired:
            del self._entries[user_id]
        if expired and self._logger:
            self._logger.debug("Swept expired cache entries", removed=len(expired), remaining=len(self._entries))
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._entries


async def sweep_periodically(cache: ResponseCache, interval_seconds: float) -> None:
    """Background loop evicting expired entries until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        cache.sweep()
