"""
In-memory session store.

Holds per-user objects for the lifetime of a session. Entries slide their
expiry on every access and the oldest session is dropped once the store is
full. Survives across warm Lambda invocations.
"""

from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Any, Callable, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """Thread-safe LRU map with sliding TTL."""

    def __init__(
        self,
        max_size: int = 1000,
        ttl_seconds: int = 3600,
        now_fn: Callable[[], datetime] = _utcnow,
        on_evict: Optional[Callable[[str, Any], None]] = None,
    ):
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._now = now_fn
        self._on_evict = on_evict
        self._sessions: "OrderedDict[str, tuple[Any, datetime]]" = OrderedDict()
        self._lock = Lock()

    def _expired(self, touched_at: datetime) -> bool:
        return self._now() - touched_at > timedelta(seconds=self.ttl_seconds)

    def _evict(self, key: str) -> None:
        value, _ = self._sessions.pop(key)
        if self._on_evict:
            self._on_evict(key, value)

    def get(self, key: str) -> Optional[Any]:
        """Return the live session value and refresh its expiry."""
        with self._lock:
            if key not in self._sessions:
                return None

            value, touched_at = self._sessions[key]
            if self._expired(touched_at):
                self._evict(key)
                return None

            self._sessions[key] = (value, self._now())
            self._sessions.move_to_end(key)
            return value

    def get_or_create(self, key: str, factory: Callable[[], Any]) -> Any:
        """Return the session for key, building it with factory when absent."""
        with self._lock:
            entry = self._sessions.get(key)
            if entry is not None and not self._expired(entry[1]):
                value = entry[0]
            else:
                if entry is not None:
                    self._evict(key)
                value = factory()

            self._sessions[key] = (value, self._now())
            self._sessions.move_to_end(key)

            while len(self._sessions) > self.max_size:
                self._evict(next(iter(self._sessions)))
            return value

    def pop(self, key: str) -> Optional[Any]:
        """Remove a session without running the eviction hook."""
        with self._lock:
            entry = self._sessions.pop(key, None)
            return entry[0] if entry else None

    def clear(self) -> None:
        """Drop every session."""
        with self._lock:
            self._sessions.clear()

    def stats(self) -> dict:
        """Return store statistics."""
        with self._lock:
            return {
                "size": len(self._sessions),
                "max_size": self.max_size,
                "ttl_seconds": self.ttl_seconds,
            }
