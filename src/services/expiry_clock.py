"""
Ticket expiry clock.

Externally driven: the owner calls ``tick(now)`` once per interval and the
clock recomputes the remaining validity. No timers or threads live here.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Optional

from models.ticket import ClockReading
from utils.error_handling import IllegalStateError

_ZERO = timedelta(0)


class ExpiryClock:
    """Countdown to a single expiry instant."""

    def __init__(
        self,
        low_time_threshold: timedelta = timedelta(minutes=5),
        on_expired: Optional[Callable[[], None]] = None,
    ):
        self.low_time_threshold = low_time_threshold
        self.on_expired = on_expired
        self.expires_at: Optional[datetime] = None
        self._remaining: Optional[timedelta] = None
        self._running = False
        self._expired = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def expired(self) -> bool:
        return self._expired

    def start(self, expires_at: datetime, now: datetime) -> ClockReading:
        """Arm the clock for a new expiry and take the first reading."""
        if self._running:
            raise IllegalStateError("clock is already running; stop it first")
        self.expires_at = expires_at
        self._remaining = None
        self._expired = False
        self._running = True
        return self.tick(now)

    def stop(self) -> None:
        """Stop ticking without emitting the expiry event."""
        self._running = False

    def reading(self) -> ClockReading:
        """Last computed reading, without advancing the clock."""
        if self.expires_at is None:
            raise IllegalStateError("clock has not been started")
        remaining = self._remaining if self._remaining is not None else _ZERO
        return ClockReading(
            remaining=remaining,
            low_time=remaining < self.low_time_threshold,
            expired=self._expired,
        )

    def tick(self, now: datetime) -> ClockReading:
        """Recompute remaining time; fires on_expired once when it hits zero."""
        if self.expires_at is None:
            raise IllegalStateError("clock has not been started")
        if not self._running:
            return self.reading()

        remaining = max(_ZERO, self.expires_at - now)
        # a tick observed with an earlier "now" never winds the clock back
        if self._remaining is not None:
            remaining = min(remaining, self._remaining)
        self._remaining = remaining

        if remaining == _ZERO:
            self._running = False
            self._expired = True
            if self.on_expired:
                self.on_expired()

        return self.reading()
