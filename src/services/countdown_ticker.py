"""Periodic driver for a controller's expiry clock."""

from __future__ import annotations

import time
from typing import Callable, Optional

from models.ticket import ControllerState
from services.ticket_controller import TicketLifecycleController
from utils.logging_config import get_logger

logger = get_logger(__name__)


class CountdownTicker:
    """Calls ``controller.tick()`` once per interval while the ticket is active."""

    def __init__(
        self,
        controller: TicketLifecycleController,
        interval_seconds: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.controller = controller
        self.interval_seconds = (
            interval_seconds
            if interval_seconds is not None
            else controller.settings.tick_interval_seconds
        )
        self._sleep = sleep

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Tick until the ticket leaves the active state. Returns the tick count."""
        ticks = 0
        while self.controller.state == ControllerState.ACTIVE:
            if max_ticks is not None and ticks >= max_ticks:
                break
            self._sleep(self.interval_seconds)
            # regenerate/invalidate may have happened while sleeping
            reading = self.controller.tick_if_active()
            if reading is None:
                break
            ticks += 1
            if reading.expired:
                break

        logger.info(
            "Countdown stopped",
            extra={
                "user_id": self.controller.user_id,
                "ticks": ticks,
                "state": self.controller.state.value,
            },
        )
        return ticks
