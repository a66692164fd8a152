"""Per-user controller registry backed by the in-memory session store."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

from config.settings import Settings
from services.balance_service import BalanceProvider, build_balance_provider
from services.ticket_controller import TicketLifecycleController
from utils.logging_config import get_logger
from utils.session_store import SessionStore
from utils.validators import ensure_present

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _close_evicted(user_id: str, controller: TicketLifecycleController) -> None:
    logger.info("Ticket session expired", extra={"user_id": user_id})
    controller.close()


class TicketRegistry:
    """Maps each user to exactly one lifecycle controller."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        balance_provider: Optional[BalanceProvider] = None,
        now_fn: Callable[[], datetime] = _utcnow,
    ):
        self.settings = settings or Settings.from_environment()
        self.balance_provider = balance_provider or build_balance_provider(self.settings)
        self._now = now_fn
        self.sessions = SessionStore(
            max_size=self.settings.session_max_size,
            ttl_seconds=self.settings.session_ttl_seconds,
            now_fn=now_fn,
            on_evict=_close_evicted,
        )

    def controller_for(self, user_id: str) -> TicketLifecycleController:
        """Return the user's controller, starting a session when needed."""
        ensure_present(user_id, "user_id")
        return self.sessions.get_or_create(
            user_id,
            lambda: TicketLifecycleController(
                user_id=user_id,
                balance_provider=self.balance_provider,
                settings=self.settings,
                now_fn=self._now,
            ),
        )

    def end_session(self, user_id: str) -> bool:
        """Close and forget the user's controller. False when there was none."""
        controller = self.sessions.pop(user_id)
        if controller is None:
            return False
        controller.close()
        logger.info("Ticket session ended", extra={"user_id": user_id})
        return True
