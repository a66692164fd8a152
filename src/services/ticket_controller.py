"""
Ticket lifecycle controller.

One controller per user session. It owns the user's current ticket and the
single expiry clock, and is the only place ticket state changes:

    no_ticket -> generating -> active -> expired
    active/expired --invalidate--> no_ticket
    active/expired --regenerate--> generating -> active

Time is injected: every operation accepts ``now`` and otherwise falls back to
the ``now_fn`` given at construction.
"""

from __future__ import annotations

import secrets
import string
from datetime import datetime, timedelta, timezone
from threading import RLock
from typing import Callable, Dict, List, Optional

from config.settings import Settings
from models.ticket import (
    ClockReading,
    CodeMatrix,
    ControllerState,
    IssueRequest,
    Ticket,
    TicketStatus,
    TicketView,
    location_name,
)
from services.balance_service import BalanceProvider
from services.code_encoder import DeterministicCodeEncoder
from services.expiry_clock import ExpiryClock
from services.payload_composer import PayloadComposer
from utils.error_handling import IllegalStateError, InvalidAmountError
from utils.logging_config import get_logger
from utils.validators import ensure_present

logger = get_logger(__name__)

_ID_ALPHABET = string.ascii_uppercase + string.digits
_ONE_MS = timedelta(milliseconds=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_ticket_id() -> str:
    """TKT- followed by eight random base-36 characters."""
    return "TKT-" + "".join(secrets.choice(_ID_ALPHABET) for _ in range(8))


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _to_millis(moment: datetime) -> datetime:
    moment = _as_utc(moment)
    return moment.replace(microsecond=moment.microsecond // 1000 * 1000)


class TicketLifecycleController:
    """Issues, expires, regenerates and invalidates a user's ticket."""

    def __init__(
        self,
        user_id: str,
        balance_provider: BalanceProvider,
        settings: Optional[Settings] = None,
        composer: Optional[PayloadComposer] = None,
        encoder: Optional[DeterministicCodeEncoder] = None,
        now_fn: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = new_ticket_id,
    ):
        ensure_present(user_id, "user_id")
        self.user_id = user_id
        self.balance_provider = balance_provider
        self.settings = settings or Settings()
        self.composer = composer or PayloadComposer(self.settings.payload_scheme)
        self.encoder = encoder or DeterministicCodeEncoder(self.settings.fill_modulus)
        self.clock = ExpiryClock(
            low_time_threshold=self.settings.low_time_threshold,
            on_expired=self._handle_expired,
        )
        self._now = now_fn
        self._id_factory = id_factory
        self._state = ControllerState.NO_TICKET
        self._ticket: Optional[Ticket] = None
        self._last_request: Optional[IssueRequest] = None
        self._last_generated_at: Optional[datetime] = None
        self._statuses: Dict[str, TicketStatus] = {}
        self._lock = RLock()

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def ticket(self) -> Optional[Ticket]:
        return self._ticket

    @property
    def is_valid(self) -> bool:
        """Whether the current code may be presented at the counter."""
        return self._state == ControllerState.ACTIVE

    def status_of(self, ticket_id: str) -> Optional[TicketStatus]:
        return self._statuses.get(ticket_id)

    def active_ticket_ids(self) -> List[str]:
        return [tid for tid, status in self._statuses.items() if status == TicketStatus.ACTIVE]

    def issue(self, request: IssueRequest, now: Optional[datetime] = None) -> Ticket:
        """Issue a ticket. Only allowed when no ticket is active."""
        with self._lock:
            if self._state not in (ControllerState.NO_TICKET, ControllerState.EXPIRED):
                raise IllegalStateError(
                    f"cannot issue a ticket while {self._state.value}; regenerate instead"
                )
            self._check_amount(request.coin_amount)
            return self._generate(request, now)

    def regenerate(self, now: Optional[datetime] = None) -> Ticket:
        """Replace the current ticket with a fresh one using the same parameters."""
        with self._lock:
            if self._state not in (ControllerState.ACTIVE, ControllerState.EXPIRED):
                raise IllegalStateError(f"cannot regenerate while {self._state.value}")
            self._check_amount(self._last_request.coin_amount)
            return self._generate(self._last_request, now)

    def invalidate(self) -> None:
        """Cancel the current ticket and return to no_ticket."""
        with self._lock:
            if self._state not in (ControllerState.ACTIVE, ControllerState.EXPIRED):
                raise IllegalStateError(f"cannot invalidate while {self._state.value}")
            self._retire_current()
            self._transition(ControllerState.NO_TICKET)

    def close(self) -> None:
        """End of session: drop whatever ticket is held."""
        with self._lock:
            self._retire_current()
            if self._state != ControllerState.NO_TICKET:
                self._transition(ControllerState.NO_TICKET)

    def tick(self, now: Optional[datetime] = None) -> ClockReading:
        """Advance the expiry clock for the current ticket."""
        with self._lock:
            if self._ticket is None:
                raise IllegalStateError("no ticket to tick")
            return self.clock.tick(_as_utc(now or self._now()))

    def tick_if_active(self, now: Optional[datetime] = None) -> Optional[ClockReading]:
        """Tick only while a ticket is active; None once it expired or was dropped."""
        with self._lock:
            if self._state != ControllerState.ACTIVE:
                return None
            return self.tick(now)

    def render(self, grid_size: Optional[int] = None) -> CodeMatrix:
        """Visual code for the current ticket. Check is_valid before presenting it."""
        with self._lock:
            if self._ticket is None:
                raise IllegalStateError("no ticket to render")
            payload = self._ticket.payload
        return self.encoder.encode(payload, grid_size or self.settings.grid_size)

    def ticket_code(self) -> str:
        """Text the client copies to the clipboard."""
        with self._lock:
            if self._ticket is None:
                raise IllegalStateError("no ticket to copy")
            return self._ticket.payload

    def snapshot(self) -> TicketView:
        """Current state without advancing the clock."""
        with self._lock:
            ticket = self._ticket
            if ticket is None:
                return TicketView(state=self._state)
            reading = self.clock.reading()
            return TicketView(
                state=self._state,
                ticket=ticket,
                status=self._statuses[ticket.ticket_id],
                purpose_label=ticket.purpose.label,
                location_name=location_name(ticket.location_id),
                remaining_seconds=reading.remaining_seconds,
                countdown=reading.countdown,
                low_time=reading.low_time,
                valid=self.is_valid,
            )

    def _check_amount(self, amount: int) -> None:
        if amount <= 0:
            raise InvalidAmountError(amount)
        available = self.balance_provider.get_available_balance(self.user_id)
        if amount > available:
            raise InvalidAmountError(amount, available)

    def _issue_time(self, now: Optional[datetime]) -> datetime:
        issued_at = _to_millis(now or self._now())
        # payloads carry millisecond timestamps, so consecutive tickets must differ by one
        if self._last_generated_at is not None and issued_at <= self._last_generated_at:
            issued_at = self._last_generated_at + _ONE_MS
        return issued_at

    def _fresh_id(self) -> str:
        ticket_id = self._id_factory()
        while ticket_id in self._statuses:
            ticket_id = self._id_factory()
        return ticket_id

    def _generate(self, request: IssueRequest, now: Optional[datetime]) -> Ticket:
        issued_at = self._issue_time(now)
        ticket = Ticket(
            ticket_id=self._fresh_id(),
            user_id=self.user_id,
            purpose=request.purpose,
            coin_amount=request.coin_amount,
            location_id=request.location_id,
            generated_at=issued_at,
            expires_at=issued_at + self.settings.validity,
            payload=self.composer.compose(self.user_id, request.purpose, issued_at),
        )

        self._transition(ControllerState.GENERATING)
        self._retire_current()
        self._ticket = ticket
        self._last_request = request
        self._last_generated_at = issued_at
        self._statuses[ticket.ticket_id] = TicketStatus.ACTIVE
        self._transition(ControllerState.ACTIVE)
        self.clock.start(ticket.expires_at, issued_at)

        logger.info(
            "Ticket issued",
            extra={
                "user_id": self.user_id,
                "ticket_id": ticket.ticket_id,
                "purpose": ticket.purpose.value,
                "coin_amount": ticket.coin_amount,
                "location_id": ticket.location_id,
                "expires_at": ticket.expires_at.isoformat(),
            },
        )
        return ticket

    def _retire_current(self) -> None:
        """Stop the clock and invalidate the held ticket if it is still active."""
        self.clock.stop()
        if self._ticket is None:
            return
        ticket_id = self._ticket.ticket_id
        if self._statuses.get(ticket_id) == TicketStatus.ACTIVE:
            self._statuses[ticket_id] = TicketStatus.INVALIDATED
            logger.info(
                "Ticket invalidated",
                extra={"user_id": self.user_id, "ticket_id": ticket_id},
            )
        self._ticket = None

    def _handle_expired(self) -> None:
        ticket_id = self._ticket.ticket_id
        self._statuses[ticket_id] = TicketStatus.EXPIRED
        self._transition(ControllerState.EXPIRED)
        logger.info("Ticket expired", extra={"user_id": self.user_id, "ticket_id": ticket_id})

    def _transition(self, new_state: ControllerState) -> None:
        logger.debug(
            "Ticket state changed",
            extra={
                "user_id": self.user_id,
                "from_state": self._state.value,
                "to_state": new_state.value,
            },
        )
        self._state = new_state
