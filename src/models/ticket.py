"""Redemption ticket models."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RedemptionPurpose(str, Enum):
    """What the coins are being redeemed for at the counter."""

    GADGET_REDEMPTION = "gadget-redemption"
    CASH_PICKUP = "cash-pickup"
    MERCHANDISE = "merchandise"
    VIP_ACCESS = "vip-access"

    @property
    def label(self) -> str:
        return _PURPOSE_LABELS[self]


_PURPOSE_LABELS = {
    RedemptionPurpose.GADGET_REDEMPTION: "In-Store Gadget Redemption",
    RedemptionPurpose.CASH_PICKUP: "Cash Pickup",
    RedemptionPurpose.MERCHANDISE: "Merchandise Collection",
    RedemptionPurpose.VIP_ACCESS: "VIP Lounge Access",
}

STORE_LOCATIONS = {
    "mumbai-central": "GreedStore - Mumbai Central",
    "delhi-ncr": "GreedStore - Delhi NCR",
    "bangalore-tech-park": "GreedStore - Bangalore Tech Park",
    "pune-it-hub": "GreedStore - Pune IT Hub",
}


def location_name(location_id: str) -> str:
    """Display name for a store location; unknown ids are shown verbatim."""
    return STORE_LOCATIONS.get(location_id, location_id)


class TicketStatus(str, Enum):
    """Lifecycle status of a single ticket. Only moves forward from ACTIVE."""

    ACTIVE = "active"
    EXPIRED = "expired"
    INVALIDATED = "invalidated"


class ControllerState(str, Enum):
    """State of a user's ticket controller."""

    NO_TICKET = "no_ticket"
    GENERATING = "generating"
    ACTIVE = "active"
    EXPIRED = "expired"


class IssueRequest(BaseModel):
    """Redemption parameters submitted by the ticket form."""

    purpose: RedemptionPurpose
    coin_amount: int = Field(strict=True)
    location_id: str

    @field_validator("location_id")
    @classmethod
    def validate_location(cls, value: str) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValueError("location_id must be provided")
        return cleaned


class Ticket(BaseModel):
    """Issued redemption ticket. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    ticket_id: str
    user_id: str
    purpose: RedemptionPurpose
    coin_amount: int = Field(gt=0)
    location_id: str
    generated_at: datetime
    expires_at: datetime
    payload: str

    @model_validator(mode="after")
    def validate_window(self) -> "Ticket":
        if self.expires_at <= self.generated_at:
            raise ValueError("expires_at must be after generated_at")
        return self

    @property
    def validity(self) -> timedelta:
        return self.expires_at - self.generated_at


@dataclass(frozen=True)
class ClockReading:
    """Remaining time observed on one clock tick."""

    remaining: timedelta
    low_time: bool
    expired: bool

    @property
    def remaining_seconds(self) -> int:
        """Whole seconds left, rounded up so 00:00 only shows once expired."""
        return math.ceil(self.remaining.total_seconds())

    @property
    def countdown(self) -> str:
        """MM:SS display used by the ticket screen."""
        minutes, seconds = divmod(self.remaining_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"


@dataclass(frozen=True)
class CodeMatrix:
    """Square boolean grid; True cells are drawn dark."""

    size: int
    rows: Tuple[Tuple[bool, ...], ...]

    def cell(self, row: int, col: int) -> bool:
        return self.rows[row][col]

    def to_lists(self) -> List[List[bool]]:
        return [list(row) for row in self.rows]


class TicketView(BaseModel):
    """Snapshot of a user's ticket returned by the API."""

    state: ControllerState
    ticket: Optional[Ticket] = None
    status: Optional[TicketStatus] = None
    purpose_label: Optional[str] = None
    location_name: Optional[str] = None
    remaining_seconds: int = 0
    countdown: str = "00:00"
    low_time: bool = False
    valid: bool = False


class CodeView(BaseModel):
    """Rendered visual code for the current ticket."""

    ticket_id: str
    ticket_code: str
    valid: bool
    size: int
    matrix: List[List[bool]]
    svg: str
