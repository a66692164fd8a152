"""Pydantic models for tickets and API payloads."""

from models.response import ApiResponse  # noqa: F401
from models.ticket import (  # noqa: F401
    ClockReading,
    CodeMatrix,
    CodeView,
    ControllerState,
    IssueRequest,
    RedemptionPurpose,
    STORE_LOCATIONS,
    Ticket,
    TicketStatus,
    TicketView,
    location_name,
)
