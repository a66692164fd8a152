"""
Pydantic model validation tests.

Ensures ticket models validate correctly and reject invalid data.

Run with: pytest tests/unit/test_models.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

T0 = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


class TestIssueRequest:
    """Test IssueRequest model validation."""

    def test_valid_issue_request(self):
        """Valid form input should pass validation."""
        from models.ticket import IssueRequest, RedemptionPurpose

        request = IssueRequest.model_validate(
            {"purpose": "cash-pickup", "coin_amount": 250, "location_id": " delhi-ncr "}
        )
        assert request.purpose == RedemptionPurpose.CASH_PICKUP
        assert request.location_id == "delhi-ncr"

    def test_negative_amount_is_left_to_the_controller(self):
        """Amount range is a lifecycle rule, not a schema rule."""
        from models.ticket import IssueRequest

        request = IssueRequest(purpose="merchandise", coin_amount=-10, location_id="pune-it-hub")
        assert request.coin_amount == -10

    def test_unknown_purpose_rejected(self):
        from models.ticket import IssueRequest

        with pytest.raises(ValidationError):
            IssueRequest(purpose="lottery", coin_amount=10, location_id="pune-it-hub")

    def test_blank_location_rejected(self):
        from models.ticket import IssueRequest

        with pytest.raises(ValidationError) as exc_info:
            IssueRequest(purpose="vip-access", coin_amount=10, location_id="   ")
        assert exc_info.value.error_count() == 1


class TestTicket:
    """Test Ticket entity invariants."""

    def _ticket(self, **overrides):
        from models.ticket import Ticket

        fields = dict(
            ticket_id="TKT-AB12CD34",
            user_id="GH-2024-78392",
            purpose="gadget-redemption",
            coin_amount=5000,
            location_id="mumbai-central",
            generated_at=T0,
            expires_at=T0 + timedelta(minutes=30),
            payload="greed://ticket/GH-2024-78392/1792411200000",
        )
        fields.update(overrides)
        return Ticket(**fields)

    def test_valid_ticket(self):
        ticket = self._ticket()
        assert ticket.validity == timedelta(minutes=30)

    def test_expiry_must_follow_generation(self):
        with pytest.raises(ValidationError):
            self._ticket(expires_at=T0)

    def test_amount_must_be_positive(self):
        with pytest.raises(ValidationError):
            self._ticket(coin_amount=0)

    def test_ticket_is_immutable(self):
        ticket = self._ticket()
        with pytest.raises(ValidationError):
            ticket.coin_amount = 1


class TestClockReading:
    """Test countdown formatting."""

    def test_countdown_formats_minutes_and_seconds(self):
        from models.ticket import ClockReading

        reading = ClockReading(remaining=timedelta(minutes=29, seconds=5, milliseconds=900), low_time=False, expired=False)
        assert reading.countdown == "29:06"
        assert reading.remaining_seconds == 1746

    def test_countdown_at_zero(self):
        from models.ticket import ClockReading

        reading = ClockReading(remaining=timedelta(0), low_time=True, expired=True)
        assert reading.countdown == "00:00"


class TestEnums:
    """Test enum values and labels."""

    def test_purpose_values(self):
        from models.ticket import RedemptionPurpose

        assert [p.value for p in RedemptionPurpose] == [
            "gadget-redemption",
            "cash-pickup",
            "merchandise",
            "vip-access",
        ]
        assert RedemptionPurpose.VIP_ACCESS.label == "VIP Lounge Access"

    def test_location_names(self):
        from models.ticket import location_name

        assert location_name("bangalore-tech-park") == "GreedStore - Bangalore Tech Park"
        assert location_name("kiosk-7") == "kiosk-7"
