"""Canonical ticket payload composition."""

from datetime import datetime, timedelta, timezone
from urllib.parse import quote

from models.ticket import RedemptionPurpose

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def epoch_millis(moment: datetime) -> int:
    """Exact milliseconds since the Unix epoch for a tz-aware datetime."""
    return (moment - _EPOCH) // timedelta(milliseconds=1)


class PayloadComposer:
    """Builds the URI-like string encoded into a ticket's visual code."""

    def __init__(self, scheme: str = "greed"):
        self.scheme = scheme

    def compose(self, user_id: str, purpose: RedemptionPurpose, issued_at: datetime) -> str:
        """
        Return ``<scheme>://ticket/<user_id>/<epoch_millis>``.

        The user id is percent-encoded so it always stays one path segment.

        The purpose is not part of the payload: a counter-side verifier looks
        it up by ticket, so the payload stays a function of the user and the
        issue time alone.
        """
        user = quote(user_id, safe="")
        return f"{self.scheme}://ticket/{user}/{epoch_millis(issued_at)}"
