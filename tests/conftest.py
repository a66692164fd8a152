"""
Pytest configuration to ensure paths are set up correctly for tests.

This allows imports like `from services import ticket_controller` to work
when running tests, simulating the Lambda environment where code
is deployed from the src/ directory.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add src/ to sys.path if missing.

    The src/ directory is added to simulate Lambda's import behavior,
    where the deployment asset makes src/ the root of the package.
    """
    repo_root = Path(__file__).resolve().parents[1]
    src_str = str(repo_root / "src")
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

# Offline-friendly defaults so tests never reach AWS.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("ENVIRONMENT", "dev")
os.environ.pop("WALLET_TABLE", None)

T0 = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock injected as now_fn."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def controller(clock):
    """Controller for a user holding 12,450 coins."""
    from services.balance_service import StaticBalanceProvider
    from services.ticket_controller import TicketLifecycleController

    return TicketLifecycleController(
        user_id="GH-2024-78392",
        balance_provider=StaticBalanceProvider({"GH-2024-78392": 12450}),
        now_fn=clock,
    )


@pytest.fixture
def gadget_request():
    from models.ticket import IssueRequest, RedemptionPurpose

    return IssueRequest(
        purpose=RedemptionPurpose.GADGET_REDEMPTION,
        coin_amount=5000,
        location_id="mumbai-central",
    )
