"""
Environment-specific configuration settings.

Defaults match the in-store redemption flow: a 30 minute ticket, a five
minute low-time warning and a 21x21 code.
"""

from dataclasses import dataclass
from datetime import timedelta
import os
from typing import Optional


@dataclass
class Settings:
    """Ticket service settings with prototype defaults."""

    # Environment
    environment: str = "dev"

    # Ticket lifecycle
    validity_minutes: int = 30
    low_time_minutes: int = 5
    tick_interval_seconds: float = 1.0

    # Visual code
    grid_size: int = 21
    fill_modulus: int = 3
    payload_scheme: str = "greed"

    # Wallet collaborator; unset table means the static fallback is used
    wallet_table: Optional[str] = None
    default_coin_balance: int = 12450

    # Session store
    session_ttl_seconds: int = 3600
    session_max_size: int = 1000

    def __post_init__(self):
        if self.validity_minutes <= 0:
            raise ValueError("validity_minutes must be positive")
        if self.low_time_minutes < 0:
            raise ValueError("low_time_minutes must not be negative")

    @property
    def validity(self) -> timedelta:
        return timedelta(minutes=self.validity_minutes)

    @property
    def low_time_threshold(self) -> timedelta:
        return timedelta(minutes=self.low_time_minutes)

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get
        return cls(
            environment=env("ENVIRONMENT", "dev"),
            validity_minutes=int(env("TICKET_VALIDITY_MINUTES", "30")),
            low_time_minutes=int(env("TICKET_LOW_TIME_MINUTES", "5")),
            tick_interval_seconds=float(env("TICKET_TICK_INTERVAL_SECONDS", "1.0")),
            grid_size=int(env("TICKET_GRID_SIZE", "21")),
            payload_scheme=env("TICKET_PAYLOAD_SCHEME", "greed"),
            wallet_table=env("WALLET_TABLE") or None,
            default_coin_balance=int(env("DEFAULT_COIN_BALANCE", "12450")),
            session_ttl_seconds=int(env("SESSION_TTL_SECONDS", "3600")),
            session_max_size=int(env("SESSION_MAX_SIZE", "1000")),
        )
