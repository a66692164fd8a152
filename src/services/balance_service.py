"""Wallet balance providers consumed by the ticket controller."""

from __future__ import annotations

from typing import Dict, Optional, Protocol

from config.settings import Settings
from utils.logging_config import get_logger

logger = get_logger(__name__)


class BalanceProvider(Protocol):
    """Anything that can report a user's spendable coin balance."""

    def get_available_balance(self, user_id: str) -> int:
        ...


class StaticBalanceProvider:
    """In-memory balances for local runs and tests."""

    def __init__(self, balances: Optional[Dict[str, int]] = None, default: int = 0):
        self.balances = dict(balances or {})
        self.default = default

    def get_available_balance(self, user_id: str) -> int:
        return self.balances.get(user_id, self.default)


def build_balance_provider(settings: Settings) -> BalanceProvider:
    """Use the wallet table when configured, otherwise a static fallback."""
    if settings.wallet_table:
        from repositories.wallet_repo import WalletRepository

        return WalletRepository(settings.wallet_table)

    logger.warning(
        "WALLET_TABLE not set; using static balances",
        extra={"default_coin_balance": settings.default_coin_balance},
    )
    return StaticBalanceProvider(default=settings.default_coin_balance)
