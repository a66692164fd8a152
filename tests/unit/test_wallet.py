"""
Wallet collaborator tests with a mocked DynamoDB resource.

Run with: pytest tests/unit/test_wallet.py -v
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

from config.settings import Settings
from services.balance_service import StaticBalanceProvider, build_balance_provider


class TestWalletRepository:
    """Test WalletRepository against a mocked table."""

    @patch("repositories.wallet_repo.boto3")
    def test_reads_coin_balance(self, mock_boto3):
        from repositories.wallet_repo import WalletRepository

        table = MagicMock()
        table.get_item.return_value = {"Item": {"user_id": "u1", "coin_balance": Decimal("12450")}}
        mock_boto3.resource.return_value.Table.return_value = table

        repo = WalletRepository("wallets")

        assert repo.get_available_balance("u1") == 12450
        mock_boto3.resource.assert_called_once_with("dynamodb")
        mock_boto3.resource.return_value.Table.assert_called_once_with("wallets")
        table.get_item.assert_called_once_with(Key={"user_id": "u1"})

    @patch("repositories.wallet_repo.boto3")
    def test_missing_wallet_has_no_balance(self, mock_boto3):
        from repositories.wallet_repo import WalletRepository

        mock_boto3.resource.return_value.Table.return_value.get_item.return_value = {}

        assert WalletRepository("wallets").get_available_balance("ghost") == 0


class TestBalanceProviders:
    """Test provider selection."""

    def test_static_provider_defaults(self):
        provider = StaticBalanceProvider({"u1": 50}, default=5)
        assert provider.get_available_balance("u1") == 50
        assert provider.get_available_balance("u2") == 5

    def test_static_fallback_without_table(self):
        provider = build_balance_provider(Settings(default_coin_balance=999))
        assert isinstance(provider, StaticBalanceProvider)
        assert provider.get_available_balance("u1") == 999

    @patch("repositories.wallet_repo.boto3")
    def test_wallet_table_selects_dynamodb(self, mock_boto3):
        from repositories.wallet_repo import WalletRepository

        provider = build_balance_provider(Settings(wallet_table="greed-wallets"))
        assert isinstance(provider, WalletRepository)
        mock_boto3.resource.return_value.Table.assert_called_once_with("greed-wallets")
