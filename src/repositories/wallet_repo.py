"""DynamoDB repository for wallet balances."""

from typing import Any, Dict, Optional

import boto3


class WalletRepository:
    """Read-only access to the coin wallet table."""

    def __init__(self, table_name: str):
        self.table = boto3.resource("dynamodb").Table(table_name)

    def get_wallet(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Fetch the wallet item for a user."""
        resp = self.table.get_item(Key={"user_id": user_id})
        return resp.get("Item")

    def get_available_balance(self, user_id: str) -> int:
        """Spendable coins; a user without a wallet item has none."""
        item = self.get_wallet(user_id)
        if not item:
            return 0
        return int(item.get("coin_balance", 0))
