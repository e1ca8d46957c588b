from dataclasses import replace
from typing import Dict, Optional

from models import ClientAccount


class AccountStore:
    """
    Client accounts keyed by client id.
    Accounts are created on a client's first deposit and never deleted.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def get(self, client_id: int) -> Optional[ClientAccount]:
        """Return the account, or None for a client never seen before."""
        return self._accounts.get(client_id)

    def insert(self, account: ClientAccount) -> None:
        if account.client_id in self._accounts:
            raise ValueError(f"Account for client {account.client_id} already exists")
        self._accounts[account.client_id] = account

    def snapshot(self) -> Dict[int, ClientAccount]:
        """Return detached copies of all accounts (for final output)."""
        return {client_id: replace(account) for client_id, account in self._accounts.items()}
