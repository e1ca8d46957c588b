from typing import Dict

from errors import DuplicateTransaction, UnknownTransaction
from models import StoredTransaction, TransactionType


class TransactionStore:
    """
    Stored deposits keyed by transaction id, used for dispute lookups.
    All transaction kinds share this id namespace.
    """

    def __init__(self):
        self._transactions: Dict[int, StoredTransaction] = {}

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._transactions

    def insert(self, transaction_id: int, transaction: StoredTransaction) -> None:
        """Store a new transaction. Existing entries are never overwritten."""
        if transaction_id in self._transactions:
            raise DuplicateTransaction(transaction_id)
        self._transactions[transaction_id] = transaction

    def get(self, transaction_id: int) -> StoredTransaction:
        """Retrieve stored transaction by ID."""
        try:
            return self._transactions[transaction_id]
        except KeyError:
            raise UnknownTransaction(transaction_id) from None

    def update_state(self, transaction_id: int, state: TransactionType) -> None:
        """Move a stored transaction to a new, already validated, lifecycle state."""
        self.get(transaction_id).state = state

    def remove(self, transaction_id: int) -> StoredTransaction:
        """Drop a charged back transaction for good."""
        transaction = self.get(transaction_id)
        del self._transactions[transaction_id]
        return transaction
