"""
The ledger engine: applies deposits, withdrawals and the dispute lifecycle
to per-client accounts.

Besides the missing-amount check, deposits and withdrawals with a negative
amount are rejected with InvalidAmount, so balances never go negative.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Dict, Optional

from account_store import AccountStore
from errors import (
    AccountLocked,
    ClientMismatch,
    DuplicateTransaction,
    InsufficientFunds,
    InvalidAmount,
    MissingAmount,
)
from lifecycle import check_state_transition
from models import TransactionRecord, TransactionType, ClientAccount, StoredTransaction
from transaction_store import TransactionStore

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions, one at a time, against the ledger state.
    Owns the transaction store and the account store; nothing else holds
    references into them.
    """

    def __init__(self):
        self._transactions = TransactionStore()
        self._accounts = AccountStore()

    def process_transaction(self, transaction: TransactionRecord) -> None:
        """
        Apply a single transaction.

        Raises:
            ValidationError: the transaction breaks a business rule. State is
                left exactly as it was before the call.
        """
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                self._handle_chargeback(transaction)

    def snapshot(self) -> Dict[int, ClientAccount]:
        """Return copies of all client accounts."""
        return self._accounts.snapshot()

    def lookup_transaction(self, transaction_id: int) -> Optional[StoredTransaction]:
        """Return a copy of a stored transaction, or None if it is not (or no longer) stored."""
        if transaction_id not in self._transactions:
            return None
        return replace(self._transactions.get(transaction_id))

    def _handle_deposit(self, transaction: TransactionRecord) -> None:
        amount = self._require_amount(transaction)
        account = self._accounts.get(transaction.client_id)

        if account is not None and account.locked:
            raise AccountLocked(transaction.client_id)

        # Checked before touching balances so a rejected duplicate leaves no trace.
        if transaction.transaction_id in self._transactions:
            raise DuplicateTransaction(transaction.transaction_id)

        if account is None:
            self._accounts.insert(ClientAccount(client_id=transaction.client_id, available=amount))
        else:
            account.credit(amount)

        self._transactions.insert(
            transaction.transaction_id,
            StoredTransaction(client_id=transaction.client_id, amount=amount),
        )

    def _handle_withdrawal(self, transaction: TransactionRecord) -> None:
        amount = self._require_amount(transaction)

        # Withdrawals are never stored, so this only catches collisions with deposits.
        if transaction.transaction_id in self._transactions:
            raise DuplicateTransaction(transaction.transaction_id)

        account = self._accounts.get(transaction.client_id)
        if account is None:
            logger.debug(f"Withdrawal tx {transaction.transaction_id}: client {transaction.client_id} has no account, ignoring")
            return

        if account.locked:
            raise AccountLocked(transaction.client_id)

        if account.available < amount:
            raise InsufficientFunds(transaction.client_id, amount, account.available)

        account.debit(amount)

    def _handle_dispute(self, transaction: TransactionRecord) -> None:
        original = self._transition(transaction)
        account = self._accounts.get(transaction.client_id)

        if account is not None and account.available >= original.amount:
            account.hold(original.amount)
        else:
            logger.info(f"Dispute for tx {transaction.transaction_id}: available funds below {original.amount}, nothing held")

    def _handle_resolve(self, transaction: TransactionRecord) -> None:
        original = self._transition(transaction)
        account = self._accounts.get(transaction.client_id)

        if account is not None and account.held >= original.amount:
            account.release_hold(original.amount)
        else:
            logger.info(f"Resolve for tx {transaction.transaction_id}: held funds below {original.amount}, nothing released")

    def _handle_chargeback(self, transaction: TransactionRecord) -> None:
        original = self._transition(transaction)
        account = self._accounts.get(transaction.client_id)

        if account is not None:
            if account.held >= original.amount:
                account.remove_held(original.amount)
            else:
                logger.info(f"Chargeback for tx {transaction.transaction_id}: held funds below {original.amount}, nothing removed")
            account.lock()

        # Charged back transactions are terminal and not kept.
        self._transactions.remove(transaction.transaction_id)

    def _transition(self, transaction: TransactionRecord) -> StoredTransaction:
        """
        Validate and commit the lifecycle change requested by a dispute,
        resolve or chargeback. Returns the referenced stored transaction.
        """
        self._check_not_locked(transaction.client_id)

        original = self._transactions.get(transaction.transaction_id)

        if original.client_id != transaction.client_id:
            raise ClientMismatch(transaction.transaction_id, original.client_id, transaction.client_id)

        check_state_transition(transaction.transaction_type, original.state)

        self._transactions.update_state(transaction.transaction_id, transaction.transaction_type)
        return original

    def _check_not_locked(self, client_id: int) -> None:
        account = self._accounts.get(client_id)
        if account is not None and account.locked:
            raise AccountLocked(client_id)

    @staticmethod
    def _require_amount(transaction: TransactionRecord) -> Decimal:
        if transaction.amount is None:
            raise MissingAmount(transaction.transaction_type, transaction.transaction_id)
        if transaction.amount < 0:
            raise InvalidAmount(transaction.transaction_type, transaction.transaction_id, transaction.amount)
        return transaction.amount
