"""
Exceptions raised by the payments ledger.

DecodeError covers malformed input rows. ValidationError and its subclasses
cover business-rule violations. Both are recoverable: the affected record is
skipped and processing continues with the next one.
"""

from decimal import Decimal
from typing import Optional

from models import TransactionType


class LedgerError(Exception):
    """Base exception for all ledger-related errors."""
    pass


class DecodeError(LedgerError):
    """Raised when an input row cannot be turned into a TransactionRecord."""

    def __init__(self, line_number: Optional[int], reason: str):
        self.line_number = line_number
        self.reason = reason
        location = f"line {line_number}" if line_number is not None else "row"
        super().__init__(f"Malformed {location}: {reason}")


class ValidationError(LedgerError):
    """Base exception for transactions rejected by a business rule."""
    pass


class MissingAmount(ValidationError):
    def __init__(self, transaction_type: TransactionType, transaction_id: int):
        self.transaction_type = transaction_type
        self.transaction_id = transaction_id
        super().__init__(f"{transaction_type.value.capitalize()} tx {transaction_id} must have an amount")


class InvalidAmount(ValidationError):
    def __init__(self, transaction_type: TransactionType, transaction_id: int, amount: Decimal):
        self.transaction_type = transaction_type
        self.transaction_id = transaction_id
        self.amount = amount
        super().__init__(f"{transaction_type.value.capitalize()} tx {transaction_id}: invalid amount {amount}")


class DuplicateTransaction(ValidationError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction id {transaction_id} has already been used")


class UnknownTransaction(ValidationError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction with id {transaction_id} does not exist")


class ClientMismatch(ValidationError):
    def __init__(self, transaction_id: int, expected: int, actual: int):
        self.transaction_id = transaction_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Transaction with id {transaction_id} belongs to client {expected}, not client {actual}"
        )


class InvalidTransition(ValidationError):
    def __init__(self, from_state: TransactionType, to_state: TransactionType):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Invalid state transition from '{from_state.value}' to '{to_state.value}'")


class AccountLocked(ValidationError):
    def __init__(self, client_id: int):
        self.client_id = client_id
        super().__init__(f"Account of client with id {client_id} is locked")


class InsufficientFunds(ValidationError):
    def __init__(self, client_id: int, requested: Decimal, available: Decimal):
        self.client_id = client_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Unable to withdraw {requested} for client with id {client_id}: available funds {available}"
        )
