from dataclasses import dataclass
from decimal import Context, Decimal, ROUND_HALF_EVEN
from enum import Enum
from typing import Optional

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

# Input amounts may span at most this many digits in plain notation
# (integer digits plus decimal places), so they stay below 10**28.
MAX_AMOUNT_DIGITS = 28

# Balance arithmetic keeps enough headroom over MAX_AMOUNT_DIGITS for sums of
# accepted amounts to stay exact, so total always equals available + held.
LEDGER_CONTEXT = Context(prec=64, rounding=ROUND_HALF_EVEN)


class TransactionType(Enum):
    """
    Kind of an incoming transaction.
    Also used as the lifecycle state of a stored deposit:
    DEPOSIT (active), DISPUTE, RESOLVE, CHARGEBACK (terminal).
    """

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


@dataclass(frozen=True)
class TransactionRecord:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"TransactionRecord({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class StoredTransaction:
    """Deposit kept for later dispute lookups."""

    client_id: int
    amount: Decimal
    state: TransactionType = TransactionType.DEPOSIT


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return LEDGER_CONTEXT.add(self.available, self.held)

    def credit(self, amount: Decimal) -> None:
        self.available = LEDGER_CONTEXT.add(self.available, amount)

    def debit(self, amount: Decimal) -> None:
        self.available = LEDGER_CONTEXT.subtract(self.available, amount)

    def hold(self, amount: Decimal) -> None:
        self.available = LEDGER_CONTEXT.subtract(self.available, amount)
        self.held = LEDGER_CONTEXT.add(self.held, amount)

    def release_hold(self, amount: Decimal) -> None:
        self.held = LEDGER_CONTEXT.subtract(self.held, amount)
        self.available = LEDGER_CONTEXT.add(self.available, amount)

    def remove_held(self, amount: Decimal) -> None:
        self.held = LEDGER_CONTEXT.subtract(self.held, amount)

    def lock(self) -> None:
        self.locked = True


class ProcessingStats:
    """Counters for tracking processing statistics over one run."""

    def __init__(self):
        self.processed = 0
        self.rejected = 0
        self.malformed = 0

    def record_success(self):
        self.processed += 1

    def record_rejection(self):
        self.rejected += 1

    def record_malformed(self):
        self.malformed += 1

    def __repr__(self) -> str:
        return f"Processed: {self.processed}, Rejected: {self.rejected}, Malformed: {self.malformed}"
