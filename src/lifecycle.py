from typing import FrozenSet, Tuple

from errors import InvalidTransition
from models import TransactionType

# (requested state, current state)
LEGAL_TRANSITIONS: FrozenSet[Tuple[TransactionType, TransactionType]] = frozenset({
    (TransactionType.DISPUTE, TransactionType.DEPOSIT),
    (TransactionType.RESOLVE, TransactionType.DISPUTE),
    (TransactionType.CHARGEBACK, TransactionType.DISPUTE),
})


def is_legal_transition(requested: TransactionType, current: TransactionType) -> bool:
    return (requested, current) in LEGAL_TRANSITIONS


def check_state_transition(requested: TransactionType, current: TransactionType) -> None:
    """
    Check that a stored transaction in state `current` may move to `requested`.

    Raises:
        InvalidTransition: for every pair outside LEGAL_TRANSITIONS
    """
    if not is_legal_transition(requested, current):
        raise InvalidTransition(current, requested)
