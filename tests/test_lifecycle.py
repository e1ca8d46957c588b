import sys
import os
from itertools import product

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from errors import InvalidTransition
from lifecycle import check_state_transition, is_legal_transition, LEGAL_TRANSITIONS
from models import TransactionType

LEGAL = [
    (TransactionType.DISPUTE, TransactionType.DEPOSIT),
    (TransactionType.RESOLVE, TransactionType.DISPUTE),
    (TransactionType.CHARGEBACK, TransactionType.DISPUTE),
]

ILLEGAL = [pair for pair in product(TransactionType, repeat=2) if pair not in LEGAL]


class TestStateTransitions:
    def test_exactly_three_legal_transitions(self):
        assert LEGAL_TRANSITIONS == frozenset(LEGAL)
        assert len(ILLEGAL) == 22

    @pytest.mark.parametrize("requested, current", LEGAL)
    def test_legal_transition(self, requested, current):
        assert is_legal_transition(requested, current)
        check_state_transition(requested, current)

    @pytest.mark.parametrize("requested, current", ILLEGAL)
    def test_illegal_transition(self, requested, current):
        assert not is_legal_transition(requested, current)
        with pytest.raises(InvalidTransition) as exc_info:
            check_state_transition(requested, current)
        assert exc_info.value.from_state == current
        assert exc_info.value.to_state == requested

    def test_error_message_names_both_states(self):
        with pytest.raises(InvalidTransition, match="from 'deposit' to 'resolve'"):
            check_state_transition(TransactionType.RESOLVE, TransactionType.DEPOSIT)

    def test_resolved_transaction_cannot_be_disputed_again(self):
        assert not is_legal_transition(TransactionType.DISPUTE, TransactionType.RESOLVE)
