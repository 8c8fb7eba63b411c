"""
Unit tests for the debt simplifier.

Tests cover:
- Worked examples (single creditor, cycles, several creditors)
- Deterministic ordering of equal amounts
- Never emitting transfers of one cent or less
- Applying the output clears every balance
- Residual reporting on unbalanced input
"""

import logging
import pytest
from decimal import Decimal
from uuid import UUID

from apps.expenses.exceptions import UnbalancedLedgerError
from apps.expenses.services.debt_simplification import (
    SimplifiedDebt,
    apply_debts,
    simplify_debts,
)
from apps.expenses.services.snapshot import MemberIdentity


def uid(n):
    return UUID(f'00000000-0000-0000-0000-{n:012d}')


A, B, C, D, E = (uid(n) for n in range(1, 6))
NAMES = {A: 'Alice', B: 'Bob', C: 'Carol', D: 'Dan', E: 'Eve'}
MEMBERS = tuple(MemberIdentity(id=member_id, name=name) for member_id, name in NAMES.items())


def balances(**amounts):
    ids = {'A': A, 'B': B, 'C': C, 'D': D, 'E': E}
    return {ids[key]: Decimal(value) for key, value in amounts.items()}


def as_tuples(debts):
    return [(d.from_member.name, d.to_member.name, d.amount) for d in debts]


# =============================================================================
# Worked Examples
# =============================================================================

class TestSimplifyDebts:

    def test_single_debt(self):
        debts = simplify_debts(balances(A='50.00', B='-50.00'), MEMBERS)

        assert as_tuples(debts) == [('Bob', 'Alice', Decimal('50.00'))]

    def test_two_debtors_one_creditor(self):
        debts = simplify_debts(balances(A='60.00', B='-30.00', C='-30.00'), MEMBERS)

        assert as_tuples(debts) == [
            ('Bob', 'Alice', Decimal('30.00')),
            ('Carol', 'Alice', Decimal('30.00')),
        ]

    def test_all_settled_gives_no_debts(self):
        assert simplify_debts(balances(A='0.00', B='0.00', C='0.00'), MEMBERS) == []

    def test_empty_input(self):
        assert simplify_debts({}, MEMBERS) == []

    def test_largest_amounts_matched_first(self):
        debts = simplify_debts(
            balances(A='70.00', B='30.00', C='-60.00', D='-40.00'),
            MEMBERS,
        )

        assert as_tuples(debts) == [
            ('Carol', 'Alice', Decimal('60.00')),
            ('Dan', 'Alice', Decimal('10.00')),
            ('Dan', 'Bob', Decimal('30.00')),
        ]

    def test_output_carries_display_identity(self):
        avatar = MemberIdentity(id=A, name='Alice', avatar_url='https://example.com/a.png')
        debts = simplify_debts(balances(A='5.00', B='-5.00'), (avatar, MEMBERS[1]))

        assert debts[0].to_member == avatar
        assert debts[0].from_member.avatar_url is None

    def test_unknown_identity_falls_back_to_id(self, caplog):
        caplog.set_level(logging.WARNING)

        debts = simplify_debts(balances(A='5.00', B='-5.00'), MEMBERS[:1])

        assert debts[0].from_member.id == B
        assert debts[0].from_member.name == str(B)
        assert str(B) in caplog.text


# =============================================================================
# Ordering
# =============================================================================

class TestTieBreak:
    """Equal amounts are ordered by member id, ascending."""

    def test_equal_debtors_ordered_by_id(self):
        debts = simplify_debts(balances(A='20.00', C='-10.00', B='-10.00'), MEMBERS)

        assert as_tuples(debts) == [
            ('Bob', 'Alice', Decimal('10.00')),
            ('Carol', 'Alice', Decimal('10.00')),
        ]

    def test_equal_creditors_ordered_by_id(self):
        debts = simplify_debts(balances(D='10.00', B='10.00', A='-20.00'), MEMBERS)

        assert as_tuples(debts) == [
            ('Alice', 'Bob', Decimal('10.00')),
            ('Alice', 'Dan', Decimal('10.00')),
        ]

    def test_input_order_does_not_matter(self):
        forward = balances(A='15.00', B='15.00', C='-10.00', D='-10.00', E='-10.00')
        backward = dict(reversed(list(forward.items())))

        assert simplify_debts(forward, MEMBERS) == simplify_debts(backward, MEMBERS)

    def test_repeated_calls_identical(self):
        amounts = balances(A='41.17', B='-3.33', C='-12.84', D='-25.00')

        assert simplify_debts(amounts, MEMBERS) == simplify_debts(amounts, MEMBERS)


# =============================================================================
# Invariants
# =============================================================================

CASES = [
    balances(A='50.00', B='-50.00'),
    balances(A='66.66', B='-33.33', C='-33.33'),
    balances(A='41.17', B='-3.33', C='-12.84', D='-25.00'),
    balances(A='100.00', B='25.50', C='-40.25', D='-40.25', E='-45.00'),
    balances(A='0.03', B='-0.02', C='-0.01'),
]


class TestInvariants:

    @pytest.mark.parametrize('amounts', CASES)
    def test_applying_debts_clears_balances(self, amounts):
        debts = simplify_debts(amounts, MEMBERS, strict=True)
        remaining = apply_debts(amounts, debts)

        assert all(abs(value) <= Decimal('0.01') for value in remaining.values())

    @pytest.mark.parametrize('amounts', CASES[:4])
    def test_applying_debts_clears_balances_exactly(self, amounts):
        debts = simplify_debts(amounts, MEMBERS, strict=True)

        assert set(apply_debts(amounts, debts).values()) == {Decimal('0.00')}

    @pytest.mark.parametrize('amounts', CASES)
    def test_no_transfer_of_a_cent_or_less(self, amounts):
        for debt in simplify_debts(amounts, MEMBERS):
            assert debt.amount > Decimal('0.01')

    @pytest.mark.parametrize('amounts', CASES)
    def test_transfer_count_bound(self, amounts):
        creditors = sum(1 for v in amounts.values() if v > Decimal('0.01'))
        debtors = sum(1 for v in amounts.values() if v < Decimal('-0.01'))

        debts = simplify_debts(amounts, MEMBERS)

        assert len(debts) <= max(creditors + debtors - 1, 0)

    def test_one_cent_balances_are_left_alone(self):
        assert simplify_debts(balances(A='0.01', B='-0.01'), MEMBERS) == []

    def test_rounding_dust_is_not_an_error(self, caplog):
        """A zero-sum input can still leave sub-threshold amounts behind."""
        caplog.set_level(logging.DEBUG, logger='apps.expenses.services.debt_simplification')

        debts = simplify_debts(balances(A='0.01', B='0.01', C='-0.02'), MEMBERS, strict=True)

        assert debts == []
        assert 'rounding dust' in caplog.text

    def test_leftover_cent_after_transfer_is_reported(self, caplog):
        """A debtor left with one cent is skipped, not netted against the next creditor."""
        caplog.set_level(logging.INFO, logger='apps.expenses.services.debt_simplification')
        amounts = balances(A='5.00', B='2.00', C='-5.01', D='-1.99')

        debts = simplify_debts(amounts, MEMBERS, strict=True)

        assert as_tuples(debts) == [
            ('Carol', 'Alice', Decimal('5.00')),
            ('Dan', 'Bob', Decimal('1.99')),
        ]
        remaining = apply_debts(amounts, debts)
        assert remaining[B] == Decimal('0.01')
        assert remaining[C] == Decimal('-0.01')
        assert '0.01 owed / 0.01 owing as rounding dust' in caplog.text


# =============================================================================
# Unbalanced Input
# =============================================================================

class TestUnbalancedInput:

    def test_residual_is_logged(self, caplog):
        caplog.set_level(logging.WARNING)

        debts = simplify_debts(balances(A='10.00', B='-5.00'), MEMBERS)

        assert as_tuples(debts) == [('Bob', 'Alice', Decimal('5.00'))]
        assert 'sum to 5.00' in caplog.text

    def test_strict_mode_raises(self):
        with pytest.raises(UnbalancedLedgerError):
            simplify_debts(balances(A='10.00', B='-5.00'), MEMBERS, strict=True)


def test_apply_debts_moves_both_sides():
    debt = SimplifiedDebt(
        from_member=MEMBERS[1],
        to_member=MEMBERS[0],
        amount=Decimal('12.50'),
    )

    result = apply_debts(balances(A='20.00', B='-12.50'), [debt])

    assert result == {A: Decimal('7.50'), B: Decimal('0.00')}
