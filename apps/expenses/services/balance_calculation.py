"""
Balance Calculation Service
===========================

Computes every member's net balance in a group from its expenses,
splits and recorded settlements.

A positive balance means the group owes the member money; a negative
balance means the member owes the group. For every member ``m``::

    net(m) = paid(m) - owed(m) + settled_out(m) - settled_in(m)

where ``paid`` is the total of expenses ``m`` paid for, ``owed`` the
total of ``m``'s splits, ``settled_out`` what ``m`` has paid others via
settlements and ``settled_in`` what ``m`` has received. Paying a
settlement moves the payer's balance up toward zero; receiving one moves
the receiver's balance down by the same amount, so settlements never
change the group total.

The settlement terms carry the opposite sign to the commonly quoted
``+received - paid_as_settlement``. With that sign, B paying A 50 after
A covered a 100.00 bill split evenly would leave A at +100 and B at -100
instead of both at zero, so recording the suggested payments could never
settle a group.

All sums are accumulated in integer cents. Anything below one cent in
absolute value counts as settled.

Functions in this module are pure: they read a ``GroupSnapshot`` and
return new values.
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List
from uuid import UUID

from apps.expenses.exceptions import BalanceIntegrityError, EmptyGroupError
from apps.expenses.money import from_cents, to_cents

from .snapshot import GroupSnapshot

logger = logging.getLogger(__name__)

BALANCE_TOLERANCE = Decimal('0.01')


def is_settled(amount: Decimal) -> bool:
    """True when ``amount`` is within one cent of zero."""
    return abs(amount) < BALANCE_TOLERANCE


def calculate_net_balances(snapshot: GroupSnapshot) -> Dict[UUID, Decimal]:
    """
    Compute the signed net balance of every current group member.

    Args:
        snapshot: The group's ledger snapshot.

    Returns:
        dict mapping member id to a two-place Decimal, one entry per
        member in membership order, zero balances included.

    Raises:
        EmptyGroupError: If the snapshot has no members.

    Note:
        Expenses, splits or settlements that reference people who have
        since left the group are still applied, but the departed person
        gets no entry. Their leftover balance is logged as a warning
        because it makes the member balances no longer sum to zero.
    """
    if not snapshot.members:
        raise EmptyGroupError(f"Group {snapshot.group_id} has no members")

    cents = defaultdict(int)

    for expense in snapshot.expenses:
        cents[expense.payer_id] += to_cents(expense.amount)
        for split in expense.splits:
            cents[split.member_id] -= to_cents(split.amount)

    for settlement in snapshot.settlements:
        amount = to_cents(settlement.amount)
        cents[settlement.from_id] += amount
        cents[settlement.to_id] -= amount

    member_ids = set(snapshot.member_ids)
    orphaned = {
        person_id: value
        for person_id, value in cents.items()
        if person_id not in member_ids and value != 0
    }
    if orphaned:
        logger.warning(
            "Group %s has ledger entries for %d former member(s) totalling %s",
            snapshot.group_id,
            len(orphaned),
            from_cents(sum(orphaned.values())),
        )

    return {
        member.id: from_cents(cents[member.id])
        for member in snapshot.members
    }


def check_zero_sum(balances: Dict[UUID, Decimal], group_id=None) -> Decimal:
    """
    Verify that balances sum to zero within one cent.

    Returns:
        The (possibly non-zero) total.

    Raises:
        BalanceIntegrityError: If the total is one cent or more away from zero.
    """
    total = sum(balances.values(), Decimal('0.00'))
    if not is_settled(total):
        logger.error(
            "Net balances for group %s sum to %s instead of zero",
            group_id,
            total,
        )
        raise BalanceIntegrityError(
            f"Net balances sum to {total}; expected 0.00"
        )
    return total


def check_split_sums(snapshot: GroupSnapshot) -> List[UUID]:
    """
    Find expenses whose splits do not add up to the expense amount.

    Differences under one cent are tolerated silently. Anything larger
    is logged and the expense id returned.
    """
    mismatched = []
    for expense in snapshot.expenses:
        split_total = sum(to_cents(split.amount) for split in expense.splits)
        difference = from_cents(to_cents(expense.amount) - split_total)
        if not is_settled(difference):
            logger.warning(
                "Expense %s in group %s: splits differ from amount by %s",
                expense.id,
                snapshot.group_id,
                difference,
            )
            mismatched.append(expense.id)
    return mismatched


def total_spent(snapshot: GroupSnapshot) -> Decimal:
    """Sum of all expense amounts in the group."""
    return from_cents(sum(to_cents(expense.amount) for expense in snapshot.expenses))
