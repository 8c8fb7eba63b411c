"""
Group Snapshot Loader
=====================

Loads everything the balance engine needs for one group in a single
batch of queries and freezes it into plain value objects.

The balance calculator and debt simplifier only ever see a
``GroupSnapshot``; they never touch the ORM. That keeps them pure and
lets tests build snapshots in memory without a database.

Example:
    Loading and computing::

        from apps.expenses.services.snapshot import load_group_snapshot
        from apps.expenses.services.balance_calculation import calculate_net_balances

        snapshot = load_group_snapshot(group.id)
        balances = calculate_net_balances(snapshot)

Note:
    The snapshot is read inside one ``transaction.atomic()`` block. On
    databases running at READ COMMITTED (PostgreSQL's default) a
    settlement committed between the member query and the settlement
    query can still slip in; callers needing a strictly consistent view
    should run at REPEATABLE READ or higher.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple
from uuid import UUID

from django.db import transaction

from apps.expenses.models import Expense, Settlement
from apps.groups.services import get_group_members


@dataclass(frozen=True)
class MemberIdentity:
    """Display identity of a group member."""

    id: UUID
    name: str
    avatar_url: Optional[str] = None


@dataclass(frozen=True)
class SplitRecord:
    expense_id: UUID
    member_id: UUID
    amount: Decimal


@dataclass(frozen=True)
class ExpenseRecord:
    id: UUID
    payer_id: UUID
    amount: Decimal
    splits: Tuple[SplitRecord, ...] = ()


@dataclass(frozen=True)
class SettlementRecord:
    id: UUID
    from_id: UUID
    to_id: UUID
    amount: Decimal


@dataclass(frozen=True)
class GroupSnapshot:
    """Immutable view of one group's ledger at a point in time."""

    group_id: UUID
    members: Tuple[MemberIdentity, ...]
    expenses: Tuple[ExpenseRecord, ...] = ()
    settlements: Tuple[SettlementRecord, ...] = ()

    @property
    def splits(self) -> Tuple[SplitRecord, ...]:
        """All splits across every expense, in expense order."""
        return tuple(split for expense in self.expenses for split in expense.splits)

    @property
    def member_ids(self) -> Tuple[UUID, ...]:
        return tuple(member.id for member in self.members)

    def member(self, member_id: UUID) -> Optional[MemberIdentity]:
        """Look up a member's identity by id, or None if not a member."""
        return next((m for m in self.members if m.id == member_id), None)


def load_group_snapshot(group_id: UUID) -> GroupSnapshot:
    """
    Fetch a group's members, expenses (with splits) and settlements.

    Args:
        group_id: UUID of the group

    Returns:
        GroupSnapshot with members in join order

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    with transaction.atomic():
        memberships = list(get_group_members(group_id=group_id))

        expenses = (
            Expense.objects
            .filter(group_id=group_id)
            .prefetch_related('splits')
            .order_by('date', 'created_at', 'id')
        )
        expense_records = tuple(
            ExpenseRecord(
                id=expense.id,
                payer_id=expense.paid_by_id,
                amount=expense.amount,
                splits=tuple(
                    SplitRecord(
                        expense_id=expense.id,
                        member_id=split.user_id,
                        amount=split.amount,
                    )
                    for split in expense.splits.all()
                ),
            )
            for expense in expenses
        )

        settlement_records = tuple(
            SettlementRecord(
                id=settlement.id,
                from_id=settlement.from_user_id,
                to_id=settlement.to_user_id,
                amount=settlement.amount,
            )
            for settlement in (
                Settlement.objects
                .filter(group_id=group_id)
                .order_by('settled_at', 'id')
            )
        )

    members = tuple(
        MemberIdentity(
            id=membership.user.id,
            name=membership.user.get_display_name(),
            avatar_url=membership.user.avatar_url or None,
        )
        for membership in memberships
    )

    return GroupSnapshot(
        group_id=group_id,
        members=members,
        expenses=expense_records,
        settlements=settlement_records,
    )
