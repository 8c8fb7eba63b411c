"""
Expense management service.

Records shared expenses together with their splits. The split-sum rule
(splits add up exactly to the expense amount) is enforced here, at write
time, so the balance calculator can rely on it.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.expenses.models import (
    ActivityType,
    Expense,
    ExpenseCategory,
    ExpenseSplit,
    SplitType,
)
from apps.groups.services import ensure_members, get_group_by_id

from .activity_log import log_activity
from .split_calculation import SplitCalculator

logger = logging.getLogger(__name__)


@transaction.atomic
def create_expense(
    *,
    group_id: UUID,
    paid_by_id: UUID,
    amount: Decimal,
    description: str,
    participants: List[dict],
    split_type: str = SplitType.EQUAL,
    category: str = ExpenseCategory.OTHER,
    date: Optional[datetime] = None,
    created_by: Optional[User] = None,
) -> Expense:
    """
    Create an expense and its splits.

    Args:
        group_id: UUID of the group
        paid_by_id: UUID of the member who paid
        amount: Total amount paid
        description: What the expense was for
        participants: Dicts with ``user_id`` plus the split-type input
            (``amount``, ``percentage`` or ``shares``)
        split_type: How to divide the amount
        category: Expense category
        date: When the expense happened (defaults to now)
        created_by: User recording the expense

    Returns:
        Created Expense with splits

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If the payer or a participant is not a member
        NoParticipantsError: If nobody shares the expense
        InvalidSplitError: If split inputs are inconsistent
    """
    group = get_group_by_id(group_id=group_id)
    ensure_members(
        group_id=group.id,
        user_ids=[paid_by_id] + [p['user_id'] for p in participants],
    )

    splits = SplitCalculator.calculate(amount, split_type, participants)

    expense = Expense.objects.create(
        group=group,
        paid_by_id=paid_by_id,
        amount=amount,
        description=description,
        category=category,
        split_type=split_type,
        date=date or timezone.now(),
        created_by=created_by,
    )
    ExpenseSplit.objects.bulk_create([
        ExpenseSplit(
            expense=expense,
            user_id=split['user_id'],
            amount=split['amount'],
            percentage=split['percentage'],
            shares=split['shares'],
        )
        for split in splits
    ])
    log_activity(
        group=group,
        user=created_by,
        type=ActivityType.EXPENSE_ADDED,
        description=f'Added expense "{description}" of {amount}',
        metadata={'expense_id': str(expense.id)},
    )

    logger.info(
        "Expense %s of %s recorded in group %s (%s split among %d)",
        expense.id,
        amount,
        group.id,
        split_type,
        len(splits),
    )
    return expense


def list_group_expenses(*, group_id: UUID) -> QuerySet[Expense]:
    """
    Get all expenses of a group, newest first.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    group = get_group_by_id(group_id=group_id)
    return (
        Expense.objects
        .filter(group=group)
        .select_related('paid_by')
        .prefetch_related('splits__user')
    )
