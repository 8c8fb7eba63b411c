"""
Settlement management service.

Records real-world payments between two members. A settlement moves the
payer's balance up and the receiver's balance down by the same amount.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.expenses.exceptions import InvalidSettlementError
from apps.expenses.models import ActivityType, PaymentMethod, Settlement
from apps.groups.services import ensure_members, get_group_by_id

from .activity_log import log_activity

logger = logging.getLogger(__name__)


@transaction.atomic
def record_settlement(
    *,
    group_id: UUID,
    from_user_id: UUID,
    to_user_id: UUID,
    amount: Decimal,
    payment_method: str = PaymentMethod.PIX,
    note: str = '',
    settled_at: Optional[datetime] = None,
    created_by: Optional[User] = None,
) -> Settlement:
    """
    Record a payment from one member to another.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If either party is not a member
        InvalidSettlementError: If payer and receiver are the same person
            or the amount is not positive
    """
    if str(from_user_id) == str(to_user_id):
        raise InvalidSettlementError("A member cannot settle with themselves")
    if amount <= 0:
        raise InvalidSettlementError("Settlement amount must be positive")

    group = get_group_by_id(group_id=group_id)
    ensure_members(group_id=group.id, user_ids=[from_user_id, to_user_id])

    settlement = Settlement.objects.create(
        group=group,
        from_user_id=from_user_id,
        to_user_id=to_user_id,
        amount=amount,
        payment_method=payment_method,
        note=note,
        settled_at=settled_at or timezone.now(),
        created_by=created_by,
    )
    log_activity(
        group=group,
        user=created_by,
        type=ActivityType.SETTLEMENT_MADE,
        description=(
            f"{settlement.from_user.get_display_name()} paid {amount} "
            f"to {settlement.to_user.get_display_name()}"
        ),
        metadata={'settlement_id': str(settlement.id)},
    )

    logger.info(
        "Settlement %s: %s paid %s to %s in group %s",
        settlement.id,
        from_user_id,
        amount,
        to_user_id,
        group.id,
    )
    return settlement


def list_group_settlements(*, group_id: UUID) -> QuerySet[Settlement]:
    """
    Get all settlements of a group, most recent first.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    group = get_group_by_id(group_id=group_id)
    return (
        Settlement.objects
        .filter(group=group)
        .select_related('from_user', 'to_user')
        .order_by('-settled_at')
    )
