"""
Group balances view.

Glues the snapshot loader, balance calculator and debt simplifier
together and shapes the result for the balances endpoint.
"""

import logging
from typing import Any, Dict
from uuid import UUID

from .balance_calculation import (
    calculate_net_balances,
    check_split_sums,
    check_zero_sum,
    total_spent,
)
from .debt_simplification import SimplifiedDebt, simplify_debts
from .snapshot import GroupSnapshot, MemberIdentity, load_group_snapshot

logger = logging.getLogger(__name__)


def _member_payload(member: MemberIdentity) -> Dict[str, Any]:
    return {
        'id': member.id,
        'name': member.name,
        'avatarUrl': member.avatar_url,
    }


def _debt_payload(debt: SimplifiedDebt) -> Dict[str, Any]:
    return {
        'from': _member_payload(debt.from_member),
        'to': _member_payload(debt.to_member),
        'amount': debt.amount,
    }


def compute_group_balances(snapshot: GroupSnapshot) -> Dict[str, Any]:
    """
    Compute balances, simplified debts and total spent for a snapshot.

    Returns:
        dict with ``balances``, ``debts`` and ``totalSpent`` keys, shaped
        for ``GroupBalancesSerializer``.

    Raises:
        EmptyGroupError: If the snapshot has no members.
        BalanceIntegrityError: If member balances do not sum to zero.
    """
    check_split_sums(snapshot)

    balances = calculate_net_balances(snapshot)
    check_zero_sum(balances, group_id=snapshot.group_id)

    debts = simplify_debts(balances, snapshot.members, strict=True)

    return {
        'balances': [
            {
                'userId': member.id,
                'userName': member.name,
                'avatarUrl': member.avatar_url,
                'amount': balances[member.id],
            }
            for member in snapshot.members
        ],
        'debts': [_debt_payload(debt) for debt in debts],
        'totalSpent': total_spent(snapshot),
    }


def build_group_balances(group_id: UUID) -> Dict[str, Any]:
    """
    Load a group's ledger and compute its balances view.

    Raises:
        GroupNotFoundError: If group doesn't exist
        EmptyGroupError: If the group has no members
        BalanceIntegrityError: If stored records are inconsistent
    """
    snapshot = load_group_snapshot(group_id)
    result = compute_group_balances(snapshot)
    logger.debug(
        "Computed balances for group %s: %d members, %d suggested payments",
        group_id,
        len(result['balances']),
        len(result['debts']),
    )
    return result
