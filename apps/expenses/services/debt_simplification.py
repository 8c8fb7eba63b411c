"""
Debt Simplification Service
===========================

Reduces a group's net balances to a short list of payments that clears
every balance.

Algorithm (greedy largest-creditor / largest-debtor matching):
    1. Members owed more than one cent are creditors, members owing more
       than one cent are debtors (absolute amount). Everyone else is
       already settled and takes no part.
    2. Both lists are sorted by amount, largest first. Equal amounts are
       ordered by member id (ascending, compared as strings) so the
       output is the same on every call.
    3. Walk both lists with two pointers. Each step transfers
       ``min(creditor_remaining, debtor_remaining)`` from the debtor to
       the creditor, then advances past whichever side has one cent or
       less left. That leftover cent is never paid out; it is reported
       with the residual instead.
    4. Stop when either list runs out.

The result has at most ``creditors + debtors - 1`` payments. It is not
guaranteed to be the theoretical minimum (that problem is NP-hard), but
it is exact: on a zero-sum input every balance ends at zero.

Example:
    Three people, one paid for everyone::

        balances = {alice.id: Decimal('60.00'),
                    bob.id: Decimal('-30.00'),
                    carol.id: Decimal('-30.00')}
        debts = simplify_debts(balances, members)
        # [bob -> alice 30.00, carol -> alice 30.00]
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List
from uuid import UUID

from apps.expenses.exceptions import UnbalancedLedgerError
from apps.expenses.money import from_cents, to_cents

from .snapshot import MemberIdentity

logger = logging.getLogger(__name__)

# One cent; amounts at or below this are never transferred.
MIN_TRANSFER_CENTS = 1


@dataclass(frozen=True)
class SimplifiedDebt:
    """One recommended payment: ``from_member`` pays ``to_member``."""

    from_member: MemberIdentity
    to_member: MemberIdentity
    amount: Decimal


def _sort_key(entry):
    member_id, cents = entry
    return (-cents, str(member_id))


def _partition(balances: Dict[UUID, Decimal]):
    creditors = []
    debtors = []
    for member_id, amount in balances.items():
        cents = to_cents(amount)
        if cents > MIN_TRANSFER_CENTS:
            creditors.append([member_id, cents])
        elif cents < -MIN_TRANSFER_CENTS:
            debtors.append([member_id, -cents])

    creditors.sort(key=_sort_key)
    debtors.sort(key=_sort_key)
    return creditors, debtors


def simplify_debts(
    balances: Dict[UUID, Decimal],
    members: Iterable[MemberIdentity],
    strict: bool = False,
) -> List[SimplifiedDebt]:
    """
    Turn net balances into a list of payments that settles the group.

    Args:
        balances: member id -> signed net balance, as produced by
            ``calculate_net_balances``.
        members: Display identities used to build the output.
        strict: Raise instead of only logging when the balances do not
            sum to zero.

    Returns:
        list[SimplifiedDebt] in emission order (largest creditor first).

    Raises:
        UnbalancedLedgerError: If ``strict`` is set and the input does
            not sum to zero.

    Note:
        When the input does not sum to zero the matching still finishes,
        but whatever is left on the longer side is reported, never
        silently dropped.
    """
    identities = {member.id: member for member in members}
    creditors, debtors = _partition(balances)

    debts = []
    owed_left = owing_left = 0
    i = j = 0
    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]
        # Both sides hold more than one cent here, so every transfer is emitted
        transfer = min(creditor[1], debtor[1])
        debts.append(SimplifiedDebt(
            from_member=_identity(identities, debtor[0]),
            to_member=_identity(identities, creditor[0]),
            amount=from_cents(transfer),
        ))

        creditor[1] -= transfer
        debtor[1] -= transfer

        # A remaining cent is too small to pay out; it stays on the books
        if creditor[1] <= MIN_TRANSFER_CENTS:
            owed_left += creditor[1]
            i += 1
        if debtor[1] <= MIN_TRANSFER_CENTS:
            owing_left += debtor[1]
            j += 1

    owed_left += sum(cents for _, cents in creditors[i:])
    owing_left += sum(cents for _, cents in debtors[j:])
    _report_residual(balances, owed_left, owing_left, strict)
    return debts


def _identity(identities, member_id):
    identity = identities.get(member_id)
    if identity is None:
        logger.warning("No display identity for member %s", member_id)
        identity = MemberIdentity(id=member_id, name=str(member_id))
    return identity


def _report_residual(balances, owed_left, owing_left, strict):
    input_total = sum(to_cents(amount) for amount in balances.values())

    if input_total == 0:
        if owed_left or owing_left:
            # One-cent remainders that no transfer may carry
            logger.info(
                "Debt simplification left %s owed / %s owing as rounding dust",
                from_cents(owed_left),
                from_cents(owing_left),
            )
        return

    logger.warning(
        "Net balances sum to %s; %s still owed to creditors and %s still "
        "owing from debtors after simplification",
        from_cents(input_total),
        from_cents(owed_left),
        from_cents(owing_left),
    )
    if strict:
        raise UnbalancedLedgerError(
            f"Balances sum to {from_cents(input_total)}; "
            f"unmatched residual {from_cents(max(owed_left, owing_left))}"
        )


def apply_debts(
    balances: Dict[UUID, Decimal],
    debts: Iterable[SimplifiedDebt],
) -> Dict[UUID, Decimal]:
    """
    Return the balances that result from making every payment in ``debts``.

    The payer's balance goes up by the amount, the receiver's goes down.
    """
    cents = {member_id: to_cents(amount) for member_id, amount in balances.items()}
    for debt in debts:
        transfer = to_cents(debt.amount)
        cents[debt.from_member.id] = cents.get(debt.from_member.id, 0) + transfer
        cents[debt.to_member.id] = cents.get(debt.to_member.id, 0) - transfer
    return {member_id: from_cents(value) for member_id, value in cents.items()}
