"""
Split Calculation Service
=========================

Turns an expense total and a list of participants into cent-precise
owed amounts, for the four supported split types.

Classes:
    SplitCalculator: Static methods computing splits per split type.

Every split type guarantees that the owed amounts add up to the expense
total exactly. Amounts are computed in integer cents and any leftover
cents are handed out one at a time, so no rounding error can creep in.

Example:
    Splitting 100.00 three ways::

        from apps.expenses.services.split_calculation import SplitCalculator

        splits = SplitCalculator.calculate(
            Decimal('100.00'),
            SplitType.EQUAL,
            [{'user_id': a.id}, {'user_id': b.id}, {'user_id': c.id}],
        )
        # amounts: 33.34, 33.33, 33.33
"""

from decimal import Decimal, InvalidOperation

from apps.expenses.exceptions import InvalidSplitError, NoParticipantsError
from apps.expenses.models import SplitType
from apps.expenses.money import from_cents, to_cents


class SplitCalculator:
    """
    Cent-precise expense splitting.

    Each participant is a dict with a ``user_id`` key and, depending on
    the split type, an ``amount`` (EXACT), ``percentage`` (PERCENTAGE) or
    ``shares`` (SHARES) key.

    Methods:
        calculate: Dispatch on split type and validate participants.
        equal: Divide evenly; the first participants absorb leftover cents.
        exact: Use given amounts; they must add up to the total.
        percentage: Weight by percentage; must add up to 100.
        shares: Weight by positive integer share counts.
    """

    @staticmethod
    def calculate(total, split_type, participants):
        """
        Compute owed amounts for an expense.

        Args:
            total (Decimal): Expense amount.
            split_type (str): One of ``SplitType`` values.
            participants (list[dict]): Participants in display order.

        Returns:
            list[dict]: One dict per participant with ``user_id``,
            ``amount`` (Decimal), ``percentage`` and ``shares`` (the
            latter two None unless used by the split type).

        Raises:
            NoParticipantsError: If ``participants`` is empty.
            InvalidSplitError: If a user appears twice, or the inputs for
                the split type are missing or inconsistent.
        """
        if not participants:
            raise NoParticipantsError("At least one participant required")

        user_ids = [p['user_id'] for p in participants]
        if len(set(str(u) for u in user_ids)) != len(user_ids):
            raise InvalidSplitError("Each participant may appear only once")

        total_cents = to_cents(total)
        if total_cents <= 0:
            raise InvalidSplitError("Expense amount must be positive")

        handlers = {
            SplitType.EQUAL: SplitCalculator.equal,
            SplitType.EXACT: SplitCalculator.exact,
            SplitType.PERCENTAGE: SplitCalculator.percentage,
            SplitType.SHARES: SplitCalculator.shares,
        }
        try:
            handler = handlers[split_type]
        except KeyError:
            raise InvalidSplitError(f"Unknown split type: {split_type}")

        splits = handler(total_cents, participants)

        # Verification (safety check)
        allocated = sum(to_cents(s['amount']) for s in splits)
        if allocated != total_cents:
            raise InvalidSplitError(
                f"Split amounts add up to {from_cents(allocated)}, "
                f"expected {from_cents(total_cents)}"
            )
        return splits

    @staticmethod
    def equal(total_cents, participants):
        """
        Split evenly.

        Algorithm:
            1. ``base = total_cents // N``
            2. ``remainder = total_cents % N``
            3. First ``remainder`` participants get ``base + 1`` cents
        """
        count = len(participants)
        base, remainder = divmod(total_cents, count)
        return [
            _split(p['user_id'], base + 1 if i < remainder else base)
            for i, p in enumerate(participants)
        ]

    @staticmethod
    def exact(total_cents, participants):
        """Use the given amounts as-is after checking they cover the total."""
        splits = []
        for p in participants:
            amount = p.get('amount')
            if amount is None:
                raise InvalidSplitError("Every participant needs an amount for an exact split")
            cents = to_cents(amount)
            if cents < 0:
                raise InvalidSplitError("Split amounts cannot be negative")
            splits.append(_split(p['user_id'], cents))

        allocated = sum(to_cents(s['amount']) for s in splits)
        if allocated != total_cents:
            raise InvalidSplitError(
                f"Split amounts add up to {from_cents(allocated)}, "
                f"expected {from_cents(total_cents)}"
            )
        return splits

    @staticmethod
    def percentage(total_cents, participants):
        """Weight by percentage (hundredths of a percent precision)."""
        weights = []
        for p in participants:
            value = p.get('percentage')
            if value is None:
                raise InvalidSplitError("Every participant needs a percentage")
            try:
                basis_points = int((Decimal(str(value)) * 100).to_integral_value())
            except InvalidOperation:
                raise InvalidSplitError(f"Invalid percentage: {value}")
            if basis_points < 0:
                raise InvalidSplitError("Percentages cannot be negative")
            weights.append(basis_points)

        if sum(weights) != 10000:
            raise InvalidSplitError(
                f"Percentages add up to {from_cents(sum(weights))}, expected 100"
            )

        splits = _allocate(total_cents, participants, weights)
        for split, p in zip(splits, participants):
            split['percentage'] = Decimal(str(p['percentage']))
        return splits

    @staticmethod
    def shares(total_cents, participants):
        """Weight by integer share counts (e.g. 2 shares for a couple)."""
        weights = []
        for p in participants:
            value = p.get('shares')
            if value is None or int(value) != value or value <= 0:
                raise InvalidSplitError("Every participant needs a positive whole number of shares")
            weights.append(int(value))

        splits = _allocate(total_cents, participants, weights)
        for split, weight in zip(splits, weights):
            split['shares'] = weight
        return splits


def _split(user_id, cents):
    return {
        'user_id': user_id,
        'amount': from_cents(cents),
        'percentage': None,
        'shares': None,
    }


def _allocate(total_cents, participants, weights):
    """
    Largest-remainder allocation of ``total_cents`` by ``weights``.

    Each participant first gets the floor of their exact share; leftover
    cents go to the largest fractional parts, earlier participants
    winning ties.
    """
    weight_total = sum(weights)
    if weight_total <= 0:
        raise InvalidSplitError("Split weights must add up to more than zero")

    floors = []
    fractions = []
    for index, weight in enumerate(weights):
        quotient, rest = divmod(total_cents * weight, weight_total)
        floors.append(quotient)
        fractions.append((-rest, index))

    leftover = total_cents - sum(floors)
    for _, index in sorted(fractions)[:leftover]:
        floors[index] += 1

    return [_split(p['user_id'], cents) for p, cents in zip(participants, floors)]
