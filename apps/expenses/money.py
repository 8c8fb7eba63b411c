"""
Cent-precise money helpers.

All monetary arithmetic in the expenses app goes through integer cents
(1 unit = 100 cents) so that repeated aggregation never drifts. Values
cross the API boundary as ``Decimal`` quantized to two places.
"""

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal('0.01')
ZERO = Decimal('0.00')


def quantize(amount):
    """Round a Decimal-compatible value to whole cents (half up)."""
    return Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(amount):
    """
    Convert a money amount to integer cents.

    >>> to_cents(Decimal('33.34'))
    3334
    """
    return int(quantize(amount) * 100)


def from_cents(cents):
    """
    Convert integer cents back to a two-place Decimal.

    >>> from_cents(-5000)
    Decimal('-50.00')
    """
    return (Decimal(cents) / 100).quantize(CENT)
