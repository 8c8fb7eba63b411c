"""
Domain exceptions for expenses app.

This module defines the exception hierarchy raised by the expense,
settlement and balance services. These exceptions represent business
rule violations and data-integrity problems, separate from HTTP concerns.

Exception Hierarchy:
    ExpenseServiceError (base)
    ├── EmptyGroupError
    ├── NoParticipantsError
    ├── InvalidSplitError
    ├── InvalidSettlementError
    └── BalanceIntegrityError
        └── UnbalancedLedgerError

Usage:
    from apps.expenses.exceptions import InvalidSplitError

    if total != amount:
        raise InvalidSplitError("Split amounts must add up to the expense total")
"""


class ExpenseServiceError(Exception):
    """Base exception for expense service errors."""
    pass


class EmptyGroupError(ExpenseServiceError):
    """Raised when balances are requested for a group with no members."""
    pass


class NoParticipantsError(ExpenseServiceError):
    """Raised when an expense has nobody to split among."""
    pass


class InvalidSplitError(ExpenseServiceError):
    """
    Raised when split inputs are inconsistent.

    Example:
        raise InvalidSplitError("Percentages must add up to 100")
    """
    pass


class InvalidSettlementError(ExpenseServiceError):
    """Raised when a settlement cannot be recorded (e.g. paying yourself)."""
    pass


class BalanceIntegrityError(ExpenseServiceError):
    """
    Raised when computed balances break the zero-sum rule.

    This always points at corrupt or inconsistent stored records and is
    never shown to end users as-is.
    """
    pass


class UnbalancedLedgerError(BalanceIntegrityError):
    """Raised when debt simplification leaves an unmatched residual."""
    pass
