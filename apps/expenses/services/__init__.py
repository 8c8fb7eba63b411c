"""
Expenses app services layer.

Services contain business logic and orchestrate operations across models.
The balance calculator and debt simplifier are pure functions over a
``GroupSnapshot``; everything that touches the database lives in the
snapshot loader and the management modules.
"""

from .snapshot import (
    GroupSnapshot,
    MemberIdentity,
    ExpenseRecord,
    SplitRecord,
    SettlementRecord,
    load_group_snapshot,
)

from .balance_calculation import (
    BALANCE_TOLERANCE,
    calculate_net_balances,
    check_split_sums,
    check_zero_sum,
    is_settled,
    total_spent,
)

from .debt_simplification import (
    SimplifiedDebt,
    apply_debts,
    simplify_debts,
)

from .group_balances import (
    build_group_balances,
    compute_group_balances,
)

from .split_calculation import SplitCalculator

from .expense_management import (
    create_expense,
    list_group_expenses,
)

from .settlement_management import (
    record_settlement,
    list_group_settlements,
)

from .activity_log import (
    FEED_LIMIT,
    log_activity,
    list_user_activities,
    list_group_activities,
)


__all__ = [
    # Snapshot
    'GroupSnapshot',
    'MemberIdentity',
    'ExpenseRecord',
    'SplitRecord',
    'SettlementRecord',
    'load_group_snapshot',

    # Balance Calculator
    'BALANCE_TOLERANCE',
    'calculate_net_balances',
    'check_split_sums',
    'check_zero_sum',
    'is_settled',
    'total_spent',

    # Debt Simplifier
    'SimplifiedDebt',
    'apply_debts',
    'simplify_debts',

    # Balances view
    'build_group_balances',
    'compute_group_balances',

    # Splits
    'SplitCalculator',

    # Expenses & settlements
    'create_expense',
    'list_group_expenses',
    'record_settlement',
    'list_group_settlements',

    # Activity feed
    'FEED_LIMIT',
    'log_activity',
    'list_user_activities',
    'list_group_activities',
]
