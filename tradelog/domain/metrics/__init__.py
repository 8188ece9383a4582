"""Journal metrics derived from a trade collection.

This package provides the aggregate views of a journal:

- Snapshot: Total PNL, win rate, averages and profit factor
- Equity: Cumulative PNL curve and max drawdown
- Breakdown: PNL grouped by strategy, symbol and calendar day

Every function is pure: it takes the collection as an argument,
never mutates it and keeps no state between calls.

Usage:
    from tradelog.domain.metrics import (
        compute_snapshot,
        compute_equity_series,
        compute_strategy_breakdown,
    )
"""

# Snapshot
from tradelog.domain.metrics.snapshot import (
    PROFIT_FACTOR_CAP,
    PerformanceSnapshot,
    calculate_profit_factor,
    compute_snapshot,
)

# Equity
from tradelog.domain.metrics.equity import (
    EquityPoint,
    compute_equity_series,
    compute_max_drawdown,
)

# Breakdown
from tradelog.domain.metrics.breakdown import (
    UNKNOWN_STRATEGY,
    GroupStats,
    DailyPnl,
    compute_strategy_breakdown,
    compute_symbol_breakdown,
    compute_daily_pnl,
)

__all__ = [
    # Snapshot
    "PROFIT_FACTOR_CAP",
    "PerformanceSnapshot",
    "calculate_profit_factor",
    "compute_snapshot",
    # Equity
    "EquityPoint",
    "compute_equity_series",
    "compute_max_drawdown",
    # Breakdown
    "UNKNOWN_STRATEGY",
    "GroupStats",
    "DailyPnl",
    "compute_strategy_breakdown",
    "compute_symbol_breakdown",
    "compute_daily_pnl",
]
