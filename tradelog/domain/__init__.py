"""Domain Layer: Core business logic and entities.

This layer contains:
- models.py: The Trade record
- pnl.py: Per-trade realized PNL and cached-field pricing
- filters.py: Symbol / date selection of trades
- metrics/: Snapshot, equity curve and grouped breakdowns
"""

from tradelog.domain.models import (
    Trade,
    TradeSide,
    TradeStatus,
)
from tradelog.domain.pnl import (
    compute_realized_pnl,
    compute_pnl_percentage,
    price_trade,
)
from tradelog.domain.filters import (
    filter_trades,
    closed_trades,
)
from tradelog.domain.metrics import (
    # Snapshot
    PROFIT_FACTOR_CAP,
    PerformanceSnapshot,
    compute_snapshot,
    # Equity
    EquityPoint,
    compute_equity_series,
    compute_max_drawdown,
    # Breakdown
    GroupStats,
    DailyPnl,
    compute_strategy_breakdown,
    compute_symbol_breakdown,
    compute_daily_pnl,
)

__all__ = [
    # Models
    "Trade",
    "TradeSide",
    "TradeStatus",
    # PNL
    "compute_realized_pnl",
    "compute_pnl_percentage",
    "price_trade",
    # Filters
    "filter_trades",
    "closed_trades",
    # Metrics - Snapshot
    "PROFIT_FACTOR_CAP",
    "PerformanceSnapshot",
    "compute_snapshot",
    # Metrics - Equity
    "EquityPoint",
    "compute_equity_series",
    "compute_max_drawdown",
    # Metrics - Breakdown
    "GroupStats",
    "DailyPnl",
    "compute_strategy_breakdown",
    "compute_symbol_breakdown",
    "compute_daily_pnl",
]
