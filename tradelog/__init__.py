"""TradeLog: Local trading journal with performance analytics.

A modular journal for logging trades and analyzing performance,
including realized PNL, win rate, profit factor and equity curves.

Architecture:
- domain/: Core business logic (Trade record, PNL engine, metrics)
- infrastructure/: Storage, configuration and the Gemini coach client
- application/: Journal state store and view services
- interfaces/: Trade form parsing and CLI
"""

__version__ = "0.3.0"

from tradelog.domain import (
    Trade,
    TradeSide,
    TradeStatus,
    PerformanceSnapshot,
    EquityPoint,
    compute_realized_pnl,
    compute_snapshot,
    compute_equity_series,
    compute_strategy_breakdown,
)
from tradelog.infrastructure import (
    JournalPaths,
    JournalConfig,
    DEFAULT_PATHS,
    RepositoryError,
)

__all__ = [
    # Version
    "__version__",
    # Domain
    "Trade",
    "TradeSide",
    "TradeStatus",
    "PerformanceSnapshot",
    "EquityPoint",
    "compute_realized_pnl",
    "compute_snapshot",
    "compute_equity_series",
    "compute_strategy_breakdown",
    # Infrastructure
    "JournalPaths",
    "JournalConfig",
    "DEFAULT_PATHS",
    "RepositoryError",
]
