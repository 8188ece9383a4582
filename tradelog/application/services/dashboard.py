"""Dashboard Service: Assemble the journal views from a trade collection.

Orchestrates the domain metrics into one report:
- Snapshot (PNL, win rate, profit factor, averages)
- Equity curve and max drawdown
- Strategy and symbol breakdowns
- Recent-trades feed and account balance
- Calendar month of daily PNL

The service holds configuration only; every call recomputes from the
trades it is given.
"""

from dataclasses import dataclass
from typing import Sequence

from tradelog.domain import (
    DailyPnl,
    EquityPoint,
    GroupStats,
    PerformanceSnapshot,
    Trade,
    compute_daily_pnl,
    compute_equity_series,
    compute_max_drawdown,
    compute_snapshot,
    compute_strategy_breakdown,
    compute_symbol_breakdown,
    filter_trades,
)
from tradelog.infrastructure import DEFAULT_CONFIG, JournalConfig


# =============================================================================
# Result Data Class
# =============================================================================

@dataclass(frozen=True, slots=True)
class DashboardReport:
    """Everything the dashboard and analytics views render."""
    # Headline
    snapshot: PerformanceSnapshot
    balance: float

    # Curve
    equity: tuple[EquityPoint, ...]
    max_drawdown: float

    # Breakdowns
    strategies: dict[str, GroupStats]
    symbols: dict[str, GroupStats]

    # Feed (newest first)
    recent: tuple[Trade, ...]

    def to_dict(self) -> dict:
        """Flatten headline figures for export."""
        return {
            **self.snapshot.to_dict(),
            "balance": self.balance,
            "max_drawdown": self.max_drawdown,
        }


# =============================================================================
# Dashboard Service
# =============================================================================

class DashboardService:
    """Builds dashboard reports.

    Example:
        >>> service = DashboardService(config)
        >>> report = service.build(store.trades)
        >>> report.snapshot.win_rate
        66.66666666666667
    """

    def __init__(self, config: JournalConfig = DEFAULT_CONFIG):
        self._config = config

    def build(
        self,
        trades: Sequence[Trade],
        query: str = "",
        start: str | None = None,
        end: str | None = None,
    ) -> DashboardReport:
        """Build the report, optionally on a filtered subset.

        Args:
            trades: Full collection in insertion order
            query: Symbol substring filter
            start: Earliest entry_date (inclusive)
            end: Latest entry_date (inclusive)
        """
        if query or start or end:
            trades = filter_trades(trades, query=query, start=start, end=end)

        snapshot = compute_snapshot(trades, profit_factor_cap=self._config.profit_factor_cap)
        equity = compute_equity_series(trades)
        n_recent = self._config.recent_trade_count
        recent = tuple(reversed(trades[-n_recent:])) if n_recent > 0 else ()

        return DashboardReport(
            snapshot=snapshot,
            balance=self._config.starting_balance + snapshot.total_pnl,
            equity=tuple(equity),
            max_drawdown=compute_max_drawdown(equity),
            strategies=compute_strategy_breakdown(trades),
            symbols=compute_symbol_breakdown(trades),
            recent=recent,
        )

    def calendar_month(self, trades: Sequence[Trade], month: str) -> list[DailyPnl]:
        """Daily PNL cells for one month.

        Args:
            trades: Full collection
            month: Month as YYYY-MM

        Raises:
            ValueError: If month is not YYYY-MM
        """
        parts = month.split("-")
        if [len(p) for p in parts] != [4, 2] or not all(p.isdigit() for p in parts):
            raise ValueError(f"month must be YYYY-MM, got: {month}")
        prefix = f"{month}-"
        return [d for d in compute_daily_pnl(trades) if d.date.startswith(prefix)]
