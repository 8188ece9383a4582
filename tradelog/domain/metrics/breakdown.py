"""Grouped PNL: strategy, symbol and calendar-day breakdowns.

Groups are emitted in order of first appearance so that rendering and
test output are deterministic. Only closed trades contribute PNL.
"""

from dataclasses import dataclass
from typing import Callable, Sequence

from tradelog.domain.models import Trade
from tradelog.domain.pnl import compute_realized_pnl

UNKNOWN_STRATEGY = "Unknown"


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True, slots=True)
class GroupStats:
    """Accumulated PNL of one group.

    Attributes:
        total_pnl: Signed sum of realized PNL
        count: Number of closed trades in the group
    """
    total_pnl: float
    count: int


@dataclass(frozen=True, slots=True)
class DailyPnl:
    """Calendar cell for one entry date.

    Attributes:
        date: Entry date (YYYY-MM-DD)
        pnl: Realized PNL of that day's closed trades
        trade_count: All trades entered that day, open ones included
    """
    date: str
    pnl: float
    trade_count: int


# =============================================================================
# Grouping
# =============================================================================

def _group_closed(
    trades: Sequence[Trade],
    key: Callable[[Trade], str],
) -> dict[str, GroupStats]:
    totals: dict[str, float] = {}
    counts: dict[str, int] = {}
    for trade in trades:
        if not trade.is_closed:
            continue
        name = key(trade)
        totals[name] = totals.get(name, 0.0) + compute_realized_pnl(trade)
        counts[name] = counts.get(name, 0) + 1
    return {name: GroupStats(total_pnl=totals[name], count=counts[name]) for name in totals}


def compute_strategy_breakdown(trades: Sequence[Trade]) -> dict[str, GroupStats]:
    """Realized PNL and trade count per strategy.

    Trades with an empty strategy share a single "Unknown" bucket.

    Args:
        trades: Full collection; open trades are skipped

    Returns:
        Mapping strategy name -> GroupStats, in order of first appearance
    """
    return _group_closed(trades, lambda t: t.strategy_label)


def compute_symbol_breakdown(trades: Sequence[Trade]) -> dict[str, GroupStats]:
    """Realized PNL and trade count per symbol."""
    return _group_closed(trades, lambda t: t.symbol)


def compute_daily_pnl(trades: Sequence[Trade]) -> list[DailyPnl]:
    """Per-day realized PNL for the calendar view.

    Args:
        trades: Full collection

    Returns:
        One DailyPnl per distinct entry_date, sorted by date
    """
    pnl_by_day: dict[str, float] = {}
    count_by_day: dict[str, int] = {}
    for trade in trades:
        day = trade.entry_date
        count_by_day[day] = count_by_day.get(day, 0) + 1
        realized = compute_realized_pnl(trade) if trade.is_closed else 0.0
        pnl_by_day[day] = pnl_by_day.get(day, 0.0) + realized

    return [
        DailyPnl(date=day, pnl=pnl_by_day[day], trade_count=count_by_day[day])
        for day in sorted(count_by_day)
    ]
