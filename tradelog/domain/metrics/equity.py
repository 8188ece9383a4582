"""Equity Curve: Cumulative realized PNL over closed trades.

The curve is ordered by entry_date. Trades sharing an entry_date keep
their insertion order (Python's sort is stable), so the series is a pure
function of the collection and can be regenerated at any time.

Max drawdown is measured on the same curve, starting from a flat (0)
account so an opening loss counts as a drawdown.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from tradelog.domain.filters import closed_trades
from tradelog.domain.models import Trade
from tradelog.domain.pnl import compute_realized_pnl


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True, slots=True)
class EquityPoint:
    """One point of the equity curve.

    Attributes:
        index: 1-based position among chronologically sorted closed trades
        cumulative_pnl: Sum of realized PNL of the first `index` trades
        pnl: Realized PNL of this trade alone
        symbol: Symbol of this trade (chart label)
        date: Entry date of this trade (chart label)
    """
    index: int
    cumulative_pnl: float
    pnl: float = 0.0
    symbol: str = ""
    date: str = ""


# =============================================================================
# Core Calculation
# =============================================================================

def compute_equity_series(trades: Sequence[Trade]) -> list[EquityPoint]:
    """Build the running-sum equity curve.

    Args:
        trades: Full collection; open trades are skipped

    Returns:
        One EquityPoint per closed trade, sorted by entry_date ascending.
        Empty list when there are no closed trades.
    """
    closed = sorted(closed_trades(trades), key=lambda t: t.entry_date)

    series = []
    running = 0.0
    for i, trade in enumerate(closed, start=1):
        pnl = compute_realized_pnl(trade)
        running += pnl
        series.append(
            EquityPoint(
                index=i,
                cumulative_pnl=running,
                pnl=pnl,
                symbol=trade.symbol,
                date=trade.entry_date,
            )
        )
    return series


def compute_max_drawdown(series: Sequence[EquityPoint]) -> float:
    """Largest peak-to-trough drop of an equity curve.

    Args:
        series: Output of compute_equity_series()

    Returns:
        Drawdown as a non-negative amount; 0.0 for an empty or rising curve

    Example:
        >>> # cumulative: 10, 4, 12, 2  -> peak 12, trough 2
        >>> compute_max_drawdown(series)
        10.0
    """
    if not series:
        return 0.0

    curve = np.array([0.0] + [p.cumulative_pnl for p in series])
    peaks = np.maximum.accumulate(curve)
    return float((peaks - curve).max())
