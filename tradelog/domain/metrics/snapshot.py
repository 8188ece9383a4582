"""Performance Snapshot: Aggregate statistics over a trade collection.

All figures except total_trades are computed over closed trades only.
Open trades are excluded from every total, never counted as zero.

Definitions:
    win_rate      = winners / closed × 100
    avg_profit    = mean(winner pnl)
    avg_loss      = mean(|non-winner pnl|)
    profit_factor = Σ winner pnl / Σ |non-winner pnl|

Winners have pnl > 0. Breakeven trades (pnl == 0) are grouped with
the losses, so a journal of only breakevens has a 0% win rate.

Degenerate cases never raise:
- No closed trades: every ratio is 0
- No losses but some profit: profit_factor is capped at PROFIT_FACTOR_CAP
"""

from dataclasses import dataclass
from typing import Sequence

from tradelog.domain.filters import closed_trades
from tradelog.domain.models import Trade
from tradelog.domain.pnl import compute_realized_pnl

# Profit factor reported when there are winners but no losses.
PROFIT_FACTOR_CAP = 100.0


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True, slots=True)
class PerformanceSnapshot:
    """Aggregate performance of a journal.

    Attributes:
        total_pnl: Sum of realized PNL over closed trades
        win_rate: Percentage of closed trades with pnl > 0
        total_trades: Size of the whole collection (open + closed)
        avg_profit: Mean PNL of winning trades
        avg_loss: Mean absolute PNL of non-winning trades
        profit_factor: Gross profit / gross loss, capped when loss is zero
        closed_trades: Number of closed trades
        open_trades: Number of open trades
        win_count: Number of winning closed trades
        loss_count: Number of non-winning closed trades
    """
    total_pnl: float
    win_rate: float
    total_trades: int
    avg_profit: float
    avg_loss: float
    profit_factor: float
    closed_trades: int = 0
    open_trades: int = 0
    win_count: int = 0
    loss_count: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for rendering and export."""
        return {
            "total_pnl": self.total_pnl,
            "win_rate": self.win_rate,
            "total_trades": self.total_trades,
            "avg_profit": self.avg_profit,
            "avg_loss": self.avg_loss,
            "profit_factor": self.profit_factor,
            "closed_trades": self.closed_trades,
            "open_trades": self.open_trades,
            "win_count": self.win_count,
            "loss_count": self.loss_count,
        }


# =============================================================================
# Core Calculation
# =============================================================================

def calculate_profit_factor(
    gross_profit: float,
    gross_loss: float,
    cap: float = PROFIT_FACTOR_CAP,
) -> float:
    """Ratio of gross profit to gross loss without infinities.

    Args:
        gross_profit: Sum of winning PNL (>= 0)
        gross_loss: Sum of absolute non-winning PNL (>= 0)
        cap: Value returned when there is profit but no loss

    Returns:
        gross_profit / gross_loss, or cap / 0.0 when gross_loss is zero
    """
    if gross_loss == 0:
        return cap if gross_profit > 0 else 0.0
    return gross_profit / gross_loss


def compute_snapshot(
    trades: Sequence[Trade],
    profit_factor_cap: float = PROFIT_FACTOR_CAP,
) -> PerformanceSnapshot:
    """Compute the performance snapshot of a trade collection.

    Args:
        trades: Full collection, open and closed, in any order
        profit_factor_cap: Profit factor used when there are no losses

    Returns:
        PerformanceSnapshot; all-zero figures for an empty or all-open journal

    Example:
        >>> snap = compute_snapshot(trades)
        >>> f"{snap.win_rate:.1f}%"
        '66.7%'
    """
    pnls = [compute_realized_pnl(t) for t in closed_trades(trades)]
    winners = [p for p in pnls if p > 0]
    losses = [abs(p) for p in pnls if p <= 0]

    n_closed = len(pnls)
    gross_profit = sum(winners)
    gross_loss = sum(losses)

    return PerformanceSnapshot(
        total_pnl=sum(pnls),
        win_rate=len(winners) / n_closed * 100 if n_closed else 0.0,
        total_trades=len(trades),
        avg_profit=gross_profit / len(winners) if winners else 0.0,
        avg_loss=gross_loss / len(losses) if losses else 0.0,
        profit_factor=calculate_profit_factor(gross_profit, gross_loss, profit_factor_cap),
        closed_trades=n_closed,
        open_trades=len(trades) - n_closed,
        win_count=len(winners),
        loss_count=len(losses),
    )
