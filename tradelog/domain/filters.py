"""Trade filtering for journal views and windowed metrics."""

from typing import Sequence

from tradelog.domain.models import Trade


def filter_trades(
    trades: Sequence[Trade],
    query: str = "",
    start: str | None = None,
    end: str | None = None,
) -> list[Trade]:
    """Select trades by symbol text and entry date window.

    Args:
        trades: Trades in insertion order
        query: Case-insensitive substring matched against the symbol
        start: Earliest entry_date to keep (YYYY-MM-DD, inclusive)
        end: Latest entry_date to keep (YYYY-MM-DD, inclusive)

    Returns:
        New list with the matching trades, original order preserved
    """
    needle = query.strip().lower()
    selected = []
    for trade in trades:
        if needle and needle not in trade.symbol.lower():
            continue
        if start is not None and trade.entry_date < start:
            continue
        if end is not None and trade.entry_date > end:
            continue
        selected.append(trade)
    return selected


def closed_trades(trades: Sequence[Trade]) -> list[Trade]:
    """Trades with a genuine exit, in input order."""
    return [t for t in trades if t.is_closed]
