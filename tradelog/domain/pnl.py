"""Per-trade PNL: realized profit and return for a single trade.

Formula:
    LONG:  pnl = (exit - entry) × quantity - fees
    SHORT: pnl = (entry - exit) × quantity - fees

Fees are subtracted exactly once, whichever side the trade is on.
These functions are the only place the sign convention lives; every
aggregate in metrics/ goes through compute_realized_pnl().
"""

from dataclasses import replace

from tradelog.domain.models import Trade


def compute_realized_pnl(trade: Trade) -> float:
    """Calculate realized PNL for a closed trade.

    Args:
        trade: A trade with a genuine exit (trade.is_closed)

    Returns:
        Signed profit after fees

    Raises:
        ValueError: If the trade is still open

    Example:
        >>> long = Trade(id="1", symbol="X", side="LONG", status="CLOSED",
        ...              entry_price=100, quantity=10, entry_date="2024-01-01",
        ...              exit_price=110, exit_date="2024-01-02", fees=5)
        >>> compute_realized_pnl(long)
        95.0
    """
    if not trade.is_closed:
        raise ValueError(f"trade {trade.id} is open; realized PNL is undefined")

    multiplier = 1.0 if trade.side == "LONG" else -1.0
    gross = (trade.exit_price - trade.entry_price) * trade.quantity * multiplier
    return gross - trade.fees


def compute_pnl_percentage(trade: Trade) -> float:
    """Calculate realized PNL as a percentage of entry notional.

    Returns:
        Return in percent (e.g., 9.5 for 9.5%), 0.0 if notional is zero
    """
    notional = trade.notional
    if notional == 0:
        return 0.0
    return compute_realized_pnl(trade) / notional * 100


def price_trade(trade: Trade) -> Trade:
    """Return a copy of the trade with its cached PNL fields refreshed.

    Closed trades get pnl and pnl_percentage; open trades have both cleared.
    Called once per save so the cached values always match the prices.
    """
    if not trade.is_closed:
        return replace(trade, pnl=None, pnl_percentage=None)

    return replace(
        trade,
        pnl=compute_realized_pnl(trade),
        pnl_percentage=compute_pnl_percentage(trade),
    )
