"""Trade Form: Turn raw user input into a validated, priced Trade.

This is the record-creation boundary. Anything that is not a clean
number, date or enum value is rejected here with a TradeFormError, so
the metrics only ever see valid records.

Accepted fields (all strings, as typed by the user):
    symbol, side, status, entry_price, exit_price, quantity,
    entry_date, exit_date, fees, strategy, notes, screenshot
"""

import math
import uuid
from dataclasses import asdict
from datetime import date
from typing import Mapping

from tradelog.domain import Trade, price_trade


class TradeFormError(ValueError):
    """Raised when form input cannot be turned into a valid trade."""


def new_trade_id() -> str:
    """Fresh opaque trade id."""
    return uuid.uuid4().hex


def _clean(fields: Mapping[str, object], name: str) -> str:
    value = fields.get(name)
    if value is None:
        return ""
    return str(value).strip()


def _parse_number(raw: str, name: str, required: bool = True) -> float | None:
    if raw == "":
        if required:
            raise TradeFormError(f"{name} is required")
        return None
    try:
        value = float(raw)
    except ValueError:
        raise TradeFormError(f"{name} must be a number, got: {raw!r}")
    if not math.isfinite(value):
        raise TradeFormError(f"{name} must be a finite number, got: {raw!r}")
    return value


def _parse_date(raw: str, name: str) -> str:
    try:
        return date.fromisoformat(raw).isoformat()
    except ValueError:
        raise TradeFormError(f"{name} must be a date in YYYY-MM-DD format, got: {raw!r}")


def build_trade(
    fields: Mapping[str, object],
    trade_id: str | None = None,
    today: date | None = None,
) -> Trade:
    """Build a trade from form fields.

    Args:
        fields: Raw form values keyed by field name
        trade_id: Id of the trade being edited; a new id is assigned if None
        today: Default entry date (defaults to date.today())

    Returns:
        A validated Trade with cached pnl / pnl_percentage filled

    Raises:
        TradeFormError: If any field is missing or invalid

    Example:
        >>> trade = build_trade({
        ...     "symbol": "tsla", "side": "long", "entry_price": "100",
        ...     "exit_price": "110", "quantity": "10", "fees": "5",
        ...     "entry_date": "2024-03-01", "exit_date": "2024-03-02",
        ... })
        >>> trade.symbol, trade.status, trade.pnl
        ('TSLA', 'CLOSED', 95.0)
    """
    today = today or date.today()

    symbol = _clean(fields, "symbol").upper()
    if not symbol:
        raise TradeFormError("symbol is required")

    side = _clean(fields, "side").upper() or "LONG"
    if side not in ("LONG", "SHORT"):
        raise TradeFormError(f"side must be LONG or SHORT, got: {side!r}")

    entry_price = _parse_number(_clean(fields, "entry_price"), "entry_price")
    quantity = _parse_number(_clean(fields, "quantity"), "quantity")
    exit_price = _parse_number(_clean(fields, "exit_price"), "exit_price", required=False)
    fees = _parse_number(_clean(fields, "fees"), "fees", required=False) or 0.0

    status = _clean(fields, "status").upper()
    if not status:
        status = "CLOSED" if exit_price is not None else "OPEN"
    if status not in ("OPEN", "CLOSED"):
        raise TradeFormError(f"status must be OPEN or CLOSED, got: {status!r}")

    raw_entry_date = _clean(fields, "entry_date")
    entry_date = _parse_date(raw_entry_date, "entry_date") if raw_entry_date else today.isoformat()

    raw_exit_date = _clean(fields, "exit_date")
    exit_date = _parse_date(raw_exit_date, "exit_date") if raw_exit_date else None

    if status == "CLOSED":
        if exit_price is None:
            raise TradeFormError("exit_price is required for a CLOSED trade")
        exit_date = exit_date or entry_date
    else:
        # An open position has no exit yet, whatever the form carried over
        exit_price = None
        exit_date = None

    try:
        trade = Trade(
            id=trade_id or new_trade_id(),
            symbol=symbol,
            side=side,
            status=status,
            entry_price=entry_price,
            quantity=quantity,
            entry_date=entry_date,
            exit_price=exit_price,
            exit_date=exit_date,
            fees=fees,
            strategy=_clean(fields, "strategy"),
            notes=_clean(fields, "notes"),
            screenshot=_clean(fields, "screenshot") or None,
        )
    except ValueError as e:
        raise TradeFormError(str(e)) from e

    return price_trade(trade)


def trade_to_fields(trade: Trade) -> dict[str, str]:
    """Form values for editing an existing trade.

    Inverse of build_trade(): every value is a string, absent values are "".
    """
    fields = {}
    for name, value in asdict(trade).items():
        if name in ("id", "pnl", "pnl_percentage"):
            continue
        fields[name] = "" if value is None else str(value)
    return fields


def merge_fields(trade: Trade, updates: Mapping[str, object]) -> dict[str, str]:
    """Form values of trade with the given fields overwritten.

    Used by edit: the whole record is re-submitted, so unspecified fields
    keep their current values. Setting exit_price makes the trade CLOSED
    unless a status is given explicitly.
    """
    fields = trade_to_fields(trade)
    for name, value in updates.items():
        if value is not None:
            fields[name] = str(value)
    if updates.get("exit_price") and not updates.get("status"):
        fields["status"] = "CLOSED"
    return fields
