"""Domain Models: The trade record.

A Trade is the single unit of persisted journal state:
- TradeSide: Literal for position direction
- TradeStatus: Literal for lifecycle state
- Trade: One journal entry, open or closed

Design Principles:
- Immutable (frozen dataclass); edits replace the whole record
- Validation in __post_init__ so bad records never reach the metrics
- Derived pnl / pnl_percentage are cached on the record at save time
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Literal

TradeSide = Literal["LONG", "SHORT"]
TradeStatus = Literal["OPEN", "CLOSED"]

SIDES: tuple[str, ...] = ("LONG", "SHORT")
STATUSES: tuple[str, ...] = ("OPEN", "CLOSED")

# Date format pattern
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _validate_date(date_str: str, field_name: str) -> None:
    """Validate date string format (YYYY-MM-DD)."""
    if not date_str:
        raise ValueError(f"{field_name} cannot be empty")
    if not DATE_PATTERN.match(date_str):
        raise ValueError(f"{field_name} must be YYYY-MM-DD format, got: {date_str}")


def _validate_positive(value: int | float, field_name: str) -> None:
    """Validate that value is positive."""
    if value <= 0:
        raise ValueError(f"{field_name} must be positive, got: {value}")


def _validate_non_negative(value: int | float, field_name: str) -> None:
    """Validate that value is non-negative."""
    if value < 0:
        raise ValueError(f"{field_name} must be non-negative, got: {value}")


@dataclass(frozen=True, slots=True)
class Trade:
    """A single journal entry.

    Attributes:
        id: Opaque unique identifier, assigned at creation
        symbol: Instrument identifier (e.g., "BTCUSDT", "TSLA")
        side: "LONG" or "SHORT"
        status: "OPEN" or "CLOSED" (CLOSED iff exit price and date are set)
        entry_price: Price the position was opened at (must be positive)
        quantity: Size of the position (must be positive)
        entry_date: Date position was opened (YYYY-MM-DD)
        exit_price: Price the position was closed at (CLOSED only)
        exit_date: Date position was closed (CLOSED only)
        fees: Total commissions and fees (non-negative)
        strategy: Free-text strategy label
        notes: Free-text notes
        pnl: Cached realized PNL, filled by price_trade()
        pnl_percentage: Cached return on notional in percent
        screenshot: Opaque chart reference (data URL or path)

    Example:
        >>> trade = Trade(
        ...     id="a1", symbol="AAPL", side="LONG", status="CLOSED",
        ...     entry_price=100.0, quantity=10, entry_date="2024-01-15",
        ...     exit_price=110.0, exit_date="2024-01-20", fees=5.0,
        ... )
        >>> trade.is_closed
        True
    """

    id: str
    symbol: str
    side: TradeSide
    status: TradeStatus
    entry_price: float
    quantity: float
    entry_date: str
    exit_price: float | None = None
    exit_date: str | None = None
    fees: float = 0.0
    strategy: str = ""
    notes: str = ""
    pnl: float | None = None
    pnl_percentage: float | None = None
    screenshot: str | None = None

    def __post_init__(self) -> None:
        """Validate all fields after initialization."""
        if not self.id:
            raise ValueError("id cannot be empty")
        if not self.symbol or not self.symbol.strip():
            raise ValueError("symbol cannot be empty")
        if self.side not in SIDES:
            raise ValueError(f"side must be 'LONG' or 'SHORT', got: {self.side}")
        if self.status not in STATUSES:
            raise ValueError(f"status must be 'OPEN' or 'CLOSED', got: {self.status}")
        _validate_positive(self.entry_price, "entry_price")
        _validate_positive(self.quantity, "quantity")
        _validate_date(self.entry_date, "entry_date")
        _validate_non_negative(self.fees, "fees")

        if self.status == "CLOSED":
            if self.exit_price is None:
                raise ValueError("exit_price is required for a CLOSED trade")
            _validate_positive(self.exit_price, "exit_price")
            if self.exit_date is None:
                raise ValueError("exit_date is required for a CLOSED trade")
            _validate_date(self.exit_date, "exit_date")
            if self.exit_date < self.entry_date:
                raise ValueError(
                    f"exit_date {self.exit_date} is before entry_date {self.entry_date}"
                )
        else:
            if self.exit_price is not None or self.exit_date is not None:
                raise ValueError("exit_price and exit_date are only allowed on a CLOSED trade")
            if self.pnl is not None:
                raise ValueError("an OPEN trade cannot carry a realized pnl")

    @property
    def is_closed(self) -> bool:
        """Check if the trade has a genuine exit."""
        return (
            self.status == "CLOSED"
            and self.exit_price is not None
            and self.exit_date is not None
        )

    @property
    def notional(self) -> float:
        """Entry value of the position."""
        return self.entry_price * self.quantity

    @property
    def strategy_label(self) -> str:
        """Strategy name used for grouping; blank strategies fall into "Unknown"."""
        label = (self.strategy or "").strip()
        return label or "Unknown"

    def to_dict(self) -> dict[str, Any]:
        """Convert to the stored JSON layout (camelCase keys)."""
        return {
            "id": self.id,
            "symbol": self.symbol,
            "side": self.side,
            "status": self.status,
            "entryPrice": self.entry_price,
            "exitPrice": self.exit_price,
            "quantity": self.quantity,
            "entryDate": self.entry_date,
            "exitDate": self.exit_date,
            "fees": self.fees,
            "strategy": self.strategy,
            "notes": self.notes,
            "pnl": self.pnl,
            "pnlPercentage": self.pnl_percentage,
            "screenshot": self.screenshot,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Trade:
        """Create a Trade from its stored JSON layout.

        Accepts the older ``qty`` / ``date`` keys and infers ``status``
        from the presence of an exit price when it is missing.

        An exit price of 0, "" or null is no exit: browser forms start
        every record with ``exitPrice: 0`` and today's ``exitDate``, so
        those placeholders are dropped and such a record loads as OPEN.
        An explicit OPEN status also drops any exit the form carried.

        Raises:
            ValueError: If the stored record is invalid
        """
        exit_price = data.get("exitPrice")
        if exit_price in ("", None) or float(exit_price) == 0:
            exit_price = None
        entry_date = data.get("entryDate") or data.get("date") or ""
        exit_date = data.get("exitDate") or None

        status = data.get("status")
        if exit_price is None:
            status = "OPEN"
        elif status is None:
            status = "CLOSED"

        pnl = data.get("pnl")
        pnl_percentage = data.get("pnlPercentage")
        if status == "OPEN":
            exit_price = exit_date = None
            pnl = pnl_percentage = None
        elif exit_date is None:
            exit_date = entry_date

        return cls(
            id=str(data["id"]),
            symbol=str(data["symbol"]).strip().upper(),
            side=str(data["side"]).upper(),
            status=status,
            entry_price=float(data["entryPrice"]),
            quantity=float(data.get("quantity", data.get("qty", 0))),
            entry_date=entry_date,
            exit_price=float(exit_price) if exit_price is not None else None,
            exit_date=exit_date,
            fees=float(data.get("fees") or 0.0),
            strategy=data.get("strategy") or "",
            notes=data.get("notes") or "",
            pnl=float(pnl) if pnl is not None else None,
            pnl_percentage=float(pnl_percentage) if pnl_percentage is not None else None,
            screenshot=data.get("screenshot") or None,
        )
