"""Unit tests for domain/pnl.py.

Tests verify:
1. Sign convention for LONG and SHORT trades
2. Fees are subtracted exactly once
3. Cached fields are refreshed by price_trade()
"""

from dataclasses import replace

import pytest

from tradelog.domain.pnl import (
    compute_realized_pnl,
    compute_pnl_percentage,
    price_trade,
)

from conftest import make_trade


class TestComputeRealizedPnl:
    """Tests for compute_realized_pnl."""

    def test_long_profit(self):
        """LONG 100 -> 110 x 10, fees 5 = 95."""
        trade = make_trade("l", side="LONG", entry_price=100, exit_price=110, quantity=10, fees=5)
        assert compute_realized_pnl(trade) == 95.0

    def test_short_same_numbers(self):
        """SHORT 100 -> 110 x 10, fees 5 = -105."""
        trade = make_trade("s", side="SHORT", entry_price=100, exit_price=110, quantity=10, fees=5)
        assert compute_realized_pnl(trade) == -105.0

    def test_short_profit(self):
        """SHORT profits when price falls."""
        trade = make_trade("s", side="SHORT", entry_price=110, exit_price=100, quantity=10)
        assert compute_realized_pnl(trade) == 100.0

    def test_long_loss(self):
        """LONG loses when price falls."""
        trade = make_trade("l", side="LONG", entry_price=110, exit_price=100, quantity=2, fees=1)
        assert compute_realized_pnl(trade) == -21.0

    def test_fees_only_on_flat_trade(self):
        """A flat trade loses exactly its fees on either side."""
        for side in ("LONG", "SHORT"):
            trade = make_trade("f", side=side, entry_price=50, exit_price=50, quantity=3, fees=2.5)
            assert compute_realized_pnl(trade) == -2.5

    def test_fractional_quantity(self):
        """Fractional crypto quantities."""
        trade = make_trade("c", entry_price=40000, exit_price=42000, quantity=0.5)
        assert compute_realized_pnl(trade) == pytest.approx(1000.0)

    def test_open_trade_raises(self):
        """Open trade has no realized PNL."""
        trade = make_trade("o", exit_price=None)
        with pytest.raises(ValueError, match="is open"):
            compute_realized_pnl(trade)


class TestPnlPercentage:
    """Tests for compute_pnl_percentage."""

    def test_percentage_of_notional(self):
        """95 on a 1000 notional is 9.5%."""
        trade = make_trade("l", entry_price=100, exit_price=110, quantity=10, fees=5)
        assert compute_pnl_percentage(trade) == pytest.approx(9.5)

    def test_short_negative_percentage(self):
        trade = make_trade("s", side="SHORT", entry_price=100, exit_price=110, quantity=10, fees=5)
        assert compute_pnl_percentage(trade) == pytest.approx(-10.5)


class TestPriceTrade:
    """Tests for price_trade."""

    def test_closed_trade_gets_cached_fields(self):
        trade = make_trade("l", entry_price=100, exit_price=110, quantity=10, fees=5)
        priced = price_trade(trade)
        assert priced.pnl == 95.0
        assert priced.pnl_percentage == pytest.approx(9.5)
        assert priced.id == trade.id

    def test_input_not_mutated(self):
        """price_trade returns a copy."""
        trade = make_trade("l")
        price_trade(trade)
        assert trade.pnl is None

    def test_open_trade_has_no_pnl(self):
        priced = price_trade(make_trade("o", exit_price=None))
        assert priced.pnl is None
        assert priced.pnl_percentage is None

    def test_reprice_after_edit(self):
        """Re-pricing replaces a stale cached value."""
        priced = price_trade(make_trade("l", entry_price=100, exit_price=110, quantity=1))
        edited = replace(priced, exit_price=120.0)
        assert price_trade(edited).pnl == 20.0
