"""Shared fixtures for tradelog tests."""

from types import SimpleNamespace

import pytest

from tradelog.domain import Trade
from tradelog.infrastructure import (
    JournalConfig,
    JournalPaths,
    KeyValueStore,
    SettingsRepository,
    TradeRepository,
)


def make_trade(
    trade_id: str,
    symbol: str = "AAPL",
    side: str = "LONG",
    entry_price: float = 100.0,
    exit_price: float | None = 110.0,
    quantity: float = 1.0,
    entry_date: str = "2024-01-15",
    fees: float = 0.0,
    strategy: str = "",
) -> Trade:
    """Build a trade; exit_price=None gives an OPEN trade."""
    closed = exit_price is not None
    return Trade(
        id=trade_id,
        symbol=symbol,
        side=side,
        status="CLOSED" if closed else "OPEN",
        entry_price=entry_price,
        quantity=quantity,
        entry_date=entry_date,
        exit_price=exit_price,
        exit_date=entry_date if closed else None,
        fees=fees,
        strategy=strategy,
    )


def closed_with_pnl(trade_id: str, pnl: float, entry_date: str = "2024-01-15", **kwargs) -> Trade:
    """LONG trade of quantity 1 whose realized PNL is exactly pnl."""
    return make_trade(
        trade_id,
        entry_price=100.0,
        exit_price=100.0 + pnl,
        entry_date=entry_date,
        **kwargs,
    )


@pytest.fixture
def sample_trades() -> list[Trade]:
    """Three closed trades (+10, -5, +3) and one open trade."""
    return [
        closed_with_pnl("t1", 10.0, "2024-01-10", strategy="Breakout"),
        closed_with_pnl("t2", -5.0, "2024-01-12", strategy="Mean Reversion"),
        make_trade("t3", exit_price=None, entry_date="2024-01-13", strategy="Breakout"),
        closed_with_pnl("t4", 3.0, "2024-01-11", strategy="Breakout", symbol="TSLA"),
    ]


@pytest.fixture
def paths(tmp_path) -> JournalPaths:
    return JournalPaths(root=tmp_path)


@pytest.fixture
def kv_store(paths) -> KeyValueStore:
    return KeyValueStore(paths.store_file)


@pytest.fixture
def trade_repo(kv_store) -> TradeRepository:
    return TradeRepository(kv_store)


@pytest.fixture
def settings_repo(kv_store) -> SettingsRepository:
    return SettingsRepository(kv_store)


@pytest.fixture
def config() -> JournalConfig:
    return JournalConfig()


class FakeModels:
    """Stands in for client.aio.models of google-genai."""

    def __init__(self, text: str | None = "## Review\n- Good risk control", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[dict] = []

    async def generate_content(self, model: str, contents: str):
        self.calls.append({"model": model, "contents": contents})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def fake_genai_client(models: FakeModels) -> SimpleNamespace:
    return SimpleNamespace(aio=SimpleNamespace(models=models))
