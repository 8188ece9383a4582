"""Unit tests for application services.

Tests verify:
1. JournalStore commands, subscriptions and the access gate
2. DashboardService assembles consistent reports
3. CoachService falls back instead of raising
4. JournalExporter writes the requested files
5. Trade form validation at the record-creation boundary
"""

import asyncio
import json
from dataclasses import replace

import polars as pl
import pytest

from tradelog.application import (
    CoachService,
    DashboardService,
    ExportConfig,
    JournalExporter,
    JournalStore,
)
from tradelog.application.services import (
    FALLBACK_MESSAGE,
    GUEST_DENIED_MESSAGE,
    equity_frame,
    summarize_trades,
    trades_frame,
)
from tradelog.domain import compute_equity_series, compute_snapshot
from tradelog.infrastructure import GeminiInsightRequester, InsightError, JournalConfig, JournalPaths
from tradelog.interfaces.forms import TradeFormError, build_trade, merge_fields

from conftest import FakeModels, closed_with_pnl, fake_genai_client, make_trade


@pytest.fixture
def store(trade_repo, settings_repo, config) -> JournalStore:
    return JournalStore(trade_repo, settings_repo, config)


@pytest.fixture
def seeded_store(store, sample_trades) -> JournalStore:
    for trade in sample_trades:
        store.save_trade(trade)
    return store


# =============================================================================
# JournalStore Tests
# =============================================================================

class TestJournalStore:
    """Tests for JournalStore."""

    def test_starts_empty(self, store):
        assert store.trades == ()
        assert store.role == "USER"
        assert store.can_edit is True

    def test_save_prices_trade(self, store):
        """Saved trades carry the cached PNL."""
        saved = store.save_trade(make_trade("a", entry_price=100, exit_price=110, quantity=10, fees=5))
        assert saved.pnl == 95.0
        assert store.trades[0].pnl == 95.0

    def test_edit_keeps_position(self, seeded_store):
        seeded_store.save_trade(closed_with_pnl("t2", 20.0, "2024-01-12"))
        assert [t.id for t in seeded_store.trades] == ["t1", "t2", "t3", "t4"]
        assert seeded_store.get_trade("t2").pnl == 20.0

    def test_add_then_delete_restores_metrics(self, seeded_store):
        """Adding and removing a trade leaves the metrics unchanged."""
        before_snap = compute_snapshot(seeded_store.trades)
        before_equity = compute_equity_series(seeded_store.trades)

        seeded_store.save_trade(closed_with_pnl("x", -42.0, "2024-01-09"))
        assert compute_snapshot(seeded_store.trades) != before_snap
        assert seeded_store.delete_trade("x") is True

        assert compute_snapshot(seeded_store.trades) == before_snap
        assert compute_equity_series(seeded_store.trades) == before_equity

    def test_delete_unknown(self, seeded_store):
        assert seeded_store.delete_trade("nope") is False
        assert len(seeded_store.trades) == 4

    def test_subscribers_notified(self, store):
        received = []
        unsubscribe = store.subscribe(received.append)

        store.save_trade(make_trade("a"))
        store.save_trade(make_trade("b"))
        assert [len(snapshot) for snapshot in received] == [1, 2]

        unsubscribe()
        store.delete_trade("a")
        assert len(received) == 2

    def test_no_notification_on_noop_delete(self, store):
        received = []
        store.subscribe(received.append)
        store.delete_trade("missing")
        assert received == []

    def test_persisted_across_sessions(self, seeded_store, paths, config):
        reopened = JournalStore.open(paths, config)
        assert [t.id for t in reopened.trades] == [t.id for t in seeded_store.trades]

    def test_open_creates_journal_dirs(self, tmp_path, config):
        paths = JournalPaths(root=tmp_path / "fresh")
        assert paths.validate()
        store = JournalStore.open(paths, config)
        assert paths.export_dir.is_dir()
        store.save_trade(make_trade("a"))
        assert paths.validate() == []

    def test_guest_is_read_only(self, seeded_store):
        """GUEST cannot add or delete."""
        seeded_store.set_role("GUEST")
        assert seeded_store.can_edit is False
        with pytest.raises(PermissionError, match=GUEST_DENIED_MESSAGE):
            seeded_store.save_trade(make_trade("z"))
        with pytest.raises(PermissionError):
            seeded_store.delete_trade("t1")
        assert len(seeded_store.trades) == 4

    def test_reset_wrong_pin(self, seeded_store):
        with pytest.raises(PermissionError, match="wrong admin PIN"):
            seeded_store.reset("000")
        assert len(seeded_store.trades) == 4

    def test_reset(self, seeded_store):
        """Reset clears trades, restores USER and notifies."""
        seeded_store.set_role("GUEST")
        received = []
        seeded_store.subscribe(received.append)

        seeded_store.reset("123")
        assert seeded_store.trades == ()
        assert seeded_store.role == "USER"
        assert received == [()]


# =============================================================================
# DashboardService Tests
# =============================================================================

class TestDashboardService:
    """Tests for DashboardService."""

    def test_build(self, sample_trades, config):
        report = DashboardService(config).build(sample_trades)
        assert report.snapshot.total_pnl == pytest.approx(8.0)
        assert report.balance == pytest.approx(100_008.0)
        assert len(report.equity) == 3
        assert report.max_drawdown == pytest.approx(5.0)
        assert set(report.strategies) == {"Breakout", "Mean Reversion"}
        assert set(report.symbols) == {"AAPL", "TSLA"}

    def test_recent_newest_first(self, config):
        trades = [closed_with_pnl(f"t{i}", 1.0) for i in range(7)]
        report = DashboardService(config).build(trades)
        assert [t.id for t in report.recent] == ["t6", "t5", "t4", "t3", "t2"]

    def test_filtered_build(self, sample_trades, config):
        report = DashboardService(config).build(sample_trades, query="tsla")
        assert report.snapshot.total_trades == 1
        assert report.snapshot.total_pnl == pytest.approx(3.0)

    def test_empty_journal(self, config):
        report = DashboardService(config).build([])
        assert report.snapshot.total_pnl == 0
        assert report.equity == ()
        assert report.max_drawdown == 0.0
        assert report.recent == ()

    def test_to_dict(self, sample_trades, config):
        d = DashboardService(config).build(sample_trades).to_dict()
        assert d["balance"] == pytest.approx(100_008.0)
        assert "max_drawdown" in d

    def test_calendar_month(self, sample_trades, config):
        trades = sample_trades + [closed_with_pnl("feb", 2.0, "2024-02-03")]
        days = DashboardService(config).calendar_month(trades, "2024-01")
        assert [d.date for d in days] == ["2024-01-10", "2024-01-11", "2024-01-12", "2024-01-13"]

    def test_calendar_month_invalid(self, config):
        with pytest.raises(ValueError, match="YYYY-MM"):
            DashboardService(config).calendar_month([], "2024-1")


# =============================================================================
# CoachService Tests
# =============================================================================

class TestCoachService:
    """Tests for CoachService with a fake Gemini client."""

    def _coach(self, models: FakeModels, config: JournalConfig) -> CoachService:
        requester = GeminiInsightRequester(client=fake_genai_client(models), timeout=5)
        return CoachService(requester, config)

    def test_summaries(self, sample_trades):
        summaries = summarize_trades(sample_trades)
        assert summaries[0] == {
            "symbol": "AAPL", "side": "LONG", "pnl": 10.0,
            "strategy": "Breakout", "notes": "", "date": "2024-01-10",
        }
        assert summaries[2]["pnl"] is None

    def test_not_enough_trades(self, config):
        """Below the minimum no request is made."""
        models = FakeModels()
        report = asyncio.run(self._coach(models, config).analyze([closed_with_pnl("a", 1.0)]))
        assert report.ok is False
        assert "at least 3 trades" in report.text
        assert models.calls == []

    def test_success(self, sample_trades, config):
        models = FakeModels(text="## Review")
        report = asyncio.run(self._coach(models, config).analyze(sample_trades))
        assert report.ok is True
        assert report.text == "## Review"
        assert report.trade_count == 4
        assert models.calls[0]["model"] == "gemini-2.5-flash"
        assert "TSLA" in models.calls[0]["contents"]

    def test_api_failure_falls_back(self, sample_trades, config):
        """Any request failure yields the fallback message."""
        models = FakeModels(error=RuntimeError("network down"))
        report = asyncio.run(self._coach(models, config).analyze(sample_trades))
        assert report.ok is False
        assert report.text == FALLBACK_MESSAGE

    def test_empty_model_response(self, sample_trades, config):
        models = FakeModels(text=None)
        report = asyncio.run(self._coach(models, config).analyze(sample_trades))
        assert report.ok is True
        assert report.text == "Unable to generate analysis at this time."

    def test_missing_api_key(self, sample_trades, config, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("API_KEY", raising=False)
        requester = GeminiInsightRequester()
        with pytest.raises(InsightError):
            asyncio.run(requester.analyze_journal(summarize_trades(sample_trades)))
        report = asyncio.run(CoachService(requester, config).analyze(sample_trades))
        assert report.text == FALLBACK_MESSAGE

    def test_collection_untouched(self, seeded_store, config):
        before = seeded_store.trades
        models = FakeModels(error=RuntimeError("boom"))
        asyncio.run(self._coach(models, config).analyze(seeded_store.trades))
        assert seeded_store.trades == before


# =============================================================================
# JournalExporter Tests
# =============================================================================

class TestJournalExporter:
    """Tests for JournalExporter."""

    def test_trades_frame(self, sample_trades):
        df = trades_frame(sample_trades)
        assert isinstance(df, pl.DataFrame)
        assert len(df) == 4
        assert df["symbol"].to_list() == ["AAPL", "AAPL", "AAPL", "TSLA"]
        assert df["exit_price"][2] is None

    def test_notes_flattened(self):
        trade = make_trade("a")
        df = trades_frame([replace(trade, notes="line one\nline two")])
        assert df["notes"][0] == "line one line two"

    def test_equity_frame(self, sample_trades):
        df = equity_frame(compute_equity_series(sample_trades))
        assert df["cumulative_pnl"].to_list() == pytest.approx([10.0, 13.0, 8.0])

    def test_save_formats(self, sample_trades, paths):
        exporter = JournalExporter(paths)
        saved = exporter.save(trades_frame(sample_trades), "trades", ("csv", "json", "parquet"))
        assert [p.name for p in saved] == ["trades.csv", "trades.json", "trades.parquet"]
        assert saved[0] == paths.export_path("trades", "csv")
        assert all(p.exists() for p in saved)
        assert pl.read_csv(saved[0]).height == 4
        assert pl.read_parquet(saved[2]).height == 4

    def test_save_excel(self, sample_trades, paths):
        exporter = JournalExporter(paths)
        summary = compute_snapshot(sample_trades).to_dict()
        (path,) = exporter.save(trades_frame(sample_trades), "trades", ("xlsx",), summary=summary)
        assert path.exists()
        assert path.stat().st_size > 0

    def test_output_dir_override(self, sample_trades, paths, tmp_path):
        out = tmp_path / "elsewhere"
        exporter = JournalExporter(paths, ExportConfig(output_dir=out))
        (path,) = exporter.save(trades_frame(sample_trades))
        assert path == out / "trades.csv"

    def test_unknown_format(self, paths):
        with pytest.raises(ValueError, match="Unknown format: pdf"):
            JournalExporter(paths).save(trades_frame([]), "trades", ("pdf",))

    def test_archive(self, sample_trades, paths):
        path = JournalExporter(paths).save_archive(sample_trades, "USER")
        document = json.loads(path.read_text())
        assert path.name.startswith("archive_")
        assert document["role"] == "USER"
        assert [t["id"] for t in document["trades"]] == ["t1", "t2", "t3", "t4"]


# =============================================================================
# Trade Form Tests
# =============================================================================

class TestBuildTrade:
    """Tests for build_trade."""

    FIELDS = {
        "symbol": "tsla", "side": "long", "entry_price": "100", "exit_price": "110",
        "quantity": "10", "fees": "5", "entry_date": "2024-03-01", "exit_date": "2024-03-02",
    }

    def test_closed_trade(self):
        trade = build_trade(self.FIELDS)
        assert trade.symbol == "TSLA"
        assert trade.status == "CLOSED"
        assert trade.pnl == 95.0
        assert len(trade.id) == 32

    def test_open_when_no_exit(self):
        fields = {**self.FIELDS, "exit_price": "", "exit_date": ""}
        trade = build_trade(fields)
        assert trade.status == "OPEN"
        assert trade.pnl is None

    def test_explicit_open_drops_exit(self):
        trade = build_trade({**self.FIELDS, "status": "OPEN"})
        assert trade.exit_price is None
        assert trade.exit_date is None

    def test_exit_date_defaults_to_entry(self):
        trade = build_trade({**self.FIELDS, "exit_date": ""})
        assert trade.exit_date == "2024-03-01"

    def test_keeps_given_id(self):
        assert build_trade(self.FIELDS, trade_id="abc").id == "abc"

    @pytest.mark.parametrize("name,value,match", [
        ("entry_price", "abc", "must be a number"),
        ("entry_price", "nan", "finite"),
        ("quantity", "", "quantity is required"),
        ("quantity", "-1", "quantity must be positive"),
        ("symbol", " ", "symbol is required"),
        ("side", "buy", "side must be LONG or SHORT"),
        ("entry_date", "03/01/2024", "YYYY-MM-DD"),
        ("exit_date", "2024-02-01", "before entry_date"),
    ])
    def test_rejections(self, name, value, match):
        with pytest.raises(TradeFormError, match=match):
            build_trade({**self.FIELDS, name: value})

    def test_closed_without_exit_price(self):
        with pytest.raises(TradeFormError, match="exit_price is required"):
            build_trade({**self.FIELDS, "status": "CLOSED", "exit_price": ""})

    def test_merge_fields_closes_trade(self):
        """Giving an exit price to an open trade closes it."""
        open_trade = build_trade({**self.FIELDS, "exit_price": "", "exit_date": ""}, trade_id="o")
        fields = merge_fields(open_trade, {"exit_price": 120.0, "status": None, "notes": None})
        trade = build_trade(fields, trade_id="o")
        assert trade.status == "CLOSED"
        assert trade.pnl == pytest.approx(195.0)
