"""Command Line Interface for the trade journal.

Provides CLI access to the journal:
- add / edit / delete: Manage trades
- list: Trade log with symbol search and date window
- stats / equity / strategies / symbols / calendar: Performance views
- export: CSV / Parquet / JSON / Excel tables and JSON archive
- coach: Narrative critique from Gemini
- role / reset: Access gate and admin reset

Usage:
    python -m tradelog add --symbol TSLA --side LONG --entry-price 100 --qty 10
    python -m tradelog list --search tsla
    python -m tradelog stats
    python -m tradelog reset --pin 123
"""

import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path

from tradelog import __version__
from tradelog.application import (
    CoachService,
    DashboardService,
    ExportConfig,
    JournalExporter,
    JournalStore,
)
from tradelog.domain import filter_trades
from tradelog.application.services import equity_frame, trades_frame
from tradelog.infrastructure import (
    DEFAULT_PATHS,
    GeminiInsightRequester,
    JournalConfig,
    JournalPaths,
    RepositoryError,
)
from tradelog.interfaces.forms import TradeFormError, build_trade, merge_fields

FORM_FIELDS = (
    "symbol", "side", "status", "entry_price", "exit_price", "quantity",
    "entry_date", "exit_date", "fees", "strategy", "notes", "screenshot",
)


def _usd(value: float, signed: bool = False) -> str:
    sign = "-" if value < 0 else ("+" if signed and value > 0 else "")
    return f"{sign}${abs(value):,.2f}"


def _paths(args: argparse.Namespace) -> JournalPaths:
    if args.data_dir:
        return JournalPaths(root=Path(args.data_dir))
    return DEFAULT_PATHS


def _open_store(args: argparse.Namespace) -> JournalStore:
    return JournalStore.open(_paths(args), JournalConfig.from_env())


def _form_fields(args: argparse.Namespace) -> dict[str, object]:
    return {name: getattr(args, name, None) for name in FORM_FIELDS}


def _print_trades(trades) -> None:
    print(f"{'ID':<10} {'Symbol':<10} {'Side':<6} {'Entry':>12} {'Exit':>12} "
          f"{'Qty':>10} {'P&L':>14} {'Date':<10} Strategy")
    print("-" * 100)
    # Newest first, like the journal table
    for t in reversed(trades):
        exit_str = _usd(t.exit_price) if t.is_closed else "OPEN"
        pnl_str = _usd(t.pnl, signed=True) if t.pnl is not None else "---"
        print(f"{t.id[:8]:<10} {t.symbol:<10} {t.side:<6} {_usd(t.entry_price):>12} "
              f"{exit_str:>12} {t.quantity:>10g} {pnl_str:>14} {t.entry_date:<10} {t.strategy}")


# =============================================================================
# Trade commands
# =============================================================================

def cmd_add(args: argparse.Namespace) -> int:
    """Add a trade."""
    store = _open_store(args)
    trade = store.save_trade(build_trade(_form_fields(args)))
    print(f"Trade added: {trade.id}")
    if trade.pnl is not None:
        print(f"  Realized P&L: {_usd(trade.pnl, signed=True)} ({trade.pnl_percentage:+.2f}%)")
    return 0


def cmd_edit(args: argparse.Namespace) -> int:
    """Edit a trade by re-submitting the whole record."""
    store = _open_store(args)
    existing = store.get_trade(args.trade_id)
    if existing is None:
        print(f"Trade not found: {args.trade_id}")
        return 1

    fields = merge_fields(existing, _form_fields(args))
    trade = store.save_trade(build_trade(fields, trade_id=existing.id))
    print(f"Trade updated: {trade.id}")
    return 0


def cmd_delete(args: argparse.Namespace) -> int:
    """Delete a trade by id."""
    store = _open_store(args)
    if not store.delete_trade(args.trade_id):
        print(f"Trade not found: {args.trade_id}")
        return 1
    print(f"Trade deleted: {args.trade_id}")
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """Show the trade log."""
    store = _open_store(args)
    trades = filter_trades(store.trades, query=args.search, start=args.start, end=args.end)
    if not trades:
        print("No executions found.")
        return 0
    _print_trades(trades)
    return 0


# =============================================================================
# Performance views
# =============================================================================

def cmd_stats(args: argparse.Namespace) -> int:
    """Show the dashboard headline figures."""
    store = _open_store(args)
    report = DashboardService(store.config).build(
        store.trades, query=args.search, start=args.start, end=args.end
    )
    snap = report.snapshot

    print(f"TradeLog v{__version__}")
    print("=" * 50)
    print(f"  Total Net P&L:  {_usd(snap.total_pnl, signed=True)}")
    print(f"  Win Rate:       {snap.win_rate:.1f}%")
    print(f"  Profit Factor:  {snap.profit_factor:.2f}")
    print(f"  Total Trades:   {snap.total_trades}  "
          f"({snap.closed_trades} closed, {snap.open_trades} open)")
    print(f"  Avg Profit:     {_usd(snap.avg_profit)}")
    print(f"  Avg Loss:       {_usd(snap.avg_loss)}")
    print(f"  Max Drawdown:   {_usd(report.max_drawdown)}")
    print(f"  Balance:        {_usd(report.balance)}")
    print(f"  Winners/Losses: {snap.win_count}/{snap.loss_count}")
    print()

    print("Recent Trades")
    print("-" * 50)
    if not report.recent:
        print("  No trades logged yet.")
    for t in report.recent:
        pnl_str = _usd(t.pnl, signed=True) if t.pnl is not None else "OPEN"
        print(f"  {t.symbol:<10} {t.side:<6} {t.entry_date}  {pnl_str:>14}  {t.strategy}")
    return 0


def cmd_equity(args: argparse.Namespace) -> int:
    """Show the equity curve."""
    store = _open_store(args)
    report = DashboardService(store.config).build(store.trades)
    if not report.equity:
        print("No closed trades yet.")
        return 0

    print(f"{'#':>4} {'Date':<10} {'Symbol':<10} {'P&L':>14} {'Cumulative':>14}")
    print("-" * 56)
    for p in report.equity:
        print(f"{p.index:>4} {p.date:<10} {p.symbol:<10} "
              f"{_usd(p.pnl, signed=True):>14} {_usd(p.cumulative_pnl, signed=True):>14}")
    print()
    print(f"Max Drawdown: {_usd(report.max_drawdown)}")
    return 0


def _print_groups(title: str, groups: dict) -> None:
    print(f"{title:<24} {'Trades':>6} {'P&L':>14}")
    print("-" * 46)
    for name, stats in groups.items():
        print(f"{name[:24]:<24} {stats.count:>6} {_usd(stats.total_pnl, signed=True):>14}")


def cmd_strategies(args: argparse.Namespace) -> int:
    """Show PNL per strategy."""
    store = _open_store(args)
    report = DashboardService(store.config).build(store.trades)
    if not report.strategies:
        print("No closed trades yet.")
        return 0
    _print_groups("Strategy", report.strategies)
    return 0


def cmd_symbols(args: argparse.Namespace) -> int:
    """Show PNL per symbol."""
    store = _open_store(args)
    report = DashboardService(store.config).build(store.trades)
    if not report.symbols:
        print("No closed trades yet.")
        return 0
    _print_groups("Symbol", report.symbols)
    return 0


def cmd_calendar(args: argparse.Namespace) -> int:
    """Show daily PNL for one month."""
    store = _open_store(args)
    month = args.month or date.today().strftime("%Y-%m")
    days = DashboardService(store.config).calendar_month(store.trades, month)

    print(f"Calendar {month}")
    print("-" * 40)
    if not days:
        print("  No trades this month.")
        return 0
    for day in days:
        print(f"  {day.date}  {_usd(day.pnl, signed=True):>14}  {day.trade_count} trades")
    return 0


# =============================================================================
# Export / coach / admin
# =============================================================================

def cmd_export(args: argparse.Namespace) -> int:
    """Export the journal."""
    store = _open_store(args)
    paths = _paths(args)
    config = ExportConfig(output_dir=Path(args.output)) if args.output else None
    exporter = JournalExporter(paths, config)

    if args.archive:
        path = exporter.save_archive(store.trades, store.role)
        print(f"Archive written: {path}")
        return 0

    report = DashboardService(store.config).build(store.trades)
    formats = tuple(f.strip() for f in args.formats.split(",") if f.strip())
    saved = exporter.save(trades_frame(store.trades), "trades", formats, summary=report.to_dict())
    if args.equity:
        saved += exporter.save(equity_frame(report.equity), "equity", formats)
    for path in saved:
        print(f"Exported: {path}")
    return 0


def cmd_coach(args: argparse.Namespace) -> int:
    """Ask the trading coach for a critique."""
    store = _open_store(args)
    config = store.config
    requester = GeminiInsightRequester(model=config.insight_model, timeout=config.insight_timeout)
    report = asyncio.run(CoachService(requester, config).analyze(store.trades))

    print(report.text)
    if report.ok:
        print()
        print(f"Analysis based on {report.trade_count} trades ({requester.model})")
        return 0
    return 1


def cmd_role(args: argparse.Namespace) -> int:
    """Show or set the active role."""
    store = _open_store(args)
    if args.role:
        store.set_role(args.role)
    print(f"Role: {store.role}")
    return 0


def cmd_reset(args: argparse.Namespace) -> int:
    """Wipe the journal (requires the admin PIN)."""
    store = _open_store(args)
    store.reset(args.pin)
    print("Journal reset.")
    return 0


# =============================================================================
# Parser
# =============================================================================

def _add_trade_arguments(parser: argparse.ArgumentParser, required: bool) -> None:
    parser.add_argument("--symbol", required=required, help="Instrument (e.g., BTCUSDT, TSLA)")
    parser.add_argument("--side", choices=["LONG", "SHORT"], type=str.upper)
    parser.add_argument("--status", choices=["OPEN", "CLOSED"], type=str.upper)
    parser.add_argument("--entry-price", dest="entry_price", required=required)
    parser.add_argument("--exit-price", dest="exit_price")
    parser.add_argument("--qty", "--quantity", dest="quantity", required=required)
    parser.add_argument("--entry-date", dest="entry_date", help="YYYY-MM-DD (default: today)")
    parser.add_argument("--exit-date", dest="exit_date", help="YYYY-MM-DD")
    parser.add_argument("--fees")
    parser.add_argument("--strategy")
    parser.add_argument("--notes")
    parser.add_argument("--screenshot", help="Path or data URL of a chart image")


def _iso_date(value: str) -> str:
    """argparse type for YYYY-MM-DD dates, compared as strings downstream."""
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a date in YYYY-MM-DD format, got: {value!r}")


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-s", "--search", default="", help="Symbol search text")
    parser.add_argument("--from", dest="start", type=_iso_date, help="Earliest entry date (YYYY-MM-DD)")
    parser.add_argument("--to", dest="end", type=_iso_date, help="Latest entry date (YYYY-MM-DD)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tradelog",
        description="TradeLog - Local trading journal",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--data-dir",
        help="Journal root directory (default: $TRADELOG_HOME or ~/.tradelog)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    add_parser = subparsers.add_parser("add", help="Add a trade")
    _add_trade_arguments(add_parser, required=True)

    edit_parser = subparsers.add_parser("edit", help="Edit a trade")
    edit_parser.add_argument("trade_id", help="Trade id")
    _add_trade_arguments(edit_parser, required=False)

    delete_parser = subparsers.add_parser("delete", help="Delete a trade")
    delete_parser.add_argument("trade_id", help="Trade id")

    list_parser = subparsers.add_parser("list", help="Show the trade log")
    _add_filter_arguments(list_parser)

    stats_parser = subparsers.add_parser("stats", help="Show performance statistics")
    _add_filter_arguments(stats_parser)

    subparsers.add_parser("equity", help="Show the equity curve")
    subparsers.add_parser("strategies", help="Show PNL per strategy")
    subparsers.add_parser("symbols", help="Show PNL per symbol")

    calendar_parser = subparsers.add_parser("calendar", help="Show daily PNL for a month")
    calendar_parser.add_argument("--month", help="Month as YYYY-MM (default: current)")

    export_parser = subparsers.add_parser("export", help="Export the journal")
    export_parser.add_argument(
        "-f", "--formats",
        default="csv",
        help="Output formats (comma-separated: csv,parquet,json,xlsx)",
    )
    export_parser.add_argument("-o", "--output", help="Output directory")
    export_parser.add_argument("--equity", action="store_true", help="Also export the equity curve")
    export_parser.add_argument("--archive", action="store_true", help="Write a full JSON archive")

    subparsers.add_parser("coach", help="Ask the AI trading coach")

    role_parser = subparsers.add_parser("role", help="Show or set the active role")
    role_parser.add_argument("role", nargs="?", choices=["USER", "GUEST"], type=str.upper)

    reset_parser = subparsers.add_parser("reset", help="Wipe the journal")
    reset_parser.add_argument("--pin", required=True, help="Admin PIN")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "add": cmd_add,
        "edit": cmd_edit,
        "delete": cmd_delete,
        "list": cmd_list,
        "stats": cmd_stats,
        "equity": cmd_equity,
        "strategies": cmd_strategies,
        "symbols": cmd_symbols,
        "calendar": cmd_calendar,
        "export": cmd_export,
        "coach": cmd_coach,
        "role": cmd_role,
        "reset": cmd_reset,
    }

    try:
        return commands[args.command](args)
    except TradeFormError as e:
        print(f"Invalid trade: {e}")
    except PermissionError as e:
        print(str(e))
    except (RepositoryError, ValueError) as e:
        print(f"Error: {e}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
