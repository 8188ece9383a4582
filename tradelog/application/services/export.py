"""Export Service: Journal data as tables and archive files.

Produces polars DataFrames for the trade log and the equity curve and
writes them in the requested formats:
- csv / parquet / json: one table per file
- xlsx: a workbook with a Summary sheet and a Trades sheet

The archive export mirrors the browser "export data" button: the whole
journal state (trades + role) as a single JSON document.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

import polars as pl

from tradelog.domain import EquityPoint, Trade
from tradelog.infrastructure import DEFAULT_PATHS, JournalPaths

TRADE_SCHEMA = {
    "id": pl.Utf8,
    "symbol": pl.Utf8,
    "side": pl.Utf8,
    "status": pl.Utf8,
    "entry_date": pl.Utf8,
    "exit_date": pl.Utf8,
    "entry_price": pl.Float64,
    "exit_price": pl.Float64,
    "quantity": pl.Float64,
    "fees": pl.Float64,
    "pnl": pl.Float64,
    "pnl_percentage": pl.Float64,
    "strategy": pl.Utf8,
    "notes": pl.Utf8,
}

EQUITY_SCHEMA = {
    "index": pl.Int64,
    "date": pl.Utf8,
    "symbol": pl.Utf8,
    "pnl": pl.Float64,
    "cumulative_pnl": pl.Float64,
}

FORMATS = ("csv", "parquet", "json", "xlsx")


@dataclass(frozen=True)
class ExportConfig:
    """Configuration for journal exports.

    Attributes:
        output_dir: Directory for output files (defaults to the journal export dir)
        output_formats: Formats written by save()
    """
    output_dir: Path | None = None
    output_formats: tuple[str, ...] = ("csv",)


def trades_frame(trades: Sequence[Trade]) -> pl.DataFrame:
    """Trade log as a DataFrame, one row per trade in insertion order.

    Notes are flattened to a single line; screenshots are left out.
    """
    rows = [
        {
            "id": t.id,
            "symbol": t.symbol,
            "side": t.side,
            "status": t.status,
            "entry_date": t.entry_date,
            "exit_date": t.exit_date,
            "entry_price": t.entry_price,
            "exit_price": t.exit_price,
            "quantity": t.quantity,
            "fees": t.fees,
            "pnl": t.pnl,
            "pnl_percentage": t.pnl_percentage,
            "strategy": t.strategy,
            "notes": " ".join(t.notes.split()),
        }
        for t in trades
    ]
    return pl.DataFrame(rows, schema=TRADE_SCHEMA)


def equity_frame(series: Sequence[EquityPoint]) -> pl.DataFrame:
    """Equity curve as a DataFrame."""
    rows = [
        {
            "index": p.index,
            "date": p.date,
            "symbol": p.symbol,
            "pnl": p.pnl,
            "cumulative_pnl": p.cumulative_pnl,
        }
        for p in series
    ]
    return pl.DataFrame(rows, schema=EQUITY_SCHEMA)


class JournalExporter:
    """Writes journal tables and archives to disk.

    Example:
        >>> exporter = JournalExporter(paths)
        >>> exporter.save(trades_frame(store.trades), "trades", ("csv", "xlsx"))
        [PosixPath('.../exports/trades.csv'), PosixPath('.../exports/trades.xlsx')]
    """

    def __init__(
        self,
        paths: JournalPaths = DEFAULT_PATHS,
        config: ExportConfig | None = None,
    ):
        self._paths = paths
        self._config = config or ExportConfig()

    @property
    def output_dir(self) -> Path:
        return self._config.output_dir or self._paths.export_dir

    def _output_path(self, base_name: str, fmt: str) -> Path:
        if self._config.output_dir is None:
            return self._paths.export_path(base_name, fmt)
        return self._config.output_dir / f"{base_name}.{fmt}"

    def save(
        self,
        df: pl.DataFrame,
        base_name: str = "trades",
        formats: tuple[str, ...] | None = None,
        summary: dict | None = None,
    ) -> list[Path]:
        """Save a table to the specified formats.

        Args:
            df: Table to write
            base_name: Base filename without extension
            formats: Output formats (uses config if not provided)
            summary: Headline figures written to the xlsx Summary sheet

        Returns:
            List of saved file paths

        Raises:
            ValueError: On an unknown format
        """
        formats = formats or self._config.output_formats
        unknown = [f for f in formats if f not in FORMATS]
        if unknown:
            raise ValueError(f"Unknown format: {', '.join(unknown)}")

        self.output_dir.mkdir(parents=True, exist_ok=True)
        saved = []

        for fmt in formats:
            path = self._output_path(base_name, fmt)

            if fmt == "csv":
                df.write_csv(path)
            elif fmt == "parquet":
                df.write_parquet(path)
            elif fmt == "json":
                df.write_json(path)
            elif fmt == "xlsx":
                self._save_excel(df, path, summary or {})

            saved.append(path)

        return saved

    def save_archive(self, trades: Sequence[Trade], role: str) -> Path:
        """Write the full journal state as one JSON document.

        Returns:
            Path of the archive (archive_<timestamp>.json)
        """
        now = datetime.now(timezone.utc)
        document = {
            "exported_at": now.isoformat(),
            "role": role,
            "trades": [t.to_dict() for t in trades],
        }
        output_dir = self.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / f"archive_{now.strftime('%Y%m%dT%H%M%S')}.json"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(document, f, ensure_ascii=False, indent=2)
        return path

    def _save_excel(self, df: pl.DataFrame, path: Path, summary: dict) -> None:
        """Save to Excel with two sheets.

        1. Summary - Headline metrics
        2. Trades - The full table
        """
        import xlsxwriter

        workbook = xlsxwriter.Workbook(str(path))
        header_fmt = workbook.add_format({
            "bold": True,
            "bg_color": "#4F46E5",
            "font_color": "white",
            "border": 1,
        })
        money_fmt = workbook.add_format({"num_format": "#,##0.00"})

        ws1 = workbook.add_worksheet("Summary")
        ws1.write(0, 0, "metric", header_fmt)
        ws1.write(0, 1, "value", header_fmt)
        for row_idx, (name, value) in enumerate(summary.items(), 1):
            ws1.write(row_idx, 0, name)
            ws1.write(row_idx, 1, value, money_fmt)
        ws1.set_column(0, 0, 16)

        ws2 = workbook.add_worksheet("Trades")
        for col_idx, col_name in enumerate(df.columns):
            ws2.write(0, col_idx, col_name, header_fmt)
            ws2.set_column(col_idx, col_idx, max(len(col_name), 10))

        for row_idx, row in enumerate(df.iter_rows(named=True), 1):
            for col_idx, col_name in enumerate(df.columns):
                value = row[col_name]
                if value is None:
                    ws2.write(row_idx, col_idx, "")
                elif col_name in ("pnl", "fees", "entry_price", "exit_price"):
                    ws2.write(row_idx, col_idx, value, money_fmt)
                else:
                    ws2.write(row_idx, col_idx, value)

        workbook.close()
