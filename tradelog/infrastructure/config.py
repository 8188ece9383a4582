"""Configuration: Centralized paths and settings.

This module provides:
- JournalPaths: File paths for the local journal store and exports
- JournalConfig: Policy constants for metrics, the coach and the access gate

Directory Structure:
    ~/.tradelog/                 # or $TRADELOG_HOME
    └── data/
        ├── tradelog.json        # key-value store (trades, role)
        └── exports/             # CSV / Parquet / JSON exports
"""

import os
from dataclasses import dataclass
from pathlib import Path

from tradelog.domain.metrics.snapshot import PROFIT_FACTOR_CAP


def _default_root() -> Path:
    """Journal root: $TRADELOG_HOME or ~/.tradelog."""
    env = os.getenv("TRADELOG_HOME")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".tradelog"


@dataclass(frozen=True)
class JournalPaths:
    """File paths for the journal.

    Attributes:
        root: Journal root directory
    """

    root: Path = Path(".")

    # --- Directories ---

    @property
    def data_dir(self) -> Path:
        """Main data directory."""
        return self.root / "data"

    @property
    def export_dir(self) -> Path:
        """Exported reports and archives."""
        return self.data_dir / "exports"

    # --- Files ---

    @property
    def store_file(self) -> Path:
        """Key-value store holding the trade collection and settings."""
        return self.data_dir / "tradelog.json"

    # --- Helper Methods ---

    def export_path(self, base_name: str, fmt: str) -> Path:
        """Path to an export file."""
        return self.export_dir / f"{base_name}.{fmt}"

    def validate(self) -> list[str]:
        """Check which required paths are missing.

        Returns:
            List of missing paths (empty if all exist)
        """
        missing = []
        if not self.data_dir.exists():
            missing.append(str(self.data_dir))
        if not self.store_file.exists():
            missing.append(str(self.store_file))
        return missing

    def ensure_dirs(self) -> None:
        """Create all required directories."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.export_dir.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class JournalConfig:
    """Policy constants for the journal.

    Attributes:
        profit_factor_cap: Profit factor reported when there are no losses
        min_insight_trades: Trades required before the coach will run
        recent_trade_count: Trades shown in the dashboard feed
        starting_balance: Account balance the PNL is added to
        insight_model: Gemini model used by the coach
        insight_timeout: Seconds to wait for the coach response
        admin_pin: PIN guarding destructive admin actions
    """

    profit_factor_cap: float = PROFIT_FACTOR_CAP
    min_insight_trades: int = 3
    recent_trade_count: int = 5
    starting_balance: float = 100_000.0
    insight_model: str = "gemini-2.5-flash"
    insight_timeout: float = 60.0
    admin_pin: str = "123"

    @classmethod
    def from_env(cls) -> "JournalConfig":
        """Build a config with TRADELOG_* environment overrides applied."""
        defaults = cls()
        return cls(
            profit_factor_cap=float(
                os.getenv("TRADELOG_PROFIT_FACTOR_CAP", defaults.profit_factor_cap)
            ),
            min_insight_trades=int(
                os.getenv("TRADELOG_MIN_INSIGHT_TRADES", defaults.min_insight_trades)
            ),
            recent_trade_count=defaults.recent_trade_count,
            starting_balance=float(
                os.getenv("TRADELOG_STARTING_BALANCE", defaults.starting_balance)
            ),
            insight_model=os.getenv("TRADELOG_INSIGHT_MODEL", defaults.insight_model),
            insight_timeout=float(
                os.getenv("TRADELOG_INSIGHT_TIMEOUT", defaults.insight_timeout)
            ),
            admin_pin=os.getenv("TRADELOG_ADMIN_PIN", defaults.admin_pin),
        )


# Default instances
DEFAULT_PATHS = JournalPaths(root=_default_root())
DEFAULT_CONFIG = JournalConfig()
