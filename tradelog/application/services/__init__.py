"""Application Services for the trade journal.

Services orchestrate repositories and domain metrics into use cases.

Available services:
- JournalStore: Session state, commands and change notification
- DashboardService: Dashboard / analytics / calendar views
- CoachService: Narrative critique with fallback
- JournalExporter: CSV / Parquet / JSON / Excel exports
"""

from tradelog.application.services.journal import (
    JournalStore,
    GUEST_DENIED_MESSAGE,
)
from tradelog.application.services.dashboard import (
    DashboardService,
    DashboardReport,
)
from tradelog.application.services.coach import (
    CoachService,
    CoachReport,
    FALLBACK_MESSAGE,
    summarize_trades,
)
from tradelog.application.services.export import (
    JournalExporter,
    ExportConfig,
    trades_frame,
    equity_frame,
)

__all__ = [
    "JournalStore",
    "GUEST_DENIED_MESSAGE",
    "DashboardService",
    "DashboardReport",
    "CoachService",
    "CoachReport",
    "FALLBACK_MESSAGE",
    "summarize_trades",
    "JournalExporter",
    "ExportConfig",
    "trades_frame",
    "equity_frame",
]
