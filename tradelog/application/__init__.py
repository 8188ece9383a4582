"""Application Layer: Use cases and service orchestration.

This layer contains:
- services/: Business logic orchestration
  - journal.py: Journal state store and commands
  - dashboard.py: Report assembly for the views
  - coach.py: Narrative critique
  - export.py: Table and archive exports
"""

from tradelog.application.services import (
    JournalStore,
    DashboardService,
    DashboardReport,
    CoachService,
    CoachReport,
    JournalExporter,
    ExportConfig,
)

__all__ = [
    "JournalStore",
    "DashboardService",
    "DashboardReport",
    "CoachService",
    "CoachReport",
    "JournalExporter",
    "ExportConfig",
]
