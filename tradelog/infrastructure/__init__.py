"""Infrastructure layer for the trade journal.

Contains:
- config: Data paths and journal policy configuration
- repositories: Local key-value storage and data access
- insights: Gemini-backed narrative critique
"""

from tradelog.infrastructure.config import (
    JournalPaths,
    JournalConfig,
    DEFAULT_PATHS,
    DEFAULT_CONFIG,
)
from tradelog.infrastructure.repositories import (
    Repository,
    RepositoryError,
    KeyValueStore,
    TradeRepository,
    SettingsRepository,
)
from tradelog.infrastructure.insights import (
    GeminiInsightRequester,
    InsightError,
)

__all__ = [
    # Config
    "JournalPaths",
    "JournalConfig",
    "DEFAULT_PATHS",
    "DEFAULT_CONFIG",
    # Repositories
    "Repository",
    "RepositoryError",
    "KeyValueStore",
    "TradeRepository",
    "SettingsRepository",
    # Insights
    "GeminiInsightRequester",
    "InsightError",
]
