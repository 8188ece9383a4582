"""Data repositories for the trade journal.

Provides abstracted data access through the Repository pattern:
- KeyValueStore: JSON file with local-storage semantics
- TradeRepository: The persisted trade collection
- SettingsRepository: The active role
"""

from tradelog.infrastructure.repositories.base import (
    Repository,
    RepositoryError,
    StoreRepository,
)
from tradelog.infrastructure.repositories.store import KeyValueStore
from tradelog.infrastructure.repositories.trade_repo import TradeRepository, TRADES_KEY
from tradelog.infrastructure.repositories.settings_repo import (
    SettingsRepository,
    Role,
    ROLES,
    ROLE_KEY,
)

__all__ = [
    "Repository",
    "RepositoryError",
    "StoreRepository",
    "KeyValueStore",
    "TradeRepository",
    "TRADES_KEY",
    "SettingsRepository",
    "Role",
    "ROLES",
    "ROLE_KEY",
]
