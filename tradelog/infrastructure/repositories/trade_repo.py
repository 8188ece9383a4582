"""Trade Repository: Access to the persisted trade collection.

The collection is stored as one JSON list under the "tradelog_ai_trades"
key of the KeyValueStore. List order is insertion order, which is the
canonical order of entry. All operations are whole-collection: read the
list, change it, write it back.

Journals written by the older single-page app keep their trades under
"tradelog_db_trades" (records with qty/date keys). They are moved to the
current key the first time the collection is loaded.
"""

import logging

from tradelog.domain.models import Trade
from tradelog.infrastructure.repositories.base import StoreRepository, RepositoryError
from tradelog.infrastructure.repositories.store import KeyValueStore

logger = logging.getLogger(__name__)

TRADES_KEY = "tradelog_ai_trades"
LEGACY_TRADES_KEY = "tradelog_db_trades"


class TradeRepository(StoreRepository[list[Trade]]):
    """Repository for journal trades.

    Example:
        >>> repo = TradeRepository(KeyValueStore(paths.store_file))
        >>> repo.upsert(trade)
        >>> [t.symbol for t in repo.get_all()]
        ['AAPL']
        >>> repo.delete(trade.id)
        True
    """

    key = TRADES_KEY

    def __init__(self, store: KeyValueStore):
        super().__init__(store)

    def _decode(self, raw: object) -> list[Trade]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise RepositoryError(f"'{self.key}' must be a JSON list", self.path)

        trades = []
        for i, record in enumerate(raw):
            try:
                trades.append(Trade.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                raise RepositoryError(f"Invalid trade record at index {i}: {e}", self.path)
        logger.debug("loaded %d trades from %s", len(trades), self.path)
        return trades

    def _encode(self, value: list[Trade]) -> object:
        return [t.to_dict() for t in value]

    def get_all(self) -> list[Trade]:
        """Load all trades in insertion order.

        Returns:
            A fresh list; mutating it does not affect the repository

        Raises:
            RepositoryError: If the store is unreadable or holds an invalid record
        """
        if self._cache is None:
            self._migrate_legacy()
        return list(super().get_all())

    def _migrate_legacy(self) -> None:
        """Move trades stored under the legacy key to the current key.

        Only runs when the current key is absent, so a journal that has
        already been migrated (or started fresh) is never overwritten.
        """
        keys = self._store.keys()
        if LEGACY_TRADES_KEY not in keys or self.key in keys:
            return
        trades = self._decode(self._store.get_item(LEGACY_TRADES_KEY))
        self.replace_all(trades)
        self._store.remove_item(LEGACY_TRADES_KEY)
        logger.info("migrated %d trades from %s", len(trades), LEGACY_TRADES_KEY)

    def get(self, trade_id: str) -> Trade | None:
        """Get a single trade by id, or None."""
        for trade in self.get_all():
            if trade.id == trade_id:
                return trade
        return None

    def upsert(self, trade: Trade) -> bool:
        """Insert a new trade or replace the one with the same id in place.

        Returns:
            True if an existing trade was replaced, False if appended
        """
        trades = self.get_all()
        for i, existing in enumerate(trades):
            if existing.id == trade.id:
                trades[i] = trade
                self._write(trades)
                return True
        trades.append(trade)
        self._write(trades)
        return False

    def delete(self, trade_id: str) -> bool:
        """Remove a trade by id.

        Returns:
            True if a trade was removed, False if the id was unknown
        """
        trades = self.get_all()
        remaining = [t for t in trades if t.id != trade_id]
        if len(remaining) == len(trades):
            return False
        self._write(remaining)
        return True

    def replace_all(self, trades: list[Trade]) -> None:
        """Overwrite the whole collection."""
        ids = [t.id for t in trades]
        if len(set(ids)) != len(ids):
            raise RepositoryError("Trade ids must be unique", self.path)
        self._write(list(trades))

    def clear(self) -> None:
        """Remove every trade."""
        self._store.remove_item(self.key)
        self.clear_cache()
