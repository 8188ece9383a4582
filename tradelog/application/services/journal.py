"""Journal Store: The application state object for the trade journal.

Owns the in-memory trade collection for the lifetime of a session and is
the only writer to the repositories. Every successful mutation:
1. Re-prices the trade (cached pnl / pnl_percentage)
2. Writes the whole collection through TradeRepository
3. Reloads the collection and notifies subscribers

Views subscribe to the store instead of sharing a global trades list;
the metrics are re-derived from the snapshot each callback receives.

Access gate:
- GUEST role is view-only (mutations raise PermissionError)
- reset() requires the admin PIN from JournalConfig
"""

import logging
from typing import Callable

from tradelog.domain.models import Trade
from tradelog.domain.pnl import price_trade
from tradelog.infrastructure import (
    DEFAULT_CONFIG,
    DEFAULT_PATHS,
    JournalConfig,
    JournalPaths,
    KeyValueStore,
    SettingsRepository,
    TradeRepository,
)

logger = logging.getLogger(__name__)

Listener = Callable[[tuple[Trade, ...]], None]

GUEST_DENIED_MESSAGE = "Guest accounts are restricted to view-only access."


class JournalStore:
    """Session state: trades, role and change notification.

    Example:
        >>> store = JournalStore.open(paths)
        >>> unsubscribe = store.subscribe(lambda trades: print(len(trades)))
        >>> store.save_trade(trade)
        1
        >>> unsubscribe()
    """

    def __init__(
        self,
        trade_repo: TradeRepository,
        settings_repo: SettingsRepository,
        config: JournalConfig = DEFAULT_CONFIG,
    ):
        """Initialize the store and load the persisted state.

        Args:
            trade_repo: Repository holding the trade collection
            settings_repo: Repository holding the active role
            config: Journal policy configuration
        """
        self._trade_repo = trade_repo
        self._settings_repo = settings_repo
        self._config = config
        self._listeners: list[Listener] = []
        self._trades: tuple[Trade, ...] = ()
        self.refresh()

    @classmethod
    def open(
        cls,
        paths: JournalPaths = DEFAULT_PATHS,
        config: JournalConfig = DEFAULT_CONFIG,
    ) -> "JournalStore":
        """Open the journal stored under paths, creating its directories."""
        if paths.validate():
            logger.info("starting a new journal at %s", paths.root)
        paths.ensure_dirs()
        store = KeyValueStore(paths.store_file)
        return cls(TradeRepository(store), SettingsRepository(store), config)

    # --- State ---

    @property
    def trades(self) -> tuple[Trade, ...]:
        """Current collection in insertion order (read-only snapshot)."""
        return self._trades

    @property
    def role(self) -> str:
        return self._settings_repo.get_role()

    @property
    def can_edit(self) -> bool:
        return self.role != "GUEST"

    @property
    def config(self) -> JournalConfig:
        return self._config

    def get_trade(self, trade_id: str) -> Trade | None:
        for trade in self._trades:
            if trade.id == trade_id:
                return trade
        return None

    def refresh(self) -> None:
        """Reload the collection from storage (no notification)."""
        self._trade_repo.clear_cache()
        self._trades = tuple(self._trade_repo.get_all())

    # --- Subscription ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run with the new trades after each change.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self) -> None:
        self.refresh()
        for listener in list(self._listeners):
            listener(self._trades)

    # --- Commands ---

    def _require_editor(self) -> None:
        if not self.can_edit:
            raise PermissionError(GUEST_DENIED_MESSAGE)

    def save_trade(self, trade: Trade) -> Trade:
        """Add a new trade or replace an existing one with the same id.

        Returns:
            The stored trade with refreshed cached PNL fields

        Raises:
            PermissionError: If the active role is GUEST
        """
        self._require_editor()
        priced = price_trade(trade)
        replaced = self._trade_repo.upsert(priced)
        logger.info("%s trade %s (%s)", "updated" if replaced else "added", priced.id, priced.symbol)
        self._commit()
        return priced

    def delete_trade(self, trade_id: str) -> bool:
        """Delete a trade by id.

        Returns:
            True if a trade was removed, False if the id was unknown

        Raises:
            PermissionError: If the active role is GUEST
        """
        self._require_editor()
        removed = self._trade_repo.delete(trade_id)
        if not removed:
            logger.info("delete ignored, unknown trade %s", trade_id)
            return False
        logger.info("deleted trade %s", trade_id)
        self._commit()
        return True

    def set_role(self, role: str) -> None:
        """Switch between USER and GUEST.

        Raises:
            ValueError: If role is not USER or GUEST
        """
        self._settings_repo.set_role(role)
        logger.info("role set to %s", role)

    def check_pin(self, pin: str) -> bool:
        """Check the admin PIN."""
        return pin == self._config.admin_pin

    def reset(self, pin: str) -> None:
        """Wipe every trade and restore the default role.

        Raises:
            PermissionError: If the PIN is wrong
        """
        if not self.check_pin(pin):
            raise PermissionError("Access denied: wrong admin PIN.")
        self._trade_repo.clear()
        self._settings_repo.set_role("USER")
        logger.warning("journal reset, all trades removed")
        self._commit()
