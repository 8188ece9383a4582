"""Settings Repository: Persisted journal settings (active role)."""

from typing import Literal

from tradelog.infrastructure.repositories.base import StoreRepository, RepositoryError
from tradelog.infrastructure.repositories.store import KeyValueStore

Role = Literal["USER", "GUEST"]

ROLES: tuple[str, ...] = ("USER", "GUEST")
ROLE_KEY = "tradelog_db_role"


class SettingsRepository(StoreRepository[str]):
    """Repository for the active role.

    USER may edit the journal; GUEST is view-only.

    Example:
        >>> repo = SettingsRepository(store)
        >>> repo.get_role()
        'USER'
    """

    key = ROLE_KEY

    def __init__(self, store: KeyValueStore):
        super().__init__(store)

    def _decode(self, raw: object) -> str:
        if raw is None:
            return "USER"
        if raw not in ROLES:
            raise RepositoryError(f"Unknown role stored: {raw!r}", self.path)
        return str(raw)

    def _encode(self, value: str) -> object:
        return value

    def get_role(self) -> Role:
        return self.get_all()

    def set_role(self, role: str) -> None:
        """Persist the active role.

        Raises:
            ValueError: If role is not USER or GUEST
        """
        if role not in ROLES:
            raise ValueError(f"role must be one of {ROLES}, got: {role}")
        self._write(role)
