"""Base Repository: Abstract interface for journal data access.

Repository Pattern provides:
- Abstraction over the key-value store file
- Caching of decoded values, invalidated on every write
- Consistent error handling (RepositoryError carries the file path)
- Easy testing via dependency injection of the store
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from tradelog.infrastructure.repositories.store import KeyValueStore

T = TypeVar("T")


class RepositoryError(Exception):
    """Exception raised when repository operations fail."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(f"{message}" + (f" (path: {path})" if path else ""))


class Repository(ABC, Generic[T]):
    """Abstract base class for repositories.

    All repositories should:
    1. Provide a get_all() method
    2. Handle caching internally
    3. Raise RepositoryError on failures
    """

    @abstractmethod
    def get_all(self) -> T:
        """Retrieve all data from the repository.

        Raises:
            RepositoryError: If data cannot be loaded
        """

    @abstractmethod
    def clear_cache(self) -> None:
        """Clear any cached data."""


class StoreRepository(Repository[T]):
    """Repository whose data lives under one key of a KeyValueStore.

    Subclasses decode the raw value in _decode() and encode it back in
    _encode(); this base class handles the cache and the store round trip.
    """

    key: str = ""

    def __init__(self, store: "KeyValueStore"):
        self._store = store
        self._cache: T | None = None

    @property
    def path(self) -> str:
        """Location of the backing store (for error messages)."""
        return str(self._store.path)

    def get_all(self) -> T:
        if self._cache is None:
            self._cache = self._decode(self._store.get_item(self.key))
        return self._cache

    def _write(self, value: T) -> None:
        self._store.set_item(self.key, self._encode(value))
        self._cache = None

    def clear_cache(self) -> None:
        self._cache = None

    @abstractmethod
    def _decode(self, raw: object) -> T:
        """Turn the stored JSON value (None if absent) into the domain value."""

    @abstractmethod
    def _encode(self, value: T) -> object:
        """Turn the domain value into a JSON-serializable value."""
