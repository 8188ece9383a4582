"""Key-Value Store: A JSON file standing in for browser local storage.

The whole file is one JSON object mapping string keys to JSON values.
Every write rewrites the file through a temporary sibling and an atomic
replace, so a crash mid-write leaves the previous version intact.

Single-writer only: there is no locking between processes.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from tradelog.infrastructure.repositories.base import RepositoryError

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Persistent string-keyed store backed by a JSON file.

    Example:
        >>> store = KeyValueStore(Path("data/tradelog.json"))
        >>> store.set_item("tradelog_db_role", "USER")
        >>> store.get_item("tradelog_db_role")
        'USER'
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise RepositoryError(f"Store file is not valid JSON: {e}", str(self.path))
        except OSError as e:
            raise RepositoryError(f"Failed to read store: {e}", str(self.path))

        if not isinstance(data, dict):
            raise RepositoryError("Store file must contain a JSON object", str(self.path))
        return data

    def _dump(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".tradelog-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise RepositoryError(f"Failed to write store: {e}", str(self.path))
        logger.debug("wrote %d keys to %s", len(data), self.path)

    def get_item(self, key: str, default: Any = None) -> Any:
        """Value stored under key, or default."""
        return self._load().get(key, default)

    def set_item(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under key."""
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove_item(self, key: str) -> None:
        """Delete key if present."""
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)

    def keys(self) -> list[str]:
        return list(self._load().keys())

    def clear(self) -> None:
        """Remove every key."""
        self._dump({})
