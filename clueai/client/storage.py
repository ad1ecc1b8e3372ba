"""
clueai/client/storage.py

Key/value storage capability injected into the history and theme stores.

The browser app kept both under fixed localStorage keys. Here the stores
receive any object with ``read`` / ``write`` / ``clear``, so the workflow is
testable without touching disk:

    storage = JsonFileStorage(settings.client_state_path)
    history = HistoryStore(storage)

Values are opaque strings (the stores put JSON in them). Implementations
raise ``StorageError`` on I/O failures; the stores catch and log it.
"""

import json
from pathlib import Path
from typing import Protocol

from clueai.core.logging import get_logger

logger = get_logger(__name__)


class StorageError(Exception):
    """Raised when persisted state cannot be read or written."""

    pass


class KeyValueStorage(Protocol):
    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...

    def clear(self, key: str) -> None: ...


class MemoryStorage:
    """Process-local storage; nothing survives a restart."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value

    def clear(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStorage:
    """All keys in one JSON object on disk, rewritten on every change.

    The file (and its parent directory) is created on first write. A missing
    file reads as empty; an unreadable or non-object file raises
    ``StorageError``.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Failed to read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"{self.path} does not hold a JSON object")
        return data

    def _dump(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as exc:
            raise StorageError(f"Failed to write {self.path}: {exc}") from exc

    def read(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def write(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)
        logger.debug("storage_written", path=str(self.path), key=key, size=len(value))

    def clear(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)
            logger.debug("storage_cleared", path=str(self.path), key=key)
