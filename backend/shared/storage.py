"""
Persistent key-value storage.

The session core keeps its durable state (PIN session, store selection)
in a flat string-to-string store, the same shape as a browser's
localStorage. Two back ends:
- MemoryStorage: process-local dict, for tests and throwaway sessions
- FileStorage: a single JSON document on disk, shared by every process
  on the device and re-read on every access
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Mapping, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStorage(Protocol):
    """Synchronous string key-value store."""

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        ...

    def remove_item(self, key: str) -> None:
        """Delete a key. Deleting a missing key is not an error."""
        ...

    def apply(self, updates: Mapping[str, Optional[str]]) -> None:
        """
        Apply several writes as one operation.

        A None value deletes the key. Implementations must make the whole
        batch visible at once, so readers never see half of it.
        """
        ...


class MemoryStorage:
    """In-memory storage. Nothing survives the process."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def apply(self, updates: Mapping[str, Optional[str]]) -> None:
        for key, value in updates.items():
            if value is None:
                self._data.pop(key, None)
            else:
                self._data[key] = value

    def keys(self) -> list[str]:
        return list(self._data)


class FileStorage:
    """
    Storage backed by one JSON object on disk.

    Every read loads the file and every write replaces it atomically
    (temp file + os.replace), so a crash mid-write leaves the previous
    document intact. Writes are last-writer-wins across processes.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (ValueError, OSError):
            logger.warning(f"Storage file {self._path} is unreadable, starting empty")
            return {}
        if not isinstance(payload, dict):
            logger.warning(f"Storage file {self._path} is not a JSON object, starting empty")
            return {}
        return {str(k): v for k, v in payload.items() if isinstance(v, str)}

    def _save(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", dir=str(self._path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        self.apply({key: value})

    def remove_item(self, key: str) -> None:
        self.apply({key: None})

    def apply(self, updates: Mapping[str, Optional[str]]) -> None:
        data = self._load()
        changed = False
        for key, value in updates.items():
            if value is None:
                if key in data:
                    del data[key]
                    changed = True
            elif data.get(key) != value:
                data[key] = value
                changed = True
        if changed:
            self._save(data)
