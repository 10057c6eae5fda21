# Path: core/storage/backends.py
# Purpose: Provide the key-value contract records are persisted through.
# Layer: core/storage.
# Details: One JSON document per key on disk, or a dict in memory for tests and ephemeral sessions.

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Protocol


class KeyValueStorage(Protocol):
    """Minimal load/save contract for persisted state."""

    def read(self, key: str) -> Optional[str]:
        """Return the stored text for ``key`` or None when nothing was saved yet."""

    def write(self, key: str, text: str) -> None:
        """Persist ``text`` under ``key``, replacing any previous value."""


class JsonFileStorage:
    """Stores each key as ``<directory>/<key>.json``."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        safe = "".join(ch if ch.isalnum() or ch in "_-" else "_" for ch in key)
        return self.directory / f"{safe}.json"

    def read(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, text: str) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(path)


class MemoryStorage:
    """Dict-backed storage."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def write(self, key: str, text: str) -> None:
        self.data[key] = text
