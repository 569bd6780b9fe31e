"""
Storage Ports - Durable key/value stores for serialized records.

The persistence adapter writes whole serialized records by key; a store
never interprets them.
"""

from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

TEAMPLANNER_DATA_DIR = os.getenv("TEAMPLANNER_DATA_DIR", None)


def default_data_dir() -> Path:
    if TEAMPLANNER_DATA_DIR:
        return Path(TEAMPLANNER_DATA_DIR).expanduser()
    return Path.home() / ".teamplanner"


class StoragePort(Protocol):
    """A durable store of text records by key."""

    def read(self, key: str) -> str | None:
        """Get the record for a key, or None if there is none."""
        ...

    def write(self, key: str, data: str) -> None:
        """Overwrite the record for a key."""
        ...


class FileStorage:
    """
    File-based store: one JSON file per key.

    Usage:
        storage = FileStorage("~/.teamplanner")
        storage.write("teams", "[]")
        storage.read("teams")  # "[]"
    """

    def __init__(self, directory: str | Path | None = None):
        if directory is None:
            directory = default_data_dir()
        self.directory = Path(directory).expanduser()

    def read(self, key: str) -> str | None:
        path = self._get_path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, data: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._get_path(key)
        path.write_text(data, encoding="utf-8")
        logger.info("Wrote %s", path)

    def _get_path(self, key: str) -> Path:
        return self.directory / f"{key}.json"


class MemoryStorage:
    """In-process store, used by tests and one-shot sessions."""

    def __init__(self, records: dict[str, str] | None = None):
        self.records = dict(records or {})
        self.writes = 0

    def read(self, key: str) -> str | None:
        return self.records.get(key)

    def write(self, key: str, data: str) -> None:
        self.records[key] = data
        self.writes += 1
