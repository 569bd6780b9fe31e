"""
Persistence - Durable storage and import/export of team collections.

The saved collection is the only persistent data; reference tables are
bundled with the package.
"""

from .adapter import (
    EXPORT_FILENAME,
    STORAGE_KEY,
    EnvelopeFormatError,
    ImportValidationError,
    PersistenceAdapter,
    SchemaVersionMismatch,
    TeamValidationError,
)
from .schemas import EnvelopeMeta, SaveEnvelope, SlotRecord, TeamRecord
from .storage import FileStorage, MemoryStorage, StoragePort

__all__ = [
    "EXPORT_FILENAME",
    "STORAGE_KEY",
    "EnvelopeFormatError",
    "ImportValidationError",
    "PersistenceAdapter",
    "SchemaVersionMismatch",
    "TeamValidationError",
    "EnvelopeMeta",
    "SaveEnvelope",
    "SlotRecord",
    "TeamRecord",
    "FileStorage",
    "MemoryStorage",
    "StoragePort",
]
