"""
Draft recovery for notes that have not been saved yet.
"""

from ainote.drafts.storage import DraftStorage, NoteDraft, draft_key
from ainote.drafts.store import (
    KeyValueStore,
    MemoryKeyValueStore,
    SQLiteKeyValueStore,
    StorageError,
)

__all__ = [
    "DraftStorage",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "NoteDraft",
    "SQLiteKeyValueStore",
    "StorageError",
    "draft_key",
]
