"""
Selections Context

Responsibilities:
- Tracks entries the user flagged as selected, scoped to the context's storage key
- Persists one selection record per entry family to durable storage
- Falls back to in-memory storage when the durable backend fails

Owns: Selection records, storage backends
Never: Decides which entries apply to a context (asks the targeting context)
"""

from compass.contexts.selections.selection_store import SelectionStore, record_key
from compass.contexts.selections.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
)

__all__ = [
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
    "SelectionStore",
    "record_key",
]
