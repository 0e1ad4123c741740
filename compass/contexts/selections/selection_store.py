"""
Persistent Selection Store

Tracks which resolved entries the user has flagged as selected. Selections are scoped
to the storage key derived from the current context ("{vertical}-{lob}"), so picks
made for banking/capital-markets never show up under insurance/claims and come back
unchanged when the user switches back.

One record per entry family is kept in durable storage:

    "selected_personas": {"banking-capital-markets": ["banking-trading-ops-head"], ...}

Every change writes the full record immediately. If the storage backend fails, the
store logs once and keeps working in memory for the rest of the session.
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional

from compass.contexts.catalog.catalog import ContentCatalog
from compass.contexts.catalog.entries import CatalogEntry, EntryFamily
from compass.contexts.selections.logger import (
    _log_debug,
    log_selection_change,
    log_storage_degraded,
)
from compass.contexts.selections.storage import InMemoryStorage, KeyValueStorage
from compass.contexts.targeting.defaults import get_generic_entries
from compass.contexts.targeting.resolver import apply_context_notes, resolved_ids
from compass.contexts.targeting.selection_context import SelectionContext
from compass.utils.event_logging import log_guide_event

SelectionRecord = Dict[str, List[str]]


def record_key(family: EntryFamily) -> str:
    """Durable storage key holding a family's selection record."""
    return f"selected_{EntryFamily.parse(family).value}"


class SelectionStore:
    """
    Context-scoped selection state for one entry family.

    The catalog and context are read through providers on every call, so the store
    always answers against the latest catalog and the current storage key.

    Args:
        family: Entry family whose selections this store tracks
        catalog_provider: Returns the current ContentCatalog
        context_provider: Returns the current SelectionContext
        storage: Durable backend (defaults to in-memory)
        events_file: Guide event log override

    Example:
        store = SelectionStore(EntryFamily.PERSONAS, lambda: catalog, lambda: context)
        store.toggle("banking-coo")   # True, now selected
        store.toggle("banking-coo")   # False, deselected again
    """

    def __init__(
        self,
        family: EntryFamily,
        catalog_provider: Callable[[], ContentCatalog],
        context_provider: Callable[[], SelectionContext],
        storage: Optional[KeyValueStorage] = None,
        events_file: Optional[Path] = None,
    ):
        self.family = EntryFamily.parse(family)
        self._catalog_provider = catalog_provider
        self._context_provider = context_provider
        self._storage = storage if storage is not None else InMemoryStorage()
        self._events_file = events_file
        self.degraded = False
        self._record: SelectionRecord = self._load()

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def storage_key(self) -> str:
        """Storage key for the current context."""
        return self._context_provider().storage_key

    def selected_ids(self, key: Optional[str] = None) -> List[str]:
        """Stored identifiers under key (current context by default), stale ones included."""
        return list(self._record.get(key or self.storage_key, []))

    def is_selected(self, entry_id: str) -> bool:
        """True if entry_id is selected under the current context's key."""
        return entry_id in self._record.get(self.storage_key, [])

    def get_selected(self) -> List[CatalogEntry]:
        """
        Selected entries under the current context, in selection order.

        Identifiers that no longer match a catalog entry are skipped (they stay in
        storage untouched).
        """
        context = self._context_provider()
        catalog = self._catalog_provider()
        entries = []
        for entry_id in self._record.get(context.storage_key, []):
            entry = self._lookup(catalog, entry_id)
            if entry is None:
                _log_debug(f"Skipping stale {self.family.value} selection '{entry_id}'")
                continue
            entries.append(apply_context_notes(entry, context))
        return entries

    def records(self) -> SelectionRecord:
        """Copy of the full record (every storage key)."""
        return {key: list(ids) for key, ids in self._record.items()}

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def toggle(self, entry_id: str) -> bool:
        """
        Flip the selection state of entry_id under the current context.

        Adding requires the entry to resolve under the current context; otherwise the
        call is a logged no-op. Removing is always allowed.

        Returns:
            True if the entry is selected after the call, False otherwise
        """
        context = self._context_provider()
        key = context.storage_key
        selected = self._record.get(key, [])

        if entry_id in selected:
            remaining = [existing for existing in selected if existing != entry_id]
            if remaining:
                self._record[key] = remaining
            else:
                del self._record[key]
            self._changed(key, entry_id, selected=False)
            return False

        if entry_id not in resolved_ids(self._catalog_provider(), self.family, context):
            _log_debug(
                f"Ignoring toggle of {self.family.value} '{entry_id}': "
                f"not resolved under '{key}'"
            )
            return False

        self._record[key] = selected + [entry_id]
        self._changed(key, entry_id, selected=True)
        return True

    def clear_all(self) -> int:
        """
        Clear selections under the current context's key.

        Returns:
            Number of identifiers removed
        """
        key = self.storage_key
        removed = self._record.pop(key, [])
        if removed:
            self._flush()
            log_guide_event(
                "selections_cleared",
                source="selections",
                events_file=self._events_file,
                family=self.family.value,
                storage_key=key,
                count=len(removed),
            )
        return len(removed)

    def reset(self) -> None:
        """Forget every selection of this family under every key."""
        self._record = {}
        self._flush()

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _lookup(self, catalog: ContentCatalog, entry_id: str) -> Optional[CatalogEntry]:
        entry = catalog.find_entry(self.family, entry_id)
        if entry is not None:
            return entry
        for generic in get_generic_entries(self.family):
            if generic.id == entry_id:
                return generic
        return None

    def _changed(self, key: str, entry_id: str, selected: bool) -> None:
        self._flush()
        log_selection_change(self.family.value, key, entry_id, selected)
        log_guide_event(
            "selection_toggled",
            source="selections",
            events_file=self._events_file,
            family=self.family.value,
            entry_id=entry_id,
            storage_key=key,
            selected=selected,
        )

    def _load(self) -> SelectionRecord:
        try:
            raw = self._storage.get_item(record_key(self.family))
        except (OSError, ValueError) as e:
            self._degrade(e)
            return {}

        if not isinstance(raw, dict):
            # Nothing stored yet (first run) or an unusable record
            return {}

        record: SelectionRecord = {}
        for key, ids in raw.items():
            if isinstance(ids, list):
                record[str(key)] = [str(entry_id) for entry_id in ids]
        return record

    def _flush(self) -> None:
        try:
            self._storage.set_item(record_key(self.family), self.records())
        except (OSError, ValueError) as e:
            self._degrade(e)
            self._storage.set_item(record_key(self.family), self.records())

    def _degrade(self, error: Exception) -> None:
        log_storage_degraded(self.family.value, error)
        self._storage = InMemoryStorage()
        self.degraded = True
