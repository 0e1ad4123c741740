"""Tests for context-scoped persistent selections."""

from pathlib import Path

import pytest

from compass.contexts.catalog.catalog import ContentCatalog
from compass.contexts.catalog.entries import EntryFamily
from compass.contexts.selections.selection_store import SelectionStore, record_key
from compass.contexts.selections.storage import InMemoryStorage, JsonFileStorage, KeyValueStorage
from compass.contexts.targeting.selection_context import SelectionContext
from compass.utils.event_logging import get_recent_events


class _Holder:
    """Mutable holder standing in for the guide's current catalog and context."""

    def __init__(self, context=None):
        self.catalog = ContentCatalog.from_dict(
            {
                "personas": {
                    "banking": {
                        "capital-markets": [
                            {"id": "b-trader", "title": "Trading Ops"},
                            {"id": "b-middle", "title": "Middle Office"},
                        ],
                        "operations": [{"id": "b-coo", "title": "COO"}],
                    },
                    "insurance": {"claims": [{"id": "i-claims", "title": "Claims"}]},
                    "general": {"it": [{"id": "g-cio", "title": "CIO"}]},
                },
                "resources": {
                    "banking": {
                        "operations": [
                            {
                                "id": "b-roi",
                                "title": "ROI",
                                "deployment_context": {"cloud": "Cloud note"},
                            }
                        ]
                    }
                },
            }
        )
        self.context = context or SelectionContext(vertical="banking", lob="capital-markets")

    def store(self, family=EntryFamily.PERSONAS, storage=None, events_file=None):
        return SelectionStore(
            family,
            catalog_provider=lambda: self.catalog,
            context_provider=lambda: self.context,
            storage=storage,
            events_file=events_file,
        )


class _FailingStorage(KeyValueStorage):
    """Backend that is unavailable for reads and/or writes."""

    def __init__(self, fail_reads=False, fail_writes=True):
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def get_item(self, key):
        if self.fail_reads:
            raise OSError("storage unavailable")
        return None

    def set_item(self, key, value):
        if self.fail_writes:
            raise OSError("disk full")

    def remove_item(self, key):
        pass


@pytest.mark.unit
def test_toggle_is_its_own_inverse():
    """Test toggling the same id twice restores the previous state."""
    holder = _Holder()
    store = holder.store()
    before = store.records()

    assert store.toggle("b-trader") is True
    assert store.is_selected("b-trader")
    assert store.toggle("b-trader") is False
    assert not store.is_selected("b-trader")
    assert store.records() == before


@pytest.mark.unit
def test_selections_are_scoped_by_storage_key():
    """Test selections under one context don't leak into another and come back."""
    holder = _Holder()
    store = holder.store()
    store.toggle("b-trader")
    store.toggle("b-middle")

    holder.context = SelectionContext(vertical="insurance", lob="claims")
    assert store.get_selected() == []
    assert not store.is_selected("b-trader")

    holder.context = SelectionContext(vertical="banking", lob="capital-markets")
    assert [entry.id for entry in store.get_selected()] == ["b-trader", "b-middle"]


@pytest.mark.unit
def test_unresolved_entry_cannot_be_added():
    """Test adding an id that doesn't resolve under the context is a no-op."""
    holder = _Holder(SelectionContext(vertical="insurance", lob="claims"))
    store = holder.store()
    assert store.toggle("b-trader") is False
    assert store.records() == {}


@pytest.mark.unit
def test_stale_ids_are_skipped_but_kept():
    """Test ids removed from the catalog are skipped on read and stay in storage."""
    holder = _Holder()
    store = holder.store()
    store.toggle("b-trader")
    store.toggle("b-middle")

    holder.catalog.remove_entry(EntryFamily.PERSONAS, "b-trader")
    assert [entry.id for entry in store.get_selected()] == ["b-middle"]
    assert store.selected_ids() == ["b-trader", "b-middle"]

    # Deselecting a stale id is still allowed
    assert store.toggle("b-trader") is False
    assert store.selected_ids() == ["b-middle"]


@pytest.mark.unit
def test_get_selected_applies_context_notes():
    """Test selected resources carry the notes for the current context."""
    holder = _Holder(SelectionContext(vertical="banking", deployment="cloud"))
    store = holder.store(EntryFamily.RESOURCES)
    assert store.toggle("b-roi") is True
    assert store.get_selected()[0].active_deployment_note == "Cloud note"


@pytest.mark.unit
def test_generic_fallback_entries_can_be_selected():
    """Test generic fallback entries resolve and read back like catalog entries."""
    holder = _Holder(SelectionContext(vertical="retail"))
    holder.catalog = ContentCatalog()
    store = holder.store()
    assert store.toggle("generic-executive-sponsor") is True
    assert [entry.id for entry in store.get_selected()] == ["generic-executive-sponsor"]


@pytest.mark.unit
def test_clear_all_only_clears_current_key():
    """Test clear_all() removes the current key's selections and nothing else."""
    holder = _Holder()
    store = holder.store()
    store.toggle("b-trader")

    holder.context = SelectionContext(vertical="banking", lob="operations")
    store.toggle("b-coo")
    assert store.clear_all() == 1
    assert store.clear_all() == 0
    assert store.records() == {"banking-capital-markets": ["b-trader"]}


@pytest.mark.unit
def test_selections_persist_across_instances(tmp_path: Path):
    """Test a new store reads back what a previous one wrote."""
    path = tmp_path / "selections.json"
    holder = _Holder()
    holder.store(storage=JsonFileStorage(path)).toggle("b-trader")

    reloaded = holder.store(storage=JsonFileStorage(path))
    assert reloaded.selected_ids() == ["b-trader"]
    assert JsonFileStorage(path).get_item(record_key(EntryFamily.PERSONAS)) == {
        "banking-capital-markets": ["b-trader"]
    }


@pytest.mark.unit
def test_corrupt_file_degrades_to_memory(tmp_path: Path):
    """Test an unreadable record starts an in-memory session instead of failing."""
    path = tmp_path / "selections.json"
    path.write_text("{broken")
    store = _Holder().store(storage=JsonFileStorage(path))

    assert store.degraded
    assert store.toggle("b-trader") is True
    assert store.is_selected("b-trader")


@pytest.mark.unit
def test_write_failure_degrades_to_memory():
    """Test a failing write switches to memory and keeps the selection."""
    store = _Holder().store(storage=_FailingStorage(fail_writes=True))
    assert not store.degraded

    assert store.toggle("b-trader") is True
    assert store.degraded
    assert store.is_selected("b-trader")
    assert store.toggle("b-middle") is True
    assert store.selected_ids() == ["b-trader", "b-middle"]


@pytest.mark.unit
def test_read_failure_degrades_to_memory():
    """Test a failing read at startup leaves an empty in-memory store."""
    store = _Holder().store(storage=_FailingStorage(fail_reads=True, fail_writes=False))
    assert store.degraded
    assert store.records() == {}


@pytest.mark.unit
def test_malformed_record_is_ignored():
    """Test non-list values in a stored record are dropped on load."""
    storage = InMemoryStorage(
        {record_key(EntryFamily.PERSONAS): {"banking-capital-markets": ["b-trader"], "bad": "x"}}
    )
    store = _Holder().store(storage=storage)
    assert store.records() == {"banking-capital-markets": ["b-trader"]}


@pytest.mark.unit
def test_toggle_events_logged(tmp_path: Path):
    """Test toggles and clears append guide events."""
    events = tmp_path / "events.jsonl"
    store = _Holder().store(events_file=events)
    store.toggle("b-trader")
    store.clear_all()

    logged = get_recent_events(events_file=events)
    assert [e["event_type"] for e in logged] == ["selection_toggled", "selections_cleared"]
    assert logged[0]["storage_key"] == "banking-capital-markets"
    assert logged[0]["selected"] is True
