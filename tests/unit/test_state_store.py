"""Tests for the synchronous publish/subscribe state store."""

import pytest

from compass.utils.state_store import StateStore


@pytest.mark.unit
def test_get_returns_initial_and_default():
    """Test get() for initial values and unset keys."""
    store = StateStore({"lob": "finance"})
    assert store.get("lob") == "finance"
    assert store.get("vertical") is None
    assert store.get("vertical", "general") == "general"


@pytest.mark.unit
def test_listener_receives_new_old_and_key():
    """Test listeners are called with (new, old, key) before set() returns."""
    store = StateStore({"lob": "finance"})
    calls = []
    store.subscribe("lob", lambda new, old, key: calls.append((new, old, key)))

    assert store.set("lob", "hr") is True
    assert calls == [("hr", "finance", "lob")]


@pytest.mark.unit
def test_listeners_run_in_registration_order():
    """Test notification order follows subscription order."""
    store = StateStore()
    order = []
    store.subscribe("k", lambda *_: order.append("first"))
    store.subscribe("k", lambda *_: order.append("second"))
    store.set("k", 1)
    assert order == ["first", "second"]


@pytest.mark.unit
def test_unsubscribe_removes_single_registration():
    """Test each unsubscribe handle removes exactly one registration."""
    store = StateStore()
    calls = []

    def listener(new, old, key):
        calls.append(new)

    first = store.subscribe("k", listener)
    store.subscribe("k", listener)
    assert store.listener_count("k") == 2

    first()
    first()
    assert store.listener_count("k") == 1

    store.set("k", "x")
    assert calls == ["x"]


@pytest.mark.unit
def test_nested_set_of_same_key_is_dropped():
    """Test a listener setting its own key does not recurse."""
    store = StateStore({"k": 0})
    results = []

    def listener(new, old, key):
        results.append(store.set("k", new + 1))

    store.subscribe("k", listener)
    store.set("k", 1)

    assert results == [False]
    assert store.get("k") == 1


@pytest.mark.unit
def test_listener_may_set_other_key():
    """Test setting a different key from a listener notifies that key immediately."""
    store = StateStore()
    seen = []
    store.subscribe("a", lambda new, old, key: store.set("b", new * 2))
    store.subscribe("b", lambda new, old, key: seen.append(new))

    store.set("a", 5)
    assert store.get("b") == 10
    assert seen == [10]


@pytest.mark.unit
def test_failing_listener_does_not_block_others():
    """Test an exception in one listener is logged and the rest still run."""
    store = StateStore()
    seen = []

    def broken(new, old, key):
        raise RuntimeError("boom")

    store.subscribe("k", broken)
    store.subscribe("k", lambda new, old, key: seen.append(new))

    assert store.set("k", "v") is True
    assert seen == ["v"]


@pytest.mark.unit
def test_snapshot_is_a_copy():
    """Test snapshot() cannot be used to mutate the store."""
    store = StateStore({"a": 1})
    snapshot = store.snapshot()
    snapshot["a"] = 2
    assert store.get("a") == 1
    assert store.keys() == ["a"]
