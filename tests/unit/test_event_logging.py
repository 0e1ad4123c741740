"""Tests for the JSON Lines guide event log."""

import json
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from compass.utils.event_logging import get_recent_events, log_guide_event
from compass.utils.timestamp import format_timestamp


@pytest.mark.unit
def test_log_guide_event_appends_line(tmp_path: Path):
    """Test each event becomes one JSON line with timestamp, type, and source."""
    events = tmp_path / "logs" / "events.jsonl"
    assert log_guide_event("selection_toggled", "selections", events_file=events, entry_id="a")
    assert log_guide_event("catalog_imported", "catalog", events_file=events)

    lines = events.read_text().splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["event_type"] == "selection_toggled"
    assert first["source"] == "selections"
    assert first["entry_id"] == "a"
    assert "timestamp" in first


@pytest.mark.unit
def test_get_recent_events_filters(tmp_path: Path):
    """Test filtering by type and source and limiting to the last n events."""
    events = tmp_path / "events.jsonl"
    for index in range(5):
        log_guide_event("selection_toggled", "selections", events_file=events, index=index)
    log_guide_event("catalog_exported", "catalog", events_file=events)

    assert len(get_recent_events(events_file=events)) == 6
    last_two = get_recent_events(2, event_type="selection_toggled", events_file=events)
    assert [e["index"] for e in last_two] == [3, 4]
    assert [e["event_type"] for e in get_recent_events(source="catalog", events_file=events)] == [
        "catalog_exported"
    ]


@pytest.mark.unit
def test_get_recent_events_skips_malformed_lines(tmp_path: Path):
    """Test malformed lines are skipped."""
    events = tmp_path / "events.jsonl"
    events.write_text('{"event_type": "a", "source": "x"}\nnot json\n')
    assert [e["event_type"] for e in get_recent_events(events_file=events)] == ["a"]


@pytest.mark.unit
def test_missing_log_returns_empty(tmp_path: Path):
    """Test reading a log that doesn't exist yet."""
    assert get_recent_events(events_file=tmp_path / "none.jsonl") == []


@pytest.mark.unit
def test_format_timestamp():
    """Test absolute and relative formatting of event timestamps."""
    assert format_timestamp("2025-01-15T10:30:00.123456") == "2025-01-15 10:30:00"
    assert format_timestamp("not a timestamp") == "not a timestamp"

    two_hours_ago = (datetime.now() - timedelta(hours=2, minutes=5)).isoformat()
    assert format_timestamp(two_hours_ago, relative=True) == "2h ago"
