"""
Guide event logging utilities for COMPASS (Tier 2 logging).

Appends user-facing state changes (selection toggles, catalog imports/exports) to a
JSON Lines event log so a session can be audited or replayed. Events are only written
when an events file is configured, either per call or through GUIDE_EVENTS_FILE.

For detailed within-context logging (Tier 1), use the context logger modules instead.

Usage:
    from compass.utils.event_logging import log_guide_event

    log_guide_event(
        event_type="selection_toggled",
        source="selections",
        family="personas",
        entry_id="banking-coo",
        storage_key="banking-operations",
        selected=True,
    )
"""

import json
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from compass.utils.timestamp import now_exact

load_dotenv()
_events_file_env = os.getenv("GUIDE_EVENTS_FILE")
GUIDE_EVENTS_FILE = Path(_events_file_env) if _events_file_env else None


def _resolve_events_file(events_file: Optional[Path]) -> Optional[Path]:
    if events_file is not None:
        return Path(events_file)
    return GUIDE_EVENTS_FILE


def log_guide_event(
    event_type: str, source: str, events_file: Optional[Path] = None, **extra_fields
) -> bool:
    """
    Log an event to the guide event log.

    Events are appended in JSON Lines format (one JSON object per line), which keeps
    the log streamable and easy to filter by event_type or source.

    Args:
        event_type: Type of event (e.g., "selection_toggled", "catalog_imported")
        source: Event source (e.g., "selections", "catalog", "cli")
        events_file: Target file (defaults to GUIDE_EVENTS_FILE)
        **extra_fields: Additional event-specific fields

    Returns:
        True if the event was written, False if no events file is configured
    """
    target = _resolve_events_file(events_file)
    if target is None:
        return False

    target.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "source": source,
        **extra_fields,
    }

    with open(target, "a", encoding="utf-8") as f:
        f.write(json.dumps(event) + "\n")

    return True


def get_recent_events(
    n: int = 10,
    event_type: Optional[str] = None,
    source: Optional[str] = None,
    events_file: Optional[Path] = None,
) -> List[dict]:
    """
    Get the last n events from the guide log, optionally filtered.

    Args:
        n: Number of recent events to return (default: 10)
        event_type: Filter to only events of this type (optional)
        source: Filter to only events from this source (optional)
        events_file: Log to read (defaults to GUIDE_EVENTS_FILE)

    Returns:
        List of event dicts (most recent last)

    Example:
        # Last 20 selection toggles
        events = get_recent_events(20, event_type="selection_toggled")
    """
    target = _resolve_events_file(events_file)
    if target is None or not target.exists():
        return []

    events = []
    with open(target, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                # Skip malformed lines
                continue

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    if source:
        events = [e for e in events if e.get("source") == source]

    return events[-n:] if len(events) > n else events
