"""
Shared utilities for COMPASS.

Common functionality used across contexts:
- Logging setup (Tier 1) and guide event logging (Tier 2)
- Reactive state store
- Atomic file writes
- Timestamps
"""

from compass.utils.atomic_write import write_text_atomic
from compass.utils.state_store import StateStore
from compass.utils.timestamp import format_timestamp, now_exact

__all__ = ["StateStore", "write_text_atomic", "format_timestamp", "now_exact"]
