"""
Relevance ranking for resolved entries.

A plain accumulator, not a statistical ranker:

    score = priority weight (high 3, medium 2, low 1, none 0)
          + 2 if entry.vertical == context.vertical
          + 2 if a persona-level filter is active and entry.level matches it,
              counted only for vertical-matched entries when a vertical is set

Sorting is stable, so entries with equal scores keep fallback-chain order and
identical inputs always produce identical output. The level bonus never lifts an
entry from outside the selected vertical above one from inside it.
"""

from typing import List, Optional

from compass.contexts.catalog.entries import CatalogEntry
from compass.contexts.targeting.defaults import (
    LEVEL_MATCH_BONUS,
    PRIORITY_WEIGHTS,
    VERTICAL_MATCH_BONUS,
)
from compass.contexts.targeting.selection_context import SelectionContext


def relevance_score(
    entry: CatalogEntry, context: SelectionContext, level_filter: Optional[str] = None
) -> int:
    score = PRIORITY_WEIGHTS.get(entry.priority or "", 0)

    if context.vertical and entry.vertical == context.vertical:
        score += VERTICAL_MATCH_BONUS

    vertical_ok = not context.vertical or entry.vertical == context.vertical
    if level_filter and entry.level == level_filter and vertical_ok:
        score += LEVEL_MATCH_BONUS

    return score


def rank_entries(
    entries: List[CatalogEntry], context: SelectionContext, level_filter: Optional[str] = None
) -> List[CatalogEntry]:
    """Order entries by descending relevance score (stable)."""
    if context.vertical and not any(entry.vertical == context.vertical for entry in entries):
        # No entry from the selected vertical: the level bonus applies to everything
        context = context.with_changes(vertical=None)
    return sorted(entries, key=lambda entry: -relevance_score(entry, context, level_filter))
