"""
Targeting Context

Responsibilities:
- Holds the user's selection context (vertical, LOB, customer type, deployment, project types)
- Resolves applicable personas, resources, and use cases through the fallback chain
- Ranks resolved entries with the priority/vertical/level accumulator
- Attaches deployment and customer talking points to resolved entries

Owns: Selection context, resolution chain, relevance scoring
Never: Edits the catalog or persists anything
"""

from compass.contexts.targeting.relevance import rank_entries, relevance_score
from compass.contexts.targeting.resolver import (
    apply_context_notes,
    resolve,
    resolve_all,
    resolve_chain,
    resolved_ids,
)
from compass.contexts.targeting.selection_context import (
    CUSTOMER_TYPES,
    PROJECT_TYPES,
    SelectionContext,
    storage_key,
)

__all__ = [
    "CUSTOMER_TYPES",
    "PROJECT_TYPES",
    "SelectionContext",
    "apply_context_notes",
    "rank_entries",
    "relevance_score",
    "resolve",
    "resolve_all",
    "resolve_chain",
    "resolved_ids",
    "storage_key",
]
