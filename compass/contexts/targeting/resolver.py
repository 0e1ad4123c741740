"""
Resolution Engine

Decides which catalog entries apply to a selection context. Each family is resolved
through an ordered fallback chain; every step appends only identifiers not already
present:

    1. exact          catalog[vertical][lob]              (vertical and lob set)
    2. vertical       every lob bucket of catalog[vertical] (vertical set)
    3. lob_general    catalog["general"][lob]              (lob set)
    4. backfill       general finance, it, hr buckets      (personas/resources, < 3 so far)
    5. always         technology/AI leadership personas    (personas)
    6. fallback       hand-authored generic entries        (personas/resources, still empty)

The chain result is then ranked (see relevance.py) and resources/use cases get the
talking points for the active deployment and customer type attached.

Resolution reads whatever catalog object it is given on every call. Unknown vertical
or lob values simply match nothing; resolution never raises for a well-typed context.
"""

from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from compass.contexts.catalog.catalog import ContentCatalog
from compass.contexts.catalog.entries import (
    GENERAL,
    CatalogEntry,
    ContextualEntry,
    EntryFamily,
)
from compass.contexts.targeting.defaults import (
    BACKFILL_LOBS,
    GUARANTEED_FAMILIES,
    MINIMUM_POPULATION,
    get_generic_entries,
    is_always_relevant,
)
from compass.contexts.targeting.logger import log_resolution
from compass.contexts.targeting.relevance import rank_entries
from compass.contexts.targeting.selection_context import SelectionContext


class _OrderedEntries:
    """Insertion-ordered entry list deduplicated by identifier."""

    def __init__(self):
        self._entries: List[CatalogEntry] = []
        self._ids = set()

    def extend(self, entries: Iterable[CatalogEntry]) -> int:
        added = 0
        for entry in entries:
            if entry.id not in self._ids:
                self._ids.add(entry.id)
                self._entries.append(entry)
                added += 1
        return added

    def __len__(self) -> int:
        return len(self._entries)

    def to_list(self) -> List[CatalogEntry]:
        return list(self._entries)


def resolve_chain(
    catalog: ContentCatalog, family: EntryFamily, context: SelectionContext
) -> List[CatalogEntry]:
    """
    Run the fallback chain for one family, without ranking.

    Args:
        catalog: Content catalog to read
        family: Entry family to resolve
        context: Current selection context

    Returns:
        Deduplicated entries in chain order
    """
    family = EntryFamily.parse(family)
    vertical, lob = context.vertical, context.lob
    result = _OrderedEntries()
    steps: Dict[str, int] = {}

    if vertical and lob:
        steps["exact"] = result.extend(catalog.bucket(family, vertical, lob))

    if vertical:
        steps["vertical"] = result.extend(catalog.vertical_entries(family, vertical))

    if lob:
        steps["lob_general"] = result.extend(catalog.bucket(family, GENERAL, lob))

    if family in GUARANTEED_FAMILIES and len(result) < MINIMUM_POPULATION:
        steps["backfill"] = 0
        for backfill_lob in BACKFILL_LOBS:
            steps["backfill"] += result.extend(catalog.bucket(family, GENERAL, backfill_lob))

    if family == EntryFamily.PERSONAS:
        always = [entry for entry in catalog.all_entries(family) if is_always_relevant(entry)]
        steps["always"] = result.extend(always)

    if family in GUARANTEED_FAMILIES and len(result) == 0:
        steps["fallback"] = result.extend(get_generic_entries(family))

    log_resolution(family.value, str(context), steps, len(result))
    return result.to_list()


def apply_context_notes(entry: CatalogEntry, context: SelectionContext) -> CatalogEntry:
    """Attach the deployment/customer talking points matching the context, if any."""
    if not isinstance(entry, ContextualEntry):
        return entry

    deployment_note = (
        entry.deployment_context.get(context.deployment) if context.deployment else None
    )
    customer_note = (
        entry.customer_context.get(context.customer_type) if context.customer_type else None
    )

    if (deployment_note, customer_note) == (entry.active_deployment_note, entry.active_customer_note):
        return entry
    return replace(
        entry, active_deployment_note=deployment_note, active_customer_note=customer_note
    )


def resolve(
    catalog: ContentCatalog,
    family: EntryFamily,
    context: Optional[SelectionContext] = None,
    level_filter: Optional[str] = None,
) -> List[CatalogEntry]:
    """
    Resolve, rank, and annotate the entries of one family for a context.

    Args:
        catalog: Content catalog to read
        family: Entry family to resolve
        context: Selection context (None means empty context)
        level_filter: Active persona-level filter (e.g. "c-suite"), if any

    Returns:
        Ranked, deduplicated entries. Never empty for personas and resources.
    """
    context = context or SelectionContext()
    chain = resolve_chain(catalog, family, context)
    ranked = rank_entries(chain, context, level_filter)
    return [apply_context_notes(entry, context) for entry in ranked]


def resolve_all(
    catalog: ContentCatalog,
    context: Optional[SelectionContext] = None,
    level_filter: Optional[str] = None,
) -> Dict[EntryFamily, List[CatalogEntry]]:
    """Resolve every family for a context."""
    return {family: resolve(catalog, family, context, level_filter) for family in EntryFamily}


def resolved_ids(
    catalog: ContentCatalog, family: EntryFamily, context: Optional[SelectionContext] = None
) -> List[str]:
    """Identifiers that resolve for a context, in chain order."""
    return [entry.id for entry in resolve_chain(catalog, family, context or SelectionContext())]
