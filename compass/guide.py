"""
Sales guide composition root.

SalesGuide owns one StateStore and wires the contexts together:

    user action -> state["context"] changes
                -> resolved.<family> re-resolved from the current catalog
                -> selected.<family> reconciled for the new storage key
                -> stage_content recomputed for the current stage

Rendering code reads results from the guide (or subscribes to state keys) and never
touches the catalog, selection records, or stage baselines directly.

State keys:
    context             SelectionContext
    current_stage       stage id
    persona_level       active persona-level filter (e.g. "c-suite") or None
    resolved.<family>   ranked entries for personas / resources / use_cases
    selected.<family>   selected entries under the current storage key
    stage_content       AugmentedStage for the current stage and context
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from compass.contexts.catalog.catalog import ContentCatalog
from compass.contexts.catalog.entries import CatalogEntry, EntryFamily
from compass.contexts.discovery.augmenter import AugmentedStage, augment_stage
from compass.contexts.discovery.exceptions import StageNotFoundError
from compass.contexts.discovery.stages import StageLibrary
from compass.contexts.selections.selection_store import SelectionStore
from compass.contexts.selections.storage import JsonFileStorage, KeyValueStorage
from compass.contexts.targeting.resolver import resolve
from compass.contexts.targeting.selection_context import SelectionContext
from compass.utils.state_store import StateStore

CONTEXT_KEY = "context"
STAGE_KEY = "current_stage"
PERSONA_LEVEL_KEY = "persona_level"
STAGE_CONTENT_KEY = "stage_content"


def resolved_key(family: EntryFamily) -> str:
    return f"resolved.{EntryFamily.parse(family).value}"


def selected_key(family: EntryFamily) -> str:
    return f"selected.{EntryFamily.parse(family).value}"


class SalesGuide:
    """
    Context-driven sales guide.

    Args:
        catalog: Content catalog (admin edits on this object are seen after refresh())
        stages: Stage baselines
        storage: Durable storage for selections (defaults to in-memory)
        events_file: Guide event log override
        context: Initial selection context

    Example:
        guide = SalesGuide.from_config()
        guide.set_vertical("banking")
        guide.set_lob("capital-markets")
        personas = guide.resolve("personas")
        guide.toggle("personas", personas[0].id)
    """

    def __init__(
        self,
        catalog: ContentCatalog,
        stages: StageLibrary,
        storage: Optional[KeyValueStorage] = None,
        events_file: Optional[Path] = None,
        context: Optional[SelectionContext] = None,
    ):
        self.catalog = catalog
        self.stages = stages
        self.state = StateStore(
            {
                CONTEXT_KEY: context or SelectionContext(),
                STAGE_KEY: stages.first_id(),
                PERSONA_LEVEL_KEY: None,
            }
        )
        self._selections: Dict[EntryFamily, SelectionStore] = {
            family: SelectionStore(
                family,
                catalog_provider=lambda: self.catalog,
                context_provider=lambda: self.context,
                storage=storage,
                events_file=events_file,
            )
            for family in EntryFamily
        }

        self.refresh()
        self._unsubscribers: List[Callable[[], None]] = [
            self.state.subscribe(CONTEXT_KEY, self._on_context_change),
            self.state.subscribe(STAGE_KEY, self._on_stage_change),
            self.state.subscribe(PERSONA_LEVEL_KEY, self._on_persona_level_change),
        ]

    @classmethod
    def from_config(
        cls,
        catalog_dir: Optional[Path] = None,
        stages_path: Optional[Path] = None,
        selections_path: Optional[Path] = None,
        events_file: Optional[Path] = None,
    ) -> "SalesGuide":
        """
        Build a guide from configured paths.

        Unset arguments fall back to CONTENT_CATALOG_PATH, STAGES_PATH, SELECTIONS_PATH,
        and GUIDE_EVENTS_FILE (see .env.example).
        """
        catalog = ContentCatalog.from_directory(catalog_dir)
        stages = StageLibrary.from_yaml(stages_path)
        storage = JsonFileStorage(selections_path)
        return cls(catalog, stages, storage=storage, events_file=events_file)

    # =========================================================================
    # SELECTION CONTEXT
    # =========================================================================

    @property
    def context(self) -> SelectionContext:
        return self.state.get(CONTEXT_KEY)

    def set_context(self, context: Optional[SelectionContext] = None, **fields) -> SelectionContext:
        """Replace the whole context, or update the given fields of the current one."""
        if context is None:
            context = self.context.with_changes(**fields)
        elif fields:
            context = context.with_changes(**fields)

        if context != self.context:
            self.state.set(CONTEXT_KEY, context)
        return self.context

    def set_vertical(self, vertical: Optional[str]) -> SelectionContext:
        return self.set_context(vertical=vertical)

    def set_lob(self, lob: Optional[str]) -> SelectionContext:
        return self.set_context(lob=lob)

    def set_customer_type(self, customer_type: Optional[str]) -> SelectionContext:
        return self.set_context(customer_type=customer_type)

    def set_deployment(self, deployment: Optional[str]) -> SelectionContext:
        return self.set_context(deployment=deployment)

    def toggle_project_type(self, project_type: str) -> SelectionContext:
        return self.set_context(self.context.toggle_project_type(project_type))

    def clear_context(self) -> SelectionContext:
        """Reset every context field (stage content returns to the baseline)."""
        return self.set_context(SelectionContext())

    def selection_summary(self) -> Dict[str, Any]:
        return self.context.summary()

    # =========================================================================
    # STAGES AND FILTERS
    # =========================================================================

    @property
    def current_stage(self) -> Optional[str]:
        return self.state.get(STAGE_KEY)

    def select_stage(self, stage_id: str) -> None:
        """
        Make stage_id the current stage.

        Raises:
            StageNotFoundError: If the stage isn't in the library
        """
        if stage_id not in self.stages:
            raise StageNotFoundError(f"No stage '{stage_id}'")
        if stage_id != self.current_stage:
            self.state.set(STAGE_KEY, stage_id)

    def next_stage(self) -> Optional[str]:
        """Advance to the following stage (stays put at the last one)."""
        following = self.stages.next_id(self.current_stage)
        if following:
            self.select_stage(following)
        return self.current_stage

    def previous_stage(self) -> Optional[str]:
        """Go back one stage (stays put at the first one)."""
        preceding = self.stages.previous_id(self.current_stage)
        if preceding:
            self.select_stage(preceding)
        return self.current_stage

    def set_persona_level(self, level: Optional[str]) -> None:
        """Activate (or clear with None) the persona-level ranking filter."""
        self.state.set(PERSONA_LEVEL_KEY, level or None)

    # =========================================================================
    # RESOLUTION AND SELECTIONS
    # =========================================================================

    def resolve(self, family: EntryFamily) -> List[CatalogEntry]:
        """Ranked entries of a family for the current context, from the current catalog."""
        return resolve(self.catalog, family, self.context, self.state.get(PERSONA_LEVEL_KEY))

    def selection_store(self, family: EntryFamily) -> SelectionStore:
        return self._selections[EntryFamily.parse(family)]

    def toggle(self, family: EntryFamily, entry_id: str) -> bool:
        """Flip an entry's selection under the current context; True if now selected."""
        selected = self.selection_store(family).toggle(entry_id)
        self._publish_selected(family)
        return selected

    def is_selected(self, family: EntryFamily, entry_id: str) -> bool:
        return self.selection_store(family).is_selected(entry_id)

    def get_selected(self, family: EntryFamily) -> List[CatalogEntry]:
        return self.selection_store(family).get_selected()

    def clear_selections(self, family: Optional[EntryFamily] = None) -> int:
        """Clear selections under the current context (one family, or all when None)."""
        families = [EntryFamily.parse(family)] if family else list(EntryFamily)
        removed = 0
        for fam in families:
            removed += self.selection_store(fam).clear_all()
            self._publish_selected(fam)
        return removed

    # =========================================================================
    # STAGE CONTENT
    # =========================================================================

    def stage_content(self, stage_id: Optional[str] = None) -> Optional[AugmentedStage]:
        """Augmented content of a stage (current stage by default) for the current context."""
        stage_id = stage_id or self.current_stage
        if stage_id is None:
            return None
        return augment_stage(self.stages.get(stage_id), self.context)

    # =========================================================================
    # CATALOG CHANGES
    # =========================================================================

    def replace_content(
        self, catalog: ContentCatalog, stages: Optional[StageLibrary] = None
    ) -> None:
        """Swap in imported content and recompute everything derived from it."""
        self.catalog.replace_catalog(catalog)
        if stages is not None:
            self.stages = stages
            if self.current_stage not in self.stages:
                self.state.set(STAGE_KEY, self.stages.first_id())
        self.refresh()

    def refresh(self) -> None:
        """Recompute every derived state key (call after admin edits)."""
        self._publish_resolved()
        for family in EntryFamily:
            self._publish_selected(family)
        self.state.set(STAGE_CONTENT_KEY, self.stage_content())

    def close(self) -> None:
        """Detach the guide's own listeners from its state store."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    # =========================================================================
    # LISTENERS
    # =========================================================================

    def _publish_resolved(self) -> None:
        for family in EntryFamily:
            self.state.set(resolved_key(family), self.resolve(family))

    def _publish_selected(self, family: EntryFamily) -> None:
        self.state.set(selected_key(family), self.get_selected(family))

    def _on_context_change(self, new_context, old_context, key) -> None:
        self.refresh()

    def _on_stage_change(self, new_stage, old_stage, key) -> None:
        self.state.set(STAGE_CONTENT_KEY, self.stage_content())

    def _on_persona_level_change(self, new_level, old_level, key) -> None:
        self._publish_resolved()
