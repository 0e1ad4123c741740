"""
Dynamic Question/Objection Augmenter

Combines a stage's curated baseline with an overlay derived from the selection context.
The overlay is rebuilt from (baseline, context) on every call and merged into a new
object, so repeated calls with the same context give identical output and an empty
context gives back exactly the baseline.

Overlay categories, in order (empty ones are omitted):
    1. "<LOB category>"               3 questions for the selected line of business
    2. "Technology & Implementation"  questions for each project type, in selection order
    3. "Specialized Use Cases"        questions for each "{lob}-{type}" combination

Objections: LOB-specific then project-type-specific pairs, appended after the
baseline objections.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from compass.contexts.discovery.logger import log_stage_augmented
from compass.contexts.discovery.overlay_tables import (
    COMBINED_QUESTIONS,
    LOB_CATEGORIES,
    LOB_OBJECTIONS,
    LOB_QUESTIONS,
    PROJECT_TYPE_OBJECTIONS,
    PROJECT_TYPE_QUESTIONS,
    SPECIALIZED_CATEGORY,
    TECHNOLOGY_CATEGORY,
)
from compass.contexts.discovery.stages import Objection, Stage
from compass.contexts.targeting.selection_context import SelectionContext


@dataclass
class Overlay:
    """Context-derived additions, before merging."""

    questions: Dict[str, List[str]] = field(default_factory=dict)
    objections: List[Objection] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.questions and not self.objections


@dataclass
class AugmentedStage:
    """
    Stage content as shown for a context.

    Attributes:
        stage_id: Stage identifier
        title: Stage title
        questions: Baseline categories followed by overlay categories
        objections: Baseline objections followed by overlay objections
        augmented_categories: Overlay category names that contributed questions
        augmented_objection_count: Number of objections added by the overlay
    """

    stage_id: str
    title: str
    questions: Dict[str, List[str]]
    objections: List[Objection]
    augmented_categories: List[str] = field(default_factory=list)
    augmented_objection_count: int = 0

    @property
    def is_augmented(self) -> bool:
        return bool(self.augmented_categories or self.augmented_objection_count)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage_id": self.stage_id,
            "title": self.title,
            "questions": {category: list(items) for category, items in self.questions.items()},
            "objections": [objection.to_dict() for objection in self.objections],
            "augmented_categories": list(self.augmented_categories),
            "augmented_objection_count": self.augmented_objection_count,
        }


def _objections(pairs: List[Tuple[str, str]]) -> List[Objection]:
    return [Objection(challenge=challenge, response=response) for challenge, response in pairs]


def build_overlay(context: SelectionContext) -> Overlay:
    """
    Build the question/objection overlay for a context.

    Unknown LOBs, unknown project types, and combinations missing from the table
    contribute nothing.
    """
    overlay = Overlay()
    lob = context.lob
    project_types = context.project_types

    if lob and lob in LOB_CATEGORIES:
        overlay.questions[LOB_CATEGORIES[lob]] = list(LOB_QUESTIONS.get(lob, []))

    if project_types:
        technology = []
        for project_type in project_types:
            technology.extend(PROJECT_TYPE_QUESTIONS.get(project_type, []))
        overlay.questions[TECHNOLOGY_CATEGORY] = technology

    if lob and project_types:
        specialized = []
        for project_type in project_types:
            specialized.extend(COMBINED_QUESTIONS.get(f"{lob}-{project_type}", []))
        overlay.questions[SPECIALIZED_CATEGORY] = specialized

    # Empty categories are omitted
    overlay.questions = {name: items for name, items in overlay.questions.items() if items}

    if lob:
        overlay.objections.extend(_objections(LOB_OBJECTIONS.get(lob, [])))
    for project_type in project_types:
        overlay.objections.extend(_objections(PROJECT_TYPE_OBJECTIONS.get(project_type, [])))

    return overlay


def merge(baseline: Stage, overlay: Overlay) -> AugmentedStage:
    """
    Merge an overlay into a copy of a stage baseline.

    Overlay categories are appended after the baseline categories. An overlay category
    named like a baseline category extends it with questions it doesn't already have.
    Objections already in the baseline (same challenge) are not repeated.
    """
    questions = {category: list(items) for category, items in baseline.questions.items()}
    augmented_categories = []

    for category, items in overlay.questions.items():
        existing = questions.setdefault(category, [])
        added = [item for item in items if item not in existing]
        if added:
            existing.extend(added)
            augmented_categories.append(category)
        elif not existing:
            del questions[category]

    objections = list(baseline.objections)
    seen = {objection.challenge for objection in objections}
    added_objections = 0
    for objection in overlay.objections:
        if objection.challenge not in seen:
            seen.add(objection.challenge)
            objections.append(objection)
            added_objections += 1

    return AugmentedStage(
        stage_id=baseline.id,
        title=baseline.title,
        questions=questions,
        objections=objections,
        augmented_categories=augmented_categories,
        augmented_objection_count=added_objections,
    )


def augment_stage(baseline: Stage, context: SelectionContext = None) -> AugmentedStage:
    """
    Stage content for a context: the baseline plus the context overlay.

    Args:
        baseline: Curated stage (not modified)
        context: Selection context (None means empty context)

    Returns:
        AugmentedStage; equal to the baseline when the context adds nothing
    """
    context = context or SelectionContext()
    augmented = merge(baseline, build_overlay(context))
    log_stage_augmented(
        baseline.id, augmented.augmented_categories, augmented.augmented_objection_count
    )
    return augmented
