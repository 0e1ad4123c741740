"""
Discovery Context

Responsibilities:
- Loads curated stage baselines (questions, objections, outcomes)
- Derives LOB and project-type overlays from the selection context
- Merges baseline and overlay into the stage content shown to the user

Owns: Stage baselines, overlay tables, augmentation
Never: Modifies a stage baseline in place
"""

from compass.contexts.discovery.augmenter import (
    AugmentedStage,
    Overlay,
    augment_stage,
    build_overlay,
    merge,
)
from compass.contexts.discovery.exceptions import InvalidStageStructureError, StageNotFoundError
from compass.contexts.discovery.stages import Objection, Stage, StageLibrary

__all__ = [
    "AugmentedStage",
    "InvalidStageStructureError",
    "Objection",
    "Overlay",
    "Stage",
    "StageLibrary",
    "StageNotFoundError",
    "augment_stage",
    "build_overlay",
    "merge",
]
