"""
Stage Baselines

Curated per-stage content: outcomes, initial personas, categorized discovery questions,
and objection/response pairs. Baselines are loaded once and never modified; the
library hands out deep copies so callers can't drift the source.
"""

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from compass.contexts.discovery.exceptions import InvalidStageStructureError, StageNotFoundError
from compass.contexts.discovery.logger import _log_info

load_dotenv()
DEFAULT_STAGES_PATH = Path(__file__).parent / "data" / "stages.yaml"
STAGES_PATH = Path(os.getenv("STAGES_PATH", str(DEFAULT_STAGES_PATH)))


@dataclass(frozen=True)
class Objection:
    """A customer challenge and the suggested response. Both are required."""

    challenge: str
    response: str

    def __post_init__(self):
        if not self.challenge or not str(self.challenge).strip():
            raise InvalidStageStructureError("Objection is missing its challenge")
        if not self.response or not str(self.response).strip():
            raise InvalidStageStructureError(
                f"Objection '{self.challenge}' has no response"
            )

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Objection":
        """Build from {challenge, response} (or the older {q, a} spelling)."""
        if not isinstance(raw, dict):
            raise InvalidStageStructureError(
                f"Objection must be a mapping, got {type(raw).__name__}"
            )
        return cls(
            challenge=raw.get("challenge") or raw.get("q") or "",
            response=raw.get("response") or raw.get("a") or "",
        )

    def to_dict(self) -> Dict[str, str]:
        return {"challenge": self.challenge, "response": self.response}


@dataclass
class Stage:
    """
    One sales stage.

    Attributes:
        id: Stage identifier (e.g. "discovery")
        title: Display title
        outcomes: Exit criteria for the stage
        initial_personas: Who to engage first, as short descriptions
        questions: Category name -> ordered questions (category order is display order)
        objections: Objection/response pairs
    """

    id: str
    title: str
    outcomes: List[str] = field(default_factory=list)
    initial_personas: List[str] = field(default_factory=list)
    questions: Dict[str, List[str]] = field(default_factory=dict)
    objections: List[Objection] = field(default_factory=list)

    @classmethod
    def from_dict(cls, stage_id: str, raw: Dict[str, Any]) -> "Stage":
        """
        Build a stage from raw YAML/JSON data.

        Raises:
            InvalidStageStructureError: If the title is missing, a category is not a
                list, or an objection lacks a challenge or response
        """
        if not isinstance(raw, dict):
            raise InvalidStageStructureError("Stage must be a mapping", stage_id=stage_id)
        if not raw.get("title"):
            raise InvalidStageStructureError("Stage is missing 'title'", stage_id=stage_id)

        questions: Dict[str, List[str]] = {}
        for category, items in (raw.get("questions") or {}).items():
            if not isinstance(items, list):
                raise InvalidStageStructureError(
                    f"Question category '{category}' must be a list", stage_id=stage_id
                )
            questions[str(category)] = [str(item) for item in items]

        try:
            objections = [Objection.from_dict(item) for item in raw.get("objections") or []]
        except InvalidStageStructureError as e:
            raise InvalidStageStructureError(e.message, stage_id=stage_id)

        return cls(
            id=stage_id,
            title=str(raw["title"]),
            outcomes=[str(item) for item in raw.get("outcomes") or []],
            initial_personas=[
                str(item) for item in raw.get("initial_personas") or raw.get("initialPersonas") or []
            ],
            questions=questions,
            objections=objections,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "outcomes": list(self.outcomes),
            "initial_personas": list(self.initial_personas),
            "questions": {category: list(items) for category, items in self.questions.items()},
            "objections": [objection.to_dict() for objection in self.objections],
        }


class StageLibrary:
    """
    Ordered collection of stage baselines.

    get() returns a deep copy; the stored baseline cannot be changed through it.

    Factory methods:
        from_dict(data) - {stage_id: {...}} mapping (or a list of stages with 'id')
        from_yaml(path) - stages.yaml (defaults to STAGES_PATH)
    """

    def __init__(self, stages: Optional[List[Stage]] = None):
        self._stages: Dict[str, Stage] = {}
        for stage in stages or []:
            if stage.id in self._stages:
                raise InvalidStageStructureError("Duplicate stage id", stage_id=stage.id)
            self._stages[stage.id] = stage

    @classmethod
    def from_dict(cls, data: Any, source_path: Optional[Path] = None) -> "StageLibrary":
        if data is None:
            return cls([])

        if isinstance(data, dict) and "stages" in data and len(data) == 1:
            data = data["stages"]

        if isinstance(data, list):
            stages = []
            for raw in data:
                if not isinstance(raw, dict) or "id" not in raw:
                    raise InvalidStageStructureError(
                        "Stage list entries need an 'id'", source_path=source_path
                    )
                stages.append(Stage.from_dict(str(raw["id"]), raw))
            return cls(stages)

        if not isinstance(data, dict):
            raise InvalidStageStructureError(
                "Stages must be a mapping of stage id -> stage", source_path=source_path
            )

        return cls([Stage.from_dict(str(stage_id), raw) for stage_id, raw in data.items()])

    @classmethod
    def from_yaml(cls, path: Optional[Path] = None) -> "StageLibrary":
        if path is None:
            path = STAGES_PATH
        path = Path(path)

        data = OmegaConf.to_container(OmegaConf.load(path), resolve=True)
        library = cls.from_dict(data, source_path=path)
        _log_info(f"Loaded {len(library)} stages from {path}")
        return library

    def ids(self) -> List[str]:
        return list(self._stages.keys())

    def get(self, stage_id: str) -> Stage:
        """
        Deep copy of a stage baseline.

        Raises:
            StageNotFoundError: If stage_id is unknown
        """
        if stage_id not in self._stages:
            raise StageNotFoundError(f"No stage '{stage_id}'. Known stages: {', '.join(self.ids())}")
        return copy.deepcopy(self._stages[stage_id])

    def first_id(self) -> Optional[str]:
        ids = self.ids()
        return ids[0] if ids else None

    def next_id(self, stage_id: str) -> Optional[str]:
        """Following stage id, or None at the last stage."""
        ids = self.ids()
        index = self._index(stage_id)
        return ids[index + 1] if index + 1 < len(ids) else None

    def previous_id(self, stage_id: str) -> Optional[str]:
        """Preceding stage id, or None at the first stage."""
        ids = self.ids()
        index = self._index(stage_id)
        return ids[index - 1] if index > 0 else None

    def _index(self, stage_id: str) -> int:
        if stage_id not in self._stages:
            raise StageNotFoundError(f"No stage '{stage_id}'")
        return self.ids().index(stage_id)

    def to_dict(self) -> Dict[str, Any]:
        return {stage_id: stage.to_dict() for stage_id, stage in self._stages.items()}

    def __contains__(self, stage_id: str) -> bool:
        return stage_id in self._stages

    def __iter__(self) -> Iterator[Stage]:
        for stage_id in self.ids():
            yield self.get(stage_id)

    def __len__(self) -> int:
        return len(self._stages)

    def __repr__(self) -> str:
        return f"StageLibrary({', '.join(self.ids())})"
