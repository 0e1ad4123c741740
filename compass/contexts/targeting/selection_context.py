"""
Selection Context

The user's current targeting choices: vertical, line of business, customer type,
deployment model, and the project types in the order they were picked. Every field
may be unset; an empty context is valid and resolves to general-purpose content.

Contexts are immutable. Changes produce a new instance, so a context can be shared
with listeners and compared for equality safely.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Optional, Tuple

CUSTOMER_TYPES = ("new-logo", "existing")
PROJECT_TYPES = ("rpa", "idp", "agentic", "maestro")


def _normalize(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _normalize_project_types(values: Optional[Iterable[str]]) -> Tuple[str, ...]:
    ordered = []
    for value in values or ():
        value = _normalize(value)
        if value and value not in ordered:
            ordered.append(value)
    return tuple(ordered)


def storage_key(vertical: Optional[str], lob: Optional[str]) -> str:
    """Namespace for persisted selections: '{vertical or general}-{lob or all}'."""
    return f"{vertical or 'general'}-{lob or 'all'}"


@dataclass(frozen=True)
class SelectionContext:
    """
    Immutable selection context.

    Empty strings are normalized to None; project_types keeps selection order and
    drops duplicates. Unknown values are kept as-is and simply fail to match content.

    Attributes:
        vertical: Industry vertical (e.g. "banking")
        lob: Line of business (e.g. "capital-markets", "finance")
        customer_type: "new-logo" or "existing"
        deployment: Deployment model (e.g. "cloud", "on-premise")
        project_types: Selected project types in selection order
    """

    vertical: Optional[str] = None
    lob: Optional[str] = None
    customer_type: Optional[str] = None
    deployment: Optional[str] = None
    project_types: Tuple[str, ...] = ()

    def __post_init__(self):
        # Frozen: normalize through object.__setattr__
        object.__setattr__(self, "vertical", _normalize(self.vertical))
        object.__setattr__(self, "lob", _normalize(self.lob))
        object.__setattr__(self, "customer_type", _normalize(self.customer_type))
        object.__setattr__(self, "deployment", _normalize(self.deployment))
        object.__setattr__(self, "project_types", _normalize_project_types(self.project_types))

    @property
    def storage_key(self) -> str:
        return storage_key(self.vertical, self.lob)

    @property
    def is_empty(self) -> bool:
        """True when no field is set."""
        return not any(
            (self.vertical, self.lob, self.customer_type, self.deployment, self.project_types)
        )

    def with_changes(self, **changes) -> "SelectionContext":
        """New context with the given fields replaced (values are normalized)."""
        return replace(self, **changes)

    def toggle_project_type(self, project_type: str) -> "SelectionContext":
        """
        Add project_type at the end of the selection, or remove it if already selected.
        """
        project_type = _normalize(project_type)
        if not project_type:
            return self
        if project_type in self.project_types:
            remaining = tuple(t for t in self.project_types if t != project_type)
            return replace(self, project_types=remaining)
        return replace(self, project_types=self.project_types + (project_type,))

    def summary(self) -> Dict[str, Any]:
        """Selection summary: LOB, project types, and whether anything is selected."""
        return {
            "lob": self.lob,
            "project_types": list(self.project_types),
            "has_selections": bool(self.lob or self.project_types),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vertical": self.vertical,
            "lob": self.lob,
            "customer_type": self.customer_type,
            "deployment": self.deployment,
            "project_types": list(self.project_types),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SelectionContext":
        """Build from a plain dict; unknown keys are ignored."""
        data = data or {}
        return cls(
            vertical=data.get("vertical"),
            lob=data.get("lob"),
            customer_type=data.get("customer_type") or data.get("customerType"),
            deployment=data.get("deployment"),
            project_types=data.get("project_types") or data.get("projectTypes") or (),
        )

    def __str__(self) -> str:
        parts = [f"{name}={value}" for name, value in self.to_dict().items() if value]
        return f"SelectionContext({', '.join(parts) or 'empty'})"
