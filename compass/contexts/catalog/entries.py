"""
Catalog Entry Structures

Typed representation of the three curated content families. Every entry carries an
identifier that is unique within its family across the whole catalog, a title, and
its classification (vertical, lob) taken from the catalog bucket it lives in.

Family-specific fields are explicit with defaults, so a catalog entry that omits an
optional field still produces a complete object.
"""

from dataclasses import dataclass, field, fields, asdict
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional

from compass.contexts.catalog.exceptions import InvalidCatalogStructureError

GENERAL = "general"

PRIORITY_LEVELS = ("high", "medium", "low")

# Keys accepted from older exports, mapped onto current field names
FIELD_ALIASES = {
    "name": "title",
    "world": "description",
    "overview": "description",
    "type": "resource_type",
    "timeToValue": "time_to_value",
    "deploymentContext": "deployment_context",
    "customerContext": "customer_context",
}

# Derived at resolution time, never read from or written to catalog files
DERIVED_FIELDS = ("active_deployment_note", "active_customer_note")


class EntryFamily(str, Enum):
    """Content family; the value doubles as the catalog file stem."""

    PERSONAS = "personas"
    RESOURCES = "resources"
    USE_CASES = "use_cases"

    @classmethod
    def parse(cls, value: "str | EntryFamily") -> "EntryFamily":
        """Accept an EntryFamily, its value, or a dashed/singular spelling."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "_")
        aliases = {"persona": "personas", "resource": "resources", "use_case": "use_cases"}
        normalized = aliases.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            valid = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown entry family '{value}'. Valid families: {valid}")


@dataclass(frozen=True)
class CatalogEntry:
    """
    Fields shared by every content family.

    Attributes:
        id: Identifier, unique within the family (persistence key for selections)
        title: Display name
        vertical: Industry vertical bucket, or "general"
        lob: Line-of-business bucket, or "general"
        description: Free-text description
        priority: "high", "medium", "low", or None when not curated
        level: Seniority/role level (personas) or audience level
        tags: Tag group -> tags (e.g. {"primary": [...], "pain_points": [...]})
    """

    family: ClassVar[EntryFamily]

    id: str
    title: str
    vertical: str = GENERAL
    lob: str = GENERAL
    description: str = ""
    priority: Optional[str] = None
    level: Optional[str] = None
    tags: Dict[str, List[str]] = field(default_factory=dict)

    def all_tags(self) -> List[str]:
        """Every tag across all groups, in group order, without duplicates."""
        seen = []
        for group_tags in self.tags.values():
            for tag in group_tags:
                if tag not in seen:
                    seen.append(tag)
        return seen

    def has_tag(self, tag: str, group: Optional[str] = None) -> bool:
        """True if tag appears in group (or in any group when group is None)."""
        if group is not None:
            return tag in self.tags.get(group, [])
        return any(tag in group_tags for group_tags in self.tags.values())

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form used for catalog exports (classification included)."""
        data = asdict(self)
        for derived in DERIVED_FIELDS:
            data.pop(derived, None)
        return data


@dataclass(frozen=True)
class Persona(CatalogEntry):
    """Buyer persona: who they are, what they care about, how we help."""

    family: ClassVar[EntryFamily] = EntryFamily.PERSONAS

    cares: str = ""
    help: str = ""
    influence: Optional[str] = None


@dataclass(frozen=True)
class ContextualEntry(CatalogEntry):
    """
    Entry with per-context talking points.

    deployment_context and customer_context map a context value (e.g. "cloud",
    "new-logo") to a note. Resolution fills the active_* fields for the current context.
    """

    complexity: Optional[str] = None
    time_to_value: Optional[str] = None
    deployment_context: Dict[str, str] = field(default_factory=dict)
    customer_context: Dict[str, str] = field(default_factory=dict)
    active_deployment_note: Optional[str] = None
    active_customer_note: Optional[str] = None


@dataclass(frozen=True)
class Resource(ContextualEntry):
    """Sales collateral: calculators, playbooks, demos, reference architectures."""

    family: ClassVar[EntryFamily] = EntryFamily.RESOURCES

    resource_type: Optional[str] = None
    link: Optional[str] = None
    why: str = ""


@dataclass(frozen=True)
class UseCase(ContextualEntry):
    """Automation use case, classified by project type (rpa, idp, agentic, maestro)."""

    family: ClassVar[EntryFamily] = EntryFamily.USE_CASES

    category: Optional[str] = None
    outcomes: List[str] = field(default_factory=list)


ENTRY_CLASSES = {
    EntryFamily.PERSONAS: Persona,
    EntryFamily.RESOURCES: Resource,
    EntryFamily.USE_CASES: UseCase,
}


def _normalize_tags(raw_tags: Any, entry_id: str) -> Dict[str, List[str]]:
    if raw_tags is None:
        return {}
    if isinstance(raw_tags, list):
        # Flat tag list: treat as primary tags
        return {"primary": [str(tag) for tag in raw_tags]}
    if not isinstance(raw_tags, dict):
        raise InvalidCatalogStructureError(
            "Tags must be a mapping of group -> list", entry_id=entry_id
        )
    return {
        str(group): [str(tag) for tag in (tags or [])] for group, tags in raw_tags.items()
    }


def _normalize_notes(raw_notes: Any, field_name: str, family: str, entry_id: str) -> Dict[str, str]:
    if raw_notes is None:
        return {}
    if not isinstance(raw_notes, dict):
        raise InvalidCatalogStructureError(
            f"'{field_name}' must be a mapping of context value -> note, "
            f"got {type(raw_notes).__name__}",
            family=family,
            entry_id=entry_id,
        )
    notes = {}
    for key, note in raw_notes.items():
        if isinstance(note, (dict, list)):
            raise InvalidCatalogStructureError(
                f"Note for '{key}' in '{field_name}' must be text", family=family, entry_id=entry_id
            )
        notes[str(key)] = "" if note is None else str(note)
    return notes


def _normalize_text_list(raw_items: Any, field_name: str, family: str, entry_id: str) -> List[str]:
    if raw_items is None:
        return []
    if not isinstance(raw_items, list):
        raise InvalidCatalogStructureError(
            f"'{field_name}' must be a list, got {type(raw_items).__name__}",
            family=family,
            entry_id=entry_id,
        )
    return [str(item) for item in raw_items]


def normalize_entry_fields(family: EntryFamily, values: Dict[str, Any], entry_id: str) -> Dict[str, Any]:
    """
    Check and coerce the structured fields present in a set of entry values.

    Used for both catalog records and admin edits so the two paths accept the same shapes.

    Raises:
        InvalidCatalogStructureError: If a context-note field is not a mapping or outcomes
            is not a list
    """
    normalized = dict(values)
    if "tags" in normalized:
        normalized["tags"] = _normalize_tags(normalized["tags"], entry_id)
    for note_field in ("deployment_context", "customer_context"):
        if note_field in normalized:
            normalized[note_field] = _normalize_notes(
                normalized[note_field], note_field, family.value, entry_id
            )
    if "outcomes" in normalized:
        normalized["outcomes"] = _normalize_text_list(
            normalized["outcomes"], "outcomes", family.value, entry_id
        )
    for text_field in ("description", "cares", "help", "why"):
        if text_field in normalized and normalized[text_field] is None:
            normalized[text_field] = ""
    return normalized


def entry_from_dict(
    family: EntryFamily, raw: Dict[str, Any], vertical: str, lob: str
) -> CatalogEntry:
    """
    Build a typed entry from a raw catalog record.

    The bucket (vertical, lob) the record was found under is authoritative for the
    entry's classification. Unknown keys are ignored; aliased keys from older exports
    are mapped onto current field names.

    Args:
        family: Content family the record belongs to
        raw: Raw record (from YAML or JSON)
        vertical: Vertical bucket key
        lob: LOB bucket key

    Returns:
        Persona, Resource, or UseCase

    Raises:
        InvalidCatalogStructureError: If the record is not a mapping, lacks id/title,
            or carries a malformed structured field
    """
    if not isinstance(raw, dict):
        raise InvalidCatalogStructureError(
            f"Entry under {vertical}/{lob} must be a mapping, got {type(raw).__name__}",
            family=family.value,
        )

    entry_cls = ENTRY_CLASSES[family]
    allowed = {f.name for f in fields(entry_cls)} - set(DERIVED_FIELDS)

    values: Dict[str, Any] = {}
    for key, value in raw.items():
        name = FIELD_ALIASES.get(key, key)
        if name in allowed and name not in values:
            values[name] = value

    entry_id = values.get("id")
    if not entry_id or not str(entry_id).strip():
        raise InvalidCatalogStructureError(
            f"Entry under {vertical}/{lob} is missing 'id'", family=family.value
        )
    entry_id = str(entry_id).strip()

    if not values.get("title"):
        raise InvalidCatalogStructureError(
            "Entry is missing 'title'", family=family.value, entry_id=entry_id
        )

    values["id"] = entry_id
    values["vertical"] = vertical
    values["lob"] = lob
    values.setdefault("tags", None)

    return entry_cls(**normalize_entry_fields(family, values, entry_id))
