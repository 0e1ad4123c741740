"""
Content Catalog

Curated content keyed by family -> vertical -> line of business -> entries. The
catalog ships as one YAML file per family and is validated as a whole when loaded:
duplicate identifiers within a family reject the catalog.

Resolution code only reads the catalog. The admin path (add/update/remove) edits it
in place and enforces the same integrity rules, so the next resolution sees the edit.
"""

import copy
import os
from collections import Counter
from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from compass.contexts.catalog.entries import (
    DERIVED_FIELDS,
    GENERAL,
    CatalogEntry,
    EntryFamily,
    Persona,
    Resource,
    UseCase,
    entry_from_dict,
    normalize_entry_fields,
)
from compass.contexts.catalog.exceptions import (
    CatalogIntegrityError,
    EntryNotFoundError,
    InvalidCatalogStructureError,
)
from compass.contexts.catalog.logger import (
    _log_debug,
    _log_warning,
    log_admin_edit,
    log_catalog_loaded,
)

load_dotenv()
DEFAULT_CATALOG_PATH = Path(__file__).parent / "data"
CATALOG_PATH = Path(os.getenv("CONTENT_CATALOG_PATH", str(DEFAULT_CATALOG_PATH)))

# family -> vertical -> lob -> entries
CatalogTree = Dict[EntryFamily, Dict[str, Dict[str, List[CatalogEntry]]]]


def find_duplicate_ids(entries: List[CatalogEntry]) -> List[str]:
    """Identifiers occurring more than once, in first-seen order."""
    counts = Counter(entry.id for entry in entries)
    return [entry_id for entry_id, count in counts.items() if count > 1]


class ContentCatalog:
    """
    Read-mostly store of curated personas, resources, and use cases.

    Entries are grouped into buckets by vertical and line of business. Bucket and
    vertical iteration follows catalog (file) order, which resolution relies on for
    deterministic output.

    Factory methods:
        from_dict(data) - Build from nested {family: {vertical: {lob: [records]}}}
        from_directory(path) - Load {family}.yaml files from a directory
    """

    def __init__(self, tree: CatalogTree = None, source: Optional[str] = None):
        """
        Initialize a catalog from an already-typed tree.

        Args:
            tree: family -> vertical -> lob -> list of entries
            source: Where the content came from (for log and error messages)

        Raises:
            CatalogIntegrityError: If any family contains duplicate identifiers
        """
        self.source = source
        self._tree: CatalogTree = {family: {} for family in EntryFamily}
        for family, verticals in (tree or {}).items():
            family = EntryFamily.parse(family)
            self._tree[family] = {
                vertical: {lob: list(entries) for lob, entries in lobs.items()}
                for vertical, lobs in verticals.items()
            }

        self._index: Dict[EntryFamily, Dict[str, CatalogEntry]] = {}
        self.validate()

    # =========================================================================
    # FACTORY METHODS
    # =========================================================================

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> "ContentCatalog":
        """
        Build a catalog from raw nested records.

        Families missing from data are empty. Each family maps vertical -> lob -> list
        of records.

        Raises:
            InvalidCatalogStructureError: If a level of the nesting has the wrong shape
            CatalogIntegrityError: If a family contains duplicate identifiers
        """
        tree: CatalogTree = {}
        for family_key, verticals in (data or {}).items():
            try:
                family = EntryFamily.parse(family_key)
            except ValueError:
                _log_debug(f"Ignoring unknown catalog section '{family_key}'")
                continue
            tree[family] = _parse_family(family, verticals, source)

        return cls(tree, source=source)

    @classmethod
    def from_directory(cls, catalog_dir: Optional[Path] = None) -> "ContentCatalog":
        """
        Load a catalog from {family}.yaml files.

        Each file holds a single top-level key named after the family. A missing file
        yields an empty family (logged as a warning), not an error.

        Args:
            catalog_dir: Directory holding the YAML files (defaults to CONTENT_CATALOG_PATH)

        Returns:
            Validated ContentCatalog
        """
        if catalog_dir is None:
            catalog_dir = CATALOG_PATH
        catalog_dir = Path(catalog_dir)

        data: Dict[str, Any] = {}
        for family in EntryFamily:
            path = catalog_dir / f"{family.value}.yaml"
            if not path.exists():
                _log_warning(f"No {family.value} catalog at {path}; family will be empty")
                continue

            loaded = OmegaConf.to_container(OmegaConf.load(path), resolve=True) or {}
            if not isinstance(loaded, dict):
                raise InvalidCatalogStructureError(
                    "Catalog file must contain a mapping", family=family.value, source_path=path
                )
            # Accept files with or without the top-level family key
            data[family.value] = loaded.get(family.value, loaded)

        catalog = cls.from_dict(data, source=str(catalog_dir))
        log_catalog_loaded(str(catalog_dir), catalog.counts())
        return catalog

    # =========================================================================
    # INTEGRITY
    # =========================================================================

    def validate(self) -> None:
        """
        Check identifier uniqueness per family and rebuild the id index.

        Raises:
            CatalogIntegrityError: If any family contains duplicate identifiers
        """
        index: Dict[EntryFamily, Dict[str, CatalogEntry]] = {}
        for family in EntryFamily:
            entries = list(self._iter_family(family))
            duplicates = find_duplicate_ids(entries)
            if duplicates:
                raise CatalogIntegrityError(
                    "Entry identifiers must be unique within a family",
                    family=family.value,
                    duplicate_ids=duplicates,
                    source_path=Path(self.source) if self.source else None,
                )
            index[family] = {entry.id: entry for entry in entries}
        self._index = index

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    def bucket(self, family: EntryFamily, vertical: str, lob: str) -> List[CatalogEntry]:
        """Entries filed under exactly (vertical, lob); empty if the bucket doesn't exist."""
        family = EntryFamily.parse(family)
        return list(self._tree[family].get(vertical, {}).get(lob, []))

    def vertical_entries(self, family: EntryFamily, vertical: str) -> List[CatalogEntry]:
        """All entries under a vertical, across its LOB buckets in catalog order."""
        family = EntryFamily.parse(family)
        entries: List[CatalogEntry] = []
        for lob_entries in self._tree[family].get(vertical, {}).values():
            entries.extend(lob_entries)
        return entries

    def all_entries(self, family: EntryFamily) -> List[CatalogEntry]:
        """Every entry of a family in catalog order."""
        return list(self._iter_family(EntryFamily.parse(family)))

    def find_entry(self, family: EntryFamily, entry_id: str) -> Optional[CatalogEntry]:
        """Look up an entry by identifier; None if it isn't in the catalog."""
        return self._index[EntryFamily.parse(family)].get(entry_id)

    def has_entry(self, family: EntryFamily, entry_id: str) -> bool:
        return entry_id in self._index[EntryFamily.parse(family)]

    def verticals(self, family: Optional[EntryFamily] = None) -> List[str]:
        """Vertical keys in catalog order (across all families when family is None)."""
        families = [EntryFamily.parse(family)] if family else list(EntryFamily)
        seen: List[str] = []
        for fam in families:
            for vertical in self._tree[fam]:
                if vertical not in seen:
                    seen.append(vertical)
        return seen

    def lobs(self, vertical: str, family: Optional[EntryFamily] = None) -> List[str]:
        """LOB keys filed under a vertical (across all families when family is None)."""
        families = [EntryFamily.parse(family)] if family else list(EntryFamily)
        seen: List[str] = []
        for fam in families:
            for lob in self._tree[fam].get(vertical, {}):
                if lob not in seen:
                    seen.append(lob)
        return seen

    def counts(self) -> Dict[str, int]:
        """Number of entries per family."""
        return {family.value: len(self._index[family]) for family in EntryFamily}

    def stats(self) -> Dict[str, Dict[str, int]]:
        """Entry counts per family and vertical."""
        result: Dict[str, Dict[str, int]] = {}
        for family in EntryFamily:
            result[family.value] = {
                vertical: sum(len(entries) for entries in lobs.values())
                for vertical, lobs in self._tree[family].items()
            }
        return result

    # =========================================================================
    # BROWSING HELPERS
    # =========================================================================

    def entries_with_tags(
        self, family: EntryFamily, tags: List[str], vertical: Optional[str] = None
    ) -> List[CatalogEntry]:
        """Entries carrying any of the given tags (all entries when tags is empty)."""
        family = EntryFamily.parse(family)
        pool = self.vertical_entries(family, vertical) if vertical else self.all_entries(family)
        if not tags:
            return pool
        return [entry for entry in pool if any(entry.has_tag(tag) for tag in tags)]

    def personas_by_influence(
        self, influence: str, vertical: Optional[str] = None
    ) -> List[Persona]:
        """Personas with the given influence (decision-maker, influencer, user)."""
        pool = (
            self.vertical_entries(EntryFamily.PERSONAS, vertical)
            if vertical
            else self.all_entries(EntryFamily.PERSONAS)
        )
        return [persona for persona in pool if persona.influence == influence]

    def resources_by_type(self, resource_type: str, vertical: Optional[str] = None) -> List[Resource]:
        """Resources of a given type (calculator, playbook, demo, ...)."""
        pool = (
            self.vertical_entries(EntryFamily.RESOURCES, vertical)
            if vertical
            else self.all_entries(EntryFamily.RESOURCES)
        )
        return [resource for resource in pool if resource.resource_type == resource_type]

    def use_cases_by_category(self, category: str, vertical: Optional[str] = None) -> List[UseCase]:
        """Use cases for a project type (rpa, idp, agentic, maestro)."""
        pool = (
            self.vertical_entries(EntryFamily.USE_CASES, vertical)
            if vertical
            else self.all_entries(EntryFamily.USE_CASES)
        )
        return [use_case for use_case in pool if use_case.category == category]

    # =========================================================================
    # ADMIN EDITS
    # =========================================================================

    def add_entry(self, entry: CatalogEntry) -> CatalogEntry:
        """
        File a new entry under its (vertical, lob) bucket.

        Raises:
            CatalogIntegrityError: If the family already has an entry with this id
        """
        family = entry.family
        if entry.id in self._index[family]:
            raise CatalogIntegrityError(
                f"Cannot add '{entry.id}': identifier already exists",
                family=family.value,
                duplicate_ids=[entry.id],
            )

        lobs = self._tree[family].setdefault(entry.vertical or GENERAL, {})
        lobs.setdefault(entry.lob or GENERAL, []).append(entry)
        self._index[family][entry.id] = entry
        log_admin_edit("add", family.value, entry.id)
        return entry

    def update_entry(self, family: EntryFamily, entry_id: str, **changes) -> CatalogEntry:
        """
        Replace fields of an existing entry.

        Changing vertical or lob moves the entry to the new bucket (appended at the end).
        The identifier itself cannot be changed; remove and re-add instead.

        Raises:
            EntryNotFoundError: If no entry has this id
            ValueError: If changes name an unknown field or try to change the id
            InvalidCatalogStructureError: If a structured field has the wrong shape
        """
        family = EntryFamily.parse(family)
        current = self.find_entry(family, entry_id)
        if current is None:
            raise EntryNotFoundError(f"No {family.value} entry with id '{entry_id}'")

        if "id" in changes and changes["id"] != entry_id:
            raise ValueError("Entry identifiers cannot be changed; remove and re-add instead")

        allowed = {f.name for f in fields(current)} - set(DERIVED_FIELDS)
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Unknown fields for {family.value}: {sorted(unknown)}")

        changes = normalize_entry_fields(family, changes, entry_id)
        updated = replace(current, **changes)

        if (updated.vertical, updated.lob) == (current.vertical, current.lob):
            bucket = self._tree[family][current.vertical][current.lob]
            bucket[bucket.index(current)] = updated
        else:
            self._detach(family, current)
            lobs = self._tree[family].setdefault(updated.vertical, {})
            lobs.setdefault(updated.lob, []).append(updated)

        self._index[family][entry_id] = updated
        log_admin_edit("update", family.value, entry_id)
        return updated

    def remove_entry(self, family: EntryFamily, entry_id: str) -> CatalogEntry:
        """
        Remove an entry from the catalog.

        Persisted selections that reference the id become stale and are skipped on read.

        Raises:
            EntryNotFoundError: If no entry has this id
        """
        family = EntryFamily.parse(family)
        current = self.find_entry(family, entry_id)
        if current is None:
            raise EntryNotFoundError(f"No {family.value} entry with id '{entry_id}'")

        self._detach(family, current)
        del self._index[family][entry_id]
        log_admin_edit("remove", family.value, entry_id)
        return current

    def replace_catalog(self, other: "ContentCatalog") -> None:
        """
        Swap in the full content of another (already validated) catalog.

        Used by bulk import. Holders of this catalog object see the new content on
        their next resolution.
        """
        self._tree = copy.deepcopy(other._tree)
        self.source = other.source
        self.validate()
        log_admin_edit("replace", "all", other.source or "<in-memory>")

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Nested plain-data form (family -> vertical -> lob -> records)."""
        result: Dict[str, Any] = {}
        for family in EntryFamily:
            result[family.value] = {
                vertical: {
                    lob: [_record(entry) for entry in entries] for lob, entries in lobs.items()
                }
                for vertical, lobs in self._tree[family].items()
            }
        return result

    def copy(self) -> "ContentCatalog":
        """Independent copy (entries are immutable, buckets are not shared)."""
        return ContentCatalog(copy.deepcopy(self._tree), source=self.source)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _iter_family(self, family: EntryFamily) -> Iterator[CatalogEntry]:
        for lobs in self._tree[family].values():
            for entries in lobs.values():
                yield from entries

    def _detach(self, family: EntryFamily, entry: CatalogEntry) -> None:
        lobs = self._tree[family][entry.vertical]
        lobs[entry.lob].remove(entry)
        if not lobs[entry.lob]:
            del lobs[entry.lob]
        if not lobs:
            del self._tree[family][entry.vertical]

    def __repr__(self) -> str:
        counts = ", ".join(f"{family}={count}" for family, count in self.counts().items())
        return f"ContentCatalog({counts})"


def _record(entry: CatalogEntry) -> Dict[str, Any]:
    # Classification is implied by the bucket
    data = entry.to_dict()
    data.pop("vertical", None)
    data.pop("lob", None)
    return data


def _parse_family(
    family: EntryFamily, verticals: Any, source: Optional[str]
) -> Dict[str, Dict[str, List[CatalogEntry]]]:
    source_path = Path(source) if source else None
    if verticals is None:
        return {}
    if not isinstance(verticals, dict):
        raise InvalidCatalogStructureError(
            "Family must map vertical -> lob -> entries",
            family=family.value,
            source_path=source_path,
        )

    parsed: Dict[str, Dict[str, List[CatalogEntry]]] = {}
    for vertical, lobs in verticals.items():
        if lobs is None:
            continue
        if not isinstance(lobs, dict):
            raise InvalidCatalogStructureError(
                f"Vertical '{vertical}' must map lob -> entries",
                family=family.value,
                source_path=source_path,
            )
        parsed[str(vertical)] = {}
        for lob, records in lobs.items():
            if records is None:
                records = []
            if not isinstance(records, list):
                raise InvalidCatalogStructureError(
                    f"Bucket '{vertical}/{lob}' must be a list of entries",
                    family=family.value,
                    source_path=source_path,
                )
            parsed[str(vertical)][str(lob)] = [
                entry_from_dict(family, record, str(vertical), str(lob)) for record in records
            ]
    return parsed
