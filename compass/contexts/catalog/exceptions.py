"""Custom exceptions for the catalog context with family and entry references."""

from pathlib import Path
from typing import List, Optional


class CatalogIntegrityError(Exception):
    """
    Exception raised when catalog content violates an integrity rule.

    The catalog is rejected as a whole; resolution never runs against an ambiguous
    catalog.

    Attributes:
        message: Error description
        family: Entry family with the violation (e.g., 'personas')
        duplicate_ids: Identifiers that appear more than once within the family
        source_path: File the catalog was loaded from, if any
    """

    def __init__(
        self,
        message: str,
        family: Optional[str] = None,
        duplicate_ids: Optional[List[str]] = None,
        source_path: Optional[Path] = None,
    ):
        self.message = message
        self.family = family
        self.duplicate_ids = duplicate_ids or []
        self.source_path = source_path

        parts = [message]

        if family:
            parts.append(f"Family: {family}")

        if self.duplicate_ids:
            parts.append(f"Duplicate ids: {', '.join(self.duplicate_ids)}")

        if source_path:
            parts.append(f"Source: {source_path}")

        super().__init__("\n".join(parts))


class InvalidCatalogStructureError(ValueError):
    """
    Exception raised when catalog data doesn't match the expected shape.

    Raised for records missing required fields (id, title), non-mapping buckets,
    or import files without the expected top-level sections.
    """

    def __init__(
        self,
        message: str,
        family: Optional[str] = None,
        entry_id: Optional[str] = None,
        source_path: Optional[Path] = None,
    ):
        self.message = message
        self.family = family
        self.entry_id = entry_id
        self.source_path = source_path

        parts = [message]
        if family:
            parts.append(f"Family: {family}")
        if entry_id:
            parts.append(f"Entry: {entry_id}")
        if source_path:
            parts.append(f"Source: {source_path}")

        super().__init__("\n".join(parts))


class EntryNotFoundError(KeyError):
    """Exception raised by admin edits that reference an unknown entry id."""

    pass
