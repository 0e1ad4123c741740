"""
Catalog Context

Responsibilities:
- Defines typed entries for personas, resources, and use cases
- Loads curated content from YAML and rejects catalogs with duplicate identifiers
- Serves buckets and browsing filters to the resolution engine
- Applies admin edits (add/update/remove) and bulk JSON import/export

Owns: Content shape, catalog integrity, catalog files
Never: Decides which content applies to a selection context
"""

from compass.contexts.catalog.catalog import ContentCatalog
from compass.contexts.catalog.entries import (
    GENERAL,
    CatalogEntry,
    EntryFamily,
    Persona,
    Resource,
    UseCase,
    entry_from_dict,
)
from compass.contexts.catalog.exceptions import (
    CatalogIntegrityError,
    EntryNotFoundError,
    InvalidCatalogStructureError,
)

__all__ = [
    "GENERAL",
    "CatalogEntry",
    "CatalogIntegrityError",
    "ContentCatalog",
    "EntryFamily",
    "EntryNotFoundError",
    "InvalidCatalogStructureError",
    "Persona",
    "Resource",
    "UseCase",
    "entry_from_dict",
]
