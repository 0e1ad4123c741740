"""
Catalog JSON export and import (bulk admin path).

Export file shape:
    {
        "version": "1.0",
        "exportDate": "2025-01-15T10:30:00",
        "content": {
            "personas":  {vertical: {lob: [records]}},
            "resources": {...},
            "use_cases": {...},
            "stages":    {stage_id: {...}}      # optional
        }
    }

Import validates the same shape and runs the full catalog integrity checks, so a
rejected file never replaces the active catalog.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from omegaconf import OmegaConf

from compass.contexts.catalog.catalog import ContentCatalog
from compass.contexts.catalog.entries import EntryFamily
from compass.contexts.catalog.exceptions import InvalidCatalogStructureError
from compass.contexts.catalog.logger import _log_info, _log_success
from compass.utils.atomic_write import write_text_atomic
from compass.utils.event_logging import log_guide_event
from compass.utils.timestamp import now_exact

EXPORT_VERSION = "1.0"
REQUIRED_SECTIONS = ("personas", "stages")


def build_export(catalog: ContentCatalog, stages: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Assemble the export document for a catalog and (optionally) stage baselines."""
    content = catalog.to_dict()
    if stages is not None:
        content["stages"] = stages
    return {
        "version": EXPORT_VERSION,
        "exportDate": now_exact(),
        "content": content,
    }


def export_catalog(
    catalog: ContentCatalog,
    output_path: Path,
    stages: Optional[Dict[str, Any]] = None,
    events_file: Optional[Path] = None,
) -> Path:
    """
    Write the catalog (and stage baselines) to a JSON export file.

    Args:
        catalog: Catalog to export
        output_path: Destination file (replaced atomically)
        stages: Plain-data stage baselines (StageLibrary.to_dict())
        events_file: Guide event log override

    Returns:
        Path to written export
    """
    output_path = Path(output_path)
    document = build_export(catalog, stages)
    write_text_atomic(output_path, json.dumps(document, indent=2) + "\n", suffix=".json")

    counts = catalog.counts()
    _log_success(f"Exported catalog to {output_path}")
    log_guide_event(
        "catalog_exported",
        source="catalog",
        events_file=events_file,
        path=str(output_path),
        counts=counts,
        includes_stages=stages is not None,
    )
    return output_path


def write_catalog_directory(catalog: ContentCatalog, catalog_dir: Path) -> List[Path]:
    """
    Write a catalog as {family}.yaml files (the layout from_directory reads).

    Returns:
        Paths written, one per family
    """
    catalog_dir = Path(catalog_dir)
    written = []
    for family, verticals in catalog.to_dict().items():
        conf = OmegaConf.create({family: verticals})
        path = catalog_dir / f"{family}.yaml"
        write_text_atomic(path, OmegaConf.to_yaml(conf).rstrip() + "\n", suffix=".yaml")
        written.append(path)

    _log_success(f"Wrote catalog files to {catalog_dir}")
    return written


def write_stages_file(stages: Dict[str, Any], stages_path: Path) -> Path:
    """Write plain-data stage baselines in the stages.yaml layout."""
    stages_path = Path(stages_path)
    conf = OmegaConf.create({"stages": stages})
    write_text_atomic(stages_path, OmegaConf.to_yaml(conf).rstrip() + "\n", suffix=".yaml")
    _log_success(f"Wrote stage baselines to {stages_path}")
    return stages_path


def parse_export(
    document: Any, source_path: Optional[Path] = None
) -> Tuple[ContentCatalog, Dict[str, Any]]:
    """
    Validate an export document and build a catalog from it.

    Returns:
        (catalog, raw stage baselines)

    Raises:
        InvalidCatalogStructureError: If the document lacks the expected sections
        CatalogIntegrityError: If the content contains duplicate identifiers
    """
    if not isinstance(document, dict):
        raise InvalidCatalogStructureError("Import file must contain a JSON object", source_path=source_path)

    content = document.get("content")
    if not isinstance(content, dict):
        raise InvalidCatalogStructureError("Import file has no 'content' section", source_path=source_path)

    missing = [section for section in REQUIRED_SECTIONS if section not in content]
    if missing:
        raise InvalidCatalogStructureError(
            f"Invalid import: missing {', '.join(missing)}", source_path=source_path
        )

    stages = content.get("stages") or {}
    if not isinstance(stages, dict):
        raise InvalidCatalogStructureError("'stages' must be a mapping", source_path=source_path)

    families = {family.value: content.get(family.value) or {} for family in EntryFamily}
    source = str(source_path) if source_path else None
    catalog = ContentCatalog.from_dict(families, source=source)
    return catalog, stages


def import_catalog(
    input_path: Path, events_file: Optional[Path] = None
) -> Tuple[ContentCatalog, Dict[str, Any]]:
    """
    Load a JSON export file.

    Args:
        input_path: Export file to read
        events_file: Guide event log override

    Returns:
        (validated catalog, raw stage baselines for StageLibrary.from_dict)

    Raises:
        FileNotFoundError: If input_path doesn't exist
        InvalidCatalogStructureError: If the file is not valid JSON or lacks sections
        CatalogIntegrityError: If the content contains duplicate identifiers
    """
    input_path = Path(input_path)
    if not input_path.exists():
        raise FileNotFoundError(f"Import file not found: {input_path}")

    try:
        document = json.loads(input_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidCatalogStructureError(f"Import file is not valid JSON: {e}", source_path=input_path)

    catalog, stages = parse_export(document, source_path=input_path)
    _log_info(f"Parsed export version {document.get('version', '?')} from {input_path}")

    _log_success(f"Imported catalog from {input_path}")
    log_guide_event(
        "catalog_imported",
        source="catalog",
        events_file=events_file,
        path=str(input_path),
        counts=catalog.counts(),
        stage_count=len(stages),
    )
    return catalog, stages
