#!/usr/bin/env python3
"""
Command-line interface for maintaining the content catalog.

The catalog lives in CONTENT_CATALOG_PATH as personas.yaml, resources.yaml, and
use_cases.yaml; stage baselines live in STAGES_PATH.

Commands:
    validate - Load catalog and stages, report integrity problems
    stats    - Entry counts per family and vertical
    export   - Write catalog and stages to a JSON export file
    import   - Validate a JSON export and write it into the catalog directory
"""

import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from compass.contexts.catalog.catalog import CATALOG_PATH, ContentCatalog
from compass.contexts.catalog.catalog_io import (
    export_catalog,
    import_catalog,
    write_catalog_directory,
    write_stages_file,
)
from compass.contexts.catalog.exceptions import CatalogIntegrityError, InvalidCatalogStructureError
from compass.contexts.catalog.logger import setup_catalog_logger
from compass.contexts.discovery.exceptions import InvalidStageStructureError
from compass.contexts.discovery.stages import STAGES_PATH, StageLibrary

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    add_completion=False,
    help="Validate, inspect, export, and import the content catalog",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("validate")
def validate_command(
    catalog_dir: Annotated[
        Optional[Path], typer.Option("--catalog-dir", help="Catalog directory (default: CONTENT_CATALOG_PATH)")
    ] = None,
    stages_path: Annotated[
        Optional[Path], typer.Option("--stages", help="Stages file (default: STAGES_PATH)")
    ] = None,
):
    """
    Load the catalog and stage baselines and report problems.

    Exits with code 1 on duplicate identifiers, missing required fields, or objections
    without a response.

    Examples:\n

        $ manage_catalog.py validate

        $ manage_catalog.py validate --catalog-dir /tmp/catalog
    """
    setup_catalog_logger(LOGS_PATH / "catalog", phase="validate")

    try:
        catalog = ContentCatalog.from_directory(catalog_dir)
        stages = StageLibrary.from_yaml(stages_path)
    except (CatalogIntegrityError, InvalidCatalogStructureError, InvalidStageStructureError) as e:
        typer.secho(f"✗ Validation failed:\n{e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    counts = catalog.counts()
    typer.secho("✓ Catalog is valid", fg=typer.colors.GREEN)
    for family, count in counts.items():
        typer.echo(f"  {family:12} {count}")
    typer.echo(f"  {'stages':12} {len(stages)}")


@app.command("stats")
def stats_command(
    catalog_dir: Annotated[
        Optional[Path], typer.Option("--catalog-dir", help="Catalog directory (default: CONTENT_CATALOG_PATH)")
    ] = None,
):
    """
    Show entry counts per family and vertical.

    Examples:\n

        $ manage_catalog.py stats
    """
    catalog = ContentCatalog.from_directory(catalog_dir)
    stats = catalog.stats()

    typer.secho("\nCatalog Statistics", fg=typer.colors.BLUE, bold=True)
    typer.echo("=" * 80)
    for family, verticals in stats.items():
        typer.secho(f"\n{family} ({sum(verticals.values())})", bold=True)
        for vertical, count in verticals.items():
            lobs = ", ".join(catalog.lobs(vertical, family))
            typer.echo(f"  {vertical:15} {count:4}   {lobs}")


@app.command("export")
def export_command(
    output_file: Annotated[Path, typer.Argument(help="Destination JSON file", dir_okay=False)],
    catalog_dir: Annotated[
        Optional[Path], typer.Option("--catalog-dir", help="Catalog directory (default: CONTENT_CATALOG_PATH)")
    ] = None,
    stages_path: Annotated[
        Optional[Path], typer.Option("--stages", help="Stages file (default: STAGES_PATH)")
    ] = None,
):
    """
    Export catalog and stage baselines to one JSON file.

    Examples:\n

        $ manage_catalog.py export outs/catalog_export.json
    """
    setup_catalog_logger(LOGS_PATH / "catalog", phase="export")

    catalog = ContentCatalog.from_directory(catalog_dir)
    stages = StageLibrary.from_yaml(stages_path)
    export_catalog(catalog, output_file, stages=stages.to_dict())

    typer.secho(f"✓ Exported to {output_file}", fg=typer.colors.GREEN)
    for family, count in catalog.counts().items():
        typer.echo(f"  {family:12} {count}")
    typer.echo(f"  {'stages':12} {len(stages)}")


@app.command("import")
def import_command(
    input_file: Annotated[
        Path, typer.Argument(help="JSON export to import", exists=True, dir_okay=False)
    ],
    catalog_dir: Annotated[
        Optional[Path], typer.Option("--catalog-dir", help="Target catalog directory (default: CONTENT_CATALOG_PATH)")
    ] = None,
    stages_path: Annotated[
        Optional[Path], typer.Option("--stages", help="Target stages file (default: STAGES_PATH)")
    ] = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", "-n", help="Validate only, write nothing")
    ] = False,
):
    """
    Import a JSON export, replacing the catalog files and stage baselines.

    The file is fully validated (shape, identifiers, objection responses) before
    anything is written.

    Examples:\n

        $ manage_catalog.py import outs/catalog_export.json --dry-run

        $ manage_catalog.py import outs/catalog_export.json
    """
    setup_catalog_logger(LOGS_PATH / "catalog", phase="import")

    try:
        catalog, raw_stages = import_catalog(input_file)
        stages = StageLibrary.from_dict(raw_stages, source_path=input_file)
    except (CatalogIntegrityError, InvalidCatalogStructureError, InvalidStageStructureError) as e:
        typer.secho(f"✗ Import rejected:\n{e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"✓ {input_file} is valid", fg=typer.colors.GREEN)
    for family, count in catalog.counts().items():
        typer.echo(f"  {family:12} {count}")
    typer.echo(f"  {'stages':12} {len(stages)}")

    if dry_run:
        typer.echo("\nDry run complete. Run without --dry-run to write the catalog.")
        return

    write_catalog_directory(catalog, catalog_dir or CATALOG_PATH)
    write_stages_file(stages.to_dict(), stages_path or STAGES_PATH)
    typer.secho("✓ Catalog and stages written", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
