#!/usr/bin/env python3
"""
Explore the sales guide for a selection context.

Resolves personas, resources, and use cases, and shows a stage's discovery questions
and objections with the context overlay applied.

Commands:
    resolve     - Ranked entries of one family for a context
    questions   - Stage questions (baseline + overlay categories)
    objections  - Stage objections (baseline + overlay pairs)
    stages      - List stage ids
"""

import os
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from compass.contexts.catalog.catalog import ContentCatalog
from compass.contexts.catalog.entries import EntryFamily
from compass.contexts.discovery.augmenter import augment_stage
from compass.contexts.discovery.exceptions import StageNotFoundError
from compass.contexts.discovery.logger import setup_discovery_logger
from compass.contexts.discovery.stages import StageLibrary
from compass.contexts.targeting.logger import setup_targeting_logger
from compass.contexts.targeting.resolver import resolve
from compass.contexts.targeting.selection_context import SelectionContext

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    add_completion=False,
    help="Resolve content and stage questions for a selection context",
    invoke_without_command=True,
)

VerticalOption = Annotated[Optional[str], typer.Option("--vertical", "-V", help="Industry vertical (e.g. banking)")]
LobOption = Annotated[Optional[str], typer.Option("--lob", "-l", help="Line of business (e.g. capital-markets)")]
CustomerOption = Annotated[
    Optional[str], typer.Option("--customer-type", "-c", help="new-logo or existing")
]
DeploymentOption = Annotated[
    Optional[str], typer.Option("--deployment", "-d", help="Deployment model (e.g. cloud)")
]
ProjectTypeOption = Annotated[
    Optional[List[str]],
    typer.Option("--project-type", "-p", help="Project type (repeatable, order matters)"),
]


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _context(vertical, lob, customer_type, deployment, project_types) -> SelectionContext:
    return SelectionContext(
        vertical=vertical,
        lob=lob,
        customer_type=customer_type,
        deployment=deployment,
        project_types=tuple(project_types or ()),
    )


def _load_stage(stage_id: Optional[str]):
    library = StageLibrary.from_yaml()
    stage_id = stage_id or library.first_id()
    try:
        return library.get(stage_id)
    except StageNotFoundError as e:
        typer.secho(f"Error: {e.args[0]}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command("resolve")
def resolve_command(
    family: Annotated[str, typer.Argument(help="personas, resources, or use_cases")] = "personas",
    vertical: VerticalOption = None,
    lob: LobOption = None,
    customer_type: CustomerOption = None,
    deployment: DeploymentOption = None,
    project_type: ProjectTypeOption = None,
    level: Annotated[
        Optional[str], typer.Option("--level", help="Persona-level filter (e.g. c-suite)")
    ] = None,
):
    """
    Show the ranked entries of a family for a context.

    Examples:\n

        $ explore_guide.py resolve personas --vertical banking --lob capital-markets

        $ explore_guide.py resolve resources -V banking -d cloud -c new-logo
    """
    setup_targeting_logger(LOGS_PATH / "explore", phase="resolve")

    try:
        entry_family = EntryFamily.parse(family)
    except ValueError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    context = _context(vertical, lob, customer_type, deployment, project_type)
    catalog = ContentCatalog.from_directory()
    entries = resolve(catalog, entry_family, context, level_filter=level)

    typer.secho(f"\n{entry_family.value} for {context}", fg=typer.colors.BLUE, bold=True)
    if not entries:
        typer.echo("  (no results for this context)")
        return

    max_id_len = max(len(entry.id) for entry in entries)
    for entry in entries:
        padding = " " * (max_id_len - len(entry.id))
        typer.echo(f"  {entry.id}{padding}  {entry.priority or '-':6}  {entry.title}")
        for note in (
            getattr(entry, "active_deployment_note", None),
            getattr(entry, "active_customer_note", None),
        ):
            if note:
                typer.echo(f"  {' ' * max_id_len}    → {note}")

    typer.echo(f"\nTotal: {len(entries)}")


@app.command("questions")
def questions_command(
    stage: Annotated[Optional[str], typer.Argument(help="Stage id (defaults to the first stage)")] = None,
    lob: LobOption = None,
    project_type: ProjectTypeOption = None,
):
    """
    Show a stage's discovery questions with the context overlay.

    Examples:\n

        $ explore_guide.py questions discovery --lob finance -p rpa
    """
    setup_discovery_logger(LOGS_PATH / "explore", phase="questions")
    baseline = _load_stage(stage)
    augmented = augment_stage(baseline, _context(None, lob, None, None, project_type))

    typer.secho(f"\n{augmented.title}", fg=typer.colors.BLUE, bold=True)
    for category, questions in augmented.questions.items():
        marker = " (context)" if category in augmented.augmented_categories else ""
        typer.secho(f"\n{category}{marker}", bold=True)
        for question in questions:
            typer.echo(f"  • {question}")


@app.command("objections")
def objections_command(
    stage: Annotated[Optional[str], typer.Argument(help="Stage id (defaults to the first stage)")] = None,
    lob: LobOption = None,
    project_type: ProjectTypeOption = None,
):
    """
    Show a stage's objections and responses with the context overlay.

    Examples:\n

        $ explore_guide.py objections proposal --lob compliance -p agentic
    """
    setup_discovery_logger(LOGS_PATH / "explore", phase="objections")
    baseline = _load_stage(stage)
    augmented = augment_stage(baseline, _context(None, lob, None, None, project_type))

    typer.secho(f"\n{augmented.title}", fg=typer.colors.BLUE, bold=True)
    first_added = len(augmented.objections) - augmented.augmented_objection_count
    for index, objection in enumerate(augmented.objections):
        color = typer.colors.YELLOW if index >= first_added else None
        typer.secho(f"\n  \"{objection.challenge}\"", fg=color, bold=True)
        typer.echo(f"    {objection.response}")


@app.command("stages")
def stages_command():
    """List stage ids in order."""
    library = StageLibrary.from_yaml()
    for stage in library:
        typer.echo(f"  {stage.id:25} {stage.title}")


if __name__ == "__main__":
    app()
