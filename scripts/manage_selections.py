#!/usr/bin/env python3
"""
Command-line interface for context-scoped selections.

Selections are stored in SELECTIONS_PATH, one record per entry family, keyed by the
context's storage key ("{vertical}-{lob}").

Commands:
    list   - Selected entries under a context (or every storage key with --all)
    toggle - Select or deselect an entry under a context
    clear  - Clear selections under a context
    events - Recent guide events from the event log
"""

import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from compass.contexts.catalog.entries import EntryFamily
from compass.contexts.selections.logger import setup_selections_logger
from compass.guide import SalesGuide
from compass.utils.event_logging import get_recent_events
from compass.utils.timestamp import format_timestamp

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    add_completion=False,
    help="Manage selections stored per selection context",
    invoke_without_command=True,
)

VerticalOption = Annotated[Optional[str], typer.Option("--vertical", "-V", help="Industry vertical")]
LobOption = Annotated[Optional[str], typer.Option("--lob", "-l", help="Line of business")]
SelectionsOption = Annotated[
    Optional[Path],
    typer.Option("--selections", help="Selections file (default: SELECTIONS_PATH)", dir_okay=False),
]


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _parse_family(family: str) -> EntryFamily:
    try:
        return EntryFamily.parse(family)
    except ValueError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _guide(vertical, lob, selections) -> SalesGuide:
    guide = SalesGuide.from_config(selections_path=selections)
    guide.set_context(vertical=vertical, lob=lob)
    return guide


@app.command("list")
def list_command(
    family: Annotated[str, typer.Argument(help="personas, resources, or use_cases")] = "personas",
    vertical: VerticalOption = None,
    lob: LobOption = None,
    show_all: Annotated[
        bool, typer.Option("--all", "-a", help="Show stored ids under every storage key")
    ] = False,
    selections: SelectionsOption = None,
):
    """
    List selected entries.

    Examples:\n

        $ manage_selections.py list personas -V banking -l capital-markets

        $ manage_selections.py list resources --all
    """
    entry_family = _parse_family(family)
    guide = _guide(vertical, lob, selections)

    if show_all:
        records = guide.selection_store(entry_family).records()
        typer.secho(f"\nStored {entry_family.value} selections:", fg=typer.colors.BLUE, bold=True)
        if not records:
            typer.echo("  (none)")
            return
        for key, ids in records.items():
            typer.echo(f"  {key:30} {', '.join(ids)}")
        return

    entries = guide.get_selected(entry_family)
    typer.secho(
        f"\nSelected {entry_family.value} under '{guide.context.storage_key}':",
        fg=typer.colors.BLUE,
        bold=True,
    )
    if not entries:
        typer.echo("  (none)")
        return
    for entry in entries:
        typer.echo(f"  {entry.id:35} {entry.title}")
    typer.echo(f"\nTotal: {len(entries)}")


@app.command("toggle")
def toggle_command(
    family: Annotated[str, typer.Argument(help="personas, resources, or use_cases")],
    entry_id: Annotated[str, typer.Argument(help="Entry identifier")],
    vertical: VerticalOption = None,
    lob: LobOption = None,
    selections: SelectionsOption = None,
):
    """
    Select an entry under a context, or deselect it if already selected.

    Only entries that resolve under the context can be selected.

    Examples:\n

        $ manage_selections.py toggle personas banking-trading-ops-head -V banking -l capital-markets
    """
    setup_selections_logger(LOGS_PATH / "selections", phase="toggle")

    entry_family = _parse_family(family)
    guide = _guide(vertical, lob, selections)
    was_selected = guide.is_selected(entry_family, entry_id)
    selected = guide.toggle(entry_family, entry_id)

    key = guide.context.storage_key
    if selected:
        typer.secho(f"✓ Selected {entry_id} under '{key}'", fg=typer.colors.GREEN)
    elif was_selected:
        typer.secho(f"⊘ Deselected {entry_id} under '{key}'", fg=typer.colors.YELLOW)
    else:
        typer.secho(
            f"✗ {entry_id} does not resolve under '{key}'; nothing selected",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)


@app.command("clear")
def clear_command(
    family: Annotated[
        Optional[str], typer.Argument(help="Family to clear (default: all families)")
    ] = None,
    vertical: VerticalOption = None,
    lob: LobOption = None,
    selections: SelectionsOption = None,
):
    """
    Clear selections under a context.

    Examples:\n

        $ manage_selections.py clear -V banking -l capital-markets

        $ manage_selections.py clear personas -V insurance
    """
    setup_selections_logger(LOGS_PATH / "selections", phase="clear")

    entry_family = _parse_family(family) if family else None
    guide = _guide(vertical, lob, selections)
    removed = guide.clear_selections(entry_family)

    typer.secho(
        f"✓ Cleared {removed} selection(s) under '{guide.context.storage_key}'",
        fg=typer.colors.GREEN,
    )


@app.command("events")
def events_command(
    count: Annotated[int, typer.Option("--count", "-n", help="Number of events to show")] = 10,
    event_type: Annotated[
        Optional[str], typer.Option("--type", "-t", help="Only this event type (e.g. selection_toggled)")
    ] = None,
    events_file: Annotated[
        Optional[Path], typer.Option("--events-file", help="Event log (default: GUIDE_EVENTS_FILE)")
    ] = None,
):
    """
    Show recent guide events (selection toggles, clears, catalog imports/exports).

    Examples:\n

        $ manage_selections.py events -n 20

        $ manage_selections.py events --type selection_toggled
    """
    events = get_recent_events(count, event_type=event_type, events_file=events_file)
    if not events:
        typer.echo("No guide events recorded (set GUIDE_EVENTS_FILE to enable the event log)")
        return

    for event in events:
        when = format_timestamp(event.get("timestamp", ""), relative=True)
        details = ", ".join(
            f"{key}={value}"
            for key, value in event.items()
            if key not in ("timestamp", "event_type", "source")
        )
        typer.echo(f"  {when:>10}  {event.get('event_type', '?'):20} {details}")


if __name__ == "__main__":
    app()
