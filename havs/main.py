from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from havs import reporter
from havs.config import get_settings
from havs.errors import HavsError
from havs.tracker import ExposureTracker, build_tracker
from havs.utils.logging import configure_logging
from havs.validation import parse_tool_input

app = typer.Typer(help="Hand-arm vibration exposure tracker.")

console = Console()


def _tracker() -> ExposureTracker:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)
    return build_tracker(settings)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"tools={settings.tools_path} | ledger={settings.state_db_path} | "
        f"seed={settings.seed_path or 'bundled'} | timezone={settings.timezone or 'local'}"
    )


@app.command()
def tools() -> None:
    """
    List the tool catalog with today's minutes per tool.
    """
    reporter.print_tools(_tracker().snapshot(), console)


@app.command("add-tool")
def add_tool(
    maker: str = typer.Argument(..., help="Manufacturer."),
    model: str = typer.Argument(..., help="Model name or number."),
    vibration: str = typer.Argument(..., help="Vibration magnitude in m/s² (e.g. 5.0 or 5,0)."),
    max_minutes: str = typer.Option("", "--max-minutes", "-m", help="Minutes to reach 350 points."),
    noise_db: str = typer.Option("", "--noise-db", "-n", help="Noise level in dB."),
) -> None:
    """
    Add a tool to the catalog.
    """
    draft = parse_tool_input(maker, model, vibration, max_minutes, noise_db)
    reporter.print_tool(_tracker().add_tool(draft), console)


@app.command("edit-tool")
def edit_tool(
    tool_id: str = typer.Argument(..., help="Id of the tool to edit."),
    maker: str = typer.Argument(..., help="Manufacturer."),
    model: str = typer.Argument(..., help="Model name or number."),
    vibration: str = typer.Argument(..., help="Vibration magnitude in m/s²."),
    max_minutes: str = typer.Option("", "--max-minutes", "-m", help="Minutes to reach 350 points."),
    noise_db: str = typer.Option("", "--noise-db", "-n", help="Noise level in dB."),
) -> None:
    """
    Replace a tool's attributes. Existing history keeps the old values.
    """
    draft = parse_tool_input(maker, model, vibration, max_minutes, noise_db)
    reporter.print_tool(_tracker().update_tool(tool_id, draft), console)


@app.command("remove-tool")
def remove_tool(tool_id: str = typer.Argument(..., help="Id of the tool to delete.")) -> None:
    """
    Delete a tool along with today's entries and history for it.
    """
    _tracker().remove_tool(tool_id)
    typer.echo(f"Removed tool {tool_id}.")


@app.command()
def log(
    tool_id: str = typer.Argument(..., help="Id of the tool used."),
    minutes: int = typer.Argument(..., help="Minutes of trigger time to add."),
) -> None:
    """
    Record minutes of use for a tool and show the points it scored.
    """
    tracker = _tracker()
    record = tracker.add_exposure(tool_id, minutes)
    if record is None:
        typer.echo("Nothing recorded (zero minutes or unknown tool).", err=True)
        return
    reporter.print_exposure(record, console)
    reporter.print_history(tracker.snapshot(), console)


@app.command()
def history() -> None:
    """
    Show today's exposure history and total points.
    """
    reporter.print_history(_tracker().snapshot(), console)


@app.command()
def clear(yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation.")) -> None:
    """
    Clear today's entries and history. The catalog is kept.
    """
    if not yes:
        typer.confirm("Clear today's history?", abort=True)
    _tracker().clear_today()
    typer.echo("Today's history cleared.")


@app.command("export")
def export_tools(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to a file instead of stdout."),
) -> None:
    """
    Print (or save) the tool catalog JSON.
    """
    raw = _tracker().export_tools_json()
    if output is None:
        typer.echo(raw)
        return
    output.write_text(raw, encoding="utf-8")
    typer.echo(f"Exported catalog to {output}.")


@app.command("import")
def import_tools(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Catalog JSON file."),
) -> None:
    """
    Replace the tool catalog with a JSON file. Invalid files change nothing.
    """
    imported = _tracker().import_tools_json(source.read_bytes())
    typer.echo(f"Imported {len(imported)} tool(s).")


def main() -> None:
    try:
        app()
    except HavsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
