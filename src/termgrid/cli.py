"""CLI entry point for termgrid.

Provides commands:
  - parse: Parse a search query and show its free text, filters and errors
  - layout: Allocate column widths for a terminal width
  - demo: Launch the interactive Textual demo
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from termgrid.config import ConfigError, default_config, load_config
from termgrid.layout import calculate_column_widths, calculate_minimum_width
from termgrid.models import FLEXIBLE, Column, SearchShortcut
from termgrid.search import extract_filter_keys, parse_search_query, validate_search_query

app = typer.Typer(
    help="termgrid - search, lay out and navigate terminal lists",
    rich_markup_mode="rich",
    no_args_is_help=True,
)
console = Console()


def parse_shortcut_option(spec: str) -> SearchShortcut:
    """``key`` or ``key=v1,v2`` into a SearchShortcut."""
    key, _, values = spec.partition("=")
    key = key.strip()
    if not key or ":" in key:
        raise typer.BadParameter(f"invalid shortcut {spec!r}; expected key or key=v1,v2")
    parsed_values = tuple(v.strip() for v in values.split(",") if v.strip()) if values else None
    return SearchShortcut(key=key, label=key, values=parsed_values)


def parse_column_option(spec: str) -> Column:
    """``label[:width|flex][:s]`` into a Column; ``s`` marks it sortable."""
    parts = spec.split(":")
    label = parts[0].strip()
    if not label:
        raise typer.BadParameter(f"invalid column {spec!r}; label is empty")
    width: int | str = FLEXIBLE
    sortable = False
    for part in parts[1:]:
        part = part.strip().lower()
        if part == "s":
            sortable = True
        elif part in ("flex", FLEXIBLE):
            width = FLEXIBLE
        else:
            try:
                width = int(part)
            except ValueError:
                raise typer.BadParameter(f"invalid column width {part!r} in {spec!r}")
            if width < 0:
                raise typer.BadParameter(f"column width must be >= 0 in {spec!r}")
    return Column(key=label.lower(), label=label, width=width, sortable=sortable)


@app.command()
def parse(
    query: Annotated[str, typer.Argument(help="Search query, e.g. 'status:done urgent'")],
    shortcut: Annotated[
        Optional[list[str]],
        typer.Option("--shortcut", "-s", help="Filter key, optionally with values: key=v1,v2"),
    ] = None,
) -> None:
    """Parse a search query into free text and filters."""
    shortcuts = [parse_shortcut_option(s) for s in shortcut or []]
    parsed = parse_search_query(query, shortcuts)

    table = Table(title="Parsed Search")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Free text", escape(parsed.text) if parsed.text else "[dim](none)[/dim]")
    for key, values in parsed.filters.items():
        table.add_row(f"Filter [cyan]{escape(key)}[/cyan]", escape(", ".join(values)))
    unknown = [k for k in extract_filter_keys(query) if k not in parsed.filters]
    if unknown:
        table.add_row("Unrecognized keys", f"[yellow]{escape(', '.join(unknown))}[/yellow]")
    console.print(table)

    validation = validate_search_query(query, shortcuts)
    if not validation.valid:
        for error in validation.errors:
            console.print(f"[red]Error:[/red] {escape(error)}")
        raise typer.Exit(code=1)


@app.command()
def layout(
    width: Annotated[int, typer.Argument(help="Terminal width in cells", min=0)],
    column: Annotated[
        list[str],
        typer.Option("--column", "-c", help="Column as label[:width|flex][:s]"),
    ],
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", help="JSON config with layout settings"),
    ] = None,
) -> None:
    """Allocate column widths for a terminal of WIDTH cells."""
    config = _load(config_path)
    columns = [parse_column_option(c) for c in column]
    layout_config = config.layout_for(width)
    result = calculate_column_widths(columns, layout_config)

    table = Table(title=f"Column Layout ({width} cells)")
    table.add_column("Column", style="bold")
    table.add_column("Requested")
    table.add_column("Width", justify="right")
    table.add_column("Allocation")
    for allocated in result.columns:
        kind = allocated.kind.value
        if allocated.truncated:
            kind += " [yellow](truncated)[/yellow]"
        table.add_row(
            allocated.column.label,
            str(allocated.column.width),
            str(allocated.width),
            kind,
        )
    console.print(table)

    console.print(f"[bold]Total width:[/bold] {result.total_width}")
    console.print(f"[bold]Remaining:[/bold] {result.remaining_width}")
    if result.fits_in_terminal:
        console.print("[green]Fits in terminal[/green]")
    else:
        needed = calculate_minimum_width(columns, layout_config)
        console.print(f"[red]Does not fit[/red] (minimum terminal width {needed})")


@app.command()
def demo(
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", help="JSON config for the demo list"),
    ] = None,
    log_dir: Annotated[
        str,
        typer.Option("--log-dir", help="Directory for JSON-lines logs"),
    ] = "logs",
) -> None:
    """Launch the interactive demo list."""
    _load(config_path)
    from termgrid.tui import run_tui

    run_tui(config_path=config_path, log_dir=log_dir)


def _load(config_path: Path | None):
    if config_path is None:
        return default_config()
    try:
        return load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
