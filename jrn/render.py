"""
Rendering functions for jrn output.

This module handles all pretty-printing and table formatting.
Core functions return data, this module makes it human-readable.
"""

from pathlib import Path
from typing import Iterable, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from .config import Config
from .domain import Entry
from .tags import TagCount

console = Console()


def _table(title: Optional[str] = None) -> Table:
    return Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )


def render_entries(entries: List[Entry], root: Optional[Path] = None, show_content: bool = False) -> None:
    """
    Render journal entries as a table, or one after another with their text.

    Args:
        entries: Entries in display order
        root: Paths are shown relative to this directory
        show_content: Print each entry's file content instead of a table
    """
    if not entries:
        console.print("[yellow]No entries found.[/yellow]")
        return

    if show_content:
        for entry in entries:
            render_entry_content(entry, root)
        return

    table = _table()
    table.add_column("Time", style="cyan", no_wrap=True)
    table.add_column("Tags", style="green")
    table.add_column("File")
    for entry in entries:
        table.add_row(
            str(entry.creation_time),
            ", ".join(entry.tags),
            str(entry.relative_path(root))
        )
    console.print(table)


def render_entry_content(entry: Entry, root: Optional[Path] = None) -> None:
    """Print an entry's file name as a rule followed by its text."""
    console.rule(f"[bold]{entry.relative_path(root)}[/bold]", align="left")
    try:
        text = entry.file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Can not read entry: {e}[/red]")
        return
    console.print(text, markup=False, highlight=False)


def render_tags(tags: Iterable[TagCount]) -> None:
    """Render tag counts, most used first."""
    tags = list(tags)
    if not tags:
        console.print("[yellow]No tags found.[/yellow]")
        return

    table = _table()
    table.add_column("Count", justify="right", style="cyan")
    table.add_column("Tag", style="green")
    for item in tags:
        table.add_row(str(item.count), item.tag)
    console.print(table)


def render_config(config: Config) -> None:
    """Render every config key with its effective value and source scope."""
    table = _table("Configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_column("Source", style="dim")
    for key, value, scope in config.items():
        table.add_row(key, value, scope.label if scope is not None else "")
    console.print(table)
