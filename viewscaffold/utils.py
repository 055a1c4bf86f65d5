"""Shared utility functions for viewscaffold.

Provides Rich-based console output, logging setup for the command line,
and a path helper for reporting written files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from viewscaffold.parser.models import ModelProperty

console = Console()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def configure_logging(enable: bool = False) -> None:
    """Route library log records through Rich on the shared console.

    Args:
        enable: Emit ``DEBUG`` records when ``True``; otherwise only
            warnings and errors are shown.
    """
    level = logging.DEBUG if enable else logging.WARNING
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def relative_to_or_self(path: Path, root: Path) -> Path:
    """*path* relative to *root* when it lies beneath it, else *path* unchanged."""
    try:
        return path.relative_to(root)
    except ValueError:
        return path


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def build_properties_table(properties: Iterable[ModelProperty], title: str) -> Table:
    """Build a table describing extracted model properties."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Name", no_wrap=True)
    table.add_column("Type")
    table.add_column("Input")
    table.add_column("Key", justify="center")
    table.add_column("Required", justify="center")
    table.add_column("Label")
    table.add_column("Length", justify="right")

    for prop in properties:
        if prop.min_length is None and prop.max_length is None:
            length = ""
        else:
            low = "" if prop.min_length is None else str(prop.min_length)
            high = "" if prop.max_length is None else str(prop.max_length)
            length = f"{low}..{high}"
        table.add_row(
            prop.name,
            prop.declared_type,
            prop.input_kind.value,
            "yes" if prop.is_primary_key else "",
            "yes" if prop.is_required else "",
            prop.label,
            length,
        )
    return table


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
