"""User-facing CLI output.

All terminal output of the CLI goes through one shared Rich console on
stderr, leaving stdout free for ``--json`` payloads.

Usage::

    from drygate.core.progress import status

    status("Collecting reports...")
    status("Build stable", style="success")  # ✓ Build stable
    status("Build failed", style="error")  # ✗ Build failed
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}


def _get_logger() -> BoundLogger:
    """Get logger lazily to respect runtime config."""
    from drygate.core.logging import get_logger

    return get_logger("progress")


def get_console() -> Console:
    """Get the shared Rich console instance."""
    return _console


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    padding = " " * indent
    _console.print(f"{padding}{prefix}{message}", highlight=False)

    _get_logger().debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Args:
        count: The number of items
        singular: Singular form (e.g., "file")
        plural: Plural form (default: singular + "s")

    Returns:
        Formatted string like "1 file" or "3 files"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


def make_counts_table(title: str, rows: list[tuple[str, int, int, int]]) -> Table:
    """Build a priority breakdown table.

    Args:
        title: Table title
        rows: ``(label, high, normal, low)`` tuples
    """
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("", style="dim")
    table.add_column("High", justify="right", style="red")
    table.add_column("Normal", justify="right", style="yellow")
    table.add_column("Low", justify="right")
    table.add_column("Total", justify="right", style="bold")
    for label, high, normal, low in rows:
        table.add_row(label, str(high), str(normal), str(low), str(high + normal + low))
    return table
