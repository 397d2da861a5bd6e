"""Shared helpers for gdcargo.

Provides the Rich consoles every module prints through, a few
operator-facing print helpers, and the name conversions used when generating
Rust and Godot files.
"""

from __future__ import annotations

import re
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]", highlight=False)


def print_error(message: str) -> None:
    """Print a red error message to standard error."""
    err_console.print(f"[bold red]{escape(message)}[/bold red]", highlight=False)


def print_step(message: str) -> None:
    """Print a dim progress line, e.g. the command about to be spawned."""
    console.print(f"[dim]> {escape(message)}[/dim]", highlight=False)


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(escape(key), escape(str(value)))

    console.print(table)


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------

_CLASS_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def sanitize_name(name: str) -> str:
    """Convert an arbitrary project name to a safe directory/crate name.

    Examples::

        sanitize_name("My Awesome Game") -> "my-awesome-game"
        sanitize_name("  2D (demo)  ") -> "2d-demo"
    """
    result = re.sub(r"[^a-zA-Z0-9_-]", "-", name.strip().lower())
    result = re.sub(r"-+", "-", result)
    return result.strip("-")


def to_snake_case(value: str) -> str:
    """Convert ``IronMan`` or ``iron-man`` to ``iron_man``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", value)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s]+", "_", s2).lower()


def to_pascal_case(value: str) -> str:
    """Convert ``my-game`` or ``my_game`` to ``MyGame``."""
    parts = re.split(r"[-_\s]+", value)
    return "".join(word[:1].upper() + word[1:] for word in parts if word)


def is_valid_class_name(name: str) -> bool:
    """Return ``True`` if *name* is usable as both a Rust type and a Godot class."""
    return _CLASS_NAME_RE.match(name) is not None


def crate_name(project_name: str) -> str:
    """Return the Rust library name cargo derives from a package name."""
    return sanitize_name(project_name).replace("-", "_") or "game"


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Returns:
        The ``Path`` object for the directory.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path
