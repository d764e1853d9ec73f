"""Rich console output utilities for rbisync.

Reports are a compatibility surface (log scrapers read them), so every
line is printed verbatim: no markup parsing, no highlighting, no wrapping.
Styles only add color when the console is attached to a terminal.
"""

from __future__ import annotations

import os
from typing import Any

from rich.console import Console

_force_no_color = os.environ.get("NO_COLOR") is not None

INDENT = "  "
STATUS_WIDTH = 12


def create_console(no_color: bool = False, **kwargs: Any) -> Console:
    """Create a Rich Console suited for verbatim reports.

    Args:
        no_color: If True, disable colored output. Also respects NO_COLOR env var.
        **kwargs: Extra arguments for Console (e.g. ``file`` in tests).
    """
    no_color = no_color or _force_no_color
    return Console(
        no_color=no_color,
        force_terminal=False if no_color else None,
        soft_wrap=True,
        highlight=False,
        emoji=False,
        markup=False,
        **kwargs,
    )


# Default console instance
console = create_console()


def get_console() -> Console:
    """Return the current module-level console."""
    return console


def say(out: Console, message: str = "", style: str | None = None, indent: int = 0) -> None:
    """Print one report line, indented by ``indent`` levels."""
    out.print(f"{INDENT * indent}{message}", style=style)


def say_status(out: Console, status: str, message: str, style: str | None = None) -> None:
    """Print a right-aligned status word followed by a message.

    >>> say_status(console, "create", "sorbet/rbi/gems/foo@0.0.1.rbi")
          create  sorbet/rbi/gems/foo@0.0.1.rbi
    """
    out.print(f"{status.rjust(STATUS_WIDTH)}  {message}", style=style)


def error(message: str, **kwargs: Any) -> None:
    """Print an error message in red."""
    console.print(message, style="red", **kwargs)


def set_no_color(no_color: bool) -> None:
    """Update the global console to enable/disable colors."""
    global console
    console = create_console(no_color=no_color)
