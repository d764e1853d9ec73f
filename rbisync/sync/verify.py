"""Verify reporter — explain how the RBIs on disk drifted, without touching them."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rbisync.output import say
from rbisync.sync.reconciler import Plan, PlanEntry

if TYPE_CHECKING:
    from rich.console import Console

CHECKING = "Checking for out-of-date RBIs..."
UP_TO_DATE = "Nothing to do, all RBIs are up-to-date."


class VerifyReporter:
    """Renders a Plan as a drift report and a pass/fail result."""

    def __init__(self, outdir: Path, extension: str, console: Console, command: str):
        self.outdir = Path(outdir)
        self.extension = extension
        self.console = console
        self.command = command

    def report(self, plan: Plan) -> bool:
        """Print the report. Returns True when everything is up to date."""
        say(self.console, CHECKING)
        say(self.console)

        reasons = self.reasons(plan)
        if not reasons:
            say(self.console, UP_TO_DATE, style="green")
            return True

        say(
            self.console,
            "RBI files are out-of-date. In your development environment, please run:",
            style="bold red",
        )
        say(self.console, f"`{self.command}`", style="bold green", indent=1)
        say(
            self.console,
            "Once it is complete, be sure to commit and push any changes",
            style="bold red",
        )
        say(self.console)
        say(self.console, "Reason:", style="red")
        for title, paths in reasons:
            say(self.console, f"File(s) {title}:", indent=1)
            for path in paths:
                say(self.console, f"- {path}", indent=1)
        return False

    def reasons(self, plan: Plan) -> list[tuple[str, list[Path]]]:
        """The non-empty subsections, in fixed order: added, changed, removed.

        Moved gems are reported as changed, under their new filename.
        """
        changed = sorted(plan.changed + plan.moved, key=lambda e: e.name)
        sections = [
            ("added", [self._expected_path(e) for e in plan.added]),
            ("changed", [self._expected_path(e) for e in changed]),
            ("removed", [e.existing.path for e in plan.removed]),
        ]
        return [(title, paths) for title, paths in sections if paths]

    def _expected_path(self, entry: PlanEntry) -> Path:
        return self.outdir / entry.expected.ref.filename(self.extension)
