"""Sync executor — apply a Plan to the output directory.

Two strict phases: every removal completes before any file is created,
renamed or overwritten. If a run is interrupted between the phases, the
directory holds a subset of the final state, never a superset.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from rbisync.errors import ArtifactIOError
from rbisync.output import say, say_status
from rbisync.sync.reconciler import ChangeKind, Plan, PlanEntry

if TYPE_CHECKING:
    from rich.console import Console

logger = structlog.get_logger(__name__)

REMOVAL_HEADER = "Removing RBI files of gems that have been removed:"
GENERATION_HEADER = "Generating RBI files of gems that are added or updated:"
NOTHING_TO_DO = "Nothing to do."
DONE_SUMMARY = (
    "All operations performed in working directory.",
    "Please review changes and commit them.",
)
NOOP_SUMMARY = "No operations performed, all RBIs are up-to-date."


class SyncExecutor:
    """Applies removals, then additions, updates and moves."""

    def __init__(self, outdir: Path, extension: str, console: Console):
        self.outdir = Path(outdir)
        self.extension = extension
        self.console = console

    def execute(self, plan: Plan) -> bool:
        """Run both phases and print the summary. Returns whether anything was done."""
        removed = self.perform_removals(plan)
        generated = self.perform_generation(plan)

        if removed or generated:
            for line in DONE_SUMMARY:
                say(self.console, line, style="bold green")
        else:
            say(self.console, NOOP_SUMMARY, style="bold green")
        say(self.console)
        return removed or generated

    def perform_removals(self, plan: Plan) -> bool:
        say(self.console, REMOVAL_HEADER, style="bold blue")
        say(self.console)

        if not plan.removed:
            say(self.console, NOTHING_TO_DO, indent=1)
        for entry in plan.removed:
            self._remove(entry.existing.path)

        say(self.console)
        return bool(plan.removed)

    def perform_generation(self, plan: Plan) -> bool:
        say(self.console, GENERATION_HEADER, style="bold blue")
        say(self.console)

        entries = plan.generation
        if not entries:
            say(self.console, NOTHING_TO_DO, indent=1)
            say(self.console)
            return False

        self._ensure_outdir()
        for entry in entries:
            self._generate(entry)
            say(self.console)

        return True

    def target_path(self, entry: PlanEntry) -> Path:
        return self.outdir / entry.expected.ref.filename(self.extension)

    def _generate(self, entry: PlanEntry) -> None:
        path = self.target_path(entry)
        self._progress(entry)

        if entry.kind is ChangeKind.MOVED:
            self._move(entry.existing.path, path)
            self._write(path, entry.expected.content)
            say_status(self.console, "force", str(path), style="yellow")
        elif entry.kind is ChangeKind.CHANGED:
            self._write(path, entry.expected.content)
            say_status(self.console, "force", str(path), style="yellow")
        else:
            self._write(path, entry.expected.content)
            say_status(self.console, "create", str(path), style="green")

        logger.debug("rbi_written", name=entry.name, kind=entry.kind.value, path=str(path))

    def _progress(self, entry: PlanEntry) -> None:
        say(self.console, f"Processing '{entry.name}' gem:", style="bold")
        if entry.expected.ref.is_empty:
            done, style = "Done (empty output)", "yellow"
        else:
            done, style = "Done", "green"
        say(
            self.console,
            f"Compiling {entry.name}, this may take a few seconds...   {done}",
            style=style,
            indent=1,
        )

    def _remove(self, path: Path) -> None:
        say(self.console, f"-- Removing: {path}", indent=1)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug("rbi_already_gone", path=str(path))
        except OSError as e:
            raise ArtifactIOError(path, "remove", e) from e

    def _move(self, old: Path, new: Path) -> None:
        say(self.console, f"-> Moving: {old} to {new}", indent=1)
        try:
            old.rename(new)
        except OSError as e:
            raise ArtifactIOError(old, f"rename to {new}", e) from e

    def _write(self, path: Path, content: bytes) -> None:
        try:
            path.write_bytes(content)
        except OSError as e:
            raise ArtifactIOError(path, "write", e) from e

    def _ensure_outdir(self) -> None:
        try:
            self.outdir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactIOError(self.outdir, "create directory", e) from e
