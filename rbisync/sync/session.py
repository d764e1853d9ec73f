"""Session — one scan/build/reconcile run against a configured directory.

This is the only place the components meet. Nothing here touches the
filesystem before the expected set is fully built, so a fatal compile
error leaves the output directory exactly as it was.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

import structlog

from rbisync.artifacts.scanner import scan_existing
from rbisync.compiler.builder import BuildResult, ExpectedSetBuilder
from rbisync.sync.executor import SyncExecutor
from rbisync.sync.reconciler import Plan, reconcile
from rbisync.sync.verify import VerifyReporter

if TYPE_CHECKING:
    from rich.console import Console

    from rbisync.compiler.base import ArtifactCompiler
    from rbisync.config import SyncConfig

logger = structlog.get_logger(__name__)


@dataclass
class RunResult:
    """Outcome of a sync or verify run."""

    plan: Plan
    build: BuildResult
    ok: bool


class SyncSession:
    """Runs sync or verify for one output directory."""

    def __init__(self, config: SyncConfig, compiler: ArtifactCompiler, console: Console):
        self.config = config
        self.compiler = compiler
        self.console = console

    def plan(
        self,
        names: Iterable[str] | None = None,
        exclude: Iterable[str] | None = None,
        quiet: bool = False,
    ) -> tuple[Plan, BuildResult]:
        """Build the expected set, scan the directory, and reconcile.

        With explicit names only those gems' files are in scope; otherwise
        the whole output directory is.
        """
        names = sorted(set(names or ()))
        exclude = set(self.config.exclude) | set(exclude or ())

        builder = ExpectedSetBuilder(
            self.compiler, self.config, console=None if quiet else self.console
        )
        build = builder.build(names, exclude)

        existing = scan_existing(self.config.outdir_path, self.config.extension)
        if names:
            existing = {name: a for name, a in existing.items() if name in names}

        plan = reconcile(existing, build.expected)
        logger.info(
            "plan_computed",
            added=len(plan.added),
            changed=len(plan.changed),
            moved=len(plan.moved),
            removed=len(plan.removed),
            unchanged=len(plan.unchanged),
        )
        return plan, build

    def sync(
        self, names: Iterable[str] | None = None, exclude: Iterable[str] | None = None
    ) -> RunResult:
        plan, build = self.plan(names, exclude)
        executor = SyncExecutor(self.config.outdir_path, self.config.extension, self.console)
        executor.execute(plan)
        return RunResult(plan=plan, build=build, ok=True)

    def verify(
        self, names: Iterable[str] | None = None, exclude: Iterable[str] | None = None
    ) -> RunResult:
        plan, build = self.plan(names, exclude, quiet=True)
        reporter = VerifyReporter(
            self.config.outdir_path,
            self.config.extension,
            self.console,
            self.config.command,
        )
        return RunResult(plan=plan, build=build, ok=reporter.report(plan))
