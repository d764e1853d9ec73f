"""Expected-set builder — compile every targeted gem into the RBI it should have.

Compilation may fan out to a thread pool, but the expected set is only
assembled once every compilation of the batch is done. A single fatal
outcome voids the batch: the builder raises before returning anything.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

import structlog

from rbisync.artifacts.models import ArtifactRef, ExpectedArtifact
from rbisync.artifacts.serializer import render_content
from rbisync.compiler.base import (
    ArtifactCompiler,
    CompileOutcome,
    CompileResult,
    DependencySource,
)
from rbisync.errors import ConfigError, FatalCompileError
from rbisync.output import say

if TYPE_CHECKING:
    from rich.console import Console

    from rbisync.config import SyncConfig

logger = structlog.get_logger(__name__)


@dataclass
class BuildResult:
    """The expected set plus what was skipped along the way."""

    expected: dict[str, ExpectedArtifact] = field(default_factory=dict)
    missing_specs: list[CompileResult] = field(default_factory=list)
    targets: list[str] = field(default_factory=list)


def resolve_targets(
    names: Iterable[str] | None,
    exclude: Iterable[str],
    source: DependencySource | None,
) -> list[str]:
    """Requested names (or every known dependency) minus the excluded ones, sorted."""
    if names:
        requested = set(names)
    elif source is not None:
        requested = set(source.dependency_names())
    else:
        raise ConfigError("cannot compile all gems: the compiler does not list dependencies")
    return sorted(requested - set(exclude))


class ExpectedSetBuilder:
    """Builds the "should exist" artifact set for one run."""

    def __init__(
        self,
        compiler: ArtifactCompiler,
        config: SyncConfig,
        console: Console | None = None,
        source: DependencySource | None = None,
    ):
        self.compiler = compiler
        self.config = config
        self.console = console
        if source is None and isinstance(compiler, DependencySource):
            source = compiler
        self.source = source

    def build(
        self, names: Iterable[str] | None = None, exclude: Iterable[str] = ()
    ) -> BuildResult:
        """Compile the target gems and assemble the expected set.

        Args:
            names: Gems to compile; None or empty means every known dependency.
            exclude: Gems to leave out.

        Raises:
            FatalCompileError: If any compilation reports a fatal setup failure.
        """
        targets = resolve_targets(names, exclude, self.source)
        results = self._compile_all(targets)

        for result in results:
            if result.outcome is CompileOutcome.FATAL:
                logger.info("batch_aborted", name=result.name, reason=result.message)
                raise FatalCompileError(result.message, result.remediation)

        build = BuildResult(targets=targets)
        for result in results:
            if result.outcome is CompileOutcome.MISSING_SPEC:
                build.missing_specs.append(result)
                continue
            is_empty = result.outcome is CompileOutcome.EMPTY
            build.expected[result.name] = ExpectedArtifact(
                ref=ArtifactRef(name=result.name, version=result.version, is_empty=is_empty),
                content=render_content(
                    result.name, None if is_empty else result.body, self.config
                ),
            )

        self._report(build)
        return build

    def _compile_all(self, targets: list[str]) -> list[CompileResult]:
        if self.config.workers > 1 and len(targets) > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                results = list(executor.map(self._compile_one, targets))
        else:
            results = [self._compile_one(name) for name in targets]
        return results

    def _compile_one(self, name: str) -> CompileResult:
        result = self.compiler.compile(name)
        logger.debug(
            "gem_compiled", name=name, outcome=result.outcome.value, version=result.version
        )
        return result

    def _report(self, build: BuildResult) -> None:
        # Per-gem progress is printed by the executor, next to each write.
        if self.console is None or not build.missing_specs:
            return

        specs = ", ".join(
            f"{r.name} ({r.version})" if r.version else r.name for r in build.missing_specs
        )
        say(self.console, f"completed with missing specs:   {specs}", style="yellow", indent=2)
        say(self.console)
