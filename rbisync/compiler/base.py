"""Compiler interface — what the engine needs from an RBI compiler.

A compiler turns a gem name into one of four outcomes. Any implementation
(real introspection, a manifest, a test double) satisfies the same contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable


class CompileOutcome(Enum):
    """How compiling a single gem ended."""

    CONTENT = "content"  # RBI body produced
    EMPTY = "empty"  # Gem loaded but exports nothing
    MISSING_SPEC = "missing_spec"  # No installed version; skip the gem
    FATAL = "fatal"  # Setup failed; abort the whole batch


@dataclass(frozen=True)
class CompileResult:
    """Result of compiling one gem."""

    name: str
    outcome: CompileOutcome
    version: str = ""
    body: str = ""
    message: str = ""
    remediation: str = ""

    @classmethod
    def content(cls, name: str, version: str, body: str) -> CompileResult:
        if not body.strip():
            return cls.empty(name, version)
        return cls(name=name, outcome=CompileOutcome.CONTENT, version=version, body=body)

    @classmethod
    def empty(cls, name: str, version: str) -> CompileResult:
        return cls(name=name, outcome=CompileOutcome.EMPTY, version=version)

    @classmethod
    def missing_spec(cls, name: str, version: str = "") -> CompileResult:
        return cls(name=name, outcome=CompileOutcome.MISSING_SPEC, version=version)

    @classmethod
    def fatal(cls, name: str, message: str, remediation: str = "") -> CompileResult:
        return cls(
            name=name,
            outcome=CompileOutcome.FATAL,
            message=message,
            remediation=remediation,
        )


@runtime_checkable
class ArtifactCompiler(Protocol):
    """Produces the RBI body for a gem."""

    def compile(self, name: str) -> CompileResult: ...


@runtime_checkable
class DependencySource(Protocol):
    """Knows every gem the application depends on."""

    def dependency_names(self) -> list[str]: ...
