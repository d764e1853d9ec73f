"""Artifact models — one generated RBI file per gem.

An artifact is identified by its gem name; the version is part of the
filename but only ever compared for equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rbisync.errors import ArtifactIOError


@dataclass(frozen=True)
class ArtifactRef:
    """Identity of an artifact: gem name, version token, and emptiness."""

    name: str
    version: str
    is_empty: bool = False

    def filename(self, extension: str) -> str:
        return artifact_filename(self.name, self.version, extension)


def artifact_filename(name: str, version: str, extension: str) -> str:
    """Render ``<name>@<version>.<ext>``."""
    return f"{name}@{version}.{extension}"


@dataclass(frozen=True)
class ExpectedArtifact:
    """An artifact that should exist, with its fully serialized content."""

    ref: ArtifactRef
    content: bytes

    @property
    def name(self) -> str:
        return self.ref.name

    @property
    def version(self) -> str:
        return self.ref.version

    @property
    def is_empty(self) -> bool:
        return self.ref.is_empty


@dataclass
class ExistingArtifact:
    """An artifact found on disk. Content is read on first access."""

    ref: ArtifactRef
    path: Path
    _content: bytes | None = field(default=None, repr=False, compare=False)

    @property
    def name(self) -> str:
        return self.ref.name

    @property
    def version(self) -> str:
        return self.ref.version

    @property
    def content(self) -> bytes:
        if self._content is None:
            try:
                self._content = self.path.read_bytes()
            except OSError as e:
                raise ArtifactIOError(self.path, "read", e) from e
        return self._content
