"""Identity parser — recover gem name and version from an RBI filename."""

from __future__ import annotations

from rbisync.artifacts.models import ArtifactRef

SEPARATOR = "@"


def parse_filename(filename: str, extension: str) -> ArtifactRef | None:
    """Parse ``<name>@<version>.<ext>`` into an ArtifactRef.

    Splits on the first ``@``; the version keeps any further ``@`` or ``-``
    (e.g. ``ast@2.4.1-e07a4f6.rbi``). Returns None when the filename does not
    have that shape, so callers can skip it.
    """
    suffix = f".{extension.lstrip('.')}"
    if not filename.endswith(suffix):
        return None

    stem = filename[: -len(suffix)]
    name, sep, version = stem.partition(SEPARATOR)
    if not sep or not name or not version:
        return None

    return ArtifactRef(name=name, version=version)
