"""Existing-set scanner — discover the RBI files already in the output directory."""

from __future__ import annotations

from pathlib import Path

import structlog

from rbisync.artifacts.identity import parse_filename
from rbisync.artifacts.models import ExistingArtifact
from rbisync.errors import AmbiguousArtifactError, ArtifactIOError

logger = structlog.get_logger(__name__)


def scan_existing(outdir: Path, extension: str) -> dict[str, ExistingArtifact]:
    """Map gem name to the artifact currently on disk for it.

    Only regular files directly inside ``outdir`` are considered; files that
    are not ``<name>@<version>.<ext>`` are ignored. A missing directory is an
    empty set. Two files for the same gem raise AmbiguousArtifactError.
    """
    if not outdir.exists():
        logger.debug("outdir_missing", outdir=str(outdir))
        return {}

    try:
        entries = sorted(outdir.iterdir())
    except OSError as e:
        raise ArtifactIOError(outdir, "read directory", e) from e

    found: dict[str, list[ExistingArtifact]] = {}
    for path in entries:
        if not path.is_file():
            continue
        ref = parse_filename(path.name, extension)
        if ref is None:
            logger.debug("file_ignored", path=str(path))
            continue
        found.setdefault(ref.name, []).append(ExistingArtifact(ref=ref, path=path))

    existing = {}
    for name, artifacts in found.items():
        if len(artifacts) > 1:
            raise AmbiguousArtifactError(name, [a.path.name for a in artifacts])
        existing[name] = artifacts[0]
        logger.debug("artifact_scanned", name=name, version=artifacts[0].version)

    return existing
