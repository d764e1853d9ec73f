"""Manifest compiler — RBI content declared in a YAML manifest.

The manifest lists every gem of the application with its resolved version
and where its RBI body comes from::

    requires:
      - sorbet/tapioca/require.rb
    dependencies:
      foo: {version: 0.0.1, rbi: rbi/foo.rbi}
      bar: {version: 0.3.0, body: "module Bar; end"}
      qux: {version: 0.5.0}
      minitest-excludes: {version: 2.0.1, missing: true}

``requires`` (and the lines of an optional postrequire file) is the setup
step: every entry must exist, otherwise each compilation is fatal.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import structlog
import yaml

from rbisync.compiler.base import CompileResult
from rbisync.errors import ConfigError

logger = structlog.get_logger(__name__)

LOAD_FAILURE = "Could not load all the gems required by your application."


@dataclass(frozen=True)
class ManifestEntry:
    """One gem as declared in the manifest."""

    name: str
    version: str = ""
    rbi: Path | None = None
    body: str | None = None
    missing: bool = False


class ManifestCompiler:
    """Compiler and dependency source backed by a YAML manifest."""

    def __init__(self, manifest_path: str | Path, postrequire: str | Path | None = None):
        self.manifest_path = Path(manifest_path)
        self.base_dir = self.manifest_path.parent
        self.postrequire = Path(postrequire) if postrequire else None

        data = _load_yaml(self.manifest_path)
        self.entries = _parse_entries(
            data.get("dependencies") or {}, self.base_dir, self.manifest_path
        )
        self.requires = [str(r) for r in data.get("requires") or []]
        self._setup_failure = self._check_setup()

    def dependency_names(self) -> list[str]:
        return sorted(self.entries)

    def compile(self, name: str) -> CompileResult:
        if self._setup_failure is not None:
            message, remediation = self._setup_failure
            return CompileResult.fatal(name, message, remediation)

        entry = self.entries.get(name)
        if entry is None or entry.missing or not entry.version:
            return CompileResult.missing_spec(name, entry.version if entry else "")

        if entry.body is not None:
            return CompileResult.content(name, entry.version, entry.body)

        if entry.rbi is not None:
            try:
                body = entry.rbi.read_text()
            except OSError as e:
                return CompileResult.fatal(
                    name,
                    f"Cannot read RBI body for '{name}': {entry.rbi} ({e.strerror})",
                    f"Fix the 'rbi' entry of '{name}' in {self.manifest_path}.",
                )
            return CompileResult.content(name, entry.version, body)

        return CompileResult.empty(name, entry.version)

    def _check_setup(self) -> tuple[str, str] | None:
        """Load every required file; return (message, remediation) for the first failure."""
        for required in self.requires:
            if not (self.base_dir / required).exists():
                logger.debug("require_failed", entry=required, source=str(self.manifest_path))
                return (
                    f"LoadError: cannot load such file -- {required}",
                    f"{LOAD_FAILURE}\n"
                    f"Review the 'requires' section of {self.manifest_path} "
                    "and remove the faulty entry.",
                )

        if self.postrequire is None:
            return None

        try:
            lines = self.postrequire.read_text().splitlines()
        except OSError as e:
            return (
                f"LoadError: cannot load such file -- {self.postrequire}",
                f"{LOAD_FAILURE}\nCould not read {self.postrequire}: {e.strerror}",
            )

        for line in lines:
            required = line.strip()
            if not required or required.startswith("#"):
                continue
            if not (self.postrequire.parent / required).exists():
                logger.debug("require_failed", entry=required, source=str(self.postrequire))
                return (
                    f"LoadError: cannot load such file -- {required}",
                    f"{LOAD_FAILURE}\n"
                    f"If you populated {self.postrequire} yourself\n"
                    "you should probably review it and remove the faulty line.",
                )
        return None


def _load_yaml(path: Path) -> dict:
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigError("dependency manifest not found", path) from None
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read dependency manifest: {e}", path) from e

    if not isinstance(data, dict):
        raise ConfigError("dependency manifest must be a mapping", path)
    return data


def _parse_entries(deps: dict, base_dir: Path, source: Path) -> dict[str, ManifestEntry]:
    if not isinstance(deps, dict):
        raise ConfigError("'dependencies' must be a mapping of gem name to entry", source)

    entries = {}
    for name, spec in deps.items():
        name = str(name)
        if "@" in name:
            raise ConfigError(f"gem name '{name}' must not contain '@'", source)
        spec = spec or {}
        if not isinstance(spec, dict):
            # Shorthand: `foo: 0.0.1`
            spec = {"version": spec}

        version = spec.get("version")
        rbi = spec.get("rbi")
        entries[name] = ManifestEntry(
            name=name,
            version="" if version is None else str(version),
            rbi=base_dir / rbi if rbi else None,
            body=spec.get("body"),
            missing=bool(spec.get("missing", False)),
        )
    return entries
