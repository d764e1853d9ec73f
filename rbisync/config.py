"""Configuration — where RBIs live and how they are generated.

Settings come from an optional ``rbisync.yml`` and are overridden by CLI
flags. Relative paths are resolved against ``root`` (the directory holding
the config file), never against the process working directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from rbisync.errors import ConfigError

CONFIG_FILE = "rbisync.yml"

DEFAULT_OUTDIR = "sorbet/rbi/gems"
DEFAULT_MANIFEST = "gems.yml"
DEFAULT_COMMAND = "bin/tapioca gem"


@dataclass(frozen=True)
class SyncConfig:
    """Explicit configuration object passed to every component."""

    root: Path = Path(".")
    outdir: str | Path = DEFAULT_OUTDIR
    extension: str = "rbi"
    manifest: str | Path = DEFAULT_MANIFEST
    postrequire: str | Path | None = None
    exclude: tuple[str, ...] = ()
    file_header: bool = True
    typed_sigil: str = "true"
    command: str = DEFAULT_COMMAND
    workers: int = 1
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "root", Path(self.root))
        object.__setattr__(self, "exclude", tuple(str(n) for n in self.exclude))
        object.__setattr__(self, "extension", self.extension.lstrip("."))
        if not isinstance(self.workers, int) or self.workers < 1:
            raise ConfigError(f"workers must be a positive integer, got {self.workers!r}")

    @property
    def outdir_path(self) -> Path:
        return self._resolve(self.outdir)

    @property
    def manifest_path(self) -> Path:
        return self._resolve(self.manifest)

    @property
    def postrequire_path(self) -> Path | None:
        if self.postrequire is None:
            return None
        return self._resolve(self.postrequire)

    def with_overrides(self, **overrides: Any) -> SyncConfig:
        """Return a copy with the given non-None values replaced."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    def _resolve(self, path: str | Path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.root / path


def load_config(path: str | Path | None = None, root: str | Path = ".") -> SyncConfig:
    """Load a SyncConfig from a YAML file.

    With no path, ``<root>/rbisync.yml`` is used when it exists; otherwise
    the defaults apply. Unknown keys are kept in ``extra``.
    """
    if path is None:
        candidate = Path(root) / CONFIG_FILE
        if not candidate.exists():
            return SyncConfig(root=Path(root))
        path = candidate

    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigError("config file not found", path) from None
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read config: {e}", path) from e

    if not isinstance(data, dict):
        raise ConfigError("config must be a mapping", path)

    known = {f.name for f in fields(SyncConfig)} - {"root", "extra"}
    values = {k: v for k, v in data.items() if k in known}
    extra = {k: v for k, v in data.items() if k not in known}

    exclude = values.get("exclude") or []
    if isinstance(exclude, str):
        exclude = [exclude]
    values["exclude"] = tuple(exclude)

    return SyncConfig(root=path.parent, extra=extra, **values)
