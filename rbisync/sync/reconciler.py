"""Reconciler — diff the RBIs on disk against the RBIs that should exist.

For every gem name in either set:

- only expected               -> ADDED
- only existing               -> REMOVED
- same version, same bytes    -> UNCHANGED
- same version, other bytes   -> CHANGED (overwrite in place)
- different version           -> MOVED (rename, then always overwrite)

Each category is sorted by name (case-sensitive) so output is reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from rbisync.artifacts.models import ExistingArtifact, ExpectedArtifact


class ChangeKind(Enum):
    """What has to happen to a gem's RBI."""

    ADDED = "added"
    CHANGED = "changed"
    MOVED = "moved"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class PlanEntry:
    """One gem's decision, with both sides of the comparison."""

    name: str
    kind: ChangeKind
    existing: ExistingArtifact | None = None
    expected: ExpectedArtifact | None = None


@dataclass(frozen=True)
class Plan:
    """A categorized change plan. Every tuple is sorted by name."""

    added: tuple[PlanEntry, ...] = ()
    changed: tuple[PlanEntry, ...] = ()
    moved: tuple[PlanEntry, ...] = ()
    removed: tuple[PlanEntry, ...] = ()
    unchanged: tuple[PlanEntry, ...] = ()

    @property
    def generation(self) -> tuple[PlanEntry, ...]:
        """Added, changed and moved entries together, sorted by name."""
        return tuple(sorted(self.added + self.changed + self.moved, key=lambda e: e.name))

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.changed or self.moved or self.removed)

    def of_kind(self, kind: ChangeKind) -> tuple[PlanEntry, ...]:
        return getattr(self, kind.value)


def classify(existing: ExistingArtifact | None, expected: ExpectedArtifact | None) -> ChangeKind:
    """Decide what happens to a single gem."""
    if existing is None and expected is None:
        raise ValueError("cannot classify a gem absent from both sets")
    if existing is None:
        return ChangeKind.ADDED
    if expected is None:
        return ChangeKind.REMOVED
    if existing.version != expected.version:
        return ChangeKind.MOVED
    if existing.content != expected.content:
        return ChangeKind.CHANGED
    return ChangeKind.UNCHANGED


def reconcile(
    existing: Mapping[str, ExistingArtifact],
    expected: Mapping[str, ExpectedArtifact],
) -> Plan:
    """Compute the change plan turning ``existing`` into ``expected``."""
    buckets: dict[ChangeKind, list[PlanEntry]] = {kind: [] for kind in ChangeKind}

    for name in sorted(set(existing) | set(expected)):
        old, new = existing.get(name), expected.get(name)
        kind = classify(old, new)
        buckets[kind].append(PlanEntry(name=name, kind=kind, existing=old, expected=new))

    return Plan(**{kind.value: tuple(entries) for kind, entries in buckets.items()})
