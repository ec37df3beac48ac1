"""Spec set comparison - decides whether a recomputation changed anything."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from spec_sources.models import SpecRecord


@dataclass
class SpecSetDiff:
    """Names added and removed between two resolution passes."""

    added: list[str] = field(default_factory=list)
    """Names present now but not before, sorted."""

    removed: list[str] = field(default_factory=list)
    """Names present before but not now, sorted."""

    @property
    def changed(self) -> bool:
        """Whether the two sets differ."""
        return bool(self.added or self.removed)

    def summary(self) -> str:
        """Short human-readable description, e.g. ``+2 -1``."""
        if not self.changed:
            return "no changes"
        return f"+{len(self.added)} -{len(self.removed)}"


def spec_names(specs: Iterable[SpecRecord]) -> set[str]:
    """Identity set of a spec list."""
    return {spec.name for spec in specs}


def diff_specs(previous: Iterable[SpecRecord], current: Iterable[SpecRecord]) -> SpecSetDiff:
    """Compare two spec lists by name, ignoring order and duplicates.

    Args:
        previous: Last-known specs
        current: Freshly resolved specs

    Returns:
        SpecSetDiff describing the difference
    """
    before = spec_names(previous)
    after = spec_names(current)
    return SpecSetDiff(added=sorted(after - before), removed=sorted(before - after))
