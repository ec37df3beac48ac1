"""Shared data models for spec_sources."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

TestingType = Literal["e2e", "component"]
SpecType = Literal["component", "integration"]

TESTING_TYPES: tuple[str, ...] = ("e2e", "component")


def as_pattern_list(value: str | list[str] | tuple[str, ...] | None) -> list[str]:
    """Normalize a single glob or a sequence of globs to a list.

    Args:
        value: One pattern, several patterns, or None

    Returns:
        List of patterns (empty for None)
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


@dataclass
class SpecRecord:
    """One resolved spec file."""

    absolute: str
    """Absolute path, forward-slash separated."""

    relative: str
    """Path relative to the project root."""

    relative_to_common_root: str
    """Path relative to the deepest directory shared by every match in this pass."""

    base_name: str
    """Final path component, e.g. ``login.cy.ts``."""

    file_name: str
    """Base name without the spec file extension, e.g. ``login``."""

    file_extension: str
    """Final dotted suffix, e.g. ``.ts``."""

    spec_file_extension: str
    """Spec marker plus extension (``.cy.ts``), or the plain extension."""

    name: str
    """Stable identity used for set comparisons."""

    spec_type: SpecType = "integration"
    """Classification by testing mode."""

    def to_dict(self) -> dict[str, str]:
        """Render with the camelCase keys used by external consumers."""
        return {
            "absolute": self.absolute,
            "relative": self.relative,
            "relativeToCommonRoot": self.relative_to_common_root,
            "baseName": self.base_name,
            "fileName": self.file_name,
            "fileExtension": self.file_extension,
            "specFileExtension": self.spec_file_extension,
            "name": self.name,
            "specType": self.spec_type,
        }


@dataclass
class FindSpecs:
    """Options for one spec resolution (and for the watcher that repeats it)."""

    project_root: str | Path
    """Absolute project directory."""

    testing_type: TestingType
    """``e2e`` or ``component``."""

    spec_pattern: list[str] = field(default_factory=list)
    """Include globs, relative to the project root or absolute."""

    config_spec_pattern: list[str] = field(default_factory=list)
    """Configured globs; narrow a ``spec_pattern`` override and drive classification."""

    exclude_spec_pattern: list[str] = field(default_factory=list)
    """Globs that are always filtered out."""

    additional_ignore_pattern: list[str] = field(default_factory=list)
    """Globs ignored only by the watcher subscription."""

    def __post_init__(self) -> None:
        self.spec_pattern = as_pattern_list(self.spec_pattern)
        self.config_spec_pattern = as_pattern_list(self.config_spec_pattern)
        self.exclude_spec_pattern = as_pattern_list(self.exclude_spec_pattern)
        self.additional_ignore_pattern = as_pattern_list(self.additional_ignore_pattern)
