"""Configuration parsing for spec discovery."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from spec_sources.models import TESTING_TYPES, FindSpecs, as_pattern_list

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "specwatch.toml"

DEFAULT_E2E_SPEC_PATTERN = ["cypress/e2e/**/*.cy.{js,jsx,ts,tsx}"]
DEFAULT_COMPONENT_SPEC_PATTERN = ["**/*.cy.{js,jsx,ts,tsx}"]
DEFAULT_EXCLUDE_SPEC_PATTERN = ["*.hot-update.js"]
DEFAULT_DEBOUNCE_MS = 250

DEFAULT_CONFIG_TEMPLATE = """\
# Auto-generated specwatch.toml

project_root = "."
testing_type = "e2e"
exclude_spec_pattern = ["*.hot-update.js"]

[e2e]
spec_pattern = ["cypress/e2e/**/*.cy.{js,jsx,ts,tsx}"]

[component]
spec_pattern = ["**/*.cy.{js,jsx,ts,tsx}"]

[watcher]
debounce_ms = 250
"""


@dataclass
class ProjectConfig:
    """Spec discovery settings for one project."""

    project_root: Path
    """Absolute project directory."""

    testing_type: str = "e2e"
    """Default testing type."""

    e2e_spec_pattern: list[str] = field(default_factory=lambda: list(DEFAULT_E2E_SPEC_PATTERN))
    """Where e2e specs live."""

    component_spec_pattern: list[str] = field(default_factory=lambda: list(DEFAULT_COMPONENT_SPEC_PATTERN))
    """Where component specs live."""

    exclude_spec_pattern: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_SPEC_PATTERN))
    """Globs never treated as specs."""

    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    """Quiet period before the watcher re-resolves specs."""

    def spec_pattern_for(self, testing_type: str) -> list[str]:
        """Configured spec pattern for a testing type."""
        _check_testing_type(testing_type)
        if testing_type == "component":
            return list(self.component_spec_pattern)
        return list(self.e2e_spec_pattern)

    def find_specs_options(
        self,
        testing_type: str | None = None,
        spec_override: list[str] | None = None,
    ) -> FindSpecs:
        """Build resolution options.

        Args:
            testing_type: Testing type (defaults to the configured one)
            spec_override: Patterns given on the command line, if any

        Returns:
            FindSpecs for the data source
        """
        testing_type = testing_type or self.testing_type
        config_spec_pattern = self.spec_pattern_for(testing_type)

        # Component discovery usually overlaps the e2e folders; keep them apart
        additional_ignore_pattern: list[str] = []
        if testing_type == "component":
            additional_ignore_pattern = list(self.e2e_spec_pattern)

        return FindSpecs(
            project_root=self.project_root,
            testing_type=testing_type,
            spec_pattern=list(spec_override) if spec_override else config_spec_pattern,
            config_spec_pattern=config_spec_pattern,
            exclude_spec_pattern=list(self.exclude_spec_pattern),
            additional_ignore_pattern=additional_ignore_pattern,
        )


def _check_testing_type(testing_type: str) -> None:
    if testing_type not in TESTING_TYPES:
        raise ValueError(f"Invalid testing_type '{testing_type}'. Expected one of: {', '.join(TESTING_TYPES)}")


def default_project_config(project_root: str | Path) -> ProjectConfig:
    """Project configuration with built-in defaults."""
    return ProjectConfig(project_root=Path(project_root).resolve())


def load_project_config(path: str | Path) -> ProjectConfig:
    """Load project configuration from a TOML file.

    Args:
        path: Path to TOML config file

    Returns:
        ProjectConfig; relative ``project_root`` resolves against the file's directory

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file cannot be parsed or holds invalid values
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\nRun 'specwatch --init' to create a default config."
        )

    try:
        with open(path) as f:
            raw = tomllib.loads(f.read())
    except Exception as e:
        raise ValueError(f"Failed to parse config file {path}: {e}") from e

    project_root = (path.parent / raw.get("project_root", ".")).resolve()
    testing_type = raw.get("testing_type", "e2e")
    _check_testing_type(testing_type)

    debounce_ms = raw.get("watcher", {}).get("debounce_ms", DEFAULT_DEBOUNCE_MS)
    if not isinstance(debounce_ms, int) or debounce_ms < 0:
        raise ValueError(f"Invalid watcher.debounce_ms in {path}: {debounce_ms!r}")

    config = ProjectConfig(
        project_root=project_root,
        testing_type=testing_type,
        e2e_spec_pattern=as_pattern_list(raw.get("e2e", {}).get("spec_pattern", DEFAULT_E2E_SPEC_PATTERN)),
        component_spec_pattern=as_pattern_list(
            raw.get("component", {}).get("spec_pattern", DEFAULT_COMPONENT_SPEC_PATTERN)
        ),
        exclude_spec_pattern=as_pattern_list(raw.get("exclude_spec_pattern", DEFAULT_EXCLUDE_SPEC_PATTERN)),
        debounce_ms=debounce_ms,
    )
    logger.debug(f"Loaded config from {path}: project_root={config.project_root}")
    return config


def create_default_config(config_path: Path) -> bool:
    """
    Create a default config file if it doesn't exist.

    Args:
        config_path: Path where config should be created

    Returns:
        True if config was created, False if it already exists

    Raises:
        PermissionError: If unable to write to the directory
        OSError: If other file system errors occur
    """
    if config_path.exists():
        return False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(DEFAULT_CONFIG_TEMPLATE)
    return True
