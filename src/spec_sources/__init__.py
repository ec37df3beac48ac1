"""spec_sources: Spec file discovery, naming and change tracking."""

__version__ = "0.1.0"

# Models
from spec_sources.models import FindSpecs, SpecRecord

# Discovery
from spec_sources.default_name import get_default_spec_file_name
from spec_sources.globs import expand_alternations, find_files_by_glob, has_magic
from spec_sources.matcher import matched_specs, transform_spec
from spec_sources.paths import to_posix

# State
from spec_sources.state_manager import SpecSetDiff, diff_specs

# Config
from spec_sources.config import ProjectConfig, load_project_config

__all__ = [
    "__version__",
    # Models
    "FindSpecs",
    "SpecRecord",
    # Discovery
    "expand_alternations",
    "find_files_by_glob",
    "get_default_spec_file_name",
    "has_magic",
    "matched_specs",
    "to_posix",
    "transform_spec",
    # State
    "SpecSetDiff",
    "diff_specs",
    # Config
    "ProjectConfig",
    "load_project_config",
]
