"""specwatch: Live test spec discovery for a project directory."""

__version__ = "0.1.0"

# Public API
from specwatch.project import (
    NoCurrentProjectError,
    ProjectContext,
    ProjectDataSource,
    WatcherState,
)

__all__ = [
    "__version__",
    # Primary components
    "NoCurrentProjectError",
    "ProjectContext",
    "ProjectDataSource",
    "WatcherState",
]
