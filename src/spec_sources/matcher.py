"""Turn matched spec files into SpecRecords."""

import logging
import os
import posixpath
from collections.abc import Sequence

from spec_sources.globs import GlobSet
from spec_sources.models import SpecRecord, SpecType, as_pattern_list
from spec_sources.paths import common_path_prefix, strip_prefix, to_posix

logger = logging.getLogger(__name__)

# Suffixes (before the file extension) that mark a file as a spec.
SPEC_FILE_MARKERS: tuple[str, ...] = (".cy", ".spec", ".test", "-spec", "-test")


def spec_file_extension_of(base_name: str) -> str:
    """Return the spec marker plus extension of ``base_name``.

    ``login.cy.ts`` -> ``.cy.ts``; ``login.ts`` -> ``.ts``. A marker directly
    followed by ``.ts`` is kept too, so ``app.spec.ts.js`` -> ``.spec.ts.js``.

    Args:
        base_name: File name without directories

    Returns:
        Longest recognized spec suffix, else the plain file extension
    """
    file_extension = posixpath.splitext(base_name)[1]
    candidates = [
        f"{marker}{middle}{file_extension}" for marker in SPEC_FILE_MARKERS for middle in (".ts", "")
    ]
    for candidate in candidates:
        if base_name.endswith(candidate) and len(base_name) > len(candidate):
            return candidate
    return file_extension


def transform_spec(
    project_root: str,
    testing_type: str,
    absolute: str,
    common_root: str,
    sep: str = os.sep,
    component_patterns: GlobSet | None = None,
) -> SpecRecord:
    """Describe one spec file.

    Args:
        project_root: Project directory, as produced by the source platform
        testing_type: ``e2e`` or ``component``
        absolute: Absolute spec path, as produced by the source platform
        common_root: Directory shared by every spec of the current pass
        sep: Separator used by the source platform
        component_patterns: Globs a component spec must match, if any

    Returns:
        SpecRecord with forward-slash paths
    """
    absolute = to_posix(absolute, sep)
    project_root = to_posix(project_root, sep)
    common_root = to_posix(common_root, sep)

    relative = strip_prefix(absolute, project_root)
    base_name = posixpath.basename(absolute)
    file_extension = posixpath.splitext(base_name)[1]
    spec_file_extension = spec_file_extension_of(base_name)

    return SpecRecord(
        absolute=absolute,
        relative=relative,
        relative_to_common_root=strip_prefix(absolute, common_root),
        base_name=base_name,
        file_name=base_name[: len(base_name) - len(spec_file_extension)],
        file_extension=file_extension,
        spec_file_extension=spec_file_extension,
        name=relative,
        spec_type=_spec_type(testing_type, absolute, component_patterns),
    )


def _spec_type(testing_type: str, absolute: str, component_patterns: GlobSet | None) -> SpecType:
    if testing_type != "component":
        return "integration"
    if component_patterns is not None and component_patterns.patterns:
        return "component" if component_patterns.matches(absolute) else "integration"
    return "component"


def matched_specs(
    project_root: str,
    testing_type: str,
    spec_absolute_paths: Sequence[str],
    spec_pattern: str | Sequence[str] = (),
    component_patterns: Sequence[str] | None = None,
    sep: str = os.sep,
) -> list[SpecRecord]:
    """Describe every matched spec relative to the project and their common root.

    With a single match (typically a literal ``--spec`` path), the common root
    is that file's own directory, so ``relative_to_common_root`` is the bare
    file name.

    Args:
        project_root: Project directory
        testing_type: ``e2e`` or ``component``
        spec_absolute_paths: Matched absolute paths, in output order
        spec_pattern: Pattern(s) that produced the matches
        component_patterns: Globs a component spec must match, if any
        sep: Separator used by the source platform

    Returns:
        One SpecRecord per path, in input order
    """
    paths = [to_posix(p, sep) for p in spec_absolute_paths]
    logger.debug(f"Found {len(paths)} spec(s) for {as_pattern_list(spec_pattern)}")

    if len(paths) == 1:
        common_root = posixpath.dirname(paths[0])
    else:
        common_root = common_path_prefix(paths)

    globs = None
    if component_patterns:
        globs = GlobSet(to_posix(project_root, sep), component_patterns)

    return [
        transform_spec(
            project_root=project_root,
            testing_type=testing_type,
            absolute=path,
            common_root=common_root,
            sep=sep,
            component_patterns=globs,
        )
        for path in paths
    ]
