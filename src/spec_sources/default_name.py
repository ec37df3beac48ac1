"""Synthesize an example spec path from a glob pattern.

Used to show "what a file matching this pattern looks like" before any such
file exists. The result is illustrative only; nothing is read or created.
"""

import re

from spec_sources.globs import has_magic, resolve_alternations

# Folder used in place of a leading '**'
DEFAULT_SPEC_FOLDER = "cypress"

# Stem used in place of '*' in the file name
DEFAULT_FILE_STEM = "filename"

# Marker used in place of a bare '*' in an extension position
DEFAULT_SPEC_MARKER = "cy"

_STARS_RE = re.compile(r"\*+")


def _split_dotted(filename: str) -> tuple[str, list[str]]:
    """Split ``name.ext1.ext2`` into the stem and its dotted components."""
    stem, *extensions = filename.split(".")
    return stem, extensions


def _directories(segments: list[str], testing_type: str) -> list[str]:
    resolved: list[str] = []
    for i, segment in enumerate(segments):
        if segment == "**":
            if i == 0:
                resolved.append(DEFAULT_SPEC_FOLDER)
            continue
        resolved.append(_STARS_RE.sub(testing_type, segment))
    return resolved


def _filename(segment: str, file_extension_to_use: str | None) -> str:
    stem, extensions = _split_dotted(segment)
    stem = _STARS_RE.sub(DEFAULT_FILE_STEM, stem)

    resolved: list[str] = []
    last = len(extensions) - 1
    for i, extension in enumerate(extensions):
        if _STARS_RE.fullmatch(extension):
            if i == last and file_extension_to_use:
                extension = file_extension_to_use
            else:
                extension = DEFAULT_SPEC_MARKER
        else:
            extension = _STARS_RE.sub("", extension)
        resolved.append(extension)

    return ".".join([stem, *resolved])


def get_default_spec_file_name(
    spec_pattern: str,
    testing_type: str,
    file_extension_to_use: str | None = None,
) -> str:
    """Build one concrete path that satisfies ``spec_pattern``.

    Rules, applied segment by segment:

    - ``{a,b}`` / ``(a|b)`` pick the first alternative, or
      ``file_extension_to_use`` when it is one of the alternatives
    - a leading ``**`` becomes ``cypress``; any other ``**`` is dropped
    - ``*`` in a directory becomes the testing type (``src/*`` -> ``src/e2e``)
    - ``*`` in the file stem becomes ``filename``
    - a bare ``*`` extension becomes ``cy`` (or the preferred extension
      when it is the last one)

    Args:
        spec_pattern: Glob pattern, e.g. ``cypress/e2e/**/*.cy.{js,ts}``
        testing_type: ``e2e`` or ``component``
        file_extension_to_use: Preferred language extension, e.g. ``ts``

    Returns:
        Example path; the pattern itself when it contains no glob syntax
    """
    if not has_magic(spec_pattern):
        return spec_pattern

    preferred = file_extension_to_use.lstrip(".") if file_extension_to_use else None
    pattern = resolve_alternations(spec_pattern, preferred)

    *directories, filename = pattern.split("/")
    if filename == "**":
        # A trailing '**' stands for "any file below"
        filename = "*"

    parts = _directories(directories, testing_type)
    parts.append(_filename(filename, preferred))
    return "/".join(parts)
