"""Glob evaluation for spec discovery.

Patterns follow the usual test-runner conventions: ``*`` stays within one
path segment, ``**`` spans any number of directories, and alternations may be
written as ``{a,b}`` or ``(a|b)`` and nested. Alternations are expanded up
front; what remains is matched with pathspec's gitignore-style matcher.
"""

import logging
import os
import posixpath
import re
from collections.abc import Iterable, Iterator

import pathspec

from spec_sources.paths import strip_prefix, to_posix

logger = logging.getLogger(__name__)

# Characters that make a path segment a wildcard once alternations are gone.
_WILDCARD_CHARS = frozenset("*?[")

# Group opener -> (closer, separator)
_GROUPS = {"{": ("}", ","), "(": (")", "|")}

_DRIVE_RE = re.compile(r"^[A-Za-z]:/")

NODE_MODULES_GLOB = "**/node_modules/**"

# NUL never occurs in a path. Appended to an include pattern and to the path
# under test, it forces the last glob segment to match the file itself rather
# than one of its parent directories.
_END_MARK = "\0"


def _parse_group(pattern: str, start: int) -> tuple[int, list[str]] | None:
    """Parse the group opened at ``start``.

    Returns:
        (index of the closing character, alternatives), or None when the
        group is unterminated or has fewer than two alternatives
    """
    closer, separator = _GROUPS[pattern[start]]
    depth = 0
    options: list[str] = []
    option_start = start + 1
    i = start + 1
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        if ch in _GROUPS:
            depth += 1
        elif ch in "})":
            if depth == 0:
                if ch != closer:
                    return None
                options.append(pattern[option_start:i])
                if len(options) < 2:
                    return None
                return i, options
            depth -= 1
        elif ch == separator and depth == 0:
            options.append(pattern[option_start:i])
            option_start = i + 1
        i += 1
    return None


def _first_group(pattern: str) -> tuple[int, int, list[str]] | None:
    """Locate the leftmost alternation group in ``pattern``."""
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        if ch in _GROUPS:
            parsed = _parse_group(pattern, i)
            if parsed is not None:
                end, options = parsed
                return i, end, options
        i += 1
    return None


def has_alternation(pattern: str) -> bool:
    """Check whether ``pattern`` contains ``{a,b}`` or ``(a|b)`` syntax."""
    return _first_group(pattern) is not None


def has_magic(pattern: str) -> bool:
    """Check whether ``pattern`` is a glob rather than a literal path.

    Parentheses without ``|`` (e.g. route-group folders) are literal.
    """
    return any(c in _WILDCARD_CHARS for c in pattern) or has_alternation(pattern)


def expand_alternations(pattern: str) -> list[str]:
    """Expand every alternation in ``pattern``.

    Args:
        pattern: Glob pattern, possibly with nested ``{}`` / ``()`` groups

    Returns:
        All alternative patterns in declaration order, without duplicates
    """
    group = _first_group(pattern)
    if group is None:
        return [pattern]

    start, end, options = group
    prefix, suffix = pattern[:start], pattern[end + 1 :]
    expanded: list[str] = []
    for option in options:
        for candidate in expand_alternations(prefix + option + suffix):
            if candidate not in expanded:
                expanded.append(candidate)
    return expanded


def choose_alternative(options: list[str], preferred: str | None = None) -> str:
    """Pick ``preferred`` when it is one of ``options``, else the first option."""
    if preferred:
        preferred = preferred.lstrip(".")
        if preferred in options:
            return preferred
    return options[0]


def resolve_alternations(pattern: str, preferred: str | None = None) -> str:
    """Collapse every alternation in ``pattern`` to a single choice.

    Args:
        pattern: Glob pattern
        preferred: Alternative to favour wherever a group offers it

    Returns:
        Pattern without alternation syntax
    """
    group = _first_group(pattern)
    while group is not None:
        start, end, options = group
        chosen = choose_alternative(options, preferred)
        pattern = pattern[:start] + chosen + pattern[end + 1 :]
        group = _first_group(pattern)
    return pattern


def is_absolute(pattern: str) -> bool:
    """Check for a POSIX or drive-letter absolute path (forward slashes)."""
    return pattern.startswith("/") or bool(_DRIVE_RE.match(pattern))


def _split_base(pattern: str) -> tuple[str, str]:
    """Split an absolute pattern into its literal base directory and glob remainder."""
    segments = pattern.split("/")
    for i, segment in enumerate(segments):
        if any(c in _WILDCARD_CHARS for c in segment):
            base = "/".join(segments[:i])
            if not base and pattern.startswith("/"):
                base = "/"
            return base, "/".join(segments[i:])
    return pattern, ""


class GlobSet:
    """A compiled set of glob patterns rooted at a project directory.

    Relative patterns are resolved against ``root``; absolute patterns are
    used as they are. Each alternative keeps its literal base directory so
    that traversal can start as deep as possible.
    """

    def __init__(self, root: str, patterns: Iterable[str]):
        self.root = to_posix(str(root)).rstrip("/") or "/"
        self.patterns = list(patterns)
        self._entries: list[tuple[str, str, pathspec.PathSpec | None]] = []

        for raw in self.patterns:
            for pattern in expand_alternations(to_posix(raw)):
                if not is_absolute(pattern):
                    pattern = posixpath.join(self.root, pattern)
                base, remainder = _split_base(posixpath.normpath(pattern))
                spec = _compile_include(remainder) if remainder else None
                self._entries.append((base, remainder, spec))

    @property
    def bases(self) -> list[str]:
        """Distinct literal base paths, in pattern order."""
        seen: list[str] = []
        for base, _, _ in self._entries:
            if base not in seen:
                seen.append(base)
        return seen

    def matches(self, absolute: str) -> bool:
        """Check whether a forward-slash absolute path matches any pattern."""
        for base, _, spec in self._entries:
            if spec is None:
                if absolute == base:
                    return True
                continue
            if _entry_matches(absolute, base, spec):
                return True
        return False

    def entries_for(self, base: str) -> list[tuple[str, pathspec.PathSpec | None]]:
        """Remainders (and compiled specs) of every pattern rooted at ``base``."""
        return [(remainder, spec) for b, remainder, spec in self._entries if b == base]


def _compile_include(remainder: str) -> pathspec.PathSpec:
    """Compile a glob remainder so it matches files, not directory contents."""
    line = "/" + remainder
    # A trailing '**' already means "everything below"
    if remainder.rsplit("/", 1)[-1] != "**":
        line += _END_MARK
    return pathspec.GitIgnoreSpec.from_lines([line])


def _entry_matches(absolute: str, base: str, spec: pathspec.PathSpec) -> bool:
    directory = base.rstrip("/")
    if not absolute.startswith(directory + "/"):
        return False
    rel = absolute[len(directory) + 1 :]
    return spec.match_file(rel + _END_MARK)


class IgnoreFilter:
    """Gitignore-style ignore list evaluated relative to the project root.

    A pattern without a slash is anchored at the root, so ``foo.cy.js`` ignores
    only the top-level file, not every ``foo.cy.js`` in the tree.
    """

    def __init__(self, root: str, patterns: Iterable[str]):
        self.root = to_posix(str(root)).rstrip("/") or "/"
        self.patterns = list(patterns)
        lines: list[str] = []
        for raw in self.patterns:
            lines.extend(_anchor(line) for line in expand_alternations(to_posix(raw)))
        self._spec = pathspec.GitIgnoreSpec.from_lines(lines) if lines else None

    def _relative(self, absolute: str) -> str:
        if absolute.startswith(self.root.rstrip("/") + "/"):
            return strip_prefix(absolute, self.root)
        return absolute.lstrip("/")

    def is_ignored(self, absolute: str, is_dir: bool = False) -> bool:
        """Check whether ``absolute`` is covered by the ignore list."""
        if self._spec is None:
            return False
        rel = self._relative(absolute)
        if not rel:
            return False
        if is_dir:
            rel += "/"
        return self._spec.match_file(rel)


def _anchor(line: str) -> str:
    if "/" in line.rstrip("/"):
        return line
    return "/" + line


def _raise(error: OSError) -> None:
    raise error


def _walk(base: str, globs: GlobSet, ignore: IgnoreFilter) -> Iterator[str]:
    """Yield files below ``base`` matching a pattern rooted there."""
    specs = [s for _, s in globs.entries_for(base) if s is not None]
    for dirpath, dirnames, filenames in os.walk(base, onerror=_raise):
        current = to_posix(dirpath).rstrip("/")
        dirnames[:] = [d for d in dirnames if not ignore.is_ignored(f"{current}/{d}", is_dir=True)]
        for filename in filenames:
            absolute = f"{current}/{filename}"
            if not any(_entry_matches(absolute, base, s) for s in specs):
                continue
            if ignore.is_ignored(absolute):
                continue
            yield absolute


def find_files_by_glob(
    root: str | os.PathLike,
    patterns: Iterable[str],
    ignore: Iterable[str] = (),
) -> list[str]:
    """Resolve glob patterns to existing files.

    Args:
        root: Directory that relative patterns and ignore globs are rooted at
        patterns: Include globs (relative or absolute)
        ignore: Gitignore-style globs to filter out

    Returns:
        Sorted, deduplicated absolute paths with forward slashes

    Raises:
        OSError: If a literal pattern cannot be inspected or a directory cannot be listed
    """
    globs = GlobSet(str(root), patterns)
    ignore_filter = IgnoreFilter(str(root), ignore)
    found: dict[str, None] = {}

    for base in globs.bases:
        entries = globs.entries_for(base)
        if any(spec is None for _, spec in entries):
            # Literal path
            if os.path.isfile(base) and not ignore_filter.is_ignored(base):
                found[base] = None
        if not any(spec is not None for _, spec in entries):
            continue
        if not os.path.isdir(base):
            logger.debug(f"Glob base does not exist: {base}")
            continue
        for path in _walk(base, globs, ignore_filter):
            found[path] = None

    return sorted(found)
