"""Platform-independent path helpers.

All paths handed out by spec_sources are forward-slash separated so that spec
names compare equal no matter which platform produced them.
"""

import os
import posixpath


def to_posix(path: str, sep: str = os.sep) -> str:
    """Replace every ``sep`` in ``path`` with ``/``.

    Args:
        path: Path as produced by the source platform
        sep: Separator used by the source platform

    Returns:
        Forward-slash separated path
    """
    if sep == "/":
        return path
    return path.replace(sep, "/")


def common_path_prefix(paths: list[str]) -> str:
    """Return the longest directory prefix shared by every path.

    The prefix always ends on a directory boundary and keeps its trailing
    slash, so ``/a/bc/x.js`` and ``/a/bd/y.js`` share ``/a/``, not ``/a/b``.

    Args:
        paths: Forward-slash separated paths

    Returns:
        Shared prefix (with trailing slash), or an empty string
    """
    if not paths:
        return ""

    split = [p.split("/") for p in paths]
    # The last component is a file name, never part of the shared directory
    dirs = [parts[:-1] for parts in split]
    shared: list[str] = []
    for segments in zip(*dirs):
        first = segments[0]
        if any(s != first for s in segments[1:]):
            break
        shared.append(first)

    if not shared:
        return ""
    return "/".join(shared) + "/"


def strip_prefix(path: str, prefix: str) -> str:
    """Remove a directory ``prefix`` from ``path``.

    Falls back to ``posixpath.relpath`` when ``path`` is not below ``prefix``.

    Args:
        path: Forward-slash separated path
        prefix: Forward-slash separated directory, with or without trailing slash

    Returns:
        Remainder of ``path`` without a leading slash
    """
    if not prefix:
        return path.lstrip("/")

    directory = prefix.rstrip("/")
    if path == directory:
        return ""
    if not directory:
        # prefix was the filesystem root
        return path.lstrip("/")
    if path.startswith(directory + "/"):
        return path[len(directory) + 1 :]
    return posixpath.relpath(path, directory)
