"""Canonicalization of host filesystem paths into portable virtual paths.

``canonicalize`` applies the following rules:

- The result is absolute or rooted at ``/``. Relative input is anchored at
  the symlink-resolved working directory and empty input becomes that
  directory.
- ``.`` and ``..`` segments and runs of separators are collapsed. A run of
  ``..`` directly after the root is dropped since nothing lies above it.
- Forward slashes are used as separators on every platform.
- The root name (e.g. a drive letter) is dropped when it matches the root
  name of the working directory. UNC root names are always kept.
- Symlinks are resolved only on request. Missing trailing components are
  tolerated and appended lexically.
- Input whose last component is empty, ``.`` or ``..`` denotes a directory
  and keeps a trailing slash. The root is always ``/``, never ``/.``.
- Case is preserved and no check is made that the path names a file.
"""

import os
import re
from typing import NamedTuple

from sourcevfs.domain.errors import require

IS_WINDOWS = os.name == "nt"

_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:")


class PathParts(NamedTuple):
    """A generic path split into root name, segments and directory marker."""

    root_name: str
    rooted: bool
    segments: list[str]
    is_directory: bool


def to_generic(path: str, windows: bool = IS_WINDOWS) -> str:
    """Return ``path`` with host separators replaced by forward slashes."""
    return path.replace("\\", "/") if windows else path


def root_name(path: str, windows: bool = IS_WINDOWS) -> str:
    """Return the root name of ``path``: ``//host`` for UNC paths, ``C:`` for drives.

    Backslash separators and drive letters are only recognized on Windows.
    """
    separators = "/\\" if windows else "/"
    if (
        len(path) > 2
        and path[0] in separators
        and path[1] == path[0]
        and path[2] not in separators
    ):
        end = 2
        while end < len(path) and path[end] not in separators:
            end += 1
        return path[:end]
    if windows and _DRIVE_PATTERN.match(path):
        return path[:2]
    return ""


def is_unc_path(path: str, windows: bool = IS_WINDOWS) -> bool:
    """Return True when ``path`` starts with a UNC root name.

    ``//host`` is a UNC root on every platform. On Windows ``\\\\host`` is
    one as well; elsewhere a backslash is an ordinary file name character.
    """
    name = root_name(path, windows)
    if name.startswith("//"):
        return True
    return windows and name.startswith("\\\\")


def split_path(path: str, windows: bool = IS_WINDOWS) -> PathParts:
    """Split ``path`` into its root name, non-empty segments and directory marker."""
    generic = to_generic(path, windows)
    name = root_name(generic, windows)
    rest = generic[len(name) :]
    components = rest.split("/")
    return PathParts(
        root_name=name,
        rooted=rest.startswith("/"),
        segments=[segment for segment in components if segment],
        is_directory=bool(generic) and components[-1] in {"", ".", ".."},
    )


def canonical_work_dir() -> str:
    """Return the working directory with all symlinks resolved, in generic form.

    Some platforms report the working directory with its symlinks already
    resolved and others do not, so it is resolved explicitly everywhere.
    """
    return to_generic(os.path.realpath(os.getcwd()))


def _make_absolute(path: str, work_dir: str) -> str:
    if not path:
        return work_dir
    generic = to_generic(path)
    name = root_name(generic)
    rest = generic[len(name) :]
    if rest.startswith("/"):
        return generic if name else root_name(work_dir) + generic
    if name:
        # Drive-relative input such as ``C:foo`` lands in the working directory.
        return name + work_dir[len(root_name(work_dir)) :] + "/" + rest
    return work_dir.rstrip("/") + "/" + generic


def _collapse_dots(segments: list[str]) -> list[str]:
    """Lexically collapse ``.`` and ``..``, keeping ``..`` that cannot be resolved."""
    stack: list[str] = []
    for segment in segments:
        if segment == ".":
            continue
        if segment == ".." and stack and stack[-1] != "..":
            stack.pop()
            continue
        stack.append(segment)
    return stack


def _strip_dot_dot_prefix(segments: list[str]) -> list[str]:
    """Drop the run of ``..`` that sits directly after the root."""
    start = 0
    while start < len(segments) and segments[start] == "..":
        start += 1
    return segments[start:]


def _resolve_symlinks(absolute: str) -> str:
    # POSIX has no UNC shares to resolve against; realpath would fold ``//host`` into ``/host``.
    if is_unc_path(absolute) and not IS_WINDOWS:
        return absolute
    return to_generic(os.path.realpath(absolute))


def canonicalize(path: str, resolve_symlinks: bool = False) -> str:
    """Return the canonical virtual form of a host filesystem path."""
    work_dir = canonical_work_dir()
    absolute = _make_absolute(path, work_dir)
    if resolve_symlinks:
        absolute = _resolve_symlinks(absolute)

    parts = split_path(absolute)
    require(parts.rooted, f"Path is not rooted after anchoring: {absolute!r}")

    segments = _strip_dot_dot_prefix(_collapse_dots(parts.segments))
    require(".." not in segments, f"Unexpected '..' segment in {absolute!r}")

    name = parts.root_name
    if not is_unc_path(name) and name == root_name(work_dir):
        name = ""

    canonical = name + "/" + "/".join(segments)
    if segments and split_path(path).is_directory:
        canonical += "/"
    return canonical
