"""Prefix relationships between canonical virtual paths."""

from typing import Optional

from sourcevfs.domain.canonical_path import PathParts, split_path
from sourcevfs.domain.errors import require


def _checked_parts(path: str) -> PathParts:
    require(bool(path), "Prefix matching requires a non-empty path")
    parts = split_path(path)
    require(parts.rooted, f"Prefix matching requires a rooted path: {path!r}")
    require(
        "." not in parts.segments and ".." not in parts.segments,
        f"Prefix matching requires a canonical path: {path!r}",
    )
    return parts


def _relative_segments(prefix: str, path: str) -> Optional[list[str]]:
    """Return the segments of ``path`` below ``prefix``, or None if it is not below it.

    A trailing slash on ``prefix`` denotes the directory itself, so ``/a/`` and
    ``/a`` are the same prefix. Equal paths yield an empty list.
    """
    prefix_parts = _checked_parts(prefix)
    path_parts = _checked_parts(path)
    if prefix_parts.root_name != path_parts.root_name:
        return None
    depth = len(prefix_parts.segments)
    if path_parts.segments[:depth] != prefix_parts.segments:
        return None
    return path_parts.segments[depth:]


def is_path_prefix(prefix: str, path: str) -> bool:
    """Return True when ``path`` lies strictly inside the directory ``prefix``."""
    return bool(_relative_segments(prefix, path))


def strip_prefix_if_present(prefix: str, path: str) -> str:
    """Return ``path`` relative to ``prefix`` when ``prefix`` contains it, else ``path``."""
    remainder = _relative_segments(prefix, path)
    if not remainder:
        return path
    stripped = "/".join(remainder)
    if path.endswith("/"):
        stripped += "/"
    return stripped
