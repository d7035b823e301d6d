"""Mapping of command-line paths to source unit names."""

from sourcevfs.domain.canonical_path import canonicalize
from sourcevfs.domain.prefix import is_path_prefix, strip_prefix_if_present
from sourcevfs.security.sandbox import SandboxRegistry


def cli_path_to_source_unit_name(sandbox: SandboxRegistry, cli_path: str) -> str:
    """Return the source unit name for a path given on the command line.

    The first search root containing the path is stripped from it; the base
    path wins over include paths and earlier include paths over later ones.
    A path outside every search root keeps its canonical absolute form.
    Symlinks are not resolved so the name does not depend on link targets.
    """
    prefixes = [sandbox.base_path or canonicalize("."), *sandbox.include_paths]
    normalized = canonicalize(cli_path)
    for prefix in prefixes:
        if is_path_prefix(prefix, normalized):
            return strip_prefix_if_present(prefix, normalized)
    return normalized
