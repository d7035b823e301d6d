"""Search paths and allowed directories bounding what the reader may open."""

from typing import Iterable

from sourcevfs.domain.canonical_path import canonicalize
from sourcevfs.domain.errors import require
from sourcevfs.domain.prefix import is_path_prefix
from sourcevfs.domain.run_id import component_logger

SANDBOX_LOGGER = component_logger("sourcevfs.sandbox")


class SandboxRegistry:
    """Holds the base path, ordered include paths and explicitly allowed directories.

    Every directory searched for imports is implicitly readable, so the
    sandbox boundary is the union of the allowed directories, the base path
    (the working directory when it is empty) and the include paths.
    """

    def __init__(
        self,
        base_path: str = "",
        include_paths: Iterable[str] = (),
        allowed_directories: Iterable[str] = (),
    ) -> None:
        self._base_path = ""
        self._include_paths: list[str] = []
        self._allowed_directories: set[str] = set()

        self.set_base_path(base_path)
        for include_path in include_paths:
            self.add_include_path(include_path)
        for directory in allowed_directories:
            self.allow_directory(directory)

    @property
    def base_path(self) -> str:
        """Canonical base path, or an empty string when unset."""
        return self._base_path

    @property
    def include_paths(self) -> tuple[str, ...]:
        """Canonical include paths in declaration order."""
        return tuple(self._include_paths)

    @property
    def allowed_directories(self) -> frozenset[str]:
        """Canonical explicitly allowed directories."""
        return frozenset(self._allowed_directories)

    def set_base_path(self, path: str) -> None:
        """Set the base path; an empty path unsets it and requires no include paths."""
        if not path:
            require(
                not self._include_paths,
                "Base path cannot be empty while include paths are configured",
            )
            self._base_path = ""
        else:
            self._base_path = canonicalize(path)
        SANDBOX_LOGGER.info(
            "Base path configured",
            extra={"event": "sandbox_configured", "base_path": self._base_path},
        )

    def add_include_path(self, path: str) -> None:
        """Append an include path searched after the base path."""
        require(bool(self._base_path), "Include paths require a base path")
        require(bool(path), "Include path cannot be empty")
        include_path = canonicalize(path)
        self._include_paths.append(include_path)
        SANDBOX_LOGGER.info(
            "Include path added",
            extra={"event": "include_path_added", "path": include_path},
        )

    def allow_directory(self, path: str) -> None:
        """Allow reads below ``path`` in addition to the search paths."""
        require(bool(path), "Allowed directory cannot be empty")
        directory = canonicalize(path)
        if directory in self._allowed_directories:
            return
        self._allowed_directories.add(directory)
        SANDBOX_LOGGER.info(
            "Directory allowed",
            extra={"event": "directory_allowed", "path": directory},
        )

    def search_prefixes(self) -> list[str]:
        """Return the search roots: the base path first, then the include paths."""
        return [self._base_path, *self._include_paths]

    def _boundary(self) -> list[str]:
        directories = sorted(self._allowed_directories)
        directories.append(self._base_path or ".")
        directories.extend(self._include_paths)
        return directories

    def is_allowed(self, candidate: str) -> bool:
        """Return True when canonical ``candidate`` lies inside the sandbox boundary."""
        for directory in self._boundary():
            if is_path_prefix(canonicalize(directory, resolve_symlinks=True), candidate):
                return True
        return False
