"""Read callback serving imports from the sandboxed search paths."""

import logging
from pathlib import Path
from typing import Mapping

from sourcevfs.domain.canonical_path import canonicalize
from sourcevfs.domain.errors import VfsInvariantError, require
from sourcevfs.domain.run_id import component_logger
from sourcevfs.domain.source_unit_name import cli_path_to_source_unit_name
from sourcevfs.domain.vfs_types import (
    EXCEPTION_PREFIX,
    FILE_NOT_FOUND,
    FILE_URL_SCHEME,
    NOT_A_VALID_FILE,
    OUTSIDE_ALLOWED_DIRECTORIES,
    STDIN_SOURCE_UNIT_NAME,
    ReadCallbackKind,
    ReadResult,
)
from sourcevfs.lifecycle.source_registry import SourceRegistry
from sourcevfs.security.sandbox import SandboxRegistry

READER_LOGGER = component_logger("sourcevfs.handlers.reader")


def _join_search_path(prefix: str, name: str) -> str:
    # The search root is prepended even to absolute names.
    if not prefix:
        return name
    return prefix.rstrip("/") + "/" + name.lstrip("/")


def _failure_from(error: Exception) -> ReadResult:
    return ReadResult(False, f"{EXCEPTION_PREFIX}{type(error).__name__}: {error}")


class FileReadService:
    """Resolves source unit names against the sandbox and records what it reads.

    Instances are callable with ``(kind, source_unit_name)`` so they can be
    handed to a compiler as its read callback. Calls are not synchronized;
    callers resolving imports concurrently must serialize them.
    """

    def __init__(self, sandbox: SandboxRegistry, sources: SourceRegistry) -> None:
        self.sandbox = sandbox
        self.sources = sources

    @property
    def source_codes(self) -> dict[str, str]:
        """Source text known so far, keyed by source unit name."""
        return self.sources.as_dict()

    def cli_path_to_source_unit_name(self, cli_path: str) -> str:
        """Map a command-line path to its source unit name."""
        return cli_path_to_source_unit_name(self.sandbox, cli_path)

    def set_source(self, cli_path: str, text: str) -> None:
        """Register ``text`` under the source unit name of ``cli_path``."""
        source_unit_name = self.cli_path_to_source_unit_name(cli_path)
        self.sources.set(source_unit_name, text)
        READER_LOGGER.debug(
            "Source registered",
            extra={"event": "source_set", "source_unit_name": source_unit_name},
        )

    def set_stdin(self, text: str) -> None:
        """Register source text read from standard input."""
        self.sources.set(STDIN_SOURCE_UNIT_NAME, text)
        READER_LOGGER.debug(
            "Source registered",
            extra={"event": "source_set", "source_unit_name": STDIN_SOURCE_UNIT_NAME},
        )

    def set_sources(self, sources: Mapping[str, str]) -> None:
        """Replace all known sources with ``sources``."""
        self.sources.replace_all(sources)
        READER_LOGGER.info(
            "Sources replaced",
            extra={"event": "sources_replaced", "source_count": len(sources)},
        )

    def _find_candidate(self, stripped_name: str) -> str:
        candidate = ""
        for prefix in self.sandbox.search_prefixes():
            candidate = canonicalize(
                _join_search_path(prefix, stripped_name), resolve_symlinks=True
            )
            if Path(candidate).exists():
                break
        return candidate

    def _read(self, source_unit_name: str) -> ReadResult:
        stripped_name = source_unit_name
        if stripped_name.startswith(FILE_URL_SCHEME):
            stripped_name = stripped_name[len(FILE_URL_SCHEME) :]

        candidate = self._find_candidate(stripped_name)
        if not self.sandbox.is_allowed(candidate):
            READER_LOGGER.warning(
                "Read outside allowed directories blocked",
                extra={
                    "event": "read_outside_sandbox",
                    "source_unit_name": source_unit_name,
                    "path": candidate,
                },
            )
            return ReadResult(False, OUTSIDE_ALLOWED_DIRECTORIES)

        candidate_path = Path(candidate)
        if not candidate_path.exists():
            READER_LOGGER.info(
                "File not found",
                extra={"event": "read_not_found", "path": candidate},
            )
            return ReadResult(False, FILE_NOT_FOUND)
        if not candidate_path.is_file():
            READER_LOGGER.info(
                "Not a regular file",
                extra={"event": "read_not_regular_file", "path": candidate},
            )
            return ReadResult(False, NOT_A_VALID_FILE)

        # newline="" keeps line endings exactly as stored on disk.
        with open(candidate_path, encoding="utf-8", newline="") as file_handle:
            contents = file_handle.read()
        self.sources.set(source_unit_name, contents)
        READER_LOGGER.info(
            "File read complete",
            extra={
                "event": "read_complete",
                "source_unit_name": source_unit_name,
                "path": candidate,
                "bytes_in": len(contents),
            },
        )
        return ReadResult(True, contents)

    def read_file(self, kind: str, source_unit_name: str) -> ReadResult:
        """Read the file an import refers to, or explain why it cannot be read.

        An unsupported ``kind`` raises ``VfsInvariantError``; every other
        problem is reported through the returned ``ReadResult``.
        """
        require(
            kind == ReadCallbackKind.READ_FILE.value,
            f"ReadFile callback used as callback kind {kind}",
        )
        if READER_LOGGER.logger.isEnabledFor(logging.DEBUG):
            READER_LOGGER.debug(
                "File read started",
                extra={"event": "read_started", "source_unit_name": source_unit_name},
            )
        try:
            return self._read(source_unit_name)
        except VfsInvariantError:
            raise
        except (OSError, UnicodeError) as error:
            READER_LOGGER.warning(
                "File read failed",
                extra={
                    "event": "read_failed",
                    "source_unit_name": source_unit_name,
                    "error_type": type(error).__name__,
                },
            )
            return _failure_from(error)
        except Exception as error:  # pylint: disable=broad-exception-caught
            READER_LOGGER.exception(
                "Unexpected error in read callback",
                extra={
                    "event": "read_failed",
                    "source_unit_name": source_unit_name,
                    "error_type": type(error).__name__,
                },
            )
            return _failure_from(error)

    __call__ = read_file
