"""Shared virtual filesystem type definitions to avoid circular imports."""

from dataclasses import dataclass
from enum import Enum

STDIN_SOURCE_UNIT_NAME = "<stdin>"
FILE_URL_SCHEME = "file://"

OUTSIDE_ALLOWED_DIRECTORIES = "File outside of allowed directories."
FILE_NOT_FOUND = "File not found."
NOT_A_VALID_FILE = "Not a valid file."
EXCEPTION_PREFIX = "Exception in read callback: "


class ReadCallbackKind(str, Enum):
    """Callback kinds a compiler may request from its read callback."""

    READ_FILE = "source"


@dataclass(frozen=True)
class ReadResult:
    """Outcome of a read callback: file text on success, a message otherwise."""

    success: bool
    content: str
