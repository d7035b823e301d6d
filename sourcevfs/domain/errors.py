"""Fatal error types raised by the virtual filesystem."""


class VfsInvariantError(Exception):
    """Raised when the virtual filesystem is configured or called incorrectly.

    These are programming errors on the caller's side, not conditions a
    compiler run is expected to recover from.
    """


def require(condition: bool, message: str) -> None:
    """Raise ``VfsInvariantError`` with ``message`` unless ``condition`` holds."""
    if not condition:
        raise VfsInvariantError(message)
