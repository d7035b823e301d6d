"""Compilation run scoping and component naming for log records."""

import contextvars
import logging
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, MutableMapping, Optional

NO_RUN = "-"
PROJECT_LOGGER_PREFIX = "sourcevfs."

_active_run: contextvars.ContextVar[str] = contextvars.ContextVar(
    "sourcevfs_run_id", default=NO_RUN
)


def new_run_id() -> str:
    """Return a fresh identifier for one compilation run."""
    return uuid.uuid4().hex


def current_run_id() -> str:
    """Return the identifier of the active run, or ``NO_RUN`` outside of one."""
    return _active_run.get()


@contextmanager
def compilation_run(run_id: Optional[str] = None) -> Iterator[str]:
    """Attribute everything logged inside the block to a single run.

    The previous run (usually none) is restored on exit, so runs nest.
    """
    token = _active_run.set(run_id or new_run_id())
    try:
        yield _active_run.get()
    finally:
        _active_run.reset(token)


def component_name(logger_name: str) -> str:
    """Strip the project prefix from a logger name."""
    if logger_name.startswith(PROJECT_LOGGER_PREFIX):
        return logger_name[len(PROJECT_LOGGER_PREFIX) :]
    return logger_name


class ComponentLogger(logging.LoggerAdapter):
    """Adapter tagging records with the emitting component of the loader."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["component"] = component_name(self.logger.name)
        kwargs["extra"] = extra
        return msg, kwargs


def component_logger(name: str) -> ComponentLogger:
    """Return the component adapter for the logger called ``name``."""
    return ComponentLogger(logging.getLogger(name), {})
