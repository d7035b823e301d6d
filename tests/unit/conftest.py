"""Shared fixtures for unit tests."""

import logging
import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Ensure logs propagate to root so caplog can catch them."""
    logger = logging.getLogger("sourcevfs")
    old_propagate = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = old_propagate


@pytest.fixture(name="work_dir")
def work_dir_fixture(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Run the test inside a fresh working directory and return its canonical form."""
    monkeypatch.chdir(tmp_path)
    return Path(os.path.realpath(tmp_path)).as_posix()
