"""Shared pytest fixtures for integration and unit tests."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from typing import Callable

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DRIVER_ENTRYPOINT = PROJECT_ROOT / "main.py"

DriverRunner = Callable[..., subprocess.CompletedProcess]


def _run_driver(
    args: list[str], cwd: Path, stdin: str | None = None
) -> subprocess.CompletedProcess:
    command = [sys.executable, str(DRIVER_ENTRYPOINT), *args]
    env = {
        key: value
        for key, value in os.environ.items()
        if not key.startswith("SOURCEVFS_")
    }
    return subprocess.run(
        command,
        cwd=cwd,
        input=stdin,
        env=env,
        capture_output=True,
        text=True,
        timeout=30,
        check=False,
    )


@pytest.fixture(name="run_driver")
def _run_driver_fixture(tmp_path: Path) -> DriverRunner:
    """Run the command-line driver inside a temporary working directory.

    Logs go to ``logs/sourcevfs.log`` under the working directory unless
    ``log_to_file`` is false, in which case the driver's defaults apply.
    """

    def runner(
        *args: str, stdin: str | None = None, log_to_file: bool = True
    ) -> subprocess.CompletedProcess:
        if log_to_file:
            log_file = tmp_path / "logs" / "sourcevfs.log"
            args = (*args, "--log-destination", str(log_file))
        return _run_driver(list(args), tmp_path, stdin)

    return runner

