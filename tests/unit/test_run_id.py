"""Unit tests for compilation run scoping and component loggers."""

import logging
import threading

import pytest

from sourcevfs.bootstrap.logging_setup import RunIdFilter
from sourcevfs.domain.run_id import (
    NO_RUN,
    compilation_run,
    component_logger,
    component_name,
    current_run_id,
    new_run_id,
)


class TestCompilationRun:
    """Test run scoping through the context variable."""

    def test_no_run_outside_scope(self):
        """Outside a run the placeholder is reported."""
        assert current_run_id() == NO_RUN

    def test_new_run_ids_differ(self):
        """Successive IDs should differ."""
        assert new_run_id() != new_run_id()

    def test_scope_sets_and_restores(self):
        """The run ID is active inside the block only."""
        with compilation_run("run-123") as run_id:
            assert run_id == "run-123"
            assert current_run_id() == "run-123"
        assert current_run_id() == NO_RUN

    def test_scope_generates_id_when_omitted(self):
        """A fresh ID is generated for anonymous runs."""
        with compilation_run() as run_id:
            assert run_id != NO_RUN
            assert current_run_id() == run_id

    def test_nested_scope_restores_outer_run(self):
        """Leaving an inner run brings back the outer one."""
        with compilation_run("outer"):
            with compilation_run("inner"):
                assert current_run_id() == "inner"
            assert current_run_id() == "outer"

    def test_scope_restored_after_error(self):
        """An exception leaving the block still ends the run."""
        with pytest.raises(RuntimeError):
            with compilation_run("failing"):
                raise RuntimeError("boom")
        assert current_run_id() == NO_RUN

    def test_runs_isolated_between_threads(self):
        """Separate threads keep independent IDs."""
        results = {}

        def worker(worker_id: str):
            with compilation_run(f"worker-{worker_id}"):
                results[worker_id] = current_run_id()

        threads = [threading.Thread(target=worker, args=(str(i),)) for i in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == {str(i): f"worker-{i}" for i in range(3)}


def _bare_record() -> logging.LogRecord:
    return logging.LogRecord(
        name="sourcevfs.sandbox",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg="bare",
        args=(),
        exc_info=None,
    )


def test_filter_stamps_active_run():
    """Records emitted during a run carry its ID."""
    record = _bare_record()

    with compilation_run("run-abc"):
        assert RunIdFilter().filter(record)

    assert record.run_id == "run-abc"


def test_filter_keeps_explicit_run_id():
    """A run ID already on the record is not replaced."""
    record = _bare_record()
    record.run_id = "explicit"

    with compilation_run("run-abc"):
        RunIdFilter().filter(record)

    assert record.run_id == "explicit"


@pytest.mark.parametrize(
    ("logger_name", "expected"),
    [
        ("sourcevfs.handlers.reader", "handlers.reader"),
        ("sourcevfs.sandbox", "sandbox"),
        ("sourcevfs", "sourcevfs"),
        ("other.module", "other.module"),
    ],
)
def test_component_name(logger_name, expected):
    """The project prefix is removed from component names."""
    assert component_name(logger_name) == expected


def test_component_logger_tags_records():
    """The adapter adds the component without touching caller extras."""
    adapter = component_logger("sourcevfs.handlers.reader")
    extra = {"event": "read_started"}

    _, kwargs = adapter.process("Test message", {"extra": extra})

    assert kwargs["extra"] == {"event": "read_started", "component": "handlers.reader"}
    assert "component" not in extra


def test_component_logger_without_extra():
    """Calls without extras still get a component."""
    _, kwargs = component_logger("sourcevfs.sandbox").process("Test message", {})

    assert kwargs["extra"] == {"component": "sandbox"}
