"""Unit tests for JSON formatter."""

import json
import logging
import sys

import pytest

from sourcevfs.bootstrap.logging_setup import JsonFormatter


@pytest.fixture(name="json_formatter")
def json_formatter_fixture():
    """Create a JSON formatter instance."""
    return JsonFormatter("%Y-%m-%d %H:%M:%S")


def _record(msg: str = "Test message", exc_info=None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="sourcevfs.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.run_id = "run-id"
    record.component = "test"
    return record


def test_json_formatter_basic_fields(json_formatter):
    """JSON output includes the required basic fields."""
    log_data = json.loads(json_formatter.format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["run_id"] == "run-id"
    assert log_data["component"] == "test"
    assert log_data["message"] == "Test message"
    assert "timestamp" in log_data


def test_json_formatter_with_event_and_known_extras(json_formatter):
    """Events and allow-listed extra keys are included."""
    record = _record()
    record.event = "read_complete"
    record.source_unit_name = "a.sol"
    record.path = "/project/a.sol"
    record.bytes_in = 12

    log_data = json.loads(json_formatter.format(record))

    assert log_data["event"] == "read_complete"
    assert log_data["source_unit_name"] == "a.sol"
    assert log_data["path"] == "/project/a.sol"
    assert log_data["bytes_in"] == 12


def test_json_formatter_ignores_unknown_extras(json_formatter):
    """Attributes outside the allow-list are not serialized."""
    record = _record()
    record.unrelated = "value"

    log_data = json.loads(json_formatter.format(record))

    assert "unrelated" not in log_data


def test_json_formatter_stable_key_order(json_formatter):
    """Keys are emitted in sorted order."""
    output = json_formatter.format(_record())
    keys = list(json.loads(output).keys())

    assert keys == sorted(keys)


def test_json_formatter_includes_exception(json_formatter):
    """Exception tracebacks are serialized."""
    try:
        raise ValueError("broken")
    except ValueError:
        record = _record(exc_info=sys.exc_info())

    log_data = json.loads(json_formatter.format(record))

    assert "ValueError: broken" in log_data["exception"]
