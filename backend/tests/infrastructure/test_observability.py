"""JSONFormatter output shape."""

import json
import logging
import sys

from app.infrastructure.observability import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "app.services.query_executor", logging.INFO, __file__, 1,
        "Executed query", None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_base_fields_present():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "INFO"
    assert log["logger"] == "app.services.query_executor"
    assert log["message"] == "Executed query"
    assert "timestamp" in log


def test_query_extras_surface():
    log = json.loads(JSONFormatter().format(_record(
        backend="sql", query="SELECT 1", duration_ms=1.5, row_count=1,
    )))
    assert log["backend"] == "sql"
    assert log["query"] == "SELECT 1"
    assert log["duration_ms"] == 1.5
    assert log["row_count"] == 1


def test_missing_extras_omitted():
    log = json.loads(JSONFormatter().format(_record(backend=None)))
    assert "backend" not in log
    assert "error_code" not in log


def test_exception_included():
    try:
        raise ValueError("bad sql")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()
    log = json.loads(JSONFormatter().format(record))
    assert "ValueError: bad sql" in log["exception"]
