"""Structured Logging — tests for the JSON formatter and handler setup."""

import json
import logging

from cardpreview.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "cardpreview.test", logging.WARNING, __file__, 1, "Photo fetch failed", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_known_extras():
    out = json.loads(JSONFormatter().format(
        _record(identifier="jane-doe", url="https://cdn.test/x.jpg", unrelated="skip"),
    ))
    assert out["level"] == "WARNING"
    assert out["message"] == "Photo fetch failed"
    assert out["identifier"] == "jane-doe"
    assert out["url"] == "https://cdn.test/x.jpg"
    assert "unrelated" not in out
    assert "card_id" not in out


def test_setup_logging_replaces_handler():
    before = len(logging.root.handlers)
    setup_logging("DEBUG", "json")
    setup_logging("INFO", "text")
    assert len(logging.root.handlers) == before + 1
    assert logging.root.level == logging.INFO
