"""Tests for the structured JSON log formatter."""

import json
import logging

from utmaudit.core.logging import JSONFormatter, get_logger


def _record(**extra):
    record = logging.LogRecord("utmaudit.test", logging.WARNING, __file__, 1, "hello %s", ("there",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_extras_become_top_level_keys():
    line = json.loads(JSONFormatter().format(_record(dashboard_id="7", duration_ms=12.5)))
    assert line["message"] == "hello there"
    assert line["level"] == "WARNING"
    assert line["logger"] == "utmaudit.test"
    assert line["dashboard_id"] == "7"
    assert line["duration_ms"] == 12.5
    assert "args" not in line and "exception" not in line


def test_module_loggers_share_the_root_handler():
    logger = get_logger("analyzer.sample")
    root = logging.getLogger("utmaudit")
    assert logger.name == "utmaudit.analyzer.sample"
    assert logger.handlers == []
    assert any(isinstance(h.formatter, JSONFormatter) for h in root.handlers)
