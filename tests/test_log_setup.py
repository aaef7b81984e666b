"""Tests for the JSON console log formatter."""

from __future__ import annotations

import json
import logging

from event_panel.log_setup import JsonConsoleFormatter, setup_logger


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="event_panel.events.pipeline",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Skipping malformed event %s: %s",
        args=("9001", "bad severity"),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_event_context_fields() -> None:
    payload = json.loads(JsonConsoleFormatter().format(_record(eventid="9001", triggerid="13")))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "event_panel.events.pipeline"
    assert payload["message"] == "Skipping malformed event 9001: bad severity"
    assert payload["eventid"] == "9001"
    assert payload["triggerid"] == "13"
    assert "generation" not in payload


def test_formatter_omits_absent_context() -> None:
    payload = json.loads(JsonConsoleFormatter().format(_record()))
    assert "eventid" not in payload
    assert "triggerid" not in payload


def test_setup_logger_is_idempotent() -> None:
    first = setup_logger("test_log_setup_logger")
    second = setup_logger("test_log_setup_logger")
    assert first is second
    assert len(first.handlers) == 1
    assert first.propagate is False
    assert isinstance(first.handlers[0].formatter, JsonConsoleFormatter)
