"""Tests for logging configuration."""
import json
import logging

from taskpwa.logging_setup import JsonFormatter, setup_logging


def _own_handlers():
    return [h for h in logging.getLogger().handlers if getattr(h, "_taskpwa", False)]


def test_setup_logging_installs_single_handler(test_settings):
    setup_logging(test_settings)
    setup_logging(test_settings)

    handlers = _own_handlers()
    assert len(handlers) == 1
    assert logging.getLogger().level == logging.DEBUG


def test_json_format(test_settings):
    setup_logging(test_settings.model_copy(update={"LOG_FORMAT": "json"}))

    assert isinstance(_own_handlers()[0].formatter, JsonFormatter)


def test_json_formatter_output():
    record = logging.LogRecord("taskpwa.sync", logging.INFO, __file__, 1, "Synced %s tasks", (3,), None)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "taskpwa.sync"
    assert payload["message"] == "Synced 3 tasks"
