"""Unit tests for the structured JSON logger."""

import io
import json
import logging

import pytest

from ytt.logging_core import logger as logger_module
from ytt.logging_core.logger import DEFAULT_LOG_LEVEL, JSONFormatter, get_logger, log_event, set_log_level


@pytest.fixture(autouse=True)
def restore_level():
    yield
    set_log_level(DEFAULT_LOG_LEVEL)


def capture(logger):
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    return stream


def test_get_logger_is_cached_per_run():
    assert get_logger("run-a") is get_logger("run-a")
    assert get_logger("run-a") is not get_logger("run-b")
    assert get_logger("run-a").propagate is False


def test_log_event_emits_json_line_with_run_id():
    set_log_level("INFO")
    logger = get_logger("run-json")
    stream = capture(logger)

    log_event(
        logger,
        logging.INFO,
        "Fetching page",
        stage_name="watch_page",
        event_type="start",
        metadata={"video_id": "dQw4w9WgXcQ"},
    )

    record = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert record["run_id"] == "run-json"
    assert record["level"] == "INFO"
    assert record["message"] == "Fetching page"
    assert record["stage_name"] == "watch_page"
    assert record["event_type"] == "start"
    assert record["metadata"] == {"video_id": "dQw4w9WgXcQ"}
    assert record["timestamp"].endswith("Z")


def test_default_level_hides_info():
    logger = get_logger("run-quiet")
    stream = capture(logger)

    log_event(logger, logging.INFO, "hidden", event_type="progress")
    log_event(logger, logging.WARNING, "shown", event_type="failure")

    lines = stream.getvalue().strip().splitlines()
    assert [json.loads(line)["message"] for line in lines] == ["shown"]


def test_set_log_level_updates_existing_loggers():
    logger = get_logger("run-level")
    set_log_level("debug")
    assert logger.level == logging.DEBUG
    assert logger_module._level == logging.DEBUG


def test_set_log_level_rejects_unknown_names():
    with pytest.raises(ValueError):
        set_log_level("LOUD")
