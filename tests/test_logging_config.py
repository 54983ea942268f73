"""Tests for JSON logging setup."""

import json
import logging
import sys

import pytest

from jobboard.utils.logging_config import JSONFormatter, setup_logging


@pytest.fixture
def restore_jobboard_logger():
    logger = logging.getLogger("jobboard")
    saved = (logger.level, list(logger.handlers), logger.propagate)
    yield
    for handler in logger.handlers:
        handler.close()
    logger.setLevel(saved[0])
    logger.handlers, logger.propagate = saved[1], saved[2]


def test_json_formatter_fields():
    record = logging.LogRecord("jobboard.test", logging.INFO, __file__, 10, "Job %s approved", ("j1",), None)
    data = json.loads(JSONFormatter().format(record))

    assert data["level"] == "INFO"
    assert data["logger"] == "jobboard.test"
    assert data["message"] == "Job j1 approved"
    assert "exception" not in data


def test_json_formatter_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord("jobboard.test", logging.ERROR, __file__, 20, "failed", (), sys.exc_info())

    data = json.loads(JSONFormatter().format(record))
    assert data["exception"]["type"] == "ValueError"
    assert data["exception"]["message"] == "boom"


def test_setup_logging_writes_file(tmp_path, restore_jobboard_logger):
    logger = setup_logging(level="debug", log_dir=str(tmp_path))

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    logging.getLogger("jobboard.services.jobs").info("Job %s created", "abc")
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "jobboard.log").read_text().strip().splitlines()
    assert json.loads(lines[-1])["message"] == "Job abc created"
