"""Unit tests for logging configuration."""

import logging
import sys

import pytest
from json_log_formatter import JSONFormatter

from dashpipe.core.logging import StructuredFormatter, configure_logging


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logging.getLogger("dashpipe").handlers.clear()
    logging.getLogger("dashpipe").setLevel(logging.NOTSET)


def make_record(message, **extra):
    record = logging.LogRecord("dashpipe.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_structured_formatter_includes_context():
    record = make_record(
        "Imported 5 rows",
        data_source_id="ds_1",
        context={"owner": "alice"},
    )
    assert StructuredFormatter().format(record) == (
        "[INFO] data_source=ds_1 owner=alice Imported 5 rows"
    )


def test_structured_formatter_source_type():
    record = make_record("Fetching CSV", source_type="csv")
    assert StructuredFormatter().format(record) == "[INFO] source=csv Fetching CSV"


def test_configure_logging_installs_one_stderr_handler():
    configure_logging(level="debug")
    configure_logging(level="warning")

    logger = logging.getLogger("dashpipe")
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1
    assert logger.handlers[0].stream is sys.stderr
    assert isinstance(logger.handlers[0].formatter, StructuredFormatter)


def test_configure_logging_json():
    configure_logging(json_format=True)
    handler = logging.getLogger("dashpipe").handlers[0]
    assert isinstance(handler.formatter, JSONFormatter)


def test_unknown_level_falls_back_to_info():
    configure_logging(level="chatty")
    assert logging.getLogger("dashpipe").level == logging.INFO
