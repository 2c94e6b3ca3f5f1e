import io
import json
import logging
import sys

import pytest

from uicp_parser.observability.logging import (
    PACKAGE_LOGGER,
    JsonFormatter,
    get_logger,
    setup_logging,
)


def test_json_formatter():
    formatter = JsonFormatter()
    log_record = logging.LogRecord(
        name="uicp_parser.parsing.extractor",
        level=logging.WARNING,
        pathname="extractor.py",
        lineno=10,
        msg="Dropped malformed UICP block",
        args=(),
        exc_info=None,
    )
    log_record.extra_fields = {"event": "uicp.block.malformed", "source_span": 2}
    log_record.component_id = "SimpleCard"

    data = json.loads(formatter.format(log_record))

    assert data["message"] == "Dropped malformed UICP block"
    assert data["level"] == "WARNING"
    assert data["component"] == "uicp_parser.parsing.extractor"
    assert data["event"] == "uicp.block.malformed"
    assert data["source_span"] == 2
    assert data["component_id"] == "SimpleCard"
    assert "timestamp" in data


def test_json_formatter_includes_exception():
    formatter = JsonFormatter()
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord(
            "x", logging.ERROR, "p", 1, "failed", (), sys.exc_info()
        )
    data = json.loads(formatter.format(record))
    assert "ValueError: boom" in data["exception"]


def test_extra_fields_through_logger():
    log_output = io.StringIO()
    handler = logging.StreamHandler(log_output)
    handler.setFormatter(JsonFormatter())

    logger = logging.getLogger("test_uicp_setup")
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

    logger.info("catalog loaded", extra={"extra_fields": {"components": 3}})

    data = json.loads(log_output.getvalue())
    assert data["message"] == "catalog loaded"
    assert data["components"] == 3
    logger.removeHandler(handler)


@pytest.fixture
def package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved_handlers, saved_level = logger.handlers[:], logger.level
    yield logger
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)


def test_setup_logging_level(monkeypatch, package_logger):
    root_handlers = logging.getLogger().handlers[:]
    monkeypatch.setenv("UICP_LOG_LEVEL", "debug")
    setup_logging()
    assert package_logger.level == logging.DEBUG
    json_handlers = [
        h for h in package_logger.handlers if isinstance(h.formatter, JsonFormatter)
    ]
    assert len(json_handlers) == 1

    setup_logging("warning")
    assert package_logger.level == logging.WARNING
    json_handlers = [
        h for h in package_logger.handlers if isinstance(h.formatter, JsonFormatter)
    ]
    assert len(json_handlers) == 1
    assert logging.getLogger().handlers == root_handlers


def test_setup_logging_writes_parser_events(package_logger):
    output = io.StringIO()
    setup_logging("info", stream=output)
    get_logger("uicp_parser.parsing.extractor").warning(
        "Dropped malformed UICP block: oops",
        extra={"extra_fields": {"event": "uicp.block.malformed"}},
    )
    data = json.loads(output.getvalue().splitlines()[-1])
    assert data["component"] == "uicp_parser.parsing.extractor"
    assert data["event"] == "uicp.block.malformed"


def test_package_logger_has_null_handler():
    handlers = logging.getLogger(PACKAGE_LOGGER).handlers
    assert any(isinstance(h, logging.NullHandler) for h in handlers)


def test_get_logger():
    logger = get_logger("my_name")
    assert logger.name == "my_name"
    assert isinstance(logger, logging.Logger)
    assert get_logger().name == "uicp_parser"
