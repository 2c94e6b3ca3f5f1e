"""Logging for the UICP parser.

Every module logs through a child of the ``uicp_parser`` logger. The package
logger carries a NullHandler, so nothing is printed until the host configures
logging. ``setup_logging`` attaches a JSONL handler to the package logger
only; the host's root configuration is left alone.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

from uicp_parser.config import ParserSettings


PACKAGE_LOGGER = "uicp_parser"

_RESERVED_ATTRS = set(
    logging.LogRecord("name", logging.INFO, "path", 1, "msg", None, None).__dict__
) | {"message", "asctime", "stack_info", "taskName"}

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


class JsonFormatter(logging.Formatter):
    """Formats records as one JSON object per line.

    The ``extra_fields`` mapping passed through ``extra=`` is flattened into
    the entry, so parser events such as ``uicp.block.malformed`` can be
    filtered on their ``event`` key.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "component": record.name,
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS:
                continue
            if key == "extra_fields" and isinstance(value, dict):
                entry.update(value)
            else:
                entry[key] = value

        return json.dumps(entry, default=str)


def setup_logging(
    level: Optional[str] = None, stream=None
) -> logging.Handler:
    """Sends parser logs to a stream as JSONL.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Log level name. Defaults to ``UICP_LOG_LEVEL``, then INFO.
        stream: Target stream, stdout by default.

    Returns:
        The installed handler.
    """
    log_level = (level or ParserSettings.from_env().log_level).upper()

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(log_level)

    for existing in logger.handlers[:]:
        if isinstance(existing.formatter, JsonFormatter):
            logger.removeHandler(existing)

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Returns a parser logger.

    Args:
        name: Module name (typically ``__name__``); the package logger when
            omitted.
    """
    return logging.getLogger(name or PACKAGE_LOGGER)
