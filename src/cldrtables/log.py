"""Logging setup for cldrtables.

Library modules log through ``logging.getLogger(__name__)`` and never
install handlers themselves. Applications (and the CLI) call
``configure_logging`` once.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from datetime import datetime, timezone
from typing import TextIO

ROOT_LOGGER = "cldrtables"

_lock = threading.Lock()
_handler: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(
    level: int | str = logging.WARNING,
    *,
    json_output: bool = False,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the ``cldrtables`` logger.

    Calling again replaces the handler installed by the previous call.

    Args:
        level: Level name or number.
        json_output: Emit JSON lines instead of plain text.
        stream: Output stream; defaults to stderr.

    Returns:
        The configured ``cldrtables`` logger.
    """
    global _handler

    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(CONSOLE_FORMAT))

    logger = logging.getLogger(ROOT_LOGGER)
    with _lock:
        if _handler is not None:
            logger.removeHandler(_handler)
        logger.addHandler(handler)
        _handler = handler
    logger.setLevel(level)
    return logger
