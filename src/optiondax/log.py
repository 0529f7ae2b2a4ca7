"""
Logging setup for the command line front end and example scripts.

Library modules only create module loggers; handlers are installed here.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(level: str | int = "WARNING", json_output: bool = False) -> None:
    """
    Route ``optiondax`` log records to stderr.

    Parameters
    ----------
    level : str or int, default="WARNING"
        Threshold for the package logger, e.g. ``"DEBUG"`` to see every
        Newton step of the implied-volatility solver.
    json_output : bool, default=False
        Emit JSON lines instead of plain text.
    """

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    logger = logging.getLogger("optiondax")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.handlers = [handler]
