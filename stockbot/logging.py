"""
Log configuration for the ``stockbot`` logger tree.

Decisions, executions and Q updates are logged with ``extra=`` context
(``symbol``, ``strategy``, ``signal``, ``reward`` ...). The structured
formatter turns that context into JSON keys so log lines can be filtered
per symbol or strategy.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import IO

TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Attributes every LogRecord carries; anything else arrived through ``extra=``
_RECORD_ATTRIBUTES = frozenset(logging.LogRecord('', 0, '', 0, '', (), None).__dict__) | {'message', 'asctime'}


def record_context(record: logging.LogRecord) -> dict[str, object]:
    """The ``extra=`` fields attached to ``record``."""
    return {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES}


class StructuredFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message plus the record's context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            'timestamp': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        payload.update(record_context(record))
        if record.exc_info:
            payload['exception'] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logger(
    name: str = 'stockbot',
    level: str = 'INFO',
    structured: bool = False,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """
    Attach a single stream handler to ``name``, replacing any existing ones.

    Args:
        name: Logger name
        level: Level name; unknown names fall back to INFO
        structured: Emit JSON lines instead of plain text
        stream: Target stream (defaults to stderr)
    """
    level_value = logging.getLevelName(level.upper())
    if not isinstance(level_value, int):
        level_value = logging.INFO

    handler = logging.StreamHandler(stream)
    handler.setLevel(level_value)
    handler.setFormatter(StructuredFormatter() if structured else logging.Formatter(TEXT_FORMAT))

    logger = logging.getLogger(name)
    logger.setLevel(level_value)
    logger.handlers = [handler]
    return logger
