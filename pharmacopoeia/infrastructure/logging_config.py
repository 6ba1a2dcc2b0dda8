"""Structured logging configuration.

Two output modes share one stderr handler on the root logger: JSON lines for
machine consumption and a plain text line for interactive use.

Builders attach diagnostic context to log records through ``extra``
(source, element_path, record_index, error_type, value); the JSON formatter
copies whichever of those keys a record carries into its output object.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

# Context keys passed through ``extra=`` by the adapters
CONTEXT_FIELDS = ("source", "element_path", "record_index", "error_type", "value")

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class StructuredFormatter(logging.Formatter):
    """Renders each log record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        entry.update({key: getattr(record, key) for key in CONTEXT_FIELDS if hasattr(record, key)})

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _build_formatter(use_json: bool) -> logging.Formatter:
    if use_json:
        return StructuredFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def setup_logging(use_json: bool = False, log_level: str = "INFO") -> None:
    """Route all logging through one stderr handler.

    Existing root handlers are replaced, so calling this again switches the
    mode instead of duplicating output. Logs go to stderr to keep CLI output
    on stdout clean.

    Parameters:
        use_json: Emit JSON lines instead of plain text
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL); unknown
            names fall back to INFO
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_build_formatter(use_json))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
