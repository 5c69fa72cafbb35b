"""UTMAudit — Structured JSON Logging.

One stdout handler lives on the ``utmaudit`` root logger; module loggers
are its children and propagate to it. Anything passed through ``extra=``
lands in the JSON line as a top-level key.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from utmaudit.config import settings

ROOT_LOGGER = "utmaudit"

# Attributes every LogRecord carries; everything else came from ``extra=``
_RECORD_ATTRS = set(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, extras included."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                entry[key] = value
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str | None = None) -> logging.Logger:
    """Install the JSON handler on the root logger once and set its level."""
    root = logging.getLogger(ROOT_LOGGER)
    if not any(isinstance(h.formatter, JSONFormatter) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
    name = (level or settings.log_level).upper()
    root.setLevel(getattr(logging, name, logging.INFO))
    return root


def get_logger(name: str) -> logging.Logger:
    """Return ``utmaudit.<name>``, configuring the root on first use."""
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        configure_logging()
    return root.getChild(name)
