"""
Logging helpers for area sync.

Reconciliation logs carry the area they concern (`area_id`,
`pending_state`) so a pass can be followed per area, either in plain text
or as single-line JSON records for log collectors.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .models import Area

# Record attributes promoted to top-level JSON fields
AREA_CONTEXT_FIELDS = ("area_id", "pending_state")

PLAIN_FORMAT = "%(levelname)s  %(message)s"


class StructuredJsonFormatter(logging.Formatter):
    """
    JSON formatter emitting one object per line:
    timestamp (UTC), level, logger, message, any area context and the
    formatted exception when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in AREA_CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_obj[key] = value

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str)


def configure_logging(level: int = logging.INFO, json_logs: bool = False) -> None:
    """Send all logs to stdout, as plain text or JSON lines.

    Replaces any handlers already on the root logger.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        StructuredJsonFormatter() if json_logs else logging.Formatter(PLAIN_FORMAT)
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


class AreaLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter tagging every record with the area being synced."""

    def __init__(self, logger: logging.Logger, area: Area) -> None:
        super().__init__(
            logger,
            {"area_id": area.id, "pending_state": area.pending_state.value},
        )

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs
