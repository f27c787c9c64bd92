import json
import logging
from datetime import UTC, datetime
from typing import Any

SERVICE_NAME = "ridematch"


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shipping in deployed environments."""

    CONTEXT_FIELDS = ("ride_id", "driver_id", "correlation_id")

    def __init__(self, environment: str = "development"):
        super().__init__()
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "service": SERVICE_NAME,
            "env": self.environment,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            {f: getattr(record, f) for f in self.CONTEXT_FIELDS if getattr(record, f, None)}
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # Context values may be ids of any type
        return json.dumps(entry, default=str)


class DevFormatter(logging.Formatter):
    """Single-line console format with the correlation id in brackets."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s %(name)s [%(correlation_id)s] %(message)s",
            datefmt="%H:%M:%S",
        )
