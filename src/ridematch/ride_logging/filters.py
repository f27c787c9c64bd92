"""Filters that scrub rider data and guarantee a correlation id."""

import logging
import re


class PIIFilter(logging.Filter):
    """Masks contact details and coarsens precise locations in log messages.

    The message is rendered with its arguments before masking, so values
    passed as ``%s`` arguments are scrubbed too. Coordinate pairs given to
    three or more decimals (about 100 m) are cut to two, which is enough to
    debug a city-level problem without logging where a rider lives.
    """

    EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+")
    PHONE_PATTERN = re.compile(r"\+?\d{3}[-.\s]?\d{3}[-.\s]?\d{3,4}")
    COORDINATE_PATTERN = re.compile(r"(-?\d{1,2}\.\d{3,})\s*,\s*(-?\d{1,3}\.\d{3,})")

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            msg = record.getMessage()
        except (TypeError, ValueError):
            return True

        if "@" in msg:
            msg = self.EMAIL_PATTERN.sub("[EMAIL]", msg)
        msg = self.COORDINATE_PATTERN.sub(self._coarsen, msg)
        msg = self.PHONE_PATTERN.sub("[PHONE]", msg)

        record.msg = msg
        record.args = None
        return True

    @staticmethod
    def _coarsen(match: re.Match[str]) -> str:
        lat, lng = (float(g) for g in match.groups())
        return f"{lat:.2f}, {lng:.2f}"


class DefaultCorrelationFilter(logging.Filter):
    """Fills in ``correlation_id`` so format strings can always reference it."""

    def __init__(self, default: str = "-") -> None:
        super().__init__()
        self.default = default

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = self.default
        return True
