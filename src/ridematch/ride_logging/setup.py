import logging
import sys

from ridematch.ride_logging.context import ContextFilter
from ridematch.ride_logging.filters import DefaultCorrelationFilter, PIIFilter
from ridematch.ride_logging.formatters import DevFormatter, JSONFormatter
from ridematch.settings import LogSettings

# Libraries that log every request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def setup_logging(settings: LogSettings | None = None) -> logging.Handler:
    """Route all logging through one stdout handler and return it.

    Uvicorn's own loggers are made to propagate to the root so server
    messages share the format and filters of the service's records.
    """
    settings = settings if settings is not None else LogSettings()

    handler = logging.StreamHandler(sys.stdout)
    if settings.format == "json":
        handler.setFormatter(JSONFormatter(settings.environment))
    else:
        handler.setFormatter(DevFormatter())

    # Context first, so PII masking sees the final record
    handler.addFilter(ContextFilter())
    handler.addFilter(DefaultCorrelationFilter())
    handler.addFilter(PIIFilter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(settings.level)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return handler
