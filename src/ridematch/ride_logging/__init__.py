"""Logging setup, filters and per-ride context fields."""

from ridematch.ride_logging.context import ContextFilter, LogContext, log_context, log_ride_context
from ridematch.ride_logging.filters import DefaultCorrelationFilter, PIIFilter
from ridematch.ride_logging.formatters import DevFormatter, JSONFormatter
from ridematch.ride_logging.setup import setup_logging

__all__ = [
    "ContextFilter",
    "DefaultCorrelationFilter",
    "DevFormatter",
    "JSONFormatter",
    "LogContext",
    "PIIFilter",
    "log_context",
    "log_ride_context",
    "setup_logging",
]
