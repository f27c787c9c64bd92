"""Error hierarchy for the ride matching engine.

Transient errors describe conditions that can clear on their own (no driver
online yet, routing service down); callers may retry or degrade. Permanent
errors describe bad input or configuration and will fail the same way again.
"""

from typing import Any


class RideMatchError(Exception):
    """Base exception carrying a message and structured details for logs and APIs."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TransientError(RideMatchError):
    """May succeed if retried later."""


class NoCandidatesAvailable(TransientError):
    """No active driver or station to choose from. Callers usually re-poll."""


class RoutingUnavailable(TransientError):
    """The route provider could not produce a road distance."""


class RoutingTimeout(RoutingUnavailable):
    pass


class RoutingServiceError(RoutingUnavailable):
    """The route provider answered with an error or could not be reached."""


class PermanentError(RideMatchError):
    """Will fail the same way on retry."""


class ValidationError(PermanentError):
    """Rejected input."""


class InvalidCoordinate(ValidationError):
    """Latitude or longitude is not a finite number in range."""


class InvalidRequest(ValidationError):
    """A booking request is missing required fields or carries malformed ones."""


class NoRouteFound(ValidationError):
    """The road network has no route between the two points."""


class ConfigurationError(PermanentError):
    pass
