import pytest

from ridematch.core.exceptions import (
    ConfigurationError,
    InvalidCoordinate,
    InvalidRequest,
    NoCandidatesAvailable,
    NoRouteFound,
    PermanentError,
    RideMatchError,
    RoutingServiceError,
    RoutingTimeout,
    RoutingUnavailable,
    TransientError,
    ValidationError,
)


@pytest.mark.unit
class TestExceptionHierarchy:
    def test_base_exception_carries_details(self):
        exc = RideMatchError("Something failed", details={"ride_id": "ride_1"})

        assert str(exc) == "Something failed"
        assert exc.message == "Something failed"
        assert exc.details == {"ride_id": "ride_1"}

    def test_details_default_to_empty(self):
        assert RideMatchError("x").details == {}

    @pytest.mark.parametrize(
        "exc_class",
        [NoCandidatesAvailable, RoutingUnavailable, RoutingTimeout, RoutingServiceError],
    )
    def test_transient_errors(self, exc_class):
        assert issubclass(exc_class, TransientError)
        assert not issubclass(exc_class, PermanentError)

    @pytest.mark.parametrize(
        "exc_class",
        [ValidationError, InvalidCoordinate, InvalidRequest, NoRouteFound, ConfigurationError],
    )
    def test_permanent_errors(self, exc_class):
        assert issubclass(exc_class, PermanentError)
        assert not issubclass(exc_class, TransientError)

    def test_routing_failures_share_a_base(self):
        with pytest.raises(RoutingUnavailable):
            raise RoutingTimeout("Request timed out after 5.0s")

    def test_invalid_inputs_are_validation_errors(self):
        for exc_class in (InvalidCoordinate, InvalidRequest, NoRouteFound):
            assert issubclass(exc_class, ValidationError)
