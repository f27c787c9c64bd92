from fastapi import APIRouter, Depends

from ridematch.api.auth import verify_api_key
from ridematch.api.dependencies import FareEstimatorDep
from ridematch.api.models import (
    CoordinateModel,
    FareEstimateRequest,
    FareQuoteResponse,
    RouteEstimateRequest,
)
from ridematch.core.exceptions import InvalidRequest
from ridematch.geo.coordinate import Coordinate
from ridematch.geo.routing import RouteEstimate

router = APIRouter(dependencies=[Depends(verify_api_key)])


def _required(field_name: str, value: CoordinateModel | None) -> Coordinate:
    if value is None:
        raise InvalidRequest(f"{field_name} is required", details={"field": field_name})
    return value.to_domain()


@router.post("/fares/estimate", response_model=FareQuoteResponse)
def estimate_fare(body: FareEstimateRequest, estimator: FareEstimatorDep) -> FareQuoteResponse:
    """Quote a ride. Routing outages produce a minimum-fare quote flagged as degraded."""
    quote = estimator.estimate(
        _required("pickup", body.pickup),
        _required("destination", body.destination),
        body.vehicle_class,
        body.ride_sharing,
    )
    return FareQuoteResponse.from_quote(quote)


@router.post("/routes/estimate", response_model=RouteEstimate)
def estimate_route(body: RouteEstimateRequest, estimator: FareEstimatorDep) -> RouteEstimate:
    return estimator.estimate_route(body.origin.to_domain(), body.destination.to_domain())
