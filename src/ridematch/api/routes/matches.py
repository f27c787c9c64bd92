from fastapi import APIRouter, Depends

from ridematch.api.auth import verify_api_key
from ridematch.api.dependencies import RideMatcherDep
from ridematch.api.models import (
    CandidateModel,
    FareQuoteResponse,
    MatchRequest,
    MatchResponse,
    NearestCandidateRequest,
    NearestCandidateResponse,
)

router = APIRouter(dependencies=[Depends(verify_api_key)])


@router.post("/matches", response_model=MatchResponse)
def create_match(body: MatchRequest, matcher: RideMatcherDep) -> MatchResponse:
    """Quote a booking and select the nearest online driver.

    The caller is responsible for persisting the resulting ride request.
    """
    result = matcher.match(
        body.pickup.model_dump() if body.pickup else None,
        body.destination.model_dump() if body.destination else None,
        vehicle_class=body.vehicle_class,
        ride_sharing=body.ride_sharing,
        candidate_drivers=[c.to_domain() for c in body.candidate_drivers],
    )
    return MatchResponse(
        quote=FareQuoteResponse.from_quote(result.quote),
        driver=CandidateModel.from_domain(result.driver),
        distance_to_pickup_meters=result.distance_to_pickup_meters,
    )


@router.post("/candidates/nearest", response_model=NearestCandidateResponse)
def nearest_candidate(
    body: NearestCandidateRequest, matcher: RideMatcherDep
) -> NearestCandidateResponse:
    """Nearest active station or driver to a point."""
    best = matcher.search.find_nearest(
        body.query.to_domain(), [c.to_domain() for c in body.candidates]
    )
    return NearestCandidateResponse(
        candidate=CandidateModel.from_domain(best.candidate),
        distance_meters=best.distance_m,
    )
