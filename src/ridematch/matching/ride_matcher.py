"""Booking request orchestration: quote the fare, then pick the nearest driver."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ridematch.core.exceptions import InvalidCoordinate, InvalidRequest
from ridematch.geo.coordinate import Coordinate
from ridematch.matching.candidates import Candidate, CandidateSearch
from ridematch.matching.driver_geospatial_index import DriverGeospatialIndex
from ridematch.matching.nearest import LinearScanSearch
from ridematch.pricing.fare import DEFAULT_VEHICLE_CLASS, FareEstimator, FareQuote
from ridematch.ride_logging import log_context
from ridematch.settings import MatchingSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    quote: FareQuote
    driver: Candidate
    distance_to_pickup_meters: float


class RideMatcher:
    """Stateless coordinator between the fare estimator and candidate search.

    Nothing is persisted here; the caller records the ride request and,
    later, the ride history entry.
    """

    def __init__(
        self,
        fare_estimator: FareEstimator | None = None,
        search: CandidateSearch | None = None,
    ) -> None:
        self.fare_estimator = fare_estimator if fare_estimator is not None else FareEstimator()
        self.search = search if search is not None else LinearScanSearch()

    def match(
        self,
        pickup: Any,
        destination: Any,
        vehicle_class: str = DEFAULT_VEHICLE_CLASS,
        ride_sharing: bool = False,
        candidate_drivers: Sequence[Candidate] = (),
    ) -> MatchResult:
        """Quote and match one booking request.

        Raises:
            InvalidRequest: pickup or destination missing or malformed
            NoCandidatesAvailable: no active driver among ``candidate_drivers``
        """
        pickup_coord = _require_coordinate("pickup", pickup)
        destination_coord = _require_coordinate("destination", destination)

        quote = self.fare_estimator.estimate(
            pickup_coord, destination_coord, vehicle_class, ride_sharing
        )
        best = self.search.find_nearest(pickup_coord, candidate_drivers)

        with log_context(driver_id=best.candidate.id):
            logger.info(
                f"Matched driver {best.distance_m:.0f}m from pickup, "
                f"fare {quote.base_fare} {quote.currency}"
                + (" (degraded quote)" if quote.is_degraded else "")
            )

        return MatchResult(
            quote=quote,
            driver=best.candidate,
            distance_to_pickup_meters=best.distance_m,
        )


def create_candidate_search(settings: MatchingSettings) -> CandidateSearch:
    if settings.search_strategy == "h3":
        return DriverGeospatialIndex(h3_resolution=settings.h3_resolution)
    return LinearScanSearch()


def _require_coordinate(field_name: str, value: Any) -> Coordinate:
    if value is None:
        raise InvalidRequest(f"{field_name} is required", details={"field": field_name})
    try:
        return Coordinate.parse(value)
    except InvalidCoordinate as e:
        raise InvalidRequest(
            f"{field_name} is malformed: {e.message}",
            details={"field": field_name, **e.details},
        ) from e
