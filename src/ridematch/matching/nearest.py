"""Nearest active candidate search by linear scan."""

from collections.abc import Sequence

from ridematch.core.exceptions import NoCandidatesAvailable
from ridematch.geo.coordinate import Coordinate
from ridematch.geo.distance import haversine_distance_m
from ridematch.matching.candidates import Candidate, NearestMatch


class LinearScanSearch:
    """O(n) scan over the active candidates; the first of equally close ones wins.

    Adequate for the tens to low hundreds of drivers online in one city. For
    larger pools use ``DriverGeospatialIndex``, which answers the same query.
    """

    def find_nearest(self, query: Coordinate, candidates: Sequence[Candidate]) -> NearestMatch:
        query = Coordinate.parse(query)
        best: Candidate | None = None
        best_distance = float("inf")

        for candidate in candidates:
            if not candidate.active:
                continue
            d = haversine_distance_m(
                query.lat, query.lng, candidate.coordinate.lat, candidate.coordinate.lng
            )
            # Strict comparison keeps the earliest candidate on ties
            if d < best_distance:
                best = candidate
                best_distance = d

        if best is None:
            raise NoCandidatesAvailable(
                "No active candidates available",
                details={"candidates": len(candidates)},
            )
        return NearestMatch(candidate=best, distance_m=best_distance)


_default_search = LinearScanSearch()


def nearest(query: Coordinate, candidates: Sequence[Candidate]) -> NearestMatch:
    """Closest active candidate to ``query`` and its distance in meters.

    Raises:
        NoCandidatesAvailable: if no candidate is active
        InvalidCoordinate: if ``query`` is out of range
    """
    return _default_search.find_nearest(query, candidates)
