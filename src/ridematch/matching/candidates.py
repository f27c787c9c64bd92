from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from ridematch.geo.coordinate import Coordinate


@dataclass(frozen=True)
class Candidate:
    """A driver or station that can be matched to a query point."""

    id: str
    coordinate: Coordinate
    active: bool = True
    metadata: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class NearestMatch:
    candidate: Candidate
    distance_m: float

    # Lets callers unpack ``best, distance_m = nearest(...)``.
    def __iter__(self) -> Iterator[Any]:
        yield self.candidate
        yield self.distance_m


class CandidateSearch(Protocol):
    """Strategy for finding the closest active candidate to a query point."""

    def find_nearest(self, query: Coordinate, candidates: Sequence[Candidate]) -> NearestMatch: ...
