"""Pydantic models for API requests and responses.

Coordinate ranges are checked by the domain layer, not here, so out-of-range
values surface as 400 responses with the domain error message.
"""

from typing import Any

from pydantic import BaseModel, Field

from ridematch.geo.coordinate import Coordinate
from ridematch.matching.candidates import Candidate
from ridematch.pricing.fare import DEFAULT_VEHICLE_CLASS, FareQuote, format_fare


class CoordinateModel(BaseModel):
    lat: float
    lng: float

    def to_domain(self) -> Coordinate:
        return Coordinate(self.lat, self.lng)


class CandidateModel(BaseModel):
    id: str
    lat: float
    lng: float
    active: bool = True
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_domain(self) -> Candidate:
        return Candidate(
            id=self.id,
            coordinate=Coordinate(self.lat, self.lng),
            active=self.active,
            metadata=self.metadata,
        )

    @classmethod
    def from_domain(cls, candidate: Candidate) -> "CandidateModel":
        return cls(
            id=candidate.id,
            lat=candidate.coordinate.lat,
            lng=candidate.coordinate.lng,
            active=candidate.active,
            metadata=candidate.metadata,
        )


class FareEstimateRequest(BaseModel):
    pickup: CoordinateModel | None = None
    destination: CoordinateModel | None = None
    vehicle_class: str = DEFAULT_VEHICLE_CLASS
    ride_sharing: bool = False


class FareQuoteResponse(BaseModel):
    distance_km: float
    duration_minutes: int
    base_fare: int
    discounted_fare: int | None = None
    currency: str
    vehicle_class: str
    degraded: bool
    formatted_fare: str

    @classmethod
    def from_quote(cls, quote: FareQuote) -> "FareQuoteResponse":
        payable = quote.discounted_fare if quote.discounted_fare is not None else quote.base_fare
        return cls(
            **quote.model_dump(),
            degraded=quote.is_degraded,
            formatted_fare=format_fare(payable, quote.currency),
        )


class MatchRequest(FareEstimateRequest):
    candidate_drivers: list[CandidateModel] = Field(default_factory=list)


class MatchResponse(BaseModel):
    quote: FareQuoteResponse
    driver: CandidateModel
    distance_to_pickup_meters: float


class NearestCandidateRequest(BaseModel):
    query: CoordinateModel
    candidates: list[CandidateModel] = Field(default_factory=list)


class NearestCandidateResponse(BaseModel):
    candidate: CandidateModel
    distance_meters: float


class RouteEstimateRequest(BaseModel):
    origin: CoordinateModel
    destination: CoordinateModel


class TrackingStartRequest(BaseModel):
    pickup: CoordinateModel | None = None
    destination: CoordinateModel | None = None
