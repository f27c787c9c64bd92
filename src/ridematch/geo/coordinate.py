"""Immutable latitude/longitude value type."""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ridematch.core.exceptions import InvalidCoordinate


@dataclass(frozen=True, slots=True)
class Coordinate:
    lat: float
    lng: float

    def __post_init__(self) -> None:
        for name, value, bound in (("lat", self.lat, 90.0), ("lng", self.lng, 180.0)):
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise InvalidCoordinate(
                    f"{name} must be a number, got {type(value).__name__}",
                    details={name: value},
                )
            if not math.isfinite(value) or not -bound <= value <= bound:
                raise InvalidCoordinate(
                    f"{name} {value} outside [-{bound:g}, {bound:g}]",
                    details={name: value},
                )

    @classmethod
    def parse(cls, value: Any) -> "Coordinate":
        """Build a Coordinate from a Coordinate, a (lat, lng) pair or a mapping.

        Mappings may spell longitude as ``lng`` or ``lon``.
        """
        if isinstance(value, Coordinate):
            return value
        if isinstance(value, Mapping):
            lat = value.get("lat")
            lng = value.get("lng", value.get("lon"))
            if lat is None or lng is None:
                raise InvalidCoordinate("Coordinate mapping needs lat and lng", details=dict(value))
            return cls(lat, lng)
        if isinstance(value, tuple | list) and len(value) == 2:
            return cls(value[0], value[1])
        raise InvalidCoordinate(f"Cannot build a coordinate from {value!r}")

    def as_tuple(self) -> tuple[float, float]:
        return self.lat, self.lng
