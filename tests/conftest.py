import random

import pytest

from ridematch.geo.coordinate import Coordinate
from ridematch.matching.candidates import Candidate

# Kigali reference points
KIGALI_PICKUP = Coordinate(-1.9441, 30.0619)
KIGALI_DESTINATION = Coordinate(-1.9500, 30.0700)


@pytest.fixture
def pickup() -> Coordinate:
    return KIGALI_PICKUP


@pytest.fixture
def destination() -> Coordinate:
    return KIGALI_DESTINATION


@pytest.fixture
def rng() -> random.Random:
    """Seeded generator for deterministic route synthesis."""
    return random.Random(42)


@pytest.fixture
def online_drivers() -> list[Candidate]:
    return [
        Candidate("driver_far", Coordinate(-1.9700, 30.1000), metadata={"plate": "RAA 001A"}),
        Candidate("driver_near", Coordinate(-1.9445, 30.0625), metadata={"plate": "RAB 002B"}),
        Candidate("driver_mid", Coordinate(-1.9500, 30.0700), metadata={"plate": "RAC 003C"}),
    ]
