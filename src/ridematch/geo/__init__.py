from ridematch.geo.coordinate import Coordinate
from ridematch.geo.distance import distance, distance_km

__all__ = ["Coordinate", "distance", "distance_km"]
