from ridematch.tracking.registry import TrackerRegistry, create_tracker_registry
from ridematch.tracking.tracker import DriverTracker, TrackingPhase, TrackingSnapshot, TrackingState

__all__ = [
    "DriverTracker",
    "TrackerRegistry",
    "TrackingPhase",
    "TrackingSnapshot",
    "TrackingState",
    "create_tracker_registry",
]
