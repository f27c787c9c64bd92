"""Polling endpoints for the simulated driver position of a ride.

Handlers are async so tracker timers are created on the server's event loop.
"""

from fastapi import APIRouter, Depends, HTTPException

from ridematch.api.auth import verify_api_key
from ridematch.api.dependencies import TrackerRegistryDep
from ridematch.api.models import TrackingStartRequest
from ridematch.ride_logging import log_ride_context
from ridematch.tracking.registry import TrackerRegistry
from ridematch.tracking.tracker import DriverTracker, TrackingSnapshot

router = APIRouter(prefix="/rides/{ride_id}/tracking", dependencies=[Depends(verify_api_key)])


def _existing(registry: TrackerRegistry, ride_id: str) -> DriverTracker:
    tracker = registry.get(ride_id)
    if tracker is None:
        raise HTTPException(status_code=404, detail=f"No tracking for ride {ride_id}")
    return tracker


@router.post("/pickup", response_model=TrackingSnapshot)
async def start_pickup_leg(
    ride_id: str, body: TrackingStartRequest, registry: TrackerRegistryDep
) -> TrackingSnapshot:
    tracker = registry.get_or_create(ride_id)
    with log_ride_context(ride_id):
        tracker.start_pickup_phase(
            body.pickup.model_dump() if body.pickup else None,
            body.destination.model_dump() if body.destination else None,
        )
    return tracker.snapshot()


@router.post("/destination", response_model=TrackingSnapshot)
async def start_destination_leg(
    ride_id: str, body: TrackingStartRequest, registry: TrackerRegistryDep
) -> TrackingSnapshot:
    tracker = _existing(registry, ride_id)
    with log_ride_context(ride_id):
        tracker.start_destination_phase(
            body.pickup.model_dump() if body.pickup else None,
            body.destination.model_dump() if body.destination else None,
        )
    return tracker.snapshot()


@router.get("", response_model=TrackingSnapshot)
async def get_tracking(ride_id: str, registry: TrackerRegistryDep) -> TrackingSnapshot:
    return _existing(registry, ride_id).snapshot()


@router.delete("", status_code=204)
async def reset_tracking(ride_id: str, registry: TrackerRegistryDep) -> None:
    if not registry.discard(ride_id):
        raise HTTPException(status_code=404, detail=f"No tracking for ride {ride_id}")
