"""Simulated driver movement for the rider's map.

There is no live telemetry behind this: the tracker synthesizes a plausible
path and walks a fake driver along it so the UI can show a moving marker,
an ETA and the remaining distance. Randomness is confined to one injectable
``random.Random`` so runs are reproducible under a seed.
"""

import asyncio
import contextlib
import logging
import math
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from ridematch.core.exceptions import InvalidCoordinate
from ridematch.geo.coordinate import Coordinate
from ridematch.geo.distance import haversine_distance_km
from ridematch.geo.polyline import interpolate_points, offset_point, segment_count
from ridematch.settings import TrackingSettings

logger = logging.getLogger(__name__)


class TrackingPhase(str, Enum):
    IDLE = "idle"
    TO_PICKUP = "to_pickup"
    TO_DESTINATION = "to_destination"


@dataclass
class TrackingState:
    phase: TrackingPhase = TrackingPhase.IDLE
    current_position: Coordinate | None = None
    route_points: list[Coordinate] = field(default_factory=list)
    current_index: int = 0
    eta_minutes: int = 0
    distance_remaining_km: float = 0.0
    is_moving: bool = False


class TrackingSnapshot(BaseModel):
    """Read-only view of a tracker handed to map renderers."""

    phase: TrackingPhase
    driver_location: tuple[float, float] | None = None
    eta_minutes: int = Field(ge=0)
    distance_remaining_km: float = Field(ge=0)
    is_moving: bool
    has_arrived: bool
    progress_percent: float = Field(ge=0, le=100)
    current_index: int = Field(ge=0)
    route_length: int = Field(ge=0)


class DriverTracker:
    """Animates a synthetic driver along a generated route, one leg at a time.

    Phases run idle -> to_pickup -> to_destination. Each running leg owns at
    most one asyncio task that calls ``tick()`` on a fixed interval. Starting a
    leg or resetting cancels the previous task before anything else changes,
    and a generation counter keeps a cancelled task from ticking if it was
    already past its sleep.

    Without a running event loop (or with ``autostart=False``) no task is
    created and the owner drives the animation by calling ``tick()``.
    """

    def __init__(
        self,
        settings: TrackingSettings | None = None,
        rng: random.Random | None = None,
        autostart: bool = True,
        on_update: Callable[[TrackingSnapshot], Any] | None = None,
        ride_id: str | None = None,
    ) -> None:
        self.settings = settings if settings is not None else TrackingSettings()
        self.autostart = autostart
        self.on_update = on_update
        self.ride_id = ride_id
        self._rng = rng if rng is not None else random.Random()
        self._state = TrackingState()
        self._pickup: Coordinate | None = None
        self._destination: Coordinate | None = None
        self._task: asyncio.Task[None] | None = None
        self._generation = 0

    @property
    def state(self) -> TrackingState:
        return self._state

    @property
    def phase(self) -> TrackingPhase:
        return self._state.phase

    @property
    def timer_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def ride_finished(self) -> bool:
        """True once the destination leg has reached its last point."""
        state = self._state
        return (
            state.phase == TrackingPhase.TO_DESTINATION
            and bool(state.route_points)
            and state.current_index >= len(state.route_points) - 1
            and not state.is_moving
        )

    def start_pickup_phase(self, pickup: Any, destination: Any = None) -> bool:
        """Begin the leg from a nearby synthetic start point to the pickup.

        Returns False, leaving the tracker idle, if pickup is missing or invalid.
        The destination is remembered for ``start_destination_phase``.
        """
        pickup_coord = self._coerce(pickup)
        if pickup_coord is None:
            self._go_idle("pickup missing or invalid")
            return False

        self._pickup = pickup_coord
        if destination is not None:
            self._destination = self._coerce(destination)

        start = offset_point(pickup_coord, self.settings.start_offset_degrees, self._rng)
        self._begin_phase(TrackingPhase.TO_PICKUP, start, pickup_coord)
        return True

    def start_destination_phase(self, pickup: Any = None, destination: Any = None) -> bool:
        """Begin the leg from pickup to destination once pickup is confirmed."""
        if pickup is not None:
            self._pickup = self._coerce(pickup)
        if destination is not None:
            self._destination = self._coerce(destination)

        if self._pickup is None or self._destination is None:
            self._go_idle("pickup or destination missing or invalid")
            return False

        self._begin_phase(TrackingPhase.TO_DESTINATION, self._pickup, self._destination)
        return True

    def tick(self) -> bool:
        """Advance the driver one route point. Returns False when nothing moved."""
        state = self._state
        if not state.is_moving or not state.route_points:
            return False

        last_index = len(state.route_points) - 1
        next_index = min(state.current_index + 1, last_index)
        state.current_index = next_index
        state.current_position = state.route_points[next_index]

        if next_index == last_index:
            state.is_moving = False
            state.eta_minutes = 0
            state.distance_remaining_km = 0.0
            logger.info(f"Driver reached end of {state.phase.value} leg (ride={self.ride_id})")
        else:
            end = state.route_points[last_index]
            remaining = haversine_distance_km(
                state.current_position.lat, state.current_position.lng, end.lat, end.lng
            )
            state.distance_remaining_km = remaining
            state.eta_minutes = max(1, self._eta_minutes(remaining))

        self._notify()
        return True

    def reset_tracking(self) -> None:
        """Drop any route and timer and return to idle. Safe to call at any time."""
        self._cancel_timer()
        self._state = TrackingState()
        self._notify()

    async def aclose(self) -> None:
        """Cancel the running timer and wait for it to finish."""
        task = self._task
        self._cancel_timer()
        if task is not None and task is not asyncio.current_task():
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def snapshot(self) -> TrackingSnapshot:
        state = self._state
        route_length = len(state.route_points)
        if route_length > 1:
            progress = state.current_index / (route_length - 1) * 100
        else:
            progress = 100.0 if route_length == 1 else 0.0

        return TrackingSnapshot(
            phase=state.phase,
            driver_location=state.current_position.as_tuple() if state.current_position else None,
            eta_minutes=state.eta_minutes,
            distance_remaining_km=math.floor(state.distance_remaining_km * 10 + 0.5) / 10,
            is_moving=state.is_moving,
            has_arrived=(
                route_length > 0
                and state.current_index >= route_length - 1
                and not state.is_moving
            ),
            progress_percent=progress,
            current_index=state.current_index,
            route_length=route_length,
        )

    def _begin_phase(self, phase: TrackingPhase, start: Coordinate, end: Coordinate) -> None:
        self._cancel_timer()

        distance_km = haversine_distance_km(start.lat, start.lng, end.lat, end.lng)
        segments = segment_count(
            distance_km, self.settings.min_route_segments, self.settings.segments_per_km
        )
        route = interpolate_points(
            start, end, segments, self._rng, self.settings.lateral_noise_degrees
        )

        self._state = TrackingState(
            phase=phase,
            current_position=start,
            route_points=route,
            current_index=0,
            eta_minutes=self._eta_minutes(distance_km),
            distance_remaining_km=distance_km,
            is_moving=True,
        )
        logger.info(
            f"Tracking {phase.value} started: {distance_km:.2f} km over {len(route)} points "
            f"(ride={self.ride_id})"
        )
        self._notify()

        if self.autostart:
            self._install_timer()

    def _install_timer(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; tracker advances only on explicit tick()")
            return
        self._task = loop.create_task(self._tick_loop(self._generation))

    def _cancel_timer(self) -> None:
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _tick_loop(self, generation: int) -> None:
        while True:
            await asyncio.sleep(self.settings.tick_interval_seconds)
            if generation != self._generation:
                return
            self.tick()
            if not self._state.is_moving:
                break
        if generation == self._generation:
            self._task = None

    def _go_idle(self, reason: str) -> None:
        logger.warning(f"Tracker staying idle: {reason} (ride={self.ride_id})")
        self.reset_tracking()

    def _eta_minutes(self, distance_km: float) -> int:
        return math.ceil(distance_km / self.settings.average_speed_kmh * 60)

    def _notify(self) -> None:
        if self.on_update is None:
            return
        try:
            self.on_update(self.snapshot())
        except Exception:
            logger.exception("Tracking update listener failed")

    @staticmethod
    def _coerce(value: Any) -> Coordinate | None:
        if value is None:
            return None
        try:
            return Coordinate.parse(value)
        except InvalidCoordinate:
            return None
