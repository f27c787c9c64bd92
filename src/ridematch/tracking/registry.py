import logging
import time
from collections import OrderedDict
from collections.abc import Callable

from ridematch.settings import TrackingSettings
from ridematch.tracking.tracker import DriverTracker

logger = logging.getLogger(__name__)


class TrackerRegistry:
    """One tracker per ride, so no animation state is shared between rides.

    The registry is bounded. Rides whose destination leg has finished are
    dropped once they have been finished for ``finished_ttl_seconds``, and
    when more than ``max_rides`` are held the least recently used is evicted.

    Intended for use from a single event loop; it holds no lock.
    """

    def __init__(
        self,
        factory: Callable[[str], DriverTracker] | None = None,
        max_rides: int = 1000,
        finished_ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_rides < 1:
            raise ValueError("max_rides must be at least 1")
        if factory is None:
            factory = _default_factory
        self._factory = factory
        self.max_rides = max_rides
        self.finished_ttl_seconds = finished_ttl_seconds
        self._clock = clock
        self._trackers: OrderedDict[str, DriverTracker] = OrderedDict()
        self._finished_since: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._trackers)

    def __contains__(self, ride_id: object) -> bool:
        return ride_id in self._trackers

    def get(self, ride_id: str) -> DriverTracker | None:
        tracker = self._trackers.get(ride_id)
        if tracker is not None:
            self._trackers.move_to_end(ride_id)
        return tracker

    def get_or_create(self, ride_id: str) -> DriverTracker:
        self.prune()
        tracker = self._trackers.get(ride_id)
        if tracker is None:
            tracker = self._factory(ride_id)
            self._trackers[ride_id] = tracker
            self._evict_over_capacity()
        self._trackers.move_to_end(ride_id)
        return tracker

    def prune(self) -> int:
        """Drop rides that finished at least ``finished_ttl_seconds`` ago.

        A ride counts as finished from the first prune that sees it finished.
        Returns the number of trackers dropped.
        """
        now = self._clock()
        expired = []
        for ride_id, tracker in self._trackers.items():
            if not tracker.ride_finished:
                self._finished_since.pop(ride_id, None)
                continue
            since = self._finished_since.setdefault(ride_id, now)
            if now - since >= self.finished_ttl_seconds:
                expired.append(ride_id)

        for ride_id in expired:
            self._drop(ride_id)
        if expired:
            logger.info(f"Dropped {len(expired)} finished ride tracker(s)")
        return len(expired)

    def discard(self, ride_id: str) -> bool:
        """Reset and forget a ride's tracker. Returns False if it was unknown."""
        return self._drop(ride_id)

    def clear(self) -> None:
        """Reset every tracker, e.g. on shutdown."""
        for tracker in self._trackers.values():
            tracker.reset_tracking()
        self._trackers.clear()
        self._finished_since.clear()

    def _evict_over_capacity(self) -> None:
        while len(self._trackers) > self.max_rides:
            ride_id = next(iter(self._trackers))
            self._drop(ride_id)
            logger.warning(f"Tracker capacity {self.max_rides} reached; evicted ride {ride_id}")

    def _drop(self, ride_id: str) -> bool:
        self._finished_since.pop(ride_id, None)
        tracker = self._trackers.pop(ride_id, None)
        if tracker is None:
            return False
        tracker.reset_tracking()
        return True


def _default_factory(ride_id: str) -> DriverTracker:
    return DriverTracker(ride_id=ride_id)


def create_tracker_registry(settings: TrackingSettings) -> TrackerRegistry:
    return TrackerRegistry(
        lambda ride_id: DriverTracker(settings=settings, ride_id=ride_id),
        max_rides=settings.max_tracked_rides,
        finished_ttl_seconds=settings.finished_ride_ttl_seconds,
    )
