import dataclasses
import itertools
import threading
from collections.abc import Sequence
from dataclasses import dataclass

import h3

from ridematch.core.exceptions import NoCandidatesAvailable
from ridematch.geo.coordinate import Coordinate
from ridematch.geo.distance import haversine_distance_m
from ridematch.matching.candidates import Candidate, NearestMatch

# Fraction of the average edge length that is safe to assume as the width of
# every ring, covering H3 cell size variation within one resolution.
_RING_WIDTH_FACTOR = 0.5


@dataclass
class _Entry:
    candidate: Candidate
    cell: str


class DriverGeospatialIndex:
    """Spatial index for candidate locations using H3 hexagonal cells.

    Answers the same question as ``LinearScanSearch``: rings around the query
    cell are searched outward until the rings already covered are provably
    wider than the best distance found, so the result is the exact nearest
    active candidate. Equal distances resolve to the earliest inserted one.

    Entries are keyed by insertion sequence. A pool passed to ``load`` or
    ``find_nearest`` may repeat an id and every occurrence is searched, as a
    linear scan would. ``add`` with a known id replaces all of its entries.
    """

    def __init__(self, h3_resolution: int = 9, max_k: int = 32):
        self._h3_resolution = h3_resolution
        self._max_k = max_k
        self._ring_width_m = (
            h3.average_hexagon_edge_length(h3_resolution, unit="m") * _RING_WIDTH_FACTOR
        )
        self._h3_cells: dict[str, set[int]] = {}
        self._entries: dict[int, _Entry] = {}
        self._seqs_by_id: dict[str, list[int]] = {}
        self._seq = itertools.count()
        self._lock = threading.Lock()  # Thread safety for concurrent access

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, candidate: Candidate) -> None:
        with self._lock:
            self._add_locked(candidate)

    def update_location(self, candidate_id: str, coordinate: Coordinate) -> None:
        with self._lock:
            new_cell = self._get_h3_cell(coordinate)
            for seq in self._seqs_by_id.get(candidate_id, ()):
                entry = self._entries[seq]
                if entry.cell != new_cell:
                    self._discard_from_cell(entry.cell, seq)
                    self._h3_cells.setdefault(new_cell, set()).add(seq)
                    entry.cell = new_cell
                entry.candidate = dataclasses.replace(entry.candidate, coordinate=coordinate)

    def set_active(self, candidate_id: str, active: bool) -> None:
        with self._lock:
            for seq in self._seqs_by_id.get(candidate_id, ()):
                entry = self._entries[seq]
                entry.candidate = dataclasses.replace(entry.candidate, active=active)

    def remove(self, candidate_id: str) -> None:
        with self._lock:
            self._remove_locked(candidate_id)

    def clear(self) -> None:
        with self._lock:
            self._load_locked(())

    def cell_of(self, candidate_id: str) -> str | None:
        """H3 cell holding ``candidate_id``, or None when it is not indexed."""
        with self._lock:
            seqs = self._seqs_by_id.get(candidate_id)
            return self._entries[seqs[0]].cell if seqs else None

    def ids_in_cell(self, cell: str) -> set[str]:
        with self._lock:
            return {self._entries[seq].candidate.id for seq in self._h3_cells.get(cell, ())}

    def load(self, candidates: Sequence[Candidate]) -> None:
        """Replace the index contents, keeping the order of ``candidates``."""
        with self._lock:
            self._load_locked(candidates)

    def find_nearest(self, query: Coordinate, candidates: Sequence[Candidate]) -> NearestMatch:
        """Load ``candidates`` and query them in one step, under a single lock."""
        query = Coordinate.parse(query)
        with self._lock:
            self._load_locked(candidates)
            return self._nearest_locked(query)

    def nearest(self, query: Coordinate) -> NearestMatch:
        query = Coordinate.parse(query)
        with self._lock:
            return self._nearest_locked(query)

    def _nearest_locked(self, query: Coordinate) -> NearestMatch:
        if not any(e.candidate.active for e in self._entries.values()):
            raise self._no_candidates()

        center_cell = self._get_h3_cell(query)
        best: tuple[float, int, Candidate] | None = None
        checked_cells: set[str] = set()

        # Progressive ring expansion: start small, double outward only if needed
        k = 1
        while k <= self._max_k:
            ring_cells = set(h3.grid_disk(center_cell, k))
            for cell in ring_cells - checked_cells:
                for seq in self._h3_cells.get(cell, ()):
                    best = self._better(query, seq, self._entries[seq], best)
            checked_cells |= ring_cells

            # Anything outside the disk lies at least (k - 1) ring widths away
            if best is not None and best[0] < (k - 1) * self._ring_width_m:
                return NearestMatch(candidate=best[2], distance_m=best[0])
            k *= 2

        # Sparse pool or huge distances: fall back to a full scan
        for seq, entry in self._entries.items():
            best = self._better(query, seq, entry, best)
        if best is None:
            raise self._no_candidates()
        return NearestMatch(candidate=best[2], distance_m=best[0])

    def _no_candidates(self) -> NoCandidatesAvailable:
        return NoCandidatesAvailable(
            "No active candidates available",
            details={"candidates": len(self._entries)},
        )

    @staticmethod
    def _better(
        query: Coordinate,
        seq: int,
        entry: _Entry,
        best: tuple[float, int, Candidate] | None,
    ) -> tuple[float, int, Candidate] | None:
        candidate = entry.candidate
        if not candidate.active:
            return best
        d = haversine_distance_m(
            query.lat, query.lng, candidate.coordinate.lat, candidate.coordinate.lng
        )
        if best is None or (d, seq) < (best[0], best[1]):
            return d, seq, candidate
        return best

    def _load_locked(self, candidates: Sequence[Candidate]) -> None:
        self._h3_cells.clear()
        self._entries.clear()
        self._seqs_by_id.clear()
        self._seq = itertools.count()
        for candidate in candidates:
            self._insert_locked(candidate, next(self._seq))

    def _add_locked(self, candidate: Candidate) -> None:
        seqs = self._seqs_by_id.get(candidate.id)
        seq = seqs[0] if seqs else next(self._seq)
        self._remove_locked(candidate.id)
        self._insert_locked(candidate, seq)

    def _insert_locked(self, candidate: Candidate, seq: int) -> None:
        cell = self._get_h3_cell(candidate.coordinate)
        self._entries[seq] = _Entry(candidate=candidate, cell=cell)
        self._h3_cells.setdefault(cell, set()).add(seq)
        self._seqs_by_id.setdefault(candidate.id, []).append(seq)

    def _remove_locked(self, candidate_id: str) -> None:
        for seq in self._seqs_by_id.pop(candidate_id, ()):
            entry = self._entries.pop(seq)
            self._discard_from_cell(entry.cell, seq)

    def _discard_from_cell(self, cell: str, seq: int) -> None:
        if cell in self._h3_cells:
            self._h3_cells[cell].discard(seq)
            if not self._h3_cells[cell]:
                del self._h3_cells[cell]

    def _get_h3_cell(self, coordinate: Coordinate) -> str:
        return h3.latlng_to_cell(coordinate.lat, coordinate.lng, self._h3_resolution)
