"""Average time between contacts, overall and per area.

Each person's timeline is replayed once through a two-state machine
(active / dropped). While active, consecutive in-window contact events form an
interval; intervals longer than ``min_gap_ms`` are recorded. A drop suppresses
events until the next reset, and a reset starts a fresh chain.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

import pandas as pd

from .errors import EC_WINDOW_INVALID, PipelineError
from .timeline import Person, TimelineEventKind

MIN_GAP_MS = 12 * 60 * 60 * 1000
MILLIS_IN_DAY = 24 * 60 * 60 * 1000

INTERVAL_COLUMNS = ("area", "person", "delta_ms")


def ms_to_days(value: Optional[float]) -> Optional[float]:
    return None if value is None else value / MILLIS_IN_DAY


@dataclass
class IntervalStats:
    """Result of one :meth:`StatsEngine.run` call.

    Means are ``None`` when no qualifying interval was recorded.
    """

    intervals: pd.DataFrame
    overall_mean_ms: Optional[float]
    area_means_ms: dict[str, Optional[float]] = field(default_factory=dict)

    @property
    def interval_count(self) -> int:
        return len(self.intervals)

    @property
    def overall_mean_days(self) -> Optional[float]:
        return ms_to_days(self.overall_mean_ms)

    def area_means_days(self) -> dict[str, Optional[float]]:
        return {area: ms_to_days(mean) for area, mean in self.area_means_ms.items()}

    def area_rows(self) -> list[tuple[str, Optional[float]]]:
        """``(area, mean days)`` pairs sorted by area name, for export."""
        return sorted(self.area_means_days().items())


class StatsEngine:
    def __init__(self, min_gap_ms: int = MIN_GAP_MS):
        self.min_gap_ms = min_gap_ms

    def person_intervals(self, person: Person, window_start: int, window_end: int) -> list[int]:
        """Replay one timeline and return the qualifying intervals in milliseconds."""

        deltas: list[int] = []
        dropped = False
        pivot: Optional[int] = None

        for entry in person.timeline:
            if entry.kind is TimelineEventKind.EVENT:
                if dropped:
                    continue
                if entry.time < window_start or entry.time > window_end:
                    continue
                if pivot is not None:
                    delta = entry.time - pivot
                    if delta > self.min_gap_ms:
                        deltas.append(delta)
                pivot = entry.time
            elif entry.kind is TimelineEventKind.DROP:
                dropped = True
            elif entry.kind is TimelineEventKind.RESET:
                dropped = False
                pivot = None
            # SACRAMENT entries do not affect the replay

        return deltas

    def run(self, people: Iterable[Person], window_start: int, window_end: int) -> IntervalStats:
        """Compute mean intervals over the inclusive ``[window_start, window_end]``.

        Args:
            people: People from any number of areas, timelines sorted by time.
            window_start: Window start, unix milliseconds.
            window_end: Window end, unix milliseconds.

        Returns:
            IntervalStats with every area seen in ``people`` as a key of
            ``area_means_ms``.

        Raises:
            PipelineError: ``window_start`` is after ``window_end``.
        """
        if window_start > window_end:
            raise PipelineError(
                EC_WINDOW_INVALID,
                f"window start {window_start} is after window end {window_end}",
            )

        areas: dict[str, None] = {}
        rows = []
        for person in people:
            areas.setdefault(person.area)
            for delta in self.person_intervals(person, window_start, window_end):
                rows.append({"area": person.area, "person": person.name, "delta_ms": delta})

        intervals = pd.DataFrame(rows, columns=list(INTERVAL_COLUMNS))
        if intervals.empty:
            return IntervalStats(
                intervals=intervals,
                overall_mean_ms=None,
                area_means_ms={area: None for area in areas},
            )

        deltas = intervals["delta_ms"].astype("int64")
        per_area = deltas.groupby(intervals["area"]).mean()
        area_means = {area: (float(per_area[area]) if area in per_area.index else None) for area in areas}
        return IntervalStats(
            intervals=intervals,
            overall_mean_ms=float(deltas.mean()),
            area_means_ms=area_means,
        )


def average_contact_time(
    people: Iterable[Person],
    window_start: int,
    window_end: int,
    *,
    min_gap_ms: int = MIN_GAP_MS,
) -> IntervalStats:
    return StatsEngine(min_gap_ms=min_gap_ms).run(people, window_start, window_end)
