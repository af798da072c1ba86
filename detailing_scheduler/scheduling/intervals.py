"""
Half-open time intervals within a single shop day.

All values are minutes since midnight; ``end`` is exclusive, so a job
ending at 10:00 and another starting at 10:00 never overlap.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Optional

from detailing_scheduler.schemas.booking_schema import Booking
from detailing_scheduler.schemas.settings_schema import ShopSettings


@dataclass(frozen=True, order=True)
class Interval:
    """Occupied or candidate time window ``[start, end)``."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Interval ends before it starts: [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        return self.end - self.start

    def contains(self, other: "Interval") -> bool:
        return self.start <= other.start and other.end <= self.end


def overlaps(a: Interval, b: Interval) -> bool:
    """Half-open overlap test; touching endpoints do not overlap."""
    return a.start < b.end and b.start < a.end


def working_window(settings: ShopSettings) -> Interval:
    return Interval(settings.open_time, settings.close_time)


def break_intervals(settings: ShopSettings) -> list[Interval]:
    return [Interval(b.start, b.end) for b in settings.breaks]


def free_minutes(settings: ShopSettings) -> int:
    """Minutes of the working window not covered by any break."""
    window = working_window(settings)
    covered = 0
    cursor = window.start
    for brk in sorted(break_intervals(settings)):
        start = max(brk.start, cursor)
        end = min(brk.end, window.end)
        if end > start:
            covered += end - start
            cursor = end
    return window.length - covered


def booking_interval(booking: Booking, padding: int = 0) -> Interval:
    """Occupied interval of a booking, optionally padded for turnaround."""
    return Interval(booking.start_time, booking.end_time + padding)


def occupied_by_category(
    bookings: Iterable[Booking], padding: int = 0
) -> dict[str, list[Interval]]:
    """Group occupied intervals by category, each list sorted by start."""
    grouped: dict[str, list[Interval]] = defaultdict(list)
    for booking in bookings:
        grouped[booking.category].append(booking_interval(booking, padding))
    for intervals in grouped.values():
        intervals.sort()
    return dict(grouped)


def saturation(
    candidate: Interval, occupied: Iterable[Interval], capacity: int = 1
) -> Optional[list[Interval]]:
    """
    Find the first instant inside ``candidate`` where ``capacity``
    occupied intervals are active at once.

    Returns the intervals holding the resource at that instant, or
    ``None`` when the candidate never exhausts capacity. Concurrency can
    only rise at an interval start, so those are the only instants that
    need checking.
    """
    clashing = [iv for iv in occupied if overlaps(candidate, iv)]
    if len(clashing) < capacity:
        return None
    for instant in sorted({max(iv.start, candidate.start) for iv in clashing}):
        active = [iv for iv in clashing if iv.start <= instant < iv.end]
        if len(active) >= capacity:
            return active
    return None
