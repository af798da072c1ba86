"""
Dynamic availability engine.

Scans one shop day at a fixed granularity and decides, for each
candidate start time, whether a job of the requested duration can run
there continuously. The granularity only decides which instants are
offered as buttons; every offered instant is validated over its full
duration.

Reasons are reported in this order, first match wins:
  break   -> the candidate touches a break window
  booked  -> same-category occupancy is already at capacity inside it
  passed  -> today only, the start is behind the clock minus the grace window

Bookings of a different category never block a candidate.

Usage:
    slots = compute_availability(
        "2026-10-20",
        ServiceRequest(duration_minutes=30, category="wash"),
        ShopSettings(open_time="09:00", close_time="18:00"),
        bookings=[],
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Iterable, Optional, Union

from pydantic import ValidationError

from detailing_scheduler.logging_context import get_query_logger
from detailing_scheduler.scheduling.errors import AvailabilityUnknownError, InvalidRequestError
from detailing_scheduler.scheduling.intervals import (
    Interval,
    break_intervals,
    free_minutes,
    occupied_by_category,
    overlaps,
    saturation,
    working_window,
)
from detailing_scheduler.schemas.booking_schema import Booking, ServiceRequest, Slot, SlotReason
from detailing_scheduler.schemas.settings_schema import ShopSettings
from detailing_scheduler.utils import (
    MINUTES_PER_DAY,
    format_time_12h,
    minutes_to_time,
    parse_date,
    time_to_minutes,
)

if TYPE_CHECKING:
    from detailing_scheduler.tools.booking_repository import BookingRepository

logger = get_query_logger(__name__)


@dataclass(frozen=True)
class _DayContext:
    """Everything the per-slot check needs, computed once per query."""

    window: Interval
    breaks: list[Interval]
    occupied: list[Interval]
    capacity: int
    duration: int
    required: int
    past_cutoff: Optional[int]
    hide_past: bool


def _validate_request(target_date, request) -> tuple[date, ServiceRequest]:
    try:
        day = parse_date(target_date)
    except ValueError as exc:
        raise InvalidRequestError(str(exc)) from None

    if isinstance(request, dict):
        try:
            request = ServiceRequest.model_validate(request)
        except ValidationError as exc:
            raise InvalidRequestError(f"Invalid service request: {exc}") from exc
    elif not isinstance(request, ServiceRequest):
        raise InvalidRequestError(f"Expected a ServiceRequest, got {type(request).__name__}")

    duration = request.duration_minutes
    if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
        raise InvalidRequestError(f"Duration must be a positive number of minutes, got {duration!r}")
    return day, request


def _coerce_bookings(bookings: Iterable) -> list[Booking]:
    coerced = []
    for item in bookings:
        if isinstance(item, Booking):
            coerced.append(item)
            continue
        try:
            coerced.append(Booking.model_validate(item))
        except ValidationError as exc:
            raise InvalidRequestError(f"Invalid booking record: {exc}") from exc
    return coerced


def _load_bookings(
    day: date,
    bookings: Optional[Iterable],
    repository: Optional[BookingRepository],
) -> list[Booking]:
    """Return the day's active bookings, reading the repository only if needed."""
    if bookings is None:
        if repository is None:
            raise InvalidRequestError("Either bookings or a booking repository must be supplied")
        try:
            bookings = repository.list_bookings_for_date(day)
        except Exception as exc:
            logger.error("Booking lookup failed for %s: %s", day.isoformat(), exc)
            raise AvailabilityUnknownError(
                f"Could not load bookings for {day.isoformat()}"
            ) from exc

    active = [b for b in _coerce_bookings(bookings) if b.is_active]
    for booking in active:
        logger.debug(
            "  - %s | %d min | %s | %s",
            minutes_to_time(booking.start_time),
            booking.duration_minutes,
            booking.category,
            booking.service_name or booking.id,
        )
    return active


def _build_context(
    day: date,
    request: ServiceRequest,
    settings: ShopSettings,
    bookings: list[Booking],
    include_past: bool,
    now: Optional[datetime],
) -> _DayContext:
    padding = settings.turnaround_buffer_minutes
    occupied = occupied_by_category(bookings, padding).get(request.category, [])

    now = now or datetime.now()
    past_cutoff = None
    if day == now.date():
        past_cutoff = now.hour * 60 + now.minute - settings.past_grace_minutes

    return _DayContext(
        window=working_window(settings),
        breaks=break_intervals(settings),
        occupied=occupied,
        capacity=settings.category_capacity,
        duration=request.duration_minutes,
        required=request.duration_minutes + padding,
        past_cutoff=past_cutoff,
        hide_past=not include_past,
    )


def _label(minutes: int) -> str:
    return minutes_to_time(min(minutes, MINUTES_PER_DAY))


def _evaluate(start: int, ctx: _DayContext, check_hours: bool = False) -> Slot:
    """Decide availability of a single start time."""
    candidate = Interval(start, start + ctx.required)
    reason: Optional[SlotReason] = None
    blocked_until: Optional[int] = None

    if check_hours:
        if not ctx.window.start <= start < ctx.window.end:
            reason = SlotReason.OUTSIDE_HOURS
        elif candidate.end > ctx.window.end:
            reason = SlotReason.INSUFFICIENT_TIME

    if reason is None and any(overlaps(candidate, brk) for brk in ctx.breaks):
        reason = SlotReason.BREAK

    if reason is None:
        holders = saturation(candidate, ctx.occupied, ctx.capacity)
        if holders:
            reason = SlotReason.BOOKED
            blocked_until = min(iv.end for iv in holders)

    passed = ctx.past_cutoff is not None and start < ctx.past_cutoff
    if reason is None and passed and ctx.hide_past:
        reason = SlotReason.PASSED

    time_str = minutes_to_time(start)
    return Slot(
        time=time_str,
        display=format_time_12h(time_str),
        available=reason is None,
        reason=reason,
        blocked_until=_label(blocked_until) if blocked_until is not None else None,
        end_time=_label(start + ctx.duration),
        passed=passed,
    )


def compute_availability(
    target_date: Union[str, date],
    request: Union[ServiceRequest, dict],
    settings: ShopSettings,
    bookings: Optional[Iterable[Booking]] = None,
    include_past: bool = False,
    *,
    repository: Optional[BookingRepository] = None,
    now: Optional[datetime] = None,
) -> list[Slot]:
    """
    Compute the labelled start times for ``request`` on ``target_date``.

    ``bookings`` is authoritative for the date when given; otherwise the
    repository is read. Cancelled, deleted, and archived bookings are
    ignored either way. With ``include_past`` the elapsed slots of today
    are kept selectable and only flagged ``passed`` for display.

    Returns slots in ascending time order. An empty list means the
    service cannot fit on this day at all.

    Raises:
        InvalidRequestError: malformed date, request, or booking records.
        AvailabilityUnknownError: the repository could not be read.
    """
    day, request = _validate_request(target_date, request)

    if day.weekday() not in settings.working_days:
        logger.info("%s is not a working day; no slots", day.isoformat())
        return []

    required = request.duration_minutes + settings.turnaround_buffer_minutes
    free = free_minutes(settings)
    if required > free:
        logger.info("%d min does not fit in the %d free minutes of %s", required, free, day.isoformat())
        return []

    logger.debug(
        "Availability for %s | %s | %d min | %s",
        day.isoformat(),
        request.name or "service",
        request.duration_minutes,
        request.category,
    )
    active = _load_bookings(day, bookings, repository)
    ctx = _build_context(day, request, settings, active, include_past, now)

    last_start = settings.close_time - ctx.required
    slots = [
        _evaluate(start, ctx)
        for start in range(settings.open_time, last_start + 1, settings.slot_granularity_minutes)
    ]

    logger.debug(
        "Checked %d start times | available: %d",
        len(slots),
        sum(1 for s in slots if s.available),
    )
    return slots


def validate_start_time(
    target_date: Union[str, date],
    start_time: Union[str, int],
    request: Union[ServiceRequest, dict],
    settings: ShopSettings,
    bookings: Optional[Iterable[Booking]] = None,
    *,
    repository: Optional[BookingRepository] = None,
    now: Optional[datetime] = None,
) -> Slot:
    """
    Final check of one chosen start time before a booking is saved.

    Uses the same rules as ``compute_availability`` and additionally
    reports start times outside business hours or too close to closing.
    Elapsed times are always rejected.
    """
    day, request = _validate_request(target_date, request)
    if isinstance(start_time, str):
        try:
            start = time_to_minutes(start_time)
        except ValueError:
            raise InvalidRequestError(f"Invalid start time: {start_time!r}") from None
    elif isinstance(start_time, int) and not isinstance(start_time, bool):
        start = start_time
    else:
        raise InvalidRequestError(f"Start time must be 'HH:MM' or whole minutes, got {start_time!r}")
    if not 0 <= start < MINUTES_PER_DAY:
        raise InvalidRequestError(f"Invalid start time: {start_time!r}")

    active = _load_bookings(day, bookings, repository)
    ctx = _build_context(day, request, settings, active, False, now)

    if day.weekday() not in settings.working_days:
        time_str = minutes_to_time(start)
        return Slot(
            time=time_str,
            display=format_time_12h(time_str),
            available=False,
            reason=SlotReason.OUTSIDE_HOURS,
            end_time=_label(start + ctx.duration),
        )
    return _evaluate(start, ctx, check_hours=True)
