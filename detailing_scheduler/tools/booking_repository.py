"""
Booking storage adapter.

In production this queries the ``bookings`` collection of the document
store. The in-memory adapter keeps raw documents so legacy records
(missing durations, old field names) go through the same normalization
a real store would need.

The availability engine only ever reads through ``list_bookings_for_date``.
Rejecting a second write that overbooks a category is this layer's job:
the engine's answer is advisory and can be stale by the time a booking
is saved.
"""

import logging
import threading
from datetime import date
from typing import Any, Optional, Protocol, Union

from detailing_scheduler.config import settings
from detailing_scheduler.scheduling.errors import BookingConflictError
from detailing_scheduler.scheduling.intervals import booking_interval, saturation
from detailing_scheduler.schemas.booking_schema import Booking, BookingStatus
from detailing_scheduler.utils import minutes_to_time, parse_date

logger = logging.getLogger(__name__)


class BookingRepository(Protocol):
    """Read contract the availability engine depends on."""

    def list_bookings_for_date(self, booking_date: date) -> list[Booking]:
        ...


def normalize_record(
    doc_id: str,
    data: dict[str, Any],
    default_duration: Optional[int] = None,
    default_category: Optional[str] = None,
) -> Booking:
    """Build a Booking from a stored document, filling legacy gaps.

    Older records store the duration as ``serviceDuration`` or
    ``duration`` (or not at all) and the category as ``serviceCategory``.
    """
    if default_duration is None:
        default_duration = settings.booking.legacy_duration_minutes
    if default_category is None:
        default_category = settings.booking.default_category

    duration = (
        data.get("serviceDuration")
        or data.get("durationMinutes")
        or data.get("duration")
        or default_duration
    )
    raw_status = data.get("status") or BookingStatus.CONFIRMED.value
    try:
        status = BookingStatus(raw_status)
    except ValueError:
        logger.warning("Booking %s has unknown status %r; treating as confirmed", doc_id, raw_status)
        status = BookingStatus.CONFIRMED

    return Booking(
        id=doc_id,
        booking_date=data["bookingDate"],
        start_time=data["startTime"],
        duration_minutes=int(duration),
        category=data.get("serviceCategory") or data.get("category") or default_category,
        status=status,
        service_name=data.get("serviceName") or "",
        is_walk_in=bool(data.get("isWalkIn", False)),
    )


class InMemoryBookingRepository:
    """Thread-safe booking store keyed by booking ID."""

    def __init__(
        self,
        default_duration: Optional[int] = None,
        default_category: Optional[str] = None,
    ) -> None:
        self._documents: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()
        self._default_duration = default_duration
        self._default_category = default_category

    def _normalize(self, doc_id: str, data: dict[str, Any]) -> Booking:
        return normalize_record(doc_id, data, self._default_duration, self._default_category)

    def _active_on(self, day: date, documents: list[tuple[str, dict[str, Any]]]) -> list[Booking]:
        """Active bookings on ``day``; records that cannot be read are skipped."""
        bookings = []
        for doc_id, data in documents:
            try:
                booking = self._normalize(doc_id, data)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping unreadable booking record %s: %s", doc_id, exc)
                continue
            if booking.booking_date == day and booking.is_active:
                bookings.append(booking)
        return bookings

    def add_record(self, doc_id: str, data: dict[str, Any]) -> None:
        """Store a raw document as-is, e.g. a legacy record being imported."""
        with self._lock:
            self._documents[doc_id] = dict(data)

    def list_bookings_for_date(self, booking_date: Union[str, date]) -> list[Booking]:
        """Active bookings on ``booking_date``, sorted by start time."""
        day = parse_date(booking_date)
        with self._lock:
            documents = list(self._documents.items())
        bookings = self._active_on(day, documents)
        return sorted(bookings, key=lambda b: (b.start_time, b.id))

    def create_booking(
        self,
        booking: Booking,
        capacity: Optional[int] = None,
        padding: int = 0,
    ) -> Booking:
        """
        Atomically check and insert a booking.

        Raises BookingConflictError when the new booking would put more
        than ``capacity`` same-category jobs on the floor at once.
        """
        if capacity is None:
            capacity = settings.shop.category_capacity

        with self._lock:
            if booking.id in self._documents:
                raise BookingConflictError(f"Booking {booking.id} already exists")

            same_category = [
                booking_interval(existing, padding)
                for existing in self._active_on(booking.booking_date, list(self._documents.items()))
                if existing.category == booking.category
            ]
            holders = saturation(booking_interval(booking, padding), same_category, capacity)
            if holders:
                blocked_until = min(iv.end for iv in holders)
                logger.warning(
                    "Rejected booking %s: %s at %s overlaps existing %s work",
                    booking.id,
                    booking.booking_date.isoformat(),
                    minutes_to_time(booking.start_time),
                    booking.category,
                )
                raise BookingConflictError(
                    f"{booking.category} is fully booked at "
                    f"{minutes_to_time(booking.start_time)} on {booking.booking_date.isoformat()}",
                    blocked_until=blocked_until,
                )

            self._documents[booking.id] = booking.model_dump(by_alias=True, mode="json")

        logger.info(
            "Booking created: %s on %s at %s (%d min, %s)",
            booking.id,
            booking.booking_date.isoformat(),
            minutes_to_time(booking.start_time),
            booking.duration_minutes,
            booking.category,
        )
        return booking

    def cancel_booking(self, booking_id: str) -> bool:
        """Mark a booking cancelled. Returns False if it does not exist."""
        with self._lock:
            document = self._documents.get(booking_id)
            if document is None:
                return False
            document["status"] = BookingStatus.CANCELLED.value
        logger.info("Booking cancelled: %s", booking_id)
        return True

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        with self._lock:
            document = self._documents.get(booking_id)
        if document is None:
            return None
        return self._normalize(booking_id, document)

    def reset(self) -> None:
        """Clear all bookings. Used by test fixtures for isolation."""
        with self._lock:
            self._documents.clear()
