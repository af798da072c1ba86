"""
Availability lookup for the booking screen.

Resolves catalog services into one composite request, reads the shop's
settings, and runs the scheduling engine. Dependency failures surface as
AvailabilityUnknownError so the screen can offer a retry instead of
rendering a day that merely looks fully booked.
"""

from datetime import date, datetime
from typing import Optional, TypedDict, Union

from detailing_scheduler.logging_context import get_query_logger, query_scope
from detailing_scheduler.scheduling.engine import compute_availability
from detailing_scheduler.scheduling.errors import AvailabilityUnknownError, InvalidRequestError
from detailing_scheduler.scheduling.request_builder import build_service_request
from detailing_scheduler.schemas.booking_schema import Booking, Slot
from detailing_scheduler.tools.booking_repository import BookingRepository
from detailing_scheduler.tools.services import get_service, match_service
from detailing_scheduler.tools.settings_provider import SettingsProvider

logger = get_query_logger(__name__)


class AvailabilityResult(TypedDict):
    """Result from check_availability."""

    available: bool
    slots: list[Slot]
    next_available: Optional[str]
    message: str
    query_id: str


def resolve_services(service_ids: list[str]) -> list[dict]:
    """Look up catalog entries by ID or free-text alias, in order."""
    resolved = []
    unknown = []
    for raw in service_ids:
        service_id = match_service(raw)
        service = get_service(service_id) if service_id else None
        if service is None:
            unknown.append(raw)
        else:
            resolved.append(service)
    if unknown:
        raise InvalidRequestError(f"Unknown service(s): {', '.join(unknown)}")
    return resolved


def check_availability(
    shop_id: str,
    target_date: Union[str, date],
    service_ids: list[str],
    extra_minutes: int = 0,
    include_past: bool = False,
    *,
    settings_provider: SettingsProvider,
    repository: BookingRepository,
    bookings: Optional[list[Booking]] = None,
    now: Optional[datetime] = None,
) -> AvailabilityResult:
    """
    Compute bookable start times for one or more services on a date.

    Returns a structured dict with the full slot list (available and
    blocked) and the first available time, if any.
    """
    with query_scope() as query_id:
        services = resolve_services(service_ids)

        try:
            shop_settings = settings_provider.get_settings(shop_id)
        except Exception as exc:
            logger.error("Settings lookup failed for shop %s: %s", shop_id, exc)
            raise AvailabilityUnknownError(f"Could not load settings for shop {shop_id}") from exc

        request = build_service_request(
            services,
            extra_minutes=extra_minutes,
            buffer_minutes=shop_settings.multi_service_buffer_minutes,
        )
        slots = compute_availability(
            target_date,
            request,
            shop_settings,
            bookings=bookings,
            include_past=include_past,
            repository=repository,
            now=now,
        )

        open_slots = [s for s in slots if s.available]
        if open_slots:
            message = f"{len(open_slots)} start times available for {request.name}."
        elif slots:
            message = f"{request.name} is fully booked on {target_date}."
        else:
            message = f"No availability for {request.name} on {target_date}."
        logger.info(
            "%s: %d of %d start times available (%s, %d min)",
            target_date,
            len(open_slots),
            len(slots),
            request.category,
            request.duration_minutes,
        )

        return {
            "available": bool(open_slots),
            "slots": slots,
            "next_available": open_slots[0].time if open_slots else None,
            "message": message,
            "query_id": query_id,
        }
