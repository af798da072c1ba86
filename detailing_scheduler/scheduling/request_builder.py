"""
Composite service requests.

The engine only ever sees one ``{duration_minutes, category}`` pair. When
a customer picks several services for one visit, the durations are
summed here, the multi-service hand-off buffer is added, and the first
service's category represents the whole job.
"""

import logging
import uuid
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Optional, Union

from detailing_scheduler.config import settings
from detailing_scheduler.scheduling.errors import InvalidRequestError
from detailing_scheduler.schemas.booking_schema import Booking, BookingStatus, ServiceRequest
from detailing_scheduler.utils import time_to_minutes

logger = logging.getLogger(__name__)


def _service_duration(service: Mapping, fallback: int) -> int:
    raw = service.get("duration_minutes") or service.get("durationMinutes")
    try:
        duration = int(raw) if raw else fallback
    except (TypeError, ValueError):
        raise InvalidRequestError(
            f"Invalid duration for service {service.get('name', '?')}: {raw!r}"
        ) from None
    if duration <= 0:
        raise InvalidRequestError(
            f"Invalid duration for service {service.get('name', '?')}: {raw!r}"
        )
    return duration


def build_service_request(
    services: Sequence[Mapping],
    extra_minutes: int = 0,
    buffer_minutes: Optional[int] = None,
    default_duration: Optional[int] = None,
    default_category: Optional[str] = None,
) -> ServiceRequest:
    """
    Combine one or more catalog services into a single request.

    Total duration = sum of service durations
                     + buffer (only when more than one service)
                     + manually added extra time.
    """
    if not services:
        raise InvalidRequestError("At least one service is required")
    if extra_minutes < 0:
        raise InvalidRequestError(f"Extra time cannot be negative, got {extra_minutes}")

    if buffer_minutes is None:
        buffer_minutes = settings.booking.multi_service_buffer_minutes
    if default_duration is None:
        default_duration = settings.booking.legacy_duration_minutes
    if default_category is None:
        default_category = settings.booking.default_category

    base = sum(_service_duration(s, default_duration) for s in services)
    buffer = buffer_minutes if len(services) > 1 else 0
    total = base + buffer + extra_minutes

    request = ServiceRequest(
        duration_minutes=total,
        category=services[0].get("category") or default_category,
        name=" + ".join(s.get("name", "Service") for s in services),
    )
    logger.debug(
        "Composite request '%s': %d base + %d buffer + %d extra = %d min (%s)",
        request.name,
        base,
        buffer,
        extra_minutes,
        total,
        request.category,
    )
    return request


def prepare_booking(
    request: ServiceRequest,
    booking_date: Union[str, date],
    start_time: Union[str, int],
    booking_id: Optional[str] = None,
    status: BookingStatus = BookingStatus.CONFIRMED,
    is_walk_in: bool = False,
) -> Booking:
    """Turn a chosen slot into a booking record carrying scheduling fields."""
    start = time_to_minutes(start_time) if isinstance(start_time, str) else start_time
    return Booking(
        id=booking_id or f"BK-{uuid.uuid4().hex[:6].upper()}",
        booking_date=booking_date,
        start_time=start,
        duration_minutes=request.duration_minutes,
        category=request.category,
        status=status,
        service_name=request.name,
        is_walk_in=is_walk_in,
    )
