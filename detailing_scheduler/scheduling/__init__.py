from detailing_scheduler.scheduling.engine import compute_availability, validate_start_time
from detailing_scheduler.scheduling.errors import (
    AvailabilityUnknownError,
    BookingConflictError,
    InvalidRequestError,
    SchedulingError,
)
from detailing_scheduler.scheduling.intervals import (
    Interval,
    break_intervals,
    overlaps,
    working_window,
)
from detailing_scheduler.scheduling.request_builder import build_service_request, prepare_booking

__all__ = [
    "compute_availability", "validate_start_time",
    "Interval", "overlaps", "working_window", "break_intervals",
    "build_service_request", "prepare_booking",
    "SchedulingError", "InvalidRequestError", "AvailabilityUnknownError", "BookingConflictError",
]
