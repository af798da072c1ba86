"""Exceptions raised by the scheduling engine and its adapters.

An empty slot list is never an error; "no availability" is a normal
answer. These exceptions cover the cases where no answer can be given.
"""

from typing import Optional


class SchedulingError(Exception):
    """Base class for scheduling failures."""


class InvalidRequestError(SchedulingError, ValueError):
    """Raised before any scan when the query inputs are malformed."""


class AvailabilityUnknownError(SchedulingError):
    """Raised when settings or bookings could not be read.

    Callers must show "could not compute availability" and offer a
    retry, never an empty grid that looks fully booked.
    """


class BookingConflictError(SchedulingError):
    """Raised by a repository refusing a write that would overbook a category."""

    def __init__(self, message: str, blocked_until: Optional[int] = None) -> None:
        super().__init__(message)
        self.blocked_until = blocked_until
