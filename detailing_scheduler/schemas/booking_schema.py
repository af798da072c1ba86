"""Booking, service request, and slot data models."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel

from detailing_scheduler.utils import MINUTES_PER_DAY, minutes_to_time, time_to_minutes


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DELETED = "deleted"
    ARCHIVED = "archived"


INACTIVE_STATUSES = frozenset(
    {BookingStatus.CANCELLED, BookingStatus.DELETED, BookingStatus.ARCHIVED}
)


class SlotReason(str, Enum):
    """Why a scanned start time cannot be offered."""

    OUTSIDE_HOURS = "outside business hours"
    BREAK = "break"
    INSUFFICIENT_TIME = "insufficient continuous time"
    BOOKED = "booked"
    PASSED = "passed"


class Booking(BaseModel):
    """An existing booking as the scheduling engine sees it.

    ``duration_minutes`` is the effective occupancy, with any
    multi-service buffer and extra time already included.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    booking_date: date
    start_time: int
    duration_minutes: int = Field(gt=0)
    category: str = Field(min_length=1)
    status: BookingStatus = BookingStatus.CONFIRMED
    service_name: str = ""
    is_walk_in: bool = False

    @field_validator("start_time", mode="before")
    @classmethod
    def parse_start(cls, value):
        if isinstance(value, str):
            return time_to_minutes(value)
        return value

    @model_validator(mode="after")
    def check_same_day(self) -> "Booking":
        if not 0 <= self.start_time < MINUTES_PER_DAY:
            raise ValueError(f"Start time out of range: {self.start_time}")
        if self.end_time > MINUTES_PER_DAY:
            raise ValueError(
                f"Booking {self.id} runs past midnight "
                f"({minutes_to_time(self.start_time)} + {self.duration_minutes} min)"
            )
        return self

    @field_serializer("start_time")
    def serialize_start(self, value: int) -> str:
        return minutes_to_time(value)

    @property
    def end_time(self) -> int:
        return self.start_time + self.duration_minutes

    @property
    def is_active(self) -> bool:
        return self.status not in INACTIVE_STATUSES


class ServiceRequest(BaseModel):
    """What the caller wants a slot for: one duration and one category."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    duration_minutes: int = Field(gt=0, strict=True)
    category: str = Field(min_length=1)
    name: str = ""


class Slot(BaseModel):
    """One scanned start time, annotated with availability."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    time: str
    display: str
    available: bool
    reason: Optional[SlotReason] = None
    blocked_until: Optional[str] = None
    end_time: Optional[str] = None
    passed: bool = False
