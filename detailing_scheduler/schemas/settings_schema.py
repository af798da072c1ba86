"""Shop business-hour settings consumed by the scheduling engine."""

from typing import Annotated

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    FieldSerializationInfo,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from detailing_scheduler.config import settings
from detailing_scheduler.utils import MINUTES_PER_DAY, minutes_to_time, time_to_minutes

ALL_WEEKDAYS = [0, 1, 2, 3, 4, 5, 6]


def _coerce_clock(value):
    if isinstance(value, str):
        return time_to_minutes(value)
    return value


ClockMinutes = Annotated[int, BeforeValidator(_coerce_clock)]


def _document_day_to_weekday(day):
    """Sunday=0 document numbering to Python's Monday=0.

    Anything that is not a day number is passed through unchanged so the
    field validator reports it.
    """
    if isinstance(day, int) and not isinstance(day, bool) and 0 <= day <= 6:
        return (day - 1) % 7
    return day


class BreakWindow(BaseModel):
    """A window (e.g. lunch) during which no job may start or continue."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    start: ClockMinutes
    end: ClockMinutes
    label: str = ""

    @model_validator(mode="after")
    def check_bounds(self) -> "BreakWindow":
        if not 0 <= self.start < self.end <= MINUTES_PER_DAY:
            raise ValueError(
                f"Break must satisfy 00:00 <= start < end <= 24:00, "
                f"got {self.start}-{self.end}"
            )
        return self

    def __str__(self) -> str:
        return f"{minutes_to_time(self.start)}-{minutes_to_time(self.end)}"


class ShopSettings(BaseModel):
    """
    Per-shop scheduling configuration.

    Times are minute-of-day integers; "HH:MM" strings are accepted on
    input so settings documents can be validated as stored. Defaults
    come from the environment-backed config.

    ``working_days`` holds Python weekday numbers (Monday=0). Stored
    documents number days from Sunday=0, so the camelCase ``workingDays``
    key is converted on the way in and back again when dumping by alias.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    open_time: ClockMinutes = Field(default_factory=lambda: time_to_minutes(settings.shop.open_time))
    close_time: ClockMinutes = Field(default_factory=lambda: time_to_minutes(settings.shop.close_time))
    slot_granularity_minutes: int = Field(
        default_factory=lambda: settings.shop.slot_granularity_minutes, ge=1
    )
    breaks: list[BreakWindow] = Field(default_factory=list)
    category_capacity: int = Field(default_factory=lambda: settings.shop.category_capacity, ge=1)
    multi_service_buffer_minutes: int = Field(
        default_factory=lambda: settings.booking.multi_service_buffer_minutes, ge=0
    )
    past_grace_minutes: int = Field(default_factory=lambda: settings.shop.past_grace_minutes, ge=0)
    turnaround_buffer_minutes: int = Field(
        default_factory=lambda: settings.shop.turnaround_buffer_minutes, ge=0
    )
    working_days: list[int] = Field(default_factory=lambda: list(ALL_WEEKDAYS))

    @model_validator(mode="before")
    @classmethod
    def convert_document_days(cls, data):
        if isinstance(data, dict) and "workingDays" in data:
            data = dict(data)
            days = data.pop("workingDays")
            if isinstance(days, (list, tuple)):
                days = [_document_day_to_weekday(day) for day in days]
            data.setdefault("working_days", days)
        return data

    @field_validator("breaks")
    @classmethod
    def sort_breaks(cls, value: list[BreakWindow]) -> list[BreakWindow]:
        return sorted(value, key=lambda b: (b.start, b.end))

    @field_validator("working_days")
    @classmethod
    def check_weekdays(cls, value: list[int]) -> list[int]:
        invalid = [day for day in value if day not in ALL_WEEKDAYS]
        if invalid:
            raise ValueError(f"Working days must be 0 (Monday) to 6 (Sunday), got {invalid}")
        return sorted(set(value))

    @field_serializer("working_days")
    def serialize_days(self, value: list[int], info: FieldSerializationInfo) -> list[int]:
        if info.by_alias:
            return sorted((day + 1) % 7 for day in value)
        return value

    @model_validator(mode="after")
    def check_hours(self) -> "ShopSettings":
        if not 0 <= self.open_time < self.close_time <= MINUTES_PER_DAY:
            raise ValueError(
                "Opening time must be before closing time within one day, "
                f"got {self.open_time}-{self.close_time}"
            )
        return self

    @property
    def hours_label(self) -> str:
        return f"{minutes_to_time(self.open_time)}-{minutes_to_time(self.close_time)}"
