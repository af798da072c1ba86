"""Shared test fixtures and helpers."""

from datetime import datetime
from typing import Optional

import pytest

from detailing_scheduler.schemas.booking_schema import Booking, BookingStatus, ServiceRequest
from detailing_scheduler.schemas.settings_schema import ShopSettings
from detailing_scheduler.tools.booking_repository import InMemoryBookingRepository
from detailing_scheduler.tools.settings_provider import InMemorySettingsProvider

# A Tuesday, far enough ahead that wall-clock "now" never makes it today.
DAY = "2030-06-04"
MONDAY = "2030-06-03"
SUNDAY = "2030-06-09"


def make_settings(**overrides) -> ShopSettings:
    """09:00-18:00, 5-minute granularity, no breaks, capacity 1."""
    values = {
        "open_time": "09:00",
        "close_time": "18:00",
        "slot_granularity_minutes": 5,
        "breaks": [],
        "category_capacity": 1,
        "multi_service_buffer_minutes": 30,
        "past_grace_minutes": 5,
        "turnaround_buffer_minutes": 0,
    }
    values.update(overrides)
    return ShopSettings(**values)


def make_booking(
    start: str,
    duration: int,
    category: str = "wash",
    booking_id: Optional[str] = None,
    status: BookingStatus = BookingStatus.CONFIRMED,
    booking_date: str = DAY,
) -> Booking:
    """Helper to create a Booking with sensible defaults."""
    return Booking(
        id=booking_id or f"BK-{category}-{start}",
        booking_date=booking_date,
        start_time=start,
        duration_minutes=duration,
        category=category,
        status=status,
    )


def make_request(duration: int = 30, category: str = "wash") -> ServiceRequest:
    return ServiceRequest(duration_minutes=duration, category=category)


def at(day: str, hour: int, minute: int) -> datetime:
    year, month, dom = (int(part) for part in day.split("-"))
    return datetime(year, month, dom, hour, minute)


def slot_map(slots) -> dict:
    """Index slots by their "HH:MM" time."""
    return {slot.time: slot for slot in slots}


@pytest.fixture
def shop_settings():
    return make_settings()


@pytest.fixture
def repository():
    repo = InMemoryBookingRepository()
    yield repo
    repo.reset()


@pytest.fixture
def settings_provider():
    return InMemorySettingsProvider()
