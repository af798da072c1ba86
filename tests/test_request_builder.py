"""Tests for composite service requests and booking preparation."""

from datetime import date

import pytest

from detailing_scheduler.scheduling.errors import InvalidRequestError
from detailing_scheduler.scheduling.request_builder import build_service_request, prepare_booking
from detailing_scheduler.schemas.booking_schema import BookingStatus, ServiceRequest

WASH = {"name": "Foam Wash", "duration_minutes": 30, "category": "Detailed Wash"}
INTERIOR = {"name": "Interior Detailing", "duration_minutes": 90, "category": "Interior"}


class TestBuildServiceRequest:
    def test_single_service_has_no_buffer(self):
        request = build_service_request([WASH], buffer_minutes=30)
        assert request.duration_minutes == 30
        assert request.category == "Detailed Wash"
        assert request.name == "Foam Wash"

    def test_multiple_services_add_buffer(self):
        request = build_service_request([WASH, INTERIOR], buffer_minutes=30)
        assert request.duration_minutes == 30 + 90 + 30

    def test_first_service_category_wins(self):
        request = build_service_request([INTERIOR, WASH], buffer_minutes=30)
        assert request.category == "Interior"
        assert request.name == "Interior Detailing + Foam Wash"

    def test_extra_time_added(self):
        request = build_service_request([WASH], extra_minutes=15, buffer_minutes=30)
        assert request.duration_minutes == 45

    def test_missing_duration_falls_back(self):
        request = build_service_request([{"name": "Custom"}], default_duration=30)
        assert request.duration_minutes == 30

    def test_missing_category_falls_back(self):
        request = build_service_request([{"name": "Custom", "duration_minutes": 20}],
                                        default_category="Detailed Wash")
        assert request.category == "Detailed Wash"

    def test_camel_case_duration_accepted(self):
        request = build_service_request([{"name": "Legacy", "durationMinutes": 25, "category": "X"}])
        assert request.duration_minutes == 25

    def test_buffer_defaults_from_config(self):
        request = build_service_request([WASH, WASH])
        assert request.duration_minutes == 60 + 30

    def test_empty_selection_rejected(self):
        with pytest.raises(InvalidRequestError):
            build_service_request([])

    def test_negative_extra_time_rejected(self):
        with pytest.raises(InvalidRequestError):
            build_service_request([WASH], extra_minutes=-5)

    def test_invalid_duration_rejected(self):
        with pytest.raises(InvalidRequestError):
            build_service_request([{"name": "Bad", "duration_minutes": "abc", "category": "X"}])


class TestPrepareBooking:
    def test_carries_scheduling_fields(self):
        request = ServiceRequest(duration_minutes=150, category="Interior", name="Interior + Wash")
        booking = prepare_booking(request, "2030-06-04", "10:00", booking_id="BK-1", is_walk_in=True)
        assert booking.id == "BK-1"
        assert booking.booking_date == date(2030, 6, 4)
        assert booking.start_time == 600
        assert booking.end_time == 750
        assert booking.category == "Interior"
        assert booking.service_name == "Interior + Wash"
        assert booking.status == BookingStatus.CONFIRMED
        assert booking.is_walk_in

    def test_generates_reference(self):
        request = ServiceRequest(duration_minutes=30, category="wash")
        booking = prepare_booking(request, "2030-06-04", 540)
        assert booking.id.startswith("BK-")
