"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""


class TestSchemaImports:
    def test_import_booking_schema(self):
        from detailing_scheduler.schemas.booking_schema import (
            Booking, BookingStatus, ServiceRequest, Slot, SlotReason,
        )
        assert BookingStatus.CANCELLED == "cancelled"
        assert SlotReason.BREAK == "break"

    def test_import_settings_schema(self):
        from detailing_scheduler.schemas.settings_schema import BreakWindow, ShopSettings
        assert ShopSettings().breaks == []


class TestSchedulingImports:
    def test_package_reexports(self):
        from detailing_scheduler.scheduling import (
            AvailabilityUnknownError,
            BookingConflictError,
            InvalidRequestError,
            Interval,
            SchedulingError,
            build_service_request,
            compute_availability,
            overlaps,
            validate_start_time,
        )
        assert callable(compute_availability)
        assert issubclass(InvalidRequestError, SchedulingError)
        assert issubclass(AvailabilityUnknownError, SchedulingError)
        assert not issubclass(AvailabilityUnknownError, ValueError)


class TestToolImports:
    def test_import_adapters(self):
        from detailing_scheduler.tools.booking_repository import InMemoryBookingRepository
        from detailing_scheduler.tools.settings_provider import InMemorySettingsProvider
        assert InMemoryBookingRepository().list_bookings_for_date("2030-06-04") == []
        assert InMemorySettingsProvider().get_settings("anywhere").open_time >= 0

    def test_import_availability(self):
        from detailing_scheduler.tools.availability import check_availability
        assert callable(check_availability)


class TestLoggingContext:
    def test_query_scope_restores_outer_id(self):
        from detailing_scheduler.logging_context import NO_QUERY, get_query_id, query_scope

        with query_scope("Q-outer1"):
            with query_scope() as inner:
                assert inner.startswith("Q-")
                assert inner != "Q-outer1"
                assert get_query_id() == inner
            assert get_query_id() == "Q-outer1"
        assert get_query_id() == NO_QUERY

    def test_query_logger_has_single_filter(self):
        from detailing_scheduler.logging_context import QueryIdFilter, get_query_logger

        logger = get_query_logger("detailing_scheduler.tests.sample")
        get_query_logger("detailing_scheduler.tests.sample")
        assert sum(isinstance(f, QueryIdFilter) for f in logger.filters) == 1
