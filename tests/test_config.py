"""Tests for configuration loading and validation."""

import pytest

from detailing_scheduler.config import AppConfig, BookingDefaults, ShopDefaults, _validate_config


def _shop(**overrides) -> ShopDefaults:
    shop = ShopDefaults.__new__(ShopDefaults)
    values = {
        "open_time": "09:00",
        "close_time": "18:00",
        "slot_granularity_minutes": 5,
        "category_capacity": 1,
        "past_grace_minutes": 5,
        "turnaround_buffer_minutes": 0,
    }
    values.update(overrides)
    for name, value in values.items():
        object.__setattr__(shop, name, value)
    return shop


def _booking(**overrides) -> BookingDefaults:
    booking = BookingDefaults.__new__(BookingDefaults)
    values = {
        "multi_service_buffer_minutes": 30,
        "legacy_duration_minutes": 30,
        "default_category": "Detailed Wash",
    }
    values.update(overrides)
    for name, value in values.items():
        object.__setattr__(booking, name, value)
    return booking


def _config(shop=None, booking=None) -> AppConfig:
    config = AppConfig.__new__(AppConfig)
    object.__setattr__(config, "shop", shop or _shop())
    object.__setattr__(config, "booking", booking or _booking())
    object.__setattr__(config, "default_shop_id", "main")
    object.__setattr__(config, "log_level", "INFO")
    return config


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        config = AppConfig()
        _validate_config(config)  # should not raise

    def test_close_before_open(self):
        with pytest.raises(ValueError, match="SHOP_OPEN_TIME"):
            _validate_config(_config(shop=_shop(open_time="18:00", close_time="09:00")))

    def test_zero_granularity(self):
        with pytest.raises(ValueError, match="SLOT_GRANULARITY_MINUTES"):
            _validate_config(_config(shop=_shop(slot_granularity_minutes=0)))

    def test_zero_capacity(self):
        with pytest.raises(ValueError, match="CATEGORY_CAPACITY"):
            _validate_config(_config(shop=_shop(category_capacity=0)))

    def test_negative_grace(self):
        with pytest.raises(ValueError, match="PAST_GRACE_MINUTES"):
            _validate_config(_config(shop=_shop(past_grace_minutes=-1)))

    def test_negative_buffer(self):
        with pytest.raises(ValueError, match="MULTI_SERVICE_BUFFER_MINUTES"):
            _validate_config(_config(booking=_booking(multi_service_buffer_minutes=-30)))

    def test_zero_legacy_duration(self):
        with pytest.raises(ValueError, match="LEGACY_DURATION_MINUTES"):
            _validate_config(_config(booking=_booking(legacy_duration_minutes=0)))

    def test_blank_default_category(self):
        with pytest.raises(ValueError, match="DEFAULT_CATEGORY"):
            _validate_config(_config(booking=_booking(default_category="  ")))


class TestEnvParsing:
    def test_safe_int_parsing(self):
        from detailing_scheduler.config import _safe_int

        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_safe_int_rejects_garbage(self, monkeypatch):
        from detailing_scheduler.config import _safe_int

        monkeypatch.setenv("SLOT_TEST_VAR", "five")
        with pytest.raises(ValueError, match="SLOT_TEST_VAR"):
            _safe_int("SLOT_TEST_VAR", "5")

    def test_safe_clock_parsing(self):
        from detailing_scheduler.config import _safe_clock

        assert _safe_clock("NONEXISTENT_VAR_12345", "09:30") == "09:30"

    def test_safe_clock_rejects_garbage(self, monkeypatch):
        from detailing_scheduler.config import _safe_clock

        monkeypatch.setenv("OPEN_TEST_VAR", "9am")
        with pytest.raises(ValueError, match="OPEN_TEST_VAR"):
            _safe_clock("OPEN_TEST_VAR", "09:00")
