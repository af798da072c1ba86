"""
Centralized configuration with environment variable overrides.

Shop-hour defaults, buffers, and legacy-record fallbacks live here so
the scheduling engine never carries hidden global constants.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from detailing_scheduler.logging_context import QueryIdFilter
from detailing_scheduler.utils import MINUTES_PER_DAY, time_to_minutes

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_clock(env_var: str, default: str) -> str:
    """Read an "HH:MM" value from an env var, rejecting anything else."""
    raw = os.getenv(env_var, default).strip()
    try:
        time_to_minutes(raw)
    except ValueError:
        raise ValueError(f"Invalid HH:MM time for {env_var}: {raw!r}") from None
    return raw


@dataclass(frozen=True)
class ShopDefaults:
    """Business-hour defaults used when a shop has no settings document."""

    open_time: str = _safe_clock("SHOP_OPEN_TIME", "09:00")
    close_time: str = _safe_clock("SHOP_CLOSE_TIME", "18:00")
    slot_granularity_minutes: int = _safe_int("SLOT_GRANULARITY_MINUTES", "5")
    category_capacity: int = _safe_int("CATEGORY_CAPACITY", "1")
    past_grace_minutes: int = _safe_int("PAST_GRACE_MINUTES", "5")
    turnaround_buffer_minutes: int = _safe_int("TURNAROUND_BUFFER_MINUTES", "0")


@dataclass(frozen=True)
class BookingDefaults:
    """Fallbacks for composite requests and legacy booking records."""

    multi_service_buffer_minutes: int = _safe_int("MULTI_SERVICE_BUFFER_MINUTES", "30")
    legacy_duration_minutes: int = _safe_int("LEGACY_DURATION_MINUTES", "30")
    default_category: str = os.getenv("DEFAULT_CATEGORY", "Detailed Wash")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    shop: ShopDefaults = field(default_factory=ShopDefaults)
    booking: BookingDefaults = field(default_factory=BookingDefaults)
    default_shop_id: str = os.getenv("DEFAULT_SHOP_ID", "main")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    open_minutes = time_to_minutes(config.shop.open_time)
    close_minutes = time_to_minutes(config.shop.close_time)
    if not 0 <= open_minutes < close_minutes <= MINUTES_PER_DAY:
        raise ValueError(
            "SHOP_OPEN_TIME must be before SHOP_CLOSE_TIME within one day, "
            f"got {config.shop.open_time}-{config.shop.close_time}"
        )
    if config.shop.slot_granularity_minutes < 1:
        raise ValueError(
            "SLOT_GRANULARITY_MINUTES must be >= 1, "
            f"got {config.shop.slot_granularity_minutes}"
        )
    if config.shop.category_capacity < 1:
        raise ValueError(
            f"CATEGORY_CAPACITY must be >= 1, got {config.shop.category_capacity}"
        )
    if config.booking.legacy_duration_minutes < 1:
        raise ValueError(
            "LEGACY_DURATION_MINUTES must be >= 1, "
            f"got {config.booking.legacy_duration_minutes}"
        )

    for name, value in [
        ("PAST_GRACE_MINUTES", config.shop.past_grace_minutes),
        ("TURNAROUND_BUFFER_MINUTES", config.shop.turnaround_buffer_minutes),
        ("MULTI_SERVICE_BUFFER_MINUTES", config.booking.multi_service_buffer_minutes),
    ]:
        if value < 0:
            raise ValueError(f"{name} must be >= 0, got {value}")

    if not config.booking.default_category.strip():
        raise ValueError("DEFAULT_CATEGORY must not be empty")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] [%(query_id)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, QueryIdFilter) for f in handler.filters):
            handler.addFilter(QueryIdFilter())
    logger.info(
        "Configuration loaded: hours %s-%s, granularity %d min",
        config.shop.open_time,
        config.shop.close_time,
        config.shop.slot_granularity_minutes,
    )
    return config


# Singleton instance
settings = load_config()
