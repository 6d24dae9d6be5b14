"""
Centralized configuration with environment variable overrides.

Backend and proxy URLs, the Square location, and booking fallbacks are
all configurable here. Nothing is hardcoded in client or tool logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from barbershop.logging_context import AttemptIdFilter

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] [%(attempt_id)s] %(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class ApiConfig:
    """Internal backend and same-origin proxy endpoints."""

    base_url: str = os.getenv("API_URL", "http://localhost:3001/api")
    site_url: str = os.getenv("SITE_URL", "http://localhost:3000")
    square_booking_path: str = os.getenv(
        "SQUARE_BOOKING_PATH", "/api/create-square-booking"
    )


@dataclass(frozen=True)
class SquareConfig:
    """Payment provider settings forwarded with every booking."""

    location_id: str = os.getenv("SQUARE_LOCATION_ID", "")


@dataclass(frozen=True)
class BookingConfig:
    """Booking flow defaults."""

    # Used for the end time of an unsynced booking when the service
    # duration is unknown.
    fallback_appointment_minutes: int = _safe_int("FALLBACK_APPOINTMENT_MINUTES", "60")
    default_page_size: int = _safe_int("DEFAULT_PAGE_SIZE", "10")
    synthetic_service_name: str = os.getenv("SYNTHETIC_SERVICE_NAME", "Your appointment")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    api: ApiConfig = field(default_factory=ApiConfig)
    square: SquareConfig = field(default_factory=SquareConfig)
    booking: BookingConfig = field(default_factory=BookingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    for url_name, url_value in [
        ("API_URL", config.api.base_url),
        ("SITE_URL", config.api.site_url),
    ]:
        if not url_value.startswith(("http://", "https://")):
            raise ValueError(f"{url_name} must be an http(s) URL, got {url_value!r}")

    if not config.api.square_booking_path.startswith("/"):
        raise ValueError(
            "SQUARE_BOOKING_PATH must start with '/', "
            f"got {config.api.square_booking_path!r}"
        )
    if config.booking.fallback_appointment_minutes < 1:
        raise ValueError(
            "FALLBACK_APPOINTMENT_MINUTES must be >= 1, "
            f"got {config.booking.fallback_appointment_minutes}"
        )
    if config.booking.default_page_size < 1:
        raise ValueError(
            f"DEFAULT_PAGE_SIZE must be >= 1, got {config.booking.default_page_size}"
        )


def build_log_handler(stream=None) -> logging.Handler:
    """Stream handler that stamps every record with the current attempt id."""
    handler = logging.StreamHandler(stream)
    handler.addFilter(AttemptIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    return handler


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        handlers=[build_log_handler()],
    )
    if not config.square.location_id:
        logger.warning("SQUARE_LOCATION_ID is not set; bookings will send an empty location")
    logger.info("Configuration loaded for backend '%s'", config.api.base_url)
    return config


# Singleton instance
settings = load_config()
