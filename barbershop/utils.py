"""Shared utilities used across the booking client."""

from datetime import datetime, timedelta, timezone


def as_utc(value: datetime) -> datetime:
    """Convert to UTC, treating naive datetimes as already UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso_timestamp(value: datetime) -> str:
    """Format a datetime as a UTC ISO-8601 string with millisecond precision.

    Examples:
        >>> to_iso_timestamp(datetime(2025, 3, 18, 10, 0, tzinfo=timezone.utc))
        '2025-03-18T10:00:00.000Z'
    """
    value = as_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_iso_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z`` for UTC."""
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def add_minutes(start_at: str, minutes: int) -> str:
    """Return ``start_at`` shifted by ``minutes`` as a UTC ISO-8601 string."""
    return to_iso_timestamp(parse_iso_timestamp(start_at) + timedelta(minutes=minutes))


def format_price(amount: int, currency: str) -> str:
    """Format a minor-unit amount the way the barbers page shows it.

    Examples:
        >>> format_price(7500, "AUD")
        '$75.00 AUD'
    """
    return f"${amount / 100:,.2f} {currency.upper()}"
