"""Exceptions raised by the booking tools."""

from typing import Any, Optional


class ApiError(Exception):
    """A backend request failed; ``message`` is always set."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class BookingError(Exception):
    """A booking operation failed end-to-end."""


class SquareBookingError(BookingError):
    """Square rejected the booking or could not be reached."""

    def __init__(self, message: str, details: Optional[list] = None) -> None:
        super().__init__(message)
        self.details = details or []


class AvailabilityError(BookingError):
    """Availability search failed or was called with a bad range."""
