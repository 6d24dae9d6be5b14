"""Booking, provider, and availability data models."""

from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BookingRequest(BaseModel):
    """A customer's chosen service, barber, and start time."""
    model_config = ConfigDict(populate_by_name=True)

    service_variation_id: str
    team_member_id: str
    start_at: str
    service_variation_version: Optional[int] = None
    customer_note: Optional[str] = None
    idempotency_key: Optional[str] = Field(default=None, alias="idempotencyKey")
    # Local only: end time of an unsynced booking. Never sent upstream.
    duration_minutes: Optional[int] = Field(default=None, exclude=True, gt=0)


class SquareBookingRequest(BaseModel):
    """Payload for the same-origin Square proxy (camelCase on the wire)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    service_variation_id: str
    team_member_id: str
    customer_id: Optional[str] = None
    start_at: str
    service_variation_version: Optional[int] = None
    customer_note: Optional[str] = None
    idempotency_key: str
    location_id: str


class SquareBooking(BaseModel):
    """Booking as created by Square. Unknown fields are ignored."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    id: str
    status: Optional[str] = None
    start_at: Optional[str] = None
    location_id: Optional[str] = None
    customer_id: Optional[str] = None
    created_at: Optional[str] = None
    # Square sends an integer; older proxies sent a string.
    version: Union[int, str, None] = None


class SquareBookingResponse(BaseModel):
    """Square proxy response."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    success: bool
    booking: Optional[SquareBooking] = None
    message: Optional[str] = None
    details: Optional[list[Any]] = None
    is_retry: Optional[bool] = False


class BookingRecord(BaseModel):
    """Booking as stored by the internal backend."""
    id: int
    square_booking_id: str = ""
    service_name: str = ""
    start_at: str
    end_at: str
    status: str = ""


class BookingResponse(BaseModel):
    """Backend booking envelope."""
    data: BookingRecord
    status_code: int
    message: str = ""


class AppointmentSegment(BaseModel):
    """One service segment a time slot can satisfy."""
    duration_minutes: int
    service_variation_id: str
    team_member_id: str
    service_variation_version: int


class TimeSlot(BaseModel):
    """A bookable start time from the availability search."""
    start_at: str
    location_id: str = ""
    formatted_time: Optional[str] = None
    appointment_segments: list[AppointmentSegment] = Field(default_factory=list)


class AvailabilityResponse(BaseModel):
    """Availability search result, keyed by date."""
    availabilities_by_date: dict[str, list[TimeSlot]] = Field(default_factory=dict)
    errors: list[Any] = Field(default_factory=list)

    def dates(self) -> list[str]:
        """Dates that have at least one slot, in order."""
        return sorted(d for d, slots in self.availabilities_by_date.items() if slots)


@dataclass(frozen=True)
class SyncedBooking:
    """Booking recorded by both Square and the backend."""
    response: BookingResponse

    @property
    def synced(self) -> bool:
        return True


@dataclass(frozen=True)
class ProviderOnlyBooking:
    """Booking recorded by Square whose backend sync failed.

    ``response`` is synthetic: ``data.id`` is 0 and ``end_at`` is estimated.
    """
    response: BookingResponse
    square_booking: SquareBooking

    @property
    def synced(self) -> bool:
        return False


BookingResult = Union[SyncedBooking, ProviderOnlyBooking]
