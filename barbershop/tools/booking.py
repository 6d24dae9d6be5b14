"""
Booking orchestration across Square and the internal backend.

A booking attempt is two sequential calls sharing one idempotency key:

    1. Create the booking in Square (through the site proxy). Failure here
       fails the attempt and nothing else is called.
    2. Sync the Square booking into the backend. Failure here is logged and
       swallowed; the caller gets a ProviderOnlyBooking built from the
       Square response instead of an error.

Nothing is rolled back. Retrying a whole attempt with the same key is safe
because both Square and the backend deduplicate on it.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import ValidationError

from barbershop.config import AppConfig, settings
from barbershop.logging_context import get_booking_logger, reset_attempt_id, set_attempt_id
from barbershop.schemas.booking_schema import (
    AvailabilityResponse,
    BookingRecord,
    BookingRequest,
    BookingResponse,
    BookingResult,
    ProviderOnlyBooking,
    SquareBooking,
    SquareBookingRequest,
    SquareBookingResponse,
    SyncedBooking,
)
from barbershop.schemas.catalog_schema import Service, TeamMember
from barbershop.schemas.session_schema import SessionData
from barbershop.tools.api_client import ApiClient
from barbershop.tools.availability import search_availability
from barbershop.tools.errors import ApiError, BookingError
from barbershop.tools.square import SquareBookingClient
from barbershop.tools.team import (
    get_active_team_members,
    get_team_member_services,
    get_team_members,
)
from barbershop.utils import add_minutes

logger = get_booking_logger(__name__)

UNSYNCED_MESSAGE = "Booking created in Square but not yet synced with backend"
DEFAULT_SQUARE_STATUS = "ACCEPTED"


class BookingService:
    """Entry point for every booking flow the site offers."""

    def __init__(
        self,
        api: ApiClient,
        square: SquareBookingClient,
        config: Optional[AppConfig] = None,
    ) -> None:
        self.api = api
        self.square = square
        self.config = config or settings

    @property
    def session(self) -> SessionData:
        return self.api.session

    async def __aenter__(self) -> "BookingService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.api.aclose()
        await self.square.aclose()

    # ------------------------------------------------------------------ #
    # Catalog
    # ------------------------------------------------------------------ #

    async def get_team_members(self) -> list[TeamMember]:
        return await get_team_members(self.api)

    async def get_active_team_members(self) -> list[TeamMember]:
        return await get_active_team_members(self.api)

    async def get_team_member_services(self, team_member_id: int) -> list[Service]:
        return await get_team_member_services(self.api, team_member_id)

    async def search_availability(
        self, service_variation_id: str, start_date: datetime, end_date: datetime
    ) -> AvailabilityResponse:
        return await search_availability(self.api, service_variation_id, start_date, end_date)

    # ------------------------------------------------------------------ #
    # Booking creation
    # ------------------------------------------------------------------ #

    async def create_square_booking(self, request: SquareBookingRequest) -> SquareBookingResponse:
        """Create the booking in Square. Raises SquareBookingError on failure."""
        return await self.square.create_booking(request)

    async def sync_booking_with_backend(
        self,
        request: BookingRequest,
        square_booking_id: Optional[str] = None,
    ) -> Optional[BookingResponse]:
        """Record a booking in the backend.

        Returns None instead of raising on any failure so the customer's
        flow continues.
        """
        body = request.model_dump(by_alias=True, exclude_none=True)
        if square_booking_id:
            body["square_booking_id"] = square_booking_id

        try:
            payload = await self.api.post("/bookings", json=body)
        except ApiError as exc:
            logger.warning("Error syncing booking with backend: %s", exc.message)
            return None

        try:
            return BookingResponse.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Backend returned an unexpected booking payload: %s", exc)
            return None

    async def create_booking(self, request: BookingRequest) -> BookingResult:
        """Create a booking in Square, then sync it to the backend.

        Returns SyncedBooking when both succeed and ProviderOnlyBooking when
        only Square does. Raises SquareBookingError when Square fails.
        """
        idempotency_key = request.idempotency_key or str(uuid.uuid4())
        token = set_attempt_id(idempotency_key)
        try:
            return await self._create_booking(
                request.model_copy(update={"idempotency_key": idempotency_key})
            )
        finally:
            reset_attempt_id(token)

    async def _create_booking(self, request: BookingRequest) -> BookingResult:
        square_response = await self.create_square_booking(
            SquareBookingRequest(
                service_variation_id=request.service_variation_id,
                team_member_id=request.team_member_id,
                start_at=request.start_at,
                service_variation_version=request.service_variation_version,
                customer_note=request.customer_note,
                idempotency_key=request.idempotency_key,
                location_id=self.config.square.location_id,
                customer_id=self.session.square_customer_id,
            )
        )
        square_booking = square_response.booking
        logger.info(
            "Square booking created: %s",
            square_booking.id if square_booking else "<no booking returned>",
        )

        backend_response = await self.sync_booking_with_backend(
            request, square_booking.id if square_booking else None
        )
        if backend_response is not None:
            logger.info("Booking synced with backend as %d", backend_response.data.id)
            return SyncedBooking(response=backend_response)

        if square_booking is not None:
            logger.warning(
                "Returning unsynced booking for Square booking %s", square_booking.id
            )
            return ProviderOnlyBooking(
                response=self._provider_only_response(square_booking, request),
                square_booking=square_booking,
            )

        # Square said success but sent no booking, and the backend failed too.
        raise BookingError("Failed to create booking in both Square and backend systems")

    def _provider_only_response(
        self, booking: SquareBooking, request: BookingRequest
    ) -> BookingResponse:
        # Square's start time wins; the requested one covers a partial reply.
        start_at = booking.start_at or request.start_at
        minutes = request.duration_minutes or self.config.booking.fallback_appointment_minutes
        try:
            end_at = add_minutes(start_at, minutes)
        except ValueError:
            logger.warning("Could not parse Square start time %r", start_at)
            end_at = start_at

        return BookingResponse(
            data=BookingRecord(
                id=0,
                square_booking_id=booking.id,
                service_name=self.config.booking.synthetic_service_name,
                start_at=start_at,
                end_at=end_at,
                status=booking.status or DEFAULT_SQUARE_STATUS,
            ),
            status_code=200,
            message=UNSYNCED_MESSAGE,
        )

    # ------------------------------------------------------------------ #
    # Booking management
    # ------------------------------------------------------------------ #

    async def cancel_booking(self, booking_id: str) -> Any:
        """Cancel a booking by its backend id."""
        try:
            body = await self.api.post(f"/bookings/{booking_id}/cancel")
        except ApiError as exc:
            raise BookingError(exc.message or "Failed to cancel booking") from exc
        logger.info("Booking cancelled: %s", booking_id)
        return body

    async def get_user_bookings(self, page: int = 1, limit: Optional[int] = None) -> Any:
        """List the signed-in customer's bookings, one page at a time."""
        if limit is None:
            limit = self.config.booking.default_page_size
        try:
            return await self.api.get("/bookings", params={"page": page, "limit": limit})
        except ApiError as exc:
            raise BookingError(exc.message or "Failed to fetch bookings") from exc
