"""
Square booking creation through the site's same-origin proxy.

The proxy holds the Square credentials and forwards the request to the
Square Bookings API. It answers with ``{"success": ..., "booking": ...}``.
"""

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from barbershop.config import settings
from barbershop.logging_context import get_booking_logger
from barbershop.schemas.booking_schema import (
    SquareBooking,
    SquareBookingRequest,
    SquareBookingResponse,
)
from barbershop.tools.errors import SquareBookingError

logger = get_booking_logger(__name__)

DEFAULT_FAILURE_MESSAGE = "Failed to create Square booking"


def _salvage_booking(raw: Any) -> Optional[SquareBooking]:
    """Rebuild a booking from the id and start time of an unparseable reply."""
    if not isinstance(raw, dict) or raw.get("id") in (None, ""):
        return None
    start_at = raw.get("startAt")
    status = raw.get("status")
    return SquareBooking(
        id=str(raw["id"]),
        start_at=start_at if isinstance(start_at, str) else None,
        status=status if isinstance(status, str) else None,
    )


class SquareBookingClient:
    """Posts booking requests to the Square proxy endpoint."""

    def __init__(
        self,
        site_url: Optional[str] = None,
        path: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint = (site_url or settings.api.site_url).rstrip("/") + (
            path or settings.api.square_booking_path
        )
        self._client = httpx.AsyncClient(transport=transport)

    async def __aenter__(self) -> "SquareBookingClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_booking(self, request: SquareBookingRequest) -> SquareBookingResponse:
        """Create the booking in Square.

        Raises SquareBookingError unless the proxy answers 2xx with
        ``success: true``. Never retried here; the idempotency key lets the
        caller retry the whole attempt safely.
        """
        body = request.model_dump(by_alias=True, exclude_none=True)
        try:
            response = await self._client.post(self.endpoint, json=body)
        except httpx.HTTPError as exc:
            logger.error("Error creating Square booking: %s", exc)
            raise SquareBookingError(str(exc) or DEFAULT_FAILURE_MESSAGE) from exc

        try:
            payload = response.json()
        except ValueError:
            logger.error(
                "Square proxy returned %d with a non-JSON body", response.status_code
            )
            raise SquareBookingError(DEFAULT_FAILURE_MESSAGE) from None

        message = payload.get("message") if isinstance(payload, dict) else None
        if not response.is_success or not isinstance(payload, dict) or not payload.get("success"):
            logger.error(
                "Square booking rejected (%d): %s",
                response.status_code,
                message or "no message",
            )
            details = payload.get("details") if isinstance(payload, dict) else None
            raise SquareBookingError(message or DEFAULT_FAILURE_MESSAGE, details=details)

        try:
            result = SquareBookingResponse.model_validate(payload)
        except ValidationError as exc:
            # Square has already created the booking; keep what we can read.
            logger.warning("Unexpected Square proxy response: %s", exc)
            result = SquareBookingResponse(
                success=True,
                booking=_salvage_booking(payload.get("booking")),
                message=message if isinstance(message, str) else None,
            )

        if result.is_retry:
            logger.info("Square reported an idempotent replay of %s", request.idempotency_key)
        return result
