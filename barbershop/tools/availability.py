"""
Availability search against the backend.

The backend asks Square for open slots; there is no local schedule and no
fallback when the search fails.
"""

import logging
from datetime import datetime

from pydantic import ValidationError

from barbershop.schemas.booking_schema import AvailabilityResponse
from barbershop.tools.api_client import ApiClient
from barbershop.tools.errors import ApiError, AvailabilityError
from barbershop.utils import as_utc, to_iso_timestamp

logger = logging.getLogger(__name__)

SEARCH_PATH = "/services/availability/search"
FAILURE_MESSAGE = "Failed to fetch availability"


async def search_availability(
    client: ApiClient,
    service_variation_id: str,
    start_date: datetime,
    end_date: datetime,
) -> AvailabilityResponse:
    """Search open slots for a service between two instants.

    Raises AvailabilityError when start_date is after end_date or the
    backend search fails for any reason.
    """
    if as_utc(start_date) > as_utc(end_date):
        raise AvailabilityError(
            f"Start date {to_iso_timestamp(start_date)} is after "
            f"end date {to_iso_timestamp(end_date)}"
        )

    payload = {
        "service_variation_id": service_variation_id,
        "start_at": to_iso_timestamp(start_date),
        "end_at": to_iso_timestamp(end_date),
    }
    try:
        body = await client.post(SEARCH_PATH, json=payload)
    except ApiError as exc:
        logger.error("Availability search for %s failed: %s", service_variation_id, exc.message)
        raise AvailabilityError(FAILURE_MESSAGE) from exc

    data = body.get("data") if isinstance(body, dict) else None
    if data is None:
        raise AvailabilityError(FAILURE_MESSAGE)
    try:
        result = AvailabilityResponse.model_validate(data)
    except ValidationError as exc:
        raise AvailabilityError(FAILURE_MESSAGE) from exc

    if result.errors:
        logger.warning("Availability search returned errors: %s", result.errors)
    logger.info(
        "Found slots on %d dates for %s", len(result.dates()), service_variation_id
    )
    return result
