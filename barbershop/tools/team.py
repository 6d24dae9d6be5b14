"""Barber and service catalog lookups against the backend."""

import logging
from typing import Any

from pydantic import ValidationError

from barbershop.schemas.catalog_schema import Service, TeamMember
from barbershop.tools.api_client import ApiClient
from barbershop.tools.errors import ApiError, BookingError

logger = logging.getLogger(__name__)


def _data_items(body: Any) -> list[Any]:
    """The ``data`` list of a backend envelope; anything else is a bad shape."""
    if body is None:
        return []
    if not isinstance(body, dict):
        raise TypeError(f"expected an object, got {type(body).__name__}")
    items = body.get("data") or []
    if not isinstance(items, list):
        raise TypeError(f"expected a list under 'data', got {type(items).__name__}")
    return items


async def get_team_members(client: ApiClient) -> list[TeamMember]:
    """Return all barbers known to the backend."""
    message = "Failed to fetch barbers"
    try:
        body = await client.get("/team-members")
    except ApiError as exc:
        raise BookingError(exc.message or message) from exc
    try:
        members = [TeamMember.model_validate(item) for item in _data_items(body)]
    except (TypeError, ValidationError) as exc:
        logger.error("Unexpected team member payload: %s", exc)
        raise BookingError(message) from exc
    logger.debug("Fetched %d team members", len(members))
    return members


async def get_active_team_members(client: ApiClient) -> list[TeamMember]:
    """Return only the barbers who can currently take bookings."""
    return [m for m in await get_team_members(client) if m.is_active]


async def get_team_member_services(client: ApiClient, team_member_id: int) -> list[Service]:
    """Return the services a barber offers."""
    message = f"Failed to fetch services for barber {team_member_id}"
    try:
        body = await client.get(f"/services/team-member/{team_member_id}")
    except ApiError as exc:
        raise BookingError(exc.message or message) from exc
    try:
        return [Service.model_validate(item) for item in _data_items(body)]
    except (TypeError, ValidationError) as exc:
        logger.error("Unexpected service payload for barber %s: %s", team_member_id, exc)
        raise BookingError(message) from exc
