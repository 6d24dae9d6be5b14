"""Shared test fixtures and helpers."""

import json
from typing import Any, Callable, Optional

import httpx
import pytest
import pytest_asyncio

from barbershop.schemas.session_schema import SessionData
from barbershop.tools.api_client import ApiClient
from barbershop.tools.booking import BookingService
from barbershop.tools.square import SquareBookingClient

API_URL = "http://backend.test/api"
SITE_URL = "http://site.test"

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    def json_bodies(self) -> list[Any]:
        return [json.loads(r.content) if r.content else None for r in self.requests]


def respond(status_code: int = 200, body: Any = None) -> Handler:
    """Handler that always answers with the same JSON body."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body)

    return handler


def fail_connect(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def make_square_booking(
    booking_id: str = "SQ-BOOKING-1",
    start_at: str = "2025-03-18T10:00:00Z",
    status: str = "ACCEPTED",
) -> dict:
    return {
        "id": booking_id,
        "status": status,
        "startAt": start_at,
        "locationId": "LOC-1",
        "createdAt": "2025-03-01T09:00:00Z",
        "version": "1",
    }


def make_backend_booking(
    booking_id: int = 42,
    square_booking_id: str = "SQ-BOOKING-1",
) -> dict:
    return {
        "data": {
            "id": booking_id,
            "square_booking_id": square_booking_id,
            "service_name": "Haircut",
            "start_at": "2025-03-18T10:00:00Z",
            "end_at": "2025-03-18T10:30:00Z",
            "status": "ACCEPTED",
        },
        "status_code": 201,
        "message": "Booking created",
    }


@pytest.fixture
def session():
    return SessionData(token="test-token", square_customer_id="CUST-1")


@pytest_asyncio.fixture
async def make_api(session):
    """Build an ApiClient whose requests go to ``handler``; closed at teardown."""
    clients: list[ApiClient] = []

    def factory(handler: Handler, client_session: Optional[SessionData] = None):
        transport = RecordingTransport(handler)
        api = ApiClient(
            base_url=API_URL,
            session=client_session or session,
            transport=transport,
        )
        clients.append(api)
        return api, transport

    yield factory
    for api in clients:
        await api.aclose()


@pytest_asyncio.fixture
async def make_booking_service(session):
    """Build a BookingService from a backend handler and a Square proxy handler.

    Every service built here is closed at teardown.
    """
    services: list[BookingService] = []

    def factory(backend: Handler, square: Handler):
        backend_transport = RecordingTransport(backend)
        square_transport = RecordingTransport(square)
        service = BookingService(
            ApiClient(base_url=API_URL, session=session, transport=backend_transport),
            SquareBookingClient(site_url=SITE_URL, transport=square_transport),
        )
        services.append(service)
        return service, backend_transport, square_transport

    yield factory
    for service in services:
        await service.aclose()
