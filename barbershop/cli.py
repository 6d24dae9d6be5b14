"""
Command-line front end for the booking flows.

Usage:
    python main.py barbers
    python main.py services 3
    python main.py availability SVC-VAR-1 --start 2025-03-18 --end 2025-03-20
    python main.py book --service-variation-id SVC-VAR-1 --team-member-id TM-1 \\
        --start-at 2025-03-18T10:00:00Z --note "Skin fade"
    python main.py cancel 42
    python main.py bookings --page 2
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timedelta
from typing import Optional

from barbershop.schemas.booking_schema import BookingRequest, ProviderOnlyBooking
from barbershop.schemas.session_schema import SessionData
from barbershop.tools.api_client import ApiClient
from barbershop.tools.booking import BookingService
from barbershop.tools.errors import BookingError
from barbershop.tools.square import SquareBookingClient
from barbershop.utils import parse_iso_timestamp

GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

DEFAULT_SEARCH_DAYS = 7


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Browse barbers and manage bookings from the terminal."
    )
    parser.add_argument(
        "--token",
        type=str,
        default=None,
        help="Bearer token for the backend (default: API_TOKEN env var).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging output.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("barbers", help="List active barbers.")

    services = sub.add_parser("services", help="List a barber's services.")
    services.add_argument("team_member_id", type=int)

    availability = sub.add_parser("availability", help="Search open time slots.")
    availability.add_argument("service_variation_id")
    availability.add_argument("--start", type=str, default=None, help="ISO date or time.")
    availability.add_argument("--end", type=str, default=None, help="ISO date or time.")

    book = sub.add_parser("book", help="Book an appointment.")
    book.add_argument("--service-variation-id", required=True)
    book.add_argument("--team-member-id", required=True)
    book.add_argument("--start-at", required=True, help="ISO-8601 start time.")
    book.add_argument("--version", type=int, default=None, help="Service variation version.")
    book.add_argument("--note", type=str, default=None)
    book.add_argument("--duration", type=int, default=None, help="Service length in minutes.")
    book.add_argument("--idempotency-key", type=str, default=None)

    cancel = sub.add_parser("cancel", help="Cancel a booking.")
    cancel.add_argument("booking_id")

    bookings = sub.add_parser("bookings", help="List your bookings.")
    bookings.add_argument("--page", type=int, default=1)
    bookings.add_argument("--limit", type=int, default=None)

    return parser


def build_service(session: SessionData) -> BookingService:
    """Wire a BookingService against the configured backend and proxy."""
    return BookingService(ApiClient(session=session), SquareBookingClient())


def _say(text: str, color: str = GREEN) -> None:
    print(f"{color}{text}{RESET}")


def _search_window(start: Optional[str], end: Optional[str]) -> tuple[datetime, datetime]:
    start_dt = parse_iso_timestamp(start) if start else datetime.now().astimezone()
    end_dt = parse_iso_timestamp(end) if end else start_dt + timedelta(days=DEFAULT_SEARCH_DAYS)
    return start_dt, end_dt


async def run(args: argparse.Namespace, service: BookingService) -> int:
    """Execute one parsed command. Returns the process exit code."""
    try:
        if args.command == "barbers":
            members = await service.get_active_team_members()
            if not members:
                _say("No barbers are taking bookings right now.", YELLOW)
            for member in members:
                _say(f"{BOLD}{member.id}{RESET}{GREEN}  {member.full_name}")

        elif args.command == "services":
            services = await service.get_team_member_services(args.team_member_id)
            for svc in services:
                _say(
                    f"{BOLD}{svc.name.upper()}{RESET}{GREEN} {svc.formatted_price}"
                    f"  {DIM}{svc.duration} min  {svc.service_variation_id}"
                )

        elif args.command == "availability":
            start_dt, end_dt = _search_window(args.start, args.end)
            result = await service.search_availability(
                args.service_variation_id, start_dt, end_dt
            )
            if not result.dates():
                _say("No open slots in that range.", YELLOW)
            for date in result.dates():
                times = [
                    slot.formatted_time or slot.start_at
                    for slot in result.availabilities_by_date[date]
                ]
                _say(f"{BOLD}{date}{RESET}{GREEN}  {', '.join(times)}")

        elif args.command == "book":
            outcome = await service.create_booking(
                BookingRequest(
                    service_variation_id=args.service_variation_id,
                    team_member_id=args.team_member_id,
                    start_at=args.start_at,
                    service_variation_version=args.version,
                    customer_note=args.note,
                    idempotency_key=args.idempotency_key,
                    duration_minutes=args.duration,
                )
            )
            record = outcome.response.data
            _say(f"Booked {record.service_name} from {record.start_at} to {record.end_at}.")
            if isinstance(outcome, ProviderOnlyBooking):
                _say(
                    f"Square booking {record.square_booking_id} is not yet synced "
                    "with our records.",
                    YELLOW,
                )

        elif args.command == "cancel":
            body = await service.cancel_booking(args.booking_id)
            message = body.get("message") if isinstance(body, dict) else None
            _say(message or f"Booking {args.booking_id} cancelled.")

        elif args.command == "bookings":
            body = await service.get_user_bookings(args.page, args.limit)
            items = body.get("data") if isinstance(body, dict) else body
            if not items:
                _say("You have no bookings.", YELLOW)
            for item in items or []:
                _say(
                    f"{item.get('id')}  {item.get('service_name', '')}  "
                    f"{item.get('start_at', '')}  {DIM}{item.get('status', '')}"
                )

    except BookingError as exc:
        _say(f"Error: {exc}", RED)
        return 1
    except ValueError as exc:
        _say(f"Invalid input: {exc}", RED)
        return 1
    return 0


async def _main(args: argparse.Namespace) -> int:
    session = SessionData.from_env()
    if args.token:
        session.token = args.token
    async with build_service(session) as service:
        return await run(args, service)


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    sys.exit(asyncio.run(_main(args)))
