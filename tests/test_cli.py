"""Tests for the command-line front end."""

import pytest

from barbershop.cli import _search_window, build_parser, run
from tests.conftest import make_backend_booking, make_square_booking, respond
from tests.test_team import MEMBERS, SERVICES

SQUARE_OK = respond(200, {"success": True, "booking": make_square_booking()})


class TestParser:
    def test_book_arguments(self):
        args = build_parser().parse_args(
            [
                "--token", "abc",
                "book",
                "--service-variation-id", "SVC-VAR-1",
                "--team-member-id", "TM-1",
                "--start-at", "2025-03-18T10:00:00Z",
                "--duration", "30",
            ]
        )
        assert args.command == "book"
        assert args.token == "abc"
        assert args.duration == 30
        assert args.note is None

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_search_window_defaults_to_a_week(self):
        start, end = _search_window("2025-03-18", None)
        assert (end - start).days == 7


class TestRun:
    @pytest.mark.asyncio
    async def test_barbers_lists_active_only(self, make_booking_service, capsys):
        service, _, _ = make_booking_service(respond(200, {"data": MEMBERS}), SQUARE_OK)
        code = await run(build_parser().parse_args(["barbers"]), service)
        out = capsys.readouterr().out
        assert code == 0
        assert "Anthony C." in out
        assert "Marco R." not in out

    @pytest.mark.asyncio
    async def test_barbers_uses_active_lookup(self, make_booking_service, monkeypatch, capsys):
        service, _, _ = make_booking_service(respond(200, {"data": MEMBERS}), SQUARE_OK)
        calls = []
        lookup = service.get_active_team_members

        async def tracked():
            calls.append(True)
            return await lookup()

        monkeypatch.setattr(service, "get_active_team_members", tracked)
        assert await run(build_parser().parse_args(["barbers"]), service) == 0
        assert calls == [True]

    @pytest.mark.asyncio
    async def test_services_show_prices(self, make_booking_service, capsys):
        service, _, _ = make_booking_service(respond(200, {"data": SERVICES}), SQUARE_OK)
        code = await run(build_parser().parse_args(["services", "1"]), service)
        out = capsys.readouterr().out
        assert code == 0
        assert "HAIR + BEARD" in out
        assert "$75.00 AUD" in out

    @pytest.mark.asyncio
    async def test_book_synced(self, make_booking_service, capsys):
        service, _, _ = make_booking_service(respond(201, make_backend_booking()), SQUARE_OK)
        args = build_parser().parse_args(
            ["book", "--service-variation-id", "SVC-VAR-1", "--team-member-id", "TM-1",
             "--start-at", "2025-03-18T10:00:00Z"]
        )
        code = await run(args, service)
        out = capsys.readouterr().out
        assert code == 0
        assert "Booked Haircut" in out
        assert "not yet synced" not in out

    @pytest.mark.asyncio
    async def test_book_provider_only_is_flagged(self, make_booking_service, capsys):
        service, _, _ = make_booking_service(respond(500), SQUARE_OK)
        args = build_parser().parse_args(
            ["book", "--service-variation-id", "SVC-VAR-1", "--team-member-id", "TM-1",
             "--start-at", "2025-03-18T10:00:00Z"]
        )
        code = await run(args, service)
        out = capsys.readouterr().out
        assert code == 0
        assert "not yet synced" in out

    @pytest.mark.asyncio
    async def test_book_square_failure_exits_nonzero(self, make_booking_service, capsys):
        service, _, _ = make_booking_service(
            respond(201, make_backend_booking()),
            respond(409, {"success": False, "message": "Slot taken"}),
        )
        args = build_parser().parse_args(
            ["book", "--service-variation-id", "SVC-VAR-1", "--team-member-id", "TM-1",
             "--start-at", "2025-03-18T10:00:00Z"]
        )
        code = await run(args, service)
        assert code == 1
        assert "Slot taken" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_availability_bad_range(self, make_booking_service, capsys):
        service, backend, _ = make_booking_service(respond(200, {}), SQUARE_OK)
        args = build_parser().parse_args(
            ["availability", "SVC-VAR-1", "--start", "2025-03-20", "--end", "2025-03-18"]
        )
        assert await run(args, service) == 1
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_availability_invalid_date(self, make_booking_service, capsys):
        service, _, _ = make_booking_service(respond(200, {}), SQUARE_OK)
        args = build_parser().parse_args(["availability", "SVC-VAR-1", "--start", "tomorrow"])
        assert await run(args, service) == 1
        assert "Invalid input" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_bookings_empty(self, make_booking_service, capsys):
        service, _, _ = make_booking_service(respond(200, {"data": []}), SQUARE_OK)
        assert await run(build_parser().parse_args(["bookings"]), service) == 0
        assert "no bookings" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_cancel(self, make_booking_service, capsys):
        service, _, _ = make_booking_service(
            respond(200, {"message": "Booking cancelled"}), SQUARE_OK
        )
        assert await run(build_parser().parse_args(["cancel", "42"]), service) == 0
        assert "Booking cancelled" in capsys.readouterr().out
