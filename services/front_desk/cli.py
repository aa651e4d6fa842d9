"""Console entry point for the front desk."""
from datetime import date, datetime
from typing import Optional, Tuple

import click

from hotel.booking_engine import BookingEngine
from hotel.database import SessionLocal, init_db
from hotel.domain import Booking, GuestPrivilege, NewRoom, Room, RoomType
from hotel.errors import HotelError
from hotel.repositories import SqlBookingRepository, SqlRoomRepository

ISO_DATE = click.DateTime(formats=["%Y-%m-%d"])


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def _prettify(value: str) -> str:
    return value.replace("_", " ").title()


def format_room(room: Room) -> str:
    return "\n".join(
        [
            f"Room {room.room_number} ({room.room_type.value})",
            f"  • Capacity: {room.max_guests} guests",
            f"  • Balcony: {_yes_no(room.has_balcony)}",
            f"  • Beach view: {_yes_no(room.has_beach_view)}",
            f"  • Air conditioning: {_yes_no(room.has_air_conditioning)}",
        ]
    )


def format_booking(booking: Booking) -> str:
    lines = [
        f"Booking #{booking.id}",
        f"  • Stay: {booking.check_in} → {booking.check_out} ({booking.nights} nights)",
        f"  • Guests ({booking.guest_count}): {', '.join(booking.guest_names)}",
        f"  • Privilege: {_prettify(booking.guest_privilege.value)}",
        f"  • Created by: {booking.created_by}",
    ]
    if booking.special_requests:
        lines.append(f"  • Special requests: {booking.special_requests}")
    return "\n".join(lines)


def _as_date(value: datetime) -> date:
    return value.date()


def _engine(ctx: click.Context) -> BookingEngine:
    return ctx.find_object(BookingEngine)


@click.group()
@click.pass_context
def main(ctx: click.Context) -> None:
    """Hotel booking console: rooms, stays and availability."""
    if ctx.obj is None:
        init_db()
        ctx.obj = BookingEngine(SqlRoomRepository(SessionLocal), SqlBookingRepository(SessionLocal))


@main.command("list-rooms")
@click.pass_context
def list_rooms(ctx: click.Context) -> None:
    """List all rooms."""
    rooms = _engine(ctx).list_rooms()
    if not rooms:
        click.echo("No rooms found.")
        return
    click.echo("Rooms:")
    for room in rooms:
        click.echo(format_room(room))
        click.echo()


@main.command("add-room")
@click.option("--number", "room_number", type=click.IntRange(min=1), required=True)
@click.option(
    "--type",
    "room_type",
    type=click.Choice([t.value for t in RoomType], case_sensitive=False),
    required=True,
)
@click.option("--max-guests", type=click.IntRange(min=1), required=True)
@click.option("--balcony/--no-balcony", default=False)
@click.option("--beach-view/--no-beach-view", default=False)
@click.option("--air-conditioning/--no-air-conditioning", default=False)
@click.pass_context
def add_room(
    ctx: click.Context,
    room_number: int,
    room_type: str,
    max_guests: int,
    balcony: bool,
    beach_view: bool,
    air_conditioning: bool,
) -> None:
    """Add a new room."""
    new_room = NewRoom(
        room_number=room_number,
        room_type=RoomType(room_type.upper()),
        max_guests=max_guests,
        has_balcony=balcony,
        has_beach_view=beach_view,
        has_air_conditioning=air_conditioning,
    )
    try:
        room = _engine(ctx).register_room(new_room)
    except HotelError as exc:
        raise click.ClickException(f"Room not created: {exc}") from exc
    click.echo(f"Room successfully created (ID={room.id}).")


@main.command("list-bookings")
@click.argument("room_number", type=int)
@click.pass_context
def list_bookings(ctx: click.Context, room_number: int) -> None:
    """List bookings for the room with ROOM_NUMBER."""
    engine = _engine(ctx)
    try:
        room = engine.get_room_by_number(room_number)
    except HotelError as exc:
        raise click.ClickException(str(exc)) from exc
    bookings = engine.list_bookings_for_room(room.id)
    if not bookings:
        click.echo(f"No bookings for room {room_number}")
        return
    click.echo(f"Bookings for room {room_number}:")
    for booking in bookings:
        click.echo(format_booking(booking))
        click.echo()


@main.command("book")
@click.argument("room_number", type=int)
@click.option("--check-in", type=ISO_DATE, required=True, help="YYYY-MM-DD")
@click.option("--check-out", type=ISO_DATE, required=True, help="YYYY-MM-DD")
@click.option("--guest", "guests", multiple=True, required=True, help="Guest name; repeat once per guest.")
@click.option("--created-by", default="FRONT_DESK", show_default=True)
@click.option(
    "--privilege",
    type=click.Choice([p.value for p in GuestPrivilege], case_sensitive=False),
    default=GuestPrivilege.STANDARD.value,
    show_default=True,
)
@click.option("--requests", "special_requests", default=None)
@click.pass_context
def book(
    ctx: click.Context,
    room_number: int,
    check_in: datetime,
    check_out: datetime,
    guests: Tuple[str, ...],
    created_by: str,
    privilege: str,
    special_requests: Optional[str],
) -> None:
    """Create a new booking for the room with ROOM_NUMBER."""
    names = [g.strip() for g in guests]
    if any(not n for n in names):
        raise click.ClickException("Name cannot be empty. Booking cancelled.")

    engine = _engine(ctx)
    try:
        room = engine.get_room_by_number(room_number)
        booking = engine.create_booking(
            room_id=room.id,
            check_in=_as_date(check_in),
            check_out=_as_date(check_out),
            guest_count=len(names),
            guest_names=names,
            created_by=created_by,
            privilege=GuestPrivilege(privilege.upper()),
            special_requests=special_requests or None,
        )
    except HotelError as exc:
        raise click.ClickException(f"Could not create booking: {exc}") from exc
    click.echo("Booking created:")
    click.echo(format_booking(booking))


@main.command("availability")
@click.argument("room_number", type=int)
@click.option("--check-in", type=ISO_DATE, required=True, help="YYYY-MM-DD")
@click.option("--check-out", type=ISO_DATE, required=True, help="YYYY-MM-DD")
@click.pass_context
def availability(ctx: click.Context, room_number: int, check_in: datetime, check_out: datetime) -> None:
    """Check whether the room with ROOM_NUMBER is free for a stay."""
    engine = _engine(ctx)
    start, end = _as_date(check_in), _as_date(check_out)
    try:
        room = engine.get_room_by_number(room_number)
        available = engine.is_room_available(room.id, start, end)
    except HotelError as exc:
        raise click.ClickException(str(exc)) from exc
    verdict = "IS" if available else "is NOT"
    click.echo(f"Room {room_number} {verdict} available between {start} and {end}")


if __name__ == "__main__":
    main()
