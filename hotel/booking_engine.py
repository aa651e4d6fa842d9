"""Booking validation and availability rules."""
from __future__ import annotations

import threading
from datetime import date
from typing import Dict, List, Optional, Sequence

from .domain import Booking, GuestPrivilege, NewBooking, NewRoom, Room
from .errors import (
    BookingNotFoundError,
    DuplicateRoomNumberError,
    InvalidBookingRequest,
    RoomNotFoundError,
    RoomUnavailableError,
)
from .repositories import BookingRepository, RoomRepository


def dates_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """
    Return True if the half-open ranges ``[start_a, end_a)`` and ``[start_b, end_b)`` overlap.

    A stay checking out on the day another checks in does not overlap it.
    """
    return start_a < end_b and end_a > start_b


def ensure_dates_valid(check_in: Optional[date], check_out: Optional[date]) -> None:
    if check_in is None or check_out is None:
        raise InvalidBookingRequest("check_in and check_out must not be empty")
    if not check_in < check_out:
        raise InvalidBookingRequest(f"check_in ({check_in}) must be before check_out ({check_out})")


class _RoomLocks:
    """Registry handing out one lock per room id."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[int, threading.Lock] = {}

    def for_room(self, room_id: int) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(room_id, threading.Lock())

    def __len__(self) -> int:
        return len(self._locks)


class BookingEngine:
    """Decides whether a stay may be booked and records it if so.

    The room is resolved first. The capacity check, availability check and
    the write of a new booking then run under a per-room lock, so two
    callers racing for the same room cannot both pass the availability
    check. Unknown rooms never get a lock.
    """

    def __init__(self, rooms: RoomRepository, bookings: BookingRepository) -> None:
        self.rooms = rooms
        self.bookings = bookings
        self._room_locks = _RoomLocks()

    # ---------- Availability ----------

    def is_room_available(self, room_id: int, check_in: date, check_out: date) -> bool:
        """
        Check whether no existing booking of a room overlaps the requested stay.

        The room is not looked up; an unknown room has no bookings and is
        therefore available.

        Parameters
        ----------
        room_id : int
            Room identifier.
        check_in : date
            First night of the stay (inclusive).
        check_out : date
            Departure day (exclusive).

        Returns
        -------
        bool
            False if at least one booking overlaps, True otherwise.

        Raises
        ------
        InvalidBookingRequest
            If a date is missing or check_in is not before check_out.
        """
        ensure_dates_valid(check_in, check_out)
        for existing in self.bookings.find_by_room_id(room_id):
            if dates_overlap(existing.check_in, existing.check_out, check_in, check_out):
                return False
        return True

    # ---------- Creation ----------

    def create_booking(
        self,
        room_id: int,
        check_in: date,
        check_out: date,
        guest_count: int,
        guest_names: Optional[Sequence[str]],
        created_by: Optional[str],
        privilege: Optional[GuestPrivilege],
        special_requests: Optional[str] = None,
    ) -> Booking:
        """
        Validate a stay request and save it as a new booking.

        Checks run in order and the first failure is raised; nothing is
        written unless every check passes.

        Returns
        -------
        Booking
            The saved booking carrying its generated id.

        Raises
        ------
        InvalidBookingRequest
            Bad dates, guest count, guest names, creator tag or privilege,
            or a guest count above the room capacity.
        RoomNotFoundError
            If the room does not exist.
        RoomUnavailableError
            If the stay overlaps an existing booking of the room.
        StorageError
            If the store fails to read or write.
        """
        ensure_dates_valid(check_in, check_out)

        if isinstance(guest_count, bool) or not isinstance(guest_count, int) or guest_count <= 0:
            raise InvalidBookingRequest("guest_count must be positive")

        if isinstance(guest_names, str):
            raise InvalidBookingRequest("guest_names must be a sequence of names, not a single string")

        if not guest_names:
            raise InvalidBookingRequest("guest_names must not be empty")

        if len(guest_names) != guest_count:
            raise InvalidBookingRequest(
                f"guest_count ({guest_count}) does not match guest_names size ({len(guest_names)})"
            )

        if created_by is None or not created_by.strip():
            raise InvalidBookingRequest("created_by must not be blank")

        if privilege is None:
            raise InvalidBookingRequest("guest_privilege must not be empty")

        # rooms are immutable once saved; resolve before locking
        room = self.get_room(room_id)

        with self._room_locks.for_room(room_id):
            if guest_count > room.max_guests:
                raise InvalidBookingRequest(
                    f"guest_count {guest_count} exceeds room capacity {room.max_guests}"
                )

            if not self.is_room_available(room_id, check_in, check_out):
                raise RoomUnavailableError(
                    f"Room {room.room_number} is not available between {check_in} and {check_out}"
                )

            booking = NewBooking(
                room_id=room_id,
                check_in=check_in,
                check_out=check_out,
                guest_count=guest_count,
                guest_names=tuple(guest_names),
                created_by=created_by,
                guest_privilege=privilege,
                special_requests=special_requests,
            )
            return self.bookings.save(booking)

    # ---------- Rooms ----------

    def register_room(self, room: NewRoom) -> Room:
        """Save a new room, refusing a room number that is already taken."""
        existing = self.rooms.find_by_room_number(room.room_number)
        if existing is not None:
            raise DuplicateRoomNumberError(room.room_number, existing.id)
        return self.rooms.save(room)

    def get_room(self, room_id: int) -> Room:
        room = self.rooms.find_by_id(room_id)
        if room is None:
            raise RoomNotFoundError(f"Room with id {room_id} does not exist", room_id=room_id)
        return room

    def get_room_by_number(self, room_number: int) -> Room:
        room = self.rooms.find_by_room_number(room_number)
        if room is None:
            raise RoomNotFoundError(f"No room found with number {room_number}", room_number=room_number)
        return room

    def list_rooms(self) -> List[Room]:
        return self.rooms.find_all()

    # ---------- Bookings ----------

    def get_booking(self, booking_id: int) -> Booking:
        booking = self.bookings.find_by_id(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    def list_bookings(self) -> List[Booking]:
        return self.bookings.find_all()

    def list_bookings_for_room(self, room_id: int) -> List[Booking]:
        return self.bookings.find_by_room_id(room_id)
