"""Room and booking stores used by the booking engine.

Both stores are create-only: ``save`` takes an unsaved entity, assigns its id
and returns the saved form. Two backings are provided, a SQLAlchemy one for
the running service and a dict-backed one for tests and scripts.
"""
from __future__ import annotations

import itertools
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .domain import Booking, NewBooking, NewRoom, Room
from .errors import AlreadyPersistedError, DuplicateRoomNumberError, StorageError
from .models import BookingRecord, RoomRecord


class RoomRepository(ABC):
    @abstractmethod
    def save(self, room: NewRoom) -> Room:
        """Persist a new room and return it with its assigned id."""

    @abstractmethod
    def find_by_id(self, room_id: int) -> Optional[Room]:
        ...

    @abstractmethod
    def find_by_room_number(self, room_number: int) -> Optional[Room]:
        ...

    @abstractmethod
    def find_all(self) -> List[Room]:
        """Return every room ordered by room number."""


class BookingRepository(ABC):
    @abstractmethod
    def save(self, booking: NewBooking) -> Booking:
        """Persist a new booking and return it with its assigned id."""

    @abstractmethod
    def find_by_id(self, booking_id: int) -> Optional[Booking]:
        ...

    @abstractmethod
    def find_all(self) -> List[Booking]:
        """Return every booking ordered by check-in date."""

    @abstractmethod
    def find_by_room_id(self, room_id: int) -> List[Booking]:
        """Return the bookings of one room ordered by check-in date."""


def _reject_saved(entity: NewRoom | NewBooking) -> None:
    if isinstance(entity, (Room, Booking)):
        kind = "room" if isinstance(entity, Room) else "booking"
        raise AlreadyPersistedError(f"Updating an existing {kind} (id={entity.id}) is not supported")


def _by_check_in(booking: Booking) -> tuple:
    return (booking.check_in, booking.id)


# ---------- In-memory stores ----------


class InMemoryRoomRepository(RoomRepository):
    def __init__(self) -> None:
        self._rooms: Dict[int, Room] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def save(self, room: NewRoom) -> Room:
        _reject_saved(room)
        with self._lock:
            for existing in self._rooms.values():
                if existing.room_number == room.room_number:
                    raise DuplicateRoomNumberError(room.room_number, existing.id)
            saved = Room(id=next(self._ids), **room.model_dump())
            self._rooms[saved.id] = saved
        return saved

    def find_by_id(self, room_id: int) -> Optional[Room]:
        return self._rooms.get(room_id)

    def find_by_room_number(self, room_number: int) -> Optional[Room]:
        return next((r for r in self._rooms.values() if r.room_number == room_number), None)

    def find_all(self) -> List[Room]:
        return sorted(self._rooms.values(), key=lambda r: r.room_number)


class InMemoryBookingRepository(BookingRepository):
    def __init__(self) -> None:
        self._bookings: Dict[int, Booking] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def save(self, booking: NewBooking) -> Booking:
        _reject_saved(booking)
        with self._lock:
            saved = Booking(id=next(self._ids), **booking.model_dump())
            self._bookings[saved.id] = saved
        return saved

    def find_by_id(self, booking_id: int) -> Optional[Booking]:
        return self._bookings.get(booking_id)

    def find_all(self) -> List[Booking]:
        return sorted(self._bookings.values(), key=_by_check_in)

    def find_by_room_id(self, room_id: int) -> List[Booking]:
        return sorted((b for b in self._bookings.values() if b.room_id == room_id), key=_by_check_in)


# ---------- SQLAlchemy stores ----------


def _room_from_record(record: RoomRecord) -> Room:
    return Room(
        id=record.id,
        room_number=record.room_number,
        room_type=record.room_type,
        max_guests=record.max_guests,
        has_balcony=record.has_balcony,
        has_beach_view=record.has_beach_view,
        has_air_conditioning=record.has_air_conditioning,
    )


def _as_utc(value: datetime) -> datetime:
    # SQLite drops offsets, so timestamps are stored as UTC and naive values read as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _booking_from_record(record: BookingRecord) -> Booking:
    created_at = _as_utc(record.created_at)
    return Booking(
        id=record.id,
        room_id=record.room_id,
        check_in=record.check_in_date,
        check_out=record.check_out_date,
        guest_count=record.guest_count,
        guest_names=tuple(record.guest_names),
        created_by=record.created_by,
        guest_privilege=record.guest_privilege,
        special_requests=record.special_requests,
        created_at=created_at,
    )


class SqlRoomRepository(RoomRepository):
    """Room store over the ``hotel_rooms`` table, one session per call."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def save(self, room: NewRoom) -> Room:
        _reject_saved(room)
        record = RoomRecord(**room.model_dump())
        try:
            with self._session_factory() as db, db.begin():
                db.add(record)
                db.flush()
                saved = _room_from_record(record)
        except IntegrityError as exc:
            existing = self.find_by_room_number(room.room_number)
            if existing is not None:
                raise DuplicateRoomNumberError(room.room_number, existing.id) from exc
            raise StorageError(f"Failed to insert room {room.room_number}") from exc
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to insert room {room.room_number}") from exc
        return saved

    def find_by_id(self, room_id: int) -> Optional[Room]:
        try:
            with self._session_factory() as db:
                record = db.query(RoomRecord).filter(RoomRecord.id == room_id).first()
                return _room_from_record(record) if record else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to find room by id={room_id}") from exc

    def find_by_room_number(self, room_number: int) -> Optional[Room]:
        try:
            with self._session_factory() as db:
                record = db.query(RoomRecord).filter(RoomRecord.room_number == room_number).first()
                return _room_from_record(record) if record else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to find room by number={room_number}") from exc

    def find_all(self) -> List[Room]:
        try:
            with self._session_factory() as db:
                records = db.query(RoomRecord).order_by(RoomRecord.room_number).all()
                return [_room_from_record(r) for r in records]
        except SQLAlchemyError as exc:
            raise StorageError("Failed to list rooms") from exc


class SqlBookingRepository(BookingRepository):
    """Booking store over the ``hotel_bookings`` table, one session per call."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def save(self, booking: NewBooking) -> Booking:
        _reject_saved(booking)
        record = BookingRecord(
            room_id=booking.room_id,
            check_in_date=booking.check_in,
            check_out_date=booking.check_out,
            guest_count=booking.guest_count,
            guest_names=list(booking.guest_names),
            created_by=booking.created_by,
            guest_privilege=booking.guest_privilege,
            special_requests=booking.special_requests,
            created_at=_as_utc(booking.created_at),
        )
        try:
            with self._session_factory() as db, db.begin():
                db.add(record)
                db.flush()
                saved = _booking_from_record(record)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to insert booking for room_id={booking.room_id}") from exc
        return saved

    def find_by_id(self, booking_id: int) -> Optional[Booking]:
        try:
            with self._session_factory() as db:
                record = db.query(BookingRecord).filter(BookingRecord.id == booking_id).first()
                return _booking_from_record(record) if record else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to find booking by id={booking_id}") from exc

    def find_all(self) -> List[Booking]:
        try:
            with self._session_factory() as db:
                records = db.query(BookingRecord).order_by(BookingRecord.check_in_date, BookingRecord.id).all()
                return [_booking_from_record(r) for r in records]
        except SQLAlchemyError as exc:
            raise StorageError("Failed to list all bookings") from exc

    def find_by_room_id(self, room_id: int) -> List[Booking]:
        try:
            with self._session_factory() as db:
                records = (
                    db.query(BookingRecord)
                    .filter(BookingRecord.room_id == room_id)
                    .order_by(BookingRecord.check_in_date, BookingRecord.id)
                    .all()
                )
                return [_booking_from_record(r) for r in records]
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to list bookings for room_id={room_id}") from exc
