"""Domain entities for rooms and bookings.

Each entity comes in two shapes: an unsaved ``New*`` model without identity,
and the saved model that carries the id assigned by a store. Stores accept
the former and return the latter, so "has this been persisted?" is answered
by the type rather than by a nullable id.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field


class RoomType(str, Enum):
    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    SUITE = "SUITE"
    DELUXE = "DELUXE"


class GuestPrivilege(str, Enum):
    STANDARD = "STANDARD"
    LOYALTY = "LOYALTY"
    VIP = "VIP"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NewRoom(BaseModel):
    model_config = ConfigDict(frozen=True)

    room_number: int = Field(..., gt=0)
    room_type: RoomType
    max_guests: int = Field(..., gt=0)
    has_balcony: bool = False
    has_beach_view: bool = False
    has_air_conditioning: bool = False


class Room(NewRoom):
    id: int


class NewBooking(BaseModel):
    """A validated stay that has not been written to a store yet.

    Built only by :meth:`hotel.booking_engine.BookingEngine.create_booking`,
    which checks the cross-field rules (guest count against names and room
    capacity, date order, overlap) before constructing it.
    """

    model_config = ConfigDict(frozen=True)

    room_id: int
    check_in: date
    check_out: date
    guest_count: int = Field(..., gt=0)
    guest_names: Tuple[str, ...]
    created_by: str
    guest_privilege: GuestPrivilege
    special_requests: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days


class Booking(NewBooking):
    id: int
