"""Pydantic schemas for the front desk HTTP API."""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .domain import GuestPrivilege, RoomType


class RoomBase(BaseModel):
    room_number: int = Field(..., ge=1)
    room_type: RoomType
    max_guests: int = Field(..., ge=1)
    has_balcony: bool = False
    has_beach_view: bool = False
    has_air_conditioning: bool = False


class RoomCreate(RoomBase):
    pass


class RoomRead(RoomBase):
    id: int

    model_config = {"from_attributes": True}


class BookingBase(BaseModel):
    room_id: int
    check_in: date
    check_out: date
    guest_count: int
    guest_names: List[str]
    created_by: str = Field(..., max_length=100)
    guest_privilege: GuestPrivilege
    special_requests: Optional[str] = Field(default=None, max_length=1000)


class BookingCreate(BookingBase):
    """Stay request; date order, party size and capacity are checked by the engine."""


class BookingRead(BookingBase):
    id: int
    nights: int
    created_at: datetime

    model_config = {"from_attributes": True}


class AvailabilityRead(BaseModel):
    room_id: int
    check_in: date
    check_out: date
    available: bool
