"""SQLAlchemy models backing the room and booking stores."""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, Enum as SqlEnum, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base
from .domain import GuestPrivilege, RoomType


class RoomRecord(Base):
    __tablename__ = "hotel_rooms"
    __table_args__ = (CheckConstraint("max_guests > 0", name="ck_hotel_rooms_max_guests"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    room_number: Mapped[int] = mapped_column(Integer, unique=True, index=True)
    room_type: Mapped[RoomType] = mapped_column(SqlEnum(RoomType, native_enum=False, length=20))
    max_guests: Mapped[int] = mapped_column(Integer)
    has_balcony: Mapped[bool] = mapped_column(Boolean, default=False)
    has_beach_view: Mapped[bool] = mapped_column(Boolean, default=False)
    has_air_conditioning: Mapped[bool] = mapped_column(Boolean, default=False)

    bookings: Mapped[List["BookingRecord"]] = relationship(back_populates="room")


class BookingRecord(Base):
    __tablename__ = "hotel_bookings"
    __table_args__ = (CheckConstraint("guest_count > 0", name="ck_hotel_bookings_guest_count"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    room_id: Mapped[int] = mapped_column(ForeignKey("hotel_rooms.id", ondelete="CASCADE"), index=True)
    check_in_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    check_out_date: Mapped[date] = mapped_column(Date, nullable=False)
    guest_count: Mapped[int] = mapped_column(Integer)
    # JSON array so a name containing any delimiter still round-trips
    guest_names: Mapped[list[str]] = mapped_column(JSON, default=list)
    created_by: Mapped[str] = mapped_column(String(100))
    guest_privilege: Mapped[GuestPrivilege] = mapped_column(SqlEnum(GuestPrivilege, native_enum=False, length=20))
    special_requests: Mapped[Optional[str]] = mapped_column(Text, default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    room: Mapped[RoomRecord] = relationship(back_populates="bookings")
