import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_hotel.db")
os.environ.setdefault("RATE_LIMITING_ENABLED", "false")
os.environ.setdefault("LOG_DIR", "./test_logs")

from hotel.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from hotel import models  # noqa: E402,F401
from hotel.booking_engine import BookingEngine  # noqa: E402
from hotel.database import Base, SessionLocal, engine  # noqa: E402
from hotel.domain import NewRoom, Room, RoomType  # noqa: E402
from hotel.repositories import (  # noqa: E402
    InMemoryBookingRepository,
    InMemoryRoomRepository,
    SqlBookingRepository,
    SqlRoomRepository,
)
from services.front_desk.app import app as front_desk_app  # noqa: E402
from services.front_desk.app import get_booking_engine, room_list_cache  # noqa: E402

@pytest.fixture(autouse=True, scope="function")
def _create_test_database() -> Generator[None, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    room_list_cache.clear()
    get_booking_engine.cache_clear()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def memory_engine() -> BookingEngine:
    return BookingEngine(InMemoryRoomRepository(), InMemoryBookingRepository())


@pytest.fixture()
def sql_engine() -> BookingEngine:
    return BookingEngine(SqlRoomRepository(SessionLocal), SqlBookingRepository(SessionLocal))


@pytest.fixture(params=["memory", "sql"])
def booking_engine(request, memory_engine, sql_engine) -> BookingEngine:
    """The engine over each store backing, so rules are checked against both."""
    return memory_engine if request.param == "memory" else sql_engine


@pytest.fixture()
def room_101(booking_engine: BookingEngine) -> Room:
    return booking_engine.register_room(NewRoom(room_number=101, room_type=RoomType.DOUBLE, max_guests=2))


@pytest.fixture()
def front_desk_client() -> Generator[TestClient, None, None]:
    with TestClient(front_desk_app) as client:
        yield client
