import logging
from contextlib import asynccontextmanager
from datetime import date
from functools import lru_cache
from typing import List

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hotel.booking_engine import BookingEngine
from hotel.cache import SimpleTTLCache
from hotel.config import get_settings
from hotel.database import SessionLocal, init_db
from hotel.domain import Booking, NewRoom, Room
from hotel.errors import (
    BookingNotFoundError,
    DuplicateRoomNumberError,
    HotelError,
    InvalidBookingRequest,
    RoomNotFoundError,
    RoomUnavailableError,
    StorageError,
)
from hotel.logging_middleware import add_audit_middleware
from hotel.rate_limit import apply_rate_limiter, limiter
from hotel.repositories import SqlBookingRepository, SqlRoomRepository
from hotel.schemas import AvailabilityRead, BookingCreate, BookingRead, RoomCreate, RoomRead

SERVICE_NAME = "front_desk"

logger = logging.getLogger(__name__)
settings = get_settings()
room_list_cache: SimpleTTLCache[List[Room]] = SimpleTTLCache(ttl=settings.room_cache_ttl)
_ROOM_LIST_KEY = "rooms:all"


@lru_cache
def get_booking_engine() -> BookingEngine:
    """Process-wide engine so every request shares the same per-room locks."""
    return BookingEngine(SqlRoomRepository(SessionLocal), SqlBookingRepository(SessionLocal))


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.run_db_migrations:
        init_db()
    yield


def _error_response(status_code: int, exc: HotelError) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def register_error_handlers(fastapi_app: FastAPI) -> None:
    @fastapi_app.exception_handler(RoomNotFoundError)
    async def room_not_found(_: Request, exc: RoomNotFoundError) -> JSONResponse:
        return _error_response(status.HTTP_404_NOT_FOUND, exc)

    @fastapi_app.exception_handler(BookingNotFoundError)
    async def booking_not_found(_: Request, exc: BookingNotFoundError) -> JSONResponse:
        return _error_response(status.HTTP_404_NOT_FOUND, exc)

    @fastapi_app.exception_handler(DuplicateRoomNumberError)
    async def duplicate_room(_: Request, exc: DuplicateRoomNumberError) -> JSONResponse:
        return _error_response(status.HTTP_409_CONFLICT, exc)

    @fastapi_app.exception_handler(InvalidBookingRequest)
    async def invalid_request(_: Request, exc: InvalidBookingRequest) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, exc)

    @fastapi_app.exception_handler(RoomUnavailableError)
    async def room_unavailable(request: Request, exc: RoomUnavailableError) -> JSONResponse:
        logger.info("Booking conflict on %s: %s", request.url.path, exc)
        return _error_response(status.HTTP_409_CONFLICT, exc)

    @fastapi_app.exception_handler(StorageError)
    async def storage_failure(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
        return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, exc)


def create_app() -> FastAPI:
    fastapi_app = FastAPI(title="Front Desk Service", version="0.1.0", lifespan=lifespan)
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    apply_rate_limiter(fastapi_app)
    add_audit_middleware(fastapi_app, SERVICE_NAME)
    register_error_handlers(fastapi_app)
    return fastapi_app


app = create_app()


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok", "service": SERVICE_NAME}


# ---------- Rooms ----------


@app.post("/rooms", response_model=RoomRead, status_code=status.HTTP_201_CREATED, tags=["rooms"])
@limiter.limit("10/minute")
def add_room(
    request: Request,
    room_in: RoomCreate,
    engine: BookingEngine = Depends(get_booking_engine),
) -> Room:
    room = engine.register_room(NewRoom(**room_in.model_dump()))
    room_list_cache.clear()
    return room


@app.get("/rooms", response_model=List[RoomRead], tags=["rooms"])
def list_rooms(engine: BookingEngine = Depends(get_booking_engine)) -> List[Room]:
    return room_list_cache.get_or_load(_ROOM_LIST_KEY, engine.list_rooms)


@app.get("/rooms/by-number/{room_number}", response_model=RoomRead, tags=["rooms"])
def get_room_by_number(room_number: int, engine: BookingEngine = Depends(get_booking_engine)) -> Room:
    return engine.get_room_by_number(room_number)


@app.get("/rooms/{room_id}", response_model=RoomRead, tags=["rooms"])
def get_room(room_id: int, engine: BookingEngine = Depends(get_booking_engine)) -> Room:
    return engine.get_room(room_id)


@app.get("/rooms/{room_id}/bookings", response_model=List[BookingRead], tags=["rooms"])
def list_room_bookings(room_id: int, engine: BookingEngine = Depends(get_booking_engine)) -> List[Booking]:
    engine.get_room(room_id)
    return engine.list_bookings_for_room(room_id)


# ---------- Bookings ----------


@app.get("/bookings", response_model=List[BookingRead], tags=["bookings"])
def list_bookings(engine: BookingEngine = Depends(get_booking_engine)) -> List[Booking]:
    return engine.list_bookings()


@app.get("/bookings/availability", response_model=AvailabilityRead, tags=["bookings"])
@limiter.limit("40/minute")
def check_availability(
    request: Request,
    room_id: int,
    check_in: date = Query(...),
    check_out: date = Query(...),
    engine: BookingEngine = Depends(get_booking_engine),
) -> AvailabilityRead:
    available = engine.is_room_available(room_id, check_in, check_out)
    return AvailabilityRead(room_id=room_id, check_in=check_in, check_out=check_out, available=available)


@app.get("/bookings/{booking_id}", response_model=BookingRead, tags=["bookings"])
def get_booking(booking_id: int, engine: BookingEngine = Depends(get_booking_engine)) -> Booking:
    return engine.get_booking(booking_id)


@app.post("/bookings", response_model=BookingRead, status_code=status.HTTP_201_CREATED, tags=["bookings"])
@limiter.limit("20/minute")
def create_booking(
    request: Request,
    booking_in: BookingCreate,
    engine: BookingEngine = Depends(get_booking_engine),
) -> Booking:
    return engine.create_booking(
        room_id=booking_in.room_id,
        check_in=booking_in.check_in,
        check_out=booking_in.check_out,
        guest_count=booking_in.guest_count,
        guest_names=booking_in.guest_names,
        created_by=booking_in.created_by,
        privilege=booking_in.guest_privilege,
        special_requests=booking_in.special_requests,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.front_desk_port)
