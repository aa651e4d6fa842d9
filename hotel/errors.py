"""Exception hierarchy raised by the booking engine and the stores."""


class HotelError(Exception):
    """Base class for every error raised by the hotel package."""


class InvalidBookingRequest(HotelError, ValueError):
    """Input is malformed or refers to something that does not exist."""


class RoomNotFoundError(InvalidBookingRequest):
    def __init__(self, message: str, *, room_id: int | None = None, room_number: int | None = None) -> None:
        super().__init__(message)
        self.room_id = room_id
        self.room_number = room_number


class DuplicateRoomNumberError(InvalidBookingRequest):
    def __init__(self, room_number: int, existing_id: int | None = None) -> None:
        message = f"A room with number {room_number} already exists"
        if existing_id is not None:
            message += f" (ID={existing_id})"
        super().__init__(message)
        self.room_number = room_number
        self.existing_id = existing_id


class BookingNotFoundError(HotelError, LookupError):
    def __init__(self, booking_id: int) -> None:
        super().__init__(f"Booking with id {booking_id} does not exist")
        self.booking_id = booking_id


class RoomUnavailableError(HotelError):
    """The request is well formed but overlaps an existing booking."""


class StorageError(HotelError):
    """The underlying store could not complete a read or write."""


class AlreadyPersistedError(StorageError):
    """Stores are create-only; an entity that already has an id cannot be saved again."""
