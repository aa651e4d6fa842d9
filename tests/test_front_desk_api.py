import logging
from pathlib import Path
from unittest.mock import patch

from hotel.config import get_settings
from hotel.errors import StorageError

ROOM_101 = {
    "room_number": 101,
    "room_type": "DOUBLE",
    "max_guests": 2,
    "has_balcony": True,
    "has_beach_view": False,
    "has_air_conditioning": True,
}


def booking_payload(room_id: int, check_in: str, check_out: str, names: list[str], **overrides) -> dict:
    payload = {
        "room_id": room_id,
        "check_in": check_in,
        "check_out": check_out,
        "guest_count": len(names),
        "guest_names": names,
        "created_by": "FRONT_DESK",
        "guest_privilege": "STANDARD",
        "special_requests": "",
    }
    payload.update(overrides)
    return payload


def create_room(client, **overrides) -> dict:
    response = client.post("/rooms", json={**ROOM_101, **overrides})
    assert response.status_code == 201
    return response.json()


def test_health(front_desk_client):
    response = front_desk_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "front_desk"}


def test_room_registration_and_lookup(front_desk_client):
    room = create_room(front_desk_client)
    assert room["id"] >= 1
    assert room["room_type"] == "DOUBLE"

    by_id = front_desk_client.get(f"/rooms/{room['id']}")
    assert by_id.status_code == 200
    assert by_id.json() == room

    by_number = front_desk_client.get("/rooms/by-number/101")
    assert by_number.status_code == 200
    assert by_number.json()["id"] == room["id"]

    assert front_desk_client.get("/rooms/999").status_code == 404
    assert front_desk_client.get("/rooms/by-number/999").status_code == 404


def test_duplicate_room_number_conflict(front_desk_client):
    create_room(front_desk_client)

    response = front_desk_client.post("/rooms", json={**ROOM_101, "room_type": "SUITE"})
    assert response.status_code == 409
    assert "already exists" in response.json()["detail"]


def test_invalid_room_payload(front_desk_client):
    response = front_desk_client.post("/rooms", json={**ROOM_101, "max_guests": 0})
    assert response.status_code == 422


def test_room_list_cache_refreshes_on_create(front_desk_client):
    assert front_desk_client.get("/rooms").json() == []

    create_room(front_desk_client, room_number=202)
    create_room(front_desk_client, room_number=101)

    rooms = front_desk_client.get("/rooms").json()
    assert [r["room_number"] for r in rooms] == [101, 202]


def test_booking_flow(front_desk_client):
    room_id = create_room(front_desk_client)["id"]

    first = front_desk_client.post("/bookings", json=booking_payload(room_id, "2024-07-01", "2024-07-05", ["A", "B"]))
    assert first.status_code == 201
    data = first.json()
    assert data["id"] >= 1
    assert data["guest_names"] == ["A", "B"]
    assert data["check_in"] == "2024-07-01"
    assert data["check_out"] == "2024-07-05"
    assert data["nights"] == 4
    assert data["guest_privilege"] == "STANDARD"
    assert "created_at" in data

    overlap = front_desk_client.post(
        "/bookings",
        json=booking_payload(room_id, "2024-07-03", "2024-07-06", ["C"], created_by="ONLINE"),
    )
    assert overlap.status_code == 409
    assert "not available" in overlap.json()["detail"]

    turnover = front_desk_client.post(
        "/bookings",
        json=booking_payload(room_id, "2024-07-05", "2024-07-08", ["C"], created_by="ONLINE"),
    )
    assert turnover.status_code == 201

    room_bookings = front_desk_client.get(f"/rooms/{room_id}/bookings")
    assert room_bookings.status_code == 200
    assert [b["check_in"] for b in room_bookings.json()] == ["2024-07-01", "2024-07-05"]

    fetched = front_desk_client.get(f"/bookings/{data['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["guest_names"] == ["A", "B"]

    assert len(front_desk_client.get("/bookings").json()) == 2


def test_booking_for_unknown_room(front_desk_client):
    response = front_desk_client.post("/bookings", json=booking_payload(999, "2024-07-01", "2024-07-05", ["A"]))
    assert response.status_code == 404
    assert "999" in response.json()["detail"]


def test_booking_validation_errors(front_desk_client):
    room_id = create_room(front_desk_client)["id"]

    over_capacity = front_desk_client.post(
        "/bookings", json=booking_payload(room_id, "2024-07-01", "2024-07-05", ["A", "B", "C"])
    )
    assert over_capacity.status_code == 400
    assert "capacity" in over_capacity.json()["detail"]

    mismatch = front_desk_client.post(
        "/bookings", json=booking_payload(room_id, "2024-07-01", "2024-07-05", ["Alice"], guest_count=2)
    )
    assert mismatch.status_code == 400

    bad_dates = front_desk_client.post(
        "/bookings", json=booking_payload(room_id, "2024-07-05", "2024-07-05", ["A"])
    )
    assert bad_dates.status_code == 400

    blank_creator = front_desk_client.post(
        "/bookings", json=booking_payload(room_id, "2024-07-01", "2024-07-05", ["A"], created_by="  ")
    )
    assert blank_creator.status_code == 400

    assert front_desk_client.get("/bookings").json() == []


def test_availability_endpoint(front_desk_client):
    room_id = create_room(front_desk_client)["id"]
    front_desk_client.post("/bookings", json=booking_payload(room_id, "2024-07-01", "2024-07-05", ["A"]))

    busy = front_desk_client.get(
        "/bookings/availability", params={"room_id": room_id, "check_in": "2024-07-03", "check_out": "2024-07-06"}
    )
    assert busy.status_code == 200
    assert busy.json() == {"room_id": room_id, "check_in": "2024-07-03", "check_out": "2024-07-06", "available": False}

    free = front_desk_client.get(
        "/bookings/availability", params={"room_id": room_id, "check_in": "2024-07-05", "check_out": "2024-07-08"}
    )
    assert free.json()["available"] is True

    inverted = front_desk_client.get(
        "/bookings/availability", params={"room_id": room_id, "check_in": "2024-07-08", "check_out": "2024-07-05"}
    )
    assert inverted.status_code == 400


def test_missing_booking(front_desk_client):
    response = front_desk_client.get("/bookings/12345")
    assert response.status_code == 404


def test_room_bookings_for_unknown_room(front_desk_client):
    assert front_desk_client.get("/rooms/999/bookings").status_code == 404


def test_storage_failure_is_503(front_desk_client):
    with patch("hotel.repositories.SqlBookingRepository.find_all", side_effect=StorageError("Failed to list all bookings")):
        response = front_desk_client.get("/bookings")

    assert response.status_code == 503
    assert response.json()["detail"] == "Failed to list all bookings"


def test_requests_are_audit_logged(front_desk_client):
    front_desk_client.get("/health")

    logger = logging.getLogger("audit.front_desk")
    for handler in logger.handlers:
        handler.flush()
    log_file = Path(get_settings().log_dir) / "front_desk.log"

    last_line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
    assert "GET /health | status=200" in last_line
