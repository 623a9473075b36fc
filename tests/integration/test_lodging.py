import re
import uuid
from decimal import Decimal

import pytest

from eventdesk.db import models


@pytest.fixture
def stay(client, org_admin, published_event, ticket_factory, registration_factory):
    """A hotel with one two-room type and a registration ready to book it."""
    base = f"/api/events/{published_event.id}/hotels"
    hotel = client.post(base, json={"name": "Hotel Adlon", "stars": 5}, headers=org_admin.headers).json()
    room = client.post(
        f"{base}/{hotel['id']}/rooms",
        json={"name": "Double", "price_per_night": "120.00", "total_rooms": 2, "capacity": 2},
        headers=org_admin.headers,
    ).json()
    ticket = ticket_factory(published_event)
    registration = registration_factory(published_event, ticket)
    return {"hotel": hotel, "room": room, "ticket": ticket, "registration": registration}


def _hotels(event, suffix=""):
    return f"/api/events/{event.id}/hotels{suffix}"


def _bookings(event, suffix=""):
    return f"/api/events/{event.id}/accommodations{suffix}"


def _book(client, headers, event, registration, room, **extra):
    body = {
        "registration_id": str(registration.id),
        "room_type_id": room["id"],
        "check_in": "2026-04-14T15:00:00Z",
        "check_out": "2026-04-16T11:00:00Z",
        **extra,
    }
    return client.post(_bookings(event), json=body, headers=headers)


def _room(db_session, room):
    db_session.expire_all()
    return db_session.get(models.RoomType, uuid.UUID(room["id"]))


# Hotels and rooms

def test_create_hotel(client, org_admin, published_event):
    resp = client.post(
        _hotels(published_event), json={"name": "Hotel Adlon", "stars": 5, "images": ["a.jpg"]}, headers=org_admin.headers
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["room_types"] == []
    assert body["booking_count"] == 0
    assert body["is_active"] is True
    assert body["images"] == ["a.jpg"]


def test_hotel_stars_are_bounded(client, org_admin, published_event):
    resp = client.post(_hotels(published_event), json={"name": "Palace", "stars": 6}, headers=org_admin.headers)
    assert resp.status_code == 422


def test_update_and_get_hotel(client, org_admin, published_event, stay):
    url = _hotels(published_event, f"/{stay['hotel']['id']}")
    resp = client.put(url, json={"contact_email": "desk@adlon.example"}, headers=org_admin.headers)
    assert resp.status_code == 200
    assert resp.json()["contact_email"] == "desk@adlon.example"
    assert resp.json()["name"] == "Hotel Adlon"

    detail = client.get(url, headers=org_admin.headers).json()
    assert [r["name"] for r in detail["room_types"]] == ["Double"]

    missing = client.get(_hotels(published_event, f"/{published_event.id}"), headers=org_admin.headers)
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Hotel not found"


def test_rooms_listed_by_price(client, org_admin, published_event, stay):
    rooms_url = _hotels(published_event, f"/{stay['hotel']['id']}/rooms")
    single = client.post(
        rooms_url, json={"name": "Single", "price_per_night": "80", "total_rooms": 5}, headers=org_admin.headers
    )
    assert single.status_code == 201
    assert single.json()["available_rooms"] == 5
    assert single.json()["capacity"] == 2
    assert single.json()["currency"] == "USD"

    listed = client.get(rooms_url, headers=org_admin.headers).json()
    assert [r["name"] for r in listed] == ["Single", "Double"]


def test_room_total_cannot_drop_below_booked(client, org_admin, published_event, stay):
    assert _book(client, org_admin.headers, published_event, stay["registration"], stay["room"]).status_code == 201
    url = _hotels(published_event, f"/{stay['hotel']['id']}/rooms/{stay['room']['id']}")

    resp = client.put(url, json={"total_rooms": 0}, headers=org_admin.headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Total rooms cannot be less than booked rooms (1)"

    blocked = client.delete(url, headers=org_admin.headers)
    assert blocked.status_code == 400
    assert blocked.json()["detail"] == "Cannot delete room type with existing bookings"

    hotel_blocked = client.delete(_hotels(published_event, f"/{stay['hotel']['id']}"), headers=org_admin.headers)
    assert hotel_blocked.status_code == 400
    assert hotel_blocked.json()["detail"] == "Cannot delete hotel with existing bookings"


def test_delete_room_and_hotel(client, org_admin, published_event, stay):
    hotel_url = _hotels(published_event, f"/{stay['hotel']['id']}")
    assert client.delete(f"{hotel_url}/rooms/{stay['room']['id']}", headers=org_admin.headers).status_code == 204
    assert client.delete(hotel_url, headers=org_admin.headers).status_code == 204
    assert client.get(_hotels(published_event), headers=org_admin.headers).json() == []


# Accommodations

def test_book_room_rounds_partial_nights_up(client, org_admin, published_event, stay, db_session):
    resp = _book(client, org_admin.headers, published_event, stay["registration"], stay["room"], guest_count=2)
    assert resp.status_code == 201, resp.text
    body = resp.json()
    # 15:00 on the 14th to 11:00 on the 16th is charged as two nights
    assert Decimal(body["total_price"]) == Decimal("240")
    assert re.fullmatch(r"ACC-[0-9A-Z]{8}", body["confirmation_no"])
    assert body["status"] == "PENDING"
    assert body["registration"]["attendee"]["email"] == "ada@example.com"
    assert body["room_type"]["hotel"]["name"] == "Hotel Adlon"
    assert _room(db_session, stay["room"]).booked_rooms == 1

    detail = client.get(
        f"/api/events/{published_event.id}/registrations/{stay['registration'].id}", headers=org_admin.headers
    ).json()
    assert detail["accommodation"]["confirmation_no"] == body["confirmation_no"]


def test_booking_rules(client, org_admin, published_event, stay, registration_factory):
    headers = org_admin.headers
    registration, room = stay["registration"], stay["room"]

    too_many = _book(client, headers, published_event, registration, room, guest_count=3)
    assert too_many.status_code == 400
    assert too_many.json()["detail"] == "Guest count exceeds room capacity (2)"

    backwards = _book(
        client, headers, published_event, registration, room,
        check_in="2026-04-16T11:00:00Z", check_out="2026-04-16T11:00:00Z",
    )
    assert backwards.status_code == 400
    assert backwards.json()["detail"] == "Check-out must be after check-in"

    assert _book(client, headers, published_event, registration, room).status_code == 201
    again = _book(client, headers, published_event, registration, room)
    assert again.status_code == 400
    assert again.json()["detail"] == "Registration already has accommodation"

    second = registration_factory(published_event, stay["ticket"], email="b@example.com")
    assert _book(client, headers, published_event, second, room).status_code == 201
    third = registration_factory(published_event, stay["ticket"], email="c@example.com")
    full = _book(client, headers, published_event, third, room)
    assert full.status_code == 400
    assert full.json()["detail"] == "No rooms available"


def test_booking_needs_known_registration_and_room(client, org_admin, published_event, stay):
    body = {
        "registration_id": str(published_event.id),
        "room_type_id": stay["room"]["id"],
        "check_in": "2026-04-14T15:00:00Z",
        "check_out": "2026-04-15T11:00:00Z",
    }
    unknown_registration = client.post(_bookings(published_event), json=body, headers=org_admin.headers)
    assert unknown_registration.status_code == 404
    assert unknown_registration.json()["detail"] == "Registration not found"

    body["registration_id"] = str(stay["registration"].id)
    body["room_type_id"] = str(published_event.id)
    unknown_room = client.post(_bookings(published_event), json=body, headers=org_admin.headers)
    assert unknown_room.status_code == 404
    assert unknown_room.json()["detail"] == "Room type not found or inactive"


def test_cancel_and_move_booking(client, org_admin, published_event, stay, db_session):
    suite = client.post(
        _hotels(published_event, f"/{stay['hotel']['id']}/rooms"),
        json={"name": "Suite", "price_per_night": "300", "total_rooms": 1, "capacity": 4},
        headers=org_admin.headers,
    ).json()
    booking = _book(client, org_admin.headers, published_event, stay["registration"], stay["room"]).json()
    url = _bookings(published_event, f"/{booking['id']}")

    moved = client.put(url, json={"room_type_id": suite["id"], "guest_count": 3}, headers=org_admin.headers)
    assert moved.status_code == 200, moved.text
    assert Decimal(moved.json()["total_price"]) == Decimal("600")
    assert _room(db_session, stay["room"]).booked_rooms == 0
    assert _room(db_session, suite).booked_rooms == 1

    cancelled = client.put(url, json={"status": "CANCELLED"}, headers=org_admin.headers)
    assert cancelled.json()["status"] == "CANCELLED"
    assert _room(db_session, suite).booked_rooms == 0

    longer = client.put(
        url, json={"status": "CONFIRMED", "check_out": "2026-04-17T11:00:00Z"}, headers=org_admin.headers
    )
    assert longer.status_code == 200
    assert Decimal(longer.json()["total_price"]) == Decimal("900")
    assert _room(db_session, suite).booked_rooms == 1


def test_list_accommodations_by_status(client, org_admin, published_event, stay):
    booking = _book(client, org_admin.headers, published_event, stay["registration"], stay["room"]).json()
    client.put(_bookings(published_event, f"/{booking['id']}"), json={"status": "CONFIRMED"}, headers=org_admin.headers)

    confirmed = client.get(_bookings(published_event), params={"status": "CONFIRMED"}, headers=org_admin.headers)
    assert [b["id"] for b in confirmed.json()] == [booking["id"]]
    pending = client.get(_bookings(published_event), params={"status": "PENDING"}, headers=org_admin.headers)
    assert pending.json() == []


def test_delete_booking_releases_room(client, org_admin, published_event, stay, db_session):
    booking = _book(client, org_admin.headers, published_event, stay["registration"], stay["room"]).json()
    resp = client.delete(_bookings(published_event, f"/{booking['id']}"), headers=org_admin.headers)
    assert resp.status_code == 204
    assert _room(db_session, stay["room"]).booked_rooms == 0


def test_deleting_registration_releases_its_room(client, org_admin, published_event, stay, db_session):
    _book(client, org_admin.headers, published_event, stay["registration"], stay["room"])
    resp = client.delete(
        f"/api/events/{published_event.id}/registrations/{stay['registration'].id}", headers=org_admin.headers
    )
    assert resp.status_code == 204
    assert _room(db_session, stay["room"]).booked_rooms == 0
    assert db_session.query(models.Accommodation).count() == 0
