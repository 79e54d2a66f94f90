from fastapi.testclient import TestClient

from shareit_server import models


def test_create_item(client: TestClient, auth_headers, make_user):
    owner = make_user()
    item_data = {"name": "Drill", "description": "Cordless drill", "available": True}

    response = client.post("/items", json=item_data, headers=auth_headers(owner))

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Drill"
    assert data["available"] is True
    assert data["request_id"] is None
    assert "id" in data


def test_create_item_requires_fields(client, auth_headers, make_user):
    owner = make_user()

    missing_available = client.post("/items", json={"name": "Drill", "description": "x"}, headers=auth_headers(owner))
    blank_name = client.post(
        "/items", json={"name": "  ", "description": "x", "available": True}, headers=auth_headers(owner)
    )

    assert missing_available.status_code == 400
    assert blank_name.status_code == 400
    assert "Item name cannot be empty" in blank_name.json()["error"]


def test_create_item_unknown_owner(client, auth_headers):
    item_data = {"name": "Drill", "description": "Cordless drill", "available": True}
    response = client.post("/items", json=item_data, headers=auth_headers(9999))
    assert response.status_code == 404


def test_create_item_for_request(client, auth_headers, make_user, db_session):
    requestor = make_user()
    owner = make_user()
    request = models.ItemRequest(description="Need a ladder", requestor_id=requestor.id)
    db_session.add(request)
    db_session.commit()

    item_data = {"name": "Ladder", "description": "3m ladder", "available": True, "request_id": request.id}
    response = client.post("/items", json=item_data, headers=auth_headers(owner))
    missing = client.post("/items", json={**item_data, "request_id": 9999}, headers=auth_headers(owner))

    assert response.status_code == 201
    assert response.json()["request_id"] == request.id
    assert missing.status_code == 404


def test_update_item_by_owner(client, auth_headers, make_user, make_item):
    owner = make_user()
    item = make_item(owner)

    response = client.patch(f"/items/{item.id}", json={"available": False}, headers=auth_headers(owner))

    assert response.status_code == 200
    data = response.json()
    assert data["available"] is False
    # Untouched fields keep their values
    assert data["name"] == item.name
    assert data["description"] == item.description


def test_update_item_by_other_user(client, auth_headers, make_user, make_item):
    item = make_item(make_user())
    other = make_user()

    response = client.patch(f"/items/{item.id}", json={"name": "Mine now"}, headers=auth_headers(other))

    assert response.status_code == 404


def test_read_item_owner_sees_bookings(client, auth_headers, make_user, make_item, make_booking):
    owner = make_user()
    booker = make_user()
    item = make_item(owner)
    last = make_booking(item, booker, -48, -24, models.BookingStatus.APPROVED)
    upcoming = make_booking(item, booker, 24, 48, models.BookingStatus.APPROVED)

    owner_view = client.get(f"/items/{item.id}", headers=auth_headers(owner)).json()
    booker_view = client.get(f"/items/{item.id}", headers=auth_headers(booker)).json()

    assert owner_view["last_booking"] == {"id": last.id, "booker_id": booker.id}
    assert owner_view["next_booking"] == {"id": upcoming.id, "booker_id": booker.id}
    assert booker_view["last_booking"] is None
    assert booker_view["next_booking"] is None


def test_read_missing_item(client, auth_headers, make_user):
    response = client.get("/items/9999", headers=auth_headers(make_user()))
    assert response.status_code == 404
    assert response.json() == {"error": "Item not found"}


def test_read_owner_items(client, auth_headers, make_user, make_item):
    owner = make_user()
    first = make_item(owner, name="Drill")
    second = make_item(owner, name="Saw")
    make_item(make_user(), name="Ladder")

    response = client.get("/items", headers=auth_headers(owner))

    assert response.status_code == 200
    assert [i["id"] for i in response.json()] == [first.id, second.id]


def test_search_items(client, make_user, make_item):
    owner = make_user()
    drill = make_item(owner, name="Power Drill", description="Heavy duty")
    make_item(owner, name="Old drill", description="Broken", available=False)

    found = client.get("/items/search?text=dRiLl")
    blank = client.get("/items/search?text=")

    assert [i["id"] for i in found.json()] == [drill.id]
    assert blank.json() == []


# --- Comments ---

def test_comment_after_completed_booking(client, auth_headers, make_user, make_item, make_booking):
    owner = make_user()
    booker = make_user(name="Anna")
    item = make_item(owner)
    make_booking(item, booker, -48, -24, models.BookingStatus.APPROVED)

    response = client.post(f"/items/{item.id}/comment", json={"text": "Great drill"}, headers=auth_headers(booker))

    assert response.status_code == 201
    data = response.json()
    assert data["text"] == "Great drill"
    assert data["author_name"] == "Anna"

    item_view = client.get(f"/items/{item.id}", headers=auth_headers(owner)).json()
    assert [c["text"] for c in item_view["comments"]] == ["Great drill"]


def test_comment_without_booking(client, auth_headers, make_user, make_item):
    item = make_item(make_user())
    stranger = make_user()

    response = client.post(f"/items/{item.id}/comment", json={"text": "Nice"}, headers=auth_headers(stranger))

    assert response.status_code == 400
    assert response.json() == {"error": "User never booked this item"}


def test_comment_while_booking_not_finished(client, auth_headers, make_user, make_item, make_booking):
    item = make_item(make_user())
    booker = make_user()
    make_booking(item, booker, -1, 1, models.BookingStatus.APPROVED)

    response = client.post(f"/items/{item.id}/comment", json={"text": "Nice"}, headers=auth_headers(booker))

    assert response.status_code == 400


def test_comment_after_rejected_booking(client, auth_headers, make_user, make_item, make_booking):
    item = make_item(make_user())
    booker = make_user()
    make_booking(item, booker, -48, -24, models.BookingStatus.REJECTED)

    response = client.post(f"/items/{item.id}/comment", json={"text": "Nice"}, headers=auth_headers(booker))

    assert response.status_code == 400


def test_blank_comment(client, auth_headers, make_user, make_item, make_booking):
    item = make_item(make_user())
    booker = make_user()
    make_booking(item, booker, -48, -24, models.BookingStatus.APPROVED)

    response = client.post(f"/items/{item.id}/comment", json={"text": "   "}, headers=auth_headers(booker))

    assert response.status_code == 400
