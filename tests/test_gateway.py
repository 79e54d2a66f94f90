import asyncio
import datetime
import json
from unittest.mock import AsyncMock

import httpx
from fastapi import Response
from starlette.requests import Request

from shareit_gateway import limiter
from shareit_gateway.client import ShareItClient, get_server_client
from shareit_gateway.config import settings
from shareit_gateway.main import app as gateway_app

HEADERS = {"X-Sharer-User-Id": "7"}


def future_booking(start_offset_days: float = 1, end_offset_days: float = 2) -> dict:
    now = datetime.datetime.now()
    return {
        "item_id": 3,
        "start": (now + datetime.timedelta(days=start_offset_days)).isoformat(),
        "end": (now + datetime.timedelta(days=end_offset_days)).isoformat(),
    }


# --- Forwarding ---

def test_forwards_booking_with_identity(gateway_client, fake_server):
    fake_server.response = httpx.Response(201, json={"id": 1, "status": "WAITING"})

    response = gateway_client.post("/bookings", json=future_booking(), headers=HEADERS)

    assert response.status_code == 201
    assert response.json() == {"id": 1, "status": "WAITING"}
    forwarded = fake_server.last_request
    assert forwarded.method == "POST"
    assert forwarded.url.path == "/bookings"
    assert forwarded.headers["X-Sharer-User-Id"] == "7"
    assert json.loads(forwarded.content)["item_id"] == 3


def test_forwards_normalised_state_and_paging(gateway_client, fake_server):
    fake_server.response = httpx.Response(200, json=[])

    response = gateway_client.get("/bookings/owner?state=current&from=20&size=5", headers=HEADERS)

    assert response.status_code == 200
    params = fake_server.last_request.url.params
    assert fake_server.last_request.url.path == "/bookings/owner"
    assert params["state"] == "CURRENT"
    assert params["from"] == "20"
    assert params["size"] == "5"


def test_forwards_approval_flag(gateway_client, fake_server):
    gateway_client.patch("/bookings/5?approved=true", headers=HEADERS)

    assert fake_server.last_request.method == "PATCH"
    assert fake_server.last_request.url.params["approved"] == "true"


def test_partial_update_forwards_only_given_fields(gateway_client, fake_server):
    gateway_client.patch("/items/4", json={"available": False}, headers=HEADERS)

    assert json.loads(fake_server.last_request.content) == {"available": False}


def test_search_needs_no_identity(gateway_client, fake_server):
    fake_server.response = httpx.Response(200, json=[])

    response = gateway_client.get("/items/search?text=drill")

    assert response.status_code == 200
    assert "X-Sharer-User-Id" not in fake_server.last_request.headers


# --- Validation stops requests at the gateway ---

def test_rejects_invalid_bookings(gateway_client, fake_server):
    past_start = gateway_client.post("/bookings", json=future_booking(-1, 1), headers=HEADERS)
    end_before_start = gateway_client.post("/bookings", json=future_booking(2, 1), headers=HEADERS)
    missing_header = gateway_client.post("/bookings", json=future_booking())

    assert past_start.status_code == 400
    assert "Start date must be in future" in past_start.json()["error"]
    assert end_before_start.status_code == 400
    assert "End date must be after start date" in end_before_start.json()["error"]
    assert missing_header.status_code == 400
    assert fake_server.requests == []


def test_rejects_invalid_users_and_items(gateway_client, fake_server):
    assert gateway_client.post("/users", json={"name": "Anna", "email": "anna"}).status_code == 400
    assert gateway_client.post("/users", json={"name": " ", "email": "anna@example.com"}).status_code == 400
    assert gateway_client.post(
        "/items", json={"name": "", "description": "Drill", "available": True}, headers=HEADERS
    ).status_code == 400
    assert gateway_client.post("/items/1/comment", json={"text": ""}, headers=HEADERS).status_code == 400
    assert fake_server.requests == []


def test_rejects_bad_paging_and_state(gateway_client, fake_server):
    bad_from = gateway_client.get("/bookings?from=-1", headers=HEADERS)
    bad_size = gateway_client.get("/requests/all?size=0", headers=HEADERS)
    bad_state = gateway_client.get("/bookings?state=UNSUPPORTED_STATUS", headers=HEADERS)

    assert bad_from.status_code == 400
    assert bad_size.status_code == 400
    assert bad_state.status_code == 400
    assert bad_state.json() == {"error": "Unknown state: UNSUPPORTED_STATUS"}
    assert fake_server.requests == []


# --- Server answers pass through ---

def test_server_error_passes_through(gateway_client, fake_server):
    fake_server.response = httpx.Response(404, json={"error": "Item not found"})

    response = gateway_client.get("/items/99", headers=HEADERS)

    assert response.status_code == 404
    assert response.json() == {"error": "Item not found"}


def test_delete_passes_through_no_content(gateway_client, fake_server):
    fake_server.response = httpx.Response(204)

    response = gateway_client.delete("/users/3")

    assert response.status_code == 204
    assert fake_server.last_request.method == "DELETE"


def test_unreachable_server(gateway_client):
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    failing = httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://shareit-server")
    gateway_app.dependency_overrides[get_server_client] = lambda: ShareItClient(failing)

    response = gateway_client.get("/users/1")

    assert response.status_code == 503
    assert response.json() == {"error": "ShareIt server is unavailable"}


# --- Rate limiting ---

def make_request(path: str, headers: dict = None, host: str = "10.0.0.1") -> Request:
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request({
        "type": "http",
        "method": "GET",
        "path": path,
        "headers": raw_headers,
        "client": (host, 50000),
    })


def test_limiter_key_by_user_or_ip():
    by_user = asyncio.run(limiter.get_key_by_user_id_or_ip(make_request("/items", HEADERS)))
    by_ip = asyncio.run(limiter.get_key_by_user_id_or_ip(make_request("/items", {"X-Sharer-User-Id": "abc"})))

    assert by_user == "user:7"
    assert by_ip == "ip:10.0.0.1"


def test_limiter_key_ignores_resource_id():
    first = asyncio.run(limiter.get_key_by_user_id_or_ip(make_request("/items/1", HEADERS)))
    second = asyncio.run(limiter.get_key_by_user_id_or_ip(make_request("/items/2", HEADERS)))

    assert first == second


def test_rate_limit_disabled_skips_limiter(mocker):
    mock_limiter = mocker.patch.object(limiter, "limiter", new=AsyncMock())
    mocker.patch.object(settings, "RATE_LIMIT_ENABLED", False)

    asyncio.run(limiter.rate_limit(make_request("/items"), Response()))

    mock_limiter.assert_not_called()


def test_rate_limit_enabled_calls_limiter(mocker):
    mock_limiter = mocker.patch.object(limiter, "limiter", new=AsyncMock())
    mocker.patch.object(settings, "RATE_LIMIT_ENABLED", True)
    request = make_request("/items", HEADERS)

    asyncio.run(limiter.rate_limit(request, Response()))

    mock_limiter.assert_awaited_once()
