# Imports for testing tools
import os
import datetime
import itertools

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# --- Test settings must be in place before the apps are imported ---
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_shareit.db"
os.environ["DATABASE_URL"] = SQLALCHEMY_DATABASE_URL
os.environ["RATE_LIMIT_ENABLED"] = "false"

# Import your application code
from shareit_server.main import app as server_app
from shareit_server.database import Base, get_db
from shareit_server import models
from shareit_gateway.main import app as gateway_app
from shareit_gateway.client import ShareItClient, get_server_client

engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
# Objects built by the factories stay readable after a request closes the session
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


# --- Database Management Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def setup_db():
    """Creates and drops the ShareIt tables."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Provides a database session whose work is rolled back after each test."""
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)
    yield session
    session.close()
    # A handler that rolled the session back has already ended the outer transaction
    if transaction.is_active:
        transaction.rollback()
    connection.close()


# --- API Test Client Fixtures ---
@pytest.fixture(scope="function")
def client(db_session):
    """Provides a TestClient for the ShareIt server."""
    def override_get_db():
        try:
            yield db_session
        finally:
            db_session.close()

    server_app.dependency_overrides[get_db] = override_get_db

    with TestClient(server_app) as c:
        yield c

    server_app.dependency_overrides.clear()


# --- Data factories ---
@pytest.fixture
def make_user(db_session):
    counter = itertools.count(1)

    def _make_user(name: str = None, email: str = None) -> models.User:
        n = next(counter)
        user = models.User(name=name or f"User {n}", email=email or f"user{n}@example.com")
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_item(db_session):
    def _make_item(owner: models.User, name: str = "Drill", description: str = "Cordless drill",
                   available: bool = True, request_id: int = None) -> models.Item:
        item = models.Item(
            name=name,
            description=description,
            available=available,
            owner_id=owner.id,
            request_id=request_id,
        )
        db_session.add(item)
        db_session.commit()
        db_session.refresh(item)
        return item

    return _make_item


@pytest.fixture
def make_booking(db_session):
    """Inserts a booking directly, offsets are hours relative to now."""
    def _make_booking(item: models.Item, booker: models.User, start_offset: float, end_offset: float,
                      status: models.BookingStatus = models.BookingStatus.WAITING) -> models.Booking:
        now = datetime.datetime.now()
        booking = models.Booking(
            item_id=item.id,
            booker_id=booker.id,
            start=now + datetime.timedelta(hours=start_offset),
            end=now + datetime.timedelta(hours=end_offset),
            status=status,
        )
        db_session.add(booking)
        db_session.commit()
        db_session.refresh(booking)
        return booking

    return _make_booking


@pytest.fixture
def auth_headers():
    """Builds the caller-identity header for a user or a raw user id."""
    def _auth_headers(user) -> dict:
        user_id = user if isinstance(user, int) else user.id
        return {"X-Sharer-User-Id": str(user_id)}

    return _auth_headers


# --- Gateway fixtures ---
class FakeServer:
    """Stands in for the ShareIt server behind the gateway."""

    def __init__(self):
        self.requests = []
        self.response = httpx.Response(200, json={})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def fake_server():
    return FakeServer()


@pytest.fixture
def gateway_client(fake_server):
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(fake_server.handler),
        base_url="http://shareit-server",
    )
    gateway_app.dependency_overrides[get_server_client] = lambda: ShareItClient(http_client)

    with TestClient(gateway_app) as c:
        yield c

    gateway_app.dependency_overrides.clear()
