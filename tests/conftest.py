"""
Pytest configuration and shared fixtures for testing the Hotel Booking API.
"""
import itertools
import os
from datetime import datetime, timedelta, timezone

# Must be set before the application settings are imported
os.environ.setdefault("HOTEL_DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("HOTEL_RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hotel_booking import models
from hotel_booking.database import Base
from hotel_booking.deps import get_db, get_password_hash
from hotel_booking.main import app
from hotel_booking.models import HotelStatus, Role, RoomStatus
from hotel_booking.repositories import (
    InMemoryHotelRepository,
    InMemoryRoomRepository,
    InMemoryUserRepository,
)
from hotel_booking.services import HotelService, RoomService


# Use an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_auth_header(token: str) -> dict:
    """Helper function to create authorization header."""
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with the test database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _make_user(db_session, username, password, role):
    user = models.User(
        username=username,
        hashed_password=get_password_hash(password),
        role=role,
        created_at=datetime.now(timezone.utc),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def admin_user(db_session):
    """Create an admin user for testing."""
    return _make_user(db_session, "admin", "adminpass123", Role.ADMIN)


@pytest.fixture
def owner_user(db_session):
    """Create a regular user that owns the sample hotels."""
    return _make_user(db_session, "hotelowner", "ownerpass123", Role.USER)


@pytest.fixture
def other_user(db_session):
    """Create a regular user that owns nothing."""
    return _make_user(db_session, "otheruser", "otherpass123", Role.USER)


def _login(client, username, password):
    response = client.post("/auth/login", json={"username": username, "password": password})
    return response.json()["access_token"]


@pytest.fixture
def admin_token(client, admin_user):
    """Get an admin authentication token."""
    return _login(client, "admin", "adminpass123")


@pytest.fixture
def owner_token(client, owner_user):
    """Get the hotel owner's authentication token."""
    return _login(client, "hotelowner", "ownerpass123")


@pytest.fixture
def other_token(client, other_user):
    """Get a non-owner user's authentication token."""
    return _login(client, "otheruser", "otherpass123")


def _make_hotel(db_session, owner, name, status, **extra):
    now = datetime.now(timezone.utc)
    hotel = models.Hotel(
        name=name,
        city=extra.pop("city", "Shenzhen"),
        address=extra.pop("address", "88 Fuhua 3rd Road, Futian"),
        tags=extra.pop("tags", []),
        price=extra.pop("price", 428.0),
        status=status,
        owner_id=owner.id,
        created_at=extra.pop("created_at", now),
        updated_at=now,
        **extra,
    )
    db_session.add(hotel)
    db_session.commit()
    db_session.refresh(hotel)
    return hotel


@pytest.fixture
def draft_hotel(db_session, owner_user):
    """A DRAFT hotel owned by owner_user."""
    return _make_hotel(db_session, owner_user, "Draft Inn", HotelStatus.DRAFT)


@pytest.fixture
def pending_hotel(db_session, owner_user):
    """A PENDING hotel owned by owner_user."""
    return _make_hotel(db_session, owner_user, "Pending Lodge", HotelStatus.PENDING)


@pytest.fixture
def approved_hotel(db_session, owner_user):
    """An APPROVED hotel owned by owner_user."""
    return _make_hotel(
        db_session,
        owner_user,
        "Harbour View Hotel",
        HotelStatus.APPROVED,
        tags=["metro", "breakfast"],
    )


@pytest.fixture
def sample_hotels(db_session, owner_user):
    """
    Hotels in several cities and statuses, created one minute apart
    (oldest first).
    """
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    rows = [
        ("Futian Business Hotel", "Shenzhen", 428.0, ["metro", "breakfast"], HotelStatus.APPROVED),
        ("Sanya Bay Resort", "Sanya", 788.0, ["sea view", "family"], HotelStatus.APPROVED),
        ("Nanshan Budget Inn", "Shenzhen", 199.0, ["metro"], HotelStatus.APPROVED),
        ("Hidden Draft Hotel", "Shenzhen", 300.0, ["metro"], HotelStatus.DRAFT),
        ("Closed Harbour Hotel", "Sanya", 500.0, [], HotelStatus.OFFLINE),
    ]
    hotels = []
    for offset, (name, city, price, tags, status) in enumerate(rows):
        hotels.append(
            _make_hotel(
                db_session,
                owner_user,
                name,
                status,
                city=city,
                price=price,
                tags=tags,
                created_at=base + timedelta(minutes=offset),
            )
        )
    return hotels


@pytest.fixture
def sample_rooms(db_session, approved_hotel):
    """
    Rooms of approved_hotel: two ON rooms at the same price (in creation
    order), a cheaper OFF room and a cheaper ON room.
    """
    now = datetime.now(timezone.utc)
    rows = [
        ("Deluxe King", 428.0, 10, RoomStatus.ON),
        ("Deluxe Twin", 428.0, 4, RoomStatus.ON),
        ("Closed Wing Single", 150.0, 3, RoomStatus.OFF),
        ("Standard Queen", 299.0, 5, RoomStatus.ON),
    ]
    rooms = []
    for name, price, stock, status in rows:
        room = models.Room(
            hotel_id=approved_hotel.id,
            name=name,
            price=price,
            stock=stock,
            facilities=["wifi", "air conditioning"],
            status=status,
            created_at=now,
            updated_at=now,
        )
        db_session.add(room)
        db_session.commit()
        db_session.refresh(room)
        rooms.append(room)
    return rooms


# ----- Service-level fixtures (no database) -----
@pytest.fixture
def clock():
    """A clock that advances one second per call."""
    ticks = itertools.count()
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return lambda: start + timedelta(seconds=next(ticks))


@pytest.fixture
def hotel_repo():
    return InMemoryHotelRepository()


@pytest.fixture
def room_repo(hotel_repo):
    return InMemoryRoomRepository(hotel_repo)


@pytest.fixture
def user_repo():
    return InMemoryUserRepository()


@pytest.fixture
def hotel_service(hotel_repo, room_repo, clock):
    return HotelService(hotel_repo, room_repo, clock=clock)


@pytest.fixture
def room_service(room_repo, hotel_repo, clock):
    return RoomService(room_repo, hotel_repo, clock=clock)
