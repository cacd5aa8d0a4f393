"""
Pytest fixtures for test database, client, and authentication.

Each test gets a fresh in-memory SQLite database (override with
TEST_DATABASE_URL to run against PostgreSQL). Redis is disabled so the
catalog cache degrades to misses; mail is unconfigured and never leaves the
process.
"""

import os

os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SMTP_USER", "")
os.environ.setdefault("ADMIN_EMAIL", "")
os.environ.setdefault("MAIL_SUPPRESS_SEND", "true")
os.environ.setdefault("ADMIN_BYPASS", "false")
os.environ.setdefault("RAZORPAY_KEY_ID", "")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "")

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from cabservice.main import app
from cabservice.db.base import Base
from cabservice.db.session import commit_session, get_db, rollback_session
from cabservice.core.security import create_access_token, hash_password
from cabservice.models import (
    CabType, City, CityRoute, RoutePricing, TripType, User, UserRole, CUSTOM_CAB_TYPE_NAME,
)

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


def _make_engine():
    if TEST_DATABASE_URL.startswith("sqlite"):
        # One shared connection so every session sees the same in-memory database
        return create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(TEST_DATABASE_URL)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    engine = _make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        try:
            yield db_session
            await commit_session(db_session)
        except Exception:
            await rollback_session(db_session)
            raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# --- Accounts --------------------------------------------------------------

@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a customer account."""
    user = User(
        name="Test Customer",
        email="test@example.com",
        phone="9000000001",
        role=UserRole.CUSTOMER,
        hashed_password=hash_password("testpassword123"),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    user = User(
        name="Admin",
        email="admin@cabservice.in",
        role=UserRole.ADMIN,
        hashed_password=hash_password("adminpassword123"),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    """Authorization headers for the customer."""
    token = create_access_token(data={"sub": test_user.email, "role": test_user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> dict:
    token = create_access_token(data={"sub": admin_user.email, "role": admin_user.role.value})
    return {"Authorization": f"Bearer {token}"}


# --- Catalog ---------------------------------------------------------------

@pytest_asyncio.fixture
async def cities(db_session: AsyncSession) -> dict[str, City]:
    """Mumbai, Pune and Nashik (Maharashtra) plus Jaipur (Rajasthan)."""
    rows = {
        "mumbai": City(name="Mumbai", state="Maharashtra"),
        "pune": City(name="Pune", state="Maharashtra"),
        "nashik": City(name="Nashik", state="Maharashtra"),
        "jaipur": City(name="Jaipur", state="Rajasthan"),
    }
    db_session.add_all(rows.values())
    await db_session.commit()
    for city in rows.values():
        await db_session.refresh(city)
    return rows


@pytest_asyncio.fixture
async def cab_types(db_session: AsyncSession) -> dict[str, CabType]:
    """Sedan, SUV and the reserved Custom type."""
    rows = {
        "sedan": CabType(name="Sedan", seats=4, luggage=2, features=["AC", "Music"]),
        "suv": CabType(name="SUV", seats=6, luggage=4, features=["AC"]),
        "custom": CabType(name=CUSTOM_CAB_TYPE_NAME, seats=0, luggage=0, features=[]),
    }
    db_session.add_all(rows.values())
    await db_session.commit()
    for cab_type in rows.values():
        await db_session.refresh(cab_type)
    return rows


@pytest_asyncio.fixture
async def priced_route(db_session: AsyncSession, cities, cab_types) -> CityRoute:
    """
    Mumbai → Pune, 150 km / 180 min, with ONE_WAY prices:
    Sedan 1800, SUV 2600, Custom 9999 (never offered).
    """
    route = CityRoute(
        from_city_id=cities["mumbai"].id,
        to_city_id=cities["pune"].id,
        distance_km=150,
        duration_min=180,
        trip_types=[TripType.ONE_WAY.value, TripType.ROUND_TRIP.value],
    )
    db_session.add(route)
    await db_session.flush()

    for key, price in (("sedan", 1800), ("suv", 2600), ("custom", 9999)):
        db_session.add(RoutePricing(
            route_id=route.id,
            from_city_id=route.from_city_id,
            to_city_id=route.to_city_id,
            cab_type_id=cab_types[key].id,
            trip_type=TripType.ONE_WAY,
            price=price,
        ))
    await db_session.commit()
    await db_session.refresh(route)
    return route


@pytest.fixture
def booking_payload():
    """Builder for a valid create-booking body; overrides use the wire (camelCase) names."""

    def build(cab_type_id: int, **overrides) -> dict:
        payload = {
            "cabTypeId": cab_type_id,
            "tripType": "ONE_WAY",
            "startDate": "2026-11-02",
            "startTime": "09:30",
            "price": 1800,
            "name": "Asha Rao",
            "phone": "9876543210",
        }
        payload.update(overrides)
        return payload

    return build
