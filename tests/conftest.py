"""
Test configuration and fixtures

Every test gets its own file-backed SQLite database so that concurrent
sessions really contend for the write lock.
"""

import os
import pytest
import pytest_asyncio
from typing import AsyncGenerator, Dict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from httpx import AsyncClient, ASGITransport

# Set test environment
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ADMIN_API_TOKEN"] = "test-admin-token-0123456789abcdef0123"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_SEATS_ON_STARTUP"] = "false"
os.environ["LOG_FORMAT"] = "text"

# Import all models BEFORE creating fixtures (critical for create_all to work)
import app.models  # noqa: E402,F401
from app.core.database import Base, build_engine, build_session_factory  # noqa: E402
from app.core.metrics import ReservationMetrics, metrics_collector  # noqa: E402
from app.core.seeding import seed_seats  # noqa: E402
from app.models.seat import Seat  # noqa: E402
from app.config import settings  # noqa: E402


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Fresh SQLite database file for each test"""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'registration.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seats(session_factory) -> Dict[str, int]:
    """Seed the seat map; returns seat ids keyed by seat number"""
    await seed_seats(session_factory)
    async with session_factory() as session:
        result = await session.execute(select(Seat.seat_number, Seat.id))
        return dict(result.all())


@pytest.fixture(autouse=True)
def reset_metrics():
    """Fresh in-process counters for every test"""
    metrics_collector.metrics = ReservationMetrics()


@pytest_asyncio.fixture
async def client(session_factory):
    """Create test client with dependency override"""
    from app.main import app
    from app.core.database import get_session

    # One session per request, like the real dependency
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session

    try:
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {settings.ADMIN_API_TOKEN}"}


@pytest.fixture
def reservation_payload():
    """Build a reservation request body from (seat_id, day) selections"""

    def build(selections, role="employee", **overrides):
        days = []
        for _, day in selections:
            if day not in days:
                days.append(day)
        payload = {
            "first_name": "Amina",
            "last_name": "Benali",
            "email": "amina.benali@example.com",
            "phone": "+212 600 000 000",
            "role": role,
            "institution_name": "ENSA Tanger" if role == "student" else None,
            "days": days,
            "seats": [{"seat_id": seat_id, "day": day} for seat_id, day in selections],
        }
        payload.update(overrides)
        return payload

    return build
