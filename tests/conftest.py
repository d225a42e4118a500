"""
Test Suite Configuration
"""
import pytest
from typing import AsyncGenerator

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from binflow.config import Settings
from binflow.database.connection import (
    build_engine,
    build_session_factory,
    create_tables,
    get_db_dependency,
    get_optional_db_dependency,
)
from binflow.serving.api import create_api_app
from binflow.shifts.clock import BusinessClock, get_business_clock

TEST_TIMEZONE = "Pacific/Auckland"


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        APP_ENV="testing",
        DEBUG=True,
    )


@pytest.fixture
def clock() -> BusinessClock:
    """Business clock pinned to the test timezone"""
    return BusinessClock.from_name(TEST_TIMEZONE)


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test"""
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return build_session_factory(test_engine)


@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def app(session_factory, clock):
    """API app wired to the test database and clock"""
    app = create_api_app()

    async def override_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_dependency] = override_db
    app.dependency_overrides[get_optional_db_dependency] = override_db
    app.dependency_overrides[get_business_clock] = lambda: clock
    return app


@pytest.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client for the API"""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test/api/v1/") as ac:
        yield ac


@pytest.fixture
def tipping_payload():
    """Build a production event body"""
    def _build(**overrides):
        payload = {
            "date": "2024-03-01T09:00:00",
            "line_manager": "A",
            "shift": "Day Shift",
            "bins_tipped": 10,
            "average_bin_weight": 40.0,
            "down_time": 0,
            "reasons_notes": "",
            "is_lunch_break": False,
        }
        payload.update(overrides)
        return payload
    return _build
