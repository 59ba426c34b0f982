"""Pytest fixtures for employee API tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.pool import StaticPool

from employee_api.api.app import create_app
from employee_api.api.dependencies import get_db_session
from employee_api.database import create_engine_for, create_tables, make_session_factory
from employee_api.domain import BankAccount

# In-memory SQLite with foreign keys on; CHECK and CASCADE behave as in Postgres
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ACTOR_ID = UUID("00000000-0000-0000-0000-0000000000a1")


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh test database per test."""
    engine = create_engine_for(TEST_DATABASE_URL, poolclass=StaticPool)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    factory = make_session_factory(engine)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to an app that uses the test database."""
    app = create_app(use_lifespan=False)
    factory = make_session_factory(engine)

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as db:
            try:
                yield db
                await db.commit()
            except Exception:
                await db.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def actor_id() -> UUID:
    return ACTOR_ID


@pytest.fixture
def actor_headers() -> dict[str, str]:
    return {"X-Actor-ID": str(ACTOR_ID)}


@pytest.fixture
def scheduled_at() -> datetime:
    return datetime(2026, 11, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def split_accounts() -> list[BankAccount]:
    """Two accounts splitting pay 60/40."""
    return [
        BankAccount(account_id="chk-001", routing_number="123456789", pay_percentage=Decimal("0.6")),
        BankAccount(account_id="sav-002", routing_number="987654321", pay_percentage=Decimal("0.4")),
    ]


