# File: tests/conftest.py
"""Pytest configuration and fixtures."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shopledger.api.deps import get_store
from shopledger.core.db import Base
from shopledger.main import create_app

# Import all models
from shopledger.models.customer import Customer  # noqa: F401
from shopledger.models.inventory import InventoryItem  # noqa: F401
from shopledger.models.order import Order  # noqa: F401
from shopledger.models.supplier import Supplier  # noqa: F401
from shopledger.models.transaction import Transaction  # noqa: F401
from shopledger.store.memory import MemoryStore
from shopledger.store.sql import SqlStore

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def memory_store() -> MemoryStore:
    """Fresh in-memory store for each test."""
    return MemoryStore()


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Fresh SQLite session with all tables created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def sql_store(db_session: AsyncSession) -> SqlStore:
    return SqlStore(db_session)


@pytest_asyncio.fixture
async def client(memory_store: MemoryStore):
    """Async test client with the store dependency swapped for the in-memory store."""
    app = create_app()

    async def override_get_store():
        return memory_store

    app.dependency_overrides[get_store] = override_get_store

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        # Attach the store for direct assertions
        ac.store = memory_store
        yield ac
