"""Shared pytest fixtures for catalog tests and database isolation."""

from __future__ import annotations

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from moviecatalog.api.deps import get_store
from moviecatalog.core.config import settings
from moviecatalog.db.base import Base
from moviecatalog.db.session import build_engine, build_session_factory
from moviecatalog.ingestion import reset_connectors
from moviecatalog.main import app
from moviecatalog.services.catalog_store import CatalogStore

IN_MEMORY_SQLITE = "sqlite+aiosqlite://"


@pytest.fixture(autouse=True)
def _fresh_connectors():
    reset_connectors()
    yield
    reset_connectors()


@pytest_asyncio.fixture()
async def session_factory() -> async_sessionmaker[AsyncSession]:
    database_url = settings.test_database_url or IN_MEMORY_SQLITE
    url = make_url(database_url)
    schema_name: str | None = None
    engine_kwargs: dict = {}
    if url.drivername.startswith("sqlite") and url.database in (None, "", ":memory:"):
        # One shared connection so every session sees the same in-memory database.
        engine_kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    engine = build_engine(database_url, **engine_kwargs)
    if url.drivername.startswith("postgresql"):
        # Isolate each test run in its own schema for parallel-friendly cleanup.
        schema_name = f"test_{uuid.uuid4().hex}"
        engine = engine.execution_options(schema_translate_map={None: schema_name})
    async with engine.begin() as conn:
        if schema_name:
            await conn.exec_driver_sql(f'CREATE SCHEMA IF NOT EXISTS "{schema_name}"')
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield build_session_factory(engine)
    finally:
        async with engine.begin() as conn:
            if schema_name:
                await conn.exec_driver_sql(f'DROP SCHEMA IF EXISTS "{schema_name}" CASCADE')
            else:
                await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()


@pytest_asyncio.fixture()
async def store(session_factory: async_sessionmaker[AsyncSession]) -> CatalogStore:
    return CatalogStore(session_factory)


@pytest_asyncio.fixture()
async def client(store: CatalogStore) -> AsyncClient:
    async def _get_test_store() -> CatalogStore:
        return store

    app.dependency_overrides[get_store] = _get_test_store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as async_client:
        yield async_client
    app.dependency_overrides.pop(get_store, None)
