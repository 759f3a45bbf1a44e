"""SQLite-backed fixtures for repository and API tests."""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from helpdesk.adapters.persistence.database import Base, get_session
from helpdesk.adapters.persistence.repositories import SqlUserRepository
from helpdesk.domain.entities.user import User
from helpdesk.domain.value_objects.enums import Role
from helpdesk.infrastructure.api.auth import create_access_token
from helpdesk.main import create_app


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'helpdesk.db'}")

    # pysqlite's own transaction handling breaks SAVEPOINT; let SQLAlchemy emit BEGIN
    @event.listens_for(engine.sync_engine, "connect")
    def _no_autobegin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def people(session_factory):
    """Admin, three agents (ids ascending) and two requesters, committed."""
    specs = [
        ("admin", "Ada", "Admin", Role.ADMIN),
        ("agent_a", "Alice", "Agent", Role.AGENT),
        ("agent_b", "Bob", "Agent", Role.AGENT),
        ("agent_c", "Cleo", "Agent", Role.AGENT),
        ("requester", "Rita", "Requester", Role.USER),
        ("outsider", "Otto", "Other", Role.USER),
    ]
    created = {}
    async with session_factory() as session:
        repo = SqlUserRepository(session)
        for key, first, last, role in specs:
            created[key] = await repo.save(
                User(
                    id=None,
                    first_name=first,
                    last_name=last,
                    email=f"{key}@hospital.test",
                    role=role,
                )
            )
        await session.commit()
    return created


@pytest.fixture
def tokens(people):
    return {
        key: {"Authorization": f"Bearer {create_access_token(u.id, u.role)}"}
        for key, u in people.items()
    }


@pytest_asyncio.fixture
async def client(session_factory):
    app = create_app()

    async def _session_override():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _session_override
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
