"""Shared fixtures: one fresh SQLite database per test"""
import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_FILE", "")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from resource_api.db.session import get_session, init_db
from resource_api.main import app
from resource_api.models.schemas import NewUser
from resource_api.services.user_management import UserManagement


async def seed_users(session):
    """A known user every seeded test can look up"""
    await UserManagement().create(
        NewUser(first_name="John", last_name="Doe", email="johndoe@example.com"),
        session
    )


# Run in order by the ``seeded`` fixture
SEEDS = (seed_users,)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
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
async def seeded(session_factory):
    """Populate the database with every seed in SEEDS"""
    async with session_factory() as session:
        async with session.begin():
            for seed in SEEDS:
                await seed(session)


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client bound to the test database"""
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
