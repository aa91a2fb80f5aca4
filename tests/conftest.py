import os

# Cheap hashes and no error.log while testing; must be set before the app is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ERROR_LOG_PATH", "")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from shared_todos.config import settings
from shared_todos.database import get_db, init_db
from shared_todos.main import app


@pytest.fixture
async def session_factory(tmp_path):
    """Fresh SQLite database per test (requires the aiosqlite driver)."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )
    await engine.dispose()


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as db:
            yield db

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def strict_reads(monkeypatch):
    monkeypatch.setattr(settings, "PUBLIC_READ_FALLBACK", False)


async def register(client: AsyncClient, username: str, password: str = "secret123") -> dict:
    response = await client.post("/auth/register", json={"username": username, "password": password})
    assert response.status_code == 201, f"Register failed: {response.text}"
    return response.json()


def as_user(user_id: str) -> dict:
    return {"X-User-Id": user_id}


async def create_list(client: AsyncClient, owner_id: str, title: str = "Groceries") -> dict:
    response = await client.post("/todos", json={"title": title}, headers=as_user(owner_id))
    assert response.status_code == 201, f"Create failed: {response.text}"
    return response.json()
