import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from taskboard.database import Database
from taskboard.main import app


# In-memory SQLite shared across the engine's connections via StaticPool.
# ASGITransport does not run the lifespan, so the fixture installs the
# database on app.state itself.
@pytest.fixture
async def database():
    database = Database(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await database.create_all()
    app.state.database = database
    yield database
    await database.dispose()


@pytest.fixture
async def client(database):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def create_user(client):
    async def _create(name="Ada Lovelace", email="ada@example.com"):
        response = await client.post("/api/users", json={"name": name, "email": email})
        assert response.status_code == 201, f"Create user failed: {response.text}"
        return response.json()
    return _create


@pytest.fixture
def create_task(client):
    async def _create(user_id, title="Write report", **fields):
        payload = {"title": title, "user_id": user_id, **fields}
        response = await client.post("/api/tasks", json=payload)
        assert response.status_code == 201, f"Create task failed: {response.text}"
        return response.json()
    return _create
