import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from openmusic.api.dependencies import get_cache_backend, get_db, get_storage_service
from openmusic.core.database import session_scope
from openmusic.core.limiter import limiter
from openmusic.main import app
from openmusic.services.storage_service import StorageService


@pytest.fixture(autouse=True)
def reset_limiter():
    """각 테스트 전에 limiter storage를 리셋"""
    limiter.reset()
    yield


@pytest.fixture
def storage(tmp_path):
    return StorageService(folder=str(tmp_path), base_url="http://test")


@pytest_asyncio.fixture
async def client(session_factory, memory_cache, storage):
    """in-memory SQLite/캐시로 의존성을 교체한 AsyncClient"""

    async def override_get_db():
        async for session in session_scope(session_factory):
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache_backend] = lambda: memory_cache
    app.dependency_overrides[get_storage_service] = lambda: storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def register_user(client, username: str) -> dict:
    response = await client.post("/users", json={"username": username, "fullname": username.title()})
    assert response.status_code == 201
    return {"X-User-Id": response.json()["result"]["userId"]}


@pytest_asyncio.fixture
async def owner_headers(client):
    return await register_user(client, "dicoding")


@pytest_asyncio.fixture
async def guest_headers(client):
    return await register_user(client, "johndoe")


@pytest_asyncio.fixture
async def stranger_headers(client):
    return await register_user(client, "stranger")
