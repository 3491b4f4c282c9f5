import pytest
import pytest_asyncio
from sqlalchemy.pool import StaticPool

from openmusic.cache import InMemoryCache
from openmusic.core.database import create_engine, create_session_factory, init_models
from openmusic.services.aggregate_cache import AggregateCache
from openmusic.services.album_service import AlbumService
from openmusic.services.collaboration_service import CollaborationService
from openmusic.services.playlist_service import PlaylistService
from openmusic.services.song_service import SongService
from openmusic.services.user_service import UserService


@pytest_asyncio.fixture
async def engine():
    """테스트마다 새로 만드는 in-memory SQLite (StaticPool로 단일 커넥션 공유)"""
    engine = create_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def memory_cache():
    """각 테스트마다 독립적인 In-Memory 캐시 백엔드"""
    return InMemoryCache()


@pytest.fixture
def aggregate_cache(memory_cache):
    return AggregateCache(memory_cache, ttl=60)


@pytest.fixture
def user_service(session):
    return UserService(session)


@pytest.fixture
def song_service(session):
    return SongService(session)


@pytest.fixture
def album_service(session, aggregate_cache):
    return AlbumService(session, aggregate_cache)


@pytest.fixture
def collaboration_service(session, aggregate_cache):
    return CollaborationService(session, aggregate_cache)


@pytest.fixture
def playlist_service(session, aggregate_cache, collaboration_service):
    return PlaylistService(session, aggregate_cache, collaboration_service)


@pytest_asyncio.fixture
async def user_id(user_service):
    return await user_service.add_user("dicoding", "Dicoding Indonesia")


@pytest_asyncio.fixture
async def other_user_id(user_service):
    return await user_service.add_user("johndoe", "John Doe")


@pytest_asyncio.fixture
async def album_id(album_service):
    return await album_service.add_album(name="Viva la Vida", year=2008)
