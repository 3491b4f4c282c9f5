import pytest
from unittest.mock import AsyncMock, MagicMock
from redis.exceptions import ConnectionError as RedisConnectionError, WatchError

from openmusic.cache import MISS, CacheBackendError, RedisCache
from openmusic.services.aggregate_cache import AggregateCache, DataSource


@pytest.fixture
def redis_client():
    return AsyncMock()


@pytest.fixture
def cache(redis_client):
    return RedisCache(redis_client, prefix="test:")


@pytest.mark.asyncio
async def test_get_returns_miss_when_key_absent(cache, redis_client):
    redis_client.get.return_value = None

    assert await cache.get("album-likes:album-1") is MISS
    redis_client.get.assert_awaited_once_with("test:album-likes:album-1")


@pytest.mark.asyncio
async def test_get_deserializes_json(cache, redis_client):
    redis_client.get.return_value = '[{"id": "playlist-1", "name": "Lagu Indie", "username": "dicoding"}]'

    value = await cache.get("playlists:user-1")

    assert value == [{"id": "playlist-1", "name": "Lagu Indie", "username": "dicoding"}]


@pytest.mark.asyncio
async def test_set_serializes_with_ttl(cache, redis_client):
    await cache.set("album-likes:album-1", 2, ttl=1800)

    redis_client.set.assert_awaited_once_with("test:album-likes:album-1", "2", ex=1800)


@pytest.mark.asyncio
@pytest.mark.parametrize("operation", ["get", "set", "delete"])
async def test_redis_errors_are_wrapped(cache, redis_client, operation):
    getattr(redis_client, operation).side_effect = RedisConnectionError("connection refused")

    with pytest.raises(CacheBackendError):
        if operation == "set":
            await cache.set("album-likes:album-1", 1)
        else:
            await getattr(cache, operation)("album-likes:album-1")


@pytest.mark.asyncio
async def test_corrupt_value_is_a_backend_error(cache, redis_client):
    redis_client.get.return_value = "{not json"

    with pytest.raises(CacheBackendError):
        await cache.get("album-likes:album-1")


@pytest.mark.asyncio
async def test_corrupt_value_falls_back_to_store(cache, redis_client):
    redis_client.get.return_value = "{not json"
    aggregate = AggregateCache(cache, ttl=60)

    result = await aggregate.get_aggregate("album-likes:album-1", AsyncMock(return_value=3))

    assert (result.value, result.source) == (3, DataSource.STORE)


@pytest.mark.asyncio
async def test_zero_ttl_is_sent_as_no_expiry(cache, redis_client):
    await cache.set("album-likes:album-1", 2, ttl=0)

    redis_client.set.assert_awaited_once_with("test:album-likes:album-1", "2", ex=None)


@pytest.fixture
def pipeline(redis_client):
    pipe = MagicMock()
    pipe.__aenter__.return_value = pipe
    pipe.__aexit__.return_value = False
    pipe.watch = AsyncMock()
    pipe.unwatch = AsyncMock()
    pipe.get = AsyncMock()
    pipe.execute = AsyncMock()
    redis_client.pipeline = MagicMock(return_value=pipe)
    return pipe


@pytest.mark.asyncio
async def test_set_if_version_writes_inside_transaction(cache, pipeline):
    pipeline.get.return_value = "3"

    stored = await cache.set_if_version("album-likes:album-1", 2, 60, "album-likes:album-1:version", 3)

    assert stored is True
    pipeline.watch.assert_awaited_once_with("test:album-likes:album-1:version")
    pipeline.multi.assert_called_once()
    pipeline.set.assert_called_once_with("test:album-likes:album-1", "2", ex=60)
    pipeline.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_set_if_version_skips_when_version_moved(cache, pipeline):
    pipeline.get.return_value = "4"

    stored = await cache.set_if_version("album-likes:album-1", 2, 60, "album-likes:album-1:version", 3)

    assert stored is False
    pipeline.set.assert_not_called()
    pipeline.unwatch.assert_awaited_once()


@pytest.mark.asyncio
async def test_set_if_version_skips_when_watch_fails(cache, pipeline):
    pipeline.get.return_value = None
    pipeline.execute.side_effect = WatchError("version changed")

    assert await cache.set_if_version("album-likes:album-1", 2, 60, "album-likes:album-1:version", MISS) is False


@pytest.mark.asyncio
async def test_incr_returns_new_version(cache, redis_client):
    redis_client.incr.return_value = 5

    assert await cache.incr("album-likes:album-1:version") == 5
    redis_client.incr.assert_awaited_once_with("test:album-likes:album-1:version")
