from typing import Optional

from openmusic.cache.base import MISS, CacheBackend, CacheBackendError
from openmusic.cache.memory import InMemoryCache
from openmusic.cache.redis_cache import RedisCache


def create_cache(redis_url: Optional[str] = None) -> CacheBackend:
    """REDIS_URL이 있으면 Redis, 없으면 프로세스 내부 메모리 캐시를 생성합니다."""
    if redis_url:
        return RedisCache.from_url(redis_url)
    return InMemoryCache()


__all__ = ["MISS", "CacheBackend", "CacheBackendError", "InMemoryCache", "RedisCache", "create_cache"]
