import json
import logging
from typing import Any, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError, WatchError

from openmusic.cache.base import MISS, CacheBackend, CacheBackendError

logger = logging.getLogger(__name__)


class RedisCache(CacheBackend):
    """
    Redis 기반 캐시 구현체 (redis.asyncio)

    Redis 예외는 CacheBackendError로 감싸 전달합니다.
    미스와 장애를 구분하는 판단은 호출자(AggregateCache)가 합니다.
    """

    def __init__(self, client: Redis, prefix: str = "openmusic:"):
        """
        Args:
            client (Redis): 테스트 용이성을 위한 의존성 주입 지원
            prefix (str): 다른 서비스와 키가 겹치지 않도록 붙이는 접두사
        """
        self.client = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "openmusic:") -> "RedisCache":
        client = Redis.from_url(url, decode_responses=True)
        logger.info(f"Redis cache initialized: {url.split('@')[-1]}")
        return cls(client, prefix=prefix)

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    @staticmethod
    def _decode(key: str, data: Optional[str]) -> Any:
        if data is None:
            return MISS
        try:
            return json.loads(data)
        except ValueError as e:
            # 다른 서비스가 쓴 값이나 손상된 값은 장애로 취급 (호출자는 미스로 처리)
            raise CacheBackendError(f"Corrupt cache value for {key}: {e}") from e

    async def get(self, key: str) -> Any:
        try:
            data = await self.client.get(self._key(key))
        except RedisError as e:
            raise CacheBackendError(f"Redis GET failed for {key}: {e}") from e

        return self._decode(key, data)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        serialized = json.dumps(value, ensure_ascii=False)
        try:
            # Redis는 ex=0을 거부하므로 0은 만료 없음으로 통일
            await self.client.set(self._key(key), serialized, ex=ttl or None)
        except RedisError as e:
            raise CacheBackendError(f"Redis SET failed for {key}: {e}") from e

    async def set_if_version(self, key: str, value: Any, ttl: Optional[int], version_key: str, expected: Any) -> bool:
        """WATCH/MULTI로 버전 확인과 저장을 하나의 트랜잭션으로 묶습니다."""
        serialized = json.dumps(value, ensure_ascii=False)
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                await pipe.watch(self._key(version_key))
                current = self._decode(version_key, await pipe.get(self._key(version_key)))
                if current != expected:
                    await pipe.unwatch()
                    return False
                pipe.multi()
                pipe.set(self._key(key), serialized, ex=ttl or None)
                await pipe.execute()
                return True
        except WatchError:
            # WATCH 이후 다른 클라이언트가 버전을 올림
            return False
        except RedisError as e:
            raise CacheBackendError(f"Redis SET failed for {key}: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(self._key(key))
        except RedisError as e:
            raise CacheBackendError(f"Redis DEL failed for {key}: {e}") from e

    async def incr(self, key: str) -> int:
        try:
            return int(await self.client.incr(self._key(key)))
        except RedisError as e:
            raise CacheBackendError(f"Redis INCR failed for {key}: {e}") from e

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except RedisError:
            return False

    async def close(self) -> None:
        await self.client.aclose()
