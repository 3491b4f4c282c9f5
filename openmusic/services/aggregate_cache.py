"""
Cache-Aside 집계 캐시

좋아요 수, 사용자별 플레이리스트 목록처럼 여러 행에서 계산되는 값을 캐시합니다.

읽기: 캐시 조회 → 히트면 CACHE, 미스(백엔드 장애 포함)면 저장소에서 재계산 후 저장하고 STORE
쓰기: 원본 행을 바꾼 작업은 같은 흐름 안에서 관련 키를 모두 삭제해야 하며,
      삭제 실패는 CacheUnavailableError로 전파됩니다.
      삭제와 함께 키별 버전을 올려, 무효화 이전에 읽은 값이 재계산 후 다시 저장되지 않게 합니다.

재계산 함수가 NotFoundError 등을 던지면 그대로 전파되고 아무것도 캐시하지 않습니다.
재계산 결과는 캐시 히트와 같은 모양이 되도록 JSON 직렬화 가능한 값(dict, list, int)이어야 합니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, Iterable, Optional, TypeVar

from openmusic.cache import MISS, CacheBackend, CacheBackendError
from openmusic.exception.common.cache_exception import CacheUnavailableError

logger = logging.getLogger("openmusic")

T = TypeVar("T")


class DataSource(str, Enum):
    CACHE = "cache"
    STORE = "store"


@dataclass(frozen=True)
class AggregateResult(Generic[T]):
    value: T
    source: DataSource

    @property
    def from_cache(self) -> bool:
        return self.source is DataSource.CACHE


# 키 네임스페이스: 집계 종류마다 접두사가 달라 서로 충돌하지 않는다
def album_likes_key(album_id: str) -> str:
    return f"album-likes:{album_id}"


def user_playlists_key(user_id: str) -> str:
    return f"playlists:{user_id}"


def version_key(key: str) -> str:
    """무효화할 때마다 증가하는 세대 카운터 키"""
    return f"{key}:version"


class AggregateCache:
    """캐시 백엔드 위에서 Cache-Aside 정책을 수행합니다.

    Attributes:
        backend: get/set/delete를 제공하는 캐시 구현체
        ttl: 저장 시 적용할 만료 시간(초)
    """

    def __init__(self, backend: CacheBackend, ttl: Optional[int] = None):
        self.backend = backend
        self.ttl = ttl

    async def get_aggregate(self, key: str, recompute: Callable[[], Awaitable[T]]) -> AggregateResult[T]:
        try:
            cached = await self.backend.get(key)
            # 재계산 전에 버전을 확보해, 그 사이 무효화가 있었다면 저장하지 않는다
            version = await self.backend.get(version_key(key)) if cached is MISS else None
        except CacheBackendError as e:
            # 캐시 장애는 미스로 간주하고 저장소에서 계산 (Graceful Degradation)
            logger.warning(f"Cache read failed, falling back to store: {e}")
            return AggregateResult(value=await recompute(), source=DataSource.STORE)

        if cached is not MISS:
            return AggregateResult(value=cached, source=DataSource.CACHE)

        value = await recompute()

        try:
            stored = await self.backend.set_if_version(key, value, self.ttl, version_key(key), version)
            if not stored:
                logger.info(f"Skipped populating {key}: invalidated during recompute")
        except CacheBackendError as e:
            # 채우기 실패는 다음 읽기가 다시 계산하면 되므로 응답에는 영향을 주지 않음
            logger.warning(f"Cache populate failed for {key}: {e}")

        return AggregateResult(value=value, source=DataSource.STORE)

    async def invalidate(self, *keys: str) -> None:
        await self.invalidate_many(keys)

    async def invalidate_many(self, keys: Iterable[str]) -> None:
        for key in dict.fromkeys(keys):
            try:
                await self.backend.delete(key)
                await self.backend.incr(version_key(key))
            except CacheBackendError as e:
                logger.error(f"Cache invalidation failed for {key}: {e}")
                raise CacheUnavailableError() from e
