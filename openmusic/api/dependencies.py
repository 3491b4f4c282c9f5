from __future__ import annotations
from functools import lru_cache
from typing import AsyncIterator

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic.cache import CacheBackend
from openmusic.core.config import CACHE_TTL_SECONDS
from openmusic.core.database import session_scope
from openmusic.exception.base_exception import AuthenticationError
from openmusic.exception.common.user_exception import UserNotFoundError
from openmusic.services.aggregate_cache import AggregateCache
from openmusic.services.album_service import AlbumService
from openmusic.services.collaboration_service import CollaborationService
from openmusic.services.playlist_service import PlaylistService
from openmusic.services.song_service import SongService
from openmusic.services.storage_service import StorageService
from openmusic.services.user_service import UserService


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """요청별 DB 세션 (lifespan에서 만든 session_factory 사용)"""
    async for session in session_scope(request.app.state.session_factory):
        yield session


def get_cache_backend(request: Request) -> CacheBackend:
    """lifespan에서 연결한 캐시 백엔드 (Redis 또는 In-Memory)"""
    return request.app.state.cache


def get_aggregate_cache(backend: CacheBackend = Depends(get_cache_backend)) -> AggregateCache:
    return AggregateCache(backend, ttl=CACHE_TTL_SECONDS)


def get_user_service(session: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(session)


def get_song_service(session: AsyncSession = Depends(get_db)) -> SongService:
    return SongService(session)


def get_album_service(
    session: AsyncSession = Depends(get_db),
    cache: AggregateCache = Depends(get_aggregate_cache),
) -> AlbumService:
    return AlbumService(session, cache)


def get_collaboration_service(
    session: AsyncSession = Depends(get_db),
    cache: AggregateCache = Depends(get_aggregate_cache),
) -> CollaborationService:
    return CollaborationService(session, cache)


def get_playlist_service(
    session: AsyncSession = Depends(get_db),
    cache: AggregateCache = Depends(get_aggregate_cache),
    collaboration_service: CollaborationService = Depends(get_collaboration_service),
) -> PlaylistService:
    return PlaylistService(session, cache, collaboration_service)


@lru_cache(maxsize=1)
def get_storage_service() -> StorageService:
    """
    StorageService 의존성 주입 (Singleton via lru_cache)
    """
    return StorageService()


async def get_current_user_id(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    user_service: UserService = Depends(get_user_service),
) -> str:
    """
    X-User-Id 헤더로 요청 주체를 식별하는 Dependency

    Raises:
        AuthenticationError(401): 헤더가 없거나 비어있는 경우, 또는 존재하지 않는 사용자인 경우
    """
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError("X-User-Id header is required and cannot be empty")

    user_id = x_user_id.strip()
    try:
        await user_service.verify_user_exists(user_id)
    except UserNotFoundError:
        raise AuthenticationError("Unknown X-User-Id") from None

    return user_id
