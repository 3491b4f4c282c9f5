"""
앨범 및 앨범 좋아요 서비스

좋아요 수는 Cache-Aside 정책으로 제공합니다.
좋아요 등록은 존재 확인 → 중복 확인 → 삽입 → 무효화 순서를 따르며,
다른 집계 변경 작업도 같은 순서를 기준으로 삼습니다.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic.exception.base_exception import InvariantError
from openmusic.exception.common.album_exception import AlbumNotFoundError
from openmusic.exception.common.like_exception import (
    AlbumAlreadyLikedError, AlbumHasNoLikesError, LikeNotFoundError,
)
from openmusic.models.album import Album, Song
from openmusic.models.dto import AlbumDetail, SongSummary
from openmusic.models.like import AlbumLike
from openmusic.services.aggregate_cache import AggregateCache, AggregateResult, album_likes_key
from openmusic.utils.ids import new_id

logger = logging.getLogger("openmusic")


class AlbumService:
    """앨범 CRUD와 좋아요 집계를 담당합니다.

    Attributes:
        session: 요청 단위 DB 세션
        cache: 좋아요 수를 보관하는 집계 캐시
    """

    def __init__(self, session: AsyncSession, cache: AggregateCache):
        self.session = session
        self.cache = cache

    async def add_album(self, name: str, year: int, cover: Optional[str] = None) -> str:
        result = await self.session.execute(
            insert(Album)
            .values(id=new_id("album"), name=name, year=year, cover=cover)
            .returning(Album.id)
        )
        album_id = result.scalar_one_or_none()
        if not album_id:
            raise InvariantError("앨범을 추가하지 못했습니다.")

        await self.session.commit()
        return album_id

    async def get_album(self, album_id: str) -> AlbumDetail:
        result = await self.session.execute(select(Album).where(Album.id == album_id))
        album = result.scalar_one_or_none()
        if album is None:
            raise AlbumNotFoundError()

        songs = await self.session.execute(
            select(Song.id, Song.title, Song.performer)
            .where(Song.album_id == album_id)
            .order_by(Song.title, Song.id)
        )
        return AlbumDetail(
            id=album.id,
            name=album.name,
            year=album.year,
            coverUrl=album.cover,
            songs=[SongSummary(**row) for row in songs.mappings().all()],
        )

    async def edit_album(self, album_id: str, name: str, year: int) -> None:
        result = await self.session.execute(
            update(Album).where(Album.id == album_id).values(name=name, year=year).returning(Album.id)
        )
        if result.scalar_one_or_none() is None:
            raise AlbumNotFoundError("앨범을 수정하지 못했습니다. 앨범을 찾을 수 없습니다.")
        await self.session.commit()

    async def delete_album(self, album_id: str) -> None:
        result = await self.session.execute(
            delete(Album).where(Album.id == album_id).returning(Album.id)
        )
        if result.scalar_one_or_none() is None:
            raise AlbumNotFoundError("앨범을 삭제하지 못했습니다. 앨범을 찾을 수 없습니다.")
        await self.session.commit()

        # 좋아요 행이 CASCADE로 함께 삭제되므로 집계도 무효화
        await self.cache.invalidate(album_likes_key(album_id))

    async def set_album_cover(self, album_id: str, cover_url: str) -> None:
        result = await self.session.execute(
            update(Album).where(Album.id == album_id).values(cover=cover_url).returning(Album.id)
        )
        if result.scalar_one_or_none() is None:
            raise AlbumNotFoundError("커버를 저장하지 못했습니다. 앨범을 찾을 수 없습니다.")
        await self.session.commit()

    async def verify_album_exists(self, album_id: str) -> None:
        result = await self.session.execute(select(Album.id).where(Album.id == album_id))
        if result.first() is None:
            raise AlbumNotFoundError()

    async def _has_liked(self, album_id: str, user_id: str) -> bool:
        result = await self.session.execute(
            select(AlbumLike.id).where(AlbumLike.album_id == album_id, AlbumLike.user_id == user_id)
        )
        return result.first() is not None

    async def register_like(self, album_id: str, user_id: str) -> str:
        """
        앨범 좋아요 등록

        Raises:
            AlbumNotFoundError: 앨범이 없는 경우
            AlbumAlreadyLikedError: 이미 좋아요한 경우 (입력값 오류와 구분되는 클라이언트 에러)
            CacheUnavailableError: 좋아요는 저장되었으나 캐시를 비우지 못한 경우
        """
        await self.verify_album_exists(album_id)

        if await self._has_liked(album_id, user_id):
            raise AlbumAlreadyLikedError()

        try:
            result = await self.session.execute(
                insert(AlbumLike)
                .values(id=new_id("like"), user_id=user_id, album_id=album_id)
                .returning(AlbumLike.id)
            )
            like_id = result.scalar_one_or_none()
            if not like_id:
                raise InvariantError("좋아요를 저장하지 못했습니다.")
            await self.session.commit()
        except IntegrityError as e:
            # 사전 검사와 삽입 사이에 같은 요청이 먼저 커밋된 경우
            await self.session.rollback()
            if await self._has_liked(album_id, user_id):
                raise AlbumAlreadyLikedError() from e
            raise

        await self.cache.invalidate(album_likes_key(album_id))
        logger.info(f"Album liked: album={album_id} user={user_id}")
        return like_id

    async def delete_like(self, album_id: str, user_id: str) -> None:
        result = await self.session.execute(
            delete(AlbumLike)
            .where(AlbumLike.album_id == album_id, AlbumLike.user_id == user_id)
            .returning(AlbumLike.id)
        )
        if result.scalar_one_or_none() is None:
            raise LikeNotFoundError()
        await self.session.commit()

        await self.cache.invalidate(album_likes_key(album_id))
        logger.info(f"Album unliked: album={album_id} user={user_id}")

    async def get_like_count(self, album_id: str) -> AggregateResult[int]:
        """좋아요 수 조회. 좋아요가 하나도 없으면 0을 캐시하지 않고 AlbumHasNoLikesError."""

        async def count_likes() -> int:
            result = await self.session.execute(
                select(func.count()).select_from(AlbumLike).where(AlbumLike.album_id == album_id)
            )
            count = result.scalar_one()
            if not count:
                raise AlbumHasNoLikesError()
            return count

        return await self.cache.get_aggregate(album_likes_key(album_id), count_likes)
