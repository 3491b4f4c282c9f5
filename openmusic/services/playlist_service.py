"""
플레이리스트 서비스

- 사용자별 플레이리스트 목록(소유 + 공유)은 Cache-Aside로 제공
- 접근 권한 확인은 두 가지 계약으로 분리
    * verify_ownership: 소유자만 (삭제, 협업자 관리)
    * verify_access: 소유자 또는 협업자 (노래 추가/조회/삭제, 활동 조회)
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy import delete, insert, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic.exception.base_exception import InvariantError
from openmusic.exception.common.album_exception import SongNotFoundError
from openmusic.exception.common.playlist_exception import (
    PlaylistForbiddenError, PlaylistNotFoundError, PlaylistSongNotFoundError,
)
from openmusic.models.album import Song
from openmusic.models.dto import Activity, PlaylistActivities, PlaylistDetail, PlaylistSummary, SongSummary
from openmusic.models.playlist import Collaboration, Playlist, PlaylistSong, PlaylistSongActivity
from openmusic.models.user import User
from openmusic.services.aggregate_cache import AggregateCache, AggregateResult, user_playlists_key
from openmusic.services.collaboration_service import CollaborationService
from openmusic.utils.ids import new_id

logger = logging.getLogger("openmusic")

ACTION_ADD = "add"
ACTION_DELETE = "delete"


class PlaylistService:
    def __init__(self, session: AsyncSession, cache: AggregateCache, collaboration_service: CollaborationService):
        self.session = session
        self.cache = cache
        self.collaboration_service = collaboration_service

    async def add_playlist(self, name: str, owner: str) -> str:
        result = await self.session.execute(
            insert(Playlist)
            .values(id=new_id("playlist"), name=name, owner=owner)
            .returning(Playlist.id)
        )
        playlist_id = result.scalar_one_or_none()
        if not playlist_id:
            raise InvariantError("플레이리스트를 추가하지 못했습니다.")
        await self.session.commit()

        await self.cache.invalidate(user_playlists_key(owner))
        return playlist_id

    async def get_playlists(self, user_id: str) -> AggregateResult[List[dict]]:
        """
        사용자가 소유하거나 협업자로 참여한 플레이리스트 목록

        빈 목록도 '확인된 값'이므로 캐시합니다. (MISS와 구분됨)
        """

        async def load_playlists() -> List[dict]:
            result = await self.session.execute(
                select(Playlist.id, Playlist.name, User.username)
                .join(User, User.id == Playlist.owner)
                .outerjoin(Collaboration, Collaboration.playlist_id == Playlist.id)
                .where(or_(Playlist.owner == user_id, Collaboration.user_id == user_id))
                .distinct()
                .order_by(Playlist.name, Playlist.id)
            )
            return [PlaylistSummary(**row).model_dump() for row in result.mappings().all()]

        return await self.cache.get_aggregate(user_playlists_key(user_id), load_playlists)

    async def _get_playlist(self, playlist_id: str) -> Playlist:
        result = await self.session.execute(select(Playlist).where(Playlist.id == playlist_id))
        playlist = result.scalar_one_or_none()
        if playlist is None:
            raise PlaylistNotFoundError()
        return playlist

    async def delete_playlist(self, playlist_id: str) -> None:
        playlist = await self._get_playlist(playlist_id)
        # CASCADE로 협업 행이 사라지기 전에 영향받는 사용자를 확보
        collaborators = await self.collaboration_service.get_collaborator_ids(playlist_id)

        await self.session.execute(delete(Playlist).where(Playlist.id == playlist_id))
        await self.session.commit()

        await self.cache.invalidate_many(
            [user_playlists_key(playlist.owner)] + [user_playlists_key(uid) for uid in collaborators]
        )
        logger.info(f"Playlist deleted: {playlist_id}")

    async def verify_ownership(self, playlist_id: str, user_id: str) -> None:
        """
        Raises:
            PlaylistNotFoundError: 플레이리스트가 없는 경우
            PlaylistForbiddenError: 소유자가 아닌 경우 (협업자 포함)
        """
        playlist = await self._get_playlist(playlist_id)
        if playlist.owner != user_id:
            raise PlaylistForbiddenError()

    async def verify_access(self, playlist_id: str, user_id: str) -> None:
        """
        소유자 또는 협업자인지 확인합니다.

        협업 확인이 어떤 이유로 실패하든 처음 발생한 소유권 오류를 그대로 던져,
        호출자는 항상 같은 PlaylistForbiddenError를 받습니다.
        NotFound는 협업 확인 없이 즉시 전파됩니다.
        """
        try:
            await self.verify_ownership(playlist_id, user_id)
        except PlaylistForbiddenError as ownership_error:
            try:
                await self.collaboration_service.verify_collaborator(playlist_id, user_id)
            except Exception as collaboration_error:
                logger.debug(f"Collaboration check failed for {user_id} on {playlist_id}: {collaboration_error}")
                raise ownership_error from None

    async def _get_username(self, user_id: str) -> str:
        result = await self.session.execute(select(User.username).where(User.id == user_id))
        username = result.scalar_one_or_none()
        if username is None:
            raise InvariantError("활동 기록에 필요한 사용자 정보를 찾을 수 없습니다.")
        return username

    async def _record_activity(self, playlist_id: str, song_title: str, user_id: str, action: str) -> None:
        await self.session.execute(
            insert(PlaylistSongActivity).values(
                id=new_id("activity"),
                playlist_id=playlist_id,
                song_title=song_title,
                username=await self._get_username(user_id),
                action=action,
                time=datetime.now(timezone.utc).isoformat(timespec="microseconds"),
            )
        )

    async def add_song_to_playlist(self, playlist_id: str, song_id: str, user_id: str) -> None:
        result = await self.session.execute(select(Song.title).where(Song.id == song_id))
        title = result.scalar_one_or_none()
        if title is None:
            raise SongNotFoundError("노래를 찾을 수 없어 플레이리스트에 추가하지 못했습니다.")

        await self.session.execute(
            insert(PlaylistSong).values(id=new_id("playlist-song"), playlist_id=playlist_id, song_id=song_id)
        )
        await self._record_activity(playlist_id, title, user_id, ACTION_ADD)
        await self.session.commit()

    async def get_playlist_songs(self, playlist_id: str) -> PlaylistDetail:
        result = await self.session.execute(
            select(Playlist.id, Playlist.name, User.username)
            .join(User, User.id == Playlist.owner)
            .where(Playlist.id == playlist_id)
        )
        row = result.mappings().first()
        if row is None:
            raise PlaylistNotFoundError()

        songs = await self.session.execute(
            select(Song.id, Song.title, Song.performer)
            .join(PlaylistSong, PlaylistSong.song_id == Song.id)
            .where(PlaylistSong.playlist_id == playlist_id)
            .order_by(PlaylistSong.id)
        )
        return PlaylistDetail(
            **row,
            songs=[SongSummary(**song) for song in songs.mappings().all()],
        )

    async def delete_song_from_playlist(self, playlist_id: str, song_id: str, user_id: str) -> None:
        result = await self.session.execute(
            delete(PlaylistSong)
            .where(PlaylistSong.playlist_id == playlist_id, PlaylistSong.song_id == song_id)
            .returning(PlaylistSong.id)
        )
        if not result.scalars().all():
            raise PlaylistSongNotFoundError()

        title = (await self.session.execute(select(Song.title).where(Song.id == song_id))).scalar_one()
        await self._record_activity(playlist_id, title, user_id, ACTION_DELETE)
        await self.session.commit()

    async def get_activities(self, playlist_id: str) -> PlaylistActivities:
        result = await self.session.execute(
            select(
                PlaylistSongActivity.username,
                PlaylistSongActivity.song_title.label("title"),
                PlaylistSongActivity.action,
                PlaylistSongActivity.time,
            )
            .where(PlaylistSongActivity.playlist_id == playlist_id)
            .order_by(PlaylistSongActivity.time)
        )
        return PlaylistActivities(
            playlistId=playlist_id,
            activities=[Activity(**row) for row in result.mappings().all()],
        )
