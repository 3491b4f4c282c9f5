from typing import List, Optional

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic.exception.base_exception import InvariantError
from openmusic.exception.common.album_exception import AlbumNotFoundError, SongNotFoundError
from openmusic.models.album import Album, Song
from openmusic.models.dto import SongDetail, SongPayload, SongSummary
from openmusic.utils.ids import new_id


class SongService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_song(self, payload: SongPayload) -> str:
        if payload.albumId:
            album = await self.session.execute(select(Album.id).where(Album.id == payload.albumId))
            if album.first() is None:
                raise AlbumNotFoundError()

        result = await self.session.execute(
            insert(Song)
            .values(
                id=new_id("song"),
                title=payload.title,
                year=payload.year,
                performer=payload.performer,
                genre=payload.genre,
                duration=payload.duration,
                album_id=payload.albumId,
            )
            .returning(Song.id)
        )
        song_id = result.scalar_one_or_none()
        if not song_id:
            raise InvariantError("노래를 추가하지 못했습니다.")

        await self.session.commit()
        return song_id

    async def get_songs(self, title: Optional[str] = None, performer: Optional[str] = None) -> List[SongSummary]:
        """제목/가수 부분 일치(대소문자 무시) 필터를 적용한 노래 목록"""
        query = select(Song.id, Song.title, Song.performer).order_by(Song.title, Song.id)
        if title:
            query = query.where(Song.title.icontains(title, autoescape=True))
        if performer:
            query = query.where(Song.performer.icontains(performer, autoescape=True))

        result = await self.session.execute(query)
        return [SongSummary(**row) for row in result.mappings().all()]

    async def get_song(self, song_id: str) -> SongDetail:
        result = await self.session.execute(select(Song).where(Song.id == song_id))
        song = result.scalar_one_or_none()
        if song is None:
            raise SongNotFoundError()

        return SongDetail(
            id=song.id,
            title=song.title,
            year=song.year,
            performer=song.performer,
            genre=song.genre,
            duration=song.duration,
            albumId=song.album_id,
        )
