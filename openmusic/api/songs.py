from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from openmusic.api.dependencies import get_song_service
from openmusic.core.response import ApiResponse, success_response
from openmusic.models.dto import SongPayload
from openmusic.services.song_service import SongService

router = APIRouter(prefix="/songs", tags=["Songs"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
async def add_song(payload: SongPayload, service: SongService = Depends(get_song_service)):
    song_id = await service.add_song(payload)
    return success_response({"songId": song_id}, message="노래가 추가되었습니다.")


@router.get("", response_model=ApiResponse)
async def get_songs(
    title: Optional[str] = Query(None, description="제목 부분 일치"),
    performer: Optional[str] = Query(None, description="가수 부분 일치"),
    service: SongService = Depends(get_song_service),
):
    songs = await service.get_songs(title=title, performer=performer)
    return success_response({"songs": [song.model_dump() for song in songs]})


@router.get("/{song_id}", response_model=ApiResponse)
async def get_song(song_id: str, service: SongService = Depends(get_song_service)):
    song = await service.get_song(song_id)
    return success_response({"song": song.model_dump()})
