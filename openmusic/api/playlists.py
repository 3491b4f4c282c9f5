from fastapi import APIRouter, Depends, Response, status

from openmusic.api.dependencies import get_current_user_id, get_playlist_service
from openmusic.core.response import ApiResponse, success_response
from openmusic.models.dto import PlaylistPayload, PlaylistSongPayload
from openmusic.services.playlist_service import PlaylistService

router = APIRouter(
    prefix="/playlists",
    tags=["Playlists"],
    responses={403: {"description": "Forbidden"}, 404: {"description": "Not found"}},
)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
async def add_playlist(
    payload: PlaylistPayload,
    user_id: str = Depends(get_current_user_id),
    service: PlaylistService = Depends(get_playlist_service),
):
    playlist_id = await service.add_playlist(name=payload.name, owner=user_id)
    return success_response({"playlistId": playlist_id}, message="플레이리스트가 추가되었습니다.")


@router.get("", response_model=ApiResponse)
async def get_playlists(
    response: Response,
    user_id: str = Depends(get_current_user_id),
    service: PlaylistService = Depends(get_playlist_service),
):
    """소유하거나 협업 중인 플레이리스트 목록 (`X-Data-Source`: cache | store)"""
    playlists = await service.get_playlists(user_id)
    response.headers["X-Data-Source"] = playlists.source.value
    return success_response({"playlists": playlists.value})


@router.delete("/{playlist_id}", response_model=ApiResponse)
async def delete_playlist(
    playlist_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PlaylistService = Depends(get_playlist_service),
):
    await service.verify_ownership(playlist_id, user_id)
    await service.delete_playlist(playlist_id)
    return success_response(message="플레이리스트가 삭제되었습니다.")


@router.post("/{playlist_id}/songs", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
async def add_song_to_playlist(
    playlist_id: str,
    payload: PlaylistSongPayload,
    user_id: str = Depends(get_current_user_id),
    service: PlaylistService = Depends(get_playlist_service),
):
    await service.verify_access(playlist_id, user_id)
    await service.add_song_to_playlist(playlist_id, payload.songId, user_id)
    return success_response(message="플레이리스트에 노래가 추가되었습니다.")


@router.get("/{playlist_id}/songs", response_model=ApiResponse)
async def get_playlist_songs(
    playlist_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PlaylistService = Depends(get_playlist_service),
):
    await service.verify_access(playlist_id, user_id)
    playlist = await service.get_playlist_songs(playlist_id)
    return success_response({"playlist": playlist.model_dump()})


@router.delete("/{playlist_id}/songs", response_model=ApiResponse)
async def delete_song_from_playlist(
    playlist_id: str,
    payload: PlaylistSongPayload,
    user_id: str = Depends(get_current_user_id),
    service: PlaylistService = Depends(get_playlist_service),
):
    await service.verify_access(playlist_id, user_id)
    await service.delete_song_from_playlist(playlist_id, payload.songId, user_id)
    return success_response(message="플레이리스트에서 노래가 삭제되었습니다.")


@router.get("/{playlist_id}/activities", response_model=ApiResponse)
async def get_playlist_activities(
    playlist_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PlaylistService = Depends(get_playlist_service),
):
    await service.verify_access(playlist_id, user_id)
    activities = await service.get_activities(playlist_id)
    return success_response(activities.model_dump())
