from fastapi import APIRouter, Depends, status

from openmusic.api.dependencies import (
    get_collaboration_service, get_current_user_id, get_playlist_service,
)
from openmusic.core.response import ApiResponse, success_response
from openmusic.models.dto import CollaborationPayload
from openmusic.services.collaboration_service import CollaborationService
from openmusic.services.playlist_service import PlaylistService

router = APIRouter(prefix="/collaborations", tags=["Collaborations"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
async def add_collaboration(
    payload: CollaborationPayload,
    user_id: str = Depends(get_current_user_id),
    playlist_service: PlaylistService = Depends(get_playlist_service),
    service: CollaborationService = Depends(get_collaboration_service),
):
    """플레이리스트 소유자만 협업자를 추가할 수 있습니다."""
    await playlist_service.verify_ownership(payload.playlistId, user_id)
    collaboration_id = await service.add_collaboration(payload.playlistId, payload.userId)
    return success_response({"collaborationId": collaboration_id}, message="협업자가 추가되었습니다.")


@router.delete("", response_model=ApiResponse)
async def delete_collaboration(
    payload: CollaborationPayload,
    user_id: str = Depends(get_current_user_id),
    playlist_service: PlaylistService = Depends(get_playlist_service),
    service: CollaborationService = Depends(get_collaboration_service),
):
    await playlist_service.verify_ownership(payload.playlistId, user_id)
    await service.delete_collaboration(payload.playlistId, payload.userId)
    return success_response(message="협업자가 삭제되었습니다.")
