from fastapi import APIRouter, Depends, File, Request, Response, UploadFile, status

from openmusic.api.dependencies import (
    get_album_service, get_current_user_id, get_storage_service,
)
from openmusic.core.limiter import LIKE_RATE_LIMIT, limiter
from openmusic.core.response import ApiResponse, success_response
from openmusic.models.dto import AlbumPayload
from openmusic.services.album_service import AlbumService
from openmusic.services.storage_service import StorageService

router = APIRouter(
    prefix="/albums",
    tags=["Albums"],
    responses={404: {"description": "Not found"}},
)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
async def add_album(payload: AlbumPayload, service: AlbumService = Depends(get_album_service)):
    album_id = await service.add_album(name=payload.name, year=payload.year)
    return success_response({"albumId": album_id}, message="앨범이 추가되었습니다.")


@router.get("/{album_id}", response_model=ApiResponse)
async def get_album(album_id: str, service: AlbumService = Depends(get_album_service)):
    album = await service.get_album(album_id)
    return success_response({"album": album.model_dump()})


@router.put("/{album_id}", response_model=ApiResponse)
async def edit_album(album_id: str, payload: AlbumPayload, service: AlbumService = Depends(get_album_service)):
    await service.edit_album(album_id, name=payload.name, year=payload.year)
    return success_response(message="앨범이 수정되었습니다.")


@router.delete("/{album_id}", response_model=ApiResponse)
async def delete_album(album_id: str, service: AlbumService = Depends(get_album_service)):
    await service.delete_album(album_id)
    return success_response(message="앨범이 삭제되었습니다.")


@router.post("/{album_id}/covers", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
async def upload_cover(
    album_id: str,
    cover: UploadFile = File(...),
    service: AlbumService = Depends(get_album_service),
    storage: StorageService = Depends(get_storage_service),
):
    """
    앨범 커버 업로드 (multipart/form-data, 필드명 `cover`)

    - 이미지 MIME 타입만 허용
    - 저장 후 앨범의 coverUrl이 갱신됨
    """
    # 앨범이 없으면 파일을 남기지 않도록 먼저 확인
    await service.verify_album_exists(album_id)
    filename = await storage.write_file(cover)
    cover_url = storage.public_url(filename)
    await service.set_album_cover(album_id, cover_url)
    return success_response({"coverUrl": cover_url}, message="커버가 업로드되었습니다.")


@router.post("/{album_id}/likes", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
@limiter.limit(LIKE_RATE_LIMIT)
async def like_album(
    request: Request,
    album_id: str,
    user_id: str = Depends(get_current_user_id),
    service: AlbumService = Depends(get_album_service),
):
    await service.register_like(album_id, user_id)
    return success_response(message="앨범을 좋아합니다.")


@router.delete("/{album_id}/likes", response_model=ApiResponse)
async def unlike_album(
    album_id: str,
    user_id: str = Depends(get_current_user_id),
    service: AlbumService = Depends(get_album_service),
):
    await service.delete_like(album_id, user_id)
    return success_response(message="좋아요를 취소했습니다.")


@router.get("/{album_id}/likes", response_model=ApiResponse)
async def get_album_likes(
    album_id: str,
    response: Response,
    service: AlbumService = Depends(get_album_service),
):
    """
    앨범 좋아요 수 조회

    응답 헤더 `X-Data-Source`로 캐시(cache) / 데이터베이스(store) 중 어디서 읽었는지 알려줍니다.
    """
    likes = await service.get_like_count(album_id)
    response.headers["X-Data-Source"] = likes.source.value
    return success_response({"likes": likes.value})
