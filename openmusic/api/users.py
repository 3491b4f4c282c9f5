from fastapi import APIRouter, Depends, status

from openmusic.api.dependencies import get_user_service
from openmusic.core.response import ApiResponse, success_response
from openmusic.models.dto import UserPayload
from openmusic.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
async def add_user(payload: UserPayload, service: UserService = Depends(get_user_service)):
    user_id = await service.add_user(username=payload.username, fullname=payload.fullname)
    return success_response({"userId": user_id}, message="사용자가 등록되었습니다.")


@router.get("/{user_id}", response_model=ApiResponse)
async def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    user = await service.get_user(user_id)
    return success_response({"user": user})
