"""
Rate Limiter 모듈

좋아요 등록처럼 반복 호출이 의미 없는 쓰기 API에 적용합니다.
순환 임포트를 피하기 위해 limiter를 중앙 집중화
"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from openmusic.core.config import RATE_LIMIT_PER_MINUTE

LIKE_RATE_LIMIT = f"{RATE_LIMIT_PER_MINUTE}/minute"


def get_principal_or_address(request: Request) -> str:
    """인증된 사용자 ID를 우선 키로 사용하고, 없으면 클라이언트 IP로 제한합니다."""
    user_id = request.headers.get("X-User-Id")
    if user_id and user_id.strip():
        return f"user:{user_id.strip()}"
    return get_remote_address(request)


limiter = Limiter(key_func=get_principal_or_address)
