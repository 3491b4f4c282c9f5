from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException
from datetime import datetime
import logging
import traceback

from openmusic.core.config import IS_DEBUG
from openmusic.core.response import ValidationErrorDetail, error_response
from openmusic.exception.base_exception import BaseCustomException, ErrorCode
from openmusic.exception.common.rate_limit_exception import RateLimitException

logger = logging.getLogger("openmusic")


def _error_code_value(code) -> str:
    # error_code가 Enum이면 .value, 아니면 그대로 사용
    return code.value if hasattr(code, "value") else code


async def custom_exception_handler(request: Request, exc: BaseCustomException):
    """
    도메인 예외(BaseCustomException)를 ApiResponse 포맷으로 변환

    4xx는 경고 수준, 5xx(Invariant, Cache 장애)는 에러 수준으로 기록합니다.
    """
    error_code_value = _error_code_value(exc.error_code)
    log_payload = {
        "timestamp": datetime.now().isoformat(timespec="seconds"),
        "status": exc.status_code,
        "errorCode": error_code_value,
        "message": exc.message,
        "path": request.url.path,
    }
    if exc.status_code >= 500:
        logger.error(log_payload)
    else:
        logger.warning(log_payload)

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(
            code=error_code_value,
            message=exc.message
        ).model_dump()
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """FastAPI HTTPException도 Envelope 포맷으로 변환합니다."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(
            message=str(exc.detail),
            code=f"HTTP_{exc.status_code}"
        ).model_dump(),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    요청 본문/쿼리 파라미터 검증 실패(422)를 필드별 상세 정보와 함께 반환합니다.
    """
    error_details = {}
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        error_details[field] = ValidationErrorDetail(
            message=error["msg"],
            type=error["type"],
            input=error.get("input")
        ).model_dump(mode="json")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response(
            message="입력값을 확인해주세요.",
            code=ErrorCode.VALIDATION_ERROR.value,
            result=error_details
        ).model_dump(mode="json")
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    """slowapi의 RateLimitExceeded를 RateLimitException 응답으로 변환합니다."""
    return await custom_exception_handler(request, RateLimitException())


async def global_exception_handler(request: Request, exc: Exception):
    """
    전역 예외 처리 핸들러 (5xx, 미처리 예외)
    """
    error_msg = str(exc)
    stack_trace = traceback.format_exc()

    # 에러 수준 로깅 (항상 스택 트레이스 포함하여 서버 로그에 남김)
    logger.exception({
        "timestamp": datetime.now().isoformat(timespec="seconds"),
        "status": 500,
        "errorCode": ErrorCode.COMMON_INTERNAL_ERROR.value,
        "message": "서버 내부 오류가 발생했습니다.",
        "detail": error_msg,
        "path": request.url.path
    })

    response_content = error_response(
        code=ErrorCode.COMMON_INTERNAL_ERROR.value,
        message="서버 내부 오류가 발생했습니다."
    ).model_dump()

    # 개발 환경(IS_DEBUG=True)인 경우에만 스택 트레이스 포함
    if IS_DEBUG:
        response_content["result"] = {
            "error_detail": error_msg,
            "stack_trace": stack_trace
        }

    return JSONResponse(
        status_code=500,
        content=response_content
    )
