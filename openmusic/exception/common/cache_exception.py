from openmusic.exception.base_exception import BaseCustomException, ErrorCode

class CacheUnavailableError(BaseCustomException):
    """
    캐시 무효화 실패.

    읽기 경로의 캐시 장애는 저장소 fallback으로 흡수되지만,
    쓰기 후 무효화 실패는 오래된 값이 남으므로 요청 실패로 전파합니다.
    """
    error_code = ErrorCode.CACHE_UNAVAILABLE
    message = "캐시를 갱신하지 못했습니다. 잠시 후 다시 시도해주세요."
    status_code = 503
