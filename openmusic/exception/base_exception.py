from enum import Enum

class ErrorCode(str, Enum):
    """
    애플리케이션 전반에서 사용하는 에러 코드 정의.
    형식: 카테고리(영문)-번호(3자리)
    """
    # 1. COMMON: 공통/일반 에러
    GENERIC_UNKNOWN = "GENERIC-000"
    COMMON_INTERNAL_ERROR = "COMMON-001"
    COMMON_BAD_REQUEST = "COMMON-002"
    VALIDATION_ERROR = "VALIDATION-001"
    INVARIANT_VIOLATION = "INVARIANT-001"  # 저장소가 예상과 다른 결과를 반환

    # 2. AUTH: 인증/인가
    AUTH_REQUIRED = "AUTH-001"
    AUTH_FORBIDDEN = "AUTH-002"

    # 3. ALBUM / SONG / USER
    ALBUM_NOT_FOUND = "ALBUM-001"
    ALBUM_COVER_INVALID = "ALBUM-002"
    SONG_NOT_FOUND = "SONG-001"
    USER_NOT_FOUND = "USER-001"
    USER_ALREADY_EXISTS = "USER-002"

    # 4. LIKE: 앨범 좋아요
    LIKE_NOT_FOUND = "LIKE-001"
    LIKE_ALREADY_EXISTS = "LIKE-002"
    LIKES_EMPTY = "LIKE-003"

    # 5. PLAYLIST / COLLABORATION
    PLAYLIST_NOT_FOUND = "PLAYLIST-001"
    PLAYLIST_SONG_NOT_FOUND = "PLAYLIST-002"
    COLLABORATION_NOT_FOUND = "COLLAB-001"
    COLLABORATION_ALREADY_EXISTS = "COLLAB-002"

    # 6. CACHE / RATE LIMIT
    CACHE_UNAVAILABLE = "CACHE-001"
    RATE_LIMIT_EXCEEDED = "RATE-001"


class BaseCustomException(Exception):
    """
    모든 커스텀 예외의 최상위 클래스.
    이 클래스를 상속받아 구체적인 예외를 정의해야 함.
    """
    error_code: ErrorCode = ErrorCode.GENERIC_UNKNOWN
    message: str = "알 수 없는 오류가 발생했습니다."
    status_code: int = 500

    def __init__(self, message: str = None, error_code: ErrorCode = None, status_code: int = None):
        if message:
            self.message = message
        if error_code:
            self.error_code = error_code
        if status_code:
            self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(BaseCustomException):
    """참조한 엔티티가 존재하지 않음 (재시도 불가)"""
    message = "리소스를 찾을 수 없습니다."
    status_code = 404


class ConflictError(BaseCustomException):
    """이미 수행된 요청 (중복 좋아요 등). 입력값 검증 실패와 구분되는 클라이언트 에러."""
    message = "이미 처리된 요청입니다."
    status_code = 400


class AuthenticationError(BaseCustomException):
    error_code = ErrorCode.AUTH_REQUIRED
    message = "인증 정보가 필요합니다."
    status_code = 401


class AuthorizationError(BaseCustomException):
    error_code = ErrorCode.AUTH_FORBIDDEN
    message = "이 리소스에 접근할 권한이 없습니다."
    status_code = 403


class InvariantError(BaseCustomException):
    """저장소 수준의 예상치 못한 실패 (서버 측 결함)"""
    error_code = ErrorCode.INVARIANT_VIOLATION
    message = "데이터 처리 중 예상치 못한 오류가 발생했습니다."
    status_code = 500
