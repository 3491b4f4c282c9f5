from openmusic.exception.base_exception import ConflictError, ErrorCode, NotFoundError

class UserNotFoundError(NotFoundError):
    error_code = ErrorCode.USER_NOT_FOUND
    message = "사용자를 찾을 수 없습니다."

class UsernameTakenError(ConflictError):
    error_code = ErrorCode.USER_ALREADY_EXISTS
    message = "이미 사용 중인 username입니다."
