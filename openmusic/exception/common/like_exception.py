from openmusic.exception.base_exception import ConflictError, ErrorCode, NotFoundError

class AlbumAlreadyLikedError(ConflictError):
    error_code = ErrorCode.LIKE_ALREADY_EXISTS
    message = "이미 좋아요를 누른 앨범입니다."

class LikeNotFoundError(NotFoundError):
    error_code = ErrorCode.LIKE_NOT_FOUND
    message = "좋아요 기록을 찾을 수 없습니다."

class AlbumHasNoLikesError(NotFoundError):
    error_code = ErrorCode.LIKES_EMPTY
    message = "아직 좋아요가 없는 앨범입니다."
