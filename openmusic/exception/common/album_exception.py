from openmusic.exception.base_exception import BaseCustomException, ErrorCode, NotFoundError

class AlbumNotFoundError(NotFoundError):
    error_code = ErrorCode.ALBUM_NOT_FOUND
    message = "앨범을 찾을 수 없습니다."

class InvalidCoverError(BaseCustomException):
    error_code = ErrorCode.ALBUM_COVER_INVALID
    message = "커버 이미지는 이미지 형식이어야 합니다."
    status_code = 400

class CoverTooLargeError(InvalidCoverError):
    message = "커버 이미지 용량이 허용 한도를 초과했습니다."
    status_code = 413

class SongNotFoundError(NotFoundError):
    error_code = ErrorCode.SONG_NOT_FOUND
    message = "노래를 찾을 수 없습니다."
