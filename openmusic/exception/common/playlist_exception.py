from openmusic.exception.base_exception import AuthorizationError, ConflictError, ErrorCode, NotFoundError

class PlaylistNotFoundError(NotFoundError):
    error_code = ErrorCode.PLAYLIST_NOT_FOUND
    message = "플레이리스트를 찾을 수 없습니다."

class PlaylistForbiddenError(AuthorizationError):
    message = "이 플레이리스트에 접근할 권한이 없습니다."

class PlaylistSongNotFoundError(NotFoundError):
    error_code = ErrorCode.PLAYLIST_SONG_NOT_FOUND
    message = "플레이리스트에 해당 노래가 없습니다."

class CollaborationNotFoundError(NotFoundError):
    error_code = ErrorCode.COLLABORATION_NOT_FOUND
    message = "협업 정보를 찾을 수 없습니다."

class CollaborationAlreadyExistsError(ConflictError):
    error_code = ErrorCode.COLLABORATION_ALREADY_EXISTS
    message = "이미 협업자로 등록된 사용자입니다."
