import logging
import re
import time
from pathlib import Path

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from openmusic.core.config import PUBLIC_BASE_URL, UPLOAD_DIR, UPLOAD_MAX_BYTES
from openmusic.exception.common.album_exception import CoverTooLargeError, InvalidCoverError

logger = logging.getLogger("openmusic")

ALLOWED_IMAGE_TYPES = {
    "image/apng",
    "image/avif",
    "image/gif",
    "image/jpeg",
    "image/png",
    "image/webp",
}

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class StorageService:
    """앨범 커버 이미지를 로컬 디렉터리에 저장하고 공개 URL을 만듭니다.

    저장된 파일은 main.py에서 `/albums/covers`로 정적 마운트됩니다.
    """

    def __init__(self, folder: str = UPLOAD_DIR, max_bytes: int = UPLOAD_MAX_BYTES, base_url: str = PUBLIC_BASE_URL):
        self.folder = Path(folder)
        self.max_bytes = max_bytes
        self.base_url = base_url
        self.folder.mkdir(parents=True, exist_ok=True)

    def validate_image(self, content_type: str | None) -> None:
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise InvalidCoverError()

    async def write_file(self, file: UploadFile) -> str:
        """
        Returns:
            str: 저장된 파일명 (`<epoch-ms><원본파일명>`)
        """
        self.validate_image(file.content_type)

        # 한도보다 1바이트 더 읽어서 초과 여부만 판정
        data = await file.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            raise CoverTooLargeError()

        original = _UNSAFE_CHARS.sub("_", Path(file.filename or "cover").name)
        filename = f"{int(time.time() * 1000)}{original}"
        await run_in_threadpool((self.folder / filename).write_bytes, data)

        logger.info(f"Cover stored: {filename} ({len(data)} bytes)")
        return filename

    def public_url(self, filename: str) -> str:
        return f"{self.base_url}/albums/covers/{filename}"
