import json
import time
from typing import Any, Dict, Optional, Tuple

from openmusic.cache.base import MISS, CacheBackend


class InMemoryCache(CacheBackend):
    """
    In-Memory 캐시 구현체

    Note:
        서버 재시작 시 데이터가 초기화되며 프로세스 간 공유되지 않습니다.
        REDIS_URL이 없는 개발 환경과 테스트에서 사용합니다.
        Redis와 동일하게 JSON 문자열로 저장하여, 꺼낸 값을 수정해도 캐시가 오염되지 않습니다.
    """

    def __init__(self):
        # Data Structure: {key: (serialized_value, expires_at | None)}
        self._data: Dict[str, Tuple[str, Optional[float]]] = {}

    async def get(self, key: str) -> Any:
        entry = self._data.get(key)
        if entry is None:
            return MISS

        serialized, expires_at = entry
        if expires_at is not None and time.monotonic() >= expires_at:
            del self._data[key]
            return MISS
        return json.loads(serialized)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        expires_at = time.monotonic() + ttl if ttl else None
        self._data[key] = (json.dumps(value, ensure_ascii=False), expires_at)

    async def set_if_version(self, key: str, value: Any, ttl: Optional[int], version_key: str, expected: Any) -> bool:
        # 단일 이벤트 루프에서 아래 두 호출 사이에 다른 코루틴이 끼어들 수 없음
        if await self.get(version_key) != expected:
            return False
        await self.set(key, value, ttl=ttl)
        return True

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def incr(self, key: str) -> int:
        current = await self.get(key)
        value = (0 if current is MISS else int(current)) + 1
        self._data[key] = (json.dumps(value), None)
        return value

    async def close(self) -> None:
        self._data.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._data
