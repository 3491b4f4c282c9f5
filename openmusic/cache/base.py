from typing import Any, Optional, Protocol, runtime_checkable


class _Miss:
    """캐시에 값이 없음을 나타내는 센티널.

    None, 0, 빈 리스트처럼 '유효한 빈 값'과 구분하기 위해 사용합니다.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISS"


MISS = _Miss()


class CacheBackendError(Exception):
    """캐시 백엔드에 접근할 수 없음 (연결 실패, 타임아웃 등)"""


@runtime_checkable
class CacheBackend(Protocol):
    """키-값 캐시 인터페이스 (Repository Pattern Protocol)

    값은 JSON 직렬화 가능한 Python 객체여야 합니다.
    백엔드 장애는 CacheBackendError로 전달되며, 미스는 예외가 아니라 MISS로 반환됩니다.
    """

    async def get(self, key: str) -> Any:
        """
        Returns:
            Any: 저장된 값, 없거나 만료되었으면 MISS
        """
        ...

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """
        Args:
            ttl (int | None): 만료 시간(초). None 또는 0이면 만료되지 않음
        """
        ...

    async def set_if_version(self, key: str, value: Any, ttl: Optional[int], version_key: str, expected: Any) -> bool:
        """
        version_key의 값이 expected와 같을 때만 저장합니다. (확인과 저장은 원자적)

        Returns:
            bool: 저장했으면 True, 그 사이 버전이 바뀌어 건너뛰었으면 False
        """
        ...

    async def delete(self, key: str) -> None:
        ...

    async def incr(self, key: str) -> int:
        """정수 카운터를 1 증가시키고 새 값을 반환합니다. (없으면 0에서 시작)"""
        ...

    async def close(self) -> None:
        ...
