import uuid


def new_id(prefix: str) -> str:
    """`album-3f2a9c0d1e4b5a67` 처럼 종류 접두사가 붙은 16자리 식별자를 생성합니다."""
    return f"{prefix}-{uuid.uuid4().hex[:16]}"
