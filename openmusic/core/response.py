from typing import TypeVar, Generic, Optional, Any
from pydantic import BaseModel, ConfigDict

SUCCESS_CODE = "COMMON200"

# result 필드에 Pydantic 모델뿐 아니라 dict/list 등 일반 Python 타입도 허용
T = TypeVar('T')

class ApiResponse(BaseModel, Generic[T]):
    """
    API 공통 응답 모델 (Envelope Pattern)

    Attributes:
        isSuccess (bool): 성공 여부
        code (str): 응답 코드 (성공: "COMMON200", 실패: 에러코드)
        message (str): 메시지 (사용자 노출 가능)
        result (T | None): 실제 데이터 (실패 시에는 에러 상세 정보 또는 null)
    """
    isSuccess: bool
    code: str
    message: str
    result: Optional[T] = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "isSuccess": True,
                    "code": "COMMON200",
                    "message": "성공입니다.",
                    "result": {"likes": 3}
                },
                {
                    "isSuccess": False,
                    "code": "ALBUM-001",
                    "message": "앨범을 찾을 수 없습니다.",
                    "result": None
                }
            ]
        }
    )


class ValidationErrorDetail(BaseModel):
    """
    Validation 에러의 상세 정보를 담는 모델
    """
    message: str
    type: str
    input: Any | None = None


def success_response(result: Any = None, message: str = "성공입니다.") -> ApiResponse[Any]:
    return ApiResponse(isSuccess=True, code=SUCCESS_CODE, message=message, result=result)


def error_response(message: str, code: str = "ERROR", result: Optional[Any] = None) -> ApiResponse[Any]:
    return ApiResponse(isSuccess=False, code=code, message=message, result=result)
