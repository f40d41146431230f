"""
도메인 예외 정의
"""

from enum import Enum
from typing import Optional


class RemoteErrorKind(str, Enum):
    """YouTube API 오류 분류"""

    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    QUOTA_EXCEEDED = "quota_exceeded"
    TRANSIENT = "transient"
    UNKNOWN = "unknown"


class YouTubeAPIError(Exception):
    """분류된 YouTube API 호출 실패

    call_made 가 False 이면 요청이 원격 서비스에 도달하지 못한 경우이며
    할당량이 소모되지 않은 것으로 취급한다.
    """

    def __init__(
        self,
        kind: RemoteErrorKind,
        message: str,
        status: Optional[int] = None,
        reason: Optional[str] = None,
        call_made: bool = True,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status
        self.reason = reason
        self.call_made = call_made


class BatchValidationError(ValueError):
    """배치 요청 형식 오류 (할당량 확인 전에 거부)"""


class InsufficientQuotaError(Exception):
    """배치 실행에 필요한 할당량 부족"""

    def __init__(self, required_units: int, remaining_units: int):
        super().__init__(
            f"Insufficient quota: {required_units} units required, "
            f"{remaining_units} remaining"
        )
        self.required_units = required_units
        self.remaining_units = remaining_units


class UnknownOperationError(KeyError):
    """비용표에 없는 API 작업 이름"""
