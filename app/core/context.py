"""
요청 단위 컨텍스트
"""

import secrets
import time
from dataclasses import dataclass, field


def generate_trace_id() -> str:
    """요청 추적용 ID 생성 (타임스탬프-랜덤)"""
    timestamp = format(int(time.time() * 1000), "x")
    return f"{timestamp}-{secrets.token_hex(3)}"


@dataclass(frozen=True)
class RequestContext:
    """계정 ID, OAuth 액세스 토큰, 추적 ID 를 묶어 각 작업에 명시적으로 전달"""

    account_id: str
    access_token: str = field(default="", repr=False)
    trace_id: str = field(default_factory=generate_trace_id)

    @property
    def log_prefix(self) -> str:
        return f"[{self.trace_id}]"
