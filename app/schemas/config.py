from pydantic import BaseModel, Field
from typing import Optional


class PlaylistConfigResponse(BaseModel):
    id: str
    playlist_id: str
    title: str
    is_enabled: bool
    video_count: int = 0
    total_duration_seconds: int = 0


class ChannelConfigResponse(BaseModel):
    id: str
    channel_id: str
    title: str
    is_enabled: bool
    subscription_date: Optional[str] = None
    total_duration_seconds: int = 0


class ConfigUpdate(BaseModel):
    """재생목록/채널 활성화 설정 변경 요청 항목"""

    id: str = Field(..., min_length=1, description="재생목록 ID 또는 채널 ID")
    title: str = Field(..., description="표시 이름")
    is_enabled: bool = Field(default=True, description="활성화 여부")
