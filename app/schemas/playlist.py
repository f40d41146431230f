from pydantic import BaseModel, Field
from typing import List, Optional, Literal

from app.schemas.config import ChannelConfigResponse, PlaylistConfigResponse


class VideoRef(BaseModel):
    """재생목록 내 항목 참조 (playlist_item_id 는 해당 재생목록에서만 유효)"""

    playlist_item_id: str = Field(default="", description="재생목록 항목 ID (삭제용)")
    video_id: str = Field(..., description="YouTube 동영상 ID")


class Video(VideoRef):
    """메타데이터가 병합된 동영상"""

    title: str = ""
    description: Optional[str] = None
    channel_id: Optional[str] = None
    channel_title: str = ""
    duration: str = Field(default="", description="ISO 8601 (예: PT1H2M3S)")
    duration_in_seconds: int = 0
    view_count: int = 0
    language: str = ""
    published_at: str = ""
    added_to_playlist_at: Optional[str] = None
    thumbnail_url: str = ""


class Playlist(BaseModel):
    id: str
    title: str = ""
    description: str = ""
    item_count: int = 0
    created_date: str = ""
    thumbnail_url: Optional[str] = None


class PlaylistWithConfig(Playlist):
    config: Optional[PlaylistConfigResponse] = None


class Channel(BaseModel):
    id: str
    title: str = ""
    description: str = ""
    subscriber_count: int = 0
    video_count: int = 0
    thumbnail_url: str = ""
    subscribed_at: Optional[str] = None


class ChannelWithConfig(Channel):
    config: Optional[ChannelConfigResponse] = None


class ItemOutcome(BaseModel):
    """단일 insert/delete 호출 결과"""

    success: bool
    error: Optional[str] = None
    error_kind: Optional[str] = None
    call_made: bool = True


class BatchItemResult(BaseModel):
    video_id: str
    status: Literal["success", "error"]
    error: Optional[str] = None
    error_kind: Optional[str] = None


class BatchOperationResult(BaseModel):
    """배치 작업 결과 (details 는 요청 순서를 유지)"""

    success: bool
    success_count: int
    error_count: int
    details: List[BatchItemResult]

    @classmethod
    def from_details(cls, details: List[BatchItemResult]) -> "BatchOperationResult":
        error_count = sum(1 for item in details if item.status == "error")
        return cls(
            success=error_count == 0,
            success_count=len(details) - error_count,
            error_count=error_count,
            details=details,
        )


class TransferRequest(BaseModel):
    source_playlist_id: str = ""
    destination_playlist_id: str = ""
    videos: List[VideoRef] = Field(default_factory=list)


class RemoveRequest(BaseModel):
    source_playlist_id: str = ""
    videos: List[VideoRef] = Field(default_factory=list)


class AssignRequest(BaseModel):
    playlist_id: str = ""
    video_ids: List[str] = Field(default_factory=list)


class InsufficientQuotaResponse(BaseModel):
    error: Literal["insufficient_quota"] = "insufficient_quota"
    required_units: int
    remaining_units: int
