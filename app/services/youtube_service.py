"""
YouTube Data API v3 서비스
"""

import logging
from typing import Any, Dict, List, Optional

import httplib2
from google.auth.exceptions import TransportError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from app.core.config import settings
from app.core.context import RequestContext
from app.core.exceptions import RemoteErrorKind, YouTubeAPIError
from app.schemas.playlist import Channel, ItemOutcome, Playlist, Video
from app.services import quota_costs
from app.services.quota_service import QuotaService
from app.utils.youtube_utils import chunked, parse_duration, thumbnail_url, to_int

logger = logging.getLogger(__name__)

PAGE_SIZE = 50
METADATA_BATCH_SIZE = 50

ALREADY_EXISTS_MESSAGE = "Video is already in the destination playlist (duplicate)"

_ALREADY_EXISTS_REASONS = {"videoAlreadyInPlaylist", "duplicate"}
_QUOTA_REASONS = {
    "quotaExceeded",
    "dailyLimitExceeded",
    "rateLimitExceeded",
    "userRateLimitExceeded",
}
_TRANSIENT_STATUSES = {429, 500, 502, 503, 504}
# 원격 서비스에 도달하지 못한 전송 계층 오류 (할당량 미소모)
_TRANSPORT_ERRORS = (httplib2.HttpLib2Error, TransportError, OSError)


def classify_http_error(error: HttpError) -> YouTubeAPIError:
    """HttpError 를 RemoteErrorKind 로 한 번만 분류"""
    status = getattr(error.resp, "status", None)
    try:
        status = int(status) if status is not None else None
    except (TypeError, ValueError):
        status = None

    details = error.error_details if isinstance(error.error_details, list) else []
    first = details[0] if details and isinstance(details[0], dict) else {}
    reason = first.get("reason")
    message = first.get("message") or getattr(error, "reason", None) or str(error)

    if status == 409 or reason in _ALREADY_EXISTS_REASONS:
        kind = RemoteErrorKind.ALREADY_EXISTS
    elif status == 404:
        kind = RemoteErrorKind.NOT_FOUND
    elif reason in _QUOTA_REASONS:
        kind = RemoteErrorKind.QUOTA_EXCEEDED
    elif status in _TRANSIENT_STATUSES:
        kind = RemoteErrorKind.TRANSIENT
    else:
        kind = RemoteErrorKind.UNKNOWN

    return YouTubeAPIError(kind, message, status=status, reason=reason, call_made=True)


class YouTubeService:
    """YouTube Data API v3 서비스

    요청 단위로 생성되며 모든 원격 호출의 할당량을 QuotaService 에 기록한다.
    """

    def __init__(self, service, quota: QuotaService, context: RequestContext):
        self.service = service
        self.quota = quota
        self.context = context

    @classmethod
    def from_access_token(cls, quota: QuotaService, context: RequestContext) -> "YouTubeService":
        """OAuth 액세스 토큰으로 인증된 YouTube API 서비스 생성"""
        try:
            credentials = Credentials(
                token=context.access_token,
                client_id=settings.google_client_id or None,
                client_secret=settings.google_client_secret or None,
            )
            service = build("youtube", "v3", credentials=credentials, cache_discovery=False)
        except Exception as e:
            logger.error(f"{context.log_prefix} YouTube 서비스 생성 실패: {str(e)}")
            raise
        return cls(service, quota, context)

    def _execute(self, request, operation: str) -> Dict[str, Any]:
        """요청 실행 후 할당량 기록 (원격 서비스가 응답한 경우에만)"""
        prefix = self.context.log_prefix
        try:
            response = request.execute()
        except HttpError as e:
            self.quota.record_usage(self.context.account_id, operation)
            api_error = classify_http_error(e)
            logger.error(
                f"{prefix} YouTube API 오류 [{operation}]: "
                f"{api_error.kind.value} ({api_error.reason}) - {api_error.message}"
            )
            raise api_error from e
        except _TRANSPORT_ERRORS as e:
            logger.error(f"{prefix} YouTube API 연결 실패 [{operation}]: {str(e)}")
            raise YouTubeAPIError(
                RemoteErrorKind.TRANSIENT, str(e) or type(e).__name__, call_made=False
            ) from e

        self.quota.record_usage(self.context.account_id, operation)
        logger.debug(f"{prefix} YouTube API 호출 성공 [{operation}]")
        return response or {}

    def list_playlists(self) -> List[Playlist]:
        """사용자 재생목록 전체 조회 (50개 단위 페이지)"""
        playlists: List[Playlist] = []
        page_token: Optional[str] = None

        while True:
            response = self._execute(
                self.service.playlists().list(
                    part="snippet,contentDetails",
                    mine=True,
                    maxResults=PAGE_SIZE,
                    pageToken=page_token,
                ),
                quota_costs.PLAYLISTS_LIST,
            )

            for item in response.get("items", []):
                snippet = item.get("snippet") or {}
                playlists.append(
                    Playlist(
                        id=item["id"],
                        title=snippet.get("title", ""),
                        description=snippet.get("description", ""),
                        item_count=to_int((item.get("contentDetails") or {}).get("itemCount")),
                        created_date=snippet.get("publishedAt", ""),
                        thumbnail_url=thumbnail_url(snippet),
                    )
                )

            page_token = response.get("nextPageToken")
            if not page_token:
                break

        logger.info(f"{self.context.log_prefix} 재생목록 {len(playlists)}개 조회")
        return playlists

    def list_playlist_items(self, playlist_id: str) -> List[Video]:
        """재생목록 항목 조회 후 동영상 메타데이터 병합"""
        videos: List[Video] = []
        page_token: Optional[str] = None

        # 1. 항목 ID / 동영상 ID 수집
        while True:
            response = self._execute(
                self.service.playlistItems().list(
                    part="snippet,contentDetails",
                    playlistId=playlist_id,
                    maxResults=PAGE_SIZE,
                    pageToken=page_token,
                ),
                quota_costs.PLAYLIST_ITEMS_LIST,
            )

            for item in response.get("items", []):
                video_id = (item.get("contentDetails") or {}).get("videoId")
                if not video_id:
                    continue
                snippet = item.get("snippet") or {}
                videos.append(
                    Video(
                        playlist_item_id=item["id"],
                        video_id=video_id,
                        title=snippet.get("title", ""),
                        description=snippet.get("description") or None,
                        channel_id=snippet.get("videoOwnerChannelId"),
                        channel_title=snippet.get("videoOwnerChannelTitle", ""),
                        thumbnail_url=thumbnail_url(snippet) or "",
                        added_to_playlist_at=snippet.get("publishedAt"),
                    )
                )

            page_token = response.get("nextPageToken")
            if not page_token:
                break

        # 2. 50개 단위로 메타데이터 병합
        self._merge_video_details(videos)
        logger.info(
            f"{self.context.log_prefix} 재생목록 {playlist_id} 항목 {len(videos)}개 조회"
        )
        return videos

    def _fetch_video_details(self, video_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        """videos.list 를 50개 단위로 호출, 실패한 배치는 로그만 남김"""
        details: Dict[str, Dict[str, Any]] = {}
        unique_ids = list(dict.fromkeys(video_ids))

        for batch in chunked(unique_ids, METADATA_BATCH_SIZE):
            try:
                response = self._execute(
                    self.service.videos().list(
                        part="snippet,contentDetails,statistics",
                        id=",".join(batch),
                        maxResults=METADATA_BATCH_SIZE,
                    ),
                    quota_costs.VIDEOS_LIST,
                )
            except YouTubeAPIError as e:
                logger.warning(
                    f"{self.context.log_prefix} 동영상 상세 조회 실패 "
                    f"({len(batch)}개, 메타데이터 없이 진행): {e.message}"
                )
                continue

            for video in response.get("items", []):
                details[video["id"]] = video

        return details

    def _merge_video_details(self, videos: List[Video]) -> None:
        details = self._fetch_video_details([video.video_id for video in videos])
        for video in videos:
            data = details.get(video.video_id)
            if not data:
                continue
            snippet = data.get("snippet") or {}
            duration = (data.get("contentDetails") or {}).get("duration", "")
            video.duration = duration
            video.duration_in_seconds = parse_duration(duration)
            video.view_count = to_int((data.get("statistics") or {}).get("viewCount"))
            video.language = snippet.get("defaultAudioLanguage", "")
            video.published_at = snippet.get("publishedAt", "")
            # 목록 응답에 없던 값만 채움
            video.title = video.title or snippet.get("title", "")
            video.description = video.description or snippet.get("description") or None
            video.channel_id = video.channel_id or snippet.get("channelId")
            video.channel_title = video.channel_title or snippet.get("channelTitle", "")
            video.thumbnail_url = video.thumbnail_url or thumbnail_url(snippet) or ""

    def insert_item(self, playlist_id: str, video_id: str) -> ItemOutcome:
        """재생목록에 동영상 추가 (원격 오류는 결과로 반환)"""
        body = {
            "snippet": {
                "playlistId": playlist_id,
                "resourceId": {"kind": "youtube#video", "videoId": video_id},
            }
        }
        try:
            self._execute(
                self.service.playlistItems().insert(part="snippet", body=body),
                quota_costs.PLAYLIST_ITEMS_INSERT,
            )
        except YouTubeAPIError as e:
            if e.kind == RemoteErrorKind.ALREADY_EXISTS:
                message = ALREADY_EXISTS_MESSAGE
            else:
                message = e.message
            return ItemOutcome(
                success=False, error=message, error_kind=e.kind.value, call_made=e.call_made
            )

        logger.info(f"{self.context.log_prefix} 동영상 추가: {video_id} -> {playlist_id}")
        return ItemOutcome(success=True)

    def delete_item(self, playlist_item_id: str) -> ItemOutcome:
        """재생목록 항목 삭제 (원격 오류는 결과로 반환)"""
        try:
            self._execute(
                self.service.playlistItems().delete(id=playlist_item_id),
                quota_costs.PLAYLIST_ITEMS_DELETE,
            )
        except YouTubeAPIError as e:
            return ItemOutcome(
                success=False, error=e.message, error_kind=e.kind.value, call_made=e.call_made
            )

        logger.info(f"{self.context.log_prefix} 재생목록 항목 삭제: {playlist_item_id}")
        return ItemOutcome(success=True)

    def search_by_owner(self, channel_id: str, max_pages: Optional[int] = None) -> List[Video]:
        """채널 동영상 검색 (search.list 페이지당 100 할당량)"""
        if max_pages is None:
            max_pages = settings.youtube_search_max_pages
        if max_pages < 1:
            raise ValueError(f"max_pages must be at least 1: {max_pages}")

        videos: List[Video] = []
        seen = set()
        page_token: Optional[str] = None

        for _ in range(max_pages):
            response = self._execute(
                self.service.search().list(
                    part="snippet",
                    channelId=channel_id,
                    type="video",
                    order="date",
                    maxResults=PAGE_SIZE,
                    pageToken=page_token,
                ),
                quota_costs.SEARCH_LIST,
            )
            for item in response.get("items", []):
                video_id = (item.get("id") or {}).get("videoId")
                if not video_id or video_id in seen:
                    continue
                seen.add(video_id)
                snippet = item.get("snippet") or {}
                videos.append(
                    Video(
                        playlist_item_id="",
                        video_id=video_id,
                        title=snippet.get("title", ""),
                        channel_id=snippet.get("channelId") or channel_id,
                        channel_title=snippet.get("channelTitle", ""),
                        thumbnail_url=thumbnail_url(snippet) or "",
                    )
                )

            page_token = response.get("nextPageToken")
            if not page_token:
                break

        # 메타데이터 조회 실패 시에도 검색 결과는 유지
        self._merge_video_details(videos)

        logger.info(f"{self.context.log_prefix} 채널 {channel_id} 동영상 {len(videos)}개 조회")
        return videos

    def list_subscriptions(self) -> List[Channel]:
        """구독 채널 조회 후 채널 통계 병합"""
        channels: List[Channel] = []
        page_token: Optional[str] = None

        while True:
            response = self._execute(
                self.service.subscriptions().list(
                    part="snippet",
                    mine=True,
                    maxResults=PAGE_SIZE,
                    pageToken=page_token,
                ),
                quota_costs.SUBSCRIPTIONS_LIST,
            )
            for item in response.get("items", []):
                snippet = item.get("snippet") or {}
                channel_id = (snippet.get("resourceId") or {}).get("channelId")
                if not channel_id:
                    continue
                channels.append(
                    Channel(
                        id=channel_id,
                        title=snippet.get("title", ""),
                        description=snippet.get("description", ""),
                        thumbnail_url=thumbnail_url(snippet) or "",
                        subscribed_at=snippet.get("publishedAt"),
                    )
                )

            page_token = response.get("nextPageToken")
            if not page_token:
                break

        by_id = {channel.id: channel for channel in channels}
        for batch in chunked(list(by_id), METADATA_BATCH_SIZE):
            try:
                response = self._execute(
                    self.service.channels().list(part="statistics", id=",".join(batch)),
                    quota_costs.CHANNELS_LIST,
                )
            except YouTubeAPIError as e:
                logger.warning(
                    f"{self.context.log_prefix} 채널 통계 조회 실패 ({len(batch)}개): {e.message}"
                )
                continue

            for data in response.get("items", []):
                channel = by_id.get(data.get("id"))
                if channel:
                    statistics = data.get("statistics") or {}
                    channel.subscriber_count = to_int(statistics.get("subscriberCount"))
                    channel.video_count = to_int(statistics.get("videoCount"))

        logger.info(f"{self.context.log_prefix} 구독 채널 {len(channels)}개 조회")
        return channels
