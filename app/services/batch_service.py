"""
재생목록 배치 작업 서비스 (이동 / 추가 / 삭제)
"""

import logging
import threading
import weakref
from contextlib import contextmanager, nullcontext
from typing import Callable, List, Optional, Sequence

from app.core.config import settings
from app.core.context import RequestContext
from app.core.exceptions import BatchValidationError, InsufficientQuotaError
from app.schemas.playlist import BatchItemResult, BatchOperationResult, ItemOutcome, VideoRef
from app.services import quota_costs
from app.services.quota_service import QuotaService
from app.services.youtube_service import YouTubeService

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Cancelled before processing"

ItemCallback = Callable[[int, BatchItemResult], None]


class AccountLockRegistry:
    """계정 ID 별 잠금 (같은 프로세스 내 동시 배치 직렬화)

    잠금을 참조하는 곳이 없으면 항목이 자동으로 제거된다.
    """

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[str, threading.Lock]" = (
            weakref.WeakValueDictionary()
        )
        self._guard = threading.Lock()

    def lock_for(self, account_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(account_id)
            if lock is None:
                lock = self._locks[account_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, account_id: str):
        lock = self.lock_for(account_id)
        with lock:
            yield


account_locks = AccountLockRegistry()


def _item_result(video_id: str, outcome: ItemOutcome) -> BatchItemResult:
    if outcome.success:
        return BatchItemResult(video_id=video_id, status="success")
    return BatchItemResult(
        video_id=video_id,
        status="error",
        error=outcome.error,
        error_kind=outcome.error_kind,
    )


class BatchOperationService:
    """할당량 사전 확인 후 항목을 입력 순서대로 하나씩 처리

    Requested -> QuotaChecked -> Executing -> Completed
    """

    def __init__(
        self,
        youtube: YouTubeService,
        quota: QuotaService,
        locks: Optional[AccountLockRegistry] = None,
        serialize: Optional[bool] = None,
    ):
        self.youtube = youtube
        self.quota = quota
        self.locks = locks if locks is not None else account_locks
        self.serialize = (
            settings.serialize_batches_per_account if serialize is None else serialize
        )

    def transfer(
        self,
        context: RequestContext,
        source_playlist_id: str,
        destination_playlist_id: str,
        items: Sequence[VideoRef],
        on_item: Optional[ItemCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BatchOperationResult:
        """원본 -> 대상 이동 (대상 추가가 확인된 경우에만 원본 삭제)"""
        if not source_playlist_id or not destination_playlist_id:
            raise BatchValidationError("Source and destination playlist ids are required")
        if source_playlist_id == destination_playlist_id:
            raise BatchValidationError("Source and destination playlists are the same")
        self._validate_refs(items)

        def step(item: VideoRef) -> BatchItemResult:
            inserted = self.youtube.insert_item(destination_playlist_id, item.video_id)
            if not inserted.success:
                return _item_result(item.video_id, inserted)
            # 삭제 실패 시 양쪽에 중복으로 남지만 유실되지는 않음
            deleted = self.youtube.delete_item(item.playlist_item_id)
            return _item_result(item.video_id, deleted)

        return self._run(
            context,
            "transfer",
            quota_costs.transfer_cost(len(items)),
            [(item.video_id, item) for item in items],
            step,
            on_item,
            cancel_event,
        )

    def assign(
        self,
        context: RequestContext,
        playlist_id: str,
        video_ids: Sequence[str],
        on_item: Optional[ItemCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BatchOperationResult:
        """재생목록에 추가만 수행 (삭제 없음)"""
        if not playlist_id:
            raise BatchValidationError("Playlist id is required")
        if not video_ids:
            raise BatchValidationError("No videos selected")
        if any(not video_id for video_id in video_ids):
            raise BatchValidationError("Video ids must not be empty")

        def step(video_id: str) -> BatchItemResult:
            return _item_result(video_id, self.youtube.insert_item(playlist_id, video_id))

        return self._run(
            context,
            "assign",
            quota_costs.assign_cost(len(video_ids)),
            [(video_id, video_id) for video_id in video_ids],
            step,
            on_item,
            cancel_event,
        )

    def remove(
        self,
        context: RequestContext,
        playlist_id: str,
        items: Sequence[VideoRef],
        on_item: Optional[ItemCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BatchOperationResult:
        if not playlist_id:
            raise BatchValidationError("Source playlist id is required")
        self._validate_refs(items)

        def step(item: VideoRef) -> BatchItemResult:
            return _item_result(item.video_id, self.youtube.delete_item(item.playlist_item_id))

        return self._run(
            context,
            "remove",
            quota_costs.remove_cost(len(items)),
            [(item.video_id, item) for item in items],
            step,
            on_item,
            cancel_event,
        )

    @staticmethod
    def _validate_refs(items: Sequence[VideoRef]) -> None:
        if not items:
            raise BatchValidationError("No videos selected")
        for item in items:
            if not item.video_id or not item.playlist_item_id:
                raise BatchValidationError(
                    "Each video needs both a playlist item id and a video id"
                )

    def _run(
        self,
        context: RequestContext,
        operation: str,
        required_units: int,
        entries: List[tuple],
        step: Callable,
        on_item: Optional[ItemCallback],
        cancel_event: Optional[threading.Event],
    ) -> BatchOperationResult:
        prefix = context.log_prefix
        guard = self.locks.hold(context.account_id) if self.serialize else nullcontext()

        with guard:
            # 1. 할당량 사전 확인
            if not self.quota.check_available(context.account_id, required_units):
                remaining = self.quota.get_status(context.account_id).remaining_units
                logger.warning(
                    f"{prefix} {operation} 할당량 부족: "
                    f"필요 {required_units}, 남은 할당량 {remaining}"
                )
                raise InsufficientQuotaError(required_units, remaining)

            logger.info(
                f"{prefix} {operation} 시작: {len(entries)}개 항목, 예상 비용 {required_units}"
            )

            # 2. 순차 실행 (취소는 항목 사이에서만 반영)
            details: List[BatchItemResult] = []
            for index, (video_id, item) in enumerate(entries):
                if cancel_event is not None and cancel_event.is_set():
                    result = BatchItemResult(
                        video_id=video_id, status="error", error=CANCELLED_MESSAGE
                    )
                else:
                    result = step(item)
                    if result.status == "error":
                        logger.warning(
                            f"{prefix} {operation} 항목 실패 ({video_id}): {result.error}"
                        )

                details.append(result)
                if on_item is not None:
                    on_item(index, result)

        result = BatchOperationResult.from_details(details)
        logger.info(
            f"{prefix} {operation} 완료: 성공 {result.success_count}, 실패 {result.error_count}"
        )
        return result
