"""
재생목록 API 엔드포인트
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.api.v1.deps import get_batch_service, get_request_context, get_youtube_service
from app.api.v1.errors import insufficient_quota_response, youtube_http_exception
from app.core.context import RequestContext
from app.core.exceptions import BatchValidationError, InsufficientQuotaError, YouTubeAPIError
from app.db.database import get_db
from app.schemas.config import PlaylistConfigResponse
from app.schemas.playlist import (
    BatchOperationResult,
    InsufficientQuotaResponse,
    PlaylistWithConfig,
    RemoveRequest,
    TransferRequest,
    Video,
)
from app.services.batch_service import BatchOperationService
from app.services.config_service import ConfigService
from app.services.youtube_service import YouTubeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/playlists", tags=["playlists"])

_BATCH_RESPONSES = {429: {"model": InsufficientQuotaResponse}}


@router.get("", response_model=List[PlaylistWithConfig])
async def list_playlists(
    context: RequestContext = Depends(get_request_context),
    youtube: YouTubeService = Depends(get_youtube_service),
    db: Session = Depends(get_db),
):
    """사용자 재생목록 조회 (저장된 설정 병합)"""
    try:
        playlists = await run_in_threadpool(youtube.list_playlists)
        configs = {
            config.playlist_id: config
            for config in ConfigService(db).list_playlist_configs(context.account_id)
        }

        return [
            PlaylistWithConfig(
                **playlist.model_dump(),
                config=(
                    PlaylistConfigResponse(**configs[playlist.id].to_dict())
                    if playlist.id in configs
                    else None
                ),
            )
            for playlist in playlists
        ]

    except YouTubeAPIError as e:
        raise youtube_http_exception(e, "재생목록 조회")
    except Exception as e:
        logger.error(f"{context.log_prefix} 재생목록 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="재생목록 조회에 실패했습니다.")


@router.get("/{playlist_id}/items", response_model=List[Video])
async def list_playlist_items(
    playlist_id: str,
    context: RequestContext = Depends(get_request_context),
    youtube: YouTubeService = Depends(get_youtube_service),
):
    """재생목록 동영상 조회"""
    try:
        return await run_in_threadpool(youtube.list_playlist_items, playlist_id)

    except YouTubeAPIError as e:
        raise youtube_http_exception(e, "재생목록 항목 조회")
    except Exception as e:
        logger.error(f"{context.log_prefix} 재생목록 항목 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="재생목록 항목 조회에 실패했습니다.")


@router.post("/transfer", response_model=BatchOperationResult, responses=_BATCH_RESPONSES)
async def transfer_videos(
    request: TransferRequest,
    context: RequestContext = Depends(get_request_context),
    batch: BatchOperationService = Depends(get_batch_service),
):
    """
    재생목록 간 동영상 이동
    - 필요 할당량: 동영상당 100 (insert 50 + delete 50)
    """
    try:
        return await run_in_threadpool(
            batch.transfer,
            context,
            request.source_playlist_id,
            request.destination_playlist_id,
            request.videos,
        )

    except BatchValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InsufficientQuotaError as e:
        return insufficient_quota_response(e)
    except Exception as e:
        logger.error(f"{context.log_prefix} 동영상 이동 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="동영상 이동에 실패했습니다.")


@router.post("/remove", response_model=BatchOperationResult, responses=_BATCH_RESPONSES)
async def remove_videos(
    request: RemoveRequest,
    context: RequestContext = Depends(get_request_context),
    batch: BatchOperationService = Depends(get_batch_service),
):
    """
    재생목록에서 동영상 삭제
    - 필요 할당량: 동영상당 50
    """
    try:
        return await run_in_threadpool(
            batch.remove, context, request.source_playlist_id, request.videos
        )

    except BatchValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InsufficientQuotaError as e:
        return insufficient_quota_response(e)
    except Exception as e:
        logger.error(f"{context.log_prefix} 동영상 삭제 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="동영상 삭제에 실패했습니다.")
