"""
구독 채널 API 엔드포인트
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.api.v1.deps import get_batch_service, get_request_context, get_youtube_service
from app.api.v1.errors import insufficient_quota_response, youtube_http_exception
from app.core.config import settings
from app.core.context import RequestContext
from app.core.exceptions import BatchValidationError, InsufficientQuotaError, YouTubeAPIError
from app.core.rate_limit import limiter
from app.db.database import get_db
from app.schemas.config import ChannelConfigResponse
from app.schemas.playlist import (
    AssignRequest,
    BatchOperationResult,
    ChannelWithConfig,
    InsufficientQuotaResponse,
    Video,
)
from app.services.batch_service import BatchOperationService
from app.services.config_service import ConfigService
from app.services.youtube_service import YouTubeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/channels", tags=["channels"])


@router.get("", response_model=List[ChannelWithConfig])
async def list_channels(
    context: RequestContext = Depends(get_request_context),
    youtube: YouTubeService = Depends(get_youtube_service),
    db: Session = Depends(get_db),
):
    """구독 채널 조회 (저장된 설정 병합)"""
    try:
        channels = await run_in_threadpool(youtube.list_subscriptions)
        configs = {
            config.channel_id: config
            for config in ConfigService(db).list_channel_configs(context.account_id)
        }

        return [
            ChannelWithConfig(
                **channel.model_dump(),
                config=(
                    ChannelConfigResponse(**configs[channel.id].to_dict())
                    if channel.id in configs
                    else None
                ),
            )
            for channel in channels
        ]

    except YouTubeAPIError as e:
        raise youtube_http_exception(e, "구독 채널 조회")
    except Exception as e:
        logger.error(f"{context.log_prefix} 구독 채널 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="구독 채널 조회에 실패했습니다.")


@router.get("/{channel_id}/videos", response_model=List[Video])
@limiter.limit(settings.channel_videos_rate_limit)
async def list_channel_videos(
    request: Request,
    channel_id: str,
    context: RequestContext = Depends(get_request_context),
    youtube: YouTubeService = Depends(get_youtube_service),
):
    """
    채널 동영상 조회
    - 주의: search.list 페이지당 100 할당량 소모
    """
    try:
        return await run_in_threadpool(youtube.search_by_owner, channel_id)

    except YouTubeAPIError as e:
        raise youtube_http_exception(e, "채널 동영상 조회")
    except Exception as e:
        logger.error(f"{context.log_prefix} 채널 동영상 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="채널 동영상 조회에 실패했습니다.")


@router.post(
    "/assign",
    response_model=BatchOperationResult,
    responses={429: {"model": InsufficientQuotaResponse}},
)
async def assign_videos(
    request: AssignRequest,
    context: RequestContext = Depends(get_request_context),
    batch: BatchOperationService = Depends(get_batch_service),
):
    """
    재생목록에 동영상 추가 (원본에서 삭제하지 않음)
    - 필요 할당량: 동영상당 50
    """
    try:
        return await run_in_threadpool(
            batch.assign, context, request.playlist_id, request.video_ids
        )

    except BatchValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InsufficientQuotaError as e:
        return insufficient_quota_response(e)
    except Exception as e:
        logger.error(f"{context.log_prefix} 동영상 추가 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="동영상 추가에 실패했습니다.")
