"""
YouTube 할당량 API 엔드포인트
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.v1.deps import get_quota_service, get_request_context
from app.core.context import RequestContext
from app.schemas.quota import QuotaCostsResponse, QuotaHistoryItem, QuotaStatus
from app.services import quota_costs
from app.services.quota_service import QuotaService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quota", tags=["quota"])


@router.get("", response_model=QuotaStatus)
async def get_quota_status(
    context: RequestContext = Depends(get_request_context),
    quota: QuotaService = Depends(get_quota_service),
):
    """할당량 상태 조회"""
    try:
        return quota.get_status(context.account_id)

    except Exception as e:
        logger.error(f"{context.log_prefix} 할당량 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail=f"할당량 조회에 실패했습니다: {str(e)}")


@router.get("/history", response_model=List[QuotaHistoryItem])
async def get_quota_history(
    days: int = Query(7, ge=1, le=365, description="조회할 일수 (오늘 포함)"),
    context: RequestContext = Depends(get_request_context),
    quota: QuotaService = Depends(get_quota_service),
):
    """할당량 사용 이력 조회 (최신순)"""
    try:
        return quota.get_history(context.account_id, days)

    except Exception as e:
        logger.error(f"{context.log_prefix} 할당량 이력 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail=f"할당량 이력 조회에 실패했습니다: {str(e)}")


@router.get("/costs", response_model=QuotaCostsResponse)
async def get_quota_costs(
    context: RequestContext = Depends(get_request_context),
    quota: QuotaService = Depends(get_quota_service),
):
    """작업별 할당량 비용 및 오늘 가능한 작업 수"""
    try:
        remaining = quota.get_status(context.account_id).remaining_units
    except Exception as e:
        logger.error(f"{context.log_prefix} 할당량 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail=f"할당량 조회에 실패했습니다: {str(e)}")

    return QuotaCostsResponse(
        daily_limit=quota.daily_limit,
        operations=quota_costs.describe_operations(),
        max_transfers_available=quota_costs.max_transfers_available(remaining),
        max_assigns_available=quota_costs.max_assigns_available(remaining),
    )
