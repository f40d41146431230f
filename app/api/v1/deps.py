"""
공통 API 의존성 (인증 컨텍스트, 서비스 생성)
"""

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.context import RequestContext, generate_trace_id
from app.db.database import get_db
from app.services.auth_service import auth_service
from app.services.batch_service import BatchOperationService
from app.services.quota_service import QuotaService
from app.services.youtube_service import YouTubeService


async def get_request_context(request: Request) -> RequestContext:
    """
    세션 JWT 로 요청 컨텍스트 생성
    - Bearer 헤더 또는 access_token 쿠키
    - payload 의 user_id / access_token 필수
    """
    token = None
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[7:]  # "Bearer " 제거
    if not token:
        token = request.cookies.get("access_token")

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="인증 토큰이 없습니다.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = auth_service.verify_token(token)
    if not payload or not payload.get("user_id") or not payload.get("access_token"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="유효하지 않은 토큰입니다.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    trace_id = getattr(request.state, "trace_id", None) or generate_trace_id()
    return RequestContext(
        account_id=str(payload["user_id"]),
        access_token=payload["access_token"],
        trace_id=trace_id,
    )


def get_quota_service(db: Session = Depends(get_db)) -> QuotaService:
    return QuotaService(db)


def get_youtube_service(
    context: RequestContext = Depends(get_request_context),
    quota: QuotaService = Depends(get_quota_service),
) -> YouTubeService:
    return YouTubeService.from_access_token(quota, context)


def get_batch_service(
    youtube: YouTubeService = Depends(get_youtube_service),
    quota: QuotaService = Depends(get_quota_service),
) -> BatchOperationService:
    return BatchOperationService(youtube, quota)
