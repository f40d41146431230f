"""
서비스 예외 -> HTTP 응답 변환
"""

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse

from app.core.exceptions import InsufficientQuotaError, RemoteErrorKind, YouTubeAPIError
from app.schemas.playlist import InsufficientQuotaResponse


def insufficient_quota_response(error: InsufficientQuotaError) -> JSONResponse:
    body = InsufficientQuotaResponse(
        required_units=error.required_units,
        remaining_units=error.remaining_units,
    )
    return JSONResponse(status_code=status.HTTP_429_TOO_MANY_REQUESTS, content=body.model_dump())


def youtube_http_exception(error: YouTubeAPIError, action: str) -> HTTPException:
    if error.kind == RemoteErrorKind.QUOTA_EXCEEDED:
        return HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="YouTube 일일 할당량을 초과했습니다. 내일 다시 시도해주세요.",
        )
    if error.kind == RemoteErrorKind.NOT_FOUND:
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{action}: 대상을 찾을 수 없습니다.",
        )
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"{action}에 실패했습니다: {error.message}",
    )
