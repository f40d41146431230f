from fastapi import APIRouter, Depends, HTTPException
from typing import List
from sqlalchemy.orm import Session
from app.api.v1.deps import get_request_context
from app.core.context import RequestContext
from app.db.database import get_db
from app.schemas.config import ChannelConfigResponse, ConfigUpdate, PlaylistConfigResponse
from app.services.config_service import ConfigService

router = APIRouter(prefix="/config", tags=["config"])


@router.get("/playlists", response_model=List[PlaylistConfigResponse])
async def get_playlist_configs(
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Get saved playlist settings ordered by title."""
    try:
        configs = ConfigService(db).list_playlist_configs(context.account_id)
        return [config.to_dict() for config in configs]
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/playlists", response_model=List[PlaylistConfigResponse])
async def save_playlist_configs(
    updates: List[ConfigUpdate],
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Create or update enable flags for playlists."""
    try:
        configs = ConfigService(db).save_playlist_configs(context.account_id, updates)
        return [config.to_dict() for config in configs]
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/channels", response_model=List[ChannelConfigResponse])
async def get_channel_configs(
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Get saved channel settings ordered by title."""
    try:
        configs = ConfigService(db).list_channel_configs(context.account_id)
        return [config.to_dict() for config in configs]
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/channels", response_model=List[ChannelConfigResponse])
async def save_channel_configs(
    updates: List[ConfigUpdate],
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Create or update enable flags for channels."""
    try:
        configs = ConfigService(db).save_channel_configs(context.account_id, updates)
        return [config.to_dict() for config in configs]
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
