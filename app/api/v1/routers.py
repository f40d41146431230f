from fastapi import APIRouter
from .playlists import router as playlists_router
from .channels import router as channels_router
from .quota import router as quota_router
from .config import router as config_router
from app.core.config import settings


api_router = APIRouter(prefix=settings.api_prefix)

api_router.include_router(playlists_router)
api_router.include_router(channels_router)
api_router.include_router(quota_router)
api_router.include_router(config_router)
