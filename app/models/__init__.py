from .youtube_quota import QuotaHistory
from .user_config import PlaylistConfig, ChannelConfig

__all__ = ["QuotaHistory", "PlaylistConfig", "ChannelConfig"]
