from sqlalchemy import Column, String, Integer, Boolean, DateTime, UniqueConstraint
import uuid
from datetime import datetime
from app.db.database import Base


class PlaylistConfig(Base):
    __tablename__ = "playlist_configs"
    __table_args__ = (
        UniqueConstraint("account_id", "playlist_id", name="uq_playlist_config_account"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    account_id = Column(String, nullable=False, index=True)
    playlist_id = Column(String, nullable=False)
    title = Column(String, nullable=False)
    is_enabled = Column(Boolean, default=True, nullable=False)
    video_count = Column(Integer, default=0)
    total_duration_seconds = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        """Convert model to dictionary for API response."""
        return {
            "id": self.id,
            "playlist_id": self.playlist_id,
            "title": self.title,
            "is_enabled": self.is_enabled,
            "video_count": self.video_count or 0,
            "total_duration_seconds": self.total_duration_seconds or 0,
        }


class ChannelConfig(Base):
    __tablename__ = "channel_configs"
    __table_args__ = (
        UniqueConstraint("account_id", "channel_id", name="uq_channel_config_account"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    account_id = Column(String, nullable=False, index=True)
    channel_id = Column(String, nullable=False)
    title = Column(String, nullable=False)
    is_enabled = Column(Boolean, default=True, nullable=False)
    subscription_date = Column(String)  # ISO 8601 (YouTube 응답 그대로)
    total_duration_seconds = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        """Convert model to dictionary for API response."""
        return {
            "id": self.id,
            "channel_id": self.channel_id,
            "title": self.title,
            "is_enabled": self.is_enabled,
            "subscription_date": self.subscription_date,
            "total_duration_seconds": self.total_duration_seconds or 0,
        }
