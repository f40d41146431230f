"""
재생목록/채널 활성화 설정 관리 서비스
"""

from typing import List, Type, Union
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.models.user_config import ChannelConfig, PlaylistConfig
from app.schemas.config import ConfigUpdate
import logging

logger = logging.getLogger(__name__)

ConfigModel = Union[PlaylistConfig, ChannelConfig]


class ConfigService:
    """계정별 설정 조회 및 upsert"""

    def __init__(self, db: Session):
        self.db = db

    def list_playlist_configs(self, account_id: str) -> List[PlaylistConfig]:
        return self._list(PlaylistConfig, account_id)

    def list_channel_configs(self, account_id: str) -> List[ChannelConfig]:
        return self._list(ChannelConfig, account_id)

    def save_playlist_configs(
        self, account_id: str, updates: List[ConfigUpdate]
    ) -> List[PlaylistConfig]:
        return self._upsert(PlaylistConfig, PlaylistConfig.playlist_id, "playlist_id", account_id, updates)

    def save_channel_configs(
        self, account_id: str, updates: List[ConfigUpdate]
    ) -> List[ChannelConfig]:
        return self._upsert(ChannelConfig, ChannelConfig.channel_id, "channel_id", account_id, updates)

    def _list(self, model: Type[ConfigModel], account_id: str) -> List[ConfigModel]:
        return (
            self.db.query(model)
            .filter(model.account_id == account_id)
            .order_by(model.title.asc())
            .all()
        )

    def _upsert(self, model, key_column, key_name: str, account_id: str, updates: List[ConfigUpdate]):
        saved = []
        try:
            for update in updates:
                config = (
                    self.db.query(model)
                    .filter(model.account_id == account_id, key_column == update.id)
                    .first()
                )
                if config:
                    config.title = update.title
                    config.is_enabled = update.is_enabled
                else:
                    config = model(
                        account_id=account_id,
                        title=update.title,
                        is_enabled=update.is_enabled,
                        **{key_name: update.id},
                    )
                    self.db.add(config)
                saved.append(config)

            self.db.commit()
            for config in saved:
                self.db.refresh(config)

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"설정 저장 실패 ({model.__tablename__}): {str(e)}")
            raise

        logger.info(f"설정 저장됨 - {model.__tablename__}: {len(saved)}개 ({account_id})")
        return saved
