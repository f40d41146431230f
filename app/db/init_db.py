import logging

from app.db.database import Base, engine
from app import models  # noqa: F401  테이블 메타데이터 등록

logger = logging.getLogger(__name__)


def init_database(bind=None):
    """모든 테이블 생성 (이미 존재하는 테이블은 건너뜀)"""
    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.info(f"Tables ensured: {', '.join(sorted(Base.metadata.tables))}")
