"""
YouTube 할당량 관리 DB 모델
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from app.db.database import Base


class QuotaHistory(Base):
    """계정별 일일 YouTube API 할당량 사용량 (일자별 1행, 삭제하지 않음)"""

    __tablename__ = "quota_history"
    __table_args__ = (
        UniqueConstraint("account_id", "date", name="uq_quota_history_account_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    consumed_units = Column(Integer, default=0, nullable=False)  # 사용된 할당량
    daily_limit = Column(Integer, nullable=False)  # 레코드 생성 시점의 일일 한도
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return (
            f"<QuotaHistory(account_id={self.account_id}, date={self.date}, "
            f"consumed_units={self.consumed_units})>"
        )
