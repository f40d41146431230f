"""
YouTube API 할당량 원장 서비스
"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.youtube_quota import QuotaHistory
from app.schemas.quota import QuotaHistoryItem, QuotaStatus
from app.services.quota_costs import cost_of

logger = logging.getLogger(__name__)


def quota_today(timezone_name: Optional[str] = None) -> date:
    """YouTube 할당량이 초기화되는 시간대 기준의 오늘 날짜"""
    tz = ZoneInfo(timezone_name or settings.quota_timezone)
    return datetime.now(tz).date()


class QuotaService:
    """계정별 일일 할당량 조회 및 사용량 기록

    check_available 은 특정 시점의 잔량 확인일 뿐 예약이 아니다.
    동시 배치 간 직렬화는 BatchOperationService 가 담당한다.
    """

    def __init__(
        self,
        db: Session,
        daily_limit: Optional[int] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self.db = db
        self.daily_limit = daily_limit or settings.youtube_quota_limit
        self._today = today or quota_today

    def _find(self, account_id: str, day: date) -> Optional[QuotaHistory]:
        return (
            self.db.query(QuotaHistory)
            .filter(QuotaHistory.account_id == account_id, QuotaHistory.date == day)
            .first()
        )

    def get_status(self, account_id: str) -> QuotaStatus:
        """오늘의 사용량/잔량 조회 (기록이 없으면 0 사용)"""
        today = self._today()
        try:
            record = self._find(account_id, today)
        except SQLAlchemyError as e:
            logger.error(f"할당량 조회 실패 ({account_id}): {str(e)}")
            raise

        consumed = record.consumed_units if record else 0
        return QuotaStatus.build(today, consumed, self.daily_limit)

    def check_available(self, account_id: str, required_units: int) -> bool:
        status = self.get_status(account_id)
        return status.remaining_units >= required_units

    def record_usage(self, account_id: str, operation: str, multiplier: int = 1) -> int:
        """작업 비용 x multiplier 만큼 오늘 사용량을 원자적으로 증가"""
        cost = cost_of(operation) * multiplier
        today = self._today()

        try:
            if not self._increment(account_id, today, cost):
                try:
                    self.db.add(
                        QuotaHistory(
                            account_id=account_id,
                            date=today,
                            consumed_units=cost,
                            daily_limit=self.daily_limit,
                        )
                    )
                    self.db.commit()
                except IntegrityError:
                    # 동시에 생성된 레코드가 있으면 증가로 전환
                    self.db.rollback()
                    self._increment(account_id, today, cost)
                    self.db.commit()
            else:
                self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"할당량 업데이트 실패 ({account_id}, {operation}): {str(e)}")
            raise

        logger.info(f"YouTube 할당량 기록: {account_id} {operation} +{cost}")
        return cost

    def _increment(self, account_id: str, day: date, cost: int) -> bool:
        updated = (
            self.db.query(QuotaHistory)
            .filter(QuotaHistory.account_id == account_id, QuotaHistory.date == day)
            .update(
                {QuotaHistory.consumed_units: QuotaHistory.consumed_units + cost},
                synchronize_session=False,
            )
        )
        return updated > 0

    def get_history(self, account_id: str, days: int = 7) -> List[QuotaHistoryItem]:
        """최근 days 일(오늘 포함)의 기록, 최신순"""
        if days < 1:
            raise ValueError("days must be at least 1")

        start_date = self._today() - timedelta(days=days - 1)
        try:
            records = (
                self.db.query(QuotaHistory)
                .filter(
                    QuotaHistory.account_id == account_id,
                    QuotaHistory.date >= start_date,
                )
                .order_by(QuotaHistory.date.desc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"할당량 이력 조회 실패 ({account_id}): {str(e)}")
            raise

        return [
            QuotaHistoryItem(
                date=record.date,
                consumed_units=record.consumed_units,
                daily_limit=record.daily_limit,
            )
            for record in records
        ]
