from pydantic import BaseModel, Field
from typing import List
import datetime


class QuotaStatus(BaseModel):
    """오늘의 할당량 상태"""

    date: datetime.date = Field(..., description="할당량 기준 일자")
    consumed_units: int = Field(..., ge=0, description="사용된 할당량")
    daily_limit: int = Field(..., gt=0, description="일일 할당량 한도")
    remaining_units: int = Field(..., description="daily_limit - consumed_units")
    percent_used: float = Field(..., description="사용률 (%)")

    @classmethod
    def build(cls, day: datetime.date, consumed_units: int, daily_limit: int) -> "QuotaStatus":
        return cls(
            date=day,
            consumed_units=consumed_units,
            daily_limit=daily_limit,
            remaining_units=daily_limit - consumed_units,
            percent_used=consumed_units / daily_limit * 100,
        )


class QuotaHistoryItem(BaseModel):
    """일자별 할당량 스냅샷"""

    date: datetime.date
    consumed_units: int
    daily_limit: int


class QuotaOperationCost(BaseModel):
    operation: str
    label: str
    cost: int


class QuotaCostsResponse(BaseModel):
    daily_limit: int
    operations: List[QuotaOperationCost]
    max_transfers_available: int
    max_assigns_available: int
