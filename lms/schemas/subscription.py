from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

SubscriptionStatus = Literal["active", "expired", "cancelled", "pending"]


class SubscriptionCreate(BaseModel):
    course_id: int
    start_date: datetime
    end_date: datetime
    amount: float = Field(gt=0)


class SubscriptionStatusUpdate(BaseModel):
    status: SubscriptionStatus


class SubscriptionRead(BaseModel):
    id: int
    user_id: int
    course_id: int
    status: SubscriptionStatus
    start_date: datetime
    end_date: datetime
    amount: float
    created_at: datetime

    class Config:
        from_attributes = True
