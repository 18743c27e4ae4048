from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ProgressUpdate(BaseModel):
    # seconds to add to the running total
    time_spent: int = Field(default=0, ge=0)
    completed: Optional[bool] = None


class ProgressRead(BaseModel):
    id: int
    student_id: int
    lesson_id: int
    completed: bool
    completion_date: Optional[datetime] = None
    time_spent: int
    updated_at: datetime

    class Config:
        from_attributes = True
