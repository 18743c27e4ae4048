from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional

EvaluationType = Literal["automatic", "manual"]


class AssignmentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    evaluation_type: EvaluationType = "manual"
    due_date: Optional[datetime] = None
    max_points: int = Field(gt=0)


class AssignmentRead(BaseModel):
    id: int
    lesson_id: int
    title: str
    description: Optional[str]
    evaluation_type: EvaluationType
    due_date: Optional[datetime]
    max_points: int
    created_at: datetime

    class Config:
        from_attributes = True
