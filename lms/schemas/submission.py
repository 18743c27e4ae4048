from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

SubmissionStatus = Literal["pending", "submitted", "graded", "returned"]


class SubmissionCreate(BaseModel):
    submission_data: str = Field(min_length=1)


class SubmissionRead(BaseModel):
    id: int
    assignment_id: int
    student_id: int
    submission_data: str
    status: SubmissionStatus
    submitted_at: datetime
    score: Optional[int] = None
    feedback: Optional[str] = None
    graded_at: Optional[datetime] = None
    graded_by: Optional[int] = None

    # computed against the assignment due date
    is_late: bool = False
    late_by_minutes: Optional[int] = None

    class Config:
        from_attributes = True


class SubmissionGradeUpdate(BaseModel):
    score: int
    feedback: Optional[str] = None
