from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class EnrollmentCreate(BaseModel):
    course_id: int
    # staff only; students always enroll themselves
    student_id: Optional[int] = None


class EnrollmentOut(BaseModel):
    id: int
    course_id: int
    student_id: int
    enrolled_at: datetime
    completed_at: Optional[datetime] = None
    progress_percentage: int

    class Config:
        from_attributes = True
