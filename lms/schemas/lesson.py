from datetime import datetime

from pydantic import BaseModel, Field


class LessonCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    order_index: int = Field(ge=0)


class LessonUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    order_index: int | None = Field(default=None, ge=0)


class LessonRead(BaseModel):
    id: int
    course_id: int
    title: str
    description: str | None
    order_index: int
    created_at: datetime

    class Config:
        from_attributes = True
