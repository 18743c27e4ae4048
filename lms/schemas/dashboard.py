from datetime import datetime

from pydantic import BaseModel, Field


class RecentActivity(BaseModel):
    id: int
    type: str
    description: str
    created_at: datetime
    user_name: str


class DashboardStats(BaseModel):
    total_students: int = Field(ge=0)
    total_courses: int = Field(ge=0)
    total_lessons: int = Field(ge=0)
    active_subscriptions: int = Field(ge=0)
    recent_activities: list[RecentActivity] = Field(default_factory=list)
