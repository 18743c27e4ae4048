from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import relationship

from lms.db.base_class import Base


class StudentProgress(Base):
    __tablename__ = "student_progress"

    id = Column(Integer, primary_key=True, index=True)

    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    lesson_id = Column(Integer, ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False, index=True)

    completed = Column(Boolean, nullable=False, default=False)
    # set once, on the first transition to completed
    completion_date = Column(DateTime(timezone=True), nullable=True)
    # seconds, accumulated across updates
    time_spent = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("student_id", "lesson_id", name="uq_student_progress_student_lesson"),
    )

    student = relationship("User", back_populates="progress")
    lesson = relationship("Lesson", back_populates="progress")
