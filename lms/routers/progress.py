import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from lms.core.current_user import get_current_user
from lms.core.lookups import ensure_lesson_exists, is_enrolled
from lms.db.session import get_db
from lms.models.lesson import Lesson
from lms.models.progress import StudentProgress
from lms.models.user import User
from lms.schemas.progress import ProgressRead, ProgressUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def _commit(db: Session) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


@router.put("/lessons/{lesson_id}/progress", response_model=ProgressRead)
def update_lesson_progress(
    lesson_id: int,
    payload: ProgressUpdate,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    lesson = ensure_lesson_exists(db, lesson_id)
    if not is_enrolled(db, lesson.course_id, me.id):
        raise HTTPException(status_code=403, detail="Not enrolled in this course")

    now = datetime.now(timezone.utc)

    existing = (
        db.query(StudentProgress)
        .filter(
            StudentProgress.student_id == me.id,
            StudentProgress.lesson_id == lesson_id,
        )
        .first()
    )

    if existing:
        was_completed = existing.completed
        existing.time_spent += payload.time_spent
        if payload.completed is not None:
            existing.completed = payload.completed

        # completion_date is kept from the first completion
        if existing.completed and not was_completed and existing.completion_date is None:
            existing.completion_date = now

        _commit(db)
        db.refresh(existing)
        return existing

    completed = bool(payload.completed)
    progress = StudentProgress(
        student_id=me.id,
        lesson_id=lesson_id,
        completed=completed,
        completion_date=now if completed else None,
        time_spent=payload.time_spent,
    )
    db.add(progress)
    _commit(db)
    db.refresh(progress)

    logger.info("progress %s started for lesson %s by user %s", progress.id, lesson_id, me.id)
    return progress


@router.get("/progress/me", response_model=list[ProgressRead])
def my_progress(
    course_id: Optional[int] = None,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    q = (
        db.query(StudentProgress)
        .join(Lesson, StudentProgress.lesson_id == Lesson.id)
        .filter(StudentProgress.student_id == me.id)
    )
    if course_id is not None:
        q = q.filter(Lesson.course_id == course_id)

    return q.order_by(Lesson.course_id.asc(), Lesson.order_index.asc(), Lesson.id.asc()).all()
