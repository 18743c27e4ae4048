from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from lms.core.current_user import get_current_user
from lms.db.session import get_db
from lms.core.lookups import ensure_course_exists, ensure_lesson_exists
from lms.core.permissions import ensure_can_manage_course, require_staff
from lms.models.lesson import Lesson
from lms.models.user import User
from lms.schemas.lesson import LessonCreate, LessonRead, LessonUpdate

router = APIRouter()


@router.post(
    "/courses/{course_id}/lessons",
    response_model=LessonRead,
    status_code=status.HTTP_201_CREATED,
)
def create_lesson(
    course_id: int,
    payload: LessonCreate,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    course = ensure_course_exists(db, course_id)
    ensure_can_manage_course(staff, course)

    lesson = Lesson(
        course_id=course_id,
        title=payload.title,
        description=payload.description,
        order_index=payload.order_index,
    )
    db.add(lesson)
    db.commit()
    db.refresh(lesson)
    return lesson


@router.get("/courses/{course_id}/lessons", response_model=list[LessonRead])
def list_lessons(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_course_exists(db, course_id)
    return (
        db.query(Lesson)
        .filter(Lesson.course_id == course_id)
        .order_by(Lesson.order_index.asc(), Lesson.id.asc())
        .all()
    )


@router.patch("/lessons/{lesson_id}", response_model=LessonRead)
def update_lesson(
    lesson_id: int,
    payload: LessonUpdate,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    lesson = ensure_lesson_exists(db, lesson_id)
    ensure_can_manage_course(staff, lesson.course)

    changes = payload.model_dump(exclude_unset=True)
    if "title" in changes and changes["title"] is None:
        raise HTTPException(status_code=400, detail="title cannot be null")
    if "order_index" in changes and changes["order_index"] is None:
        raise HTTPException(status_code=400, detail="order_index cannot be null")

    for field, value in changes.items():
        setattr(lesson, field, value)

    db.commit()
    db.refresh(lesson)
    return lesson
