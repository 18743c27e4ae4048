from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from lms.core.current_user import get_current_user
from lms.db.session import get_db
from lms.core.lookups import ensure_lesson_exists, is_enrolled
from lms.core.permissions import can_manage_course, ensure_can_manage_course, require_staff
from lms.models.assignment import Assignment
from lms.models.lesson import Lesson
from lms.models.user import User
from lms.schemas.assignment import AssignmentCreate, AssignmentRead

router = APIRouter()


def _ensure_can_view_lesson_assignments(db: Session, lesson: Lesson, user: User) -> None:
    # Course owner (or an administrator) can view
    if can_manage_course(user, lesson.course):
        return

    # Enrolled student can view
    if not is_enrolled(db, lesson.course_id, user.id):
        raise HTTPException(status_code=403, detail="Not enrolled in this course")


@router.get("/lessons/{lesson_id}/assignments", response_model=list[AssignmentRead])
def list_assignments(
    lesson_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    lesson = ensure_lesson_exists(db, lesson_id)
    _ensure_can_view_lesson_assignments(db, lesson, current_user)

    return (
        db.query(Assignment)
        .filter(Assignment.lesson_id == lesson_id)
        .order_by(Assignment.id.asc())
        .all()
    )


@router.post(
    "/lessons/{lesson_id}/assignments",
    response_model=AssignmentRead,
    status_code=status.HTTP_201_CREATED,
)
def create_assignment(
    lesson_id: int,
    payload: AssignmentCreate,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    lesson = ensure_lesson_exists(db, lesson_id)
    ensure_can_manage_course(staff, lesson.course)

    a = Assignment(
        lesson_id=lesson_id,
        title=payload.title,
        description=payload.description,
        evaluation_type=payload.evaluation_type,
        due_date=payload.due_date,
        max_points=payload.max_points,
    )
    db.add(a)
    db.commit()
    db.refresh(a)
    return a
