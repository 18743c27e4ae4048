import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from lms.core.current_user import get_current_user
from lms.db.session import get_db
from lms.core.lookups import ensure_course_exists
from lms.core.permissions import ensure_can_manage_course, require_staff
from lms.models.course import Course
from lms.models.enrollment import CourseEnrollment
from lms.models.user import User
from lms.schemas.course import CourseCreate, CourseRead, CourseUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[CourseRead])
def list_courses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return db.query(Course).order_by(Course.id.asc()).all()


@router.post("", response_model=CourseRead, status_code=status.HTTP_201_CREATED)
def create_course(
    payload: CourseCreate,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    course = Course(
        title=payload.title,
        description=payload.description,
        owner_id=staff.id,
        is_public=payload.is_public,
        is_active=payload.is_active,
    )
    db.add(course)
    db.commit()
    db.refresh(course)
    logger.info("course %s created by user %s", course.id, staff.id)
    return course


@router.get("/me", response_model=list[CourseRead])
def my_courses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return (
        db.query(Course)
        .join(CourseEnrollment, CourseEnrollment.course_id == Course.id)
        .filter(CourseEnrollment.student_id == current_user.id)
        .order_by(Course.id.asc())
        .all()
    )


@router.get("/{course_id}", response_model=CourseRead)
def get_course(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ensure_course_exists(db, course_id)


@router.patch("/{course_id}", response_model=CourseRead)
def update_course(
    course_id: int,
    payload: CourseUpdate,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    course = ensure_course_exists(db, course_id)
    ensure_can_manage_course(staff, course)

    changes = payload.model_dump(exclude_unset=True)
    for field in ("title", "is_public", "is_active"):
        if field in changes and changes[field] is None:
            raise HTTPException(status_code=400, detail=f"{field} cannot be null")

    for field, value in changes.items():
        setattr(course, field, value)

    db.commit()
    db.refresh(course)
    return course
