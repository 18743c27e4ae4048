import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lms.core.current_user import get_current_user
from lms.db.session import get_db
from lms.core.lookups import ensure_course_exists
from lms.core.permissions import ensure_can_manage_course
from lms.models.enrollment import CourseEnrollment
from lms.models.user import ROLE_STUDENT, User
from lms.schemas.enrollment import EnrollmentCreate, EnrollmentOut

logger = logging.getLogger(__name__)

router = APIRouter()


def _resolve_student(db: Session, payload: EnrollmentCreate, me: User) -> User:
    if payload.student_id is None or payload.student_id == me.id:
        if me.role != ROLE_STUDENT:
            raise HTTPException(status_code=400, detail="Only students can be enrolled")
        return me

    student = db.query(User).filter(User.id == payload.student_id).first()
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    if student.role != ROLE_STUDENT:
        raise HTTPException(status_code=400, detail="Only students can be enrolled")
    return student


@router.post("", response_model=EnrollmentOut, status_code=status.HTTP_201_CREATED)
def enroll(
    payload: EnrollmentCreate,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    course = ensure_course_exists(db, payload.course_id)

    # enrolling someone else is a course management action
    if payload.student_id is not None and payload.student_id != me.id:
        ensure_can_manage_course(me, course)

    student = _resolve_student(db, payload, me)

    if not course.is_active:
        raise HTTPException(status_code=400, detail="Course is not active")

    enrollment = CourseEnrollment(
        student_id=student.id,
        course_id=course.id,
        progress_percentage=0,
    )
    db.add(enrollment)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Already enrolled")

    db.refresh(enrollment)
    logger.info("student %s enrolled in course %s", student.id, course.id)
    return enrollment


@router.get("/me", response_model=list[EnrollmentOut])
def my_enrollments(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return (
        db.query(CourseEnrollment)
        .filter(CourseEnrollment.student_id == me.id)
        .order_by(CourseEnrollment.id.asc())
        .all()
    )
