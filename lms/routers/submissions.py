import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from lms.core.config import GRACE_PERIOD_MINUTES
from lms.core.current_user import get_current_user
from lms.core.dates import as_utc
from lms.db.session import get_db
from lms.core.lookups import ensure_assignment_exists, is_enrolled
from lms.core.permissions import ensure_can_manage_course, require_staff
from lms.models.assignment import Assignment
from lms.models.submission import AssignmentSubmission
from lms.models.user import User
from lms.schemas.submission import SubmissionCreate, SubmissionGradeUpdate, SubmissionRead

logger = logging.getLogger(__name__)

router = APIRouter()


def _lateness(assignment: Assignment, submitted_at: datetime) -> tuple[bool, int | None]:
    """
    Returns: (is_late, late_by_minutes)

    Submissions within GRACE_PERIOD_MINUTES after the due date report their
    minutes but are not flagged late.
    """
    if assignment.due_date is None:
        return (False, None)

    due = as_utc(assignment.due_date)
    submitted = as_utc(submitted_at)

    if submitted <= due:
        return (False, 0)

    late_minutes = int((submitted - due).total_seconds() // 60)
    return (late_minutes > GRACE_PERIOD_MINUTES, late_minutes)


def _attach_lateness(sub: AssignmentSubmission, assignment: Assignment) -> AssignmentSubmission:
    sub.is_late, sub.late_by_minutes = _lateness(assignment, sub.submitted_at)
    return sub


def _commit(db: Session) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


@router.post(
    "/assignments/{assignment_id}/submissions",
    response_model=SubmissionRead,
    status_code=status.HTTP_201_CREATED,
)
def submit_assignment(
    assignment_id: int,
    payload: SubmissionCreate,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    assignment = ensure_assignment_exists(db, assignment_id)
    if not is_enrolled(db, assignment.lesson.course_id, me.id):
        raise HTTPException(status_code=403, detail="Not enrolled in this course")

    now = datetime.now(timezone.utc)

    # resubmission updates the existing row
    existing = (
        db.query(AssignmentSubmission)
        .filter(
            AssignmentSubmission.assignment_id == assignment_id,
            AssignmentSubmission.student_id == me.id,
        )
        .first()
    )

    if existing:
        existing.submission_data = payload.submission_data
        existing.submitted_at = now
        existing.status = "submitted"

        # clear previous grading on resubmit
        existing.score = None
        existing.feedback = None
        existing.graded_at = None
        existing.graded_by = None

        _commit(db)
        db.refresh(existing)
        return _attach_lateness(existing, assignment)

    sub = AssignmentSubmission(
        assignment_id=assignment_id,
        student_id=me.id,
        submission_data=payload.submission_data,
        status="submitted",
        submitted_at=now,
    )
    db.add(sub)
    _commit(db)
    db.refresh(sub)

    logger.info("submission %s for assignment %s by user %s", sub.id, assignment_id, me.id)
    return _attach_lateness(sub, assignment)


@router.get(
    "/assignments/{assignment_id}/submissions",
    response_model=list[SubmissionRead],
)
def list_submissions_for_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    assignment = ensure_assignment_exists(db, assignment_id)
    ensure_can_manage_course(staff, assignment.lesson.course)

    subs = (
        db.query(AssignmentSubmission)
        .filter(AssignmentSubmission.assignment_id == assignment_id)
        .order_by(AssignmentSubmission.submitted_at.desc(), AssignmentSubmission.id.desc())
        .all()
    )
    return [_attach_lateness(s, assignment) for s in subs]


@router.get("/submissions/me", response_model=list[SubmissionRead])
def my_submissions(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    subs = (
        db.query(AssignmentSubmission)
        .filter(AssignmentSubmission.student_id == me.id)
        .order_by(AssignmentSubmission.submitted_at.desc(), AssignmentSubmission.id.desc())
        .all()
    )
    return [_attach_lateness(s, s.assignment) for s in subs]


@router.patch(
    "/submissions/{submission_id}/grade",
    response_model=SubmissionRead,
)
def grade_submission(
    submission_id: int,
    payload: SubmissionGradeUpdate,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    sub = db.query(AssignmentSubmission).filter(AssignmentSubmission.id == submission_id).first()
    if not sub:
        raise HTTPException(status_code=404, detail="Submission not found")

    assignment = sub.assignment
    ensure_can_manage_course(staff, assignment.lesson.course)

    if payload.score < 0 or payload.score > assignment.max_points:
        raise HTTPException(
            status_code=400,
            detail=f"score must be between 0 and {assignment.max_points}",
        )

    sub.score = payload.score
    sub.feedback = payload.feedback
    sub.status = "graded"
    sub.graded_by = staff.id
    sub.graded_at = datetime.now(timezone.utc)

    _commit(db)
    db.refresh(sub)
    return _attach_lateness(sub, assignment)
