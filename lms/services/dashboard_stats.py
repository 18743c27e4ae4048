"""
Role-scoped dashboard statistics.

Administrators get platform-wide totals, moderators get totals restricted to
the courses they own, and every other role gets an empty result. Nothing here
writes to the database; every call is computed fresh from the store.
"""
import logging
from typing import Callable

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from lms.core.config import RECENT_ACTIVITY_LIMIT
from lms.models.assignment import Assignment
from lms.models.course import Course
from lms.models.enrollment import CourseEnrollment
from lms.models.lesson import Lesson
from lms.models.submission import AssignmentSubmission
from lms.models.subscription import SUBSCRIPTION_ACTIVE, Subscription
from lms.models.user import ROLE_ADMINISTRATOR, ROLE_MODERATOR, ROLE_STUDENT, User
from lms.schemas.dashboard import DashboardStats, RecentActivity

logger = logging.getLogger(__name__)

ACTIVITY_ASSIGNMENT_SUBMISSION = "assignment_submission"


def empty_stats() -> DashboardStats:
    return DashboardStats(
        total_students=0,
        total_courses=0,
        total_lessons=0,
        active_subscriptions=0,
        recent_activities=[],
    )


def _count(query: Query) -> int:
    return int(query.scalar() or 0)


def _recent_submissions_query(db: Session) -> Query:
    return (
        db.query(
            AssignmentSubmission.id.label("id"),
            AssignmentSubmission.submitted_at.label("submitted_at"),
            Assignment.title.label("assignment_title"),
            User,
        )
        .join(User, AssignmentSubmission.student_id == User.id)
        .join(Assignment, AssignmentSubmission.assignment_id == Assignment.id)
    )


def _to_activities(query: Query) -> list[RecentActivity]:
    rows = (
        query.order_by(
            AssignmentSubmission.submitted_at.desc(),
            AssignmentSubmission.id.desc(),  # stable tie-break
        )
        .limit(RECENT_ACTIVITY_LIMIT)
        .all()
    )

    return [
        RecentActivity(
            id=r.id,
            type=ACTIVITY_ASSIGNMENT_SUBMISSION,
            description=f"Assignment submission for: {r.assignment_title}",
            created_at=r.submitted_at,
            user_name=r.User.full_name,
        )
        for r in rows
    ]


def _administrator_stats(db: Session, _user_id: int) -> DashboardStats:
    total_students = _count(
        db.query(func.count(User.id)).filter(User.role == ROLE_STUDENT)
    )
    total_courses = _count(db.query(func.count(Course.id)))
    total_lessons = _count(db.query(func.count(Lesson.id)))
    active_subscriptions = _count(
        db.query(func.count(Subscription.id)).filter(
            Subscription.status == SUBSCRIPTION_ACTIVE
        )
    )

    return DashboardStats(
        total_students=total_students,
        total_courses=total_courses,
        total_lessons=total_lessons,
        active_subscriptions=active_subscriptions,
        recent_activities=_to_activities(_recent_submissions_query(db)),
    )


def _moderator_stats(db: Session, user_id: int) -> DashboardStats:
    course_ids = [
        row.id for row in db.query(Course.id).filter(Course.owner_id == user_id).all()
    ]
    if not course_ids:
        return empty_stats()

    # a student enrolled in several owned courses counts once
    enrolled = (
        db.query(CourseEnrollment.student_id)
        .join(User, CourseEnrollment.student_id == User.id)
        .filter(
            CourseEnrollment.course_id.in_(course_ids),
            User.role == ROLE_STUDENT,
        )
        .all()
    )
    student_ids = {row.student_id for row in enrolled}

    total_lessons = _count(
        db.query(func.count(Lesson.id)).filter(Lesson.course_id.in_(course_ids))
    )
    active_subscriptions = _count(
        db.query(func.count(Subscription.id)).filter(
            Subscription.status == SUBSCRIPTION_ACTIVE,
            Subscription.course_id.in_(course_ids),
        )
    )

    activities = _to_activities(
        _recent_submissions_query(db)
        .join(Lesson, Assignment.lesson_id == Lesson.id)
        .filter(Lesson.course_id.in_(course_ids))
    )

    return DashboardStats(
        total_students=len(student_ids),
        total_courses=len(course_ids),
        total_lessons=total_lessons,
        active_subscriptions=active_subscriptions,
        recent_activities=activities,
    )


_ROLE_AGGREGATORS: dict[str, Callable[[Session, int], DashboardStats]] = {
    ROLE_ADMINISTRATOR: _administrator_stats,
    ROLE_MODERATOR: _moderator_stats,
}


def get_dashboard_stats(db: Session, user_id: int, user_role: str) -> DashboardStats:
    """
    Compute dashboard statistics for ``user_id`` acting as ``user_role``.

    The role is taken as given; callers are responsible for passing the role
    stored on the authenticated user. Students and unknown roles receive
    all-zero counts and no activity.

    Database errors are logged and re-raised unchanged so the request fails
    as a whole.
    """
    aggregate = _ROLE_AGGREGATORS.get(user_role)
    if aggregate is None:
        logger.debug("dashboard stats: role %r has no staff view", user_role)
        return empty_stats()

    logger.debug("dashboard stats: user=%s role=%s", user_id, user_role)
    try:
        return aggregate(db, user_id)
    except SQLAlchemyError:
        logger.exception(
            "Failed to get dashboard stats for user=%s role=%s", user_id, user_role
        )
        raise
