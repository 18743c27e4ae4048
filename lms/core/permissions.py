from fastapi import Depends, HTTPException, status

from lms.core.current_user import get_current_user
from lms.models.course import Course
from lms.models.user import ROLE_ADMINISTRATOR, ROLE_MODERATOR, User


def require_staff(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role not in (ROLE_ADMINISTRATOR, ROLE_MODERATOR):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Staff role required",
        )
    return current_user


def require_administrator(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != ROLE_ADMINISTRATOR:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator role required",
        )
    return current_user


def can_manage_course(user: User, course: Course) -> bool:
    """Administrators manage every course, moderators only the ones they own."""
    if user.role == ROLE_ADMINISTRATOR:
        return True
    return user.role == ROLE_MODERATOR and course.owner_id == user.id


def ensure_can_manage_course(user: User, course: Course) -> None:
    if not can_manage_course(user, course):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not course owner",
        )
