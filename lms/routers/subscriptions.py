import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from lms.core.current_user import get_current_user
from lms.core.dates import as_utc
from lms.db.session import get_db
from lms.core.lookups import ensure_course_exists
from lms.core.permissions import ensure_can_manage_course, require_staff
from lms.models.subscription import SUBSCRIPTION_ACTIVE, SUBSCRIPTION_PENDING, Subscription
from lms.models.user import User
from lms.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionRead,
    SubscriptionStatusUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/subscriptions",
    response_model=SubscriptionRead,
    status_code=status.HTTP_201_CREATED,
)
def create_subscription(
    payload: SubscriptionCreate,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    ensure_course_exists(db, payload.course_id)

    if as_utc(payload.start_date) >= as_utc(payload.end_date):
        raise HTTPException(status_code=400, detail="Start date must be before end date")

    # one live (active or pending) subscription per user and course
    existing = (
        db.query(Subscription)
        .filter(
            Subscription.user_id == me.id,
            Subscription.course_id == payload.course_id,
            Subscription.status.in_([SUBSCRIPTION_ACTIVE, SUBSCRIPTION_PENDING]),
        )
        .first()
    )
    if existing:
        raise HTTPException(
            status_code=409,
            detail="User already has an active subscription for this course",
        )

    sub = Subscription(
        user_id=me.id,
        course_id=payload.course_id,
        status=SUBSCRIPTION_PENDING,
        start_date=payload.start_date,
        end_date=payload.end_date,
        amount=payload.amount,
    )
    db.add(sub)
    db.commit()
    db.refresh(sub)
    logger.info("subscription %s created for user %s course %s", sub.id, me.id, sub.course_id)
    return sub


@router.get("/subscriptions/me", response_model=list[SubscriptionRead])
def my_subscriptions(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return (
        db.query(Subscription)
        .filter(Subscription.user_id == me.id)
        .order_by(Subscription.id.asc())
        .all()
    )


@router.get("/courses/{course_id}/subscriptions", response_model=list[SubscriptionRead])
def course_subscriptions(
    course_id: int,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    course = ensure_course_exists(db, course_id)
    ensure_can_manage_course(staff, course)

    return (
        db.query(Subscription)
        .filter(Subscription.course_id == course_id)
        .order_by(Subscription.id.asc())
        .all()
    )


@router.patch("/subscriptions/{subscription_id}/status", response_model=SubscriptionRead)
def update_subscription_status(
    subscription_id: int,
    payload: SubscriptionStatusUpdate,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    sub = db.query(Subscription).filter(Subscription.id == subscription_id).first()
    if not sub:
        raise HTTPException(status_code=404, detail="Subscription not found")
    ensure_can_manage_course(staff, sub.course)

    sub.status = payload.status
    db.commit()
    db.refresh(sub)
    return sub
