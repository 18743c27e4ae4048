from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from lms.db.session import get_db
from lms.core.permissions import require_administrator
from lms.core.security import hash_password
from lms.models.user import User
from lms.schemas.user import UserCreate, UserRead, UserRole

router = APIRouter()


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_administrator),
):
    if db.query(User).filter(User.email == payload.email).first():
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role,
        password_hash=hash_password(payload.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@router.get("", response_model=list[UserRead])
def list_users(
    role: Optional[UserRole] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(require_administrator),
):
    q = db.query(User)
    if role is not None:
        q = q.filter(User.role == role)
    return q.order_by(User.id.asc()).all()


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_administrator),
):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
