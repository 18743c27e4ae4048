from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lms.core.current_user import get_current_user
from lms.db.session import get_db
from lms.models.user import User
from lms.schemas.dashboard import DashboardStats
from lms.services import dashboard_stats

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    # role comes from the stored user record, never from the request
    return dashboard_stats.get_dashboard_stats(db, user_id=me.id, user_role=me.role)
