from typing import List

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from barberdesk.database import get_session
from barberdesk.core import notifications
from barberdesk.core.security import get_current_user
from barberdesk.models.notification import NotificationRead
from barberdesk.models.user import User


router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=List[NotificationRead])
def recent_notifications(
    limit: int = Query(default=20, ge=1, le=100),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return notifications.recent(session, limit)


@router.patch("/{notification_id}/read", response_model=NotificationRead)
def mark_notification_read(
    notification_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return notifications.mark_read(session, notification_id)
