from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from barberdesk.database import get_session
from barberdesk.core import ratings
from barberdesk.core.security import get_current_user
from barberdesk.models.rating import RatingCreate, RatingRead
from barberdesk.models.user import User


router = APIRouter(prefix="/barbers", tags=["ratings"])


@router.get("/{barber_id}/ratings", response_model=List[RatingRead])
def list_barber_ratings(
    barber_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return ratings.list_ratings(session, barber_id)


@router.post("/{barber_id}/ratings", response_model=RatingRead, status_code=status.HTTP_201_CREATED)
def rate_barber(
    barber_id: int,
    payload: RatingCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return ratings.submit_rating(session, barber_id, payload)
