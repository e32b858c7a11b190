import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session, select

from barberdesk.database import get_session
from barberdesk.core.errors import NotFound
from barberdesk.core.ratings import rating_summary
from barberdesk.core.security import get_current_user
from barberdesk.models.appointment import Appointment
from barberdesk.models.barber import Barber, BarberCreate, BarberRead, BarberUpdate
from barberdesk.models.rating import Rating
from barberdesk.models.schedule import AvailabilitySchedule
from barberdesk.models.user import User


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/barbers", tags=["barbers"])


def _to_read(session: Session, barber: Barber) -> BarberRead:
    rating, count = rating_summary(session, barber.id)
    return BarberRead(**barber.model_dump(), rating=rating, ratings_count=count)


def _get_barber(session: Session, barber_id: int) -> Barber:
    barber = session.get(Barber, barber_id)
    if not barber:
        raise NotFound("Barbeiro não encontrado")
    return barber


@router.get("/", response_model=List[BarberRead])
def list_barbers(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    barbers = session.exec(select(Barber).order_by(Barber.name)).all()
    return [_to_read(session, b) for b in barbers]


@router.post("/", response_model=BarberRead, status_code=status.HTTP_201_CREATED)
def create_barber(
    payload: BarberCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    barber = Barber.model_validate(payload)

    session.add(barber)
    session.commit()
    session.refresh(barber)

    logger.info("Barbeiro %s cadastrado: %s", barber.id, barber.name)
    return _to_read(session, barber)


@router.get("/{barber_id}", response_model=BarberRead)
def get_barber(
    barber_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return _to_read(session, _get_barber(session, barber_id))


@router.put("/{barber_id}", response_model=BarberRead)
def update_barber(
    barber_id: int,
    payload: BarberUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    barber = _get_barber(session, barber_id)
    barber.sqlmodel_update(payload.model_dump(exclude_unset=True, exclude_none=True))

    session.add(barber)
    session.commit()
    session.refresh(barber)
    return _to_read(session, barber)


# =========================
# REMOVER BARBEIRO
# - leva junto agenda semanal, avaliações e agendamentos
# =========================
@router.delete("/{barber_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_barber(
    barber_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    barber = _get_barber(session, barber_id)

    for model in (Rating, AvailabilitySchedule, Appointment):
        rows = session.exec(select(model).where(model.barber_id == barber_id)).all()
        for row in rows:
            session.delete(row)

    session.delete(barber)
    session.commit()

    logger.info("Barbeiro %s removido", barber_id)
