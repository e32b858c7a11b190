from fastapi import APIRouter, Depends
from sqlmodel import Session

from barberdesk.database import get_session
from barberdesk.core import availability
from barberdesk.core.security import get_current_user
from barberdesk.models.schedule import ScheduleRead, ScheduleUpdate
from barberdesk.models.user import User


router = APIRouter(prefix="/schedules", tags=["schedules"])


# =========================
# APLICAR SEGUNDA PARA TERÇA..SÁBADO
# só transforma o rascunho enviado, não grava nada
# =========================
@router.post("/apply-monday", response_model=ScheduleRead)
def apply_monday(
    draft: ScheduleUpdate,
    current_user: User = Depends(get_current_user),
):
    return availability.apply_monday_to_weekdays(draft.model_dump())


@router.get("/{barber_id}", response_model=ScheduleRead)
def get_schedule(
    barber_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    week = availability.load_week(session, barber_id)
    return {"barber_id": barber_id, **week}


@router.put("/{barber_id}", response_model=ScheduleRead)
def replace_schedule(
    barber_id: int,
    payload: ScheduleUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    # todos os 14 campos são gravados; ausente = dia sem horário
    week = availability.replace_week(session, barber_id, payload.model_dump())
    return {"barber_id": barber_id, **week}
