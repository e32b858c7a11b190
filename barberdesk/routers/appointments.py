from datetime import date, datetime, time, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlmodel import Session, select

from barberdesk.database import get_session
from barberdesk.core import ratings, scheduling
from barberdesk.core.errors import NotFound
from barberdesk.core.security import get_current_user
from barberdesk.models.appointment import (
    Appointment,
    AppointmentCreate,
    AppointmentRead,
    AppointmentStatus,
    AppointmentStatusUpdate,
    CanRateResponse,
)
from barberdesk.models.barber import Barber
from barberdesk.models.client import Client
from barberdesk.models.user import User


router = APIRouter(prefix="/appointments", tags=["appointments"])


def _to_read(session: Session, appt: Appointment) -> AppointmentRead:
    client = session.get(Client, appt.client_id)
    barber = session.get(Barber, appt.barber_id)
    return AppointmentRead(
        **appt.model_dump(),
        ends_at=scheduling.appointment_end(appt),
        client_name=client.name if client else None,
        barber_name=barber.name if barber else None,
    )


# =========================
# LISTAR AGENDAMENTOS
# filtros opcionais: barbeiro, cliente, status e dia
# =========================
@router.get("/", response_model=List[AppointmentRead])
def list_appointments(
    barber_id: Optional[int] = None,
    client_id: Optional[int] = None,
    status: Optional[AppointmentStatus] = None,
    day: Optional[date] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    stmt = select(Appointment)

    if barber_id is not None:
        stmt = stmt.where(Appointment.barber_id == barber_id)
    if client_id is not None:
        stmt = stmt.where(Appointment.client_id == client_id)
    if status is not None:
        stmt = stmt.where(Appointment.status == status)
    if day is not None:
        start = datetime.combine(day, time(0, 0))
        stmt = stmt.where(
            Appointment.scheduled_at >= start,
            Appointment.scheduled_at < start + timedelta(days=1),
        )

    appts = session.exec(stmt.order_by(Appointment.scheduled_at)).all()
    return [_to_read(session, a) for a in appts]


# =========================
# CRIAR AGENDAMENTO
# =========================
@router.post("/", response_model=AppointmentRead, status_code=status.HTTP_201_CREATED)
def create_appointment(
    payload: AppointmentCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    appointment = scheduling.book_appointment(session, payload)
    return _to_read(session, appointment)


@router.get("/{appointment_id}", response_model=AppointmentRead)
def get_appointment(
    appointment_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    appt = session.get(Appointment, appointment_id)
    if not appt:
        raise NotFound("Agendamento não encontrado")
    return _to_read(session, appt)


# =========================
# ALTERAR STATUS
# pending -> confirmed -> completed, ou cancelado antes de concluir
# =========================
@router.patch("/{appointment_id}/status", response_model=AppointmentRead)
def update_status(
    appointment_id: int,
    payload: AppointmentStatusUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    appointment = scheduling.change_status(session, appointment_id, payload.status)
    return _to_read(session, appointment)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_appointment(
    appointment_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    scheduling.delete_appointment(session, appointment_id)


@router.get("/{appointment_id}/can-rate", response_model=CanRateResponse)
def can_rate(
    appointment_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return {"can_rate": ratings.can_rate(session, appointment_id)}
