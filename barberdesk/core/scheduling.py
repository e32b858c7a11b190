import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from sqlmodel import Session, select

from barberdesk.core import availability, notifications
from barberdesk.core.errors import Conflict, InvalidSchedule, InvalidState, NotFound
from barberdesk.models.appointment import Appointment, AppointmentCreate, AppointmentStatus
from barberdesk.models.barber import Barber
from barberdesk.models.client import Client
from barberdesk.models.rating import Rating
from barberdesk.models.service import Service


logger = logging.getLogger(__name__)


# status que ocupam a agenda do barbeiro
BLOCKING_STATUSES = (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED)

ALLOWED_TRANSITIONS = {
    AppointmentStatus.PENDING: {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELED},
    AppointmentStatus.CONFIRMED: {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELED},
    AppointmentStatus.COMPLETED: set(),
    AppointmentStatus.CANCELED: set(),
}


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Retorna True se [a_start, a_end) sobrepõe [b_start, b_end)."""
    return a_start < b_end and a_end > b_start


def appointment_end(appointment: Appointment) -> datetime:
    return appointment.scheduled_at + timedelta(minutes=appointment.service_duration_snapshot)


def to_local_naive(value: datetime) -> datetime:
    # horários com fuso são convertidos para o horário local, sem tzinfo
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


# =========================
# REGRAS DE AGENDAMENTO
# =========================

def check_not_in_past(starts_at: datetime, now: Optional[datetime] = None) -> None:
    now = now or datetime.now()
    if starts_at <= now:
        raise InvalidSchedule("Não é possível agendar no passado")


def check_within_availability(week, starts_at: datetime, duration_minutes: int) -> None:
    window = availability.day_window(week, starts_at.weekday())
    if window is None:
        raise InvalidSchedule("Barbeiro não atende nesse dia")

    day = starts_at.date()
    work_start = datetime.combine(day, window[0])
    work_end = datetime.combine(day, window[1])
    ends_at = starts_at + timedelta(minutes=duration_minutes)

    if starts_at < work_start or ends_at > work_end:
        raise InvalidSchedule("Fora do horário de atendimento do barbeiro")


def find_conflicts(
    appointments: Iterable[Appointment],
    starts_at: datetime,
    ends_at: datetime,
) -> list:
    return [
        appt
        for appt in appointments
        if appt.status in BLOCKING_STATUSES
        and overlaps(starts_at, ends_at, appt.scheduled_at, appointment_end(appt))
    ]


def _nearby_appointments(session: Session, barber_id: int, starts_at: datetime, ends_at: datetime):
    # nenhum serviço dura mais de um dia, então basta olhar a partir da véspera
    return session.exec(
        select(Appointment).where(
            Appointment.barber_id == barber_id,
            Appointment.scheduled_at >= starts_at - timedelta(days=1),
            Appointment.scheduled_at < ends_at,
            Appointment.status.in_(BLOCKING_STATUSES),
        )
    ).all()


def _get_or_404(session: Session, model, entity_id: int, detail: str):
    obj = session.get(model, entity_id)
    if obj is None:
        raise NotFound(detail)
    return obj


def book_appointment(
    session: Session,
    payload: AppointmentCreate,
    now: Optional[datetime] = None,
) -> Appointment:
    client = _get_or_404(session, Client, payload.client_id, "Cliente não encontrado")
    barber = _get_or_404(session, Barber, payload.barber_id, "Barbeiro não encontrado")
    service = _get_or_404(session, Service, payload.service_id, "Serviço não encontrado")

    if not barber.active:
        raise NotFound("Barbeiro inativo")
    if not service.active:
        raise NotFound("Serviço inativo")

    starts_at = to_local_naive(datetime.combine(payload.date, payload.time))
    ends_at = starts_at + timedelta(minutes=service.duration_minutes)

    check_not_in_past(starts_at, now)

    week = availability.week_from(availability.get_schedule(session, barber.id))
    check_within_availability(week, starts_at, service.duration_minutes)

    conflicts = find_conflicts(
        _nearby_appointments(session, barber.id, starts_at, ends_at), starts_at, ends_at
    )
    if conflicts:
        logger.warning(
            "Conflito de horário: barbeiro=%s inicio=%s agendamento_existente=%s",
            barber.id, starts_at.isoformat(), conflicts[0].id,
        )
        raise Conflict("Horário indisponível: o barbeiro já tem agendamento nesse período")

    status = AppointmentStatus.CONFIRMED if payload.confirm else AppointmentStatus.PENDING

    appointment = Appointment(
        client_id=client.id,
        barber_id=barber.id,
        service_id=service.id,
        scheduled_at=starts_at,
        service_name_snapshot=service.name,
        service_price_snapshot=service.price,
        service_duration_snapshot=service.duration_minutes,
        status=status,
    )

    session.add(appointment)
    session.flush()
    notifications.appointment_created(session, appointment)
    session.commit()
    session.refresh(appointment)

    logger.info(
        "Agendamento %s criado: cliente=%s barbeiro=%s servico=%s em %s (%s)",
        appointment.id, client.id, barber.id, service.id,
        starts_at.isoformat(), status.value,
    )
    return appointment


# =========================
# MÁQUINA DE STATUS
# =========================

def validate_transition(current: AppointmentStatus, target: AppointmentStatus) -> None:
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidState(
            f"Não é possível mudar o status de '{current.value}' para '{target.value}'"
        )


def change_status(session: Session, appointment_id: int, target: AppointmentStatus) -> Appointment:
    appointment = session.get(Appointment, appointment_id)
    if appointment is None:
        raise InvalidState("Agendamento não encontrado ou removido")

    previous = appointment.status
    validate_transition(previous, target)

    appointment.status = target
    appointment.updated_at = datetime.utcnow()
    if target == AppointmentStatus.CANCELED:
        appointment.canceled_at = datetime.utcnow()

    session.add(appointment)
    notifications.appointment_status_changed(session, appointment)
    session.commit()
    session.refresh(appointment)

    logger.info("Agendamento %s: %s -> %s", appointment.id, previous.value, target.value)
    return appointment


def delete_appointment(session: Session, appointment_id: int) -> None:
    appointment = _get_or_404(session, Appointment, appointment_id, "Agendamento não encontrado")
    previous_status = appointment.status

    # avaliações continuam valendo para o barbeiro, só perdem o vínculo
    ratings = session.exec(
        select(Rating).where(Rating.appointment_id == appointment_id)
    ).all()
    for rating in ratings:
        rating.appointment_id = None
        session.add(rating)

    notifications.appointment_deleted(session, appointment)
    session.delete(appointment)
    session.commit()

    logger.info("Agendamento %s removido (status %s)", appointment_id, previous_status.value)
