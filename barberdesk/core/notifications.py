import logging
from typing import List

from sqlmodel import Session, select

from barberdesk.core.errors import NotFound
from barberdesk.models.appointment import Appointment, AppointmentStatus
from barberdesk.models.barber import Barber
from barberdesk.models.client import Client
from barberdesk.models.notification import Notification


logger = logging.getLogger(__name__)

STATUS_LABELS = {
    AppointmentStatus.PENDING: "pendente",
    AppointmentStatus.CONFIRMED: "confirmado",
    AppointmentStatus.COMPLETED: "concluído",
    AppointmentStatus.CANCELED: "cancelado",
}


def _appointment_notification(session: Session, appointment: Appointment, **fields) -> Notification:
    client = session.get(Client, appointment.client_id)
    barber = session.get(Barber, appointment.barber_id)

    return Notification(
        appointment_id=appointment.id,
        client_name=client.name if client else None,
        barber_name=barber.name if barber else None,
        service_name=appointment.service_name_snapshot,
        status=appointment.status.value,
        scheduled_at=appointment.scheduled_at,
        **fields,
    )


def _when(appointment: Appointment) -> str:
    return appointment.scheduled_at.strftime("%d/%m/%Y às %H:%M")


# As funções abaixo só adicionam a notificação na sessão; quem chama faz o commit
# junto com a alteração do agendamento.

def appointment_created(session: Session, appointment: Appointment) -> Notification:
    notification = _appointment_notification(
        session,
        appointment,
        kind="new",
        title="Novo Agendamento",
        message="",
    )
    notification.message = f"{notification.client_name} agendou para {_when(appointment)}"
    session.add(notification)
    return notification


def appointment_status_changed(session: Session, appointment: Appointment) -> Notification:
    canceled = appointment.status == AppointmentStatus.CANCELED
    notification = _appointment_notification(
        session,
        appointment,
        kind="cancel" if canceled else "status",
        title="Agendamento Cancelado" if canceled else "Status Atualizado",
        message=f"Agendamento de {_when(appointment)} {STATUS_LABELS[appointment.status]}",
    )
    session.add(notification)
    return notification


def appointment_deleted(session: Session, appointment: Appointment) -> Notification:
    notification = _appointment_notification(
        session,
        appointment,
        kind="deleted",
        title="Agendamento Removido",
        message=f"Agendamento de {_when(appointment)} foi removido",
    )
    # o agendamento deixa de existir, o vínculo não
    notification.appointment_id = None
    session.add(notification)
    return notification


def client_registered(session: Session, client: Client) -> Notification:
    notification = Notification(
        kind="client",
        title="Novo Cliente",
        message=f"{client.name} foi cadastrado no sistema",
        client_name=client.name,
    )
    session.add(notification)
    return notification


# =========================
# LEITURA
# =========================

def recent(session: Session, limit: int = 20) -> List[Notification]:
    return session.exec(
        select(Notification)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
    ).all()


def mark_read(session: Session, notification_id: int) -> Notification:
    notification = session.get(Notification, notification_id)
    if notification is None:
        raise NotFound("Notificação não encontrada")

    notification.read = True
    session.add(notification)
    session.commit()
    session.refresh(notification)
    return notification
