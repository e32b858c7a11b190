from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import SQLModel, Session, func, select

from barberdesk.database import get_session
from barberdesk.core.security import get_current_user
from barberdesk.models.appointment import Appointment, AppointmentStatus
from barberdesk.models.barber import Barber
from barberdesk.models.client import Client
from barberdesk.models.user import User


router = APIRouter(prefix="/dashboard", tags=["dashboard"])

UPCOMING_LIMIT = 5


class UpcomingAppointment(SQLModel):
    id: int
    client: Optional[str] = None
    service: str
    date: str
    time: str
    barber: Optional[str] = None
    status: AppointmentStatus


class DashboardStats(SQLModel):
    appointments_today: int
    total_appointments: int
    total_clients: int
    active_barbers: int
    monthly_revenue: Decimal
    upcoming_appointments: List[UpcomingAppointment]


def _day_bounds(d: date):
    start = datetime.combine(d, time(0, 0))
    end = start + timedelta(days=1)
    return start, end


def _month_bounds(d: date):
    start = datetime.combine(d.replace(day=1), time(0, 0))
    if d.month == 12:
        end = start.replace(year=d.year + 1, month=1)
    else:
        end = start.replace(month=d.month + 1)
    return start, end


def _count(session: Session, stmt) -> int:
    return session.exec(stmt).one()


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    now = datetime.now()
    day_start, day_end = _day_bounds(now.date())
    month_start, month_end = _month_bounds(now.date())

    appointments_today = _count(
        session,
        select(func.count(Appointment.id)).where(
            Appointment.scheduled_at >= day_start,
            Appointment.scheduled_at < day_end,
            Appointment.status != AppointmentStatus.CANCELED,
        ),
    )
    total_appointments = _count(session, select(func.count(Appointment.id)))
    total_clients = _count(session, select(func.count(Client.id)))
    active_barbers = _count(session, select(func.count(Barber.id)).where(Barber.active == True))  # noqa: E712

    # receita: só concluídos do mês, pelo preço gravado no agendamento
    completed = session.exec(
        select(Appointment).where(
            Appointment.status == AppointmentStatus.COMPLETED,
            Appointment.scheduled_at >= month_start,
            Appointment.scheduled_at < month_end,
        )
    ).all()
    revenue = sum((Decimal(a.service_price_snapshot) for a in completed), Decimal("0"))

    upcoming = session.exec(
        select(Appointment)
        .where(
            Appointment.scheduled_at >= now,
            Appointment.status.in_((AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED)),
        )
        .order_by(Appointment.scheduled_at)
        .limit(UPCOMING_LIMIT)
    ).all()

    next_items = []
    for a in upcoming:
        client = session.get(Client, a.client_id)
        barber = session.get(Barber, a.barber_id)
        next_items.append(
            UpcomingAppointment(
                id=a.id,
                client=client.name if client else None,
                service=a.service_name_snapshot,
                date=a.scheduled_at.date().isoformat(),
                time=a.scheduled_at.strftime("%H:%M"),
                barber=barber.name if barber else None,
                status=a.status,
            )
        )

    return DashboardStats(
        appointments_today=appointments_today,
        total_appointments=total_appointments,
        total_clients=total_clients,
        active_barbers=active_barbers,
        monthly_revenue=revenue.quantize(Decimal("0.01")),
        upcoming_appointments=next_items,
    )
