from datetime import date as Date, datetime, time as Time
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELED = "canceled"


class Appointment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    client_id: int = Field(foreign_key="client.id", index=True)
    barber_id: int = Field(foreign_key="barber.id", index=True)
    service_id: int = Field(foreign_key="service.id", index=True)

    scheduled_at: datetime = Field(index=True)

    # SNAPSHOT DO SERVIÇO
    service_name_snapshot: str
    service_price_snapshot: Decimal = Field(max_digits=10, decimal_places=2)
    service_duration_snapshot: int

    # STATUS DO AGENDAMENTO
    status: AppointmentStatus = Field(default=AppointmentStatus.PENDING, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    canceled_at: Optional[datetime] = None


class AppointmentCreate(SQLModel):
    client_id: int
    barber_id: int
    service_id: int
    date: Date
    time: Time
    # confirma direto na criação (pula o "pending")
    confirm: bool = False


class AppointmentStatusUpdate(SQLModel):
    status: AppointmentStatus


class AppointmentRead(SQLModel):
    id: int
    client_id: int
    barber_id: int
    service_id: int
    scheduled_at: datetime
    ends_at: datetime
    status: AppointmentStatus
    service_name_snapshot: str
    service_price_snapshot: Decimal
    service_duration_snapshot: int
    client_name: Optional[str] = None
    barber_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    canceled_at: Optional[datetime] = None


class CanRateResponse(SQLModel):
    can_rate: bool
