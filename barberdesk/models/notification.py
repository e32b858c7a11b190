from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


class NotificationBase(SQLModel):
    kind: str  # new | status | cancel | deleted | client
    title: str
    message: str

    appointment_id: Optional[int] = Field(default=None, index=True)
    client_name: Optional[str] = None
    barber_name: Optional[str] = None
    service_name: Optional[str] = None
    status: Optional[str] = None
    # data/hora do agendamento relacionado, quando houver
    scheduled_at: Optional[datetime] = None


class Notification(NotificationBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    read: bool = False


class NotificationRead(NotificationBase):
    id: int
    created_at: datetime
    read: bool
