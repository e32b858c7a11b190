from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


class Rating(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    barber_id: int = Field(foreign_key="barber.id", index=True)
    client_id: int = Field(foreign_key="client.id", index=True)
    appointment_id: Optional[int] = Field(default=None, foreign_key="appointment.id", index=True)

    score: int
    comment: Optional[str] = Field(default=None, max_length=500)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class RatingCreate(SQLModel):
    # 0 = nota não selecionada, rejeitada pela validação
    score: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=500)
    appointment_id: Optional[int] = None
    # obrigatório apenas quando não há agendamento
    client_id: Optional[int] = None


class RatingRead(SQLModel):
    id: int
    barber_id: int
    client_id: int
    appointment_id: Optional[int] = None
    score: int
    comment: Optional[str] = None
    created_at: datetime
    updated_at: datetime
