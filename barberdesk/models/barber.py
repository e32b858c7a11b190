from decimal import Decimal
from typing import Optional

from pydantic import EmailStr, field_validator
from sqlmodel import SQLModel, Field

from barberdesk.models.validators import check_person_name, check_phone


class BarberBase(SQLModel):
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    specialty: Optional[str] = None
    active: bool = True


class Barber(BarberBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)


class BarberCreate(SQLModel):
    name: str
    phone: str
    email: Optional[EmailStr] = None
    specialty: Optional[str] = None
    active: bool = True

    @field_validator("name")
    @classmethod
    def _name(cls, v):
        return check_person_name(v)

    @field_validator("phone")
    @classmethod
    def _phone(cls, v):
        return check_phone(v)

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, v):
        # o formulário envia "" quando o email não é informado
        return v or None


class BarberUpdate(SQLModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    specialty: Optional[str] = None
    active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v):
        return None if v is None else check_person_name(v)

    @field_validator("phone")
    @classmethod
    def _phone(cls, v):
        return None if v is None else check_phone(v)


class BarberRead(BarberBase):
    id: int
    # média das avaliações, calculada na leitura
    rating: Optional[Decimal] = None
    ratings_count: int = 0
