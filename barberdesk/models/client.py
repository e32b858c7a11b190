from datetime import datetime
from typing import Optional

from pydantic import EmailStr, field_validator
from sqlmodel import SQLModel, Field

from barberdesk.models.validators import check_person_name, check_phone


class ClientBase(SQLModel):
    name: str
    email: str = Field(index=True)
    phone: str


class Client(ClientBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class ClientCreate(SQLModel):
    name: str
    email: EmailStr
    phone: str

    @field_validator("name")
    @classmethod
    def _name(cls, v):
        return check_person_name(v)

    @field_validator("phone")
    @classmethod
    def _phone(cls, v):
        return check_phone(v)


class ClientUpdate(SQLModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v):
        return None if v is None else check_person_name(v)

    @field_validator("phone")
    @classmethod
    def _phone(cls, v):
        return None if v is None else check_phone(v)


class ClientRead(ClientBase):
    id: int
    created_at: datetime
    updated_at: datetime
