import re
from typing import Optional

from pydantic import EmailStr, field_validator
from sqlmodel import SQLModel, Field

from barberdesk.models.validators import check_person_name, check_phone


PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


class UserBase(SQLModel):
    name: str
    email: str = Field(index=True, unique=True)
    phone: Optional[str] = None
    role: str = "staff"  # "admin" ou "staff"


class User(UserBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    password_hash: str


class UserCreate(SQLModel):
    name: str
    email: EmailStr
    phone: str
    password: str
    role: str = "staff"

    @field_validator("name")
    @classmethod
    def _name(cls, v):
        return check_person_name(v)

    @field_validator("phone")
    @classmethod
    def _phone(cls, v):
        return check_phone(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v):
        if len(v) < 6:
            raise ValueError("Senha deve ter no mínimo 6 caracteres")
        if not PASSWORD_PATTERN.match(v):
            raise ValueError("Senha deve conter letras maiúsculas, minúsculas e números")
        return v

    @field_validator("role")
    @classmethod
    def _role(cls, v):
        if v not in ("admin", "staff"):
            raise ValueError("role deve ser 'admin' ou 'staff'")
        return v


class UserUpdate(SQLModel):
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


class UserRead(SQLModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: str


class LoginRequest(SQLModel):
    email: str
    password: str


class TokenResponse(SQLModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
