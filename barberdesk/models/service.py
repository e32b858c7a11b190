from decimal import Decimal
from typing import Optional

from sqlmodel import SQLModel, Field


class ServiceBase(SQLModel):
    name: str = Field(min_length=3)
    description: str = Field(min_length=10)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    duration_minutes: int = Field(gt=0)


class Service(ServiceBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    active: bool = True


class ServiceCreate(ServiceBase):
    pass


class ServiceUpdate(SQLModel):
    name: Optional[str] = Field(default=None, min_length=3)
    description: Optional[str] = Field(default=None, min_length=10)
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    active: Optional[bool] = None


class ServiceRead(ServiceBase):
    id: int
    active: bool
