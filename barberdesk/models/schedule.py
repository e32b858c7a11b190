from datetime import time
from typing import Optional

from pydantic import field_serializer
from sqlmodel import SQLModel, Field


# 0=segunda ... 6=domingo, mesma ordem de date.weekday()
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

SCHEDULE_FIELDS = tuple(
    f"{day}_{bound}" for day in WEEKDAYS for bound in ("start", "end")
)


class ScheduleWeek(SQLModel):
    monday_start: Optional[time] = None
    monday_end: Optional[time] = None
    tuesday_start: Optional[time] = None
    tuesday_end: Optional[time] = None
    wednesday_start: Optional[time] = None
    wednesday_end: Optional[time] = None
    thursday_start: Optional[time] = None
    thursday_end: Optional[time] = None
    friday_start: Optional[time] = None
    friday_end: Optional[time] = None
    saturday_start: Optional[time] = None
    saturday_end: Optional[time] = None
    sunday_start: Optional[time] = None
    sunday_end: Optional[time] = None


class AvailabilitySchedule(ScheduleWeek, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # uma agenda por barbeiro
    barber_id: int = Field(foreign_key="barber.id", unique=True, index=True)


class ScheduleUpdate(ScheduleWeek):
    pass


class ScheduleRead(ScheduleWeek):
    barber_id: Optional[int] = None

    @field_serializer(*SCHEDULE_FIELDS)
    def _hh_mm(self, value: Optional[time]):
        return value.strftime("%H:%M") if value is not None else None
