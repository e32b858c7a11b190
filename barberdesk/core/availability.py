"""Agenda semanal de disponibilidade dos barbeiros.

Cada dia da semana tem um intervalo opcional ``[início, fim)``. Dia sem
intervalo significa barbeiro indisponível. A agenda é criada sob demanda na
primeira gravação e sempre substituída por inteiro.
"""

import logging
from datetime import time
from typing import Dict, Mapping, Optional, Tuple

from sqlmodel import Session, select

from barberdesk.core.errors import InvalidSchedule, NotFound
from barberdesk.models.barber import Barber
from barberdesk.models.schedule import AvailabilitySchedule, SCHEDULE_FIELDS, WEEKDAYS


logger = logging.getLogger(__name__)

WEEKDAY_LABELS = {
    "monday": "segunda-feira",
    "tuesday": "terça-feira",
    "wednesday": "quarta-feira",
    "thursday": "quinta-feira",
    "friday": "sexta-feira",
    "saturday": "sábado",
    "sunday": "domingo",
}

# dias que recebem o horário de segunda (domingo fica de fora)
MONDAY_COPY_TARGETS = ("tuesday", "wednesday", "thursday", "friday", "saturday")

Week = Dict[str, Optional[time]]


def empty_week() -> Week:
    return {field: None for field in SCHEDULE_FIELDS}


def week_from(schedule: Optional[AvailabilitySchedule]) -> Week:
    if schedule is None:
        return empty_week()
    return {field: getattr(schedule, field) for field in SCHEDULE_FIELDS}


def day_window(week: Mapping[str, Optional[time]], weekday: int) -> Optional[Tuple[time, time]]:
    """Intervalo configurado para o dia (0=segunda), ou None se indisponível."""
    day = WEEKDAYS[weekday]
    start = week.get(f"{day}_start")
    end = week.get(f"{day}_end")
    if start is None or end is None:
        return None
    return start, end


def validate_week(week: Mapping[str, Optional[time]]) -> None:
    for day in WEEKDAYS:
        start = week.get(f"{day}_start")
        end = week.get(f"{day}_end")
        label = WEEKDAY_LABELS[day]

        if (start is None) != (end is None):
            raise InvalidSchedule(f"Informe início e fim para {label}, ou deixe os dois vazios")

        if start is not None and start >= end:
            raise InvalidSchedule(f"Horário de início deve ser anterior ao fim ({label})")


def apply_monday_to_weekdays(week: Mapping[str, Optional[time]]) -> Week:
    """Copia o horário de segunda para terça a sábado.

    Devolve uma nova agenda; a original não é alterada. Falha se segunda não
    tiver início e fim definidos.
    """
    start = week.get("monday_start")
    end = week.get("monday_end")
    if start is None or end is None:
        raise InvalidSchedule("Defina o horário de segunda-feira primeiro")

    updated = empty_week()
    updated.update(week)
    for day in MONDAY_COPY_TARGETS:
        updated[f"{day}_start"] = start
        updated[f"{day}_end"] = end
    return updated


def _get_barber(session: Session, barber_id: int) -> Barber:
    barber = session.get(Barber, barber_id)
    if barber is None:
        raise NotFound("Barbeiro não encontrado")
    return barber


def get_schedule(session: Session, barber_id: int) -> Optional[AvailabilitySchedule]:
    return session.exec(
        select(AvailabilitySchedule).where(AvailabilitySchedule.barber_id == barber_id)
    ).first()


def load_week(session: Session, barber_id: int) -> Week:
    _get_barber(session, barber_id)
    return week_from(get_schedule(session, barber_id))


def replace_week(session: Session, barber_id: int, week: Mapping[str, Optional[time]]) -> Week:
    _get_barber(session, barber_id)
    validate_week(week)

    schedule = get_schedule(session, barber_id)
    if schedule is None:
        schedule = AvailabilitySchedule(barber_id=barber_id)

    for field in SCHEDULE_FIELDS:
        setattr(schedule, field, week.get(field))

    session.add(schedule)
    session.commit()
    session.refresh(schedule)

    logger.info("Agenda semanal do barbeiro %s atualizada", barber_id)
    return week_from(schedule)
