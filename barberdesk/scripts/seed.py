import logging
from datetime import time
from decimal import Decimal

from sqlmodel import Session, select

from barberdesk.core.availability import replace_week, week_from, get_schedule
from barberdesk.core.log import configure_logging
from barberdesk.core.security import get_password_hash
from barberdesk.database import create_db_and_tables, engine
from barberdesk.models.barber import Barber
from barberdesk.models.client import Client
from barberdesk.models.service import Service
from barberdesk.models.user import User


logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@barberdesk.com"
ADMIN_PASSWORD = "Admin123"

BARBERS = [
    dict(name="Carlos Mendes", phone="(11) 98888-0001", specialty="Degradê"),
    dict(name="Roberto Alves", phone="(11) 98888-0002", specialty="Barba"),
]

SERVICES = [
    dict(name="Corte", description="Corte masculino tradicional", price=Decimal("40.00"), duration_minutes=30),
    dict(name="Barba", description="Barba com toalha quente", price=Decimal("30.00"), duration_minutes=20),
    dict(name="Corte + Barba", description="Corte completo com barba", price=Decimal("65.00"), duration_minutes=50),
]

CLIENTS = [
    dict(name="João Silva", email="joao@example.com", phone="(11) 97777-0001"),
    dict(name="Pedro Santos", email="pedro@example.com", phone="(11) 97777-0002"),
]

# seg-sáb 09-18, domingo fechado
DEFAULT_WEEK = {
    **{f"{day}_start": time(9, 0) for day in ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday")},
    **{f"{day}_end": time(18, 0) for day in ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday")},
    "sunday_start": None,
    "sunday_end": None,
}


def _get_or_create(session: Session, model, lookup: dict, values: dict):
    stmt = select(model)
    for key, value in lookup.items():
        stmt = stmt.where(getattr(model, key) == value)
    row = session.exec(stmt).first()
    if row:
        return row, False
    row = model(**lookup, **values)
    session.add(row)
    return row, True


def main():
    configure_logging()
    create_db_and_tables()

    with Session(engine) as session:
        # 1) admin
        _, created = _get_or_create(
            session,
            User,
            {"email": ADMIN_EMAIL},
            {"name": "Administrador", "role": "admin", "password_hash": get_password_hash(ADMIN_PASSWORD)},
        )
        if created:
            logger.info("Admin criado: %s / %s", ADMIN_EMAIL, ADMIN_PASSWORD)

        # 2) barbeiros, serviços e clientes de teste (se não existirem)
        barbers = [
            _get_or_create(session, Barber, {"name": b["name"]}, {k: v for k, v in b.items() if k != "name"})[0]
            for b in BARBERS
        ]
        for s in SERVICES:
            _get_or_create(session, Service, {"name": s["name"]}, {k: v for k, v in s.items() if k != "name"})
        for c in CLIENTS:
            _get_or_create(session, Client, {"email": c["email"]}, {k: v for k, v in c.items() if k != "email"})

        session.commit()

        # 3) agenda semanal padrão para quem ainda não tem
        for barber in barbers:
            session.refresh(barber)
            if any(week_from(get_schedule(session, barber.id)).values()):
                continue
            replace_week(session, barber.id, DEFAULT_WEEK)

    logger.info("Seed concluído: %d barbeiros, %d serviços, %d clientes", len(BARBERS), len(SERVICES), len(CLIENTS))


if __name__ == "__main__":
    main()
