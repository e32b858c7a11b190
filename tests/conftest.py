from datetime import date, time, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session, create_engine
from sqlmodel.pool import StaticPool

from barberdesk import models  # noqa: F401
from barberdesk.core.availability import replace_week
from barberdesk.database import get_session
from barberdesk.main import app
from barberdesk.models.barber import Barber
from barberdesk.models.client import Client
from barberdesk.models.service import Service


WORKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday")

OPEN_WEEK = {
    **{f"{day}_start": time(9, 0) for day in WORKDAYS},
    **{f"{day}_end": time(18, 0) for day in WORKDAYS},
    "sunday_start": None,
    "sunday_end": None,
}

PASSWORD = "Senha123"


def upcoming(weekday: int, weeks_ahead: int = 1) -> date:
    """Próxima data com o dia da semana pedido (0=segunda), sempre no futuro."""
    base = date.today() + timedelta(days=7 * weeks_ahead)
    return base + timedelta(days=(weekday - base.weekday()) % 7)


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="token")
def token_fixture(client: TestClient) -> str:
    response = client.post(
        "/auth/register",
        json={
            "name": "Ana Gerente",
            "email": "ana@barbearia.com.br",
            "phone": "(11) 99999-0000",
            "password": PASSWORD,
        },
    )
    assert response.status_code == 201
    return response.json()["access_token"]


@pytest.fixture(name="api")
def api_fixture(client: TestClient, token: str) -> TestClient:
    client.headers.update({"Authorization": f"Bearer {token}"})
    return client


@pytest.fixture(name="barber")
def barber_fixture(session: Session) -> Barber:
    barber = Barber(name="Carlos Mendes", phone="(11) 98888-0001", specialty="Degradê")
    session.add(barber)
    session.commit()
    session.refresh(barber)
    return barber


@pytest.fixture(name="other_barber")
def other_barber_fixture(session: Session) -> Barber:
    barber = Barber(name="Roberto Alves", phone="(11) 98888-0002")
    session.add(barber)
    session.commit()
    session.refresh(barber)
    return barber


@pytest.fixture(name="customer")
def customer_fixture(session: Session) -> Client:
    customer = Client(name="João Silva", email="joao@barbearia.com.br", phone="(11) 97777-0001")
    session.add(customer)
    session.commit()
    session.refresh(customer)
    return customer


@pytest.fixture(name="haircut")
def haircut_fixture(session: Session) -> Service:
    service = Service(
        name="Corte",
        description="Corte masculino tradicional",
        price=Decimal("40.00"),
        duration_minutes=30,
    )
    session.add(service)
    session.commit()
    session.refresh(service)
    return service


@pytest.fixture(name="open_week")
def open_week_fixture(session: Session, barber: Barber, other_barber: Barber):
    replace_week(session, barber.id, OPEN_WEEK)
    replace_week(session, other_barber.id, OPEN_WEEK)
    return OPEN_WEEK
