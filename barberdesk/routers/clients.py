import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session, select

from barberdesk.database import get_session
from barberdesk.core import notifications
from barberdesk.core.errors import NotFound
from barberdesk.core.security import get_current_user
from barberdesk.models.appointment import Appointment
from barberdesk.models.client import Client, ClientCreate, ClientRead, ClientUpdate
from barberdesk.models.rating import Rating
from barberdesk.models.user import User


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["clients"])


def _get_client(session: Session, client_id: int) -> Client:
    client = session.get(Client, client_id)
    if not client:
        raise NotFound("Cliente não encontrado")
    return client


@router.get("/", response_model=List[ClientRead])
def list_clients(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return session.exec(select(Client).order_by(Client.name)).all()


@router.post("/", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
def create_client(
    payload: ClientCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    client = Client.model_validate(payload)

    session.add(client)
    notifications.client_registered(session, client)
    session.commit()
    session.refresh(client)

    logger.info("Cliente %s cadastrado: %s", client.id, client.name)
    return client


@router.get("/{client_id}", response_model=ClientRead)
def get_client(
    client_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return _get_client(session, client_id)


@router.put("/{client_id}", response_model=ClientRead)
def update_client(
    client_id: int,
    payload: ClientUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    client = _get_client(session, client_id)
    client.sqlmodel_update(payload.model_dump(exclude_unset=True, exclude_none=True))
    client.updated_at = datetime.utcnow()

    session.add(client)
    session.commit()
    session.refresh(client)
    return client


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(
    client_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    client = _get_client(session, client_id)

    for model in (Rating, Appointment):
        rows = session.exec(select(model).where(model.client_id == client_id)).all()
        for row in rows:
            session.delete(row)

    session.delete(client)
    session.commit()

    logger.info("Cliente %s removido", client_id)
