import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session, select

from barberdesk.database import get_session
from barberdesk.core.errors import Conflict, NotFound
from barberdesk.core.security import get_current_user
from barberdesk.models.appointment import Appointment
from barberdesk.models.service import Service, ServiceCreate, ServiceRead, ServiceUpdate
from barberdesk.models.user import User


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/services",
    tags=["services"]
)


def _get_service(session: Session, service_id: int) -> Service:
    service = session.get(Service, service_id)
    if not service:
        raise NotFound("Serviço não encontrado")
    return service


@router.get("/", response_model=List[ServiceRead])
def list_services(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return session.exec(select(Service).order_by(Service.name)).all()


@router.post("/", response_model=ServiceRead, status_code=status.HTTP_201_CREATED)
def create_service(
    payload: ServiceCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    service = Service.model_validate(payload)

    session.add(service)
    session.commit()
    session.refresh(service)

    logger.info("Serviço %s cadastrado: %s", service.id, service.name)
    return service


@router.get("/{service_id}", response_model=ServiceRead)
def get_service(
    service_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return _get_service(session, service_id)


# agendamentos já feitos guardam snapshot do serviço, não mudam aqui
@router.put("/{service_id}", response_model=ServiceRead)
def update_service(
    service_id: int,
    payload: ServiceUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    service = _get_service(session, service_id)
    service.sqlmodel_update(payload.model_dump(exclude_unset=True, exclude_none=True))

    session.add(service)
    session.commit()
    session.refresh(service)
    return service


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_service(
    service_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    service = _get_service(session, service_id)

    in_use = session.exec(
        select(Appointment).where(Appointment.service_id == service_id)
    ).first()
    if in_use:
        raise Conflict("Serviço possui agendamentos; desative-o em vez de remover")

    session.delete(service)
    session.commit()

    logger.info("Serviço %s removido", service_id)
