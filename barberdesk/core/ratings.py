import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Tuple

from sqlmodel import Session, select

from barberdesk.core.errors import Conflict, InvalidState, NotFound
from barberdesk.models.appointment import Appointment, AppointmentStatus
from barberdesk.models.barber import Barber
from barberdesk.models.client import Client
from barberdesk.models.rating import Rating, RatingCreate


logger = logging.getLogger(__name__)


def average_rating(ratings: Iterable[Rating]) -> Optional[Decimal]:
    """Média das notas com uma casa decimal; None quando não há avaliações."""
    scores = [r.score for r in ratings]
    if not scores:
        return None
    mean = Decimal(sum(scores)) / Decimal(len(scores))
    return mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def list_ratings(session: Session, barber_id: int) -> List[Rating]:
    if session.get(Barber, barber_id) is None:
        raise NotFound("Barbeiro não encontrado")

    return session.exec(
        select(Rating)
        .where(Rating.barber_id == barber_id)
        .order_by(Rating.created_at.desc())
    ).all()


def rating_summary(session: Session, barber_id: int) -> Tuple[Optional[Decimal], int]:
    ratings = session.exec(select(Rating).where(Rating.barber_id == barber_id)).all()
    return average_rating(ratings), len(ratings)


def _rating_for_appointment(session: Session, appointment_id: int) -> Optional[Rating]:
    return session.exec(
        select(Rating).where(Rating.appointment_id == appointment_id)
    ).first()


def can_rate(session: Session, appointment_id: int) -> bool:
    appointment = session.get(Appointment, appointment_id)
    if appointment is None:
        raise NotFound("Agendamento não encontrado")

    if appointment.status != AppointmentStatus.COMPLETED:
        return False
    return _rating_for_appointment(session, appointment_id) is None


def submit_rating(session: Session, barber_id: int, payload: RatingCreate) -> Rating:
    if session.get(Barber, barber_id) is None:
        raise NotFound("Barbeiro não encontrado")

    client_id = payload.client_id

    if payload.appointment_id is not None:
        appointment = session.get(Appointment, payload.appointment_id)
        if appointment is None:
            raise InvalidState("Agendamento não encontrado")
        if appointment.status != AppointmentStatus.COMPLETED:
            raise InvalidState("Só é possível avaliar após a conclusão do atendimento")
        if appointment.barber_id != barber_id:
            raise InvalidState("Agendamento não pertence a este barbeiro")
        if client_id is not None and client_id != appointment.client_id:
            raise InvalidState("Agendamento não pertence a este cliente")
        if _rating_for_appointment(session, appointment.id) is not None:
            raise Conflict("Este agendamento já foi avaliado")
        client_id = appointment.client_id

    if client_id is None or session.get(Client, client_id) is None:
        raise NotFound("Cliente não encontrado")

    rating = Rating(
        barber_id=barber_id,
        client_id=client_id,
        appointment_id=payload.appointment_id,
        score=payload.score,
        comment=payload.comment or None,
    )

    session.add(rating)
    session.commit()
    session.refresh(rating)

    logger.info(
        "Avaliação %s registrada: barbeiro=%s nota=%s agendamento=%s",
        rating.id, barber_id, rating.score, rating.appointment_id,
    )
    return rating
