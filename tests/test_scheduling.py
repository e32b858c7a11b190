from datetime import date, datetime, time, timedelta

import pytest
from sqlmodel import select

from barberdesk.core import scheduling
from barberdesk.core.errors import Conflict, InvalidSchedule, InvalidState, NotFound
from barberdesk.models.appointment import Appointment, AppointmentCreate, AppointmentStatus
from barberdesk.models.notification import Notification

from conftest import upcoming


# segunda-feira
BOOKING_DAY = date(2025, 3, 10)
BEFORE_BOOKING_DAY = datetime(2025, 3, 1, 8, 0)

ALL_STATUSES = list(AppointmentStatus)


def _payload(customer, barber, service, day, at, confirm=False):
    return AppointmentCreate(
        client_id=customer.id,
        barber_id=barber.id,
        service_id=service.id,
        date=day,
        time=at,
        confirm=confirm,
    )


def _appointment(start: datetime, minutes: int = 30, status=AppointmentStatus.PENDING):
    return Appointment(
        client_id=1,
        barber_id=1,
        service_id=1,
        scheduled_at=start,
        service_name_snapshot="Corte",
        service_price_snapshot=40,
        service_duration_snapshot=minutes,
        status=status,
    )


# =========================
# INTERVALOS
# =========================

@pytest.mark.parametrize(
    "b_start, b_end, expected",
    [
        (time(13, 30), time(14, 0), False),  # termina exatamente no início
        (time(14, 30), time(15, 0), False),  # começa exatamente no fim
        (time(14, 15), time(14, 45), True),
        (time(13, 0), time(16, 0), True),
        (time(14, 10), time(14, 20), True),
    ],
)
def test_overlaps_is_half_open(b_start, b_end, expected):
    day = BOOKING_DAY
    a_start = datetime.combine(day, time(14, 0))
    a_end = datetime.combine(day, time(14, 30))
    assert scheduling.overlaps(
        a_start, a_end, datetime.combine(day, b_start), datetime.combine(day, b_end)
    ) is expected


def test_generated_pairs_conflict_only_when_intervals_intersect():
    base = datetime.combine(BOOKING_DAY, time(12, 0))
    for existing_minutes in (15, 30, 45):
        existing = _appointment(base, existing_minutes)
        for offset in range(-120, 121, 5):
            for new_minutes in (15, 30, 50):
                start = base + timedelta(minutes=offset)
                end = start + timedelta(minutes=new_minutes)
                expected = start < base + timedelta(minutes=existing_minutes) and end > base
                found = scheduling.find_conflicts([existing], start, end)
                assert bool(found) is expected, (existing_minutes, offset, new_minutes)


@pytest.mark.parametrize("status", [AppointmentStatus.CANCELED, AppointmentStatus.COMPLETED])
def test_finished_appointments_do_not_block(status):
    start = datetime.combine(BOOKING_DAY, time(14, 0))
    existing = _appointment(start, status=status)
    assert scheduling.find_conflicts([existing], start, start + timedelta(minutes=30)) == []


# =========================
# AGENDAMENTO
# =========================

def test_double_booking_scenario(session, customer, barber, haircut, open_week):
    first = scheduling.book_appointment(
        session, _payload(customer, barber, haircut, BOOKING_DAY, time(14, 0)), now=BEFORE_BOOKING_DAY
    )
    assert first.status == AppointmentStatus.PENDING

    with pytest.raises(Conflict):
        scheduling.book_appointment(
            session, _payload(customer, barber, haircut, BOOKING_DAY, time(14, 15)), now=BEFORE_BOOKING_DAY
        )

    second = scheduling.book_appointment(
        session, _payload(customer, barber, haircut, BOOKING_DAY, time(14, 30)), now=BEFORE_BOOKING_DAY
    )
    assert second.scheduled_at == datetime(2025, 3, 10, 14, 30)


def test_other_barber_is_not_blocked(session, customer, barber, other_barber, haircut, open_week):
    scheduling.book_appointment(
        session, _payload(customer, barber, haircut, BOOKING_DAY, time(14, 0)), now=BEFORE_BOOKING_DAY
    )
    appt = scheduling.book_appointment(
        session, _payload(customer, other_barber, haircut, BOOKING_DAY, time(14, 0)), now=BEFORE_BOOKING_DAY
    )
    assert appt.barber_id == other_barber.id


def test_canceled_booking_frees_the_slot(session, customer, barber, haircut, open_week):
    first = scheduling.book_appointment(
        session, _payload(customer, barber, haircut, BOOKING_DAY, time(10, 0)), now=BEFORE_BOOKING_DAY
    )
    scheduling.change_status(session, first.id, AppointmentStatus.CANCELED)

    again = scheduling.book_appointment(
        session, _payload(customer, barber, haircut, BOOKING_DAY, time(10, 0)), now=BEFORE_BOOKING_DAY
    )
    assert again.id != first.id


def test_confirm_on_creation(session, customer, barber, haircut, open_week):
    appt = scheduling.book_appointment(
        session,
        _payload(customer, barber, haircut, BOOKING_DAY, time(9, 0), confirm=True),
        now=BEFORE_BOOKING_DAY,
    )
    assert appt.status == AppointmentStatus.CONFIRMED


def test_booking_snapshots_the_service(session, customer, barber, haircut, open_week):
    appt = scheduling.book_appointment(
        session, _payload(customer, barber, haircut, BOOKING_DAY, time(9, 0)), now=BEFORE_BOOKING_DAY
    )

    haircut.duration_minutes = 90
    session.add(haircut)
    session.commit()

    session.refresh(appt)
    assert appt.service_duration_snapshot == 30
    assert appt.service_name_snapshot == "Corte"
    # a mudança de duração não afeta o horário seguinte já livre
    scheduling.book_appointment(
        session, _payload(customer, barber, haircut, BOOKING_DAY, time(9, 30)), now=BEFORE_BOOKING_DAY
    )


def test_past_booking_is_rejected(session, customer, barber, haircut, open_week):
    with pytest.raises(InvalidSchedule):
        scheduling.book_appointment(
            session,
            _payload(customer, barber, haircut, BOOKING_DAY, time(14, 0)),
            now=datetime(2025, 3, 10, 14, 0),
        )


def test_booking_now_uses_current_clock(session, customer, barber, haircut, open_week):
    yesterday = date.today() - timedelta(days=1)
    with pytest.raises(InvalidSchedule):
        scheduling.book_appointment(session, _payload(customer, barber, haircut, yesterday, time(10, 0)))

    future = scheduling.book_appointment(
        session, _payload(customer, barber, haircut, upcoming(0), time(10, 0))
    )
    assert future.id is not None


def test_unknown_references_raise_not_found(session, customer, barber, haircut, open_week):
    for field in ("client_id", "barber_id", "service_id"):
        payload = _payload(customer, barber, haircut, BOOKING_DAY, time(10, 0))
        setattr(payload, field, 999)
        with pytest.raises(NotFound):
            scheduling.book_appointment(session, payload, now=BEFORE_BOOKING_DAY)


def test_inactive_barber_cannot_be_booked(session, customer, barber, haircut, open_week):
    barber.active = False
    session.add(barber)
    session.commit()

    with pytest.raises(NotFound):
        scheduling.book_appointment(
            session, _payload(customer, barber, haircut, BOOKING_DAY, time(10, 0)), now=BEFORE_BOOKING_DAY
        )


@pytest.mark.parametrize(
    "day, at",
    [
        (date(2025, 3, 16), time(10, 0)),  # domingo sem horário
        (BOOKING_DAY, time(8, 30)),  # antes de abrir
        (BOOKING_DAY, time(17, 45)),  # termina depois de fechar
        (BOOKING_DAY, time(18, 0)),
    ],
)
def test_booking_outside_availability(session, customer, barber, haircut, open_week, day, at):
    with pytest.raises(InvalidSchedule):
        scheduling.book_appointment(session, _payload(customer, barber, haircut, day, at), now=BEFORE_BOOKING_DAY)


def test_barber_without_schedule_is_unavailable(session, customer, barber, haircut):
    with pytest.raises(InvalidSchedule):
        scheduling.book_appointment(
            session, _payload(customer, barber, haircut, BOOKING_DAY, time(10, 0)), now=BEFORE_BOOKING_DAY
        )


def test_last_slot_of_the_day_fits(session, customer, barber, haircut, open_week):
    appt = scheduling.book_appointment(
        session, _payload(customer, barber, haircut, BOOKING_DAY, time(17, 30)), now=BEFORE_BOOKING_DAY
    )
    assert scheduling.appointment_end(appt) == datetime(2025, 3, 10, 18, 0)


def test_booking_records_notification(session, customer, barber, haircut, open_week):
    appt = scheduling.book_appointment(
        session, _payload(customer, barber, haircut, BOOKING_DAY, time(14, 0)), now=BEFORE_BOOKING_DAY
    )
    notification = session.exec(select(Notification)).one()
    assert notification.kind == "new"
    assert notification.appointment_id == appt.id
    assert notification.client_name == "João Silva"
    assert "10/03/2025 às 14:00" in notification.message


# =========================
# MÁQUINA DE STATUS
# =========================

ALLOWED = {
    (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED),
    (AppointmentStatus.PENDING, AppointmentStatus.CANCELED),
    (AppointmentStatus.CONFIRMED, AppointmentStatus.COMPLETED),
    (AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELED),
}


@pytest.mark.parametrize("current", ALL_STATUSES)
@pytest.mark.parametrize("target", ALL_STATUSES)
def test_transition_graph_is_strict(current, target):
    if (current, target) in ALLOWED:
        scheduling.validate_transition(current, target)
    else:
        with pytest.raises(InvalidState):
            scheduling.validate_transition(current, target)


def test_full_lifecycle(session, customer, barber, haircut, open_week):
    appt = scheduling.book_appointment(
        session, _payload(customer, barber, haircut, BOOKING_DAY, time(11, 0)), now=BEFORE_BOOKING_DAY
    )

    appt = scheduling.change_status(session, appt.id, AppointmentStatus.CONFIRMED)
    assert appt.status == AppointmentStatus.CONFIRMED
    appt = scheduling.change_status(session, appt.id, AppointmentStatus.COMPLETED)
    assert appt.status == AppointmentStatus.COMPLETED

    with pytest.raises(InvalidState):
        scheduling.change_status(session, appt.id, AppointmentStatus.CANCELED)


def test_times_are_stored_in_local_wall_clock(session, customer, barber, haircut, open_week):
    appt = scheduling.book_appointment(
        session, _payload(customer, barber, haircut, BOOKING_DAY, time(15, 0)), now=BEFORE_BOOKING_DAY
    )
    appt = scheduling.change_status(session, appt.id, AppointmentStatus.CANCELED)

    session.expire_all()
    stored = session.get(Appointment, appt.id)
    assert stored.scheduled_at == datetime(2025, 3, 10, 15, 0)
    assert stored.scheduled_at.tzinfo is None
    assert stored.canceled_at.tzinfo is None
    assert customer.created_at.tzinfo is None


@pytest.mark.parametrize("confirm", [False, True])
def test_cancel_from_non_terminal_state(session, customer, barber, haircut, open_week, confirm):
    appt = scheduling.book_appointment(
        session,
        _payload(customer, barber, haircut, BOOKING_DAY, time(11, 0), confirm=confirm),
        now=BEFORE_BOOKING_DAY,
    )
    appt = scheduling.change_status(session, appt.id, AppointmentStatus.CANCELED)

    assert appt.status == AppointmentStatus.CANCELED
    assert appt.canceled_at is not None

    with pytest.raises(InvalidState):
        scheduling.change_status(session, appt.id, AppointmentStatus.PENDING)


def test_status_change_on_missing_appointment(session):
    with pytest.raises(InvalidState):
        scheduling.change_status(session, 404, AppointmentStatus.CONFIRMED)


@pytest.mark.parametrize(
    "path",
    [
        [],
        [AppointmentStatus.CONFIRMED],
        [AppointmentStatus.CONFIRMED, AppointmentStatus.COMPLETED],
        [AppointmentStatus.CANCELED],
    ],
)
def test_delete_in_any_state(session, customer, barber, haircut, open_week, path):
    appt = scheduling.book_appointment(
        session, _payload(customer, barber, haircut, BOOKING_DAY, time(15, 0)), now=BEFORE_BOOKING_DAY
    )
    appt_id = appt.id
    for status in path:
        scheduling.change_status(session, appt_id, status)

    scheduling.delete_appointment(session, appt_id)

    assert session.get(Appointment, appt_id) is None
    with pytest.raises(InvalidState):
        scheduling.change_status(session, appt_id, AppointmentStatus.CANCELED)


def test_delete_missing_appointment(session):
    with pytest.raises(NotFound):
        scheduling.delete_appointment(session, 404)
