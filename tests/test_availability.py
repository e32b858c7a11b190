from datetime import time

import pytest

from barberdesk.core import availability
from barberdesk.core.errors import InvalidSchedule, NotFound
from barberdesk.models.schedule import SCHEDULE_FIELDS

from conftest import OPEN_WEEK


def test_apply_monday_copies_to_tuesday_through_saturday():
    week = availability.empty_week()
    week["monday_start"] = time(9, 0)
    week["monday_end"] = time(18, 0)

    updated = availability.apply_monday_to_weekdays(week)

    for day in ("tuesday", "wednesday", "thursday", "friday", "saturday"):
        assert updated[f"{day}_start"] == time(9, 0)
        assert updated[f"{day}_end"] == time(18, 0)
    assert updated["sunday_start"] is None
    assert updated["sunday_end"] is None


def test_apply_monday_keeps_sunday_as_it_was():
    week = availability.empty_week()
    week.update(monday_start=time(8, 0), monday_end=time(12, 0), sunday_start=time(10, 0), sunday_end=time(14, 0))

    updated = availability.apply_monday_to_weekdays(week)

    assert (updated["sunday_start"], updated["sunday_end"]) == (time(10, 0), time(14, 0))
    assert updated["saturday_end"] == time(12, 0)


@pytest.mark.parametrize(
    "monday",
    [
        {},
        {"monday_start": time(9, 0)},
        {"monday_end": time(18, 0)},
    ],
)
def test_apply_monday_requires_both_bounds(monday):
    week = availability.empty_week()
    week.update(monday)
    week["tuesday_start"] = time(10, 0)
    week["tuesday_end"] = time(11, 0)
    before = dict(week)

    with pytest.raises(InvalidSchedule, match="segunda-feira"):
        availability.apply_monday_to_weekdays(week)

    assert week == before


def test_validate_week_accepts_empty_and_full_weeks():
    availability.validate_week(availability.empty_week())
    availability.validate_week(OPEN_WEEK)


@pytest.mark.parametrize(
    "start, end",
    [
        (time(18, 0), time(9, 0)),
        (time(9, 0), time(9, 0)),
        (time(9, 0), None),
        (None, time(18, 0)),
    ],
)
def test_validate_week_rejects_bad_day(start, end):
    week = dict(OPEN_WEEK)
    week["wednesday_start"] = start
    week["wednesday_end"] = end

    with pytest.raises(InvalidSchedule):
        availability.validate_week(week)


def test_day_window():
    assert availability.day_window(OPEN_WEEK, 0) == (time(9, 0), time(18, 0))
    assert availability.day_window(OPEN_WEEK, 6) is None
    assert availability.day_window(availability.empty_week(), 2) is None


def test_missing_schedule_loads_as_all_unset(session, barber):
    week = availability.load_week(session, barber.id)

    assert set(week) == set(SCHEDULE_FIELDS)
    assert all(value is None for value in week.values())


def test_replace_week_is_whole_record(session, barber):
    availability.replace_week(session, barber.id, OPEN_WEEK)

    partial = availability.empty_week()
    partial.update(friday_start=time(13, 0), friday_end=time(20, 0))
    availability.replace_week(session, barber.id, partial)

    week = availability.load_week(session, barber.id)
    assert week["monday_start"] is None
    assert week["friday_start"] == time(13, 0)
    assert week["friday_end"] == time(20, 0)


def test_replace_week_creates_single_schedule(session, barber):
    availability.replace_week(session, barber.id, OPEN_WEEK)
    availability.replace_week(session, barber.id, OPEN_WEEK)

    schedule = availability.get_schedule(session, barber.id)
    assert schedule.barber_id == barber.id


def test_invalid_week_is_not_saved(session, barber):
    availability.replace_week(session, barber.id, OPEN_WEEK)

    bad = dict(OPEN_WEEK)
    bad["monday_end"] = time(8, 0)
    with pytest.raises(InvalidSchedule):
        availability.replace_week(session, barber.id, bad)

    assert availability.load_week(session, barber.id)["monday_end"] == time(18, 0)


def test_unknown_barber(session):
    with pytest.raises(NotFound):
        availability.load_week(session, 999)
    with pytest.raises(NotFound):
        availability.replace_week(session, 999, OPEN_WEEK)
