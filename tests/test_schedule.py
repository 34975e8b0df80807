from datetime import time, timedelta

import pytest

from storefront.core.errors import ValidationError
from storefront.models import ScheduleWindow
from storefront.services.schedule import (Window, build_windows, is_overnight,
                                          is_schedule_open, next_change,
                                          parse_time_of_day, serialize_windows)
from tests.conftest import MONDAY, at

FRIDAY = MONDAY + timedelta(days=4)
SATURDAY = MONDAY + timedelta(days=5)
SUNDAY = MONDAY + timedelta(days=6)

BUSINESS_HOURS = [Window(0, time(9), time(18))]


def test_parse_time_of_day():
    assert parse_time_of_day("09:30") == time(9, 30)
    assert parse_time_of_day(" 23:59 ") == time(23, 59)
    assert parse_time_of_day("00:00") == time(0, 0)


@pytest.mark.parametrize(
    "raw", ["24:00", "12:60", "ab:cd", "9", "09:30:00", "-1:00", "", None, 930]
)
def test_parse_time_of_day_rejects_malformed(raw):
    with pytest.raises(ValidationError):
        parse_time_of_day(raw)


def test_build_windows_accepts_numbers_names_and_aliases():
    windows = build_windows(
        {
            "0": [{"opensAt": "18:00", "closesAt": "23:00"}],
            "monday": [("09:00", "12:00")],
            "sexta-feira": [("22:00", "02:00")],
            6: [],
        }
    )

    assert windows == [
        Window(0, time(9), time(12), 0),
        Window(0, time(18), time(23), 1),
        Window(4, time(22), time(2), 0),
    ]
    assert is_overnight(windows[2])
    assert not is_overnight(windows[0])


def test_is_overnight_reads_stored_rows():
    row = ScheduleWindow(weekday=4, opens_at=time(22), closes_at=time(2), position=0)
    assert is_overnight(row)
    row.closes_at = time(23)
    assert not is_overnight(row)


@pytest.mark.parametrize(
    "schedule",
    [
        {"funday": [("09:00", "18:00")]},
        {7: [("09:00", "18:00")]},
        {"monday": [("09:00", "09:00")]},
        {"monday": [("09:00", "25:00")]},
        {"monday": [("09:00",)]},
        {"monday": "09:00-18:00"},
        [("09:00", "18:00")],
    ],
)
def test_build_windows_rejects_invalid_schedules(schedule):
    with pytest.raises(ValidationError):
        build_windows(schedule)


def test_open_inside_window():
    assert is_schedule_open(BUSINESS_HOURS, at(MONDAY, 10))
    assert is_schedule_open(BUSINESS_HOURS, at(MONDAY, 9))


def test_closed_outside_window_and_at_closing_time():
    assert not is_schedule_open(BUSINESS_HOURS, at(MONDAY, 20))
    assert not is_schedule_open(BUSINESS_HOURS, at(MONDAY, 18))
    assert not is_schedule_open(BUSINESS_HOURS, at(MONDAY, 8, 59))


def test_day_without_windows_is_closed():
    assert not is_schedule_open(BUSINESS_HOURS, at(MONDAY + timedelta(days=1), 10))
    assert not is_schedule_open([], at(MONDAY, 10))
    assert not is_schedule_open(None, at(MONDAY, 10))


def test_overnight_window_belongs_to_opening_day():
    windows = [Window(4, time(22), time(2))]

    assert is_schedule_open(windows, at(SATURDAY, 1))
    assert is_schedule_open(windows, at(FRIDAY, 23))
    assert not is_schedule_open(windows, at(SATURDAY, 2))
    assert not is_schedule_open(windows, at(FRIDAY, 21, 59))
    assert not is_schedule_open(windows, at(FRIDAY, 1))


def test_sunday_overnight_window_runs_into_monday():
    windows = [Window(6, time(23), time(1))]

    assert is_schedule_open(windows, at(MONDAY, 0, 30))
    assert is_schedule_open(windows, at(SUNDAY, 23, 30))


def test_next_change_while_open():
    next_open_at, next_close_at = next_change(BUSINESS_HOURS, at(MONDAY, 10))

    assert next_close_at == at(MONDAY, 18)
    assert next_open_at == at(MONDAY + timedelta(days=7), 9)


def test_next_change_while_closed():
    windows = [Window(0, time(9), time(18)), Window(1, time(9), time(18))]

    next_open_at, next_close_at = next_change(windows, at(MONDAY, 20))

    assert next_open_at == at(MONDAY + timedelta(days=1), 9)
    assert next_close_at == at(MONDAY + timedelta(days=1), 18)


def test_next_change_merges_touching_windows():
    windows = [Window(0, time(9), time(12)), Window(0, time(12), time(18))]

    _, next_close_at = next_change(windows, at(MONDAY, 10))

    assert next_close_at == at(MONDAY, 18)


def test_next_change_without_schedule():
    assert next_change([], at(MONDAY, 10)) == (None, None)


def test_serialize_windows_lists_every_day():
    payload = serialize_windows([Window(4, time(22), time(2))])

    assert payload["friday"] == [{"opensAt": "22:00", "closesAt": "02:00"}]
    assert payload["monday"] == []
    assert len(payload) == 7
