"""
Testes do cálculo de horas e da geração mensal.
"""
import math
from datetime import date

import pytest

from conftest import make_employee
from folha.calculator import (
    parse_time, calculate_hours, recalculate_record, validate_period, edit_times,
    TimesheetCalculator
)
from folha.errors import ValidationError
from folha.holidays import HolidayCalendar
from folha.models import DayRecord


@pytest.mark.parametrize("value, expected", [
    ("08:00", 480),
    ("8:5", 485),
    ("23:59", 1439),
    ("", None),
    (None, None),
    ("08", None),
    ("08:00:00", None),
    ("ab:cd", None),
])
def test_parse_time(value, expected):
    assert parse_time(value) == expected


def test_two_pairs():
    assert calculate_hours("08:00", "12:00", "13:00", "17:00") == 8.0


def test_exit_before_entry_counts_zero():
    assert calculate_hours("09:00", "08:00", None, None) == 0


def test_single_pair_with_minutes():
    assert calculate_hours("07:30", "11:45") == pytest.approx(4.25)


def test_malformed_pair_is_ignored():
    assert calculate_hours("08:00", "xx", "13:00", "15:00") == 2.0


@pytest.mark.parametrize("times", [
    (None, None, None, None),
    ("22:00", "06:00", None, None),
    ("12:00", "12:00", "18:00", "17:59"),
    ("a", "b", "c", "d"),
])
def test_hours_never_negative_or_nan(times):
    hours = calculate_hours(*times)
    assert hours >= 0
    assert not math.isnan(hours)


def test_recalculate_record():
    record = DayRecord(date=date(2024, 3, 4), entry_time_1="08:00", exit_time_1="12:00")
    updated = recalculate_record(record.with_times(entry_time_2="13:00", exit_time_2="14:30"))
    assert updated.total_hours_worked == 5.5
    assert record.total_hours_worked == 0.0


@pytest.mark.parametrize("month, year", [(0, 2024), (13, 2024), (5, 0), ("5", 2024)])
def test_validate_period_rejects(month, year):
    with pytest.raises(ValidationError):
        validate_period(month, year)


@pytest.mark.parametrize("month, year, days", [
    (2, 2024, 29),
    (2, 2023, 28),
    (4, 2024, 30),
    (12, 2024, 31),
])
def test_day_count(month, year, days):
    records = TimesheetCalculator().generate_month(make_employee(), month, year)
    assert len(records) == days
    assert [r.date.day for r in records] == list(range(1, days + 1))


def test_generated_times_are_empty():
    records = TimesheetCalculator().generate_month(make_employee(), 5, 2024)
    assert all(r.times == (None, None, None, None) for r in records)
    assert all(r.total_hours_worked == 0.0 for r in records)


def test_generate_month_is_idempotent(volunteer):
    calc = TimesheetCalculator()
    assert calc.generate_month(volunteer, 8, 2024) == calc.generate_month(volunteer, 8, 2024)


def test_generate_month_requires_employee():
    with pytest.raises(ValidationError):
        TimesheetCalculator().generate_month(None, 5, 2024)


def test_injected_calendar_is_used(volunteer):
    records = TimesheetCalculator(HolidayCalendar()).generate_month(volunteer, 8, 2024)
    # 07/08/2024 é quarta-feira, dia de folga do voluntário
    assert records[6].note == "-" * 30


def test_totals():
    records = [
        DayRecord(date=date(2024, 5, 1), total_hours_worked=8.0),
        DayRecord(date=date(2024, 5, 2), total_hours_worked=0.0),
        DayRecord(date=date(2024, 5, 3), total_hours_worked=4.5),
    ]
    assert TimesheetCalculator.worked_days(records) == 2
    assert TimesheetCalculator.total_hours(records) == 12.5


def test_edit_times_recalculates():
    record = DayRecord(date=date(2024, 5, 2))
    edited = edit_times(record, " 08:00", "12:00", "", None)
    assert edited.times == ("08:00", "12:00", None, None)
    assert edited.total_hours_worked == 4.0


def test_edit_times_clears_fields():
    record = DayRecord(date=date(2024, 5, 2), entry_time_1="08:00", exit_time_1="12:00",
                       total_hours_worked=4.0)
    assert edit_times(record).total_hours_worked == 0.0


def test_edit_times_blocked_day():
    record = DayRecord(date=date(2024, 5, 4), note="SÁBADO", block_time_entry=True)
    with pytest.raises(ValidationError, match="bloqueado"):
        edit_times(record, "08:00", "12:00")
    assert edit_times(record, "", "").note == "SÁBADO"


def test_edit_times_invalid_format():
    with pytest.raises(ValidationError, match="Horário inválido"):
        edit_times(DayRecord(date=date(2024, 5, 2)), "8h", "12:00")
