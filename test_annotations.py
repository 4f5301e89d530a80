"""
Testes do motor de anotação diária.
"""
from datetime import date

import pytest

from conftest import make_employee
from folha.annotations import (
    annotate, annotation_group, VOLUNTEER_DASHES, CONTRACT_DASHES, DEFAULT_OFF_DAY_NOTE
)
from folha.holidays import HolidayCalendar, HolidayRule, default_calendar
from folha.models import Role, Bond, AnnotationGroup, WEEKDAY_NAMES_EN


# Maio/2024: 1 = quarta, 4 = sábado, 5 = domingo, 7 = terça
WEDNESDAY = date(2024, 5, 8)
SATURDAY = date(2024, 5, 4)
SUNDAY = date(2024, 5, 5)
TUESDAY_7 = date(2024, 5, 7)
WEDNESDAY_7 = date(2024, 8, 7)
CITY_DAY = date(2024, 10, 11)  # sexta


# ========== EDUCADOR VOLUNTÁRIO ==========

def test_volunteer_non_work_weekday(volunteer):
    result = annotate(volunteer, WEDNESDAY)
    assert result.note == VOLUNTEER_DASHES
    assert len(result.note) == 30
    assert result.block_time_entry


def test_volunteer_saturday(volunteer):
    assert annotate(volunteer, SATURDAY).note == "SÁBADO"
    assert annotate(volunteer, SUNDAY).note == "DOMINGO"


def test_volunteer_holiday_on_non_work_day(volunteer):
    assert annotate(volunteer, WEDNESDAY_7).note == "FERIADO"


def test_volunteer_holiday_on_work_day_is_ignored(volunteer):
    result = annotate(volunteer, TUESDAY_7)
    assert result.note is None
    assert not result.block_time_entry


def test_volunteer_holiday_on_weekend():
    employee = make_employee(bond=Bond.EDUCADOR_VOLUNTARIO, role=Role.EDUCADOR_VOLUNTARIO)
    # 07/09/2024 é sábado
    assert annotate(employee, date(2024, 9, 7)).note == "FERIADO"


# ========== VIGIA 12x36 ==========

def test_vigia_12x36_off_day_has_no_note(vigia_12x36):
    result = annotate(vigia_12x36, date(2024, 5, 9))  # quinta
    assert result.note is None
    assert result.block_time_entry


def test_vigia_12x36_weekend_has_no_note(vigia_12x36):
    assert annotate(vigia_12x36, SATURDAY).note is None


def test_vigia_12x36_holiday(vigia_12x36):
    assert annotate(vigia_12x36, TUESDAY_7).note == "FERIADO"


# ========== APOIO CONTRATADO ==========

def test_contract_asg_non_work_weekday():
    employee = make_employee(
        role=Role.ASG, bond=Bond.CONTRATO, job_function="ASG",
        work_days=['Monday', 'Tuesday'],
    )
    assert annotate(employee, WEDNESDAY).note == CONTRACT_DASHES
    assert len(CONTRACT_DASHES) == 25
    assert annotate(employee, SUNDAY).note == "DOMINGO"
    assert annotate(employee, date(2024, 6, 7)).note == "FERIADO"


def test_contract_nutricionista_is_contract_service():
    employee = make_employee(role=Role.NUTRICIONISTA, bond=Bond.CONTRATO, job_function="")
    assert annotation_group(employee) == AnnotationGroup.CONTRACT_SERVICE


# ========== PADRÃO ==========

def test_default_non_work_weekday():
    employee = make_employee(
        role=Role.ASG, bond=Bond.EFETIVO, job_function="ASG",
        work_days=['Monday', 'Tuesday'],
    )
    assert annotate(employee, WEDNESDAY).note == DEFAULT_OFF_DAY_NOTE


def test_default_weekend_natural_case(employee):
    assert annotate(employee, SATURDAY).note == "Sábado"
    assert annotate(employee, SUNDAY).note == "Domingo"


def test_default_ignores_holidays(employee):
    employee.work_days = ['Monday']
    assert annotate(employee, TUESDAY_7).note == DEFAULT_OFF_DAY_NOTE


def test_default_work_day(employee):
    result = annotate(employee, WEDNESDAY)
    assert result.note is None
    assert not result.block_time_entry


# ========== FUNDAMENTAL II ==========

def test_fundamental_ii_weekend_even_when_work_day():
    employee = make_employee(
        role=Role.PROFESSOR_FUNDAMENTAL_II, bond=Bond.CONTRATO,
        work_days=['Saturday'],
    )
    result = annotate(employee, SATURDAY)
    assert result.note == "SÁBADO"
    assert result.block_time_entry


def test_fundamental_ii_non_work_weekday():
    employee = make_employee(
        role=Role.PROFESSOR_FUNDAMENTAL_II, bond=Bond.EFETIVO, work_days=['Monday'],
    )
    result = annotate(employee, WEDNESDAY)
    assert result.note is None
    assert result.block_time_entry


# ========== VOLUNTÁRIO 20H ==========

def test_volunteer_20h_city_day_on_work_day():
    employee = make_employee(bond=Bond.EDUCADOR_VOLUNTARIO_20H)
    result = annotate(employee, CITY_DAY)
    assert result.note == "FERIADO DIA DA CIDADE"
    assert result.block_time_entry


def test_volunteer_20h_weekend():
    employee = make_employee(bond=Bond.EDUCADOR_VOLUNTARIO_20H, work_days=['Saturday'])
    assert annotate(employee, SATURDAY).note == "SÁBADO"


def test_volunteer_20h_ignores_day_7():
    employee = make_employee(bond=Bond.EDUCADOR_VOLUNTARIO_20H, work_days=['Monday'])
    result = annotate(employee, TUESDAY_7)
    assert result.note is None
    assert result.block_time_entry


# ========== PRIORIDADE ==========

@pytest.mark.parametrize("kwargs, group", [
    (dict(role=Role.VIGIA, bond=Bond.EDUCADOR_VOLUNTARIO_20H, job_function="Vigia 12h x 36h"),
     AnnotationGroup.VOLUNTEER_20H),
    (dict(role=Role.PROFESSOR_FUNDAMENTAL_II, bond=Bond.CONTRATO, job_function="ASG"),
     AnnotationGroup.FUNDAMENTAL_II),
    (dict(role=Role.VIGIA, bond=Bond.EDUCADOR_VOLUNTARIO, job_function="Vigia"),
     AnnotationGroup.VOLUNTEER),
    (dict(role=Role.VIGIA, bond=Bond.CONTRATO, job_function="VIGIA 12H X 36H"),
     AnnotationGroup.VIGIA_12X36),
    (dict(role=Role.VIGIA, bond=Bond.CONTRATO, job_function="Vigia diurno"),
     AnnotationGroup.CONTRACT_SERVICE),
    (dict(role=Role.VIGIA, bond=Bond.EFETIVO, job_function="Vigia"),
     AnnotationGroup.DEFAULT),
])
def test_annotation_group_priority(kwargs, group):
    assert annotation_group(make_employee(**kwargs)) == group


def test_custom_calendar():
    calendar = HolidayCalendar([HolidayRule(day=8, month=5, label="PONTO FACULTATIVO")])
    employee = make_employee(
        role=Role.ASG, bond=Bond.CONTRATO, job_function="ASG", work_days=['Monday'],
    )
    assert annotate(employee, WEDNESDAY, calendar).note == "PONTO FACULTATIVO"
    assert annotate(employee, TUESDAY_7, calendar).note == CONTRACT_DASHES


def test_block_flag_matches_note_or_off_day(volunteer):
    calendar = default_calendar()
    for day_num in range(1, 32):
        day = date(2024, 5, day_num)
        result = annotate(volunteer, day, calendar)
        off = WEEKDAY_NAMES_EN[day.weekday()] not in volunteer.work_days
        assert result.block_time_entry == (off or result.note is not None)
