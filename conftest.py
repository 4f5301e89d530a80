"""
Fixtures compartilhadas dos testes.
"""
import pytest

from folha.models import Employee, Role, Bond


WEEKDAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday']


def make_employee(**kwargs) -> Employee:
    data = dict(
        id="emp-1",
        name="Maria da Silva",
        registration_number="12345",
        role=Role.PROFESSOR,
        bond=Bond.EFETIVO,
        job_function="Professora",
        work_days=list(WEEKDAYS),
        shift=["Manhã"],
        school_name="E.M. Monte Castelo",
    )
    data.update(kwargs)
    return Employee(**data)


@pytest.fixture
def employee():
    return make_employee()


@pytest.fixture
def volunteer():
    return make_employee(
        id="emp-vol",
        name="João Voluntário",
        role=Role.EDUCADOR_VOLUNTARIO,
        bond=Bond.EDUCADOR_VOLUNTARIO,
        job_function="Educador",
        work_days=['Monday', 'Tuesday', 'Thursday', 'Friday'],
    )


@pytest.fixture
def vigia_12x36():
    return make_employee(
        id="emp-vigia",
        name="Carlos Vigia",
        role=Role.VIGIA,
        bond=Bond.CONTRATO,
        job_function="Vigia 12h x 36h",
        work_days=['Monday', 'Wednesday', 'Friday'],
        shift=["Noite"],
    )
