"""
Regras de correspondência sobre Cargo, Vínculo e Função.

A Função é texto livre digitado no cadastro; toda comparação é feita sobre
a forma normalizada (sem acentos, minúscula, sem espaços nas pontas) e por
substring. Os predicados abaixo são o único lugar onde esses fragmentos
aparecem.
"""
import unicodedata
from datetime import date
from enum import Enum
from typing import Optional

from folha.models import Employee, Role, Bond, WEEKDAY_NAMES_EN


VIGIA = "vigia"
ASG = "asg"
PSICOLOGA = "psicologa"
MERENDEIRA = "merendeira"
SUPERVISORA = "supervisora"
GESTOR = "gestor"
ESCALA_12X36 = "12h x 36h"


def normalize_text(value: Optional[str]) -> str:
    """Remove acentos, converte para minúsculas e apara espaços."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        value = value.value
    decomposed = unicodedata.normalize('NFD', str(value))
    no_accents = ''.join(c for c in decomposed if unicodedata.category(c) != 'Mn')
    return no_accents.lower().strip()


def function_contains(employee: Employee, fragment: str) -> bool:
    return fragment in normalize_text(employee.job_function)


def is_vigia_function(employee: Employee) -> bool:
    return function_contains(employee, VIGIA)


def is_asg_function(employee: Employee) -> bool:
    return function_contains(employee, ASG)


def is_psicologa_function(employee: Employee) -> bool:
    return function_contains(employee, PSICOLOGA)


def is_merendeira_function(employee: Employee) -> bool:
    return function_contains(employee, MERENDEIRA)


def is_supervisora_function(employee: Employee) -> bool:
    return function_contains(employee, SUPERVISORA)


def is_gestor_function(employee: Employee) -> bool:
    return function_contains(employee, GESTOR)


def is_12x36_function(employee: Employee) -> bool:
    return function_contains(employee, ESCALA_12X36)


# ==========================================
# DIAS
# ==========================================

def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def is_work_day(employee: Employee, day: date) -> bool:
    """Dia da semana consta nos dias de trabalho configurados."""
    return WEEKDAY_NAMES_EN[day.weekday()] in employee.work_days


# ==========================================
# CATEGORIAS
# ==========================================

def is_contract(employee: Employee) -> bool:
    return employee.bond == Bond.CONTRATO


def is_vigia_contract(employee: Employee) -> bool:
    """Vigia contratado com função de vigia (qualquer escala)."""
    return (
        employee.role == Role.VIGIA
        and is_contract(employee)
        and is_vigia_function(employee)
    )


def is_vigia_12x36(employee: Employee) -> bool:
    return is_vigia_contract(employee) and is_12x36_function(employee)


def is_asg_contract(employee: Employee) -> bool:
    return is_asg_function(employee) and is_contract(employee)


def is_generic_vigia_or_asg_contract(employee: Employee) -> bool:
    return (
        (is_vigia_contract(employee) and not is_12x36_function(employee))
        or is_asg_contract(employee)
    )


def _is_other_contract_support(employee: Employee) -> bool:
    """Psicóloga, nutricionista, merendeira e supervisora contratadas."""
    if not is_contract(employee):
        return False
    role = employee.role
    return (
        (role == Role.PSICOLOGO and is_psicologa_function(employee))
        or role == Role.NUTRICIONISTA
        or (role == Role.MERENDEIRA and is_merendeira_function(employee))
        or (role == Role.SUPERVISOR and is_supervisora_function(employee))
    )


def is_contract_service_group(employee: Employee) -> bool:
    return is_generic_vigia_or_asg_contract(employee) or _is_other_contract_support(employee)


def is_contract_support_template(employee: Employee) -> bool:
    """
    Grupo do modelo V3. Difere de is_contract_service_group apenas no
    vigia 12x36, que também usa o V3.
    """
    return (
        is_vigia_contract(employee)
        or is_asg_contract(employee)
        or _is_other_contract_support(employee)
    )


FUNDAMENTAL_II_BONDS = (Bond.PRESTADOR, Bond.CONTRATO, Bond.EFETIVO)


def is_fundamental_ii(employee: Employee) -> bool:
    return (
        employee.role == Role.PROFESSOR_FUNDAMENTAL_II
        and employee.bond in FUNDAMENTAL_II_BONDS
    )


def is_volunteer_20h(employee: Employee) -> bool:
    return employee.bond == Bond.EDUCADOR_VOLUNTARIO_20H


def is_volunteer(employee: Employee) -> bool:
    return employee.bond == Bond.EDUCADOR_VOLUNTARIO
