"""
Motor de anotação diária da folha de ponto.

Para cada (servidor, dia) decide o texto da coluna de observação/assinatura:
nada, tracejado, nome do dia (SÁBADO/DOMINGO), FERIADO ou o texto fixo
"SÁBADO E DOMINGO" do modelo padrão. Todas as rotas de geração (individual,
lote e PDF) passam por annotate().
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from folha import rules
from folha.holidays import HolidayCalendar, default_calendar
from folha.models import Employee, AnnotationGroup, WEEKDAY_NAMES_PT


VOLUNTEER_DASHES = "-" * 30
CONTRACT_DASHES = "-" * 25
DEFAULT_OFF_DAY_NOTE = "SÁBADO E DOMINGO"

_DEFAULT_CALENDAR = default_calendar()


@dataclass(frozen=True)
class DayAnnotation:
    """Resultado da anotação de um dia."""
    note: Optional[str] = None
    block_time_entry: bool = False


def annotation_group(employee: Employee) -> AnnotationGroup:
    """Resolve o grupo de regras do servidor (primeiro que casa vence)."""
    if rules.is_volunteer_20h(employee):
        return AnnotationGroup.VOLUNTEER_20H
    if rules.is_fundamental_ii(employee):
        return AnnotationGroup.FUNDAMENTAL_II
    if rules.is_volunteer(employee):
        return AnnotationGroup.VOLUNTEER
    if rules.is_vigia_12x36(employee):
        return AnnotationGroup.VIGIA_12X36
    if rules.is_contract_service_group(employee):
        return AnnotationGroup.CONTRACT_SERVICE
    return AnnotationGroup.DEFAULT


def annotate(
    employee: Employee,
    day: date,
    holidays: Optional[HolidayCalendar] = None,
    group: Optional[AnnotationGroup] = None
) -> DayAnnotation:
    """
    Anota um dia para o servidor.

    Args:
        employee: Servidor.
        day: Data do dia.
        holidays: Calendário de feriados. Se None, usa o calendário padrão.
        group: Grupo já resolvido (evita recalcular dia a dia no mês).
    """
    calendar = holidays if holidays is not None else _DEFAULT_CALENDAR
    group = group or annotation_group(employee)

    weekend = rules.is_weekend(day)
    work_day = rules.is_work_day(employee, day)
    day_name = WEEKDAY_NAMES_PT[day.weekday()]

    note: Optional[str] = None

    if group == AnnotationGroup.VOLUNTEER_20H:
        # Fim de semana sempre nomeado; feriado só em dia útil
        if weekend:
            note = day_name.upper()
        else:
            note = calendar.lookup(day, group)

    elif group == AnnotationGroup.FUNDAMENTAL_II:
        if weekend:
            note = day_name.upper()
        elif not work_day:
            note = calendar.lookup(day, group)

    elif group == AnnotationGroup.VIGIA_12X36:
        # Escala 12x36 não marca folga
        if not work_day:
            note = calendar.lookup(day, group)

    else:
        if not work_day:
            if group == AnnotationGroup.DEFAULT:
                note = day_name if weekend else DEFAULT_OFF_DAY_NOTE
            elif weekend:
                note = day_name.upper()
            elif group == AnnotationGroup.VOLUNTEER:
                note = VOLUNTEER_DASHES
            else:
                note = CONTRACT_DASHES

            holiday = calendar.lookup(day, group)
            if holiday:
                note = holiday

    return DayAnnotation(
        note=note,
        block_time_entry=(not work_day) or note is not None
    )
