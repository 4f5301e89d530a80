"""
Cálculo da folha de ponto.
Converte horários HH:MM, soma as horas dos dois pares entrada/saída
e monta os registros diários de um mês com as anotações de cada dia.
"""
import math
from calendar import monthrange
from datetime import date
from typing import List, Optional

from folha.annotations import annotate, annotation_group
from folha.errors import ValidationError
from folha.holidays import HolidayCalendar, default_calendar
from folha.models import Employee, DayRecord


def parse_time(value: Optional[str]) -> Optional[int]:
    """Converte 'HH:MM' em minutos desde a meia-noite. Inválido → None."""
    if not value:
        return None
    parts = str(value).split(':')
    if len(parts) != 2:
        return None
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
    except ValueError:
        return None
    return hours * 60 + minutes


def _pair_minutes(entry: Optional[str], exit_t: Optional[str]) -> int:
    """Minutos de um par; saída antes ou igual à entrada não conta (sem virada de dia)."""
    start = parse_time(entry)
    end = parse_time(exit_t)
    if start is None or end is None:
        return 0
    if end > start:
        return end - start
    return 0


def calculate_hours(
    entry_1: Optional[str],
    exit_1: Optional[str],
    entry_2: Optional[str] = None,
    exit_2: Optional[str] = None
) -> float:
    """
    Total de horas trabalhadas no dia: (E1→S1) + (E2→S2).
    Horário malformado conta zero; o resultado nunca é negativo nem NaN.
    """
    total_minutes = _pair_minutes(entry_1, exit_1) + _pair_minutes(entry_2, exit_2)
    hours = total_minutes / 60
    if math.isnan(hours) or hours < 0:
        return 0.0
    return hours


def recalculate_record(record: DayRecord) -> DayRecord:
    """Recalcula o total de horas depois de uma edição manual dos horários."""
    return record.with_times(total_hours_worked=calculate_hours(*record.times))


def edit_times(
    record: DayRecord,
    entry_1: Optional[str] = None,
    exit_1: Optional[str] = None,
    entry_2: Optional[str] = None,
    exit_2: Optional[str] = None
) -> DayRecord:
    """
    Aplica horários digitados na edição manual e recalcula as horas.

    Campo vazio vira None. Dia bloqueado (folga, fim de semana, feriado)
    não aceita horário, e horário fora do formato HH:MM é rejeitado.
    """
    values = [(v or '').strip() or None for v in (entry_1, exit_1, entry_2, exit_2)]
    day = record.date.strftime('%d/%m/%Y')

    if record.block_time_entry and any(values):
        raise ValidationError(f"Dia {day} bloqueado para lançamento de horário.")
    for value in values:
        if value is not None and parse_time(value) is None:
            raise ValidationError(f"Horário inválido em {day}: {value!r} (use HH:MM)")

    return recalculate_record(record.with_times(
        entry_time_1=values[0],
        exit_time_1=values[1],
        entry_time_2=values[2],
        exit_time_2=values[3],
    ))


def validate_period(month: int, year: int):
    if not isinstance(month, int) or not 1 <= month <= 12:
        raise ValidationError(f"Mês inválido: {month!r}")
    if not isinstance(year, int) or not 1 <= year <= 9999:
        raise ValidationError(f"Ano inválido: {year!r}")


class TimesheetCalculator:
    """Gera os registros diários de um mês para um servidor."""

    def __init__(self, holidays: Optional[HolidayCalendar] = None):
        self.holidays = holidays if holidays is not None else default_calendar()

    def generate_month(self, employee: Employee, month: int, year: int) -> List[DayRecord]:
        """
        Um DayRecord por dia do mês, em ordem.
        Horários saem sempre vazios para preenchimento manual.
        """
        if employee is None:
            raise ValidationError("Selecione um funcionário.")
        validate_period(month, year)

        group = annotation_group(employee)
        _, days_in_month = monthrange(year, month)
        records = []

        for day_num in range(1, days_in_month + 1):
            current_date = date(year, month, day_num)
            annotation = annotate(employee, current_date, self.holidays, group=group)

            entry_1 = exit_1 = entry_2 = exit_2 = None

            records.append(DayRecord(
                date=current_date,
                entry_time_1=entry_1,
                exit_time_1=exit_1,
                entry_time_2=entry_2,
                exit_time_2=exit_2,
                total_hours_worked=calculate_hours(entry_1, exit_1, entry_2, exit_2),
                note=annotation.note,
                block_time_entry=annotation.block_time_entry,
            ))

        return records

    @staticmethod
    def worked_days(records: List[DayRecord]) -> int:
        return sum(1 for r in records if r.total_hours_worked > 0)

    @staticmethod
    def total_hours(records: List[DayRecord]) -> float:
        return sum(r.total_hours_worked for r in records)
