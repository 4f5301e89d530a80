"""
Geração de folhas de ponto: individual e em lote.

A geração em lote processa cada funcionário de forma independente; a falha
de um (não encontrado, erro ao gravar) vira um resultado de erro e o lote
continua.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from folha.calculator import TimesheetCalculator, validate_period
from folha.errors import EmployeeNotFoundError, ValidationError
from folha.holidays import HolidayCalendar
from folha.models import Employee, DayRecord, Timesheet, TemplateVariant
from folha.rules import normalize_text
from folha.storage import TimesheetStore
from folha.templates import select_template


logger = logging.getLogger(__name__)


@dataclass
class EmployeeOutcome:
    """Resultado da geração para um funcionário do lote."""
    employee_id: str
    employee: Optional[Employee] = None
    timesheet: Optional[Timesheet] = None
    template: Optional[TemplateVariant] = None
    error: str = ""

    @property
    def success(self) -> bool:
        return self.timesheet is not None and not self.error

    @property
    def records(self) -> List[DayRecord]:
        return self.timesheet.records if self.timesheet else []


@dataclass
class BatchReport:
    """Resultado consolidado de uma geração em lote."""
    month: int
    year: int
    outcomes: List[EmployeeOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[EmployeeOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> List[EmployeeOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def ok(self) -> bool:
        """Ao menos uma folha gerada."""
        return bool(self.succeeded)


class TimesheetGenerator:
    """Gera, grava e devolve folhas de ponto."""

    def __init__(
        self,
        store: Optional[TimesheetStore] = None,
        holidays: Optional[HolidayCalendar] = None,
        owner_id: str = ""
    ):
        self.store = store
        self.owner_id = owner_id
        self.calculator = TimesheetCalculator(holidays)

    def generate_timesheet(self, employee: Employee, month: int, year: int) -> Timesheet:
        """
        Gera a folha de um funcionário e grava (se houver store).
        Erros de validação e de gravação são propagados.
        """
        if employee is None or not employee.id:
            raise ValidationError("Funcionário não encontrado ou ID inválido.")
        validate_period(month, year)

        records = self.calculator.generate_month(employee, month, year)
        timesheet = Timesheet(
            employee_id=employee.id,
            month=month,
            year=year,
            records=records,
            owner_id=self.owner_id or employee.owner_id,
        )

        if self.store is not None:
            timesheet = self.store.upsert(timesheet)
            timesheet.records = self.store.records(employee.id, month, year)

        logger.info(
            "Folha de ponto gerada: %s (%02d/%d, %s)",
            employee.display_name, month, year, select_template(employee).name
        )
        return timesheet

    def generate_batch(
        self,
        employee_ids: Iterable[str],
        employees: Iterable[Employee],
        month: int,
        year: int,
        max_workers: Optional[int] = None
    ) -> BatchReport:
        """
        Gera as folhas dos IDs selecionados, buscando cada um na lista de
        funcionários informada.

        Args:
            employee_ids: IDs selecionados, na ordem desejada.
            employees: Funcionários disponíveis para busca.
            month, year: Período.
            max_workers: Se > 1, processa em paralelo (ordem do resultado mantida).
        """
        validate_period(month, year)
        ids = list(employee_ids)
        by_id: Dict[str, Employee] = {e.id: e for e in employees if e.id}

        if max_workers and max_workers > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                outcomes = list(pool.map(
                    lambda eid: self._generate_one(eid, by_id, month, year), ids
                ))
        else:
            outcomes = [self._generate_one(eid, by_id, month, year) for eid in ids]

        report = BatchReport(month=month, year=year, outcomes=outcomes)
        if report.ok:
            logger.info(
                "Lote %02d/%d: %d geradas, %d com erro",
                month, year, len(report.succeeded), len(report.failed)
            )
        else:
            logger.error("Lote %02d/%d: nenhuma folha de ponto foi gerada com sucesso.", month, year)
        return report

    def _generate_one(
        self,
        employee_id: str,
        by_id: Dict[str, Employee],
        month: int,
        year: int
    ) -> EmployeeOutcome:
        employee = by_id.get(employee_id)
        if employee is None:
            error = str(EmployeeNotFoundError(employee_id))
            logger.warning(error)
            return EmployeeOutcome(employee_id=employee_id, error=error)

        try:
            timesheet = self.generate_timesheet(employee, month, year)
        except Exception as e:
            logger.exception("Erro ao gerar folha de ponto para %s", employee.display_name)
            return EmployeeOutcome(
                employee_id=employee_id,
                employee=employee,
                error=f"Erro ao gerar folha de ponto para {employee.display_name}: {str(e) or 'Erro desconhecido'}"
            )

        return EmployeeOutcome(
            employee_id=employee_id,
            employee=employee,
            timesheet=timesheet,
            template=select_template(employee),
        )


# ==========================================
# FILTROS DA SELEÇÃO EM LOTE
# ==========================================

ALL = "Todos"


def filter_employees(
    employees: Iterable[Employee],
    role: Optional[str] = None,
    bond: Optional[str] = None,
    owner_id: Optional[str] = None
) -> List[Employee]:
    """Filtra por cargo, vínculo e conta. None ou "Todos" não filtram."""
    result = []
    for emp in employees:
        if owner_id and emp.owner_id != owner_id:
            continue
        if role and role != ALL and emp.role != role:
            continue
        if bond and bond != ALL and emp.bond != bond:
            continue
        result.append(emp)
    return result


def search_text(employee: Employee) -> str:
    """Texto de busca: nome, matrícula, função, escola e turnos normalizados."""
    parts = [
        employee.name,
        employee.registration_number,
        employee.job_function,
        employee.school_name,
        ' '.join(employee.shift),
    ]
    return ' '.join(normalize_text(p) for p in parts)


def search_employees(employees: Iterable[Employee], query: str) -> List[Employee]:
    terms = normalize_text(query).split()
    if not terms:
        return list(employees)
    return [e for e in employees if all(t in search_text(e) for t in terms)]


def employee_label(employee: Employee) -> str:
    """Rótulo de seleção: nome (matrícula) - função - turnos - escola."""
    return (
        f"{employee.name} ({employee.registration_number or 'N/A'}) - "
        f"{employee.job_function} - {', '.join(employee.shift) or 'N/A'} - "
        f"{employee.school_name or 'N/A'}"
    )
