"""
Modelos de dados da Folha de Ponto.
Dataclasses para Employee, DayRecord, Timesheet e enums de Cargo/Vínculo.
"""
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional


class Role(str, Enum):
    """Cargos do catálogo da Secretaria de Educação."""
    ASG = "ASG"
    MERENDEIRA = "Merendeira"
    VIGIA = "Vigia"
    SECRETARIO = "Secretário(a)"
    PROFESSOR = "Professor"
    PROFESSOR_FUNDAMENTAL_II = "Professor Fundamental II"
    ASSISTENTE_SOCIAL = "Assistente Social"
    PSICOLOGO = "Psicólogo(a)"
    GESTOR = "Gestor(a)"
    EDUCADOR_VOLUNTARIO = "Educador Voluntário"
    SUPERVISOR = "Supervisor(a)"
    NUTRICIONISTA = "Nutricionista"


class Bond(str, Enum):
    """Tipos de vínculo empregatício."""
    EFETIVO = "Efetivo"
    CONTRATO = "Contrato"
    TERCEIRIZADO = "Terceirizado(a)"
    EDUCADOR_VOLUNTARIO = "Educador Voluntário"
    PRESTADOR = "Prestador(a) de Serviços"
    EDUCADOR_VOLUNTARIO_20H = "Educador Voluntário 20H"


class TemplateVariant(Enum):
    """Modelos de PDF da folha de ponto."""
    V1 = "v1"  # Modelo base
    V2 = "v2"  # Professores e cargos técnicos efetivos
    V3 = "v3"  # Apoio contratado (vigia, ASG, merendeira...)
    V4 = "v4"  # Educador Voluntário
    V5 = "v5"  # Professor Fundamental II (aulas)
    V6 = "v6"  # Educador Voluntário 20H


class AnnotationGroup(Enum):
    """Grupo de regras de anotação, em ordem de prioridade."""
    VOLUNTEER_20H = "educador_voluntario_20h"
    FUNDAMENTAL_II = "fundamental_ii"
    VOLUNTEER = "educador_voluntario"
    VIGIA_12X36 = "vigia_12x36"
    CONTRACT_SERVICE = "apoio_contrato"
    DEFAULT = "padrao"


SHIFTS = ("Manhã", "Tarde", "Noite")

# date.weekday(): 0=segunda, 6=domingo
WEEKDAY_NAMES_EN = [
    'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday'
]
WEEKDAY_NAMES_PT = [
    'Segunda-feira', 'Terça-feira', 'Quarta-feira', 'Quinta-feira',
    'Sexta-feira', 'Sábado', 'Domingo'
]
MONTH_NAMES_PT = [
    '', 'Janeiro', 'Fevereiro', 'Março', 'Abril', 'Maio', 'Junho',
    'Julho', 'Agosto', 'Setembro', 'Outubro', 'Novembro', 'Dezembro'
]


@dataclass
class Employee:
    """Dados de um servidor."""
    id: str = ""
    name: str = ""
    registration_number: str = ""
    role: str = ""              # Cargo
    bond: str = ""              # Vínculo
    job_function: str = ""      # Função (texto livre)
    work_days: List[str] = field(default_factory=list)  # 'Monday', 'Tuesday'...
    shift: List[str] = field(default_factory=list)      # Manhã / Tarde / Noite
    school_name: str = ""
    discipline: str = ""
    weekly_hours: Optional[float] = None
    owner_id: str = ""

    @property
    def display_name(self) -> str:
        return self.name if self.name else f"ID {self.id}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Employee":
        """Cria a partir de um registro com os nomes de coluna do banco."""
        weekly = data.get('weekly_hours')
        return cls(
            id=str(data.get('id') or ''),
            name=data.get('name') or '',
            registration_number=data.get('registration_number') or '',
            role=data.get('employee_type') or '',
            bond=data.get('vinculo') or '',
            job_function=data.get('function') or '',
            work_days=list(data.get('work_days') or []),
            shift=list(data.get('shift') or []),
            school_name=data.get('school_name') or '',
            discipline=data.get('discipline') or '',
            weekly_hours=float(weekly) if weekly not in (None, '') else None,
            owner_id=data.get('user_id') or '',
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'registration_number': self.registration_number,
            'employee_type': self.role,
            'vinculo': self.bond,
            'function': self.job_function,
            'work_days': list(self.work_days),
            'shift': list(self.shift),
            'school_name': self.school_name,
            'discipline': self.discipline,
            'weekly_hours': self.weekly_hours,
            'user_id': self.owner_id,
        }


@dataclass(frozen=True)
class DayRecord:
    """Linha de um dia na folha de ponto."""
    date: date
    entry_time_1: Optional[str] = None
    exit_time_1: Optional[str] = None
    entry_time_2: Optional[str] = None
    exit_time_2: Optional[str] = None
    total_hours_worked: float = 0.0
    note: Optional[str] = None
    block_time_entry: bool = False  # Campos de horário desabilitados na edição

    @property
    def times(self) -> tuple:
        return (self.entry_time_1, self.exit_time_1, self.entry_time_2, self.exit_time_2)

    def with_times(self, **times) -> "DayRecord":
        """Cópia do registro com horários alterados (horas não recalculadas)."""
        return replace(self, **times)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DayRecord":
        return cls(
            date=date.fromisoformat(data['record_date']),
            entry_time_1=data.get('entry_time_1'),
            exit_time_1=data.get('exit_time_1'),
            entry_time_2=data.get('entry_time_2'),
            exit_time_2=data.get('exit_time_2'),
            total_hours_worked=float(data.get('total_hours_worked') or 0.0),
            note=data.get('notes'),
            block_time_entry=bool(data.get('block_time_entry', False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'record_date': self.date.isoformat(),
            'entry_time_1': self.entry_time_1,
            'exit_time_1': self.exit_time_1,
            'entry_time_2': self.entry_time_2,
            'exit_time_2': self.exit_time_2,
            'total_hours_worked': self.total_hours_worked,
            'notes': self.note,
            'block_time_entry': self.block_time_entry,
        }


@dataclass
class Timesheet:
    """Cabeçalho da folha de ponto de um mês + registros diários."""
    employee_id: str
    month: int
    year: int
    records: List[DayRecord] = field(default_factory=list)
    id: str = ""
    status: str = "generated"
    owner_id: str = ""

    @property
    def key(self) -> tuple:
        return (self.employee_id, self.month, self.year)

    @property
    def period_label(self) -> str:
        return f"{MONTH_NAMES_PT[self.month]}/{self.year}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Timesheet":
        return cls(
            id=data.get('id', ''),
            employee_id=str(data['employee_id']),
            month=int(data['month']),
            year=int(data['year']),
            status=data.get('status', 'generated'),
            owner_id=data.get('user_id') or '',
            records=[DayRecord.from_dict(r) for r in data.get('daily_records', [])],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'employee_id': self.employee_id,
            'month': self.month,
            'year': self.year,
            'status': self.status,
            'user_id': self.owner_id,
            'daily_records': [r.to_dict() for r in self.records],
        }
