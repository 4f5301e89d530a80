"""
Persistência local em JSON.

EmployeeStore: cadastro de servidores por conta.
TimesheetStore: folhas de ponto por (funcionário, mês, ano). Regerar uma
folha apaga os registros diários anteriores e grava o conjunto novo de uma
vez; regerações concorrentes da mesma chave são serializadas.
"""
import json
import logging
import os
import tempfile
import threading
import uuid
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from folha.calculator import recalculate_record
from folha.errors import StorageError, EmployeeNotFoundError, ValidationError
from folha.models import Employee, DayRecord, Timesheet


logger = logging.getLogger(__name__)


def _read_json(path: Optional[str], default):
    if not path or not os.path.exists(path):
        return default
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise StorageError(f"Erro ao ler {path}: {e}") from e


def _write_json(path: Optional[str], data):
    """Grava em arquivo temporário e substitui, para não deixar JSON pela metade."""
    if not path:
        return
    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix='.tmp')
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
        tmp_path = None
    except (OSError, TypeError, ValueError) as e:
        raise StorageError(f"Erro ao gravar {path}: {e}") from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)


class EmployeeStore:
    """Cadastro de servidores. Sem caminho, fica só em memória."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._lock = threading.Lock()
        data = _read_json(path, {'employees': []})
        self._employees: Dict[str, Employee] = {}
        for row in data.get('employees', []):
            emp = Employee.from_dict(row)
            if emp.id:
                self._employees[emp.id] = emp

    def list(self, owner_id: Optional[str] = None) -> List[Employee]:
        """Servidores da conta, ordenados por nome."""
        employees = [
            e for e in self._employees.values()
            if owner_id is None or e.owner_id == owner_id
        ]
        employees.sort(key=lambda e: e.name)
        return employees

    def get(self, employee_id: str) -> Employee:
        try:
            return self._employees[employee_id]
        except KeyError:
            raise EmployeeNotFoundError(employee_id) from None

    def add(self, employee: Employee) -> Employee:
        with self._lock:
            if not employee.id:
                employee.id = uuid.uuid4().hex
            self._employees[employee.id] = employee
            self._save()
        return employee

    def update(self, employee: Employee) -> Employee:
        with self._lock:
            if employee.id not in self._employees:
                raise EmployeeNotFoundError(employee.id)
            self._employees[employee.id] = employee
            self._save()
        return employee

    def delete(self, employee_id: str):
        with self._lock:
            if self._employees.pop(employee_id, None) is None:
                raise EmployeeNotFoundError(employee_id)
            self._save()

    def _save(self):
        _write_json(self.path, {
            'employees': [e.to_dict() for e in self._employees.values()]
        })


class TimesheetStore:
    """Folhas de ponto com upsert por (funcionário, mês, ano)."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._file_lock = threading.Lock()
        self._key_locks: Dict[Tuple[str, int, int], threading.Lock] = defaultdict(threading.Lock)
        self._key_locks_guard = threading.Lock()
        data = _read_json(path, {'timesheets': []})
        self._timesheets: Dict[Tuple[str, int, int], Timesheet] = {}
        for row in data.get('timesheets', []):
            ts = Timesheet.from_dict(row)
            self._timesheets[ts.key] = ts

    def _key_lock(self, key: Tuple[str, int, int]) -> threading.Lock:
        with self._key_locks_guard:
            return self._key_locks[key]

    def upsert(self, timesheet: Timesheet) -> Timesheet:
        """
        Grava a folha. Se já existir para a mesma chave, mantém o id do
        cabeçalho e substitui todos os registros diários.
        """
        key = timesheet.key
        with self._key_lock(key):
            existing = self._timesheets.get(key)
            if existing is not None:
                logger.info(
                    "Folha %s/%s do funcionário %s já existe. Gerando novamente.",
                    timesheet.month, timesheet.year, timesheet.employee_id
                )
                timesheet.id = existing.id
            elif not timesheet.id:
                timesheet.id = uuid.uuid4().hex

            stored = Timesheet(
                id=timesheet.id,
                employee_id=timesheet.employee_id,
                month=timesheet.month,
                year=timesheet.year,
                status=timesheet.status,
                owner_id=timesheet.owner_id,
                records=sorted(timesheet.records, key=lambda r: r.date),
            )
            self._commit(key, stored)
        return stored

    def get(self, employee_id: str, month: int, year: int) -> Optional[Timesheet]:
        return self._timesheets.get((employee_id, month, year))

    def records(self, employee_id: str, month: int, year: int) -> List[DayRecord]:
        """Registros diários em ordem crescente de data."""
        ts = self.get(employee_id, month, year)
        if ts is None:
            return []
        return sorted(ts.records, key=lambda r: r.date)

    def update_records(
        self,
        employee_id: str,
        month: int,
        year: int,
        records: List[DayRecord]
    ) -> Timesheet:
        """
        Salva horários editados manualmente, recalculando as horas.
        Só os horários mudam: observação e bloqueio vêm da folha gravada,
        e dia bloqueado não recebe horário.
        """
        key = (employee_id, month, year)
        with self._key_lock(key):
            existing = self._timesheets.get(key)
            if existing is None:
                raise StorageError(
                    f"Folha {month}/{year} do funcionário {employee_id} não encontrada."
                )
            by_date = {r.date: r for r in existing.records}
            for record in records:
                saved = by_date.get(record.date)
                if saved is None:
                    raise StorageError(f"Dia {record.date} fora da folha {month}/{year}.")
                if saved.block_time_entry and any(record.times):
                    raise ValidationError(
                        f"Dia {record.date.strftime('%d/%m/%Y')} bloqueado para lançamento de horário."
                    )
                by_date[record.date] = recalculate_record(saved.with_times(
                    entry_time_1=record.entry_time_1,
                    exit_time_1=record.exit_time_1,
                    entry_time_2=record.entry_time_2,
                    exit_time_2=record.exit_time_2,
                ))
            updated = Timesheet(
                id=existing.id,
                employee_id=existing.employee_id,
                month=month,
                year=year,
                status=existing.status,
                owner_id=existing.owner_id,
                records=sorted(by_date.values(), key=lambda r: r.date),
            )
            self._commit(key, updated)
        return updated

    def delete(self, employee_id: str, month: int, year: int):
        key = (employee_id, month, year)
        with self._key_lock(key):
            with self._file_lock:
                if self._timesheets.pop(key, None) is not None:
                    self._save()

    def _commit(self, key: Tuple[str, int, int], timesheet: Timesheet):
        """Troca a folha em memória e grava; em falha, restaura a anterior."""
        with self._file_lock:
            previous = self._timesheets.get(key)
            self._timesheets[key] = timesheet
            try:
                self._save()
            except StorageError:
                if previous is None:
                    self._timesheets.pop(key, None)
                else:
                    self._timesheets[key] = previous
                raise

    def _save(self):
        _write_json(self.path, {
            'timesheets': [ts.to_dict() for ts in self._timesheets.values()]
        })
