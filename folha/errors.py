"""
Exceções da Folha de Ponto.
"""


class FolhaError(Exception):
    """Erro base do sistema."""


class ValidationError(FolhaError):
    """Entrada inválida (funcionário ausente, mês/ano inválido)."""


class EmployeeNotFoundError(ValidationError):
    """Funcionário não encontrado no conjunto informado."""

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(f"Funcionário com ID {employee_id} não encontrado.")


class StorageError(FolhaError):
    """Falha de persistência (arquivo indisponível, JSON corrompido)."""
