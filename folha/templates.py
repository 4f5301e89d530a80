"""
Seleção do modelo de PDF (V1..V6) a partir de Cargo, Vínculo e Função.
"""
from folha import rules
from folha.models import Employee, Role, Bond, TemplateVariant


# Cargos que usam o V2 quando efetivos
V2_EFETIVO_ROLES = (
    Role.PROFESSOR,
    Role.ASSISTENTE_SOCIAL,
    Role.PSICOLOGO,
    Role.GESTOR,
    Role.SUPERVISOR,
)


def select_template(employee: Employee) -> TemplateVariant:
    """Primeira regra que casa vence; sem correspondência cai no V1."""
    # Professor na gestão da escola
    if employee.role == Role.PROFESSOR and rules.is_gestor_function(employee):
        return TemplateVariant.V2

    if rules.is_volunteer_20h(employee):
        return TemplateVariant.V6

    if rules.is_fundamental_ii(employee):
        return TemplateVariant.V5

    if rules.is_volunteer(employee):
        return TemplateVariant.V4

    if rules.is_contract_support_template(employee):
        return TemplateVariant.V3

    if employee.role == Role.PROFESSOR and employee.bond == Bond.CONTRATO:
        return TemplateVariant.V2

    if employee.role in V2_EFETIVO_ROLES and employee.bond == Bond.EFETIVO:
        return TemplateVariant.V2

    return TemplateVariant.V1
