"""
Calendário de feriados injetável.

Cada regra casa um dia do mês (opcionalmente restrito a mês e ano) e vale
para um conjunto de grupos de anotação. O calendário padrão reproduz os
dois feriados usados pela Secretaria até aqui; outras datas entram pelo
config.json.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from folha.models import AnnotationGroup


# Grupos cujas folhas recebem anotação de feriado
HOLIDAY_GROUPS = frozenset({
    AnnotationGroup.VOLUNTEER_20H,
    AnnotationGroup.VOLUNTEER,
    AnnotationGroup.VIGIA_12X36,
    AnnotationGroup.CONTRACT_SERVICE,
})


@dataclass(frozen=True)
class HolidayRule:
    """Um feriado: dia do mês, mês/ano opcionais e grupos afetados."""
    day: int
    label: str = "FERIADO"
    month: Optional[int] = None   # None = todo mês
    year: Optional[int] = None    # None = todo ano
    groups: FrozenSet[AnnotationGroup] = field(default_factory=lambda: HOLIDAY_GROUPS)

    def matches(self, day: date, group: AnnotationGroup) -> bool:
        if group not in self.groups:
            return False
        if day.day != self.day:
            return False
        if self.month is not None and day.month != self.month:
            return False
        if self.year is not None and day.year != self.year:
            return False
        return True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HolidayRule":
        groups = data.get('groups')
        if groups:
            parsed = frozenset(AnnotationGroup(g) for g in groups)
        else:
            parsed = HOLIDAY_GROUPS
        return cls(
            day=int(data['day']),
            label=data.get('label') or "FERIADO",
            month=int(data['month']) if data.get('month') else None,
            year=int(data['year']) if data.get('year') else None,
            groups=parsed,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'day': self.day,
            'label': self.label,
            'month': self.month,
            'year': self.year,
            'groups': sorted(g.value for g in self.groups),
        }


class HolidayCalendar:
    """Consulta data → rótulo de feriado para um grupo de anotação."""

    def __init__(self, rules: Iterable[HolidayRule] = ()):
        self.rules: List[HolidayRule] = list(rules)

    def lookup(self, day: date, group: AnnotationGroup) -> Optional[str]:
        """Primeira regra que casa vence."""
        for rule in self.rules:
            if rule.matches(day, group):
                return rule.label
        return None

    def __len__(self) -> int:
        return len(self.rules)

    @classmethod
    def from_list(cls, items: Iterable[Dict[str, Any]]) -> "HolidayCalendar":
        return cls(HolidayRule.from_dict(item) for item in items)

    def to_list(self) -> List[Dict[str, Any]]:
        return [rule.to_dict() for rule in self.rules]


def default_calendar() -> HolidayCalendar:
    """Feriados em uso: dia 7 de cada mês e Dia da Cidade (11/10)."""
    return HolidayCalendar([
        HolidayRule(
            day=7,
            label="FERIADO",
            groups=frozenset({
                AnnotationGroup.VOLUNTEER,
                AnnotationGroup.VIGIA_12X36,
                AnnotationGroup.CONTRACT_SERVICE,
            }),
        ),
        HolidayRule(
            day=11,
            month=10,
            label="FERIADO DIA DA CIDADE",
            groups=frozenset({AnnotationGroup.VOLUNTEER_20H}),
        ),
    ])
