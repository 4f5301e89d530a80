"""
Testes do carregamento do config.json.
"""
import json
from datetime import date

import pytest

from folha.config import AppConfig, load_config, save_config, resolve_path
from folha.holidays import HolidayCalendar, HolidayRule
from folha.models import AnnotationGroup


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(str(tmp_path / "config.json"))
    assert config.employees_file == "employees.json"
    assert config.organization.city == "Campina Grande"
    assert len(config.holidays) == 2


def test_invalid_json_gives_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{", encoding='utf-8')
    assert load_config(str(path)).output_dir == "Pontos Gerados"


def test_load_values(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        'organization': {'header_lines': ["PREFEITURA DE TESTE"], 'city': "Patos"},
        'output_dir': "saida",
        'holidays': [{'day': 25, 'month': 12, 'label': "NATAL"}],
    }), encoding='utf-8')

    config = load_config(str(path))
    assert config.organization.header_lines == ["PREFEITURA DE TESTE"]
    assert config.organization.city == "Patos"
    assert config.output_dir == "saida"
    assert config.holidays.lookup(date(2024, 12, 25), AnnotationGroup.VOLUNTEER) == "NATAL"
    assert config.holidays.lookup(date(2024, 12, 25), AnnotationGroup.DEFAULT) is None


def test_invalid_holidays_keep_default(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({'holidays': [{'label': "sem dia"}]}), encoding='utf-8')
    config = load_config(str(path))
    assert config.holidays.lookup(date(2024, 5, 7), AnnotationGroup.VOLUNTEER) == "FERIADO"


def test_save_and_reload(tmp_path):
    path = str(tmp_path / "config.json")
    config = AppConfig()
    config.organization.city = "João Pessoa"
    config.holidays = HolidayCalendar([
        HolidayRule(day=1, month=5, year=2025, label="DIA DO TRABALHO",
                    groups=frozenset({AnnotationGroup.VIGIA_12X36})),
    ])
    save_config(config, path)

    reloaded = load_config(path)
    assert reloaded.organization.city == "João Pessoa"
    assert reloaded.holidays.to_list() == config.holidays.to_list()
    assert reloaded.holidays.lookup(date(2024, 5, 1), AnnotationGroup.VIGIA_12X36) is None


def test_resolve_path(tmp_path):
    base = str(tmp_path / "config.json")
    assert resolve_path("employees.json", base) == str(tmp_path / "employees.json")
    absolute = str(tmp_path / "x.json")
    assert resolve_path(absolute, base) == absolute


@pytest.mark.parametrize("content", ["[]", "42", '"texto"', '{"organization": []}'])
def test_json_that_is_not_an_object(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content, encoding='utf-8')
    config = load_config(str(path))
    assert config.organization.city == "Campina Grande"
    assert len(config.holidays) == 2
