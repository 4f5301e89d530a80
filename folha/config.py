"""
Configuração local (config.json): cabeçalho do órgão, arquivos de dados,
pasta de saída e calendário de feriados.
"""
import json
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from folha.holidays import HolidayCalendar, default_calendar


logger = logging.getLogger(__name__)

CONFIG_FILE = os.path.join(os.path.dirname(__file__), '..', 'config.json')


@dataclass
class Organization:
    """Dados do órgão para o cabeçalho e rodapé dos PDFs."""
    header_lines: List[str] = field(default_factory=lambda: [
        "ESTADO DA PARAÍBA",
        "PREFEITURA MUNICIPAL DE CAMPINA GRANDE",
        "SECRETARIA DE EDUCAÇÃO",
        "DIRETORIA ADMINISTRATIVA FINANCEIRA",
        "GERÊNCIA DE RECURSOS HUMANOS",
    ])
    city: str = "Campina Grande"
    logo_path: str = ""


@dataclass
class AppConfig:
    organization: Organization = field(default_factory=Organization)
    employees_file: str = "employees.json"
    timesheets_file: str = "timesheets.json"
    output_dir: str = "Pontos Gerados"
    holidays: HolidayCalendar = field(default_factory=default_calendar)


def load_config(path: Optional[str] = None) -> AppConfig:
    """Carrega o config.json. Arquivo ausente ou inválido → padrão."""
    config_path = os.path.abspath(path or CONFIG_FILE)
    config = AppConfig()
    if not os.path.exists(config_path):
        return config

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Configuração ignorada (%s): %s", config_path, e)
        return config

    if not isinstance(data, dict):
        logger.warning("Configuração ignorada (%s): esperado um objeto JSON", config_path)
        return config

    org = data.get('organization') or {}
    if not isinstance(org, dict):
        logger.warning("Campo 'organization' inválido no config.json, usando o padrão")
        org = {}
    if org.get('header_lines'):
        config.organization.header_lines = list(org['header_lines'])
    config.organization.city = org.get('city', config.organization.city)
    config.organization.logo_path = org.get('logo_path', '')

    config.employees_file = data.get('employees_file', config.employees_file)
    config.timesheets_file = data.get('timesheets_file', config.timesheets_file)
    config.output_dir = data.get('output_dir', config.output_dir)

    if 'holidays' in data:
        try:
            config.holidays = HolidayCalendar.from_list(data['holidays'])
        except (KeyError, ValueError, TypeError) as e:
            logger.warning("Feriados inválidos no config.json, usando o padrão: %s", e)

    logger.info("Configurações carregadas de %s", config_path)
    return config


def save_config(config: AppConfig, path: Optional[str] = None):
    config_path = os.path.abspath(path or CONFIG_FILE)
    data = {
        'organization': {
            'header_lines': config.organization.header_lines,
            'city': config.organization.city,
            'logo_path': config.organization.logo_path,
        },
        'employees_file': config.employees_file,
        'timesheets_file': config.timesheets_file,
        'output_dir': config.output_dir,
        'holidays': config.holidays.to_list(),
    }
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def resolve_path(path: str, base: Optional[str] = None) -> str:
    """Caminhos relativos do config são relativos à pasta do config.json."""
    if os.path.isabs(path):
        return path
    base_dir = os.path.dirname(os.path.abspath(base or CONFIG_FILE))
    return os.path.join(base_dir, path)
