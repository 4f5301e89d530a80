"""
Testes de fumaça da exportação em PDF.
"""
import os

import pytest

from conftest import make_employee
from folha.generator import TimesheetGenerator
from folha.models import Role, Bond, TemplateVariant
from folha.calculator import edit_times
from folha.config import Organization
from folha.pdf_export import (
    PDFExporter, TimesheetPDF, LAYOUTS, latin1_text, _role_marks, _clean_function
)


EMPLOYEES = {
    TemplateVariant.V1: dict(role=Role.ASG, bond=Bond.EFETIVO, job_function="ASG"),
    TemplateVariant.V2: dict(role=Role.PROFESSOR, bond=Bond.CONTRATO, job_function="Professora"),
    TemplateVariant.V3: dict(role=Role.MERENDEIRA, bond=Bond.CONTRATO,
                             job_function="Apoio (Função): Merendeira"),
    TemplateVariant.V4: dict(role=Role.EDUCADOR_VOLUNTARIO, bond=Bond.EDUCADOR_VOLUNTARIO),
    TemplateVariant.V5: dict(role=Role.PROFESSOR_FUNDAMENTAL_II, bond=Bond.PRESTADOR,
                             discipline="Matemática", weekly_hours=20),
    TemplateVariant.V6: dict(bond=Bond.EDUCADOR_VOLUNTARIO_20H, weekly_hours=20),
}


def _read(path):
    with open(path, 'rb') as f:
        return f.read()


def test_every_variant_has_a_layout():
    assert set(LAYOUTS) == set(TemplateVariant)


@pytest.mark.parametrize("variant", list(TemplateVariant))
def test_export_each_variant(tmp_path, variant):
    employee = make_employee(**EMPLOYEES[variant])
    timesheet = TimesheetGenerator().generate_timesheet(employee, 10, 2024)
    path = str(tmp_path / f"{variant.value}.pdf")

    PDFExporter().export_timesheet(employee, timesheet, path)
    assert _read(path).startswith(b"%PDF")


def test_export_batch(tmp_path):
    employees = [
        make_employee(id=v.value, name=f"Servidor {v.value}", **kw)
        for v, kw in EMPLOYEES.items()
    ]
    report = TimesheetGenerator().generate_batch(
        [e.id for e in employees] + ["faltando"], employees, 2, 2024
    )
    path = str(tmp_path / "lote" / "lote.pdf")

    PDFExporter().export_batch(report, path)
    assert _read(path).startswith(b"%PDF")


def test_export_batch_without_success(tmp_path):
    report = TimesheetGenerator().generate_batch(["x"], [], 2, 2024)
    with pytest.raises(ValueError):
        PDFExporter().export_batch(report, str(tmp_path / "vazio.pdf"))


def test_export_individual(tmp_path):
    employees = [
        make_employee(id="1", name="Ana Clara"),
        make_employee(id="2", name="José/Pedro"),
    ]
    report = TimesheetGenerator().generate_batch(["1", "2"], employees, 3, 2024)
    files = PDFExporter().export_individual(report, str(tmp_path))
    assert [os.path.basename(f) for f in files] == [
        "Ponto_Ana_Clara_03_2024.pdf", "Ponto_JoséPedro_03_2024.pdf"
    ]


def test_safe_filename():
    assert PDFExporter._safe_filename(" Maria: da Silva? ") == "Maria_da_Silva"


WORD_PASTE = dict(
    name="Ana “Nina” d’Ávila",
    school_name="E.M. Monte Castelo – Anexo",
    job_function="Apoio (Função): Merendeira — noturno",
)


@pytest.mark.parametrize("use_assets", [True, False])
def test_export_text_pasted_from_word(tmp_path, use_assets):
    employee = make_employee(role=Role.MERENDEIRA, bond=Bond.CONTRATO, **WORD_PASTE)
    timesheet = TimesheetGenerator().generate_timesheet(employee, 10, 2024)
    fonts_dir = None if use_assets else str(tmp_path / "sem_fontes")
    path = str(tmp_path / "ponto.pdf")

    PDFExporter(fonts_dir=fonts_dir).export_timesheet(employee, timesheet, path)
    assert _read(path).startswith(b"%PDF")


def test_bundled_fonts_are_loaded():
    assert TimesheetPDF(Organization()).has_dejavu


def test_latin1_text():
    assert latin1_text("Castelo – Anexo “A” d’Ávila…") == "Castelo - Anexo \"A\" d'Ávila..."
    assert latin1_text("Escola ☺") == "Escola ?"
    assert latin1_text(None) == ""


@pytest.mark.parametrize("kwargs, expected", [
    (dict(role=Role.PROFESSOR, job_function="GESTÔR ADJUNTO"),
     "Gestor(a) (X) Técnico ( ) Professor(a) ( )"),
    (dict(role=Role.PROFESSOR, job_function="Professora"),
     "Gestor(a) ( ) Técnico ( ) Professor(a) (X)"),
    (dict(role=Role.PSICOLOGO, job_function="Psicóloga"),
     "Gestor(a) ( ) Técnico (X) Professor(a) ( )"),
])
def test_role_marks(kwargs, expected):
    assert _role_marks(make_employee(**kwargs)) == expected


@pytest.mark.parametrize("function, expected", [
    ("Apoio (Função): Merendeira", "Merendeira"),
    ("APOIO (FUNCAO):ASG", "ASG"),
    ("Vigia 12h x 36h", "Vigia 12h x 36h"),
    ("Obs: vigia", "Obs: vigia"),
])
def test_clean_function(function, expected):
    assert _clean_function(make_employee(job_function=function)) == expected


def test_total_labels_blank_without_times():
    records = TimesheetGenerator().generate_timesheet(make_employee(), 5, 2024).records
    layout = LAYOUTS[TemplateVariant.V2]
    assert PDFExporter.total_labels(layout, records) == layout.totals


def test_total_labels_with_times():
    records = TimesheetGenerator().generate_timesheet(make_employee(), 5, 2024).records
    records[1] = edit_times(records[1], "08:00", "12:00", "13:00", "17:30")
    records[2] = edit_times(records[2], "07:00", "11:00")
    labels = PDFExporter.total_labels(LAYOUTS[TemplateVariant.V1], records)
    assert labels[0] == "Dias trabalhados: 2 (12h30)"
    assert labels[1:] == LAYOUTS[TemplateVariant.V1].totals[1:]
