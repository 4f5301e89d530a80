"""
Gerador de PDF da folha de ponto.
Seis modelos (V1..V6) com o mesmo cabeçalho do órgão, bloco de
identificação do servidor, uma linha por dia, quadro de totais e
assinatura do(a) gestor(a). Os modelos diferem nos campos de
identificação e nas colunas da tabela.
"""
import logging
import os
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from fpdf import FPDF
from fpdf.errors import FPDFException

from folha import rules
from folha.calculator import TimesheetCalculator
from folha.config import Organization
from folha.generator import BatchReport
from folha.models import (
    Employee, DayRecord, Timesheet, TemplateVariant, Role, MONTH_NAMES_PT, SHIFTS
)
from folha.templates import select_template


logger = logging.getLogger(__name__)

# Erros de renderização que a interface mostra ao usuário
PDF_ERRORS = (OSError, RuntimeError, ValueError, FPDFException)

BLACK = (0, 0, 0)
LIGHT_GRAY = (235, 235, 235)

PAGE_W = 190  # largura útil A4 com margens de 10mm
ROW_H = 4.8
INFO_H = 6

FONTS_DIR = os.path.join(os.path.dirname(__file__), '..', 'assets')

# Pontuação comum em textos colados do Word, fora do Latin-1 das fontes padrão
LATIN1_REPLACEMENTS = str.maketrans({
    '–': '-', '—': '-', '−': '-',
    '‘': "'", '’': "'", '“': '"', '”': '"',
    '…': '...', '•': '*',
})


def latin1_text(text: str) -> str:
    """Texto seguro para Helvetica; o que não tiver equivalente vira '?'."""
    text = (text or '').translate(LATIN1_REPLACEMENTS)
    return text.encode('latin-1', 'replace').decode('latin-1')


# ==========================================
# CAMPOS DE IDENTIFICAÇÃO
# ==========================================

def _shift_marks(employee: Employee) -> str:
    marks = [f"({'X' if s in employee.shift else ' '}) {s}" for s in SHIFTS]
    return "Turno: " + " ".join(marks)


def _weekday_marks(employee: Employee) -> str:
    days = [('Monday', 'Seg'), ('Tuesday', 'Ter'), ('Wednesday', 'Qua'),
            ('Thursday', 'Qui'), ('Friday', 'Sex')]
    marks = [f"({'X' if en in employee.work_days else ' '}) {pt}" for en, pt in days]
    return "Dias: " + " ".join(marks)


TECHNICAL_ROLES = (Role.ASSISTENTE_SOCIAL, Role.PSICOLOGO, Role.SUPERVISOR)
SUPPORT_PREFIX = "apoio (funcao)"


def _role_marks(employee: Employee) -> str:
    """Gestor(a) / Técnico / Professor(a) marcados a partir de Cargo e Função."""
    gestor = rules.is_gestor_function(employee)
    tecnico = employee.role in TECHNICAL_ROLES
    professor = 'professor' in rules.normalize_text(employee.role) and not gestor
    marks = ['X' if v else ' ' for v in (gestor, tecnico, professor)]
    return "Gestor(a) ({}) Técnico ({}) Professor(a) ({})".format(*marks)


def _clean_function(employee: Employee) -> str:
    """Remove o prefixo "Apoio (Função):" digitado no cadastro."""
    func = employee.job_function or ''
    prefix, sep, rest = func.partition(':')
    if sep and rules.normalize_text(prefix) == SUPPORT_PREFIX:
        return rest.strip()
    return func


def _weekly_hours(employee: Employee, suffix: str) -> str:
    if not employee.weekly_hours:
        return 'N/A'
    hours = employee.weekly_hours
    text = f"{hours:g}"
    return f"{text} {suffix}"


# Cada campo recebe (employee, mês, ano)
Field = Tuple[Callable[[Employee, int, int], str], float]


def _unit(label: str) -> Field:
    return (lambda e, m, y: f"{label}: {e.school_name or 'N/A'}", 1.0)


def _month(width: float) -> Field:
    return (lambda e, m, y: f"Mês: {MONTH_NAMES_PT[m]}", width)


def _year(width: float) -> Field:
    return (lambda e, m, y: f"Ano: {y}", width)


# ==========================================
# LAYOUTS
# ==========================================

# Tipos de coluna: day, entry_1, exit_1, entry_2, exit_2, note
@dataclass(frozen=True)
class Column:
    label: str
    width: float   # fração da largura útil
    kind: str
    sublabel: str = ""


@dataclass(frozen=True)
class Layout:
    title: str
    info_rows: List[List[Field]]
    columns: List[Column]
    totals: List[str]
    remarks: List[str]
    upper_notes: bool = False
    column_group: Optional[Tuple[str, int]] = None  # (rótulo, nº de colunas finais agrupadas)


HMS = "(Horas | Minutos | Segundos)"

LAYOUTS: Dict[TemplateVariant, Layout] = {
    TemplateVariant.V1: Layout(
        title="FOLHA DE PONTO",
        info_rows=[
            [_unit("Unidade de Trabalho")],
            [(lambda e, m, y: f"Servidor(a): {e.name}", 2 / 3),
             (lambda e, m, y: f"Matrícula: {e.registration_number}", 1 / 3)],
            [(lambda e, m, y: f"Cargo: {e.role}", 1 / 3),
             (lambda e, m, y: f"Função: {e.job_function}", 1 / 3),
             (lambda e, m, y: _shift_marks(e), 1 / 3)],
            [(lambda e, m, y: f"Vínculo: {e.bond}", 1 / 3), _month(1 / 3), _year(1 / 3)],
        ],
        columns=[
            Column("Dia", 0.05, 'day'),
            Column("Entrada", 0.15, 'entry_1', HMS),
            Column("ASSINATURA/JUSTIFICATIVA", 0.20, 'note'),
            Column("Saída", 0.15, 'exit_1', HMS),
            Column("ASSINATURA/JUSTIFICATIVA", 0.20, 'note'),
            Column("Entrada", 0.125, 'entry_2', HMS),
            Column("Saída", 0.125, 'exit_2', HMS),
        ],
        column_group=("Hora Extra", 2),
        totals=["Dias trabalhados:", "Total de Faltas:", "Quantidade de horas-extras:"],
        remarks=["Observação:", "Justificativa/Horas Extras:"],
    ),
    TemplateVariant.V2: Layout(
        title="FOLHA DE PONTO",
        info_rows=[
            [_unit("Unidade de Trabalho")],
            [(lambda e, m, y: f"Servidor (a): {e.name}", 0.6),
             (lambda e, m, y: _role_marks(e), 0.4)],
            [(lambda e, m, y: f"Cargo: {e.role}", 1 / 3),
             (lambda e, m, y: f"Função: {e.job_function}", 1 / 3),
             (lambda e, m, y: _shift_marks(e), 1 / 3)],
            [(lambda e, m, y: f"Vínculo: {e.bond}", 0.3),
             (lambda e, m, y: f"Matrícula: {e.registration_number}", 0.3),
             _month(0.2), _year(0.2)],
        ],
        columns=[
            Column("Dia", 0.05, 'day'),
            Column("Entrada", 0.12, 'entry_1'),
            Column("Saída", 0.12, 'exit_1'),
            Column("ASSINATURA/JUSTIFICATIVA", 0.235, 'note'),
            Column("Entrada", 0.12, 'entry_2'),
            Column("Saída", 0.12, 'exit_2'),
            Column("ASSINATURA/JUSTIFICATIVA", 0.235, 'note'),
        ],
        totals=["Dias Trabalhados:", "Horas Extras:"],
        remarks=["Obs:"],
        upper_notes=True,
    ),
    TemplateVariant.V3: Layout(
        title="FOLHA DE PONTO - APOIO",
        info_rows=[
            [_unit("Unidade escolar")],
            [(lambda e, m, y: f"Nome: {e.name}", 1.0)],
            [(lambda e, m, y: f"Apoio (Função): {_clean_function(e)}", 2 / 3),
             (lambda e, m, y: f"Vínculo: {e.bond}", 1 / 3)],
            [(lambda e, m, y: _shift_marks(e), 0.5), _month(0.25), _year(0.25)],
        ],
        columns=[
            Column("Dia", 0.05, 'day'),
            Column("Entrada", 0.12, 'entry_1'),
            Column("Saída", 0.12, 'exit_1'),
            Column("ASSINATURA/JUSTIFICATIVA", 0.235, 'note'),
            Column("Entrada", 0.12, 'entry_2'),
            Column("Saída", 0.12, 'exit_2'),
            Column("ASSINATURA/JUSTIFICATIVA", 0.235, 'note'),
        ],
        totals=["Dias Trabalhados:", "Total de Aulas:", "Total de Faltas:"],
        remarks=["Obs:"],
    ),
    TemplateVariant.V4: Layout(
        title="FOLHA DE PONTO - EDUCADORES VOLUNTÁRIOS",
        info_rows=[
            [_unit("Unidade de Trabalho")],
            [(lambda e, m, y: f"NOME: {e.name}", 1.0)],
            [(lambda e, m, y: "CARGA HORÁRIA: 40 HORAS", 1.0)],
            [(lambda e, m, y: _shift_marks(e), 0.5), _month(0.25), _year(0.25)],
        ],
        columns=[
            Column("Dia", 0.05, 'day'),
            Column("Entrada", 0.12, 'entry_1'),
            Column("Saída", 0.12, 'exit_1'),
            Column("ASSINATURA", 0.235, 'note'),
            Column("Entrada", 0.12, 'entry_2'),
            Column("Saída", 0.12, 'exit_2'),
            Column("ASSINATURA", 0.235, 'note'),
        ],
        totals=["Dias Trabalhados:", "Total de Faltas:"],
        remarks=["Obs:"],
    ),
    TemplateVariant.V5: Layout(
        title="FOLHA DE FREQUÊNCIA - PROFESSOR(A)",
        info_rows=[
            [_unit("Unidade de Trabalho")],
            [(lambda e, m, y: f"Nome do(a) Professor(a): {e.name}", 2 / 3),
             (lambda e, m, y: f"Vínculo: {e.bond}", 1 / 3)],
            [(lambda e, m, y: f"Disciplina: {e.discipline or 'N/A'}", 1 / 3),
             (lambda e, m, y: f"Carga Horária Semanal: {_weekly_hours(e, 'H')}", 1 / 3),
             (lambda e, m, y: _shift_marks(e), 1 / 3)],
            [(lambda e, m, y: _weekday_marks(e), 2 / 3), _month(1 / 6), _year(1 / 6)],
        ],
        columns=[Column("DIA", 0.07, 'day')] + [
            Column(f"{n}ª AULA", 0.155, 'note') for n in range(1, 7)
        ],
        totals=["Dias trabalhados:", "Total de aulas:", "Total de faltas:"],
        remarks=["Obs:"],
        upper_notes=True,
    ),
    TemplateVariant.V6: Layout(
        title="FOLHA DE PONTO - EDUCADORES VOLUNTÁRIOS 20H",
        info_rows=[
            [_unit("Unidade de Trabalho")],
            [(lambda e, m, y: f"NOME: {e.name}", 1.0)],
            [(lambda e, m, y: f"CARGA HORÁRIA: {_weekly_hours(e, 'HORAS')}", 1.0)],
            [(lambda e, m, y: _shift_marks(e), 0.5), _month(0.25), _year(0.25)],
        ],
        columns=[
            Column("Dia", 0.06, 'day'),
            Column("Entrada", 0.17, 'entry_1'),
            Column("ASSINATURA", 0.30, 'note'),
            Column("Saída", 0.17, 'exit_1'),
            Column("ASSINATURA", 0.30, 'note'),
        ],
        totals=["Dias trabalhados:", "Total de Faltas:"],
        remarks=["Obs:"],
        upper_notes=True,
    ),
}


class TimesheetPDF(FPDF):
    """PDF da folha de ponto com o cabeçalho do órgão."""

    def __init__(self, organization: Organization, fonts_dir: Optional[str] = None):
        super().__init__('P', 'mm', 'A4')
        self.organization = organization
        self.set_auto_page_break(auto=True, margin=10)
        self.set_margins(10, 8, 10)

        # Fontes
        assets = fonts_dir or FONTS_DIR
        font_reg = os.path.join(assets, 'DejaVuSans.ttf')
        font_bold = os.path.join(assets, 'DejaVuSans-Bold.ttf')

        if os.path.exists(font_reg) and os.path.exists(font_bold):
            self.add_font('DejaVu', '', font_reg)
            self.add_font('DejaVu', 'B', font_bold)
            self.has_dejavu = True
        else:
            self.has_dejavu = False

    def _font(self, style='', size=8):
        if self.has_dejavu:
            self.set_font('DejaVu', style, size)
        else:
            self.set_font('Helvetica', style, size)

    def safe(self, text: str) -> str:
        """Com a fonte padrão (Latin-1), troca caracteres sem suporte."""
        return text if self.has_dejavu else latin1_text(text)

    def fit(self, text: str, width: float) -> str:
        """Corta o texto para caber na célula."""
        text = self.safe(text or '')
        while text and self.get_string_width(text) > width - 1:
            text = text[:-1]
        return text

    def header(self):
        """Logo à esquerda e linhas do órgão centralizadas."""
        y = 8
        logo = self.organization.logo_path
        if logo and os.path.exists(logo):
            try:
                self.image(logo, 10, y, 16, 16)
            except (RuntimeError, OSError, ValueError) as e:
                logger.warning("Logo não carregado (%s): %s", logo, e)

        self._font('B', 9)
        self.set_xy(10, y)
        for line in self.organization.header_lines:
            self.cell(PAGE_W, 4, self.fit(line, PAGE_W), align='C')
            self.ln(4)
        self.ln(2)

    def footer(self):
        self.set_y(-8)
        self._font('', 6)
        self.set_text_color(150, 150, 150)
        self.cell(PAGE_W, 4, f'Página {self.page_no()}/{{nb}}', align='R')
        self.set_text_color(*BLACK)


class PDFExporter:
    """Exportador das folhas de ponto em PDF."""

    def __init__(self, organization: Optional[Organization] = None, fonts_dir: Optional[str] = None):
        self.organization = organization or Organization()
        self.fonts_dir = fonts_dir

    def export_timesheet(
        self,
        employee: Employee,
        timesheet: Timesheet,
        output_path: str,
        variant: Optional[TemplateVariant] = None
    ) -> str:
        """Exporta a folha de um servidor; sem variante, usa a selecionada pelo cadastro."""
        os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)
        pdf = TimesheetPDF(self.organization, self.fonts_dir)
        pdf.alias_nb_pages()
        self._add_timesheet_pages(
            pdf, employee, timesheet, variant or select_template(employee)
        )
        pdf.output(output_path)
        logger.info("PDF gerado: %s", output_path)
        return output_path

    def export_batch(self, report: BatchReport, output_path: str) -> str:
        """Um PDF com todas as folhas geradas no lote, cada uma no seu modelo."""
        successes = report.succeeded
        if not successes:
            raise ValueError("Nenhuma folha de ponto gerada para exportar.")

        os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)
        pdf = TimesheetPDF(self.organization, self.fonts_dir)
        pdf.alias_nb_pages()
        for outcome in successes:
            self._add_timesheet_pages(
                pdf, outcome.employee, outcome.timesheet,
                outcome.template or select_template(outcome.employee)
            )
        pdf.output(output_path)
        logger.info("PDF em lote gerado: %s (%d folhas)", output_path, len(successes))
        return output_path

    def export_individual(self, report: BatchReport, output_dir: str) -> List[str]:
        """Um PDF por servidor do lote."""
        os.makedirs(output_dir, exist_ok=True)
        generated = []
        for outcome in report.succeeded:
            filename = self._safe_filename(outcome.employee.display_name)
            filepath = os.path.join(
                output_dir,
                f"Ponto_{filename}_{report.month:02d}_{report.year}.pdf"
            )
            generated.append(self.export_timesheet(
                outcome.employee, outcome.timesheet, filepath, outcome.template
            ))
        return generated

    # ==========================================
    # BLOCOS DO DOCUMENTO
    # ==========================================

    def _add_timesheet_pages(
        self,
        pdf: TimesheetPDF,
        employee: Employee,
        timesheet: Timesheet,
        variant: TemplateVariant
    ):
        layout = LAYOUTS[variant]
        pdf.add_page()

        pdf._font('B', 10)
        pdf.cell(PAGE_W, 5, layout.title, align='C')
        pdf.ln(6)

        self._draw_info_block(pdf, layout, employee, timesheet.month, timesheet.year)
        pdf.ln(2)

        self._draw_table_header(pdf, layout)
        for record in sorted(timesheet.records, key=lambda r: r.date):
            if pdf.get_y() > 270:
                pdf.add_page()
                self._draw_table_header(pdf, layout)
            self._draw_table_row(pdf, layout, record)

        pdf.ln(2)
        self._draw_totals(pdf, layout, timesheet.records)
        self._draw_signature(pdf)

    def _draw_info_block(
        self,
        pdf: TimesheetPDF,
        layout: Layout,
        employee: Employee,
        month: int,
        year: int
    ):
        pdf._font('', 8)
        for row in layout.info_rows:
            for text_fn, fraction in row:
                w = PAGE_W * fraction
                pdf.cell(w, INFO_H, pdf.fit(text_fn(employee, month, year), w), border=1)
            pdf.ln()

    def _draw_table_header(self, pdf: TimesheetPDF, layout: Layout):
        pdf._font('B', 7)
        pdf.set_fill_color(*LIGHT_GRAY)
        x0 = pdf.get_x()
        y0 = pdf.get_y()
        h = ROW_H * 2

        group_label, group_size = layout.column_group or ("", 0)
        first_grouped = len(layout.columns) - group_size

        x = x0
        for i, col in enumerate(layout.columns):
            w = PAGE_W * col.width
            if group_size and i >= first_grouped:
                if i == first_grouped:
                    group_w = sum(PAGE_W * c.width for c in layout.columns[first_grouped:])
                    pdf.set_xy(x, y0)
                    pdf.cell(group_w, ROW_H, group_label, border=1, align='C', fill=True)
                pdf.set_xy(x, y0 + ROW_H)
                self._header_cell(pdf, col, w, ROW_H)
            else:
                pdf.set_xy(x, y0)
                self._header_cell(pdf, col, w, h)
            x += w

        pdf.set_xy(x0, y0 + h)

    @staticmethod
    def _header_cell(pdf: TimesheetPDF, col: Column, w: float, h: float):
        x, y = pdf.get_x(), pdf.get_y()
        pdf.rect(x, y, w, h, 'DF')
        if col.sublabel and h >= ROW_H * 2:
            pdf._font('B', 7)
            pdf.set_xy(x, y + 1)
            pdf.cell(w, h / 2 - 1, pdf.fit(col.label, w), align='C')
            pdf._font('', 4)
            pdf.set_xy(x, y + h / 2)
            pdf.cell(w, h / 2 - 1, pdf.fit(col.sublabel, w), align='C')
            pdf._font('B', 7)
        else:
            pdf._font('B', 7 if h >= ROW_H * 2 else 6)
            pdf.cell(w, h, pdf.fit(col.label, w), align='C')
        pdf.set_xy(x + w, y)

    def _draw_table_row(self, pdf: TimesheetPDF, layout: Layout, record: DayRecord):
        note = record.note or ''
        if layout.upper_notes:
            note = note.upper()

        for col in layout.columns:
            w = PAGE_W * col.width
            if col.kind == 'day':
                pdf._font('', 7)
                pdf.cell(w, ROW_H, str(record.date.day), border=1, align='C')
            elif col.kind == 'note':
                pdf._font('B' if note else '', 6.5)
                pdf.cell(w, ROW_H, pdf.fit(note, w), border=1, align='C')
            else:
                pdf._font('', 7)
                pdf.cell(w, ROW_H, self._time_value(record, col.kind), border=1, align='C')
        pdf.ln()

    @staticmethod
    def _time_value(record: DayRecord, kind: str) -> str:
        """Horário preenchido; dia bloqueado sem horário mostra traço."""
        value = getattr(record, kind.replace('entry_', 'entry_time_').replace('exit_', 'exit_time_'))
        if value:
            return value
        return '-' if record.block_time_entry else ''

    @staticmethod
    def total_labels(layout: Layout, records: List[DayRecord]) -> List[str]:
        """
        Textos do quadro de totais. Com horários lançados, o campo de dias
        trabalhados sai preenchido com a contagem e o total de horas;
        sem horários, os campos ficam em branco para preenchimento à mão.
        """
        worked = TimesheetCalculator.worked_days(records)
        if not worked:
            return list(layout.totals)

        hours = TimesheetCalculator.total_hours(records)
        h, m = divmod(round(hours * 60), 60)
        labels = []
        for label in layout.totals:
            if rules.normalize_text(label).startswith('dias trabalhados'):
                label = f"{label} {worked} ({h}h{m:02d})"
            labels.append(label)
        return labels

    def _draw_totals(self, pdf: TimesheetPDF, layout: Layout, records: List[DayRecord]):
        if pdf.get_y() > 250:
            pdf.add_page()

        pdf._font('B', 8)
        w = PAGE_W / len(layout.totals)
        for label in self.total_labels(layout, records):
            pdf.cell(w, 10, pdf.fit(label, w), border=1)
        pdf.ln()

        for label in layout.remarks:
            pdf.cell(PAGE_W, 10, label, border=1)
            pdf.ln()

    def _draw_signature(self, pdf: TimesheetPDF):
        if pdf.get_y() > 265:
            pdf.add_page()

        pdf.ln(10)
        y = pdf.get_y()
        pdf._font('B', 9)
        pdf.set_xy(10, y)
        pdf.cell(76, 5, pdf.safe(f"{self.organization.city}, ____/____/____"), align='C')

        x2 = 124
        pdf.set_draw_color(*BLACK)
        pdf.line(x2, y + 4, x2 + 76, y + 4)
        pdf.set_xy(x2, y + 5)
        pdf.cell(76, 5, 'Assinatura do(a) Gestor(a)', align='C')
        pdf.ln()

    @staticmethod
    def _safe_filename(name: str) -> str:
        """Remove caracteres inválidos para nome de arquivo."""
        safe = re.sub(r'[^\w\s\-]', '', name)
        return safe.strip().replace(' ', '_')
