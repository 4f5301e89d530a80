"""
Janela principal da Folha de Ponto.
Interface CustomTkinter com geração individual e em lote,
pré-visualização dos registros e exportação em PDF.
"""
import logging
import os
import sys
import subprocess
from datetime import date
from tkinter import filedialog, messagebox
from typing import Dict, List, Optional

import customtkinter as ctk

from folha.calculator import TimesheetCalculator, edit_times
from folha.config import AppConfig, load_config, resolve_path
from folha.errors import FolhaError
from folha.generator import (
    TimesheetGenerator, BatchReport, filter_employees, search_employees,
    employee_label, ALL
)
from folha.models import Employee, DayRecord, Timesheet, MONTH_NAMES_PT, WEEKDAY_NAMES_PT
from folha.pdf_export import PDFExporter, PDF_ERRORS
from folha.storage import EmployeeStore, TimesheetStore
from folha.templates import select_template


logger = logging.getLogger(__name__)

MONTH_LABELS = MONTH_NAMES_PT[1:]
YEARS = [str(y) for y in range(2020, 2051)]


def _open_file(path: str):
    """Abre arquivo/pasta no visualizador padrão do sistema."""
    try:
        if sys.platform.startswith('win'):
            os.startfile(path)
        elif sys.platform == 'darwin':
            subprocess.Popen(['open', path])
        else:
            subprocess.Popen(['xdg-open', path])
    except OSError as e:
        logger.warning("Não foi possível abrir %s: %s", path, e)


class MainWindow(ctk.CTk):
    """Janela principal do aplicativo."""

    def __init__(self, config: Optional[AppConfig] = None, owner_id: str = ""):
        super().__init__()

        self.title("Folha de Ponto - Secretaria de Educação")
        self.geometry("1000x680")
        self.minsize(820, 600)

        ctk.set_appearance_mode("dark")
        ctk.set_default_color_theme("blue")

        # State
        self.config_data = config or load_config()
        self.owner_id = owner_id
        self.employee_store = EmployeeStore(resolve_path(self.config_data.employees_file))
        self.timesheet_store = TimesheetStore(resolve_path(self.config_data.timesheets_file))
        self.generator = TimesheetGenerator(
            store=self.timesheet_store,
            holidays=self.config_data.holidays,
            owner_id=owner_id
        )
        self.exporter = PDFExporter(self.config_data.organization)

        self.employees: List[Employee] = self.employee_store.list(owner_id or None)
        self.generated: Optional[Timesheet] = None
        self.generated_employee: Optional[Employee] = None
        self.batch_report: Optional[BatchReport] = None
        self.batch_vars: Dict[str, ctk.BooleanVar] = {}

        self._build_ui()

    def _build_ui(self):
        """Constrói toda a interface."""
        # === Barra Superior ===
        self.top_bar = ctk.CTkFrame(self, height=50, fg_color=("#1a1a2e", "#1a1a2e"))
        self.top_bar.pack(fill='x')
        self.top_bar.pack_propagate(False)

        ctk.CTkLabel(
            self.top_bar, text="Gerar Folha de Ponto",
            font=("Segoe UI", 16, "bold"), text_color="white"
        ).pack(side='left', padx=20, pady=10)

        # === Abas ===
        self.tabs = ctk.CTkTabview(self)
        self.tabs.pack(fill='both', expand=True, padx=10, pady=10)
        self._build_individual_tab(self.tabs.add("Geração Individual"))
        self._build_batch_tab(self.tabs.add("Geração em Lote"))

        # === Barra de Status ===
        self.status_bar = ctk.CTkFrame(self, height=30, fg_color=("#1a1a2e", "#1a1a2e"))
        self.status_bar.pack(fill='x')
        self.status_bar.pack_propagate(False)

        self.status_label = ctk.CTkLabel(
            self.status_bar,
            text=f"Pronto. {len(self.employees)} funcionário(s) carregado(s).",
            font=("Segoe UI", 11), text_color="#aaa"
        )
        self.status_label.pack(side='left', padx=15, pady=5)

    def _period_selectors(self, parent) -> tuple:
        today = date.today()
        frame = ctk.CTkFrame(parent, fg_color="transparent")
        frame.pack(fill='x', pady=5)

        ctk.CTkLabel(frame, text="Mês e Ano", anchor='w').pack(fill='x')
        month_var = ctk.StringVar(value=MONTH_LABELS[today.month - 1])
        year_var = ctk.StringVar(value=str(today.year))
        ctk.CTkOptionMenu(frame, variable=month_var, values=MONTH_LABELS, width=140).pack(side='left')
        ctk.CTkOptionMenu(frame, variable=year_var, values=YEARS, width=90).pack(side='left', padx=5)
        return month_var, year_var

    @staticmethod
    def _selected_period(month_var, year_var) -> tuple:
        return MONTH_LABELS.index(month_var.get()) + 1, int(year_var.get())

    # ========= GERAÇÃO INDIVIDUAL =========

    def _build_individual_tab(self, tab):
        left = ctk.CTkFrame(tab, width=320)
        left.pack(side='left', fill='y', padx=(0, 5))
        left.pack_propagate(False)

        ctk.CTkLabel(left, text="FUNCIONÁRIO", font=("Segoe UI", 12, "bold"), anchor='w').pack(fill='x', padx=10, pady=(10, 5))

        self.search_var = ctk.StringVar()
        search = ctk.CTkEntry(left, textvariable=self.search_var, placeholder_text="Pesquisar funcionário...")
        search.pack(fill='x', padx=10)
        search.bind('<KeyRelease>', lambda _e: self._refresh_individual_options())

        self.employee_var = ctk.StringVar(value="Selecione um funcionário...")
        self.employee_menu = ctk.CTkOptionMenu(
            left, variable=self.employee_var, values=["Nenhum funcionário"], dynamic_resizing=False
        )
        self.employee_menu.pack(fill='x', padx=10, pady=5)

        period = ctk.CTkFrame(left, fg_color="transparent")
        period.pack(fill='x', padx=10)
        self.month_var, self.year_var = self._period_selectors(period)

        ctk.CTkButton(
            left, text="Gerar Folha de Ponto", command=self._generate_individual,
            height=40, font=("Segoe UI", 13, "bold"),
            fg_color="#2d6a4f", hover_color="#40916c"
        ).pack(fill='x', padx=10, pady=(15, 5))

        self.btn_export = ctk.CTkButton(
            left, text="Exportar PDF", command=self._export_individual,
            height=34, state='disabled', fg_color="#7b2cbf", hover_color="#9d4edd"
        )
        self.btn_export.pack(fill='x', padx=10)

        ctk.CTkButton(
            left, text="Abrir Folha Salva", command=self._load_saved,
            height=30, fg_color="#3d3d5c", hover_color="#4d4d6c"
        ).pack(fill='x', padx=10, pady=(10, 0))

        self.btn_edit = ctk.CTkButton(
            left, text="Editar Horários", command=self._edit_times,
            height=30, state='disabled', fg_color="#3d3d5c", hover_color="#4d4d6c"
        )
        self.btn_edit.pack(fill='x', padx=10, pady=(5, 0))

        self.lbl_template = ctk.CTkLabel(left, text="", font=("Segoe UI", 10), text_color="#aaa", anchor='w')
        self.lbl_template.pack(fill='x', padx=10, pady=10)

        self.preview = ctk.CTkTextbox(tab, font=("Consolas", 12))
        self.preview.pack(side='left', fill='both', expand=True, padx=(5, 0))
        self.preview.insert('end', "Gere uma folha de ponto para visualizar os registros aqui.")
        self.preview.configure(state='disabled')

        self._refresh_individual_options()

    def _refresh_individual_options(self):
        found = search_employees(self.employees, self.search_var.get())
        self._individual_options = {employee_label(e): e for e in found}
        labels = list(self._individual_options) or ["Nenhum funcionário encontrado."]
        self.employee_menu.configure(values=labels)
        if self.employee_var.get() not in self._individual_options:
            self.employee_var.set(labels[0])

    def _generate_individual(self):
        employee = self._individual_options.get(self.employee_var.get())
        if employee is None:
            messagebox.showwarning("Aviso", "Por favor, selecione um funcionário e um mês/ano.")
            return
        month, year = self._selected_period(self.month_var, self.year_var)

        self.status_label.configure(text="Gerando folha de ponto...")
        self.update()

        try:
            self.generated = self.generator.generate_timesheet(employee, month, year)
        except FolhaError as e:
            self.generated = None
            messagebox.showerror("Erro", str(e))
            self.status_label.configure(text=f"Erro ao gerar folha de ponto: {e}")
            return

        self._set_current(employee, self.generated)
        self.status_label.configure(text="Folha de ponto gerada e salva com sucesso!")

    def _set_current(self, employee: Employee, timesheet: Timesheet):
        self.generated = timesheet
        self.generated_employee = employee
        self.btn_export.configure(state='normal')
        self.btn_edit.configure(state='normal')
        variant = select_template(employee)
        self.lbl_template.configure(text=f"Modelo de PDF: {variant.name}")
        self._show_preview(employee, timesheet)

    def _load_saved(self):
        """Abre a folha já gravada do funcionário/mês selecionados."""
        employee = self._individual_options.get(self.employee_var.get())
        if employee is None:
            messagebox.showwarning("Aviso", "Por favor, selecione um funcionário e um mês/ano.")
            return
        month, year = self._selected_period(self.month_var, self.year_var)

        timesheet = self.timesheet_store.get(employee.id, month, year)
        if timesheet is None:
            messagebox.showinfo(
                "Folha de Ponto",
                f"Nenhuma folha salva para {employee.display_name} em {MONTH_LABELS[month - 1]}/{year}."
            )
            return

        self._set_current(employee, timesheet)
        self.status_label.configure(text=f"Folha de ponto carregada: {timesheet.period_label}")

    def _edit_times(self):
        if not self.generated or not self.generated_employee:
            return
        TimeEditDialog(self, self.generated_employee, self.generated, self._save_times)

    def _save_times(self, records: List[DayRecord]) -> bool:
        """Grava os horários editados; devolve False se a gravação falhar."""
        ts = self.generated
        try:
            updated = self.timesheet_store.update_records(ts.employee_id, ts.month, ts.year, records)
        except FolhaError as e:
            messagebox.showerror("Erro", str(e))
            self.status_label.configure(text=f"Erro ao salvar horários: {e}")
            return False

        self._set_current(self.generated_employee, updated)
        self.status_label.configure(text="Horários salvos com sucesso!")
        return True

    def _show_preview(self, employee: Employee, timesheet: Timesheet):
        lines = [
            f"{employee.name} - {timesheet.period_label}",
            "",
            f"{'Dia':<16}{'Ent.1':>7}{'Saí.1':>7}{'Ent.2':>7}{'Saí.2':>7}{'Horas':>7}  Observação",
        ]
        for r in timesheet.records:
            dn = WEEKDAY_NAMES_PT[r.date.weekday()][:3]
            times = ''.join(f"{(t or ('-' if r.block_time_entry else '')):>7}" for t in r.times)
            lines.append(
                f"{r.date.strftime('%d/%m')} ({dn})    {times}{r.total_hours_worked:>7.1f}  {r.note or ''}"
            )
        lines += [
            "",
            f"Dias trabalhados: {TimesheetCalculator.worked_days(timesheet.records)}"
            f"  |  Total de horas: {TimesheetCalculator.total_hours(timesheet.records):.1f}",
        ]
        self.preview.configure(state='normal')
        self.preview.delete('1.0', 'end')
        self.preview.insert('end', "\n".join(lines))
        self.preview.configure(state='disabled')

    def _export_individual(self):
        if not self.generated or not self.generated_employee:
            return
        emp = self.generated_employee
        filepath = filedialog.asksaveasfilename(
            title="Salvar Folha de Ponto",
            defaultextension=".pdf",
            filetypes=[("PDF", "*.pdf")],
            initialdir=resolve_path(self.config_data.output_dir),
            initialfile=f"Ponto_{PDFExporter._safe_filename(emp.display_name)}_"
                        f"{self.generated.month:02d}_{self.generated.year}.pdf"
        )
        if not filepath:
            return

        try:
            self.exporter.export_timesheet(emp, self.generated, filepath)
        except PDF_ERRORS as e:
            messagebox.showerror("Erro", f"Erro ao gerar PDF:\n{e}")
            self.status_label.configure(text=f"Erro na exportação: {e}")
            return

        self.status_label.configure(text=f"PDF salvo: {filepath}")
        _open_file(filepath)

    # ========= GERAÇÃO EM LOTE =========

    def _build_batch_tab(self, tab):
        left = ctk.CTkFrame(tab, width=320)
        left.pack(side='left', fill='y', padx=(0, 5))
        left.pack_propagate(False)

        roles = [ALL] + sorted({e.role for e in self.employees if e.role})
        bonds = [ALL] + sorted({e.bond for e in self.employees if e.bond})

        ctk.CTkLabel(left, text="Filtrar por Cargo", anchor='w').pack(fill='x', padx=10, pady=(10, 0))
        self.role_filter = ctk.StringVar(value=ALL)
        ctk.CTkOptionMenu(left, variable=self.role_filter, values=roles,
                          command=lambda _v: self._refresh_batch_list()).pack(fill='x', padx=10)

        ctk.CTkLabel(left, text="Filtrar por Vínculo", anchor='w').pack(fill='x', padx=10, pady=(10, 0))
        self.bond_filter = ctk.StringVar(value=ALL)
        ctk.CTkOptionMenu(left, variable=self.bond_filter, values=bonds,
                          command=lambda _v: self._refresh_batch_list()).pack(fill='x', padx=10)

        period = ctk.CTkFrame(left, fg_color="transparent")
        period.pack(fill='x', padx=10, pady=(10, 0))
        self.batch_month_var, self.batch_year_var = self._period_selectors(period)

        ctk.CTkButton(
            left, text="Selecionar Todos", command=self._toggle_all,
            fg_color="#3d3d5c", hover_color="#4d4d6c"
        ).pack(fill='x', padx=10, pady=(15, 5))

        ctk.CTkButton(
            left, text="Gerar Folhas de Ponto em Lote", command=self._generate_batch,
            height=40, font=("Segoe UI", 13, "bold"),
            fg_color="#2d6a4f", hover_color="#40916c"
        ).pack(fill='x', padx=10, pady=5)

        self.btn_export_batch = ctk.CTkButton(
            left, text="Exportar PDF em Lote", command=self._export_batch,
            height=34, state='disabled', fg_color="#7b2cbf", hover_color="#9d4edd"
        )
        self.btn_export_batch.pack(fill='x', padx=10)

        right = ctk.CTkFrame(tab)
        right.pack(side='left', fill='both', expand=True, padx=(5, 0))

        self.batch_search_var = ctk.StringVar()
        search = ctk.CTkEntry(right, textvariable=self.batch_search_var, placeholder_text="Pesquisar funcionário...")
        search.pack(fill='x', padx=10, pady=(10, 5))
        search.bind('<KeyRelease>', lambda _e: self._refresh_batch_list())

        self.batch_scroll = ctk.CTkScrollableFrame(right, fg_color="transparent")
        self.batch_scroll.pack(fill='both', expand=True, padx=10, pady=5)

        self.batch_log = ctk.CTkTextbox(right, height=120, font=("Consolas", 11))
        self.batch_log.pack(fill='x', padx=10, pady=(0, 10))

        self._refresh_batch_list()

    def _filtered_batch_employees(self) -> List[Employee]:
        filtered = filter_employees(
            self.employees, role=self.role_filter.get(), bond=self.bond_filter.get()
        )
        return search_employees(filtered, self.batch_search_var.get())

    def _refresh_batch_list(self):
        """Refaz a lista de checkboxes; mudar o filtro limpa a seleção."""
        for widget in self.batch_scroll.winfo_children():
            widget.destroy()
        self.batch_vars = {}

        employees = self._filtered_batch_employees()
        if not employees:
            ctk.CTkLabel(
                self.batch_scroll, text="Nenhum funcionário encontrado.",
                font=("Segoe UI", 13), text_color="#666"
            ).pack(expand=True, pady=50)
            return

        for emp in employees:
            var = ctk.BooleanVar(value=False)
            self.batch_vars[emp.id] = var
            ctk.CTkCheckBox(self.batch_scroll, text=employee_label(emp), variable=var).pack(fill='x', pady=2)

    def _toggle_all(self):
        select = not all(v.get() for v in self.batch_vars.values())
        for var in self.batch_vars.values():
            var.set(select)

    def _generate_batch(self):
        selected = [eid for eid, var in self.batch_vars.items() if var.get()]
        if not selected:
            messagebox.showwarning("Aviso", "Por favor, selecione pelo menos um funcionário e um mês/ano.")
            return
        month, year = self._selected_period(self.batch_month_var, self.batch_year_var)

        self.status_label.configure(text="Gerando em lote...")
        self.update()

        self.batch_report = self.generator.generate_batch(selected, self.employees, month, year)
        report = self.batch_report

        self.batch_log.delete('1.0', 'end')
        for outcome in report.outcomes:
            if outcome.success:
                self.batch_log.insert('end', f"OK   {outcome.employee.display_name} ({outcome.template.name})\n")
            else:
                self.batch_log.insert('end', f"ERRO {outcome.error}\n")

        if report.ok:
            self.btn_export_batch.configure(state='normal')
            self.status_label.configure(
                text=f"Folhas de ponto em lote geradas: {len(report.succeeded)} | erros: {len(report.failed)}"
            )
        else:
            self.btn_export_batch.configure(state='disabled')
            messagebox.showerror("Erro", "Nenhuma folha de ponto foi gerada com sucesso.")
            self.status_label.configure(text="Nenhuma folha de ponto foi gerada com sucesso.")

    def _export_batch(self):
        if not self.batch_report or not self.batch_report.ok:
            return
        report = self.batch_report
        filepath = filedialog.asksaveasfilename(
            title="Salvar PDF em Lote",
            defaultextension=".pdf",
            filetypes=[("PDF", "*.pdf")],
            initialdir=resolve_path(self.config_data.output_dir),
            initialfile=f"Ponto_Lote_{report.month:02d}_{report.year}.pdf"
        )
        if not filepath:
            return

        try:
            self.exporter.export_batch(report, filepath)
        except PDF_ERRORS as e:
            messagebox.showerror("Erro", f"Erro ao gerar PDF:\n{e}")
            self.status_label.configure(text=f"Erro na exportação: {e}")
            return

        self.status_label.configure(text=f"PDF em lote salvo: {filepath}")
        _open_file(filepath)


class TimeEditDialog(ctk.CTkToplevel):
    """Edição manual dos horários de uma folha gravada."""

    def __init__(self, parent, employee: Employee, timesheet: Timesheet, on_save):
        super().__init__(parent)

        self.title(f"Editar Horários - {employee.display_name} ({timesheet.period_label})")
        self.geometry("720x560")
        self.minsize(640, 420)

        self.timesheet = timesheet
        self.on_save = on_save
        self.entries: Dict[date, List[ctk.CTkEntry]] = {}

        self._build_ui()
        self.grab_set()

    def _build_ui(self):
        header = ctk.CTkFrame(self, fg_color="transparent")
        header.pack(fill='x', padx=10, pady=(10, 0))
        for text, width in (("Dia", 110), ("Entrada", 80), ("Saída", 80),
                            ("Entrada", 80), ("Saída", 80), ("Observação", 200)):
            ctk.CTkLabel(header, text=text, width=width, font=("Segoe UI", 11, "bold")).pack(side='left', padx=2)

        scroll = ctk.CTkScrollableFrame(self)
        scroll.pack(fill='both', expand=True, padx=10, pady=5)

        for record in self.timesheet.records:
            row = ctk.CTkFrame(scroll, fg_color="transparent")
            row.pack(fill='x', pady=1)

            dn = WEEKDAY_NAMES_PT[record.date.weekday()][:3]
            ctk.CTkLabel(row, text=f"{record.date.strftime('%d/%m')} ({dn})", width=110).pack(side='left', padx=2)

            fields = []
            for value in record.times:
                entry = ctk.CTkEntry(row, width=80, placeholder_text="HH:MM")
                if value:
                    entry.insert(0, value)
                # Folga, fim de semana e feriado não recebem horário
                if record.block_time_entry:
                    entry.configure(state='disabled')
                entry.pack(side='left', padx=2)
                fields.append(entry)
            self.entries[record.date] = fields

            ctk.CTkLabel(
                row, text=record.note or '', width=200, anchor='w',
                font=("Segoe UI", 10), text_color="#aaa"
            ).pack(side='left', padx=2)

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.pack(fill='x', padx=10, pady=10)
        ctk.CTkButton(
            buttons, text="Salvar", command=self._save,
            fg_color="#2d6a4f", hover_color="#40916c"
        ).pack(side='right', padx=5)
        ctk.CTkButton(
            buttons, text="Cancelar", command=self.destroy,
            fg_color="#3d3d5c", hover_color="#4d4d6c"
        ).pack(side='right')

    def _save(self):
        edited = []
        try:
            for record in self.timesheet.records:
                values = [e.get() for e in self.entries[record.date]]
                edited.append(edit_times(record, *values))
        except FolhaError as e:
            messagebox.showerror("Erro", str(e), parent=self)
            return

        if self.on_save(edited):
            self.destroy()
