"""
Main application window for FareSplitLedger GUI
"""
from __future__ import annotations
import logging
import os
from typing import Optional

try:
    import tkinter as tk
    from tkinter import ttk, messagebox, filedialog
except ModuleNotFoundError:
    tk = None
    ttk = None
    messagebox = None
    filedialog = None

from config import Settings, get_default_ledger, get_default_settings
from store import EntryStore
from queries import DateSelector, date_range, exact_date, last_n_days, year_month
from computations import aggregate, aggregate_by_date, entry_warnings, sort_entries
from utils import fmt_km, fmt_money, today_str
from excel_export import export_excel
from gui_dialogs import EntryDialog
from csv_handler import export_entries_to_csv, import_entries_from_csv

logger = logging.getLogger(__name__)

SORT_LABELS = {
    "Date (newest)": "date",
    "Highest earnings": "highest_earnings",
    "Most trips": "highest_trips",
    "Most hours": "most_hours",
}


class FareSplitApp(ttk.Frame):
    """Main application window"""

    def __init__(self, master: tk.Tk, settings: Optional[Settings] = None):
        super().__init__(master, padding=8)
        self.master = master
        self.master.title("FareSplitLedger")
        self.master.geometry("1150x650")
        self.grid(row=0, column=0, sticky="nsew")
        self.master.rowconfigure(0, weight=1)
        self.master.columnconfigure(0, weight=1)

        self.settings = settings or get_default_settings()
        self.ledger_path: Optional[str] = None
        self.store = EntryStore(get_default_ledger())

        self._build_menu()
        self._build_ui()
        self.refresh_all()

    @property
    def symbol(self) -> str:
        return self.settings.currency_symbol

    def _money(self, x: float) -> str:
        return fmt_money(x, self.symbol)

    # ---------- Menu ----------
    def _build_menu(self):
        """Build application menu bar"""
        menubar = tk.Menu(self.master)
        filem = tk.Menu(menubar, tearoff=0)
        filem.add_command(label="New", command=self.new_ledger)
        filem.add_command(label="Open…", command=self.open_ledger)
        filem.add_command(label="Save", command=self.save_ledger)
        filem.add_command(label="Save As…", command=self.save_as_ledger)
        filem.add_separator()
        filem.add_command(label="Export CSV…", command=self.export_csv_dialog)
        filem.add_command(label="Import CSV…", command=self.import_csv_dialog)
        filem.add_separator()
        filem.add_command(label="Export Excel…", command=self.export_excel_dialog)
        filem.add_separator()
        filem.add_command(label="Exit", command=self.master.destroy)
        menubar.add_cascade(label="File", menu=filem)
        self.master.config(menu=menubar)

    # ---------- UI ----------
    def _build_ui(self):
        """Build main UI with tabs"""
        nb = ttk.Notebook(self)
        nb.grid(row=0, column=0, sticky="nsew")
        self.rowconfigure(0, weight=1)
        self.columnconfigure(0, weight=1)

        self.tab_dashboard = ttk.Frame(nb, padding=8)
        self.tab_entries = ttk.Frame(nb, padding=8)
        self.tab_summary = ttk.Frame(nb, padding=8)

        nb.add(self.tab_dashboard, text="Dashboard")
        nb.add(self.tab_entries, text="Entries")
        nb.add(self.tab_summary, text="Summary")

        self._build_dashboard_tab()
        self._build_entries_tab()
        self._build_summary_tab()

    def _build_dashboard_tab(self):
        """Today's totals and the last N days"""
        self.tab_dashboard.columnconfigure(0, weight=1)
        top = ttk.Frame(self.tab_dashboard)
        top.grid(row=0, column=0, sticky="ew")
        ttk.Button(top, text="Add Today's Entry", command=self.add_entry).pack(side="left", padx=3)
        ttk.Button(top, text="Refresh", command=self.refresh_dashboard).pack(side="left", padx=3)

        self.today_var = tk.StringVar(value="")
        ttk.Label(self.tab_dashboard, textvariable=self.today_var, justify="left").grid(
            row=1, column=0, sticky="w", pady=8
        )

        self.recent_var = tk.StringVar(value="")
        ttk.Label(self.tab_dashboard, textvariable=self.recent_var).grid(row=2, column=0, sticky="w")
        cols = ("date", "entries", "gross", "net", "owner", "driver")
        self.recent_tree = ttk.Treeview(self.tab_dashboard, columns=cols, show="headings", height=12)
        for c, w in zip(cols, [110, 70, 110, 110, 110, 110]):
            self.recent_tree.heading(c, text=c)
            self.recent_tree.column(c, width=w, anchor="w")
        self.recent_tree.grid(row=3, column=0, sticky="nsew", pady=6)
        self.tab_dashboard.rowconfigure(3, weight=1)

    def _build_entries_tab(self):
        """Build entries tab"""
        top = ttk.Frame(self.tab_entries)
        top.grid(row=0, column=0, sticky="ew")
        self.tab_entries.columnconfigure(0, weight=1)

        ttk.Button(top, text="Add", command=self.add_entry).pack(side="left", padx=3)
        ttk.Button(top, text="Edit", command=self.edit_selected_entry).pack(side="left", padx=3)
        ttk.Button(top, text="Delete", command=self.delete_selected_entry).pack(side="left", padx=3)
        ttk.Label(top, text="Sort by").pack(side="left", padx=(16, 4))
        self.sort_var = tk.StringVar(value="Date (newest)")
        sort_box = ttk.Combobox(top, textvariable=self.sort_var, values=list(SORT_LABELS),
                                width=18, state="readonly")
        sort_box.pack(side="left")
        sort_box.bind("<<ComboboxSelected>>", lambda *_: self.refresh_entries())

        self.entries_note = tk.StringVar(value="")
        ttk.Label(top, textvariable=self.entries_note).pack(side="right")

        ttk.Separator(self.tab_entries, orient="horizontal").grid(row=1, column=0, sticky="ew", pady=6)

        cols = ("date", "gross", "cng", "online", "pass", "net", "owner", "driver",
                "trips", "hours", "km", "warnings", "notes")
        self.entry_tree = ttk.Treeview(self.tab_entries, columns=cols, show="headings", height=18)
        for c, w in zip(cols, [95, 85, 80, 80, 70, 85, 85, 85, 50, 55, 65, 220, 300]):
            self.entry_tree.heading(c, text=c)
            self.entry_tree.column(c, width=w, anchor="w")
        self.entry_tree.grid(row=2, column=0, sticky="nsew")
        self.tab_entries.rowconfigure(2, weight=1)

        yscroll = ttk.Scrollbar(self.tab_entries, orient="vertical", command=self.entry_tree.yview)
        self.entry_tree.configure(yscroll=yscroll.set)
        yscroll.grid(row=2, column=1, sticky="ns")

    def _build_summary_tab(self):
        """Build period summary tab"""
        self.tab_summary.columnconfigure(0, weight=1)

        filt = ttk.Frame(self.tab_summary)
        filt.grid(row=0, column=0, sticky="ew")
        ttk.Label(filt, text="Month (YYYY-MM)").pack(side="left")
        self.sum_month = tk.StringVar(value=today_str()[:7])
        ttk.Entry(filt, textvariable=self.sum_month, width=9).pack(side="left", padx=4)
        ttk.Label(filt, text="or Start").pack(side="left", padx=(10, 0))
        self.sum_start = tk.StringVar(value="")
        ttk.Entry(filt, textvariable=self.sum_start, width=12).pack(side="left", padx=4)
        ttk.Label(filt, text="End").pack(side="left")
        self.sum_end = tk.StringVar(value="")
        ttk.Entry(filt, textvariable=self.sum_end, width=12).pack(side="left", padx=4)

        ttk.Button(filt, text="Refresh", command=self.refresh_summary).pack(side="left", padx=8)
        ttk.Button(filt, text="Export Excel…", command=self.export_excel_dialog).pack(side="left", padx=3)

        self.summary_note = tk.StringVar(value="")
        ttk.Label(self.tab_summary, textvariable=self.summary_note).grid(row=1, column=0, sticky="w", pady=(6, 0))

        cols = ("item", "value")
        self.sum_tree = ttk.Treeview(self.tab_summary, columns=cols, show="headings", height=16)
        for c, w in zip(cols, [240, 160]):
            self.sum_tree.heading(c, text=c)
            self.sum_tree.column(c, width=w, anchor="w")
        self.sum_tree.grid(row=2, column=0, sticky="nsew", pady=6)
        self.tab_summary.rowconfigure(2, weight=1)

    # ---------- CRUD: Entries ----------
    def add_entry(self):
        """Add new entry"""
        dlg = EntryDialog(self.master, self.store.ledger, None, today=today_str(), symbol=self.symbol)
        self.master.wait_window(dlg)
        if dlg.result:
            self.store.add(dlg.result)
            self.refresh_all()

    def edit_selected_entry(self):
        """Edit selected entry"""
        sel = self.entry_tree.selection()
        if not sel:
            messagebox.showinfo("Edit", "Select an entry row first.")
            return
        entry_id = sel[0]
        dlg = EntryDialog(self.master, self.store.ledger, self.store.get(entry_id), symbol=self.symbol)
        self.master.wait_window(dlg)
        if dlg.result:
            self.store.replace(entry_id, dlg.result)
            self.refresh_all()

    def delete_selected_entry(self):
        """Delete selected entry"""
        sel = self.entry_tree.selection()
        if not sel:
            messagebox.showinfo("Delete", "Select an entry row first.")
            return
        if messagebox.askyesno("Delete", "Are you sure you want to delete this entry?"):
            self.store.delete(sel[0])
            self.refresh_all()

    # ---------- File ops ----------
    def new_ledger(self):
        """Create new ledger"""
        if messagebox.askyesno("New", "Start a new ledger (unsaved changes will be lost)?"):
            self.store = EntryStore(get_default_ledger())
            self.ledger_path = None
            self.master.title("FareSplitLedger")
            self.refresh_all()

    def open_ledger(self):
        """Open ledger from file"""
        fp = filedialog.askopenfilename(
            title="Open ledger JSON",
            filetypes=[("Ledger JSON", "*.json"), ("All files", "*.*")]
        )
        if not fp:
            return
        try:
            self.store = EntryStore.load(fp)
            self.ledger_path = fp
            self.master.title(f"FareSplitLedger - {os.path.basename(fp)}")
            self.refresh_all()
        except (OSError, ValueError, TypeError, AttributeError) as ex:
            logger.error(f"Open failed: {ex}")
            messagebox.showerror("Open failed", str(ex))

    def save_ledger(self):
        """Save ledger to file"""
        if not self.ledger_path:
            return self.save_as_ledger()
        try:
            self.store.save(self.ledger_path)
            self.master.title(f"FareSplitLedger - {os.path.basename(self.ledger_path)}")
        except OSError as ex:
            logger.error(f"Save failed: {ex}")
            messagebox.showerror("Save failed", str(ex))

    def save_as_ledger(self):
        """Save ledger to new file"""
        fp = filedialog.asksaveasfilename(
            title="Save ledger JSON",
            defaultextension=".json",
            filetypes=[("Ledger JSON", "*.json")]
        )
        if not fp:
            return
        self.ledger_path = fp
        self.save_ledger()

    def export_excel_dialog(self):
        """Export selected period to Excel file"""
        selector = self._get_summary_selector()
        if selector is None:
            return
        fp = filedialog.asksaveasfilename(
            title="Export Excel",
            defaultextension=".xlsx",
            filetypes=[("Excel Workbook", "*.xlsx")]
        )
        if not fp:
            return
        try:
            export_excel(self.store.ledger, fp, selector)
            messagebox.showinfo("Export", f"Exported: {fp}")
        except OSError as ex:
            logger.error(f"Excel export failed: {ex}")
            messagebox.showerror("Export failed", str(ex))

    # ---------- Refresh ----------
    def refresh_all(self):
        """Refresh all UI elements"""
        self.refresh_dashboard()
        self.refresh_entries()
        self.refresh_summary()

    def refresh_dashboard(self):
        """Today's totals and per-day table for the last N days"""
        today = today_str()
        ledger = self.store.ledger
        t = aggregate(self.store.entries_for(exact_date(today)))
        self.today_var.set(
            f"Today ({today}): {t.entry_count} entries\n"
            f"Gross {self._money(t.gross_earnings)}   CNG {self._money(t.cng)}   "
            f"Online to driver {self._money(t.online_total)}   Driver pass {self._money(t.driver_pass_amount)}\n"
            f"{ledger.owner} {self._money(t.final_owner_earnings)}   "
            f"{ledger.driver} {self._money(t.final_driver_earnings)}   "
            f"Trips {t.trips}   Hours {t.hours_worked:.1f}"
        )

        days = self.settings.dashboard_days
        self.recent_var.set(f"Last {days} days")
        for iid in self.recent_tree.get_children():
            self.recent_tree.delete(iid)
        recent = self.store.entries_for(last_n_days(days, today))
        for d, s in reversed(list(aggregate_by_date(recent).items())):
            self.recent_tree.insert("", "end", values=(
                d, s.entry_count, self._money(s.gross_earnings), self._money(s.net_earnings),
                self._money(s.final_owner_earnings), self._money(s.final_driver_earnings),
            ))

    def refresh_entries(self):
        """Refresh entries tree view"""
        for iid in self.entry_tree.get_children():
            self.entry_tree.delete(iid)

        key = SORT_LABELS.get(self.sort_var.get(), "date")
        settled = sort_entries(self.store.all_entries(), key)
        for s in settled:
            values = (
                s.date, f"{s.gross_earnings:.2f}", f"{s.cng:.2f}", f"{s.online_total:.2f}",
                f"{s.driver_pass_amount:.2f}", f"{s.net_earnings:.2f}",
                f"{s.final_owner_earnings:.2f}", f"{s.final_driver_earnings:.2f}",
                s.trips, f"{s.hours_worked:.1f}", fmt_km(s.km_distance),
                "; ".join(entry_warnings(s)), s.entry.notes,
            )
            self.entry_tree.insert("", "end", iid=s.entry.id, values=values)
        self.entries_note.set(f"Total Entries: {len(settled)}")

    def _get_summary_selector(self) -> Optional[DateSelector]:
        """Range if both bounds are given, otherwise the month"""
        s = self.sum_start.get().strip()
        e = self.sum_end.get().strip()
        try:
            if s or e:
                return date_range(s, e)
            return year_month(self.sum_month.get())
        except ValueError as ex:
            messagebox.showerror("Invalid period", str(ex))
            return None

    def refresh_summary(self):
        """Refresh summary tab"""
        selector = self._get_summary_selector()
        if selector is None:
            return
        ledger = self.store.ledger
        summary = aggregate(self.store.entries_for(selector))
        self.summary_note.set(f"Period: {selector.label}")

        for iid in self.sum_tree.get_children():
            self.sum_tree.delete(iid)
        rows = [
            ("Entries", str(summary.entry_count)),
            ("Days with entries", str(summary.day_count)),
            ("Gross earnings", self._money(summary.gross_earnings)),
            ("CNG", self._money(summary.cng)),
            ("Net earnings", self._money(summary.net_earnings)),
            ("Online to driver", self._money(summary.online_total)),
            ("Driver pass", self._money(summary.driver_pass_amount)),
            (f"{ledger.owner} earnings", self._money(summary.final_owner_earnings)),
            (f"{ledger.driver} earnings", self._money(summary.final_driver_earnings)),
            ("Average daily gross", self._money(summary.average_daily_gross)),
            ("Trips", str(summary.trips)),
            ("Hours worked", f"{summary.hours_worked:.1f} hrs"),
            ("KM driven", fmt_km(summary.km_distance)),
        ]
        for item, value in rows:
            self.sum_tree.insert("", "end", values=(item, value))

    # ---------- CSV Import/Export ----------
    def export_csv_dialog(self):
        """Export current entries to CSV file"""
        entries = self.store.all_entries()
        if not entries:
            messagebox.showinfo("Export CSV", "No entries to export.")
            return

        fp = filedialog.asksaveasfilename(
            title="Export Entries to CSV",
            defaultextension=".csv",
            filetypes=[("CSV files", "*.csv"), ("All files", "*.*")]
        )
        if not fp:
            return

        try:
            export_entries_to_csv(entries, fp)
            messagebox.showinfo("Export CSV", f"Exported {len(entries)} entries to:\n{fp}")
        except OSError as ex:
            logger.error(f"CSV export failed: {ex}")
            messagebox.showerror("Export failed", str(ex))

    def import_csv_dialog(self):
        """Import entries from CSV file"""
        fp = filedialog.askopenfilename(
            title="Import Entries from CSV",
            filetypes=[("CSV files", "*.csv"), ("All files", "*.*")]
        )
        if not fp:
            return

        try:
            imported = import_entries_from_csv(fp)
        except (OSError, ValueError) as ex:
            logger.error(f"CSV import failed: {ex}")
            messagebox.showerror("Import failed", str(ex))
            return

        if not imported:
            messagebox.showinfo("Import CSV", "No entries found in CSV file.")
            return

        choice = messagebox.askyesnocancel(
            "Import CSV",
            f"Found {len(imported)} entries in CSV.\n\n"
            "Yes: Append to current entries\n"
            "No: Replace current entries\n"
            "Cancel: Cancel import"
        )
        if choice is None:
            return
        if not choice:
            self.store.clear()
        self.store.extend(imported)
        messagebox.showinfo("Import CSV", f"{'Appended' if choice else 'Replaced with'} {len(imported)} entries.")
        self.refresh_all()
