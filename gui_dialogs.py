"""
Dialog windows for FareSplitLedger GUI
"""
from __future__ import annotations
from typing import Optional

try:
    import tkinter as tk
    from tkinter import ttk, messagebox
except ModuleNotFoundError:
    tk = None
    ttk = None
    messagebox = None

from models import AmendmentLedger, Ledger, RawEntry, ZeroAmendmentError
from utils import fmt_km, fmt_money, normalize_date, safe_float
from computations import entry_warnings, settle


class AmendmentsEditor(tk.Toplevel):
    """Dialog for editing the online amounts of one day"""

    def __init__(self, master, amendments: AmendmentLedger, symbol: str = ""):
        super().__init__(master)
        self.title("Online Amounts to Driver")
        self.resizable(False, False)
        self.amendments = amendments
        self.symbol = symbol
        self.result: Optional[AmendmentLedger] = None

        frm = ttk.Frame(self, padding=10)
        frm.grid(row=0, column=0, sticky="nsew")

        ttk.Label(frm, text="Positive: collected online for the driver. Negative: adjustment.").grid(
            row=0, column=0, columnspan=4, sticky="w", pady=(0, 8)
        )

        cols = ("amount", "description")
        self.tree = ttk.Treeview(frm, columns=cols, show="headings", height=8)
        self.tree.heading("amount", text="amount")
        self.tree.heading("description", text="description")
        self.tree.column("amount", width=100, anchor="e")
        self.tree.column("description", width=260, anchor="w")
        self.tree.grid(row=1, column=0, columnspan=4, sticky="nsew")

        self.v_amount = tk.StringVar(value="")
        self.v_desc = tk.StringVar(value="")
        ttk.Label(frm, text="Amount").grid(row=2, column=0, sticky="w", pady=(8, 0))
        ttk.Entry(frm, textvariable=self.v_amount, width=10).grid(row=2, column=1, sticky="w", pady=(8, 0))
        ttk.Label(frm, text="Description").grid(row=3, column=0, sticky="w")
        ttk.Entry(frm, textvariable=self.v_desc, width=28).grid(row=3, column=1, columnspan=2, sticky="w")
        ttk.Button(frm, text="Add", command=self._add).grid(row=2, column=2, padx=3, pady=(8, 0))
        ttk.Button(frm, text="Delete Selected", command=self._delete).grid(row=2, column=3, padx=3, pady=(8, 0))

        self.total_var = tk.StringVar(value="")
        ttk.Label(frm, textvariable=self.total_var).grid(row=4, column=0, columnspan=4, sticky="w", pady=(8, 0))

        btns = ttk.Frame(frm)
        btns.grid(row=5, column=0, columnspan=4, sticky="e", pady=(10, 0))
        ttk.Button(btns, text="OK", command=self._ok).grid(row=0, column=0, padx=4)
        ttk.Button(btns, text="Cancel", command=self._cancel).grid(row=0, column=1, padx=4)

        self._refresh()
        self.grab_set()
        self.transient(master)

    def _refresh(self):
        """Reload list and total"""
        for iid in self.tree.get_children():
            self.tree.delete(iid)
        for a in self.amendments:
            self.tree.insert("", "end", iid=a.id, values=(f"{a.amount:.2f}", a.description))
        self.total_var.set(f"Total: {fmt_money(self.amendments.total(), self.symbol)}")

    def _add(self):
        """Add the typed amount"""
        try:
            self.amendments = self.amendments.add(self.v_amount.get(), self.v_desc.get())
        except ZeroAmendmentError:
            messagebox.showerror("Invalid amount", "Amount must be a non-zero number.", parent=self)
            return
        self.v_amount.set("")
        self.v_desc.set("")
        self._refresh()

    def _delete(self):
        sel = self.tree.selection()
        if not sel:
            return
        self.amendments = self.amendments.remove(sel[0])
        self._refresh()

    def _ok(self):
        self.result = self.amendments
        self.destroy()

    def _cancel(self):
        self.result = None
        self.destroy()


class EntryDialog(tk.Toplevel):
    """Dialog for adding/editing a daily entry"""

    def __init__(self, master, ledger: Ledger, entry: Optional[RawEntry] = None,
                 today: str = "", symbol: str = ""):
        super().__init__(master)
        self.title("Add Entry" if entry is None else "Edit Entry")
        self.resizable(False, False)
        self.ledger = ledger
        self.entry = entry
        self.symbol = symbol
        self.result: Optional[RawEntry] = None

        self._bind_enter_to_ok()

        def val(name, fallback=""):
            if entry is None:
                return fallback
            v = getattr(entry, name)
            return "" if v is None else str(v)

        frm = ttk.Frame(self, padding=10)
        frm.grid(row=0, column=0, sticky="nsew")

        self.v_date = tk.StringVar(value=val("date", today))
        self.v_gross = tk.StringVar(value=val("gross_earnings"))
        self.v_cng = tk.StringVar(value=val("cng"))
        self.v_pass_used = tk.BooleanVar(
            value=bool(entry and settle(entry).driver_pass_used)
        )
        self.v_pass_amount = tk.StringVar(value=val("driver_pass_amount"))
        self.v_trips = tk.StringVar(value=val("trips"))
        self.v_hours = tk.StringVar(value=val("hours_worked"))
        self.v_km_start = tk.StringVar(value=val("km_start"))
        self.v_km_end = tk.StringVar(value=val("km_end"))
        self.v_notes = tk.StringVar(value=val("notes"))

        amendments = entry.online_amendments if entry else AmendmentLedger()
        if not isinstance(amendments, AmendmentLedger):
            amendments = AmendmentLedger.from_dicts(amendments)
        self.amendments = amendments

        r = 0
        for label, var in (
            ("Date (YYYY-MM-DD)", self.v_date),
            ("Gross earnings", self.v_gross),
            ("CNG cost", self.v_cng),
        ):
            ttk.Label(frm, text=label).grid(row=r, column=0, sticky="w", pady=2)
            ttk.Entry(frm, textvariable=var, width=18).grid(row=r, column=1, sticky="w")
            r += 1

        online_frame = ttk.Frame(frm)
        online_frame.grid(row=r, column=0, columnspan=2, sticky="ew", pady=2)
        ttk.Button(online_frame, text="Online Amounts…", command=self._edit_amendments).grid(
            row=0, column=0, sticky="w"
        )
        self.online_label = ttk.Label(online_frame, text="")
        self.online_label.grid(row=0, column=1, padx=8, sticky="w")
        r += 1

        ttk.Checkbutton(frm, text="Driver pass purchased", variable=self.v_pass_used).grid(
            row=r, column=0, sticky="w", pady=2
        )
        ttk.Entry(frm, textvariable=self.v_pass_amount, width=18).grid(row=r, column=1, sticky="w")
        r += 1

        for label, var in (
            ("Trips", self.v_trips),
            ("Hours worked", self.v_hours),
            ("KM start", self.v_km_start),
            ("KM end", self.v_km_end),
        ):
            ttk.Label(frm, text=label).grid(row=r, column=0, sticky="w", pady=2)
            ttk.Entry(frm, textvariable=var, width=18).grid(row=r, column=1, sticky="w")
            r += 1

        ttk.Label(frm, text="Notes").grid(row=r, column=0, sticky="w", pady=2)
        ttk.Entry(frm, textvariable=self.v_notes, width=28).grid(row=r, column=1, sticky="w")
        r += 1

        # Live breakdown
        self.breakdown_var = tk.StringVar(value="")
        ttk.Label(frm, textvariable=self.breakdown_var, justify="left").grid(
            row=r, column=0, columnspan=2, sticky="w", pady=(8, 0)
        )
        r += 1
        self.warning_var = tk.StringVar(value="")
        ttk.Label(frm, textvariable=self.warning_var, foreground="#B00020", justify="left").grid(
            row=r, column=0, columnspan=2, sticky="w"
        )
        r += 1

        for var in (self.v_gross, self.v_cng, self.v_pass_used, self.v_pass_amount,
                    self.v_km_start, self.v_km_end, self.v_date):
            var.trace_add("write", lambda *_: self._update_breakdown())
        self._update_breakdown()

        btns = ttk.Frame(frm)
        btns.grid(row=r, column=0, columnspan=2, sticky="e", pady=(10, 0))
        ttk.Button(btns, text="OK", command=self._ok).grid(row=0, column=0, padx=4)
        ttk.Button(btns, text="Cancel", command=self._cancel).grid(row=0, column=1, padx=4)

        self.grab_set()
        self.transient(master)

    def _bind_enter_to_ok(self):
        """Bind Enter/Return to OK"""

        def on_enter(event=None):
            self._ok()
            return "break"

        self.bind("<Return>", on_enter)
        self.bind("<KP_Enter>", on_enter)

    def _current(self) -> RawEntry:
        """Entry built from the form as it is now"""
        return RawEntry(
            date=self.v_date.get().strip(),
            gross_earnings=self.v_gross.get(),
            cng=self.v_cng.get(),
            online_amendments=self.amendments,
            driver_pass_used=bool(self.v_pass_used.get()),
            driver_pass_amount=self.v_pass_amount.get() if self.v_pass_used.get() else 0.0,
            trips=self.v_trips.get(),
            hours_worked=self.v_hours.get(),
            km_start=self.v_km_start.get(),
            km_end=self.v_km_end.get(),
            notes=self.v_notes.get().strip(),
        )

    def _edit_amendments(self):
        """Open online amounts editor"""
        dlg = AmendmentsEditor(self, self.amendments, self.symbol)
        self.wait_window(dlg)
        if dlg.result is not None:
            self.amendments = dlg.result
            self._update_breakdown()

    def _update_breakdown(self):
        """Recompute the settlement shown under the form"""
        s = settle(self._current())

        def m(x):
            return fmt_money(x, self.symbol)

        self.online_label.config(text=f"Total: {m(s.online_total)} ({len(self.amendments)} items)")
        self.breakdown_var.set(
            f"Net: {m(s.net_earnings)}   Base split: {m(s.base_owner_share)} / {m(s.base_driver_share)}\n"
            f"Net online settlement: {m(s.net_online_settlement)}\n"
            f"After online: {self.ledger.owner} {m(s.owner_after_online)}   "
            f"{self.ledger.driver} {m(s.driver_after_online)}\n"
            f"Pass share: {m(s.owner_pass_contribution)} each\n"
            f"Final: {self.ledger.owner} {m(s.final_owner_earnings)}   "
            f"{self.ledger.driver} {m(s.final_driver_earnings)}   KM: {fmt_km(s.km_distance)}"
        )
        self.warning_var.set("\n".join(entry_warnings(s)))

    def _ok(self):
        """Validate and save entry"""
        try:
            self.v_date.set(normalize_date(self.v_date.get()))
        except ValueError:
            messagebox.showerror("Invalid date", "Date must be YYYY-MM-DD.", parent=self)
            return

        for label, var in (("Gross earnings", self.v_gross), ("CNG cost", self.v_cng)):
            v = safe_float(var.get(), None)
            if v is None or v < 0:
                messagebox.showerror("Invalid amount", f"{label} must be a non-negative number.", parent=self)
                return

        if self.v_pass_used.get():
            v = safe_float(self.v_pass_amount.get(), None)
            if v is None or v < 0:
                messagebox.showerror("Invalid amount", "Driver pass amount must be a non-negative number.",
                                     parent=self)
                return

        current = self._current()
        warnings = entry_warnings(settle(current))
        if warnings and not messagebox.askyesno(
            "Check entry", "\n".join(warnings) + "\n\nSave anyway?", parent=self
        ):
            return

        self.result = current
        self.destroy()

    def _cancel(self):
        """Cancel and close"""
        self.result = None
        self.destroy()
