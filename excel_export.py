"""
Excel export functionality for FareSplitLedger
"""
from __future__ import annotations
import logging
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from models import Ledger, PeriodSummary
from queries import DateSelector, filter_entries
from computations import aggregate, aggregate_by_date, entry_warnings, settle_all

logger = logging.getLogger(__name__)

MONEY_FORMAT = "0.00"
KM_FORMAT = "0.0"


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = 0
        for cell in ws[letter]:
            v = cell.value
            if v is None:
                continue
            max_len = max(max_len, len(str(v)))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _format_columns(ws, money_cols, km_cols=()):
    for r in range(2, ws.max_row + 1):
        for c in money_cols:
            ws.cell(r, c).number_format = MONEY_FORMAT
        for c in km_cols:
            ws.cell(r, c).number_format = KM_FORMAT


def export_excel(
    ledger: Ledger,
    filepath: str,
    selector: Optional[DateSelector] = None,
) -> None:
    """
    Export settled entries to Excel file with sheets:
    - Entries: one settled row per entry
    - Daily: totals per date (every day of the period when a selector is given)
    - Summary: period totals and each party's final earnings
    """
    entries = ledger.entries if selector is None else filter_entries(ledger.entries, selector)
    settled = sorted(settle_all(entries), key=lambda s: s.date)

    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    # Entries
    ws = wb.create_sheet("Entries")
    ws.append([
        "Date", "Gross", "CNG", "Net", "Online", "Pass", "Net Online",
        f"{ledger.owner} final", f"{ledger.driver} final",
        "Trips", "Hours", "KM", "Warnings", "Notes",
    ])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for s in settled:
        ws.append([
            s.date, s.gross_earnings, s.cng, s.net_earnings, s.online_total,
            s.driver_pass_amount, s.net_online_settlement,
            s.final_owner_earnings, s.final_driver_earnings,
            s.trips, s.hours_worked, s.km_distance,
            "; ".join(entry_warnings(s)), s.entry.notes,
        ])
    _format_columns(ws, money_cols=range(2, 10), km_cols=(11, 12))
    _autosize_columns(ws)

    # Daily
    ws = wb.create_sheet("Daily")
    ws.append(["Date", "Entries", "Gross", "Net", f"{ledger.owner}", f"{ledger.driver}"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    by_date = aggregate_by_date(settled)
    if selector is not None:
        # one row per calendar day of the period, empty days as zeros
        by_date = {d: by_date.get(d, PeriodSummary()) for d in selector.days()}
    for d, day in by_date.items():
        ws.append([
            d, day.entry_count, day.gross_earnings, day.net_earnings,
            day.final_owner_earnings, day.final_driver_earnings,
        ])
    _format_columns(ws, money_cols=range(3, 7))
    _autosize_columns(ws)

    # Summary
    ws = wb.create_sheet("Summary")
    summary = aggregate(settled)
    ws.append(["Item", "Value"])
    _style_header(ws, 1)
    rows = [
        ("Period", selector.label if selector is not None else "All entries"),
        ("Entries", summary.entry_count),
        ("Days", summary.day_count),
        ("Gross earnings", summary.gross_earnings),
        ("CNG", summary.cng),
        ("Net earnings", summary.net_earnings),
        ("Online total", summary.online_total),
        ("Driver pass", summary.driver_pass_amount),
        (f"{ledger.owner} final earnings", summary.final_owner_earnings),
        (f"{ledger.driver} final earnings", summary.final_driver_earnings),
        ("Average daily gross", summary.average_daily_gross),
        ("Trips", summary.trips),
        ("Hours worked", summary.hours_worked),
        ("KM driven", summary.km_distance),
    ]
    for label, value in rows:
        ws.append([label, value])
        if isinstance(value, float):
            ws.cell(ws.max_row, 2).number_format = KM_FORMAT if label in ("Hours worked", "KM driven") else MONEY_FORMAT
    _autosize_columns(ws)

    wb.save(filepath)
    logger.info(f"Exported {len(settled)} entries to {filepath}")
