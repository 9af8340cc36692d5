"""
CSV export and import functionality for FareSplitLedger
"""
from __future__ import annotations
import csv
import json
import logging
from typing import List

from models import AmendmentLedger, RawEntry
from config import entry_to_dict
from utils import normalize_date

logger = logging.getLogger(__name__)

COLUMNS = [
    "id", "date", "gross_earnings", "cng", "online_amendments",
    "driver_pass_used", "driver_pass_amount", "trips", "hours_worked",
    "km_start", "km_end", "notes",
]


def export_entries_to_csv(entries: List[RawEntry], filepath: str) -> None:
    """
    Export raw entries to CSV file.
    online_amendments is written as a JSON list of {id, amount, description}.
    """
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(COLUMNS)
        for e in entries:
            d = entry_to_dict(e)
            d["online_amendments"] = json.dumps(d["online_amendments"], ensure_ascii=False)
            writer.writerow([d[c] for c in COLUMNS])
    logger.info(f"Exported {len(entries)} entries to {filepath}")


def import_entries_from_csv(filepath: str) -> List[RawEntry]:
    """
    Import raw entries from CSV file.
    Numbers stay as text; settle() coerces them. Ids are not kept, the store assigns new ones.
    """
    entries = []

    with open(filepath, 'r', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        missing = [c for c in ("date", "gross_earnings", "cng") if c not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"CSV is missing required columns: {', '.join(missing)}")

        for line, row in enumerate(reader, start=2):
            raw_amendments = (row.get('online_amendments') or '').strip()
            try:
                amendments = json.loads(raw_amendments) if raw_amendments else []
            except json.JSONDecodeError as ex:
                raise ValueError(f"Row {line}: online_amendments is not valid JSON ({ex})") from ex
            if not isinstance(amendments, list):
                raise ValueError(f"Row {line}: online_amendments must be a list")

            try:
                day = normalize_date(row.get('date') or '')
            except ValueError as ex:
                raise ValueError(f"Row {line}: date must be YYYY-MM-DD, got {row.get('date')!r}") from ex

            entries.append(RawEntry(
                date=day,
                gross_earnings=row.get('gross_earnings', ''),
                cng=row.get('cng', ''),
                online_amendments=AmendmentLedger.from_dicts(amendments),
                driver_pass_used=row.get('driver_pass_used', ''),
                driver_pass_amount=row.get('driver_pass_amount', ''),
                trips=row.get('trips', ''),
                hours_worked=row.get('hours_worked', ''),
                km_start=row.get('km_start', ''),
                km_end=row.get('km_end', ''),
                notes=row.get('notes', '') or '',
            ))

    logger.info(f"Imported {len(entries)} entries from {filepath}")
    return entries
