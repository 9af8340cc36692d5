"""
Business logic and computations for FareSplitLedger
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Union

from models import (
    SUMMED_FIELDS,
    AmendmentLedger,
    OnlineAmendment,
    PeriodSummary,
    RawEntry,
    SettledEntry,
)
from utils import safe_float, safe_int

OWNER_SHARE = 0.5
PASS_SHARE = 0.5


def normalize_pass_flag(value: Any) -> bool:
    """Only True or the string "true" count as a used pass"""
    if value is True:
        return True
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def amendments_total(amendments: Any) -> float:
    """Sum of amendment amounts. Accepts a ledger, OnlineAmendments, mappings or bare numbers."""
    if isinstance(amendments, AmendmentLedger):
        return amendments.total()
    if not amendments or isinstance(amendments, (str, bytes, dict)):
        return 0.0
    try:
        rows = list(amendments)
    except TypeError:
        return 0.0
    total = 0.0
    for a in rows:
        if isinstance(a, OnlineAmendment):
            total += a.amount
        elif isinstance(a, dict):
            total += safe_float(a.get("amount"))
        else:
            total += safe_float(a)
    return total


def settle(raw: RawEntry) -> SettledEntry:
    """
    Turn a raw daily record into the owner/driver settlement.

    1. net = gross - cng
    2. base 50-50 split of net
    3. the pass is bought with online money: net online = online total - pass
    4. owner holds the online money that belongs to the driver:
       owner gets -net online, driver gets +net online
    5. pass cost is shared 50-50
    6. final = after online - pass contribution
    """
    gross = safe_float(raw.gross_earnings)
    cng = safe_float(raw.cng)
    pass_used = normalize_pass_flag(raw.driver_pass_used)
    pass_amount = safe_float(raw.driver_pass_amount) if pass_used else 0.0
    km_start = safe_float(raw.km_start)
    km_end = safe_float(raw.km_end)

    net = gross - cng
    base_owner = net * OWNER_SHARE
    base_driver = net * (1.0 - OWNER_SHARE)

    online_total = amendments_total(raw.online_amendments)
    net_online = online_total - pass_amount

    owner_after_online = base_owner - net_online
    driver_after_online = base_driver + net_online

    owner_pass = driver_pass = 0.0
    if pass_used and pass_amount > 0:
        owner_pass = pass_amount * PASS_SHARE
        driver_pass = pass_amount * (1.0 - PASS_SHARE)

    return SettledEntry(
        entry=raw,
        date=raw.date if isinstance(raw.date, str) else "",
        gross_earnings=gross,
        cng=cng,
        driver_pass_used=pass_used,
        driver_pass_amount=pass_amount,
        trips=safe_int(raw.trips),
        hours_worked=safe_float(raw.hours_worked),
        km_start=km_start,
        km_end=km_end,
        net_earnings=net,
        online_total=online_total,
        net_online_settlement=net_online,
        base_owner_share=base_owner,
        base_driver_share=base_driver,
        owner_after_online=owner_after_online,
        driver_after_online=driver_after_online,
        owner_pass_contribution=owner_pass,
        driver_pass_contribution=driver_pass,
        final_owner_earnings=owner_after_online - owner_pass,
        final_driver_earnings=driver_after_online - driver_pass,
        km_distance=km_end - km_start,
    )


def settle_all(entries: Iterable[Union[RawEntry, SettledEntry]]) -> List[SettledEntry]:
    return [e if isinstance(e, SettledEntry) else settle(e) for e in entries]


def entry_warnings(s: SettledEntry) -> List[str]:
    """Business-rule anomalies worth showing to the user. Never fatal."""
    out = []
    if not s.date:
        out.append("Date is missing.")
    if s.gross_earnings < 0:
        out.append("Gross earnings is negative.")
    if s.cng < 0:
        out.append("CNG cost is negative.")
    if s.driver_pass_used:
        if s.driver_pass_amount < 0:
            out.append("Driver pass amount is negative.")
        elif s.driver_pass_amount == 0:
            out.append("Driver pass is marked as used but its amount is 0.")
    if s.km_distance < 0:
        out.append("KM end is lower than KM start.")
    return out


def aggregate(entries: Iterable[Union[RawEntry, SettledEntry]]) -> PeriodSummary:
    """
    Settle every entry and add up all numeric fields.
    Empty input gives the zero summary. Average daily gross divides by distinct dates.
    """
    totals: Dict[str, float] = {name: 0 for name in SUMMED_FIELDS}
    dates = set()
    count = 0
    for s in settle_all(entries):
        for name in SUMMED_FIELDS:
            totals[name] += getattr(s, name)
        dates.add(s.date)
        count += 1
    return PeriodSummary(entry_count=count, dates=frozenset(dates), **totals)


def combine_summaries(summaries: Iterable[PeriodSummary]) -> PeriodSummary:
    out = PeriodSummary()
    for s in summaries:
        out = out + s
    return out


def aggregate_by_date(entries: Iterable[Union[RawEntry, SettledEntry]]) -> Dict[str, PeriodSummary]:
    """Per-day summaries, ascending by date"""
    groups: Dict[str, List[SettledEntry]] = {}
    for s in settle_all(entries):
        groups.setdefault(s.date, []).append(s)
    return {d: aggregate(groups[d]) for d in sorted(groups)}


SORT_KEYS = {
    "date": lambda s: s.date,
    "highest_earnings": lambda s: s.gross_earnings,
    "highest_trips": lambda s: s.trips,
    "most_hours": lambda s: s.hours_worked,
}


def sort_entries(entries: Iterable[Union[RawEntry, SettledEntry]], key: str = "date") -> List[SettledEntry]:
    """Sort settled entries, largest/newest first"""
    if key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {key!r}")
    return sorted(settle_all(entries), key=SORT_KEYS[key], reverse=True)
