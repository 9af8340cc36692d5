"""
Data models for FareSplitLedger
"""
from __future__ import annotations
import uuid
from dataclasses import dataclass, field, fields
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

from utils import safe_float


class ZeroAmendmentError(ValueError):
    """Raised when an online amendment with amount 0 is added"""


@dataclass(frozen=True)
class OnlineAmendment:
    """Signed correction for money that went through the online channel"""
    id: str
    amount: float  # positive: owed to driver, negative: owed to owner
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "amount": self.amount, "description": self.description}


def default_description(amount: float) -> str:
    return "Adjustment" if amount < 0 else "Online payment"


@dataclass(frozen=True)
class AmendmentLedger:
    """
    Immutable list of online amendments for one day.
    add/remove return a new ledger; the original is never modified.
    """
    items: Tuple[OnlineAmendment, ...] = ()

    def __iter__(self) -> Iterator[OnlineAmendment]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def add(self, amount: Any, description: str = "") -> "AmendmentLedger":
        """Return a new ledger with the amendment appended. Zero amounts are rejected."""
        value = safe_float(amount)
        if value == 0:
            raise ZeroAmendmentError(f"Online amendment amount must be non-zero, got {amount!r}")
        item = OnlineAmendment(
            id=uuid.uuid4().hex,
            amount=value,
            description=(description or "").strip() or default_description(value),
        )
        return AmendmentLedger(self.items + (item,))

    def remove(self, amendment_id: str) -> "AmendmentLedger":
        """Return a new ledger without the given amendment"""
        return AmendmentLedger(tuple(a for a in self.items if a.id != amendment_id))

    def total(self) -> float:
        return sum((a.amount for a in self.items), 0.0)

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [a.to_dict() for a in self.items]

    @classmethod
    def from_dicts(cls, rows: Optional[Iterable[Any]]) -> "AmendmentLedger":
        """Build from stored rows. Stored zero amounts are kept as they are."""
        items = []
        for row in rows or []:
            if isinstance(row, OnlineAmendment):
                items.append(row)
                continue
            if not isinstance(row, dict):
                row = {"amount": row}
            amount = safe_float(row.get("amount"))
            items.append(OnlineAmendment(
                id=str(row.get("id") or uuid.uuid4().hex),
                amount=amount,
                description=str(row.get("description") or default_description(amount)),
            ))
        return cls(tuple(items))


@dataclass
class RawEntry:
    """
    One day's record for the vehicle as entered on the form.
    Values may still be strings; settle() coerces them.
    """
    date: str  # YYYY-MM-DD
    gross_earnings: Any = 0.0
    cng: Any = 0.0
    online_amendments: Any = field(default_factory=AmendmentLedger)
    driver_pass_used: Any = False
    driver_pass_amount: Any = 0.0
    trips: Any = 0
    hours_worked: Any = 0.0
    km_start: Any = 0.0
    km_end: Any = 0.0
    notes: str = ""
    id: str = ""  # assigned by EntryStore
    created_at: str = ""  # assigned by EntryStore


@dataclass(frozen=True)
class SettledEntry:
    """Fully reconciled breakdown of a RawEntry. Recomputed on every read, never stored."""
    entry: RawEntry
    date: str
    gross_earnings: float
    cng: float
    driver_pass_used: bool
    driver_pass_amount: float  # 0 when the pass was not used
    trips: int
    hours_worked: float
    km_start: float
    km_end: float
    net_earnings: float
    online_total: float
    net_online_settlement: float
    base_owner_share: float
    base_driver_share: float
    owner_after_online: float
    driver_after_online: float
    owner_pass_contribution: float
    driver_pass_contribution: float
    final_owner_earnings: float
    final_driver_earnings: float
    km_distance: float


# SettledEntry fields that PeriodSummary adds up
SUMMED_FIELDS = (
    "gross_earnings",
    "cng",
    "driver_pass_amount",
    "trips",
    "hours_worked",
    "net_earnings",
    "online_total",
    "net_online_settlement",
    "base_owner_share",
    "base_driver_share",
    "owner_after_online",
    "driver_after_online",
    "owner_pass_contribution",
    "driver_pass_contribution",
    "final_owner_earnings",
    "final_driver_earnings",
    "km_distance",
)


@dataclass(frozen=True)
class PeriodSummary:
    """Totals over a set of settled entries. PeriodSummary() is the empty summary."""
    gross_earnings: float = 0.0
    cng: float = 0.0
    driver_pass_amount: float = 0.0
    trips: int = 0
    hours_worked: float = 0.0
    net_earnings: float = 0.0
    online_total: float = 0.0
    net_online_settlement: float = 0.0
    base_owner_share: float = 0.0
    base_driver_share: float = 0.0
    owner_after_online: float = 0.0
    driver_after_online: float = 0.0
    owner_pass_contribution: float = 0.0
    driver_pass_contribution: float = 0.0
    final_owner_earnings: float = 0.0
    final_driver_earnings: float = 0.0
    km_distance: float = 0.0
    entry_count: int = 0
    dates: FrozenSet[str] = frozenset()

    @property
    def day_count(self) -> int:
        """Number of distinct calendar days, not records"""
        return len(self.dates)

    @property
    def average_daily_gross(self) -> float:
        if not self.dates:
            return 0.0
        return self.gross_earnings / len(self.dates)

    def __add__(self, other: "PeriodSummary") -> "PeriodSummary":
        if not isinstance(other, PeriodSummary):
            return NotImplemented
        values = {name: getattr(self, name) + getattr(other, name) for name in SUMMED_FIELDS}
        return PeriodSummary(
            entry_count=self.entry_count + other.entry_count,
            dates=self.dates | other.dates,
            **values,
        )

    def as_dict(self) -> Dict[str, Any]:
        d = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "dates"}
        d["day_count"] = self.day_count
        d["average_daily_gross"] = self.average_daily_gross
        return d


@dataclass
class Ledger:
    """Complete ledger containing all data"""
    owner: str
    driver: str
    entries: List[RawEntry]
    version: int = 1
