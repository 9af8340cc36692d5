"""
Period selection for FareSplitLedger reports.

Every selector is an inclusive [start, end] pair of ISO dates compared as
strings, which matches chronological order only for zero-padded YYYY-MM-DD.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, TypeVar, Union

from utils import parse_date, to_date

DateLike = Union[date, str]
T = TypeVar("T")

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True)
class DateSelector:
    """Inclusive date bounds. A selector with start > end matches nothing."""
    start: str
    end: str
    label: str = ""

    def matches(self, day: object) -> bool:
        if not isinstance(day, str) or not day:
            return False
        return self.start <= day <= self.end

    def days(self) -> List[str]:
        """Every real calendar day the selector covers, oldest first"""
        out = []
        d = parse_date(self.start)
        while d.isoformat() <= self.end:
            out.append(d.isoformat())
            d += timedelta(days=1)
        return out


def _iso(value: DateLike) -> str:
    if isinstance(value, str):
        s = value.strip()
        if not _ISO_DATE.match(s):
            raise ValueError(f"Date must be YYYY-MM-DD, got {value!r}")
        parse_date(s)
        return s
    return to_date(value).isoformat()


def exact_date(day: DateLike) -> DateSelector:
    d = _iso(day)
    return DateSelector(d, d, label=d)


def date_range(start: DateLike, end: DateLike) -> DateSelector:
    s, e = _iso(start), _iso(end)
    return DateSelector(s, e, label=f"{s} to {e}")


def year_month(month: str) -> DateSelector:
    """
    YYYY-MM -> [YYYY-MM-01, YYYY-MM-31].
    Day 31 is a sentinel upper bound, not a real day: no stored date can exceed
    it within the month, so 28/29/30 day months need no special handling.
    """
    m = _YEAR_MONTH.match(month.strip()) if isinstance(month, str) else None
    if not m or not 1 <= int(m.group(2)) <= 12:
        raise ValueError(f"Month must be YYYY-MM, got {month!r}")
    ym = f"{m.group(1)}-{m.group(2)}"
    return DateSelector(f"{ym}-01", f"{ym}-31", label=ym)


def last_n_days(n: int, today: DateLike) -> DateSelector:
    """[today - n days, today]; today is passed in by the caller"""
    if n < 0:
        raise ValueError(f"Number of days must be >= 0, got {n}")
    end = to_date(today)
    start = end - timedelta(days=n)
    return DateSelector(start.isoformat(), end.isoformat(), label=f"Last {n} days")


def filter_entries(entries: Iterable[T], selector: DateSelector) -> List[T]:
    """Entries whose date the selector matches, in input order"""
    return [e for e in entries if selector.matches(getattr(e, "date", None))]


def month_days(month: str) -> List[str]:
    """Every real calendar day of YYYY-MM as ISO strings"""
    return year_month(month).days()
