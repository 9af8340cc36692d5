"""
Utility functions for FareSplitLedger
"""
from __future__ import annotations
import math
import os
from datetime import date, datetime
from typing import Any, Optional, Union


def today_str() -> str:
    """Get today's date as ISO string"""
    return date.today().isoformat()


def parse_date(s: str) -> date:
    """Parse YYYY-MM-DD date string"""
    return datetime.strptime(s.strip(), "%Y-%m-%d").date()


def normalize_date(s: str) -> str:
    """Parse a typed date and return it zero-padded (2026-3-5 -> 2026-03-05)"""
    if not isinstance(s, str):
        raise ValueError(f"Date must be YYYY-MM-DD, got {s!r}")
    return parse_date(s).isoformat()


def to_date(value: Union[date, str]) -> date:
    """Accept a date or an ISO string"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_date(value)


def safe_float(x: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Convert value to float safely, returning default for missing, non-numeric or NaN input"""
    if x is None or isinstance(x, bool):
        return default
    if isinstance(x, str) and not x.strip():
        return default
    try:
        v = float(x)
    except (TypeError, ValueError):
        return default
    if math.isnan(v) or math.isinf(v):
        return default
    return v


def safe_int(x: Any, default: int = 0) -> int:
    """Like parseInt: 3.7 -> 3, junk -> default"""
    v = safe_float(x, None)
    if v is None:
        return default
    return int(v)


def fmt_money(x: float, symbol: str = "") -> str:
    """Currency for display, 2 decimals"""
    return f"{symbol}{x:,.2f}"


def fmt_km(x: float) -> str:
    """Distance for display, 1 decimal"""
    return f"{x:.1f}"


def app_dir() -> str:
    """
    Get application data directory: ~/Library/Application Support/FareSplitLedger
    (or $FARESPLIT_HOME when set). Creates directory if it doesn't exist.
    """
    path = os.environ.get("FARESPLIT_HOME")
    if not path:
        base = os.path.expanduser("~/Library/Application Support")
        path = os.path.join(base, "FareSplitLedger")
    os.makedirs(path, exist_ok=True)
    return path
