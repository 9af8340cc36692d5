"""
Configuration and data loading/saving for FareSplitLedger
"""
from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Tuple

from models import AmendmentLedger, Ledger, RawEntry
from utils import app_dir

logger = logging.getLogger(__name__)

DEFAULT_OWNER = "Owner"
DEFAULT_DRIVER = "Driver"


@dataclass
class Settings:
    """Display preferences"""
    currency_symbol: str = "₹"
    dashboard_days: int = 7


def load_parties(path: str) -> Tuple[str, str]:
    """Load owner and driver names from JSON file"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return DEFAULT_OWNER, DEFAULT_DRIVER
    owner = str(data.get("owner") or DEFAULT_OWNER)
    driver = str(data.get("driver") or DEFAULT_DRIVER)
    return owner, driver


def load_settings(path: str) -> Settings:
    """Load settings from JSON file, ignoring unknown keys; a broken file gives defaults"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return Settings()
    except ValueError as ex:
        logger.warning(f"Settings file {path} is not valid JSON, using defaults: {ex}")
        return Settings()
    if not isinstance(data, dict):
        logger.warning(f"Settings file {path} must hold an object, using defaults")
        return Settings()
    known = {f.name for f in fields(Settings)}
    unknown = set(data) - known
    if unknown:
        logger.warning(f"Ignoring unknown settings: {sorted(unknown)}")
    try:
        settings = Settings(**{k: v for k, v in data.items() if k in known})
        settings.dashboard_days = int(settings.dashboard_days)
    except (TypeError, ValueError) as ex:
        logger.warning(f"Invalid settings in {path}, using defaults: {ex}")
        return Settings()
    if settings.dashboard_days < 0:
        logger.warning(f"dashboard_days must be >= 0, got {settings.dashboard_days}; using defaults")
        return Settings()
    return settings


def get_default_settings() -> Settings:
    return load_settings(os.path.join(app_dir(), "settings.json"))


def get_default_ledger() -> Ledger:
    """Create an empty ledger with the configured party names"""
    owner, driver = load_parties(os.path.join(app_dir(), "parties.json"))
    return Ledger(owner=owner, driver=driver, entries=[])


def entry_to_dict(e: RawEntry) -> Dict[str, Any]:
    """Raw fields only; derived settlement values are never written"""
    amendments = e.online_amendments
    if not isinstance(amendments, AmendmentLedger):
        amendments = AmendmentLedger.from_dicts(amendments)
    return {
        "id": e.id,
        "created_at": e.created_at,
        "date": e.date,
        "gross_earnings": e.gross_earnings,
        "cng": e.cng,
        "online_amendments": amendments.to_dicts(),
        "driver_pass_used": e.driver_pass_used,
        "driver_pass_amount": e.driver_pass_amount,
        "trips": e.trips,
        "hours_worked": e.hours_worked,
        "km_start": e.km_start,
        "km_end": e.km_end,
        "notes": e.notes,
    }


def dict_to_entry(d: Dict[str, Any]) -> RawEntry:
    return RawEntry(
        id=str(d.get("id") or ""),
        created_at=str(d.get("created_at") or ""),
        date=d.get("date", ""),
        gross_earnings=d.get("gross_earnings", 0.0),
        cng=d.get("cng", 0.0),
        online_amendments=AmendmentLedger.from_dicts(d.get("online_amendments")),
        driver_pass_used=d.get("driver_pass_used", False),
        driver_pass_amount=d.get("driver_pass_amount", 0.0),
        trips=d.get("trips", 0),
        hours_worked=d.get("hours_worked", 0.0),
        km_start=d.get("km_start", 0.0),
        km_end=d.get("km_end", 0.0),
        notes=d.get("notes", "") or "",
    )


def ledger_to_dict(ledger: Ledger) -> dict:
    """Convert Ledger object to dictionary for JSON serialization"""
    return {
        "version": ledger.version,
        "owner": ledger.owner,
        "driver": ledger.driver,
        "entries": [entry_to_dict(e) for e in ledger.entries],
    }


def dict_to_ledger(d: dict) -> Ledger:
    """Convert dictionary from JSON to Ledger object"""
    return Ledger(
        version=d.get("version", 1),
        owner=d.get("owner") or DEFAULT_OWNER,
        driver=d.get("driver") or DEFAULT_DRIVER,
        entries=[dict_to_entry(e) for e in d.get("entries", [])],
    )
