"""
Entry storage for FareSplitLedger: identity, timestamps, ordering and JSON files.
"""
from __future__ import annotations
import dataclasses
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from config import dict_to_ledger, get_default_ledger, ledger_to_dict
from models import Ledger, RawEntry
from queries import DateSelector, filter_entries

logger = logging.getLogger(__name__)


class EntryNotFoundError(KeyError):
    """No entry with the given id"""


class EntryStore:
    """
    Holds the raw entries of one ledger.
    Settlement values are never stored; callers settle() what they read.
    """

    def __init__(self, ledger: Optional[Ledger] = None):
        self.ledger = ledger if ledger is not None else get_default_ledger()

    def _index(self, entry_id: str) -> int:
        for i, e in enumerate(self.ledger.entries):
            if e.id == entry_id:
                return i
        raise EntryNotFoundError(entry_id)

    def add(self, entry: RawEntry) -> str:
        """Store a copy of the entry under a new id and return the id"""
        new = dataclasses.replace(
            entry,
            id=uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        self.ledger.entries.append(new)
        logger.info(f"Entry added: {new.id} ({new.date})")
        return new.id

    def replace(self, entry_id: str, entry: RawEntry) -> None:
        """Full replace; id and creation time are kept"""
        i = self._index(entry_id)
        old = self.ledger.entries[i]
        self.ledger.entries[i] = dataclasses.replace(entry, id=old.id, created_at=old.created_at)
        logger.info(f"Entry replaced: {entry_id} ({entry.date})")

    def delete(self, entry_id: str) -> None:
        i = self._index(entry_id)
        del self.ledger.entries[i]
        logger.info(f"Entry deleted: {entry_id}")

    def get(self, entry_id: str) -> RawEntry:
        return self.ledger.entries[self._index(entry_id)]

    def __len__(self) -> int:
        return len(self.ledger.entries)

    def all_entries(self) -> List[RawEntry]:
        """Newest date first"""
        return sorted(self.ledger.entries, key=lambda e: str(e.date or ""), reverse=True)

    def entries_for(self, selector: DateSelector) -> List[RawEntry]:
        """Entries in the selected period, oldest date first"""
        found = filter_entries(self.ledger.entries, selector)
        return sorted(found, key=lambda e: e.date)

    def extend(self, entries: List[RawEntry]) -> List[str]:
        """Add several entries (CSV import); returns new ids"""
        return [self.add(e) for e in entries]

    def clear(self) -> None:
        self.ledger.entries = []

    # ---------- Files ----------
    @classmethod
    def load(cls, path: str) -> "EntryStore":
        """Entries with a blank or repeated id get a fresh one"""
        with open(path, "r", encoding="utf-8") as f:
            d = json.load(f)
        ledger = dict_to_ledger(d)
        seen = set()
        now = datetime.now(timezone.utc).isoformat()
        for i, e in enumerate(ledger.entries):
            if not e.id or e.id in seen:
                new_id = uuid.uuid4().hex
                logger.warning(f"Entry on {e.date or '?'} had id {e.id!r}, assigned {new_id}")
                e = dataclasses.replace(e, id=new_id)
            if not e.created_at:
                e = dataclasses.replace(e, created_at=now)
            ledger.entries[i] = e
            seen.add(e.id)
        logger.info(f"Loaded {len(ledger.entries)} entries from {path}")
        return cls(ledger)

    def save(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(ledger_to_dict(self.ledger), f, ensure_ascii=False, indent=2)
        logger.info(f"Saved {len(self.ledger.entries)} entries to {path}")
