"""
EntryStore tests
"""
import json
from pathlib import Path

import pytest

from computations import settle
from conftest import make_entry
from models import AmendmentLedger, Ledger
from queries import date_range, exact_date, year_month
from store import EntryNotFoundError, EntryStore


@pytest.fixture
def store() -> EntryStore:
    return EntryStore(Ledger(owner="Asha", driver="Ravi", entries=[]))


class TestEntryStoreCrud:
    """Create, replace, delete"""

    def test_add_assigns_identity(self, store: EntryStore) -> None:
        entry = make_entry()

        entry_id = store.add(entry)

        stored = store.get(entry_id)
        assert stored.id == entry_id
        assert stored.created_at
        assert entry.id == ""  # caller's object untouched
        assert len(store) == 1

    def test_ids_are_unique(self, store: EntryStore) -> None:
        ids = {store.add(make_entry()) for _ in range(5)}

        assert len(ids) == 5

    def test_replace_keeps_identity(self, store: EntryStore) -> None:
        entry_id = store.add(make_entry(gross=100))
        created = store.get(entry_id).created_at

        store.replace(entry_id, make_entry(gross=900))

        stored = store.get(entry_id)
        assert stored.gross_earnings == 900
        assert stored.id == entry_id
        assert stored.created_at == created
        assert len(store) == 1

    def test_delete(self, store: EntryStore) -> None:
        keep = store.add(make_entry("2026-03-01"))
        gone = store.add(make_entry("2026-03-02"))

        store.delete(gone)

        assert [e.id for e in store.all_entries()] == [keep]

    @pytest.mark.parametrize("op", ["get", "delete"])
    def test_unknown_id(self, store: EntryStore, op: str) -> None:
        with pytest.raises(EntryNotFoundError):
            getattr(store, op)("nope")

    def test_replace_unknown_id(self, store: EntryStore) -> None:
        with pytest.raises(KeyError):
            store.replace("nope", make_entry())

    def test_settlement_follows_replace(self, store: EntryStore) -> None:
        entry_id = store.add(make_entry(gross=1000, cng=200))
        assert settle(store.get(entry_id)).final_owner_earnings == 400

        store.replace(entry_id, make_entry(gross=1000, cng=200, amendments=[150]))

        assert settle(store.get(entry_id)).final_owner_earnings == 250


class TestEntryStoreQueries:
    """Ordering of results"""

    @pytest.fixture
    def filled(self, store: EntryStore, sample_entries: list) -> EntryStore:
        for e in sample_entries:
            store.add(e)
        return store

    def test_all_entries_newest_first(self, filled: EntryStore) -> None:
        dates = [e.date for e in filled.all_entries()]

        assert dates == sorted(dates, reverse=True)

    def test_range_oldest_first(self, filled: EntryStore) -> None:
        dates = [e.date for e in filled.entries_for(date_range("2026-03-02", "2026-03-31"))]

        assert dates == ["2026-03-02", "2026-03-02", "2026-03-15", "2026-03-31"]

    def test_exact_date(self, filled: EntryStore) -> None:
        assert len(filled.entries_for(exact_date("2026-03-02"))) == 2

    def test_month(self, filled: EntryStore) -> None:
        filled.add(make_entry("2026-04-01"))

        assert len(filled.entries_for(year_month("2026-03"))) == 5

    def test_extend_and_clear(self, store: EntryStore, sample_entries: list) -> None:
        ids = store.extend(sample_entries)

        assert len(ids) == 5
        store.clear()
        assert len(store) == 0


class TestEntryStoreFiles:
    """JSON save/load"""

    def test_round_trip(self, store: EntryStore, tmp_path: Path) -> None:
        entry_id = store.add(make_entry(amendments=[150, -20], pass_used=True, pass_amount=100,
                                        trips=5, notes="airport run"))
        path = tmp_path / "ledger.json"

        store.save(str(path))
        loaded = EntryStore.load(str(path))

        assert loaded.ledger.owner == "Asha"
        assert loaded.ledger.driver == "Ravi"
        original = store.get(entry_id)
        restored = loaded.get(entry_id)
        assert restored == original
        assert isinstance(restored.online_amendments, AmendmentLedger)
        assert settle(restored) == settle(original)

    def test_derived_fields_not_written(self, store: EntryStore, tmp_path: Path) -> None:
        store.add(make_entry())
        path = tmp_path / "ledger.json"

        store.save(str(path))

        data = json.loads(path.read_text(encoding="utf-8"))
        row = data["entries"][0]
        assert "net_earnings" not in row
        assert "final_owner_earnings" not in row
        assert row["date"] == "2026-03-10"

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            EntryStore.load(str(tmp_path / "missing.json"))

    def test_load_assigns_missing_and_repeated_ids(self, tmp_path: Path) -> None:
        path = tmp_path / "ledger.json"
        rows = [
            {"date": "2026-03-01", "gross_earnings": 1000, "cng": 200},
            {"id": None, "created_at": None, "date": "2026-03-02", "gross_earnings": 900, "cng": 100},
            {"id": "dup", "created_at": "2026-03-03T08:00:00+00:00", "date": "2026-03-03"},
            {"id": "dup", "date": "2026-03-04"},
        ]
        path.write_text(json.dumps({"owner": "Asha", "driver": "Ravi", "entries": rows}), encoding="utf-8")

        loaded = EntryStore.load(str(path))

        ids = [e.id for e in loaded.ledger.entries]
        assert len(set(ids)) == 4
        assert all(ids) and "None" not in ids
        assert ids[2] == "dup"
        assert all(e.created_at for e in loaded.ledger.entries)
        assert loaded.get("dup").created_at == "2026-03-03T08:00:00+00:00"

        loaded.delete(ids[1])
        assert [e.date for e in loaded.all_entries()] == ["2026-03-04", "2026-03-03", "2026-03-01"]

    def test_default_ledger_uses_config(self, app_home: Path) -> None:
        app_home.mkdir(parents=True, exist_ok=True)
        (app_home / "parties.json").write_text(json.dumps({"owner": "Meera", "driver": "Sunil"}),
                                               encoding="utf-8")

        store = EntryStore()

        assert (store.ledger.owner, store.ledger.driver) == ("Meera", "Sunil")
