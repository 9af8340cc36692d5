"""
Shared pytest fixtures
"""
from pathlib import Path

import pytest

from models import AmendmentLedger, Ledger, RawEntry


@pytest.fixture(autouse=True)
def app_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep app data (parties.json, settings.json, logs) inside the test dir"""
    home = tmp_path / "app"
    monkeypatch.setenv("FARESPLIT_HOME", str(home))
    return home


def make_entry(
    date: str = "2026-03-10",
    gross: float = 1000.0,
    cng: float = 200.0,
    amendments=(),
    pass_used: bool = False,
    pass_amount: float = 0.0,
    **kwargs,
) -> RawEntry:
    """RawEntry with amendments given as plain amounts"""
    ledger = AmendmentLedger()
    for amount in amendments:
        ledger = ledger.add(amount)
    return RawEntry(
        date=date,
        gross_earnings=gross,
        cng=cng,
        online_amendments=ledger,
        driver_pass_used=pass_used,
        driver_pass_amount=pass_amount,
        **kwargs,
    )


@pytest.fixture
def sample_entries() -> list:
    """A small March with a loss day and a repeated date"""
    return [
        make_entry("2026-03-01", 1000, 200),
        make_entry("2026-03-02", 1000, 200, amendments=[150]),
        make_entry("2026-03-02", 400, 50, amendments=[100, -20], pass_used=True, pass_amount=100),
        make_entry("2026-03-15", 500, 600, trips=4, hours_worked=3.5, km_start=100, km_end=160),
        make_entry("2026-03-31", 800, 100, pass_used=True, pass_amount=60),
    ]


@pytest.fixture
def ledger(sample_entries: list) -> Ledger:
    return Ledger(owner="Asha", driver="Ravi", entries=list(sample_entries))
