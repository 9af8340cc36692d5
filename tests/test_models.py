"""
Amendment ledger and model tests
"""
import pytest

from models import AmendmentLedger, OnlineAmendment, PeriodSummary, ZeroAmendmentError


class TestAmendmentLedger:
    """Immutable online amendments list"""

    def test_empty_total_is_zero(self) -> None:
        ledger = AmendmentLedger()

        assert len(ledger) == 0
        assert ledger.total() == 0

    def test_add_returns_new_ledger(self) -> None:
        empty = AmendmentLedger()

        one = empty.add(150, "UPI")

        assert len(empty) == 0
        assert len(one) == 1
        item = list(one)[0]
        assert item.amount == 150
        assert item.description == "UPI"
        assert item.id

    @pytest.mark.parametrize("amount", [0, 0.0, "0", "", "abc", None])
    def test_zero_amount_rejected(self, amount) -> None:
        ledger = AmendmentLedger().add(100)

        with pytest.raises(ZeroAmendmentError):
            ledger.add(amount, "nothing")

        assert len(ledger) == 1
        assert ledger.total() == 100

    def test_zero_amendment_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            AmendmentLedger().add(0)

    def test_default_descriptions(self) -> None:
        ledger = AmendmentLedger().add(50).add(-20).add("12.5", "   ")

        assert [a.description for a in ledger] == ["Online payment", "Adjustment", "Online payment"]
        assert ledger.total() == 42.5

    def test_duplicate_descriptions_allowed(self) -> None:
        ledger = AmendmentLedger().add(10, "tip").add(10, "tip")

        assert len(ledger) == 2
        assert len({a.id for a in ledger}) == 2

    def test_remove_by_id(self) -> None:
        ledger = AmendmentLedger().add(10).add(20).add(30)
        middle = list(ledger)[1]

        smaller = ledger.remove(middle.id)

        assert [a.amount for a in smaller] == [10, 30]
        assert len(ledger) == 3

    def test_remove_unknown_id(self) -> None:
        ledger = AmendmentLedger().add(10)

        assert ledger.remove("missing") == ledger

    def test_dict_round_trip_keeps_ids(self) -> None:
        ledger = AmendmentLedger().add(10, "a").add(-5, "b")

        assert AmendmentLedger.from_dicts(ledger.to_dicts()) == ledger

    def test_from_dicts_keeps_stored_zero(self) -> None:
        ledger = AmendmentLedger.from_dicts([{"id": "x", "amount": 0, "description": "old"}])

        assert len(ledger) == 1
        assert ledger.total() == 0

    def test_from_dicts_tolerates_loose_rows(self) -> None:
        existing = OnlineAmendment(id="k", amount=5.0, description="kept")

        ledger = AmendmentLedger.from_dicts([existing, {"amount": "7"}, 3, None])

        assert ledger.total() == 15
        assert list(ledger)[0] is existing

    def test_from_dicts_none(self) -> None:
        assert AmendmentLedger.from_dicts(None) == AmendmentLedger()


class TestPeriodSummary:
    """Summary arithmetic"""

    def test_identity(self) -> None:
        s = PeriodSummary(gross_earnings=100, entry_count=1, dates=frozenset({"2026-01-01"}))

        assert s + PeriodSummary() == s

    def test_dates_union(self) -> None:
        a = PeriodSummary(gross_earnings=300, entry_count=1, dates=frozenset({"2026-01-01"}))
        b = PeriodSummary(gross_earnings=500, entry_count=1, dates=frozenset({"2026-01-01"}))

        total = a + b

        assert total.entry_count == 2
        assert total.day_count == 1
        assert total.average_daily_gross == 800
