"""Tests for bet history and derived totals."""

from decimal import Decimal

from queno.constants import Currency
from queno.ledger import HistoryEntry, HistoryLedger


def entry(amount: str, reward: str, currency: Currency = Currency.NATIVE, drawn=(1, 2, 3, 4)) -> HistoryEntry:
    return HistoryEntry(selection=(1, 2), drawn=drawn, amount=Decimal(amount),
                        currency=currency, reward=Decimal(reward))


class TestHistoryLedger:
    def test_most_recent_first(self):
        ledger = HistoryLedger()
        first, second = entry("1", "0"), entry("2", "0")
        ledger.append(first)
        ledger.append(second)
        assert list(ledger) == [second, first]

    def test_no_dedup(self):
        ledger = HistoryLedger()
        e = entry("1", "0")
        ledger.append(e)
        ledger.append(e)
        assert len(ledger) == 2

    def test_empty_aggregate_has_both_currencies(self):
        totals = HistoryLedger().aggregate()
        assert set(totals) == {Currency.NATIVE, Currency.TOKEN}
        assert totals[Currency.TOKEN].bet == 0
        assert totals[Currency.TOKEN].reward == 0

    def test_aggregate_is_fold_of_entries(self):
        ledger = HistoryLedger()
        entries = [
            entry("0.004", "0.01"),
            entry("0.2", "0", Currency.TOKEN),
            entry("0.1", "0.05"),
            entry("1", "3", Currency.TOKEN),
        ]
        for e in entries:
            ledger.append(e)
        totals = ledger.aggregate()
        for cur in Currency:
            mine = [e for e in entries if e.currency is cur]
            assert totals[cur].bet == sum((e.amount for e in mine), Decimal(0))
            assert totals[cur].reward == sum((e.reward for e in mine), Decimal(0))
        assert totals[Currency.NATIVE].balance == Decimal("-0.044")
        assert totals[Currency.TOKEN].balance == Decimal("1.8")

    def test_visible_preview_and_all(self):
        ledger = HistoryLedger()
        for i in range(7):
            ledger.append(entry(str(i + 1), "0"))
        preview = ledger.visible()
        assert [e.amount for e in preview] == [Decimal(n) for n in (7, 6, 5, 4, 3)]
        assert len(ledger.visible(show_all=True)) == 7
