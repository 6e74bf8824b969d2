from collections import deque
from dataclasses import dataclass
from decimal import Decimal
from typing import Deque, Dict, Iterator, List, Tuple

from queno.constants import HISTORY_PREVIEW, Currency


@dataclass(frozen=True)
class HistoryEntry:
    selection: Tuple[int, ...]
    drawn: Tuple[int, ...]
    amount: Decimal
    currency: Currency
    reward: Decimal


@dataclass(frozen=True)
class Totals:
    bet: Decimal = Decimal(0)
    reward: Decimal = Decimal(0)

    @property
    def balance(self) -> Decimal:
        return self.reward - self.bet


class HistoryLedger:
    """Resolved bets, most recent first. Totals are always folded from the entries."""

    def __init__(self) -> None:
        self._entries: Deque[HistoryEntry] = deque()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries)

    def append(self, entry: HistoryEntry) -> None:
        self._entries.appendleft(entry)

    def aggregate(self) -> Dict[Currency, Totals]:
        totals = {cur: Totals() for cur in Currency}
        for entry in self._entries:
            cur = totals[entry.currency]
            totals[entry.currency] = Totals(bet=cur.bet + entry.amount, reward=cur.reward + entry.reward)
        return totals

    def visible(self, show_all: bool = False) -> List[HistoryEntry]:
        if show_all:
            return list(self._entries)
        return [entry for _, entry in zip(range(HISTORY_PREVIEW), self._entries)]

    def clear(self) -> None:
        self._entries.clear()
