from decimal import Decimal
from enum import IntEnum


NUMBER_COUNT = 32
MAX_SELECTION = 4
MIN_BET = Decimal("0.0001")
MAX_BET = Decimal("5")

# Certified RNG fee, always paid in the native unit
QRN_PRICE = Decimal("0.0003")

HISTORY_PREVIEW = 5

OUTCOME_EVENT = "WinningNumbersGenerated"

DEFAULT_LOTTERY_ADDRESS = "0xe6b98F104c1BEf218F3893ADab4160Dc73Eb8367"
DEFAULT_TOKEN_ADDRESS = "0x8464135c8F25Da09e49BC8782676a84730C318bC"


class Currency(IntEnum):
    """Currency discriminant as understood by the lottery contract."""

    NATIVE = 0
    TOKEN = 1

    @property
    def label(self) -> str:
        return "ETH" if self is Currency.NATIVE else "Ypto"

    @classmethod
    def from_label(cls, label: str) -> "Currency":
        for cur in cls:
            if cur.label.lower() == label.strip().lower():
                return cur
        raise ValueError(f"Unknown currency: {label}")
