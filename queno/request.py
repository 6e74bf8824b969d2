from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Tuple

from web3 import Web3

from queno.constants import QRN_PRICE, Currency


@dataclass(frozen=True)
class BetRequest:
    """Parameters of one generateLotteryNumbers call."""

    selection: Tuple[int, ...]
    amount_per_number: Decimal
    currency: Currency
    total_stake: Decimal
    # native unit (wei) sent with the betting call
    value: int
    # token base units passed as the tokenAmount argument
    token_amount: int

    @property
    def discriminant(self) -> int:
        return int(self.currency)

    @property
    def needs_approval(self) -> bool:
        return self.currency is Currency.TOKEN

    @property
    def surcharge(self) -> Decimal:
        return QRN_PRICE


def build_request(selection: Iterable[int], amount: Decimal, currency: Currency) -> BetRequest:
    numbers = tuple(int(n) for n in selection)
    total_stake = amount * len(numbers)
    surcharge_wei = Web3.to_wei(QRN_PRICE, "ether")
    stake_wei = Web3.to_wei(total_stake, "ether")

    if currency is Currency.NATIVE:
        value = stake_wei + surcharge_wei
        token_amount = 0
    else:
        value = surcharge_wei
        token_amount = stake_wei

    return BetRequest(
        selection=numbers,
        amount_per_number=amount,
        currency=currency,
        total_stake=total_stake,
        value=value,
        token_amount=token_amount,
    )
