from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Sized

from queno.constants import MAX_BET, MIN_BET


class RejectReason(str, Enum):
    WAIT_FOR_RESULT = "wait for previous result"
    CONNECT_WALLET = "connect wallet"
    LOTTERY_NOT_CONNECTED = "lottery contract not connected"
    TOKEN_NOT_CONNECTED = "token contract not connected"
    NO_SELECTION = "no number selected"
    AMOUNT_OUT_OF_RANGE = "amount out of range"

    @property
    def message(self) -> str:
        return MESSAGES[self]


MESSAGES = {
    RejectReason.WAIT_FOR_RESULT: "Please wait for the previous result.",
    RejectReason.CONNECT_WALLET: "Please connect your wallet.",
    RejectReason.LOTTERY_NOT_CONNECTED: "Lottery contract not connected.",
    RejectReason.TOKEN_NOT_CONNECTED: "Token contract not connected.",
    RejectReason.NO_SELECTION: "No number selected.",
    RejectReason.AMOUNT_OUT_OF_RANGE: f"Bet amount must be between {MIN_BET} and {MAX_BET}.",
}


def parse_amount(value: Any) -> Optional[Decimal]:
    """Parse a per-number bet amount. Returns None when it is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def validate_bet(
    *,
    pending: bool,
    wallet_connected: bool,
    lottery_ready: bool,
    token_ready: bool,
    selection: Sized,
    amount: Any,
) -> Optional[RejectReason]:
    """First applicable rejection reason, or None when the bet may proceed."""
    if pending:
        return RejectReason.WAIT_FOR_RESULT
    if not wallet_connected:
        return RejectReason.CONNECT_WALLET
    if not lottery_ready:
        return RejectReason.LOTTERY_NOT_CONNECTED
    if not token_ready:
        return RejectReason.TOKEN_NOT_CONNECTED
    if len(selection) == 0:
        return RejectReason.NO_SELECTION
    numeric = parse_amount(amount)
    if numeric is None or numeric < MIN_BET or numeric > MAX_BET:
        return RejectReason.AMOUNT_OUT_OF_RANGE
    return None
