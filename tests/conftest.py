"""Shared fakes for the chain collaborator."""

import random
from decimal import Decimal
from typing import Any, Callable, List, Optional

import pytest
from web3 import Web3

from queno.abis import LOTTERY_ABI, TOKEN_ABI
from queno.session import BetSession

OWNER = "0x" + "ab" * 20
OTHER = "0x" + "cd" * 20
LOTTERY_ADDRESS = "0xe6b98F104c1BEf218F3893ADab4160Dc73Eb8367"


def wei(amount: str) -> int:
    return Web3.to_wei(Decimal(amount), "ether")


class FakeTransaction:
    def __init__(self, name: str, calls: List[str], on_mined: Optional[Callable[[], None]] = None,
                 error: Optional[BaseException] = None) -> None:
        self.name = name
        self.calls = calls
        self.on_mined = on_mined
        self.error = error

    async def wait(self) -> dict:
        self.calls.append(f"{self.name}.mined")
        if self.error is not None:
            raise self.error
        if self.on_mined is not None:
            self.on_mined()
        return {"status": 1, "blockNumber": 1}


class FakeLottery:
    """Betting call plus an in-memory event emitter."""

    address = LOTTERY_ADDRESS

    def __init__(self, calls: List[str]) -> None:
        self.calls = calls
        self.handlers: List[Any] = []
        self.on_count = 0
        self.off_count = 0
        self.bets: List[tuple] = []
        # (drawn, winning, reward_wei, currency); None means the event never fires
        self.result: Optional[tuple] = ([3, 7, 21, 30], [3, 7, 21, 30], wei("0.01"), 0)
        self.send_error: Optional[BaseException] = None
        self.mine_error: Optional[BaseException] = None
        self.event_owner = OWNER

    async def on(self, event_name: str, handler: Any) -> None:
        self.on_count += 1
        self.handlers.append(handler)

    def off(self, event_name: str, handler: Any) -> None:
        self.off_count += 1
        self.handlers.remove(handler)

    def emit(self, *args: Any) -> None:
        for handler in list(self.handlers):
            handler(*args)

    async def generate_lottery_numbers(self, selection, token_amount, currency, value):
        self.calls.append("bet")
        self.bets.append((list(selection), token_amount, currency, value))
        if self.send_error is not None:
            raise self.send_error

        def fire() -> None:
            if self.result is None:
                return
            drawn, winning, reward, cur = self.result
            self.emit(self.event_owner, list(selection), drawn, winning, reward, cur)

        return FakeTransaction("bet", self.calls, on_mined=fire, error=self.mine_error)


class FakeToken:
    def __init__(self, calls: List[str]) -> None:
        self.calls = calls
        self.approvals: List[tuple] = []
        self.approve_error: Optional[BaseException] = None
        self.mine_error: Optional[BaseException] = None

    async def approve(self, spender: str, amount: int):
        self.calls.append("approve")
        self.approvals.append((spender, amount))
        if self.approve_error is not None:
            raise self.approve_error
        return FakeTransaction("approve", self.calls, error=self.mine_error)


class FakeChain:
    def __init__(self) -> None:
        self.calls: List[str] = []
        self.address = OWNER
        self.lottery = FakeLottery(self.calls)
        self.token = FakeToken(self.calls)
        self.abis = [LOTTERY_ABI, TOKEN_ABI]


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def session(chain) -> BetSession:
    s = BetSession(rng=random.Random(7))
    s.init(chain)
    return s
