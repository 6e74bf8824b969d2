"""Correlates a submitted bet with the contract's asynchronous outcome event.

A ``ResultCorrelator`` owns exactly one listener on the lottery contract's
``WinningNumbersGenerated`` event for the lifetime of one bet.  It moves
through ``ARMED -> RESOLVED | FAILED | ABANDONED`` and removes its listener
exactly once, whichever way it leaves ``ARMED``.

Usage::

    async with ResultCorrelator(lottery, owner, selection) as correlator:
        tx = await lottery.generate_lottery_numbers(...)
        await tx.wait()
        outcome = await correlator.wait()
"""

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, FrozenSet, Iterable, Optional, Sequence, Tuple

from web3 import Web3

from queno.constants import OUTCOME_EVENT, Currency
from queno.errors import CorrelationError

logger = logging.getLogger(__name__)


class CorrelationState(str, Enum):
    IDLE = "idle"
    ARMED = "armed"
    RESOLVED = "resolved"
    FAILED = "failed"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class ResolvedOutcome:
    selection: Tuple[int, ...]
    drawn: Tuple[int, ...]
    winning: Tuple[int, ...]
    matches: FrozenSet[int]
    reward: Decimal
    currency: Currency

    @property
    def won(self) -> bool:
        return self.reward > 0


def decode_outcome(
    submitted: Sequence[Any],
    drawn: Sequence[Any],
    winning: Sequence[Any],
    reward_raw: int,
    currency_used: int,
) -> ResolvedOutcome:
    selection = tuple(int(n) for n in submitted)
    drawn_numbers = tuple(int(n) for n in drawn)
    return ResolvedOutcome(
        selection=selection,
        drawn=drawn_numbers,
        winning=tuple(int(n) for n in winning),
        matches=frozenset(selection) & frozenset(drawn_numbers),
        reward=Decimal(Web3.from_wei(int(reward_raw), "ether")),
        currency=Currency(int(currency_used)),
    )


class ResultCorrelator:
    def __init__(self, emitter: Any, owner: str, selection: Iterable[int],
                 timeout: Optional[float] = None, event_name: str = OUTCOME_EVENT) -> None:
        self._emitter = emitter
        self._owner = owner.lower()
        self._selection = frozenset(int(n) for n in selection)
        self._timeout = timeout
        self._event_name = event_name
        self._future: Optional[asyncio.Future] = None
        self._subscribed = False
        self.state = CorrelationState.IDLE
        self.releases = 0

    @property
    def subscribed(self) -> bool:
        return self._subscribed

    async def __aenter__(self) -> "ResultCorrelator":
        if self.state is not CorrelationState.IDLE:
            raise RuntimeError("A correlator can only be armed once")
        self._future = asyncio.get_running_loop().create_future()
        await self._emitter.on(self._event_name, self._handle_event)
        self._subscribed = True
        self.state = CorrelationState.ARMED
        logger.debug(f"Listening for {self._event_name} from {self._owner}")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self._release()
        if self.state is CorrelationState.ARMED:
            self.state = CorrelationState.FAILED
        if self._future is not None and not self._future.done():
            self._future.cancel()

    def _release(self) -> None:
        if not self._subscribed:
            return
        self._subscribed = False
        self._emitter.off(self._event_name, self._handle_event)
        self.releases += 1
        logger.debug(f"Stopped listening for {self._event_name}")

    def _matches(self, owner: Any, submitted: Sequence[Any]) -> bool:
        if str(owner).lower() != self._owner:
            return False
        return frozenset(int(n) for n in submitted) == self._selection

    def _handle_event(self, owner: Any, submitted: Sequence[Any], drawn: Sequence[Any],
                      winning: Sequence[Any], reward_raw: int, currency_used: int) -> None:
        if self.state is not CorrelationState.ARMED or not self._matches(owner, submitted):
            return
        self._release()
        try:
            outcome = decode_outcome(submitted, drawn, winning, reward_raw, currency_used)
        except (ValueError, TypeError) as e:
            self.state = CorrelationState.FAILED
            logger.warning(f"Undecodable {self._event_name} event: {e}")
            if self._future is not None and not self._future.done():
                self._future.set_exception(CorrelationError(f"Could not read the draw result: {e}"))
            return
        self.state = CorrelationState.RESOLVED
        if self._future is not None and not self._future.done():
            self._future.set_result(outcome)
        logger.info(f"Outcome received: drawn={list(outcome.drawn)} reward={outcome.reward}")

    async def wait(self) -> ResolvedOutcome:
        """Wait for the matching outcome event.

        Without a timeout this waits for as long as it takes.
        """
        if self._future is None:
            raise RuntimeError("Correlator is not armed")
        if self._timeout is None:
            return await asyncio.shield(self._future)
        try:
            return await asyncio.wait_for(asyncio.shield(self._future), self._timeout)
        except asyncio.TimeoutError:
            self._release()
            self.state = CorrelationState.ABANDONED
            logger.warning(f"No {self._event_name} event within {self._timeout}s")
            raise CorrelationError(
                f"No result received within {self._timeout:g} seconds. "
                "Check your wallet history before betting again."
            )
