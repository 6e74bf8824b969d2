"""Bet session: selection state, pre-flight checks and the submission sequence."""

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from queno.constants import MIN_BET, Currency
from queno.correlator import ResolvedOutcome, ResultCorrelator
from queno.errors import CorrelationError, ErrorDecoder, SubmissionError, ValidationError
from queno.ledger import HistoryEntry, HistoryLedger, Totals
from queno.request import BetRequest, build_request
from queno.selection import Selection
from queno.validator import RejectReason, parse_amount, validate_bet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingRequest:
    selection: Tuple[int, ...]
    amount: Decimal
    currency: Currency
    submitted_at: datetime


class BetSession:
    """One player's game state between wallet connect and disconnect.

    ``client`` is the chain collaborator: it exposes ``address``,
    ``lottery`` (betting call plus outcome-event ``on``/``off``),
    ``token`` (``approve``) and ``abis`` for error decoding.
    """

    def __init__(self, result_timeout: Optional[float] = None,
                 rng: Optional[random.Random] = None) -> None:
        self.result_timeout = result_timeout
        self._rng = rng
        self.client: Any = None
        self.address = ""
        self.lottery: Any = None
        self.token: Any = None
        self.decoder = ErrorDecoder()

        self.selection = Selection()
        self.auto_pick = False
        self.amount: Any = MIN_BET
        self.currency = Currency.NATIVE
        self.drawn: Tuple[int, ...] = ()
        self.outcome: Optional[ResolvedOutcome] = None
        self.final_currency = self.currency
        self.error_message = ""
        self.pending: Optional[PendingRequest] = None
        self.history = HistoryLedger()
        self.show_all_history = False

    # -- lifecycle --

    @property
    def wallet_connected(self) -> bool:
        return bool(self.address)

    def init(self, client: Any) -> None:
        self.client = client
        self.address = client.address
        self.lottery = client.lottery
        self.token = client.token
        self.decoder = ErrorDecoder(getattr(client, "abis", ()))
        logger.info(f"Wallet connected: {self.address}")

    def teardown(self) -> None:
        self.client = None
        self.address = ""
        self.lottery = None
        self.token = None
        self.history.clear()
        self.show_all_history = False
        self.reset()
        logger.info("Wallet disconnected")

    # -- selection --

    @property
    def locked(self) -> bool:
        return self.pending is not None or self.outcome is not None

    def toggle(self, n: int) -> bool:
        if self.auto_pick or self.locked:
            return False
        return self.selection.toggle(n)

    def auto_pick_numbers(self) -> Tuple[int, ...]:
        return self.selection.auto_pick(self._rng)

    def set_auto_pick(self, enabled: bool) -> None:
        if self.locked:
            return
        self.auto_pick = enabled
        if enabled:
            self.auto_pick_numbers()

    def reset(self) -> None:
        """Clear the board. Wallet and history are kept."""
        self.selection.clear()
        self.drawn = ()
        self.outcome = None
        self.final_currency = self.currency
        self.error_message = ""
        self.auto_pick = False

    # -- derived --

    def totals(self) -> Dict[Currency, Totals]:
        return self.history.aggregate()

    def visible_history(self) -> List[HistoryEntry]:
        return self.history.visible(self.show_all_history)

    def preview_request(self) -> Optional[BetRequest]:
        amount = parse_amount(self.amount)
        if amount is None or not self.selection:
            return None
        return build_request(self.selection, amount, self.currency)

    # -- submission --

    def check_state(self) -> Optional[RejectReason]:
        return validate_bet(
            pending=self.pending is not None,
            wallet_connected=self.wallet_connected,
            lottery_ready=self.lottery is not None,
            token_ready=self.token is not None,
            selection=self.selection,
            amount=self.amount,
        )

    def _reject(self, reason: RejectReason) -> ValidationError:
        self.error_message = reason.message
        return ValidationError(reason, reason.message)

    async def place_bet(self) -> ResolvedOutcome:
        """Submit the current selection and wait for its on-chain outcome.

        Raises ValidationError before anything is sent, SubmissionError when
        the approval or betting call fails and CorrelationError when the
        outcome event does not arrive within ``result_timeout``.
        """
        reason = self.check_state()
        if reason is not None:
            raise self._reject(reason)

        if self.auto_pick:
            self.auto_pick_numbers()
        amount = parse_amount(self.amount)
        request = build_request(self.selection, amount, self.currency)

        self.pending = PendingRequest(
            selection=request.selection,
            amount=amount,
            currency=request.currency,
            submitted_at=datetime.now(timezone.utc),
        )
        self.error_message = ""
        lottery = self.lottery
        try:
            if request.needs_approval:
                logger.info(f"Approving {request.token_amount} token units for {lottery.address}")
                approval = await self.token.approve(lottery.address, request.token_amount)
                await approval.wait()

            async with ResultCorrelator(lottery, self.address, request.selection,
                                        timeout=self.result_timeout) as correlator:
                tx = await lottery.generate_lottery_numbers(
                    list(request.selection),
                    request.token_amount,
                    request.discriminant,
                    request.value,
                )
                logger.info(f"Numbers sent {list(request.selection)}, waiting for response")
                await tx.wait()
                outcome = await correlator.wait()
        except CorrelationError as e:
            self.error_message = str(e)
            raise
        except Exception as e:
            self.error_message = self.decoder.decode(e)
            logger.warning(f"Bet failed: {self.error_message}")
            raise SubmissionError(self.error_message) from e
        finally:
            self.pending = None

        self.drawn = outcome.drawn
        self.outcome = outcome
        self.final_currency = request.currency
        self.history.append(HistoryEntry(
            selection=outcome.selection,
            drawn=outcome.drawn,
            amount=request.total_stake,
            currency=request.currency,
            reward=outcome.reward,
        ))
        return outcome
