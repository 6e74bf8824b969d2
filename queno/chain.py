"""web3-backed lottery and token contract bindings.

Blocking web3 calls run in the default executor so the event loop stays
free while a bet is in flight.  The lottery binding also acts as the
outcome-event emitter: handlers registered with ``on`` are fed from a
log-polling task that runs only while at least one handler is registered.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Any, Callable, Dict, List

import requests
from eth_account import Account
from web3 import Web3
from web3.exceptions import Web3Exception

from queno.abis import LOTTERY_ABI, TOKEN_ABI, event_input_names, load_abi
from queno.config import Settings
from queno.errors import TransactionFailed

logger = logging.getLogger(__name__)

Handler = Callable[..., None]


async def _run(fn: Callable[[], Any]) -> Any:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, fn)


def build_web3(settings: Settings) -> Web3:
    session = requests.Session()
    session.headers.update({"Content-Type": "application/json"})
    if settings.rpc_user and settings.rpc_password:
        session.auth = (settings.rpc_user, settings.rpc_password)
    provider = Web3.HTTPProvider(
        settings.rpc_url,
        request_kwargs={"timeout": settings.rpc_timeout},
        session=session,
    )
    return Web3(provider)


class PendingTransaction:
    def __init__(self, w3: Web3, tx_hash: Any, timeout: float, poll_interval: float) -> None:
        self._w3 = w3
        self.tx_hash = tx_hash
        self._timeout = timeout
        self._poll_interval = poll_interval

    @property
    def hash_hex(self) -> str:
        return Web3.to_hex(self.tx_hash)

    async def wait(self) -> Any:
        """Wait until the transaction is mined. Raises TransactionFailed if it reverted."""
        logger.info(f"Waiting for tx {self.hash_hex[:18]}... to confirm")
        receipt = await _run(lambda: self._w3.eth.wait_for_transaction_receipt(
            self.tx_hash, timeout=self._timeout, poll_latency=self._poll_interval))
        if receipt["status"] != 1:
            raise TransactionFailed(self.hash_hex)
        logger.info(f"Confirmed in block {receipt['blockNumber']}")
        return receipt


class _ContractBinding:
    def __init__(self, w3: Web3, account: Any, address: str, abi: List[Dict[str, Any]],
                 receipt_timeout: float = 600, poll_interval: float = 2.0) -> None:
        self._w3 = w3
        self._account = account
        self.abi = abi
        self.address = Web3.to_checksum_address(address)
        self.contract = w3.eth.contract(address=self.address, abi=abi)
        self.receipt_timeout = receipt_timeout
        self.poll_interval = poll_interval

    async def _transact(self, fn: Any, value: int = 0) -> PendingTransaction:
        sender = self._account.address

        def send() -> Any:
            tx = fn.build_transaction({
                "from": sender,
                "value": value,
                "nonce": self._w3.eth.get_transaction_count(sender, "pending"),
                "chainId": self._w3.eth.chain_id,
            })
            signed = self._account.sign_transaction(tx)
            return self._w3.eth.send_raw_transaction(signed.raw_transaction)

        tx_hash = await _run(send)
        pending = PendingTransaction(self._w3, tx_hash, self.receipt_timeout, self.poll_interval)
        logger.info(f"Submitted tx {pending.hash_hex}")
        return pending


class TokenContract(_ContractBinding):
    async def balance_of(self, address: str) -> Decimal:
        checksum = Web3.to_checksum_address(address)
        raw = await _run(lambda: self.contract.functions.balanceOf(checksum).call())
        return Decimal(Web3.from_wei(raw, "ether"))

    async def approve(self, spender: str, amount: int) -> PendingTransaction:
        fn = self.contract.functions.approve(Web3.to_checksum_address(spender), int(amount))
        return await self._transact(fn)


class LotteryContract(_ContractBinding):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._handlers: Dict[str, List[Handler]] = {}
        self._pollers: Dict[str, asyncio.Task] = {}

    async def generate_lottery_numbers(self, selection: List[int], token_amount: int,
                                       currency: int, value: int) -> PendingTransaction:
        fn = self.contract.functions.generateLotteryNumbers(
            [int(n) for n in selection], int(token_amount), int(currency))
        return await self._transact(fn, value=int(value))

    def listener_count(self, event_name: str) -> int:
        return len(self._handlers.get(event_name, []))

    async def on(self, event_name: str, handler: Handler) -> None:
        """Register handler for event_name. Logs are scanned from the current block on."""
        from_block = await _run(lambda: self._w3.eth.block_number)
        self._handlers.setdefault(event_name, []).append(handler)
        if event_name not in self._pollers:
            self._pollers[event_name] = asyncio.get_running_loop().create_task(
                self._poll(event_name, from_block))

    def off(self, event_name: str, handler: Handler) -> None:
        handlers = self._handlers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)
        if not handlers:
            self._handlers.pop(event_name, None)
            poller = self._pollers.pop(event_name, None)
            if poller is not None:
                poller.cancel()

    def _dispatch(self, event_name: str, names: List[str], log: Any) -> None:
        args = [log["args"][name] for name in names]
        for handler in list(self._handlers.get(event_name, [])):
            try:
                handler(*args)
            except Exception:
                logger.exception(f"{event_name} handler failed")

    async def _poll(self, event_name: str, from_block: int) -> None:
        names = event_input_names(self.abi, event_name)
        owner = self._account.address
        event = getattr(self.contract.events, event_name)
        while True:
            try:
                latest = await _run(lambda: self._w3.eth.block_number)
                if latest >= from_block:
                    start = from_block
                    logs = await _run(lambda: event.get_logs(
                        argument_filters={"owner": owner}, from_block=start, to_block=latest))
                    for log in logs:
                        self._dispatch(event_name, names, log)
                    from_block = latest + 1
            except (requests.exceptions.RequestException, Web3Exception) as e:
                logger.warning(f"Polling {event_name} logs failed: {e}")
            await asyncio.sleep(self.poll_interval)


class ChainClient:
    """Signing wallet plus the lottery and token bindings."""

    def __init__(self, w3: Web3, account: Any, lottery: LotteryContract, token: TokenContract) -> None:
        self.w3 = w3
        self.account = account
        self.lottery = lottery
        self.token = token

    @classmethod
    def from_settings(cls, settings: Settings, private_key: str) -> "ChainClient":
        w3 = build_web3(settings)
        account = Account.from_key(private_key)
        lottery_abi = load_abi(settings.lottery_abi) if settings.lottery_abi else LOTTERY_ABI
        token_abi = load_abi(settings.token_abi) if settings.token_abi else TOKEN_ABI
        opts = {"receipt_timeout": settings.receipt_timeout, "poll_interval": settings.poll_interval}
        lottery = LotteryContract(w3, account, settings.lottery_address, lottery_abi, **opts)
        token = TokenContract(w3, account, settings.token_address, token_abi, **opts)
        return cls(w3, account, lottery, token)

    @property
    def address(self) -> str:
        return self.account.address

    @property
    def abis(self) -> List[List[Dict[str, Any]]]:
        return [self.lottery.abi, self.token.abi]

    async def block_number(self) -> int:
        return await _run(lambda: self.w3.eth.block_number)

    async def native_balance(self) -> Decimal:
        raw = await _run(lambda: self.w3.eth.get_balance(self.address))
        return Decimal(Web3.from_wei(raw, "ether"))

    async def token_balance(self) -> Decimal:
        return await self.token.balance_of(self.address)
