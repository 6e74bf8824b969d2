from typing import Any, Dict, Iterable, List, Optional

from requests.exceptions import ConnectionError, RequestException, Timeout
from web3 import Web3
from web3.exceptions import ContractCustomError, ContractLogicError, TimeExhausted, Web3RPCError


USER_REJECTED_CODE = 4001


class QuenoError(Exception):
    """Base class for everything a single bet attempt can fail with."""


class ValidationError(QuenoError):
    """Local pre-flight rejection. Never touches the network."""

    def __init__(self, reason: Any, message: Optional[str] = None) -> None:
        self.reason = reason
        super().__init__(message or str(reason))


class SubmissionError(QuenoError):
    """Approval or betting call rejected, reverted or otherwise failed."""


class CorrelationError(QuenoError):
    """The betting call was confirmed but its outcome event was not observed."""


class TransactionFailed(RuntimeError):
    def __init__(self, tx_hash: str) -> None:
        self.tx_hash = tx_hash
        super().__init__(f"Transaction {tx_hash} reverted")


def _error_signature(entry: Dict[str, Any]) -> str:
    types = ",".join(inp["type"] for inp in entry.get("inputs", []))
    return f"{entry['name']}({types})"


def error_selectors(abis: Iterable[List[Dict[str, Any]]]) -> Dict[str, str]:
    """Map 4-byte selectors (hex, no prefix) of custom errors to their names."""
    selectors: Dict[str, str] = {}
    for abi in abis:
        for entry in abi:
            if entry.get("type") != "error":
                continue
            selector = bytes(Web3.keccak(text=_error_signature(entry)))[:4].hex()
            selectors[selector] = entry["name"]
    return selectors


def _strip_hex(data: Any) -> str:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data).hex()
    text = str(data or "").lower()
    return text[2:] if text.startswith("0x") else text


class ErrorDecoder:
    """Turns raw call/transport failures into a message a player can act on."""

    def __init__(self, abis: Iterable[List[Dict[str, Any]]] = ()) -> None:
        self.selectors = error_selectors(abis)

    def decode(self, exc: BaseException) -> str:
        if isinstance(exc, QuenoError):
            return str(exc)
        if isinstance(exc, ContractCustomError):
            name = self.selectors.get(_strip_hex(exc.data)[:8])
            if name:
                return f"Contract error: {name}"
            return "Contract reverted with an unknown custom error"
        if isinstance(exc, ContractLogicError):
            message = exc.message or "execution reverted"
            return f"Transaction reverted: {message}"
        if isinstance(exc, TransactionFailed):
            return str(exc)
        if isinstance(exc, TimeExhausted):
            return "Transaction was not confirmed in time"
        if isinstance(exc, Web3RPCError):
            err = (exc.rpc_response or {}).get("error") or {}
            if isinstance(err, dict) and err.get("code") == USER_REJECTED_CODE:
                return "Transaction rejected by user"
            if isinstance(err, dict) and err.get("message"):
                return str(err["message"])
            return exc.message or str(exc)
        if isinstance(exc, (ConnectionError, Timeout, RequestException)):
            return f"RPC connection error: {exc}"
        return str(exc) or exc.__class__.__name__
