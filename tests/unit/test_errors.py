"""Tests for turning raw failures into readable messages."""

from requests.exceptions import ConnectionError, Timeout
from web3.exceptions import ContractCustomError, ContractLogicError, TimeExhausted, Web3RPCError

from queno.abis import LOTTERY_ABI, TOKEN_ABI
from queno.errors import ErrorDecoder, TransactionFailed, ValidationError, error_selectors
from queno.validator import RejectReason

decoder = ErrorDecoder([LOTTERY_ABI, TOKEN_ABI])


def selector_for(name: str) -> str:
    return next(sel for sel, n in error_selectors([TOKEN_ABI]).items() if n == name)


class TestErrorSelectors:
    def test_known_openzeppelin_selector(self):
        # keccak("ERC20InsufficientAllowance(address,uint256,uint256)")[:4]
        assert selector_for("ERC20InsufficientAllowance") == "fb8f41b2"

    def test_functions_and_events_ignored(self):
        assert error_selectors([LOTTERY_ABI]) == {}


class TestDecode:
    def test_custom_error_by_name(self):
        data = "0x" + selector_for("ERC20InsufficientBalance") + "00" * 96
        exc = ContractCustomError(data, data=data)
        assert decoder.decode(exc) == "Contract error: ERC20InsufficientBalance"

    def test_unknown_custom_error(self):
        exc = ContractCustomError("0xdeadbeef", data="0xdeadbeef")
        assert "unknown custom error" in decoder.decode(exc)

    def test_revert_reason(self):
        exc = ContractLogicError("execution reverted: Not enough liquidity")
        assert decoder.decode(exc) == "Transaction reverted: execution reverted: Not enough liquidity"

    def test_reverted_receipt(self):
        assert decoder.decode(TransactionFailed("0x01")) == "Transaction 0x01 reverted"

    def test_receipt_timeout(self):
        assert decoder.decode(TimeExhausted()) == "Transaction was not confirmed in time"

    def test_user_rejection(self):
        exc = Web3RPCError("denied", rpc_response={"error": {"code": 4001, "message": "User denied"}})
        assert decoder.decode(exc) == "Transaction rejected by user"

    def test_node_error_message(self):
        exc = Web3RPCError(
            "err", rpc_response={"error": {"code": -32000, "message": "insufficient funds for gas * price + value"}}
        )
        assert decoder.decode(exc) == "insufficient funds for gas * price + value"

    def test_connection_errors(self):
        assert decoder.decode(ConnectionError("refused")) == "RPC connection error: refused"
        assert decoder.decode(Timeout("slow")).startswith("RPC connection error")

    def test_own_errors_pass_through(self):
        exc = ValidationError(RejectReason.NO_SELECTION, RejectReason.NO_SELECTION.message)
        assert decoder.decode(exc) == "No number selected."

    def test_fallback_to_class_name(self):
        assert decoder.decode(KeyError()) == "KeyError"
