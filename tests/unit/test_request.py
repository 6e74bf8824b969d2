"""Tests for betting-call construction."""

from decimal import Decimal

from queno.constants import Currency
from queno.request import build_request
from tests.conftest import wei


class TestNativeCurrency:
    def test_reference_bet(self):
        req = build_request([3, 7, 19, 32], Decimal("0.001"), Currency.NATIVE)
        assert req.total_stake == Decimal("0.004")
        assert req.value == wei("0.0043")
        assert req.token_amount == 0
        assert req.discriminant == 0
        assert req.needs_approval is False
        assert req.selection == (3, 7, 19, 32)

    def test_surcharge_independent_of_selection_size(self):
        one = build_request([1], Decimal("1"), Currency.NATIVE)
        four = build_request([1, 2, 3, 4], Decimal("1"), Currency.NATIVE)
        assert one.value - wei("1") == four.value - wei("4") == wei("0.0003")


class TestTokenCurrency:
    def test_stake_goes_to_token_amount(self):
        req = build_request([3, 7, 19, 32], Decimal("0.001"), Currency.TOKEN)
        assert req.token_amount == wei("0.004")
        assert req.value == wei("0.0003")
        assert req.discriminant == 1
        assert req.needs_approval is True


class TestStakeArithmetic:
    def test_no_float_drift(self):
        req = build_request([1, 2, 3], Decimal("0.1"), Currency.NATIVE)
        assert req.total_stake == Decimal("0.3")
        assert req.value == 300300000000000000

    def test_max_bet(self):
        req = build_request([1, 2, 3, 4], Decimal("5"), Currency.NATIVE)
        assert req.total_stake == Decimal("20")
        assert req.value == wei("20.0003")
