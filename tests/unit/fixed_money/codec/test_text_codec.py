from __future__ import annotations

import pytest

from fixed_money.codec.text_codec import money_from_text, money_to_text
from fixed_money.domain.monetary.currency import UNKNOWN_CURRENCY
from fixed_money.domain.monetary.currency_registry import USD
from fixed_money.domain.monetary.money import Money
from fixed_money.domain.numeric.fixed_decimal import FixedDecimal
from fixed_money.exceptions import InvalidAmountError
from tests.helpers.helper_money import usd


def test_money_to_text_is_plain_amount():
    assert money_to_text(Money.from_int("USD", -12345, -3)) == "-12.345"
    assert money_to_text(usd("1234567.89")) == "1234567.89"
    assert money_to_text(usd("2.50")) == "2.5"
    assert money_to_text(Money.from_int("USD", 12, 3)) == "12000"


def test_money_from_text_has_unknown_currency():
    money = money_from_text("-12.345")

    assert money.currency is UNKNOWN_CURRENCY
    assert money.amount == FixedDecimal(-12345, -3)
    assert money_from_text(b"42.5").amount == FixedDecimal(425, -1)


def test_text_round_trip_keeps_amount():
    original = usd("-98765.4321")

    decoded = money_from_text(money_to_text(original))

    assert decoded.amount == original.amount
    assert decoded.update_currency("USD") == original
    assert decoded.update_currency("USD").currency is USD


@pytest.mark.parametrize("text", ["abc", "", "$12.00", "NaN", "1_000", "1e9999999999"])
def test_money_from_text_rejects_invalid_text(text):
    with pytest.raises(InvalidAmountError) as exc_info:
        money_from_text(text)

    assert str(exc_info.value).startswith(f"Error decoding string '{text}'")
    assert exc_info.value.fallback.is_zero()
    assert exc_info.value.fallback.currency is UNKNOWN_CURRENCY
