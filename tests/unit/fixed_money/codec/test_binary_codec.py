from __future__ import annotations

import pytest

from fixed_money.codec.binary_codec import decode_money, encode_money
from fixed_money.domain.monetary.currency import UNKNOWN_CURRENCY, Currency, CurrencyType
from fixed_money.domain.monetary.currency_registry import USD
from fixed_money.domain.monetary.money import Money
from fixed_money.domain.numeric.fixed_decimal import INT32_MAX, INT32_MIN, FixedDecimal
from fixed_money.exceptions import InsufficientDataError, MalformedPayloadError
from tests.helpers.helper_money import create_points_registry


@pytest.mark.parametrize(
    "code, coefficient, exponent",
    [
        ("USD", 0, 0),
        ("USD", -12345, -3),
        ("EUR", 10**40 + 7, -20),
        ("JPY", -(2**70), 5),
        ("BTC", 1, -8),
        ("USD", 127, 0),
        ("USD", 128, 0),
        ("USD", -128, 0),
        ("USD", -129, 0),
        ("USD", 5, INT32_MIN),
        ("USD", 5, INT32_MAX),
    ],
)
def test_encode_decode_keeps_currency_coefficient_and_exponent(code, coefficient, exponent):
    original = Money.from_int(code, coefficient, exponent)

    decoded = decode_money(encode_money(original))

    assert decoded.currency is original.currency
    assert decoded.coefficient == coefficient
    assert decoded.exponent == exponent


def test_byte_layout():
    data = encode_money(Money.from_int("USD", 1, -2))
    assert data == b"USD" + b"\xff\xff\xff\xfe" + b"\x00\x00\x00\x01" + b"\x01"

    data = encode_money(Money.from_int("USD", -1, 0))
    assert data == b"USD" + b"\x00\x00\x00\x00" + b"\x00\x00\x00\x01" + b"\xff"

    data = encode_money(Money.from_int("USD", 256, 0))
    assert data[7:] == b"\x00\x00\x00\x02" + b"\x01\x00"


def test_unknown_currency_round_trip():
    decoded = decode_money(encode_money(Money(FixedDecimal(42, -1))))
    assert decoded.currency is UNKNOWN_CURRENCY


def test_unregistered_code_decodes_with_default_metadata():
    data = b"XYZ" + b"\x00\x00\x00\x00" + b"\x00\x00\x00\x01" + b"\x05"

    decoded = decode_money(data)

    assert decoded.currency.code == "XYZ"
    assert decoded.currency.grapheme == "XYZ"
    assert decoded.amount == FixedDecimal(5)
    assert decoded.format_currency() == "5.00XYZ"


def test_decode_uses_given_registry():
    registry = create_points_registry()
    original = Money.from_int("PTS", 1500, registry=registry)

    decoded = decode_money(encode_money(original), registry)

    assert decoded.currency is registry.get("PTS")
    assert decoded == original


@pytest.mark.parametrize("data", [b"", b"USD", b"USD\x00\x00\x00\x00"])
def test_short_payload_is_insufficient_data(data):
    with pytest.raises(InsufficientDataError) as exc_info:
        decode_money(data)

    assert isinstance(exc_info.value, MalformedPayloadError)
    assert exc_info.value.fallback.is_zero()
    assert exc_info.value.fallback.currency is UNKNOWN_CURRENCY


def test_truncated_payloads_are_malformed():
    data = encode_money(Money.from_int("USD", 1000))

    # Coefficient blob is missing its last byte
    with pytest.raises(MalformedPayloadError):
        decode_money(data[:-1])
    # Length prefix itself is incomplete
    with pytest.raises(MalformedPayloadError):
        decode_money(data[:9])
    # Trailing garbage after the blob
    with pytest.raises(MalformedPayloadError):
        decode_money(data + b"\x00")
    # Empty blob
    with pytest.raises(MalformedPayloadError):
        decode_money(data[:7] + b"\x00\x00\x00\x00")


def test_decode_accepts_bytearray_and_memoryview():
    data = encode_money(Money.from_int("USD", -5, -1))

    assert decode_money(bytearray(data)) == Money.from_int("USD", -5, -1)
    assert decode_money(memoryview(data)) == Money.from_int("USD", -5, -1)


def test_encode_rejects_codes_that_do_not_fit_the_layout():
    with pytest.raises(ValueError):
        encode_money(Money(FixedDecimal(1), Currency("ABCD", 2, CurrencyType.POINTS)))
    with pytest.raises(ValueError):
        encode_money(Money(FixedDecimal(1), Currency("€UR", 2, CurrencyType.FIAT)))

    assert encode_money(Money(FixedDecimal(1), USD))[:3] == b"USD"
