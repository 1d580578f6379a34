from __future__ import annotations

import sqlite3
from decimal import Decimal
from fractions import Fraction

import numpy as np
import pytest

from fixed_money.codec.sql_adapter import NullMoney, money_sql_value, register_sqlite_adapters, scan_money, unquote_if_quoted
from fixed_money.domain.monetary.currency import UNKNOWN_CURRENCY
from fixed_money.domain.monetary.money import Money
from fixed_money.domain.numeric.fixed_decimal import FixedDecimal
from fixed_money.exceptions import InvalidAmountError, NonFiniteValueError
from tests.helpers.helper_money import usd

D = FixedDecimal.from_string


@pytest.mark.parametrize(
    "value, expected",
    [
        (1.5, "1.5"),
        (0, "0"),
        (42, "42"),
        (Decimal("12.340"), "12.34"),
        ("12.34", "12.34"),
        ('"12.34"', "12.34"),
        (b'"-0.5"', "-0.5"),
        (bytearray(b"7.25"), "7.25"),
        (memoryview(b"-3"), "-3"),
    ],
)
def test_scan_money(value, expected):
    money = scan_money(value)

    assert money.currency is UNKNOWN_CURRENCY
    assert money.amount == D(expected)


def test_scan_money_keeps_decimal_exponent():
    money = scan_money(Decimal("12.340"))
    assert (money.coefficient, money.exponent) == (12340, -3)


@pytest.mark.parametrize("value", [None, True, [1], object()])
def test_scan_money_rejects_unsupported_types(value):
    with pytest.raises(TypeError):
        scan_money(value)


def test_scan_money_rejects_invalid_values():
    with pytest.raises(InvalidAmountError) as exc_info:
        scan_money("abc")
    assert exc_info.value.fallback.is_zero()

    with pytest.raises(NonFiniteValueError):
        scan_money(float("nan"))

    # Exponent beyond the signed 32-bit range is reported, not a plain ValueError
    with pytest.raises(InvalidAmountError) as exc_info:
        scan_money(b'"1e3000000000"')
    assert exc_info.value.fallback.is_zero()


def test_scan_money_accepts_numpy_scalars_and_other_reals():
    assert scan_money(np.float32(0.1)).amount == D("0.1")
    assert scan_money(np.float64(-2.5)).amount == D("-2.5")
    assert scan_money(np.int64(42)).amount == D("42")
    assert scan_money(Fraction(1, 4)).amount == D("0.25")
    assert scan_money(np.float32(0.1)).currency is UNKNOWN_CURRENCY

    with pytest.raises(NonFiniteValueError):
        scan_money(np.float32("nan"))


def test_unquote_strips_one_pair_only():
    assert unquote_if_quoted('"1"') == "1"
    assert unquote_if_quoted('""1""') == '"1"'
    assert unquote_if_quoted('""') == '""'
    assert unquote_if_quoted(b"12") == "12"


def test_money_sql_value():
    assert money_sql_value(usd("1.50")) == "1.5"
    assert money_sql_value(Money.from_int("USD", -12345, -3)) == "-12.345"


def test_null_money():
    null = NullMoney.scan(None)
    assert not null.valid
    assert null.value() is None
    assert null.money.is_zero()

    present = NullMoney.scan("1.5")
    assert present.valid
    assert present.value() == "1.5"
    assert present.money.currency is UNKNOWN_CURRENCY

    # A zero amount is not NULL
    assert NullMoney.scan(0).valid
    assert NullMoney() == NullMoney(Money.zero(), False)


def test_sqlite_round_trip():
    register_sqlite_adapters()
    connection = sqlite3.connect(":memory:", detect_types=sqlite3.PARSE_DECLTYPES)
    try:
        # "MONEY TEXT": the first word selects the converter, TEXT keeps full precision in storage
        connection.execute("CREATE TABLE payments (id INTEGER, amount MONEY TEXT)")
        connection.executemany(
            "INSERT INTO payments VALUES (?, ?)",
            [
                (1, Money.from_int("USD", -12345, -3)),
                (2, NullMoney()),
                (3, NullMoney(usd("123456789012345678901234567890.12"), True)),
            ],
        )
        rows = connection.execute("SELECT id, amount FROM payments ORDER BY id").fetchall()
    finally:
        connection.close()

    assert rows[0][1] == Money(D("-12.345"))
    assert rows[1][1] is None
    assert rows[2][1].amount == D("123456789012345678901234567890.12")
    assert rows[2][1].update_currency("USD") == usd("123456789012345678901234567890.12")
