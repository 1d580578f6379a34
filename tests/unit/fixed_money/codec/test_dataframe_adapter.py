from __future__ import annotations

import pandas as pd
import pytest

from fixed_money.codec.dataframe_adapter import moneys_from_dataframe, moneys_to_dataframe
from fixed_money.codec.sql_adapter import NullMoney
from fixed_money.domain.monetary.currency import UNKNOWN_CURRENCY
from fixed_money.domain.monetary.currency_registry import JPY
from fixed_money.domain.monetary.money import Money
from fixed_money.domain.numeric.fixed_decimal import FixedDecimal
from fixed_money.exceptions import UnknownCurrencyError
from tests.helpers.helper_money import create_points_registry, eur, usd

D = FixedDecimal.from_string


def test_moneys_from_dataframe_with_currency_column():
    df = pd.DataFrame(
        {
            "amount": [1.5, None, "12.340", 7],
            "currency": ["USD", "USD", "EUR", None],
        },
    )

    result = moneys_from_dataframe(df, currency_column="currency")

    assert [item.valid for item in result] == [True, False, True, True]
    assert result[0].money == usd("1.5")
    assert result[2].money == eur("12.34")
    assert result[3].money.currency is UNKNOWN_CURRENCY
    assert result[3].money.amount == D("7")


def test_moneys_from_dataframe_with_fixed_currency_and_nan():
    df = pd.DataFrame({"price": [0.1, float("nan"), 1234.0]})

    result = moneys_from_dataframe(df, amount_column="price", currency_code="JPY")

    assert result[0].money.currency is JPY
    assert result[0].money.amount == D("0.1")
    assert not result[1].valid
    assert result[2].money.format_currency() == "¥1,234"


def test_moneys_from_dataframe_with_custom_registry():
    df = pd.DataFrame({"amount": [100, 250]})
    registry = create_points_registry()

    result = moneys_from_dataframe(df, currency_code="PTS", registry=registry)

    assert [item.money.currency for item in result] == [registry.get("PTS")] * 2

    with pytest.raises(UnknownCurrencyError):
        moneys_from_dataframe(df, currency_code="PTS")


def test_moneys_from_dataframe_validates_arguments():
    df = pd.DataFrame({"amount": [1], "currency": ["USD"]})

    with pytest.raises(ValueError):
        moneys_from_dataframe([1, 2])
    with pytest.raises(ValueError):
        moneys_from_dataframe(df, amount_column="value")
    with pytest.raises(ValueError):
        moneys_from_dataframe(df, currency_column="ccy")
    with pytest.raises(ValueError):
        moneys_from_dataframe(df, currency_column="currency", currency_code="USD")


def test_moneys_to_dataframe():
    df = moneys_to_dataframe([usd("12.345"), NullMoney(), NullMoney(Money.from_int("EUR", 5), True)])

    assert list(df.columns) == ["amount", "currency"]
    assert df["amount"].tolist() == ["12.345", None, "5"]
    assert df["currency"].tolist() == ["USD", None, "EUR"]

    with pytest.raises(TypeError):
        moneys_to_dataframe([1.5])


def test_dataframe_round_trip_keeps_precision():
    moneys = [usd("0.1"), usd("-98765432109876543210.123456789"), NullMoney()]

    result = moneys_from_dataframe(moneys_to_dataframe(moneys), currency_column="currency")

    assert result[0].money == usd("0.1")
    assert result[1].money == usd("-98765432109876543210.123456789")
    assert not result[2].valid
