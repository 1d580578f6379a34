from __future__ import annotations

# Convert between pandas DataFrames (e.g. results of `pd.read_sql`) and Money values.
# Amount cells follow the database scan contract of `sql_adapter.scan_money`.

import logging
from collections.abc import Iterable

import pandas as pd

from fixed_money.codec.sql_adapter import NullMoney, money_sql_value, scan_money
from fixed_money.domain.monetary.currency_registry import CurrencyRegistry
from fixed_money.domain.monetary.money import Money

logger = logging.getLogger(__name__)


def moneys_from_dataframe(
    df: pd.DataFrame,
    amount_column: str = "amount",
    currency_column: str | None = None,
    currency_code: str | None = None,
    registry: CurrencyRegistry | None = None,
) -> list[NullMoney]:
    """Read one NullMoney per row of $df.

    Args:
        df: Source data with one amount per row.
        amount_column: Column with amounts as floats, ints, Decimals or decimal text.
            Missing cells (None, NaN, NA) become invalid NullMoney.
        currency_column: Optional column with a currency code per row.
        currency_code: Optional currency code used for all rows. Mutually exclusive with $currency_column.
        registry: Registry used to resolve currency codes (default registry if None).

    Returns:
        List of NullMoney in row order. Rows without a currency stay in UNKNOWN_CURRENCY.

    Raises:
        ValueError: If $df is not a DataFrame, a column is missing, or both currency sources are given.
        UnknownCurrencyError: If a currency code is not registered.
        InvalidAmountError: If an amount cell cannot be parsed.
    """
    # Check: $df must be a pandas DataFrame
    if not isinstance(df, pd.DataFrame):
        raise ValueError(f"Cannot call `moneys_from_dataframe` because $df is not a pandas DataFrame (got type '{type(df).__name__}')")

    # Check: required columns present
    missing = [c for c in (amount_column, currency_column) if c is not None and c not in df.columns]
    if missing:
        raise ValueError(f"Cannot call `moneys_from_dataframe` because $df is missing column(s): {', '.join(missing)}")

    # Raise: only one source of currency codes
    if currency_column is not None and currency_code is not None:
        raise ValueError("Cannot call `moneys_from_dataframe` because both $currency_column and $currency_code are provided")

    # tolist() converts numpy scalars into plain Python values
    amounts = df[amount_column].tolist()
    codes = df[currency_column].tolist() if currency_column is not None else [currency_code] * len(amounts)

    result: list[NullMoney] = []
    for amount, code in zip(amounts, codes):
        if pd.isna(amount):
            result.append(NullMoney())
            continue

        money = scan_money(amount)
        if code is not None and not pd.isna(code):
            money = money.update_currency(str(code), registry)
        result.append(NullMoney(money=money, valid=True))

    logger.debug(f"Read {len(result)} Money value(s) from DataFrame column '{amount_column}'")
    return result


def moneys_to_dataframe(
    moneys: Iterable[Money | NullMoney],
    amount_column: str = "amount",
    currency_column: str = "currency",
) -> pd.DataFrame:
    """Build a DataFrame with plain-text amounts and currency codes.

    Text keeps full precision, so the frame can be written with `DataFrame.to_sql` and read back
    with `moneys_from_dataframe`. Invalid NullMoney values produce None in both columns.
    """
    amounts: list[str | None] = []
    codes: list[str | None] = []
    for item in moneys:
        if isinstance(item, NullMoney):
            if not item.valid:
                amounts.append(None)
                codes.append(None)
                continue
            item = item.money

        if not isinstance(item, Money):
            raise TypeError(f"Cannot call `moneys_to_dataframe` because an item is not Money or NullMoney (got type '{type(item).__name__}')")

        amounts.append(money_sql_value(item))
        codes.append(item.currency.code)

    return pd.DataFrame({amount_column: pd.Series(amounts, dtype=object), currency_column: pd.Series(codes, dtype=object)})
