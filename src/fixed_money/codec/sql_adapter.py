"""Database adapter for Money.

Values read from a database carry no currency: scanned Money is always in
`UNKNOWN_CURRENCY` and should be finalized with `Money.update_currency`. Values written to a
database are the plain decimal text, which keeps full precision in any column type.
"""
from __future__ import annotations

import logging
import math
import numbers
import sqlite3
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from fixed_money.domain.monetary.money import Money
from fixed_money.domain.numeric.fixed_decimal import FixedDecimal
from fixed_money.exceptions import InvalidAmountError

logger = logging.getLogger(__name__)


def unquote_if_quoted(value: str | bytes | bytearray | memoryview) -> str:
    """Return $value as text, without one surrounding pair of double quotes.

    Raises:
        TypeError: If $value is not text or bytes.
    """
    if isinstance(value, str):
        raw = value.encode("utf-8")
    elif isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    else:
        raise TypeError(f"Could not convert value '{value!r}' to byte array of type '{type(value).__name__}'")

    # If the amount is quoted, strip the quotes
    if len(raw) > 2 and raw[:1] == b'"' and raw[-1:] == b'"':
        raw = raw[1:-1]
    return raw.decode("utf-8", errors="replace")


def _real_to_fixed_decimal(value: numbers.Real) -> FixedDecimal:
    """Convert a non-builtin real number (numpy float32, Fraction, ...).

    numpy prints the shortest decimal for the scalar's own precision, so float32(0.1) is 0.1
    rather than 0.100000001490116.
    """
    number = float(value)
    if not math.isfinite(number):
        return FixedDecimal.from_float(number)

    try:
        return FixedDecimal.from_string(str(value))
    except InvalidAmountError:
        # e.g. Fraction prints as "1/4"
        return FixedDecimal.from_float(number)


def scan_money(value: Any) -> Money:
    """Convert a database value into Money in `UNKNOWN_CURRENCY`.

    Accepts floats (Python floats and numpy float32/float64 scalars), ints,
    `Decimal` (NUMERIC columns of most drivers), and text or bytes optionally wrapped in one
    pair of double quotes.

    Raises:
        TypeError: If $value has an unsupported type.
        InvalidAmountError: If text cannot be parsed ($fallback is zero Money).
        NonFiniteValueError: If a float is NaN or infinite.
    """
    if isinstance(value, bool):
        raise TypeError("Could not convert value of type 'bool' to Money")

    if isinstance(value, float):
        return Money(FixedDecimal.from_float(value))

    # At least sqlite sends 0 as an int even in REAL/NUMERIC columns
    if isinstance(value, int):
        return Money(FixedDecimal(value, 0))

    if isinstance(value, Decimal):
        return Money(FixedDecimal.from_decimal(value))

    # numpy scalars (e.g. cells of a float32 column) are not int/float subclasses
    if isinstance(value, numbers.Integral):
        return Money(FixedDecimal(int(value), 0))
    if isinstance(value, numbers.Real):
        return Money(_real_to_fixed_decimal(value))

    text = unquote_if_quoted(value)
    try:
        amount = FixedDecimal.from_string(text)
    except InvalidAmountError as e:
        logger.warning(f"Cannot scan Money from database value '{text}': {e}")
        raise InvalidAmountError(str(e), fallback=Money.zero()) from e
    return Money(amount)


def money_sql_value(money: Money) -> str:
    """Return the database representation of $money (plain decimal text)."""
    return str(money.amount)


@dataclass(frozen=True)
class NullMoney:
    """Money that may be NULL in the database.

    Attributes:
        money: The value when $valid is True; a zero Money otherwise.
        valid: False represents NULL, which is different from a zero amount.
    """

    money: Money = field(default_factory=Money.zero)
    valid: bool = False

    @classmethod
    def scan(cls, value: Any) -> NullMoney:
        """Convert a database value, mapping None to an invalid (NULL) NullMoney."""
        if value is None:
            return cls()
        return cls(money=scan_money(value), valid=True)

    def value(self) -> str | None:
        """Return the database representation, or None for NULL."""
        if not self.valid:
            return None
        return money_sql_value(self.money)


def register_sqlite_adapters(type_name: str = "MONEY") -> None:
    """Register Money adapters with the standard `sqlite3` module.

    After registration, Money and NullMoney can be used as query parameters, and columns
    declared as $type_name are converted to Money when the connection is opened with
    `detect_types=sqlite3.PARSE_DECLTYPES`.
    """
    sqlite3.register_adapter(Money, money_sql_value)
    sqlite3.register_adapter(NullMoney, NullMoney.value)
    sqlite3.register_converter(type_name, scan_money)
    logger.debug(f"Registered sqlite3 adapters for Money with column type '{type_name}'")
