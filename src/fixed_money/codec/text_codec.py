from __future__ import annotations

from fixed_money.domain.monetary.money import Money
from fixed_money.domain.numeric.fixed_decimal import FixedDecimal
from fixed_money.exceptions import InvalidAmountError


def money_to_text(money: Money) -> str:
    """Return the plain decimal text of $money: no symbol, no grouping, no currency code."""
    return str(money.amount)


def money_from_text(text: str | bytes) -> Money:
    """Parse text produced by `money_to_text`.

    The text form carries no currency, so the result is always in `UNKNOWN_CURRENCY`; use
    `Money.update_currency` once the currency is known.

    Raises:
        InvalidAmountError: If $text is not a finite decimal number ($fallback is zero Money).
    """
    value = text.decode("utf-8", errors="replace") if isinstance(text, (bytes, bytearray)) else text
    try:
        amount = FixedDecimal.from_string(value)
    except InvalidAmountError as e:
        raise InvalidAmountError(f"Error decoding string '{value}': {e}", fallback=Money.zero()) from e
    return Money(amount)
