from __future__ import annotations

from decimal import Decimal
from functools import lru_cache


@lru_cache(maxsize=256)
def pow10(n: int) -> int:
    """Return 10 ** $n for non-negative $n. Small powers are cached."""
    return 10**n


def decimal_to_parts(value: Decimal) -> tuple[int, int]:
    """Split a finite `Decimal` into an integer coefficient and a base-10 exponent.

    The pair is exact: `value == coefficient * 10 ** exponent`, and trailing zeros are kept,
    so `Decimal("12.00")` gives `(1200, -2)`.

    Raises:
        ValueError: If $value is NaN or infinite.
    """
    sign, digits, exponent = value.as_tuple()

    # Raise: special values have a string exponent ('n', 'N', 'F')
    if not isinstance(exponent, int):
        raise ValueError(f"Cannot call `decimal_to_parts` because $value ({value}) is not finite")

    coefficient = 0
    for digit in digits:
        coefficient = coefficient * 10 + digit

    return (-coefficient if sign else coefficient), exponent


def parts_to_decimal(coefficient: int, exponent: int) -> Decimal:
    """Build an exact `Decimal` from a coefficient and exponent (no context rounding)."""
    sign = 1 if coefficient < 0 else 0
    digits = tuple(int(ch) for ch in str(abs(coefficient)))
    return Decimal((sign, digits, exponent))
