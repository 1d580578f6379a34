from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from fractions import Fraction
from typing import TypeAlias

from fixed_money import config
from fixed_money.exceptions import DivisionByZeroError, InvalidAmountError, InvalidCashIntervalError, NonFiniteValueError
from fixed_money.utils.numeric_tools import decimal_to_parts, parts_to_decimal, pow10

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# Optional sign, digits with an optional decimal point, optional exponent
_DECIMAL_TEXT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

# Number of cash steps in one currency unit for each valid interval (interval 5 -> 0.05 -> 20 steps)
_CASH_STEPS_PER_UNIT: dict[int, int] = {5: 20, 10: 10, 15: 10, 25: 4, 50: 2, 100: 1}


class Rounding(Enum):
    """How a discarded remainder changes the retained digits."""

    HALF_AWAY_FROM_ZERO = "HALF_AWAY_FROM_ZERO"
    HALF_EVEN = "HALF_EVEN"
    HALF_TOWARD_ZERO = "HALF_TOWARD_ZERO"
    DOWN = "DOWN"  # toward zero
    FLOOR = "FLOOR"
    CEILING = "CEILING"


def _round_quotient(numerator: int, denominator: int, rounding: Rounding) -> int:
    """Return $numerator / $denominator rounded to an integer. $denominator must be positive."""
    negative = numerator < 0
    quotient, remainder = divmod(abs(numerator), denominator)
    if remainder == 0:
        return -quotient if negative else quotient

    twice_remainder = 2 * remainder
    if rounding is Rounding.HALF_AWAY_FROM_ZERO:
        bump = twice_remainder >= denominator
    elif rounding is Rounding.HALF_EVEN:
        bump = twice_remainder > denominator or (twice_remainder == denominator and quotient % 2 == 1)
    elif rounding is Rounding.HALF_TOWARD_ZERO:
        bump = twice_remainder > denominator
    elif rounding is Rounding.DOWN:
        bump = False
    elif rounding is Rounding.FLOOR:
        bump = negative
    else:
        bump = not negative

    if bump:
        quotient += 1
    return -quotient if negative else quotient


class FixedDecimal:
    """Arbitrary-precision signed fixed-point decimal.

    The represented value is `coefficient * 10 ** exponent`. The coefficient is an unbounded
    Python int, the exponent must fit into a signed 32-bit integer. The pair is kept exactly as
    given, so `FixedDecimal(1200, -2)` and `FixedDecimal(12)` are different representations
    of the same number: they compare and hash equal.

    Addition, subtraction and multiplication are exact. Division rounds to an explicit
    precision (`div_round`) or to the process-wide division precision (`div`).

    Instances are immutable.
    """

    __slots__ = ("_coefficient", "_exponent")

    def __init__(self, coefficient: int = 0, exponent: int = 0) -> None:
        """Initialize a FixedDecimal representing $coefficient * 10 ** $exponent.

        Raises:
            TypeError: If $coefficient or $exponent is not an int.
            ValueError: If $exponent does not fit into a signed 32-bit integer.
        """
        # Raise: both parts must be plain ints; use `FixedDecimal.of` to convert other types
        if isinstance(coefficient, bool) or not isinstance(coefficient, int):
            raise TypeError(f"Cannot call `FixedDecimal.__init__` because $coefficient is not int (got type '{type(coefficient).__name__}'). Use `FixedDecimal.of` to convert")
        if isinstance(exponent, bool) or not isinstance(exponent, int):
            raise TypeError(f"Cannot call `FixedDecimal.__init__` because $exponent is not int (got type '{type(exponent).__name__}')")

        # Raise: exponent is stored as a signed 32-bit integer
        if exponent < INT32_MIN or exponent > INT32_MAX:
            raise ValueError(f"Cannot call `FixedDecimal.__init__` because $exponent ({exponent}) does not fit into a signed 32-bit integer")

        self._coefficient = coefficient
        self._exponent = exponent

    # region Constructors

    @classmethod
    def from_string(cls, value: str) -> FixedDecimal:
        """Parse a plain or scientific decimal string, e.g. "-123.45", ".0001", "1.5e3".

        Raises:
            InvalidAmountError: If $value is not a finite decimal number.
        """
        if isinstance(value, bytes):
            value = value.decode("ascii", errors="replace")
        if not isinstance(value, str):
            raise TypeError(f"Cannot call `FixedDecimal.from_string` because $value is not str (got type '{type(value).__name__}')")

        # Raise: plain or scientific ASCII notation only; Decimal() alone also accepts "1_000" and "NaN"
        text = value.strip()
        if _DECIMAL_TEXT.fullmatch(text) is None:
            raise InvalidAmountError(f"Cannot parse '{value}' as a decimal number")

        try:
            parsed = Decimal(text)
        except InvalidOperation as e:
            raise InvalidAmountError(f"Cannot parse '{value}' as a decimal number") from e

        coefficient, exponent = decimal_to_parts(parsed)

        # Raise: exponent is stored as a signed 32-bit integer
        if exponent < INT32_MIN or exponent > INT32_MAX:
            raise InvalidAmountError(f"Cannot parse '{value}' as a decimal number because its exponent ({exponent}) does not fit into a signed 32-bit integer")

        return cls(coefficient, exponent)

    @classmethod
    def from_float(cls, value: float, exponent: int | None = None) -> FixedDecimal:
        """Convert a float.

        With $exponent None the shortest decimal that round-trips to $value is used
        (0.1 -> "0.1"). With an explicit $exponent the exact binary value is rounded half
        away from zero to that exponent (123.456 with -2 -> "123.46").

        Raises:
            NonFiniteValueError: If $value is NaN or infinite.
        """
        value = float(value)

        # Raise: only finite quantities are representable
        if math.isnan(value) or math.isinf(value):
            raise NonFiniteValueError(f"Cannot create a FixedDecimal from {value}")

        if exponent is None:
            coefficient, parsed_exponent = decimal_to_parts(Decimal(repr(value)))
            return cls(coefficient, parsed_exponent)

        exact = Fraction(value)
        numerator, denominator = exact.numerator, exact.denominator
        if exponent <= 0:
            numerator *= pow10(-exponent)
        else:
            denominator *= pow10(exponent)
        return cls(_round_quotient(numerator, denominator, Rounding.HALF_AWAY_FROM_ZERO), exponent)

    @classmethod
    def from_decimal(cls, value: Decimal) -> FixedDecimal:
        """Convert a `decimal.Decimal` exactly, keeping its exponent.

        Raises:
            NonFiniteValueError: If $value is NaN or infinite.
        """
        if not value.is_finite():
            raise NonFiniteValueError(f"Cannot create a FixedDecimal from {value}")
        coefficient, exponent = decimal_to_parts(value)
        return cls(coefficient, exponent)

    @classmethod
    def of(cls, value: FixedDecimalLike) -> FixedDecimal:
        """Convert any supported scalar into a FixedDecimal.

        Raises:
            TypeError: If $value has an unsupported type.
        """
        if isinstance(value, FixedDecimal):
            return value
        if isinstance(value, bool):
            raise TypeError("Cannot call `FixedDecimal.of` because $value is bool")
        if isinstance(value, int):
            return cls(value, 0)
        if isinstance(value, float):
            return cls.from_float(value)
        if isinstance(value, Decimal):
            return cls.from_decimal(value)
        if isinstance(value, str):
            return cls.from_string(value)
        raise TypeError(f"Cannot call `FixedDecimal.of` because $value has unsupported type '{type(value).__name__}'")

    # endregion

    # region Accessors

    @property
    def coefficient(self) -> int:
        """Get the unscaled integer value."""
        return self._coefficient

    @property
    def exponent(self) -> int:
        """Get the base-10 exponent (scale)."""
        return self._exponent

    def sign(self) -> int:
        """Return -1, 0 or +1."""
        return (self._coefficient > 0) - (self._coefficient < 0)

    def is_zero(self) -> bool:
        return self._coefficient == 0

    # endregion

    # region Arithmetic

    def add(self, other: FixedDecimal) -> FixedDecimal:
        """Return self + $other exactly, at the smaller of both exponents."""
        a, b, exponent = self._aligned(other)
        return FixedDecimal(a + b, exponent)

    def sub(self, other: FixedDecimal) -> FixedDecimal:
        """Return self - $other exactly, at the smaller of both exponents."""
        a, b, exponent = self._aligned(other)
        return FixedDecimal(a - b, exponent)

    def mul(self, other: FixedDecimal) -> FixedDecimal:
        """Return self * $other exactly."""
        return FixedDecimal(self._coefficient * other._coefficient, self._exponent + other._exponent)

    def neg(self) -> FixedDecimal:
        return FixedDecimal(-self._coefficient, self._exponent)

    def abs(self) -> FixedDecimal:
        return FixedDecimal(abs(self._coefficient), self._exponent)

    def shift(self, places: int) -> FixedDecimal:
        """Multiply by 10 ** $places by moving the exponent. The coefficient is unchanged."""
        return FixedDecimal(self._coefficient, self._exponent + places)

    def div_round(self, other: FixedDecimal, precision: int) -> FixedDecimal:
        """Divide and round the exact quotient to $precision fractional digits.

        Ties round away from zero: 2.5 -> 3 and -2.5 -> -3. Negative $precision rounds into
        the integer part.

        Raises:
            DivisionByZeroError: If $other is zero.
        """
        if other._coefficient == 0:
            raise DivisionByZeroError(f"Cannot divide {self} by zero")

        # quotient * 10 ** precision == (c1 / c2) * 10 ** (e1 - e2 + precision)
        scale = self._exponent - other._exponent + precision
        numerator = self._coefficient
        denominator = other._coefficient
        if scale >= 0:
            numerator *= pow10(scale)
        else:
            denominator *= pow10(-scale)
        if denominator < 0:
            numerator, denominator = -numerator, -denominator

        return FixedDecimal(_round_quotient(numerator, denominator, Rounding.HALF_AWAY_FROM_ZERO), -precision)

    def div(self, other: FixedDecimal) -> FixedDecimal:
        """Divide with the process-wide division precision (see `fixed_money.config`)."""
        return self.div_round(other, config.get_division_precision())

    def quo_rem(self, other: FixedDecimal, precision: int) -> tuple[FixedDecimal, FixedDecimal]:
        """Division with remainder.

        Returns quotient q and remainder r such that:
            self == other * q + r, q an integer multiple of 10 ** -precision
            0 <= r < abs(other) * 10 ** -precision   if self >= 0
            0 >= r > -abs(other) * 10 ** -precision  if self < 0

        Raises:
            DivisionByZeroError: If $other is zero.
        """
        if other._coefficient == 0:
            raise DivisionByZeroError(f"Cannot divide {self} by zero")

        scale = -precision
        shift = self._exponent - other._exponent - scale
        if shift < 0:
            dividend = self._coefficient
            divisor = other._coefficient * pow10(-shift)
            remainder_exponent = self._exponent
        else:
            dividend = self._coefficient * pow10(shift)
            divisor = other._coefficient
            remainder_exponent = scale + other._exponent

        if divisor < 0:
            quotient = _round_quotient(-dividend, -divisor, Rounding.DOWN)
        else:
            quotient = _round_quotient(dividend, divisor, Rounding.DOWN)
        remainder = dividend - quotient * divisor

        return FixedDecimal(quotient, scale), FixedDecimal(remainder, remainder_exponent)

    def mod(self, other: FixedDecimal) -> FixedDecimal:
        """Return the remainder of `quo_rem(other, 0)`. Carries the sign of self."""
        return self.quo_rem(other, 0)[1]

    def pow(self, exponent: FixedDecimal | int) -> FixedDecimal:
        """Raise to an integer power (the fractional part of $exponent is ignored).

        Negative powers are computed as 1 / self ** -n with the division precision.
        """
        n = exponent if isinstance(exponent, int) else FixedDecimal.of(exponent).int_part()
        if n >= 0:
            return FixedDecimal(self._coefficient**n, self._exponent * n)
        positive = FixedDecimal(self._coefficient ** (-n), self._exponent * (-n))
        return FixedDecimal(1).div(positive)

    # endregion

    # region Comparison

    def cmp(self, other: FixedDecimal) -> int:
        """Compare represented values: -1 if self < $other, 0 if equal, +1 if greater."""
        a, b, _ = self._aligned(other)
        return (a > b) - (a < b)

    def equal(self, other: FixedDecimal) -> bool:
        return self.cmp(other) == 0

    def less_than(self, other: FixedDecimal) -> bool:
        return self.cmp(other) < 0

    def less_than_or_equal(self, other: FixedDecimal) -> bool:
        return self.cmp(other) <= 0

    def greater_than(self, other: FixedDecimal) -> bool:
        return self.cmp(other) > 0

    def greater_than_or_equal(self, other: FixedDecimal) -> bool:
        return self.cmp(other) >= 0

    # endregion

    # region Rounding

    def round(self, places: int = 0) -> FixedDecimal:
        """Round half away from zero to $places fractional digits.

        If $places < 0, the integer part is rounded to the nearest 10 ** -places.

        Examples:
            5.45 -> round(1) -> 5.5
            -5.45 -> round(1) -> -5.5
            545 -> round(-1) -> 550
        """
        return self._rescale(-places, Rounding.HALF_AWAY_FROM_ZERO)

    def round_bank(self, places: int = 0) -> FixedDecimal:
        """Round half to even to $places fractional digits.

        Examples:
            5.45 -> round_bank(1) -> 5.4
            5.55 -> round_bank(1) -> 5.6
            545 -> round_bank(-1) -> 540
        """
        return self._rescale(-places, Rounding.HALF_EVEN)

    def round_cash(self, interval: int) -> FixedDecimal:
        """Cash (Swedish) rounding to a multiple of $interval hundredths of the unit.

        Valid intervals and examples:
             5:   5 cent rounding 3.43 => 3.45
            10:  10 cent rounding 3.45 => 3.50 (5 gets rounded up)
            15:  10 cent rounding 3.45 => 3.40 (5 gets rounded down)
            25:  25 cent rounding 3.41 => 3.50
            50:  50 cent rounding 3.75 => 4.00
           100: 100 cent rounding 3.50 => 4.00

        The result always has two fractional digits.

        Raises:
            InvalidCashIntervalError: If $interval is not one of the valid intervals.
        """
        steps_per_unit = _CASH_STEPS_PER_UNIT.get(interval) if isinstance(interval, int) else None
        if steps_per_unit is None:
            raise InvalidCashIntervalError(f"Cannot call `round_cash` because $interval ({interval!r}) is not one of {sorted(_CASH_STEPS_PER_UNIT)}")

        rounding = Rounding.HALF_TOWARD_ZERO if interval == 15 else Rounding.HALF_AWAY_FROM_ZERO
        steps = self.mul(FixedDecimal(steps_per_unit))._rescale(0, rounding).coefficient
        return FixedDecimal(steps * (100 // steps_per_unit), -2)

    def floor(self, places: int = 0) -> FixedDecimal:
        """Return the nearest value with $places fractional digits that is <= self."""
        if self._exponent >= -places:
            return self
        return self._rescale(-places, Rounding.FLOOR)

    def ceil(self, places: int = 0) -> FixedDecimal:
        """Return the nearest value with $places fractional digits that is >= self."""
        if self._exponent >= -places:
            return self
        return self._rescale(-places, Rounding.CEILING)

    def truncate(self, precision: int) -> FixedDecimal:
        """Cut off digits after $precision fractional digits, without rounding.

        Example:
            123.456 -> truncate(2) -> 123.45

        Raises:
            ValueError: If $precision is negative.
        """
        if precision < 0:
            raise ValueError(f"Cannot call `truncate` because $precision ({precision}) < 0")
        if self._exponent >= -precision:
            return self
        return self._rescale(-precision, Rounding.DOWN)

    # endregion

    # region Conversions

    def int_part(self) -> int:
        """Return the integer part, truncated toward zero."""
        if self._exponent >= 0:
            return self._coefficient * pow10(self._exponent)
        return _round_quotient(self._coefficient, pow10(-self._exponent), Rounding.DOWN)

    def rat(self) -> Fraction:
        """Return the exact rational value."""
        if self._exponent >= 0:
            return Fraction(self._coefficient * pow10(self._exponent))
        return Fraction(self._coefficient, pow10(-self._exponent))

    def to_float(self) -> tuple[float, bool]:
        """Return the nearest float and whether it represents self exactly."""
        exact_value = self.rat()
        try:
            nearest = float(exact_value)
        except OverflowError:
            return math.copysign(math.inf, self._coefficient), False
        return nearest, Fraction(nearest) == exact_value

    def to_decimal(self) -> Decimal:
        """Return an exact `decimal.Decimal` with the same coefficient and exponent."""
        return parts_to_decimal(self._coefficient, self._exponent)

    def string_fixed(self, places: int) -> str:
        """Round half away from zero and render exactly $places fractional digits.

        Examples:
            0 -> string_fixed(2) -> "0.00"
            5.45 -> string_fixed(1) -> "5.5"
            545 -> string_fixed(-1) -> "550"
        """
        return self.round(places)._to_plain_string(trim_trailing_zeros=False)

    def string_fixed_bank(self, places: int) -> str:
        """Round half to even and render exactly $places fractional digits (5.45 -> "5.4")."""
        return self.round_bank(places)._to_plain_string(trim_trailing_zeros=False)

    def string_fixed_cash(self, interval: int) -> str:
        """Cash round with $interval and render two fractional digits (3.43, 5 -> "3.45")."""
        return self.round_cash(interval)._to_plain_string(trim_trailing_zeros=False)

    # endregion

    # region Internal helpers

    def _aligned(self, other: FixedDecimal) -> tuple[int, int, int]:
        """Return both coefficients scaled to the smaller exponent, and that exponent."""
        exponent = min(self._exponent, other._exponent)
        a = self._coefficient * pow10(self._exponent - exponent)
        b = other._coefficient * pow10(other._exponent - exponent)
        return a, b, exponent

    def _rescale(self, exponent: int, rounding: Rounding) -> FixedDecimal:
        """Return the value expressed with $exponent, rounding discarded digits per $rounding."""
        if exponent <= self._exponent:
            return FixedDecimal(self._coefficient * pow10(self._exponent - exponent), exponent)
        return FixedDecimal(_round_quotient(self._coefficient, pow10(exponent - self._exponent), rounding), exponent)

    def _to_plain_string(self, trim_trailing_zeros: bool) -> str:
        if self._exponent >= 0:
            return str(self._coefficient * pow10(self._exponent))

        digits = str(abs(self._coefficient))
        fraction_length = -self._exponent
        if len(digits) > fraction_length:
            int_part = digits[:-fraction_length]
            fractional_part = digits[-fraction_length:]
        else:
            int_part = "0"
            fractional_part = "0" * (fraction_length - len(digits)) + digits

        if trim_trailing_zeros:
            fractional_part = fractional_part.rstrip("0")

        number = f"{int_part}.{fractional_part}" if fractional_part else int_part
        return f"-{number}" if self._coefficient < 0 else number

    @staticmethod
    def _coerce(value: object) -> FixedDecimal | None:
        """Convert an operator operand, or return None when the type is not numeric."""
        if isinstance(value, FixedDecimal):
            return value
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float, Decimal)):
            return FixedDecimal.of(value)
        return None

    @staticmethod
    def _coerce_exact(value: object) -> FixedDecimal | None:
        """Like `_coerce`, but a float keeps its exact binary value, as in `Decimal` comparisons.

        Keeps `__eq__` consistent with `__hash__`: FixedDecimal(1, -1) != 0.1, while
        FixedDecimal(5, -1) == 0.5 and both hash alike.
        """
        if isinstance(value, float):
            if not math.isfinite(value):
                return None
            return FixedDecimal.from_decimal(Decimal(value))
        return FixedDecimal._coerce(value)

    # endregion

    # region Python protocols

    def __add__(self, other):
        other_value = self._coerce(other)
        return NotImplemented if other_value is None else self.add(other_value)

    def __radd__(self, other):
        other_value = self._coerce(other)
        return NotImplemented if other_value is None else other_value.add(self)

    def __sub__(self, other):
        other_value = self._coerce(other)
        return NotImplemented if other_value is None else self.sub(other_value)

    def __rsub__(self, other):
        other_value = self._coerce(other)
        return NotImplemented if other_value is None else other_value.sub(self)

    def __mul__(self, other):
        other_value = self._coerce(other)
        return NotImplemented if other_value is None else self.mul(other_value)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        other_value = self._coerce(other)
        return NotImplemented if other_value is None else self.div(other_value)

    def __rtruediv__(self, other):
        other_value = self._coerce(other)
        return NotImplemented if other_value is None else other_value.div(self)

    def __mod__(self, other):
        other_value = self._coerce(other)
        return NotImplemented if other_value is None else self.mod(other_value)

    def __pow__(self, other):
        other_value = self._coerce(other)
        return NotImplemented if other_value is None else self.pow(other_value)

    def __neg__(self) -> FixedDecimal:
        return self.neg()

    def __pos__(self) -> FixedDecimal:
        return self

    def __abs__(self) -> FixedDecimal:
        return self.abs()

    def __eq__(self, other) -> bool:
        other_value = self._coerce_exact(other)
        return NotImplemented if other_value is None else self.cmp(other_value) == 0

    def __lt__(self, other) -> bool:
        other_value = self._coerce_exact(other)
        return NotImplemented if other_value is None else self.cmp(other_value) < 0

    def __le__(self, other) -> bool:
        other_value = self._coerce_exact(other)
        return NotImplemented if other_value is None else self.cmp(other_value) <= 0

    def __gt__(self, other) -> bool:
        other_value = self._coerce_exact(other)
        return NotImplemented if other_value is None else self.cmp(other_value) > 0

    def __ge__(self, other) -> bool:
        other_value = self._coerce_exact(other)
        return NotImplemented if other_value is None else self.cmp(other_value) >= 0

    def __hash__(self) -> int:
        # Equal values with different exponents must hash alike; Fraction also matches int/Decimal hashes
        return hash(self.rat())

    def __bool__(self) -> bool:
        return self._coefficient != 0

    def __int__(self) -> int:
        return self.int_part()

    def __float__(self) -> float:
        return self.to_float()[0]

    def __str__(self) -> str:
        """Return plain fixed-point text with trailing fractional zeros removed (-12.345)."""
        return self._to_plain_string(trim_trailing_zeros=True)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._coefficient}, {self._exponent})"

    # endregion


# Use where optimal type is `FixedDecimal`, but other types are also acceptable (and will be converted)
FixedDecimalLike: TypeAlias = FixedDecimal | Decimal | int | str | float

ZERO = FixedDecimal(0, 0)
