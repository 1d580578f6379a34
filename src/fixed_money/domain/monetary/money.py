from __future__ import annotations

import logging
from decimal import Decimal
from fractions import Fraction

from fixed_money.domain.monetary.currency import BAD_CURRENCY, UNKNOWN_CURRENCY, UNKNOWN_CURRENCY_CODE, Currency
from fixed_money.domain.monetary.currency_registry import DEFAULT_REGISTRY, CurrencyRegistry
from fixed_money.domain.numeric.fixed_decimal import ZERO, FixedDecimal, FixedDecimalLike
from fixed_money.exceptions import (
    CurrencyAlreadySetError,
    CurrencyMismatchError,
    InvalidAmountError,
    MoneyContractError,
    ReportedMoneyError,
    UnknownCurrencyError,
)

logger = logging.getLogger(__name__)


class Money:
    """Represents a monetary amount with currency.

    Uses `FixedDecimal` for exact arithmetic; the amount keeps its full precision and is only
    rounded when explicitly requested (`round`, `div_round`, formatting, ...).

    Currencies are never mixed: every binary operation between two Money values raises
    `CurrencyMismatchError` when their currency codes differ. Converting between currencies
    is a separate, explicit step outside of this class.

    Instances are immutable; every operation returns a new Money.
    """

    __slots__ = ("_amount", "_currency")

    def __init__(self, amount: FixedDecimalLike = ZERO, currency: Currency | None = None) -> None:
        """Initialize Money with amount and currency.

        Args:
            amount: Numeric amount (FixedDecimal or a Decimal-like scalar).
            currency: Currency object. None means the currency is not known yet and
                `UNKNOWN_CURRENCY` is used; see `update_currency`.

        Raises:
            TypeError: If $currency is not a Currency instance (or None).
        """
        # Raise: currency must be an instance of Currency
        if currency is not None and not isinstance(currency, Currency):
            raise TypeError(f"$currency must be a Currency instance, but provided value is: {currency}")

        self._amount = FixedDecimal.of(amount)
        self._currency = UNKNOWN_CURRENCY if currency is None else currency

    # region Constructors

    @classmethod
    def from_int(cls, code: str, value: int, exponent: int = 0, registry: CurrencyRegistry | None = None) -> Money:
        """Create Money of currency $code with amount $value * 10 ** $exponent.

        Python ints are unbounded, so this covers big-integer coefficients too.

        Example:
            Money.from_int("USD", -12345, -3)  # -12.345 USD

        Raises:
            UnknownCurrencyError: If $code is not registered ($fallback holds a zero Money in BAD_CURRENCY).
        """
        currency = cls._resolve_currency(code, registry)
        return cls(FixedDecimal(value, exponent), currency)

    @classmethod
    def from_string(cls, code: str, value: str, registry: CurrencyRegistry | None = None) -> Money:
        """Create Money from a decimal string.

        Example:
            Money.from_string("USD", "-123.45")
            Money.from_string("AUD", ".0001")

        Raises:
            UnknownCurrencyError: If $code is not registered.
            InvalidAmountError: If $value is not a finite decimal number.
            In both cases $fallback holds a zero Money in BAD_CURRENCY.
        """
        currency = cls._resolve_currency(code, registry)
        try:
            amount = FixedDecimal.from_string(value)
        except InvalidAmountError as e:
            logger.warning(f"Cannot create Money from $value '{value}': {e}")
            raise InvalidAmountError(str(e), fallback=cls._bad_money()) from e
        return cls(amount, currency)

    @classmethod
    def require_from_string(cls, code: str, value: str, registry: CurrencyRegistry | None = None) -> Money:
        """Like `from_string`, for literals known to be valid.

        Raises:
            MoneyContractError: If `from_string` would report an error. No fallback is offered.
        """
        try:
            return cls.from_string(code, value, registry)
        except ReportedMoneyError as e:
            raise MoneyContractError(f"Cannot call `Money.require_from_string` with $code '{code}' and $value '{value}': {e}") from e

    @classmethod
    def from_float(cls, code: str, value: float, exponent: int | None = None, registry: CurrencyRegistry | None = None) -> Money:
        """Create Money from a float.

        With $exponent None the shortest decimal representation of $value is used. With an
        explicit $exponent the value is rounded to that many digits, e.g. 123.456 with -2 is 123.46.

        Raises:
            NonFiniteValueError: If $value is NaN or infinite (contract violation).
            UnknownCurrencyError: If $code is not registered.
        """
        amount = FixedDecimal.from_float(value, exponent)
        currency = cls._resolve_currency(code, registry)
        return cls(amount, currency)

    @classmethod
    def zero(cls, currency: Currency | None = None) -> Money:
        """Return zero in $currency (UNKNOWN_CURRENCY if None)."""
        return cls(ZERO, currency)

    # endregion

    # region Properties

    @property
    def amount(self) -> FixedDecimal:
        """Get the decimal amount."""
        return self._amount

    @property
    def currency(self) -> Currency:
        """Get the currency."""
        return self._currency

    @property
    def coefficient(self) -> int:
        return self._amount.coefficient

    @property
    def exponent(self) -> int:
        return self._amount.exponent

    def sign(self) -> int:
        return self._amount.sign()

    def is_zero(self) -> bool:
        return self._amount.is_zero()

    # endregion

    # region Currency

    def update_currency(self, code: str, registry: CurrencyRegistry | None = None) -> Money:
        """Return this amount in the currency $code.

        Only allowed while the currency is still `UNKNOWN_CURRENCY` (e.g. for values read from
        text or a database before their currency was known).

        Raises:
            CurrencyAlreadySetError: If the currency is already set.
            UnknownCurrencyError: If $code is not registered.
            In both cases $fallback holds this Money unchanged.
        """
        if self._currency.code != UNKNOWN_CURRENCY_CODE:
            logger.warning(f"Cannot change currency of {self!r} to '{code}' because it is already set")
            raise CurrencyAlreadySetError(f"Cannot change currency to [{code}]. Already set to [{self._currency.code}]!", fallback=self)

        currency = (registry or DEFAULT_REGISTRY).get(code)
        if currency is None:
            logger.warning(f"Cannot change currency of {self!r} to '{code}' because it is not registered")
            raise UnknownCurrencyError(code, fallback=self)

        return Money(self._amount, currency)

    # endregion

    # region Arithmetic

    def add(self, other: Money) -> Money:
        """Return self + $other. Raises CurrencyMismatchError on differing currencies."""
        self._check_same_currency(other, "add")
        return Money(self._amount.add(other._amount), self._currency)

    def sub(self, other: Money) -> Money:
        """Return self - $other. Raises CurrencyMismatchError on differing currencies."""
        self._check_same_currency(other, "subtract")
        return Money(self._amount.sub(other._amount), self._currency)

    def mul(self, other: Money | FixedDecimalLike) -> Money:
        """Return self * $other.

        $other is either a Money of the same currency or a plain number (a dimensionless factor).
        """
        factor = self._operand_amount(other, "multiply")
        return Money(self._amount.mul(factor), self._currency)

    def div_round(self, other: Money | FixedDecimalLike, precision: int) -> Money:
        """Divide and round to $precision fractional digits, ties away from zero.

        Raises:
            CurrencyMismatchError: If $other is a Money of another currency.
            DivisionByZeroError: If $other is zero.
        """
        divisor = self._operand_amount(other, "divide")
        return Money(self._amount.div_round(divisor, precision), self._currency)

    def div(self, other: Money | FixedDecimalLike) -> Money:
        """Divide with the process-wide division precision (see `fixed_money.config`)."""
        divisor = self._operand_amount(other, "divide")
        return Money(self._amount.div(divisor), self._currency)

    def quo_rem(self, other: Money, precision: int) -> tuple[Money, Money]:
        """Division with remainder: self == other * quotient + remainder.

        The quotient is an integer multiple of 10 ** -precision and the remainder carries the
        sign of self.
        """
        self._check_same_currency(other, "divide")
        quotient, remainder = self._amount.quo_rem(other._amount, precision)
        return Money(quotient, self._currency), Money(remainder, other._currency)

    def mod(self, other: Money) -> Money:
        """Return the remainder of `quo_rem(other, 0)`."""
        self._check_same_currency(other, "modulo")
        return Money(self._amount.mod(other._amount), self._currency)

    def pow(self, other: Money | FixedDecimalLike) -> Money:
        """Raise to the integer part of $other."""
        exponent = self._operand_amount(other, "take power of")
        return Money(self._amount.pow(exponent), self._currency)

    def neg(self) -> Money:
        return Money(self._amount.neg(), self._currency)

    def abs(self) -> Money:
        return Money(self._amount.abs(), self._currency)

    def shift(self, places: int) -> Money:
        """Multiply by 10 ** $places by moving the exponent."""
        return Money(self._amount.shift(places), self._currency)

    # endregion

    # region Comparison

    def cmp(self, other: Money) -> int:
        """Return -1, 0 or +1. Raises CurrencyMismatchError on differing currencies."""
        self._check_same_currency(other, "compare")
        return self._amount.cmp(other._amount)

    def equal(self, other: Money) -> bool:
        return self.cmp(other) == 0

    def greater_than(self, other: Money) -> bool:
        return self.cmp(other) > 0

    def greater_than_or_equal(self, other: Money) -> bool:
        return self.cmp(other) >= 0

    def less_than(self, other: Money) -> bool:
        return self.cmp(other) < 0

    def less_than_or_equal(self, other: Money) -> bool:
        return self.cmp(other) <= 0

    # endregion

    # region Rounding

    def round(self, places: int = 0) -> Money:
        """Round half away from zero (5.45 -> 5.5, 545 with -1 -> 550)."""
        return Money(self._amount.round(places), self._currency)

    def round_bank(self, places: int = 0) -> Money:
        """Round half to even (5.45 -> 5.4, 5.55 -> 5.6)."""
        return Money(self._amount.round_bank(places), self._currency)

    def round_cash(self, interval: int) -> Money:
        """Cash rounding, see `FixedDecimal.round_cash`."""
        return Money(self._amount.round_cash(interval), self._currency)

    def floor(self, places: int = 0) -> Money:
        return Money(self._amount.floor(places), self._currency)

    def ceil(self, places: int = 0) -> Money:
        return Money(self._amount.ceil(places), self._currency)

    def truncate(self, precision: int) -> Money:
        return Money(self._amount.truncate(precision), self._currency)

    # endregion

    # region Conversions

    def int_part(self) -> int:
        return self._amount.int_part()

    def rat(self) -> Fraction:
        return self._amount.rat()

    def to_float(self) -> tuple[float, bool]:
        """Return the nearest float and whether it is exact."""
        return self._amount.to_float()

    def to_decimal(self) -> Decimal:
        return self._amount.to_decimal()

    def string_fixed(self, places: int) -> str:
        return self._amount.string_fixed(places)

    def string_fixed_bank(self, places: int) -> str:
        return self._amount.string_fixed_bank(places)

    def string_fixed_cash(self, interval: int) -> str:
        return self._amount.string_fixed_cash(interval)

    # endregion

    # region Formatting

    def format_currency(self) -> str:
        """Format with the currency template: symbol, thousands grouping, minus sign ("-$1,234.50")."""
        return self._currency.formatter().format_currency(self._amount)

    def format_accounting(self) -> str:
        """Format without symbol and grouping, negatives in brackets ("(1234.50)")."""
        return self._currency.formatter().format_accounting(self._amount)

    def format_cash(self, interval: int) -> str:
        """Cash round with $interval, then format like `format_currency`."""
        return self._currency.formatter().format_cash(self._amount, interval)

    # endregion

    # region Internal helpers

    @staticmethod
    def _resolve_currency(code: str, registry: CurrencyRegistry | None) -> Currency:
        currency = (registry or DEFAULT_REGISTRY).get(code)
        if currency is None:
            logger.warning(f"Cannot create Money because currency '{code}' is not registered")
            raise UnknownCurrencyError(code, fallback=Money._bad_money())
        return currency

    @staticmethod
    def _bad_money() -> Money:
        return Money(ZERO, BAD_CURRENCY)

    def _check_same_currency(self, other: Money, action: str) -> None:
        """Check if two Money objects have the same currency.

        Raises:
            TypeError: If $other is not Money.
            CurrencyMismatchError: If currencies don't match.
        """
        if not isinstance(other, Money):
            raise TypeError(f"Cannot {action} Money and '{type(other).__name__}'")
        if self._currency.code != other._currency.code:
            raise CurrencyMismatchError(f"Cannot {action} mismatched currencies m1[{self._currency}] m2[{other._currency}]")

    def _operand_amount(self, other: Money | FixedDecimalLike, action: str) -> FixedDecimal:
        """Return the amount of a Money operand (same currency) or convert a plain number."""
        if isinstance(other, Money):
            self._check_same_currency(other, action)
            return other._amount
        return FixedDecimal.of(other)

    # endregion

    # region Python protocols

    def __add__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        return self.add(other)

    def __radd__(self, other):
        # Allows the builtin sum(), which starts from int 0
        if isinstance(other, int) and not isinstance(other, bool) and other == 0:
            return self
        return NotImplemented

    def __sub__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        return self.sub(other)

    def __mul__(self, other):
        if isinstance(other, (Money, FixedDecimal, int, float, Decimal)) and not isinstance(other, bool):
            return self.mul(other)
        return NotImplemented

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        if isinstance(other, (Money, FixedDecimal, int, float, Decimal)) and not isinstance(other, bool):
            return self.div(other)
        return NotImplemented

    def __mod__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        return self.mod(other)

    def __pow__(self, other):
        if isinstance(other, (Money, FixedDecimal, int)) and not isinstance(other, bool):
            return self.pow(other)
        return NotImplemented

    def __neg__(self) -> Money:
        return self.neg()

    def __pos__(self) -> Money:
        return self

    def __abs__(self) -> Money:
        return self.abs()

    def __eq__(self, other) -> bool:
        """Check equality with another Money object. Different currencies are never equal."""
        if not isinstance(other, Money):
            return False
        if self._currency.code != other._currency.code:
            return False
        return self._amount == other._amount

    def __lt__(self, other) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.cmp(other) < 0

    def __le__(self, other) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.cmp(other) <= 0

    def __gt__(self, other) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.cmp(other) > 0

    def __ge__(self, other) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.cmp(other) >= 0

    def __hash__(self) -> int:
        """Hash based on amount value and currency code."""
        return hash((self._amount, self._currency.code))

    def __bool__(self) -> bool:
        return not self._amount.is_zero()

    def __str__(self) -> str:
        """Return the plain amount, e.g. '-12.345'. Use `format_currency` for display text."""
        return str(self._amount)

    def __repr__(self) -> str:
        """Return string like 'Money(-12.345, USD)'."""
        return f"{self.__class__.__name__}({self._amount}, {self._currency.code})"

    # endregion


# region Aggregates


def min_money(first: Money, *rest: Money) -> Money:
    """Return the smallest of the given values (the first one wins ties)."""
    result = first
    for item in rest:
        if item.cmp(result) < 0:
            result = item
    return result


def max_money(first: Money, *rest: Money) -> Money:
    """Return the largest of the given values (the first one wins ties)."""
    result = first
    for item in rest:
        if item.cmp(result) > 0:
            result = item
    return result


def sum_money(first: Money, *rest: Money) -> Money:
    """Return the total of the given values."""
    total = first
    for item in rest:
        total = total.add(item)
    return total


def avg_money(first: Money, *rest: Money) -> Money:
    """Return the average of the given values, divided with the division precision."""
    count = Money(FixedDecimal(len(rest) + 1, 0), first.currency)
    return sum_money(first, *rest).div(count)


# endregion
