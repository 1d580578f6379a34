from __future__ import annotations

from enum import Enum

from fixed_money.domain.monetary.formatter import Formatter


class CurrencyType(Enum):
    """Enumeration of currency types."""

    FIAT = "FIAT"
    CRYPTO = "CRYPTO"
    LOYALTY = "LOYALTY"
    REWARD = "REWARD"
    GAME = "GAME"
    POINTS = "POINTS"
    UNKNOWN = "UNKNOWN"  # placeholder currencies, never registered in production tables


class Currency:
    """Represents a currency with code, fraction digits, and display metadata.

    Instances are immutable and shared by reference between all `Money` values of that
    currency. Two currencies are equal when their codes are equal.

    Attributes:
        code (str): Currency code (e.g., "USD", "BTC"). By convention 3 ASCII characters;
            the binary codec relies on it.
        fraction_digits (int): Number of minor-unit digits shown when formatting.
        currency_type (CurrencyType): FIAT, CRYPTO, LOYALTY, ...
        grapheme (str): Display symbol (e.g., "$", "€").
        template (str): Display pattern; "1" marks the number and "$" the symbol, e.g. "$1" or "1 $".
        decimal_point (str): Separator between integer and fractional digits.
        thousand_separator (str): Separator between groups of three integer digits.
    """

    __slots__ = (
        "_code",
        "_fraction_digits",
        "_currency_type",
        "_grapheme",
        "_template",
        "_decimal_point",
        "_thousand_separator",
    )

    def __init__(
        self,
        code: str,
        fraction_digits: int,
        currency_type: CurrencyType,
        grapheme: str = "",
        template: str = "$1",
        decimal_point: str = ".",
        thousand_separator: str = ",",
    ) -> None:
        """Initialize a Currency instance.

        Raises:
            ValueError: If parameters are invalid.
            TypeError: If $currency_type is not CurrencyType instance.
        """
        # Raise: code must be a non-empty string
        if not isinstance(code, str) or not code.strip():
            raise ValueError(f"$code must be a non-empty string, but provided value is: '{code}'")

        # Raise: fraction digits must be a non-negative int
        if isinstance(fraction_digits, bool) or not isinstance(fraction_digits, int) or fraction_digits < 0:
            raise ValueError(f"$fraction_digits must be a non-negative integer, but provided value is: {fraction_digits}")

        if not isinstance(currency_type, CurrencyType):
            raise TypeError(f"$currency_type must be a CurrencyType instance, but provided value is: {currency_type}")

        # Raise: template needs the number placeholder, otherwise formatting would drop the amount
        if not isinstance(template, str) or "1" not in template:
            raise ValueError(f"$template must contain the number placeholder '1', but provided value is: '{template}'")

        self._code = code.upper().strip()
        self._fraction_digits = fraction_digits
        self._currency_type = currency_type
        self._grapheme = grapheme
        self._template = template
        self._decimal_point = decimal_point
        self._thousand_separator = thousand_separator

    @classmethod
    def default_for(cls, code: str) -> Currency:
        """Build default metadata for a code that is not registered.

        The code itself is used as the grapheme, e.g. "XYZ" formats as "12.00XYZ".
        """
        return cls(code, 2, CurrencyType.FIAT, grapheme=code.upper().strip(), template="1$")

    @property
    def code(self) -> str:
        """Get the currency code."""
        return self._code

    @property
    def fraction_digits(self) -> int:
        """Get the number of minor-unit digits."""
        return self._fraction_digits

    @property
    def currency_type(self) -> CurrencyType:
        """Get the currency type."""
        return self._currency_type

    @property
    def grapheme(self) -> str:
        return self._grapheme

    @property
    def template(self) -> str:
        return self._template

    @property
    def decimal_point(self) -> str:
        return self._decimal_point

    @property
    def thousand_separator(self) -> str:
        return self._thousand_separator

    @property
    def is_fiat(self) -> bool:
        return self._currency_type == CurrencyType.FIAT

    @property
    def is_crypto(self) -> bool:
        return self._currency_type == CurrencyType.CRYPTO

    @property
    def is_unknown(self) -> bool:
        """Check if this is a placeholder currency (unknown or bad)."""
        return self._currency_type == CurrencyType.UNKNOWN

    def formatter(self) -> Formatter:
        """Return the display descriptor of this currency."""
        return Formatter(
            fraction_digits=self._fraction_digits,
            decimal_point=self._decimal_point,
            thousand_separator=self._thousand_separator,
            grapheme=self._grapheme,
            template=self._template,
        )

    def __eq__(self, other) -> bool:
        """Check equality with another Currency."""
        if not isinstance(other, Currency):
            return False
        return self.code == other.code

    def __hash__(self) -> int:
        """Hash based on currency code."""
        return hash(self.code)

    def __str__(self) -> str:
        """Return string representation."""
        return self.code

    def __repr__(self) -> str:
        """Return detailed string representation."""
        return f"{self.__class__.__name__}('{self.code}', {self.fraction_digits}, {self.currency_type}, grapheme='{self.grapheme}', template='{self.template}')"


UNKNOWN_CURRENCY_CODE = "???"
BAD_CURRENCY_CODE = "!!!"

# Placeholder for values whose currency is not known yet (e.g. read from text or a database)
UNKNOWN_CURRENCY = Currency(UNKNOWN_CURRENCY_CODE, 2, CurrencyType.UNKNOWN, grapheme="$", template="$1")

# Marker carried by fallback values when a currency code could not be resolved
BAD_CURRENCY = Currency(BAD_CURRENCY_CODE, 2, CurrencyType.UNKNOWN, grapheme="$", template="$1")
