"""Currency registry: code -> `Currency` lookup with a default fallback for unknown codes.

`CurrencyRegistry` is copy-on-write. Readers always see an immutable snapshot; writers build a
new mapping under a lock and swap it in, so concurrent lookups never observe a half-applied
update. Concurrent writers are serialized by the same lock.

`DEFAULT_REGISTRY` holds the predefined currencies and is used by `Money` constructors when
no registry is passed explicitly. Tests and applications that need isolation should create
their own registry, e.g. `DEFAULT_REGISTRY.copy()`.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from threading import Lock
from types import MappingProxyType

from fixed_money.domain.monetary.currency import UNKNOWN_CURRENCY, Currency, CurrencyType

logger = logging.getLogger(__name__)


class CurrencyRegistry:
    """Mapping from currency code to `Currency`."""

    def __init__(self, currencies: Iterable[Currency] = ()) -> None:
        """Initialize the registry with $currencies (later duplicates replace earlier ones).

        Raises:
            TypeError: If an item of $currencies is not a Currency instance.
        """
        table: dict[str, Currency] = {}
        for currency in currencies:
            if not isinstance(currency, Currency):
                raise TypeError(f"$currencies must contain Currency instances, but provided value is: {currency!r}")
            table[currency.code] = currency

        self._lock = Lock()
        self._currencies: Mapping[str, Currency] = MappingProxyType(table)

    # region Lookup

    def get(self, code: str) -> Currency | None:
        """Return the registered currency for $code, or None if it is not registered."""
        if not isinstance(code, str):
            raise TypeError(f"$code must be a string, but provided value is: {code!r}")
        return self._currencies.get(code.upper().strip())

    def lookup(self, code: str) -> Currency:
        """Return the registered currency for $code, or default metadata keyed by $code."""
        currency = self.get(code)
        if currency is None:
            logger.debug(f"Currency '{code}' is not registered; using default metadata")
            return Currency.default_for(code)
        return currency

    def snapshot(self) -> Mapping[str, Currency]:
        """Return an immutable view of the current table. Later updates do not affect it."""
        return self._currencies

    # endregion

    # region Updates

    def upsert(self, currency: Currency) -> Currency:
        """Insert $currency or replace the existing entry with the same code.

        Returns:
            The registered currency.
        """
        if not isinstance(currency, Currency):
            raise TypeError(f"$currency must be a Currency instance, but provided value is: {currency!r}")

        with self._lock:
            table = dict(self._currencies)
            replaced = currency.code in table
            table[currency.code] = currency
            self._currencies = MappingProxyType(table)

        logger.debug(f"{'Updated' if replaced else 'Added'} currency '{currency.code}' in CurrencyRegistry")
        return currency

    def add_currency(
        self,
        currency_type: CurrencyType,
        code: str,
        grapheme: str,
        template: str,
        decimal_point: str,
        thousand_separator: str,
        fraction_digits: int,
    ) -> Currency:
        """Build a Currency from its fields and upsert it."""
        currency = Currency(
            code,
            fraction_digits,
            currency_type,
            grapheme=grapheme,
            template=template,
            decimal_point=decimal_point,
            thousand_separator=thousand_separator,
        )
        return self.upsert(currency)

    def copy(self) -> CurrencyRegistry:
        """Return an independent registry with the same entries."""
        return CurrencyRegistry(self._currencies.values())

    # endregion

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.upper().strip() in self._currencies

    def __iter__(self) -> Iterator[str]:
        return iter(self._currencies)

    def __len__(self) -> int:
        return len(self._currencies)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(currencies={len(self._currencies)})"


# (code, type, fraction digits, grapheme, template); all use "." and "," separators
_PREDEFINED_TABLE: tuple[tuple[str, CurrencyType, int, str, str], ...] = (
    # Fiat currencies
    ("AED", CurrencyType.FIAT, 2, ".\u062f.\u0625", "1 $"),
    ("AFN", CurrencyType.FIAT, 2, "\u060b", "1 $"),
    ("ALL", CurrencyType.FIAT, 2, "L", "$1"),
    ("AMD", CurrencyType.FIAT, 2, "\u0564\u0580.", "1 $"),
    ("ANG", CurrencyType.FIAT, 2, "\u0192", "$1"),
    ("ARS", CurrencyType.FIAT, 2, "$", "$1"),
    ("AUD", CurrencyType.FIAT, 2, "$", "$1"),
    ("AWG", CurrencyType.FIAT, 2, "\u0192", "$1"),
    ("AZN", CurrencyType.FIAT, 2, "\u20bc", "$1"),
    ("BAM", CurrencyType.FIAT, 2, "KM", "$1"),
    ("BBD", CurrencyType.FIAT, 2, "$", "$1"),
    ("BGN", CurrencyType.FIAT, 2, "\u043b\u0432", "$1"),
    ("BHD", CurrencyType.FIAT, 3, ".\u062f.\u0628", "1 $"),
    ("BMD", CurrencyType.FIAT, 2, "$", "$1"),
    ("BND", CurrencyType.FIAT, 2, "$", "$1"),
    ("BOB", CurrencyType.FIAT, 2, "Bs.", "$1"),
    ("BRL", CurrencyType.FIAT, 2, "R$", "$1"),
    ("BSD", CurrencyType.FIAT, 2, "$", "$1"),
    ("BWP", CurrencyType.FIAT, 2, "P", "$1"),
    ("BYN", CurrencyType.FIAT, 2, "p.", "1 $"),
    ("BYR", CurrencyType.FIAT, 0, "p.", "1 $"),
    ("BZD", CurrencyType.FIAT, 2, "BZ$", "$1"),
    ("CAD", CurrencyType.FIAT, 2, "$", "$1"),
    ("CLP", CurrencyType.FIAT, 0, "$", "$1"),
    ("CNY", CurrencyType.FIAT, 2, "\u5143", "1 $"),
    ("COP", CurrencyType.FIAT, 0, "$", "$1"),
    ("CRC", CurrencyType.FIAT, 2, "\u20a1", "$1"),
    ("CUP", CurrencyType.FIAT, 2, "$MN", "$1"),
    ("CZK", CurrencyType.FIAT, 2, "K\u010d", "1 $"),
    ("DKK", CurrencyType.FIAT, 2, "kr", "1 $"),
    ("DOP", CurrencyType.FIAT, 2, "RD$", "$1"),
    ("DZD", CurrencyType.FIAT, 2, ".\u062f.\u062c", "1 $"),
    ("EEK", CurrencyType.FIAT, 2, "kr", "$1"),
    ("EGP", CurrencyType.FIAT, 2, "\u00a3", "$1"),
    ("EUR", CurrencyType.FIAT, 2, "\u20ac", "$1"),
    ("FJD", CurrencyType.FIAT, 2, "$", "$1"),
    ("FKP", CurrencyType.FIAT, 2, "\u00a3", "$1"),
    ("GBP", CurrencyType.FIAT, 2, "\u00a3", "$1"),
    ("GGP", CurrencyType.FIAT, 2, "\u00a3", "$1"),
    ("GHC", CurrencyType.FIAT, 2, "\u00a2", "$1"),
    ("GIP", CurrencyType.FIAT, 2, "\u00a3", "$1"),
    ("GTQ", CurrencyType.FIAT, 2, "Q", "$1"),
    ("GYD", CurrencyType.FIAT, 2, "$", "$1"),
    ("HKD", CurrencyType.FIAT, 2, "$", "$1"),
    ("HNL", CurrencyType.FIAT, 2, "L", "$1"),
    ("HRK", CurrencyType.FIAT, 2, "kn", "$1"),
    ("HUF", CurrencyType.FIAT, 0, "Ft", "$1"),
    ("IDR", CurrencyType.FIAT, 2, "Rp", "$1"),
    ("ILS", CurrencyType.FIAT, 2, "\u20aa", "$1"),
    ("IMP", CurrencyType.FIAT, 2, "\u00a3", "$1"),
    ("INR", CurrencyType.FIAT, 2, "\u20b9", "$1"),
    ("IQD", CurrencyType.FIAT, 3, ".\u062f.\u0639", "1 $"),
    ("IRR", CurrencyType.FIAT, 2, "\ufdfc", "1 $"),
    ("ISK", CurrencyType.FIAT, 2, "kr", "$1"),
    ("JEP", CurrencyType.FIAT, 2, "\u00a3", "$1"),
    ("JMD", CurrencyType.FIAT, 2, "J$", "$1"),
    ("JOD", CurrencyType.FIAT, 3, ".\u062f.\u0625", "1 $"),
    ("JPY", CurrencyType.FIAT, 0, "\u00a5", "$1"),
    ("KES", CurrencyType.FIAT, 2, "KSh", "$1"),
    ("KGS", CurrencyType.FIAT, 2, "\u0441\u043e\u043c", "$1"),
    ("KHR", CurrencyType.FIAT, 2, "\u17db", "$1"),
    ("KPW", CurrencyType.FIAT, 0, "\u20a9", "$1"),
    ("KRW", CurrencyType.FIAT, 0, "\u20a9", "$1"),
    ("KWD", CurrencyType.FIAT, 3, ".\u062f.\u0643", "1 $"),
    ("KYD", CurrencyType.FIAT, 2, "$", "$1"),
    ("KZT", CurrencyType.FIAT, 2, "\u20b8", "$1"),
    ("LAK", CurrencyType.FIAT, 2, "\u20ad", "$1"),
    ("LBP", CurrencyType.FIAT, 2, "\u00a3", "$1"),
    ("LKR", CurrencyType.FIAT, 2, "\u20a8", "$1"),
    ("LRD", CurrencyType.FIAT, 2, "$", "$1"),
    ("LTL", CurrencyType.FIAT, 2, "Lt", "$1"),
    ("LVL", CurrencyType.FIAT, 2, "Ls", "1 $"),
    ("LYD", CurrencyType.FIAT, 3, ".\u062f.\u0644", "1 $"),
    ("MAD", CurrencyType.FIAT, 2, ".\u062f.\u0645", "1 $"),
    ("MKD", CurrencyType.FIAT, 2, "\u0434\u0435\u043d", "$1"),
    ("MNT", CurrencyType.FIAT, 2, "\u20ae", "$1"),
    ("MUR", CurrencyType.FIAT, 2, "\u20a8", "$1"),
    ("MXN", CurrencyType.FIAT, 2, "$", "$1"),
    ("MWK", CurrencyType.FIAT, 2, "MK", "$1"),
    ("MYR", CurrencyType.FIAT, 2, "RM", "$1"),
    ("MZN", CurrencyType.FIAT, 2, "MT", "$1"),
    ("NAD", CurrencyType.FIAT, 2, "$", "$1"),
    ("NGN", CurrencyType.FIAT, 2, "\u20a6", "$1"),
    ("NIO", CurrencyType.FIAT, 2, "C$", "$1"),
    ("NOK", CurrencyType.FIAT, 2, "kr", "1 $"),
    ("NPR", CurrencyType.FIAT, 2, "\u20a8", "$1"),
    ("NZD", CurrencyType.FIAT, 2, "$", "$1"),
    ("OMR", CurrencyType.FIAT, 3, "\ufdfc", "1 $"),
    ("PAB", CurrencyType.FIAT, 2, "B/.", "$1"),
    ("PEN", CurrencyType.FIAT, 2, "S/", "$1"),
    ("PHP", CurrencyType.FIAT, 2, "\u20b1", "$1"),
    ("PKR", CurrencyType.FIAT, 2, "\u20a8", "$1"),
    ("PLN", CurrencyType.FIAT, 2, "z\u0142", "1 $"),
    ("PYG", CurrencyType.FIAT, 0, "Gs", "1$"),
    ("QAR", CurrencyType.FIAT, 2, "\ufdfc", "1 $"),
    ("RON", CurrencyType.FIAT, 2, "lei", "$1"),
    ("RSD", CurrencyType.FIAT, 2, "\u0414\u0438\u043d.", "$1"),
    ("RUB", CurrencyType.FIAT, 2, "\u20bd", "1 $"),
    ("RUR", CurrencyType.FIAT, 2, "\u20bd", "1 $"),
    ("SAR", CurrencyType.FIAT, 2, "\ufdfc", "1 $"),
    ("SBD", CurrencyType.FIAT, 2, "$", "$1"),
    ("SCR", CurrencyType.FIAT, 2, "\u20a8", "$1"),
    ("SEK", CurrencyType.FIAT, 2, "kr", "1 $"),
    ("SGD", CurrencyType.FIAT, 2, "$", "$1"),
    ("SHP", CurrencyType.FIAT, 2, "\u00a3", "$1"),
    ("SOS", CurrencyType.FIAT, 2, "S", "$1"),
    ("SRD", CurrencyType.FIAT, 2, "$", "$1"),
    ("SVC", CurrencyType.FIAT, 2, "$", "$1"),
    ("SYP", CurrencyType.FIAT, 2, "\u00a3", "$1"),
    ("THB", CurrencyType.FIAT, 2, "\u0e3f", "$1"),
    ("TND", CurrencyType.FIAT, 3, ".\u062f.\u062a", "1 $"),
    ("TRL", CurrencyType.FIAT, 2, "\u20a4", "$1"),
    ("TRY", CurrencyType.FIAT, 2, "\u20ba", "$1"),
    ("TTD", CurrencyType.FIAT, 2, "TT$", "$1"),
    ("TWD", CurrencyType.FIAT, 0, "NT$", "$1"),
    ("TZS", CurrencyType.FIAT, 0, "TSh", "$1"),
    ("UAH", CurrencyType.FIAT, 2, "\u20b4", "$1"),
    ("UGX", CurrencyType.FIAT, 0, "USh", "$1"),
    ("USD", CurrencyType.FIAT, 2, "$", "$1"),
    ("UYU", CurrencyType.FIAT, 0, "$U", "$1"),
    ("UZS", CurrencyType.FIAT, 2, "so\u2019m", "$1"),
    ("VEF", CurrencyType.FIAT, 2, "Bs", "$1"),
    ("VND", CurrencyType.FIAT, 0, "\u20ab", "1 $"),
    ("XCD", CurrencyType.FIAT, 2, "$", "$1"),
    ("YER", CurrencyType.FIAT, 2, "\ufdfc", "1 $"),
    ("ZAR", CurrencyType.FIAT, 2, "R", "$1"),
    ("ZMW", CurrencyType.FIAT, 2, "ZK", "$1"),
    ("ZWD", CurrencyType.FIAT, 2, "Z$", "$1"),
    # Cryptocurrencies; Bitcoin has two codes in use, XBT is the ISO 4217 style one
    ("BTC", CurrencyType.CRYPTO, 8, "\u20bf", "$1"),
    ("XBT", CurrencyType.CRYPTO, 8, "\u20bf", "$1"),
)

PREDEFINED_CURRENCIES: tuple[Currency, ...] = tuple(
    Currency(code, fraction_digits, currency_type, grapheme=grapheme, template=template) for code, currency_type, fraction_digits, grapheme, template in _PREDEFINED_TABLE
)

DEFAULT_REGISTRY = CurrencyRegistry(PREDEFINED_CURRENCIES + (UNKNOWN_CURRENCY,))

# Frequently used currencies
USD = DEFAULT_REGISTRY.lookup("USD")
EUR = DEFAULT_REGISTRY.lookup("EUR")
GBP = DEFAULT_REGISTRY.lookup("GBP")
JPY = DEFAULT_REGISTRY.lookup("JPY")
BTC = DEFAULT_REGISTRY.lookup("BTC")
