"""Exceptions raised by the fixed_money package.

There are two families:

- `ReportedMoneyError`: recoverable problems caused by input data (unknown currency code,
  malformed amount text, short binary payload, currency already set). Each instance carries
  a usable sentinel in $fallback so callers may continue defensively.
- `MoneyContractError`: programming errors (mixing currencies, non-finite floats, invalid
  cash-rounding interval, division by zero). Callers must not attempt recovery.
"""
from __future__ import annotations

from typing import Any


class MoneyError(Exception):
    """Base class for all errors raised by fixed_money."""


# region Reported errors


class ReportedMoneyError(MoneyError):
    """Recoverable error that carries a usable sentinel result.

    Attributes:
        fallback: Sentinel value the failed operation would have produced (usually a zero
            `Money` in `BAD_CURRENCY` or `UNKNOWN_CURRENCY`), or None when no sentinel applies.
    """

    def __init__(self, message: str, fallback: Any = None) -> None:
        super().__init__(message)
        self.fallback = fallback


class UnknownCurrencyError(ReportedMoneyError, ValueError):
    """Currency code is not present in the registry."""

    def __init__(self, code: str, fallback: Any = None) -> None:
        super().__init__(f"Currency [{code}] not supported", fallback)
        self.code = code


class InvalidAmountError(ReportedMoneyError, ValueError):
    """Amount text could not be parsed as a finite decimal number."""


class MalformedPayloadError(ReportedMoneyError, ValueError):
    """Binary payload does not follow the Money byte layout."""


class InsufficientDataError(MalformedPayloadError):
    """Binary payload is shorter than the minimum header size."""


class CurrencyAlreadySetError(ReportedMoneyError):
    """Currency of a Money can only be set while it is still the unknown sentinel."""


# endregion

# region Contract violations


class MoneyContractError(MoneyError):
    """Programming error. Do not catch and continue; fix the calling code."""


class CurrencyMismatchError(MoneyContractError):
    """Binary operation between two Money values with different currencies."""


class NonFiniteValueError(MoneyContractError, ValueError):
    """NaN or infinite value used where only finite decimals are representable."""


class InvalidCashIntervalError(MoneyContractError, ValueError):
    """Cash rounding interval outside of {5, 10, 15, 25, 50, 100}."""


class DivisionByZeroError(MoneyContractError, ZeroDivisionError):
    """Divisor has a zero amount."""


# endregion
