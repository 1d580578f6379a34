__version__ = "0.1.0"

from fixed_money.domain.monetary.currency import Currency, CurrencyType
from fixed_money.domain.monetary.currency_registry import DEFAULT_REGISTRY, CurrencyRegistry
from fixed_money.domain.monetary.formatter import Formatter
from fixed_money.domain.monetary.money import Money, avg_money, max_money, min_money, sum_money
from fixed_money.domain.numeric.fixed_decimal import FixedDecimal

__all__ = [
    "Currency",
    "CurrencyRegistry",
    "CurrencyType",
    "DEFAULT_REGISTRY",
    "FixedDecimal",
    "Formatter",
    "Money",
    "avg_money",
    "max_money",
    "min_money",
    "sum_money",
]
