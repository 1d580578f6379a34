from __future__ import annotations

from dataclasses import dataclass

from fixed_money.domain.numeric.fixed_decimal import FixedDecimal, FixedDecimalLike

# Placeholders used in currency templates
NUMBER_PLACEHOLDER = "1"
GRAPHEME_PLACEHOLDER = "$"


@dataclass(frozen=True)
class Formatter:
    """Renders decimal amounts using a currency's display metadata.

    The descriptor is independent of any registry, so callers can format with their own
    metadata, e.g. `Formatter(2, ".", ",", "$", "$1").format_currency(amount)`.

    Attributes:
        fraction_digits: Number of fractional digits shown; amounts are banker's rounded to it.
        decimal_point: Separator between integer and fractional digits.
        thousand_separator: Separator inserted every three integer digits. Empty disables grouping.
        grapheme: Currency symbol substituted for the "$" placeholder.
        template: Pattern where "1" marks the number and "$" the symbol, e.g. "$1" or "1 $".
    """

    fraction_digits: int
    decimal_point: str
    thousand_separator: str
    grapheme: str
    template: str

    def format(
        self,
        amount: FixedDecimalLike,
        *,
        thousands: bool = True,
        grapheme: bool = True,
        negatives_in_brackets: bool = False,
    ) -> str:
        """Format $amount with explicit options.

        Args:
            amount: The amount to be displayed.
            thousands: If False, the thousands separator is not inserted.
            grapheme: If False, the currency symbol is removed from the template.
            negatives_in_brackets: If True, negative amounts are shown as "(1.00)" instead of "-1.00".

        Returns:
            Formatted text.
        """
        value = FixedDecimal.of(amount)

        # Work with the absolute value, banker's rounded to the display digits
        int_part, _, fractional_part = value.abs().string_fixed_bank(self.fraction_digits).partition(".")

        if thousands and self.thousand_separator:
            groups = []
            while len(int_part) > 3:
                groups.append(int_part[-3:])
                int_part = int_part[:-3]
            groups.append(int_part)
            int_part = self.thousand_separator.join(reversed(groups))

        number = int_part + self.decimal_point + fractional_part if fractional_part else int_part

        result = self.template.replace(NUMBER_PLACEHOLDER, number, 1)
        if grapheme:
            result = result.replace(GRAPHEME_PLACEHOLDER, self.grapheme, 1)
        else:
            result = result.replace(GRAPHEME_PLACEHOLDER, "", 1).strip()

        if value.sign() < 0:
            result = f"({result})" if negatives_in_brackets else f"-{result}"

        return result

    def format_currency(self, amount: FixedDecimalLike) -> str:
        """Symbol shown, thousands grouped, minus sign for negatives: "-$1,234.50"."""
        return self.format(amount)

    def format_accounting(self, amount: FixedDecimalLike) -> str:
        """No symbol, no grouping, brackets for negatives: "(1234.50)"."""
        return self.format(amount, thousands=False, grapheme=False, negatives_in_brackets=True)

    def format_cash(self, amount: FixedDecimalLike, interval: int) -> str:
        """Cash round $amount with $interval first, then format like `format_currency`."""
        return self.format_currency(FixedDecimal.of(amount).round_cash(interval))
