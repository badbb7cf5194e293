"""
Amount Formatting

Locale-aware currency rendering belongs to the presentation layer.
This is the plain fallback used when no formatter is injected.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Union

Number = Union[Decimal, int, float]

# (amount, currency code) -> display text
AmountFormatter = Callable[[Number, str], str]


def format_amount(amount: Number, currency: str = "COP") -> str:
    """
    Render an amount with its currency code.

    Whole amounts drop the decimals: format_amount(300, "COP") -> "COP 300".
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if value == value.to_integral_value():
        text = f"{value:,.0f}"
    else:
        text = f"{value:,.2f}"
    return f"{currency} {text}"
