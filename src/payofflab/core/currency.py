"""
Currency and precision handling for PayoffLab.

All balances, payments and interest are carried as ``Decimal`` with guard
digits during a simulation. Rounding to currency precision happens only
when a figure is reported.
"""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Context, Decimal, InvalidOperation
from enum import Enum

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")

# Working precision for interest and balance accumulation
GUARD_CONTEXT = Context(prec=34, rounding=ROUND_HALF_EVEN)


class RoundingPolicy(Enum):
    """Rounding policies for currency calculations."""

    BANKERS = ROUND_HALF_EVEN
    HALF_UP = ROUND_HALF_UP


class Currency:
    """
    Currency definition with precision and rounding rules.

    Attributes:
        code: ISO currency code (e.g., 'USD', 'EUR', 'JPY')
        decimals: Number of decimal places for this currency
        rounding: Rounding policy for reported amounts
    """

    def __init__(
        self,
        code: str,
        decimals: int = 2,
        rounding: RoundingPolicy = RoundingPolicy.HALF_UP,
    ):
        self.code = code.upper()
        self.decimals = decimals
        self.rounding = rounding

    def quantize(self, amount: Decimal) -> Decimal:
        """Quantize amount to currency precision."""
        quantum = ONE.scaleb(-self.decimals)  # e.g., 0.01 for 2 dp, 1 for 0 dp
        return amount.quantize(quantum, rounding=self.rounding.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Currency):
            return False
        return (
            self.code == other.code
            and self.decimals == other.decimals
            and self.rounding == other.rounding
        )

    def __hash__(self) -> int:
        return hash((self.code, self.decimals, self.rounding))

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency('{self.code}', decimals={self.decimals})"


# Standard currency definitions
USD = Currency("USD", decimals=2)
EUR = Currency("EUR", decimals=2)
GBP = Currency("GBP", decimals=2)
JPY = Currency("JPY", decimals=0)

# Currency registry
CURRENCIES: dict[str, Currency] = {
    "USD": USD,
    "EUR": EUR,
    "GBP": GBP,
    "JPY": JPY,
}


def get_currency(code: str | Currency) -> Currency:
    """Get currency by code."""
    if isinstance(code, Currency):
        return code
    code = code.upper()
    if code not in CURRENCIES:
        # Default to 2 decimal places for unknown currencies
        return Currency(code, decimals=2)
    return CURRENCIES[code]


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """
    Convert a raw amount to ``Decimal`` without passing through binary floats.

    Floats are converted through ``str()`` so that ``0.1`` becomes
    ``Decimal("0.1")`` rather than its binary expansion.

    Raises:
        TypeError: If the value is not a number or numeric string
        ValueError: If the value is not finite or cannot be parsed
    """
    if isinstance(value, bool):
        raise TypeError(f"expected a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"not a number: {value!r}") from exc
    else:
        raise TypeError(f"expected a number, got {type(value).__name__}")
    if not result.is_finite():
        raise ValueError(f"amount must be finite, got {value!r}")
    return result


def round_money(amount: Decimal, currency: Currency | str = USD) -> Decimal:
    """Round an exact amount to the reporting precision of ``currency``."""
    return get_currency(currency).quantize(amount)


def format_money(amount: Decimal, currency: Currency | str = USD) -> str:
    """Format an amount for display, e.g. ``'1234.50 USD'``."""
    cur = get_currency(currency)
    return f"{cur.quantize(amount)} {cur.code}"
