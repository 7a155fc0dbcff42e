"""Currency conversion and formatting utilities.

Every amount is persisted in the base currency (NTD).  Display currencies
are derived with fixed rates; no exchange rates are fetched.
"""

from __future__ import annotations

from typing import Dict, Union

BASE_CURRENCY = "NTD"
CURRENCIES = ("NTD", "USD", "CAD")

# Rates for converting an amount in the given currency into NTD
TO_BASE_RATES: Dict[str, float] = {
    "NTD": 1.0,
    "USD": 32.26,
    "CAD": 23.26,
}

# Reciprocals, so converting to NTD and back returns the original amount
FROM_BASE_RATES: Dict[str, float] = {code: 1 / rate for code, rate in TO_BASE_RATES.items()}

CURRENCY_SYMBOLS: Dict[str, str] = {
    "NTD": "NT$",
    "USD": "$",
    "CAD": "CA$",
}


def to_base(amount: Union[float, int], from_currency: str) -> float:
    """Convert an amount expressed in ``from_currency`` into NTD.

    Args:
        amount: The amount in ``from_currency``
        from_currency: One of :data:`CURRENCIES`

    Returns:
        The amount in the base currency

    Raises:
        KeyError: If the currency code is not recognised

    Example:
        >>> to_base(250, "NTD")
        250.0
    """
    return amount * TO_BASE_RATES[from_currency]


def from_base(amount_base: Union[float, int], to_currency: str) -> float:
    """Convert an NTD amount into ``to_currency``.

    Raises:
        KeyError: If the currency code is not recognised
    """
    return amount_base * FROM_BASE_RATES[to_currency]


def format_amount(amount_base: Union[float, int], currency: str = BASE_CURRENCY) -> str:
    """Format an NTD amount for display in ``currency``.

    The base currency is shown without decimals, other currencies with two.

    Example:
        >>> format_amount(1500)
        'NT$1500'
        >>> format_amount(3226, "USD")
        '$100.00'
    """
    converted = from_base(amount_base, currency)
    symbol = CURRENCY_SYMBOLS[currency]
    if currency == BASE_CURRENCY:
        return f"{symbol}{converted:.0f}"
    return f"{symbol}{converted:.2f}"
