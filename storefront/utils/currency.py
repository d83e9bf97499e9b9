# storefront/utils/currency.py
from decimal import Decimal, ROUND_HALF_UP
from typing import NamedTuple


class Currency(NamedTuple):
    code: str
    symbol: str
    decimals: int = 2


CURRENCIES = {
    "USD": Currency("USD", "$"),
    "EUR": Currency("EUR", "€"),
    "GBP": Currency("GBP", "£"),
    "CAD": Currency("CAD", "C$"),
    "AUD": Currency("AUD", "A$"),
    "JPY": Currency("JPY", "¥", 0),
    "CNY": Currency("CNY", "¥"),
    "INR": Currency("INR", "₹"),
    "CHF": Currency("CHF", "CHF "),
    "SEK": Currency("SEK", "kr "),
    "NOK": Currency("NOK", "kr "),
    "DKK": Currency("DKK", "kr "),
    "PLN": Currency("PLN", "zł "),
    "BRL": Currency("BRL", "R$"),
    "MXN": Currency("MXN", "$"),
    "SGD": Currency("SGD", "S$"),
    "HKD": Currency("HKD", "HK$"),
    "NZD": Currency("NZD", "NZ$"),
    "KRW": Currency("KRW", "₩", 0),
}

DEFAULT_CURRENCY = CURRENCIES["USD"]


def get_currency(code: str | None) -> Currency:
    """Unknown or empty codes fall back to USD."""
    return CURRENCIES.get((code or "").upper(), DEFAULT_CURRENCY)


def format_price(amount: Decimal | int | float, code: str | None = None) -> str:
    """Formats an amount in major units, e.g. Decimal("49.99") -> "$49.99"."""
    currency = get_currency(code)
    exp = Decimal(1).scaleb(-currency.decimals)
    value = Decimal(str(amount)).quantize(exp, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}{currency.symbol}{abs(value):,}"


def format_minor(amount_minor: int, code: str | None = None) -> str:
    """Formats an integer amount in minor units (cents), as stored on orders."""
    currency = get_currency(code)
    return format_price(Decimal(amount_minor).scaleb(-currency.decimals), currency.code)
