from decimal import Decimal

from storefront.utils.currency import format_minor, format_price, get_currency


def test_format_price():
    assert format_price(Decimal("49.99"), "USD") == "$49.99"
    assert format_price(Decimal("1234.5"), "usd") == "$1,234.50"
    assert format_price(10, "EUR") == "€10.00"
    assert format_price(Decimal("-5"), "GBP") == "-£5.00"


def test_zero_decimal_currencies():
    assert format_price(Decimal("1500.4"), "JPY") == "¥1,500"
    assert format_minor(1500, "JPY") == "¥1,500"
    assert format_minor(25000, "KRW") == "₩25,000"


def test_format_minor():
    assert format_minor(5998, "usd") == "$59.98"
    assert format_minor(0, "PLN") == "zł 0.00"


def test_unknown_currency_falls_back_to_usd():
    assert get_currency("XYZ").code == "USD"
    assert get_currency(None).code == "USD"
    assert format_minor(100, "XYZ") == "$1.00"
