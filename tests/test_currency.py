import pytest

from finance_tracker.currency import CURRENCIES, format_amount, from_base, to_base


def test_to_base_uses_fixed_rates():
    assert to_base(100, 'USD') == pytest.approx(3226)
    assert to_base(100, 'CAD') == pytest.approx(2326)
    assert to_base(250, 'NTD') == 250


def test_from_base_inverts_to_base():
    for code in CURRENCIES:
        assert from_base(to_base(12.34, code), code) == pytest.approx(12.34)


def test_unknown_currency_raises():
    with pytest.raises(KeyError):
        to_base(10, 'EUR')
    with pytest.raises(KeyError):
        from_base(10, 'EUR')


def test_format_amount_per_currency():
    assert format_amount(1500) == 'NT$1500'
    assert format_amount(3226, 'USD') == '$100.00'
    assert format_amount(2326, 'CAD') == 'CA$100.00'
