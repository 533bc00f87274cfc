"""Tests for currency formatting and conversion."""

import pytest
from pydantic import TypeAdapter

from components.currency.service import (
    CURRENCIES,
    CurrencyAmount,
    CurrencyInfo,
    StaticRateProvider,
    calculate_total,
    convert_currency,
    format_amount,
    format_currency,
    get_all_currencies,
    get_currency_info,
    is_valid_currency,
    normalize_amounts,
)


class TestCurrencyInfo:
    """Test the supported currency table."""

    def test_supported_codes(self):
        assert set(CURRENCIES) == {"ARS", "USD", "EUR"}
        assert [info["code"] for info in get_all_currencies()] == ["ARS", "USD", "EUR"]

    def test_ars_has_no_decimals(self):
        assert get_currency_info("ARS")["decimals"] == 0
        assert get_currency_info("USD")["decimals"] == 2

    def test_validity(self):
        assert is_valid_currency("EUR")
        assert not is_valid_currency("GBP")
        assert not is_valid_currency(None)
        assert get_currency_info("GBP") is None

    def test_types_are_usable_in_pydantic_models(self):
        info = TypeAdapter(CurrencyInfo).validate_python(get_currency_info("EUR"))
        assert info["code"] == "EUR"
        item = TypeAdapter(CurrencyAmount).validate_python({"amount": "12.5", "currency": "USD"})
        assert item["amount"] == 12.5


class TestFormatCurrency:
    """Test es-AR formatting."""

    def test_ars_rounds_to_units(self):
        assert format_currency(1234.56, "ARS") == "$ 1.235"

    def test_usd_two_decimals(self):
        assert format_currency(1234.56, "USD") == "US$ 1.234,56"

    def test_eur(self):
        assert format_currency(1000000, "EUR") == "€ 1.000.000,00"

    def test_negative(self):
        assert format_currency(-50, "USD") == "-US$ 50,00"

    def test_unknown_code_falls_back_to_code(self):
        assert format_currency(1234.5, "GBP") == "GBP 1.234,50"

    def test_format_amount_has_no_symbol(self):
        assert format_amount(-125000.7, "ARS") == "-125.001"


class TestConversion:
    """Test conversion through the static rate table."""

    def test_identity(self):
        assert convert_currency(42.5, "EUR", "EUR") == 42.5

    def test_usd_to_ars(self):
        assert convert_currency(10, "USD", "ARS") == pytest.approx(8500)

    def test_eur_to_usd(self):
        assert convert_currency(100, "EUR", "USD") == pytest.approx(109)

    @pytest.mark.parametrize("source,target", [("USD", "ARS"), ("ARS", "EUR"), ("EUR", "USD")])
    def test_round_trip(self, source, target):
        """Converting there and back returns the original amount."""
        amount = 1234.56
        there = convert_currency(amount, source, target)
        assert convert_currency(there, target, source) == pytest.approx(amount, rel=1e-9)

    def test_custom_provider(self):
        provider = StaticRateProvider({"ARS": 1000})
        assert convert_currency(2, "USD", "ARS", provider) == pytest.approx(2000)

    def test_missing_rate(self):
        with pytest.raises(ValueError):
            convert_currency(1, "USD", "GBP")

    def test_calculate_total(self):
        items = [{"amount": 850, "currency": "ARS"}, {"amount": 1, "currency": "USD"}]
        assert normalize_amounts(items, "USD") == pytest.approx([1, 1])
        assert calculate_total(items, "USD") == pytest.approx(2)
        assert calculate_total(items) == pytest.approx(1700)
