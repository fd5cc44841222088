"""Tests for the currency converter."""

import pytest

from app.modules.currency.conversion import (
    ConversionMode,
    ConverterRates,
    UNAVAILABLE,
    convert,
    format_conversion,
)
from conftest import data

RATES = ConverterRates(usdt_to_dzd=200.0, krw_to_usdt=0.00075)


class TestConvert:
    def test_usdt_to_dzd(self):
        assert convert(100, ConversionMode.USDT_DZD, RATES) == 20000.0

    def test_dzd_to_usdt(self):
        assert convert("20000", ConversionMode.DZD_USDT, RATES) == 100.0

    def test_krw_to_usdt(self):
        assert convert(1_000_000, ConversionMode.KRW_USDT, RATES) == pytest.approx(750.0)

    def test_krw_to_dzd_chains_through_usdt(self):
        assert convert(1_000_000, ConversionMode.KRW_DZD, RATES) == pytest.approx(150000.0)

    def test_unparseable_amount_is_unavailable(self):
        assert convert("abc", ConversionMode.USDT_DZD, RATES) is None
        assert convert("", ConversionMode.USDT_DZD, RATES) is None
        assert convert(None, ConversionMode.KRW_DZD, RATES) is None

    def test_zero_rate_division_is_unavailable(self):
        rates = ConverterRates(usdt_to_dzd=0.0, krw_to_usdt=0.00075)
        assert convert(100, ConversionMode.DZD_USDT, rates) is None

    def test_numeric_prefix_is_accepted(self):
        assert convert("12abc", ConversionMode.USDT_DZD, RATES) == 2400.0


class TestFormatConversion:
    def test_thousands_separator_and_currency(self):
        assert format_conversion(20000.0, ConversionMode.USDT_DZD) == "20,000 DZD"

    def test_dzd_to_usdt_keeps_two_digits(self):
        assert format_conversion(1 / 3, ConversionMode.DZD_USDT) == "0.33 USDT"

    def test_other_modes_keep_three_digits(self):
        assert format_conversion(1234.56789, ConversionMode.KRW_DZD) == "1,234.568 DZD"

    def test_trailing_zeros_dropped(self):
        assert format_conversion(750.0, ConversionMode.KRW_USDT) == "750 USDT"

    def test_unavailable(self):
        assert format_conversion(None, ConversionMode.USDT_DZD) == UNAVAILABLE


class TestConverterApi:
    def test_default_rates_until_saved(self, client):
        response = client.get("/api/currency/rates")
        assert response.status_code == 200
        assert data(response) == {"usdt_to_dzd": 200.0, "krw_to_usdt": 0.00075}

    def test_saved_rates_drive_conversion(self, client):
        response = client.put(
            "/api/currency/rates", json={"usdt_to_dzd": 250, "krw_to_usdt": 0.0007}
        )
        assert response.status_code == 200

        response = client.post("/api/currency/convert", json={"amount": "100", "mode": "USDT_DZD"})
        result = data(response)
        assert result["result"] == 25000.0
        assert result["display"] == "25,000 DZD"

    def test_rates_must_be_positive(self, client):
        response = client.put("/api/currency/rates", json={"usdt_to_dzd": 0, "krw_to_usdt": 0.0007})
        assert response.status_code == 422

    def test_invalid_amount_is_not_an_error(self, client):
        response = client.post("/api/currency/convert", json={"amount": "abc", "mode": "KRW_DZD"})
        assert response.status_code == 200
        result = data(response)
        assert result["result"] is None
        assert result["display"] == "---"
