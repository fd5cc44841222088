"""Tests for transaction financial derivation and form validation."""

from datetime import date
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from app.modules.finance.derivation import (
    buying_price_inputs,
    compute_car_buying_price,
    derive_financials,
    net_profit,
    recompute_car_buying_price,
    remaining_amount,
    resolve_paid_amount,
    total_commissions,
    validate_transaction_form,
)
from app.modules.finance.models import PaymentStatus, TransactionCategory


def make_form(**overrides):
    values = {
        "category": TransactionCategory.CAR_SALE,
        "amount": "5000000",
        "paid_amount": None,
        "payment_status": PaymentStatus.Pending,
        "description": "Sale of a Tucson",
        "car_year": None,
        "car_buying_price": None,
        "buying_currency": "KRW",
        "original_buying_price": None,
        "exchange_rate_dzd_usdt": None,
        "exchange_rate_usdt_krw": None,
        "seller_commission": None,
        "buyer_commission": None,
        "bureau_commission": None,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class TestBasicSums:
    def test_blank_commissions_count_as_zero(self):
        assert total_commissions("100", "", None) == 100.0
        assert total_commissions("x", "50.5", 10) == 60.5

    def test_remaining_never_negative(self):
        assert remaining_amount(1000, 400) == 600.0
        assert remaining_amount(1000, 1500) == 0.0
        assert remaining_amount("", "") == 0.0

    def test_net_profit(self):
        assert net_profit("5000000", "3500000", 150000) == 1350000.0


class TestCarBuyingPrice:
    def test_dzd_is_the_original_price(self):
        assert compute_car_buying_price("DZD", "3000000", None, None) == 3000000.0

    def test_usdt(self):
        assert compute_car_buying_price("USDT", "100", "135", None) == 13500.0

    def test_krw_goes_through_usdt(self):
        result = compute_car_buying_price("KRW", "20000000", "135", "1350")
        assert result == pytest.approx(2000000.0)

    def test_krw_example_from_the_form(self):
        # USDT step is not rounded: 1,000,000 / 1350 * 135
        assert compute_car_buying_price("KRW", 1_000_000, 135, 1350) == pytest.approx(100000.0)
        assert recompute_car_buying_price(None, "KRW", 1_000_000, 135, 1350) == 100000.0

    def test_krw_without_rate(self):
        assert compute_car_buying_price("KRW", "20000000", "135", "") is None

    def test_other_currency(self):
        assert compute_car_buying_price("EUR", "100", "135", "1350") is None

    def test_recompute_rounds_positive_results(self):
        assert recompute_car_buying_price(None, "KRW", "9999990", "135", "13500") == pytest.approx(99999.9)

    def test_recompute_keeps_current_on_non_positive(self):
        assert recompute_car_buying_price("2500000", "KRW", "", "135", "1350") == 2500000.0
        assert recompute_car_buying_price("2500000", "KRW", "100", "135", "0") == 2500000.0


class TestDeriveFinancials:
    def test_car_category_has_profit_and_price(self):
        form = make_form(
            amount="5000000",
            paid_amount="1000000",
            buying_currency="USDT",
            original_buying_price="20000",
            exchange_rate_dzd_usdt="200",
            seller_commission="50000",
            buyer_commission="25000",
        )
        summary = derive_financials(form)
        assert summary.car_buying_price == 4000000.0
        assert summary.total_commissions == 75000.0
        assert summary.net_profit == 925000.0
        assert summary.remaining == 4000000.0

    def test_other_category_has_no_profit(self):
        form = make_form(category=TransactionCategory.RENT, car_buying_price="120")
        summary = derive_financials(form)
        assert summary.net_profit is None
        assert summary.car_buying_price == 120.0

    def test_stored_price_is_kept_without_recompute(self):
        form = make_form(
            car_buying_price="120000",
            original_buying_price="1000000",
            exchange_rate_dzd_usdt="135",
            exchange_rate_usdt_krw="1350",
        )
        assert derive_financials(form).car_buying_price == 100000.0

        summary = derive_financials(form, recompute_price=False)
        assert summary.car_buying_price == 120000.0
        assert summary.net_profit == 4880000.0


class TestBuyingPriceInputs:
    def test_form_text_and_stored_numbers_compare_equal(self):
        form = make_form(original_buying_price="1000000", exchange_rate_dzd_usdt="135", exchange_rate_usdt_krw="")
        row = make_form(original_buying_price=1000000.0, exchange_rate_dzd_usdt=135.0, exchange_rate_usdt_krw=None)
        assert buying_price_inputs(form) == buying_price_inputs(row)

    def test_changed_rate_differs(self):
        form = make_form(exchange_rate_dzd_usdt="140")
        row = make_form(exchange_rate_dzd_usdt=135.0)
        assert buying_price_inputs(form) != buying_price_inputs(row)


class TestValidation:
    def test_returns_parsed_amount(self):
        assert validate_transaction_form(make_form(amount="1500.5")) == 1500.5

    @pytest.mark.parametrize("amount", ["", "0", "-5", "abc", None])
    def test_amount_must_be_positive(self, amount):
        with pytest.raises(HTTPException) as exc:
            validate_transaction_form(make_form(amount=amount))
        assert exc.value.detail == "Please enter a valid amount greater than 0"

    def test_partial_needs_a_paid_amount(self):
        form = make_form(payment_status=PaymentStatus.Partial, paid_amount="")
        with pytest.raises(HTTPException) as exc:
            validate_transaction_form(form)
        assert exc.value.detail == "Please enter a valid paid amount"

    def test_paid_amount_not_above_total(self):
        form = make_form(amount="1000", payment_status=PaymentStatus.Partial, paid_amount="1500")
        with pytest.raises(HTTPException) as exc:
            validate_transaction_form(form)
        assert exc.value.detail == "Paid amount cannot be greater than total amount"

    def test_car_year_range(self):
        today = date(2026, 5, 1)
        assert validate_transaction_form(make_form(car_year="2027"), today=today) == 5000000.0
        with pytest.raises(HTTPException) as exc:
            validate_transaction_form(make_form(car_year="2028"), today=today)
        assert exc.value.detail == "Please enter a valid car year"
        with pytest.raises(HTTPException):
            validate_transaction_form(make_form(car_year="1899"), today=today)

    def test_car_year_ignored_outside_car_categories(self):
        form = make_form(category=TransactionCategory.RENT, car_year="1700")
        assert validate_transaction_form(form) == 5000000.0

    def test_description_required(self):
        with pytest.raises(HTTPException) as exc:
            validate_transaction_form(make_form(description="   "))
        assert exc.value.detail == "Please enter a description"


class TestResolvePaidAmount:
    def test_paid_stores_full_amount(self):
        assert resolve_paid_amount(PaymentStatus.Paid, 1000.0, "10") == 1000.0

    def test_partial_stores_typed_value(self):
        assert resolve_paid_amount(PaymentStatus.Partial, 1000.0, "400") == 400.0

    def test_pending_stores_zero(self):
        assert resolve_paid_amount(PaymentStatus.Pending, 1000.0, "400") == 0.0
