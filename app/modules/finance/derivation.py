"""
Derived values of a financial transaction.

Form values arrive the way text inputs hold them: numbers, numeric strings,
blanks. Blank or invalid numbers count as 0 in every sum. The same functions
serve the preview endpoint, create/update, and the detail view.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Tuple

from app.core.exceptions import ValidationError
from app.core.utils import parse_number, to_float
from .models import CAR_CATEGORIES, PaymentStatus

__all__ = [
    "FinancialSummary",
    "parse_number",
    "to_float",
    "is_car_category",
    "total_commissions",
    "remaining_amount",
    "net_profit",
    "compute_car_buying_price",
    "recompute_car_buying_price",
    "buying_price_inputs",
    "derive_financials",
    "validate_transaction_form",
    "resolve_paid_amount",
]


@dataclass
class FinancialSummary:
    total_commissions: float
    remaining: float
    # None outside the car categories
    net_profit: Optional[float]
    car_buying_price: Optional[float]


def is_car_category(category: Any) -> bool:
    value = getattr(category, "value", category)
    return value in [c.value for c in CAR_CATEGORIES]


def total_commissions(seller: Any, buyer: Any, bureau: Any) -> float:
    return to_float(seller) + to_float(buyer) + to_float(bureau)


def remaining_amount(amount: Any, paid: Any) -> float:
    """Unpaid balance, never negative."""
    return max(0.0, to_float(amount) - to_float(paid))


def net_profit(amount: Any, car_buying_price: Any, commissions: float) -> float:
    return to_float(amount) - to_float(car_buying_price) - commissions


def compute_car_buying_price(
    buying_currency: Optional[str],
    original_buying_price: Any,
    rate_dzd_usdt: Any,
    rate_usdt_krw: Any,
) -> Optional[float]:
    """
    DZD price of a car bought in another currency.

    - DZD: the original price
    - USDT: original * DZD per USDT
    - KRW: (original / KRW per USDT) * DZD per USDT, None without a KRW rate

    Returns None for any other currency.
    """
    original = to_float(original_buying_price)
    dzd_per_usdt = to_float(rate_dzd_usdt)

    if buying_currency == "DZD":
        return original
    if buying_currency == "USDT":
        return original * dzd_per_usdt
    if buying_currency == "KRW":
        krw_per_usdt = to_float(rate_usdt_krw)
        if krw_per_usdt > 0:
            return (original / krw_per_usdt) * dzd_per_usdt
        return None
    return None


def recompute_car_buying_price(
    current: Any,
    buying_currency: Optional[str],
    original_buying_price: Any,
    rate_dzd_usdt: Any,
    rate_usdt_krw: Any,
) -> Optional[float]:
    """
    Stored car_buying_price after one of its four inputs changed.

    The current value is only replaced by a positive result, rounded to
    2 decimals, so a half-typed input never clobbers a saved price.
    """
    computed = compute_car_buying_price(
        buying_currency, original_buying_price, rate_dzd_usdt, rate_usdt_krw
    )
    if computed is not None and computed > 0:
        return round(computed, 2)
    return parse_number(current)


def buying_price_inputs(source: Any) -> Tuple[Optional[str], Optional[float], Optional[float], Optional[float]]:
    """The four values car_buying_price is computed from, parsed so rows and forms compare."""
    return (
        source.buying_currency or None,
        parse_number(source.original_buying_price),
        parse_number(source.exchange_rate_dzd_usdt),
        parse_number(source.exchange_rate_usdt_krw),
    )


def derive_financials(form: Any, recompute_price: bool = True) -> FinancialSummary:
    """
    Summary shown under the transaction form.

    Args:
        form: anything carrying the transaction fields as attributes
              (the request DTO or a stored FinancialTransaction)
        recompute_price: derive car_buying_price from the buying currency and
              rates; when False the given car_buying_price is used as is
    """
    commissions = total_commissions(
        form.seller_commission, form.buyer_commission, form.bureau_commission
    )

    car_buying_price = parse_number(form.car_buying_price)
    profit = None
    if is_car_category(form.category):
        if recompute_price:
            car_buying_price = recompute_car_buying_price(
                form.car_buying_price,
                form.buying_currency,
                form.original_buying_price,
                form.exchange_rate_dzd_usdt,
                form.exchange_rate_usdt_krw,
            )
        profit = net_profit(form.amount, car_buying_price, commissions)

    return FinancialSummary(
        total_commissions=commissions,
        remaining=remaining_amount(form.amount, form.paid_amount),
        net_profit=profit,
        car_buying_price=car_buying_price,
    )


def validate_transaction_form(form: Any, today: Optional[date] = None) -> float:
    """
    Checks run before anything is written.

    Returns:
        float: the parsed amount

    Raises:
        ValidationError: with the message shown to the user
    """
    amount = parse_number(form.amount)
    if amount is None or amount <= 0:
        raise ValidationError("Please enter a valid amount greater than 0")

    if form.payment_status == PaymentStatus.Partial:
        paid = parse_number(form.paid_amount)
        if paid is None or paid < 0:
            raise ValidationError("Please enter a valid paid amount")
        if paid > amount:
            raise ValidationError("Paid amount cannot be greater than total amount")

    if is_car_category(form.category) and form.car_year:
        year = parse_number(form.car_year)
        max_year = (today or date.today()).year + 1
        if year is None or int(year) < 1900 or int(year) > max_year:
            raise ValidationError("Please enter a valid car year")

    if not (form.description or "").strip():
        raise ValidationError("Please enter a description")

    return amount


def resolve_paid_amount(payment_status: PaymentStatus, amount: float, paid_amount: Any) -> float:
    """paid_amount as stored: the full amount when Paid, the typed value when Partial, else 0."""
    if payment_status == PaymentStatus.Partial:
        return to_float(paid_amount)
    if payment_status == PaymentStatus.Paid:
        return amount
    return 0.0
