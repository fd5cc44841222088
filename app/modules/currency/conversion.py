"""
Currency conversion between DZD, USDT and KRW.

Two user-editable rates drive every mode:
- usdt_to_dzd: DZD for one USDT
- krw_to_usdt: USDT for one KRW
KRW to DZD chains through USDT. Plain float arithmetic, no fixed-point.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from app.core.utils import parse_number

UNAVAILABLE = "---"


class ConversionMode(str, Enum):
    USDT_DZD = "USDT_DZD"
    DZD_USDT = "DZD_USDT"
    KRW_USDT = "KRW_USDT"
    KRW_DZD = "KRW_DZD"

    @property
    def target_currency(self) -> str:
        return self.value.split("_")[1]


@dataclass(frozen=True)
class ConverterRates:
    usdt_to_dzd: float = 200.0
    krw_to_usdt: float = 0.00075


def convert(amount: Any, mode: ConversionMode, rates: ConverterRates) -> Optional[float]:
    """
    Convert an amount with the given mode.

    Returns:
        Optional[float]: converted amount, None when the amount does not parse
        or the conversion would divide by a zero rate. Never raises.
    """
    value = parse_number(amount)
    if value is None:
        return None

    if mode == ConversionMode.USDT_DZD:
        return value * rates.usdt_to_dzd
    if mode == ConversionMode.DZD_USDT:
        if not rates.usdt_to_dzd:
            return None
        return value / rates.usdt_to_dzd
    if mode == ConversionMode.KRW_USDT:
        return value * rates.krw_to_usdt
    if mode == ConversionMode.KRW_DZD:
        return value * rates.krw_to_usdt * rates.usdt_to_dzd
    return None


def _format_number(value: float, max_fraction_digits: int) -> str:
    text = f"{round(value, max_fraction_digits):,.{max_fraction_digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_conversion(value: Optional[float], mode: ConversionMode) -> str:
    """
    Display string of a conversion result, e.g. "20,000 DZD".

    DZD to USDT keeps at most 2 fraction digits, the other modes 3.
    """
    if value is None:
        return UNAVAILABLE
    digits = 2 if mode == ConversionMode.DZD_USDT else 3
    return f"{_format_number(value, digits)} {mode.target_currency}"
