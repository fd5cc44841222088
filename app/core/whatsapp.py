"""
WhatsApp hand-off helpers.

Every outbound message in the dashboard (order contact, inventory broadcast,
shipping-form share) goes through these two functions so the destination
number is normalized the same way everywhere.
"""

from typing import Optional
from urllib.parse import quote
import re

from app.core.config import config

WHATSAPP_BASE_URL = "https://wa.me/"


def normalize_phone(phone: Optional[str], country_code: Optional[str] = None) -> str:
    """
    Normalize a phone number for wa.me.

    Rules, in order:
    1. keep digits only
    2. drop a leading international "00"
    3. drop a single leading trunk "0"
    4. prepend the country code unless already present

    "0559123456" -> "213559123456"
    "00213559123456" -> "213559123456"
    "213559123456" -> "213559123456"

    Empty input gives an empty string.
    """
    code = country_code or config.whatsapp_country_code
    digits = re.sub(r"\D", "", phone or "")
    if not digits:
        return ""

    if digits.startswith("00"):
        digits = digits[2:]
    if digits.startswith("0"):
        digits = digits[1:]
    if not digits.startswith(code):
        digits = code + digits

    return digits


def build_whatsapp_link(phone: Optional[str], message: Optional[str] = None) -> str:
    """
    Build a wa.me deep link, with the message URL-encoded as the text param.
    Without a phone the link opens the contact picker.
    """
    url = WHATSAPP_BASE_URL + normalize_phone(phone)
    if message:
        url += "?text=" + quote(message, safe="")
    return url
