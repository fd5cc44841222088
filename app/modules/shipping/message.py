"""
Text handed to WhatsApp or the clipboard for a shipping form.
Templates match what customers and agents already receive.
"""

from typing import Any, List, Optional

from app.core.config import config
from .photos import parse_vehicle_photos

SEPARATOR = "------------------"


def _status(form: Any) -> str:
    return getattr(form.status, "value", form.status) or ""


def _or_na(value: Any) -> str:
    return value or "N/A"


def build_share_message(form: Any, signature: Optional[str] = None) -> str:
    """Message sent to the customer with the form's documents and photos."""
    lines = [
        "*Shipping Details*",
        SEPARATOR,
        "*Customer Info*",
        f"Name: {form.name}",
        f"Phone: {form.phone}",
        f"Address: {_or_na(form.address)}",
        "",
        "*Vehicle Info*",
        f"Model: {form.vehicle_model}",
        f"VIN: {_or_na(form.vin_number)}",
        f"Status: {_status(form)}",
        "",
        "*Documents & Media*",
    ]
    message = "\n".join(lines)

    if form.pdf_url:
        message += f"\n📄 *Shipping Form PDF*: {form.pdf_url}"
    if form.passport_photo_url:
        message += f"\n🛂 *Passport Photo*: {form.passport_photo_url}"
    if form.id_card_url:
        message += f"\n🆔 *ID Card*: {form.id_card_url}"

    photos: List[str] = parse_vehicle_photos(form.vehicle_photos_urls)
    if photos:
        message += "\n\n🚗 *Vehicle Photos*:"
        for index, url in enumerate(photos, start=1):
            message += f"\n{index}. {url}"

    message += f"\n\n{SEPARATOR}\n*{signature or config.company_name}*"
    return message


def build_copy_text(form: Any) -> str:
    """Full field dump for pasting into other tools."""
    photos = parse_vehicle_photos(form.vehicle_photos_urls)
    lines = [
        "*Shipping Details*",
        SEPARATOR,
        "*Customer Info*",
        f"Name: {form.name}",
        f"Phone: {form.phone}",
        f"Email: {_or_na(form.email)}",
        f"Address: {_or_na(form.address)}",
        f"Passport: {_or_na(form.passport_number)}",
        f"ID Card: {_or_na(form.id_card_number)}",
        f"Postal Code: {_or_na(form.code_postal)}",
        f"City Name: {_or_na(form.zip_number)}",
        "",
        "*Vehicle Info*",
        f"Model: {form.vehicle_model}",
        f"VIN: {_or_na(form.vin_number)}",
        f"Status: {_status(form)}",
        f"Notes: {_or_na(form.notes)}",
        "",
        "*Documents & Media*",
        f"PDF: {form.pdf_url}" if form.pdf_url else "",
        f"Passport Photo: {form.passport_photo_url}" if form.passport_photo_url else "",
        f"ID Card (Front): {form.id_card_url}" if form.id_card_url else "",
        f"ID Card (Back): {form.id_card_back_url}" if form.id_card_back_url else "",
        "",
        "*Vehicle Photos*",
        "\n".join(f"{index}. {url}" for index, url in enumerate(photos, start=1)),
    ]
    return "\n".join(lines).strip()


def build_pdf_share_message(form: Any) -> str:
    """Short note sent without a recipient, the PDF itself is attached by hand."""
    return f"Here is the shipping document for {form.name}."
