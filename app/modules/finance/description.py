"""
Description overflow codec.

Values without a column of their own are stored as labelled suffix lines on
the transaction description:

    Sold sedan
    (Related Order: WA-2025-000012)
    ID Card: ID123
    Address: Algiers
    Notes: call first

Labels and order must stay exactly as below so existing rows keep decoding.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import re


@dataclass
class DescriptionExtras:
    related_order_number: str = ""
    customer_id_card: str = ""
    customer_address: str = ""
    notes: str = ""


# (field, suffix template, decode pattern), in encode and decode order
_OVERFLOW_FIELDS = (
    ("related_order_number", "\n(Related Order: {})", re.compile(r"\n\(Related Order: (.*)\)")),
    ("customer_id_card", "\nID Card: {}", re.compile(r"\nID Card: (.*)")),
    ("customer_address", "\nAddress: {}", re.compile(r"\nAddress: (.*)")),
    ("notes", "\nNotes: {}", re.compile(r"\nNotes: (.*)")),
)

# Written by older versions, dropped on read
_LEGACY_PATTERNS = (
    re.compile(r"\nSeller: (.*)"),
    re.compile(r"\nBuyer: (.*)"),
)


def encode_description(base: Optional[str], extras: DescriptionExtras) -> str:
    """Append every non-empty extra to the base description."""
    description = base or ""
    for field, template, _ in _OVERFLOW_FIELDS:
        value = getattr(extras, field)
        if value:
            description += template.format(value)
    return description


def _strip_first(description: str, pattern: re.Pattern) -> Tuple[str, Optional[str]]:
    match = pattern.search(description)
    if not match:
        return description, None
    return description.replace(match.group(0), "", 1), match.group(1)


def decode_description(stored: Optional[str]) -> Tuple[str, DescriptionExtras]:
    """
    Split a stored description back into its base text and the extras.

    Each match removes exactly its own substring, the remaining text is trimmed.
    """
    description = stored or ""
    for pattern in _LEGACY_PATTERNS:
        description, _ = _strip_first(description, pattern)

    extras = DescriptionExtras()
    for field, _, pattern in _OVERFLOW_FIELDS:
        description, value = _strip_first(description, pattern)
        if value is not None:
            setattr(extras, field, value)

    return description.strip(), extras
