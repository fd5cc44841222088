"""Core utility functions for the application"""

from datetime import datetime
from typing import Any, Optional
import re


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a form value the way a text input is read.

    Numbers pass through, strings are parsed after trimming (a leading
    numeric prefix such as "12abc" is accepted), anything else gives None.

    Args:
        value: raw field value (str, int, float or None)

    Returns:
        Optional[float]: parsed value, None when blank or unparseable
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None

    match = re.match(r"^\s*([+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?)", value)
    if not match:
        return None
    return float(match.group(1))


def to_float(value: Any) -> float:
    """Like parse_number, but blank or invalid input counts as 0."""
    parsed = parse_number(value)
    return parsed if parsed is not None else 0.0


def now_ms(moment: Optional[datetime] = None) -> int:
    """Milliseconds since the epoch."""
    moment = moment or datetime.now()
    return int(moment.timestamp() * 1000)


def format_display_date(moment: datetime) -> str:
    """
    Date string stored in history entries and shipping metadata.

    Returns:
        str: e.g. "19/10/2026"
    """
    return f"{moment.day}/{moment.month}/{moment.year}"


def current_month(moment: Optional[datetime] = None) -> str:
    """YYYY-MM of the given moment (default: now)."""
    return (moment or datetime.now()).strftime("%Y-%m")


def safe_file_name(name: str) -> str:
    """Lowercase name with every non-alphanumeric character replaced by '_'."""
    return re.sub(r"[^a-z0-9]", "_", (name or "").lower())
