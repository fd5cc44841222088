"""
Vehicle photo URL lists.

The column has held three shapes over time: a native list, a JSON array
string and a Postgres array literal ("{url1,url2}"). Every read goes through
parse_vehicle_photos, every write through serialize_vehicle_photos.
"""

from typing import Any, Iterable, List, Optional
import json


def _clean(items: Iterable[Any]) -> List[str]:
    urls = []
    for item in items:
        if item is None:
            continue
        url = str(item).strip().strip('"').strip()
        if url and url != "null":
            urls.append(url)
    return urls


def parse_vehicle_photos(raw: Any) -> List[str]:
    """
    Parse any stored shape into a list of URLs.

    JSON is tried first; anything else has its braces and quotes stripped and
    is split on commas. Empty and "null" entries are dropped.
    """
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return _clean(raw)
    if not isinstance(raw, str):
        return []

    text = raw.strip()
    if not text:
        return []

    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None
    if isinstance(parsed, list):
        return _clean(parsed)

    if text[0] in "{[":
        text = text[1:]
    if text and text[-1] in "}]":
        text = text[:-1]
    return _clean(text.split(","))


def serialize_vehicle_photos(raw: Any) -> Optional[str]:
    """JSON array text for storage, None when there are no photos."""
    urls = parse_vehicle_photos(raw)
    return json.dumps(urls) if urls else None
