"""
Text Helpers

Small conversions shared by the parsers: entity decoding, tag stripping,
number parsing and nested-structure traversal.
"""

import html
import math
import re
from typing import Any

_TAG_RE = re.compile(r'<[^>]+>')


def decode_html_entities(text: str) -> str:
    """Decode HTML entities (&amp;, &#39;, &#x27; ...) in a candidate string."""
    if not text:
        return ''
    return html.unescape(text)


def strip_tags(fragment: str) -> str:
    """Remove markup tags, keeping only the text between them."""
    return _TAG_RE.sub('', fragment or '')


def clean_text(text: str) -> str:
    """Decode entities and trim surrounding whitespace."""
    return decode_html_entities(text).strip()


def parse_count(text: str) -> int:
    """Parse an integer count, dropping thousands separators ("1,234" -> 1234)."""
    return int(str(text).replace(',', '').strip())


def parse_optional_int(value: Any, default: int = 0) -> int:
    """Leading-integer parse of loosely typed values ("4", 4.0, "5 stars")."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else default
    match = re.match(r'\s*(-?\d+)', str(value))
    return int(match.group(1)) if match else default


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def safe_get(obj: Any, *indices, default=None) -> Any:
    """Safely traverse nested structures"""
    try:
        current = obj
        for idx in indices:
            if current is None:
                return default
            if isinstance(current, list) and isinstance(idx, int):
                if idx < len(current):
                    current = current[idx]
                else:
                    return default
            elif isinstance(current, dict):
                current = current.get(idx, default)
            else:
                return default
        return current
    except (IndexError, KeyError, TypeError):
        return default

