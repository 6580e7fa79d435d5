"""
Candidate Validation

Rejects listing names that are really noise picked up by loose patterns
(script fragments, opaque ids, URLs) and deduplicates listings by name.
"""

import re
from typing import List, Set

from ..models import BusinessRecord

_CODE_CHARS = re.compile(r'[{}();=+\\]')
_NUMERIC = re.compile(r'^\d+$')
_URL = re.compile(r'^https?://')
_HEX_TOKEN = re.compile(r'^[a-f0-9]{20,}$', re.IGNORECASE)
_PLACE_ID_PREFIX = re.compile(r'^ChIJ')
_CODE_KEYWORDS = re.compile(
    r'function|var |let |const |return |null|undefined|true|false|window\.',
    re.IGNORECASE,
)
_LETTER = re.compile(r'[a-zA-Z]')


def is_valid_business_name(name: str) -> bool:
    """Return True if the candidate looks like a human-readable business name."""
    if not name or len(name) < 2 or len(name) > 80:
        return False
    if _CODE_CHARS.search(name):
        return False
    if _NUMERIC.match(name):
        return False
    if _URL.match(name):
        return False
    if _HEX_TOKEN.match(name):
        return False
    if _PLACE_ID_PREFIX.match(name):
        return False
    if _CODE_KEYWORDS.search(name):
        return False
    if not _LETTER.search(name):
        return False
    return True


class ListingCollector:
    """
    Accumulates listings for a single extraction call.

    Keeps the first record seen for each exact name and drops records whose
    name fails ``is_valid_business_name``. The seen-set lives on the
    instance, so independent extraction calls never share it.
    """

    def __init__(self):
        self.businesses: List[BusinessRecord] = []
        self._seen: Set[str] = set()

    def add(self, business: BusinessRecord) -> bool:
        """Add a record; returns False when it was rejected or a duplicate."""
        if not is_valid_business_name(business.name):
            return False
        if business.name in self._seen:
            return False
        self._seen.add(business.name)
        self.businesses.append(business)
        return True

    def __len__(self):
        return len(self.businesses)
