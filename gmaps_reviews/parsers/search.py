"""
Search Results Extractor

Extracts business listings from Google Maps search pages and, as an
alternate source, from the basic-HTML Google local search page.

Maps search strategies, in order:
    1. Embedded JS data arrays: ["Name", "...", "...", "...", 4.5, ...
    2. Escaped APP_INITIALIZATION_STATE blobs: [\\"Name\\",\\"Address\\"
    3. Structured-data blocks (one per "@type" business declaration)
    4. Result cards (only if 1-3 found nothing)
    5. Bare aria-label names (only if still nothing)
    6. \\x22-escaped internal data (only if still nothing)

Every candidate goes through the same name validation and per-call
deduplication (see validation.py).
"""

import logging
import re
from typing import List, Optional

from ..models import BusinessRecord
from .business import extract_business_info, valid_rating
from .cascade import FieldCascade, pattern
from .segments import (
    LISTING_DELIMITERS,
    LOCAL_RESULT_DELIMITERS,
    STRUCTURED_DATA_DELIMITERS,
    split_fragments,
)
from .text import clean_text, decode_html_entities, parse_count
from .validation import ListingCollector

logger = logging.getLogger(__name__)

_I = re.IGNORECASE

_JS_DATA_ARRAY = re.compile(
    r'\["([^"]{2,80})",\s*"[^"]*",\s*"[^"]*",\s*"[^"]*"\s*,\s*([\d.]+)\s*,\s*[\d,]*\s*,'
)
_APP_STATE_PAIR = re.compile(r'\[\\"([^\\]{3,80})\\",\\"([^\\]{5,200})\\"')
_HEX_ESCAPED_PAIR = re.compile(r'\\x22([^\\]{3,80})\\x22,\\x22([^\\]{0,200})\\x22')
_STRUCTURED_NAME = re.compile(r'"name"\s*:\s*"([^"]+)"')
_ARIA_LABEL = re.compile(r'aria-label="([^"]{3,80})"', _I)

_NON_NAME_PREFIX = re.compile(r'^http|^/|^\d+$')
_NON_NAME_HEX = re.compile(r'^http|^/|^\d+$|^[a-f0-9]+$|^ChIJ')
_UI_LABEL_WORDS = re.compile(
    r'directions|close|search|menu|zoom|map|back|filter|clear|share|save|sign', _I
)
_UPPERCASE = re.compile(r'[A-Z]')
_DIGIT = re.compile(r'\d')


def _to_float(value: str) -> float:
    return float(value)


def _to_text(value: str) -> str:
    return value.strip()


def new_listing(name: str, place_id: str = '') -> BusinessRecord:
    """Empty business record for a listing candidate name."""
    return BusinessRecord(name=clean_text(name), place_id=place_id)


def _listing_rating(value: str) -> Optional[float]:
    try:
        rating = float(value)
    except ValueError:
        return None
    return rating if valid_rating(rating) else None


def _short_name(name: str) -> bool:
    return 2 < len(name) < 80


# ==================== Strategies 1-3 (always run) ====================

def _from_js_arrays(html: str, collector: ListingCollector) -> None:
    for match in _JS_DATA_ARRAY.finditer(html):
        name = match.group(1)
        if _short_name(name) and not _NON_NAME_PREFIX.search(name):
            info = new_listing(name)
            info.rating = _listing_rating(match.group(2))
            collector.add(info)


def _from_app_state(html: str, collector: ListingCollector) -> None:
    for match in _APP_STATE_PAIR.finditer(html):
        name, address = match.group(1), match.group(2)
        if _short_name(name) and not _NON_NAME_PREFIX.search(name):
            info = new_listing(name)
            if 5 < len(address) < 200:
                info.address = decode_html_entities(address)
            collector.add(info)


def _from_structured_data(html: str, collector: ListingCollector) -> None:
    for block in split_fragments(html, STRUCTURED_DATA_DELIMITERS):
        name = _STRUCTURED_NAME.search(block)
        if name:
            info = extract_business_info(block, '')
            info.name = decode_html_entities(name.group(1))
            collector.add(info)


# ==================== Strategy 4: result cards ====================

CARD_NAME = FieldCascade(
    'card name',
    tiers=(
        pattern('headline class', r'class="[^"]*(?:qBF1Pd|fontHeadlineSmall|NrDZNb)[^"]*"[^>]*>([^<]+)', _I),
        pattern('aria-label', r'aria-label="([^"]+)"', _I),
    ),
    convert=_to_text,
    accept=bool,
)

CARD_RATING = FieldCascade(
    'card rating',
    tiers=(pattern('rating text', r'([\d.]+)\s*(?:stars?|\()', _I),),
    convert=_to_float,
    accept=valid_rating,
)

CARD_REVIEW_COUNT = FieldCascade(
    'card review count',
    tiers=(pattern('parenthesised count', r'\(([\d,]+)\)'),),
    convert=parse_count,
    accept=lambda value: value > 0,
)

CARD_ADDRESS = FieldCascade(
    'card address',
    tiers=(
        pattern('second detail', r'class="[^"]*(?:W4Efsd|fontBodyMedium)[^"]*"[^>]*>[\s\S]*?·[\s\S]*?([^<·]+)', _I),
    ),
    convert=_to_text,
    accept=bool,
)

CARD_CATEGORY = FieldCascade(
    'card category',
    tiers=(
        pattern('first detail', r'class="[^"]*(?:W4Efsd|fontBodyMedium)[^"]*"[^>]*>([^<·]+)', _I),
    ),
    convert=_to_text,
    accept=lambda value: 0 < len(value) < 50,
)

CARD_PLACE_ID = FieldCascade(
    'card place id',
    tiers=(
        pattern('data-cid', r'data-cid="([^"]+)"', _I),
        pattern('place_id param', r'place_id[=:]([A-Za-z0-9_-]+)', _I),
    ),
    accept=bool,
)


def parse_result_card(card: str) -> Optional[BusinessRecord]:
    """Parse one search result card; None when no name is present."""
    name = CARD_NAME.extract(card)
    if not name:
        return None

    info = new_listing(name)
    info.rating = CARD_RATING.extract(card)
    info.review_count = CARD_REVIEW_COUNT.extract(card)
    info.address = CARD_ADDRESS.extract(card)
    info.set_category(CARD_CATEGORY.extract(card))
    info.place_id = CARD_PLACE_ID.extract(card) or ''
    return info


def _from_cards(html: str, collector: ListingCollector) -> None:
    for card in split_fragments(html, LISTING_DELIMITERS):
        info = parse_result_card(card)
        if info:
            collector.add(info)


# ==================== Strategies 5-6 (last resort) ====================

def _from_aria_labels(html: str, collector: ListingCollector) -> None:
    for match in _ARIA_LABEL.finditer(html):
        name = match.group(1).strip()
        if _short_name(name) and not _UI_LABEL_WORDS.search(name) and not name.isdigit():
            collector.add(new_listing(name))


def _from_hex_escaped(html: str, collector: ListingCollector) -> None:
    for match in _HEX_ESCAPED_PAIR.finditer(html):
        name, address = match.group(1), match.group(2)
        if _short_name(name) and not _NON_NAME_HEX.search(name) and _UPPERCASE.search(name):
            info = new_listing(name)
            if 5 < len(address) < 200 and _DIGIT.search(address):
                info.address = decode_html_entities(address)
            collector.add(info)


# ==================== Public API ====================

def extract_search_results(html: str) -> List[BusinessRecord]:
    """
    Extract business listings from a Google Maps search page.

    Args:
        html: Raw page markup

    Returns:
        Valid, name-deduplicated listings in first-seen order
    """
    collector = ListingCollector()
    if not html:
        return collector.businesses

    _from_js_arrays(html, collector)
    _from_app_state(html, collector)
    _from_structured_data(html, collector)

    for fallback in (_from_cards, _from_aria_labels, _from_hex_escaped):
        if len(collector):
            break
        fallback(html, collector)

    logger.info("Search extraction strategies found %d businesses", len(collector))
    return collector.businesses


# ==================== Local web search (alternate source) ====================

LOCAL_NAME = FieldCascade(
    'local name',
    tiers=(pattern('title class', r'class="ilUpNd XV43Ef aSRlid">([^<]+)</div>', _I),),
    convert=_to_text,
    accept=lambda value: len(value) >= 2,
)

LOCAL_RATING = FieldCascade(
    'local rating',
    tiers=(pattern('rating class', r'class="oqSTJd">([\d.]+)</span>'),),
    convert=_to_float,
    accept=valid_rating,
)

LOCAL_REVIEW_COUNT = FieldCascade(
    'local review count',
    tiers=(pattern('parenthesised count', r'\(([\d,]+)\)</span>'),),
    convert=parse_count,
    accept=lambda value: value > 0,
)

LOCAL_PRICE = FieldCascade(
    'local price',
    tiers=(pattern('price range', r'(?:·|&middot;)\s*(\$[\d]+[–\-]\$?[\d]+)'),),
    convert=_to_text,
    accept=bool,
)

LOCAL_PLACE_ID = FieldCascade(
    'local place id',
    tiers=(pattern('ludocid', r'ludocid=(\d+)'),),
    accept=bool,
)

_LOCAL_DETAILS = re.compile(r'<br\s*/?>\s*([^<]+)')
_DETAIL_SEPARATOR = re.compile(r'\s*[⋅·]\s*')


def _apply_local_details(card: str, info: BusinessRecord) -> None:
    """Category and address from the "Category · Address" line after <br>."""
    match = _LOCAL_DETAILS.search(card)
    if not match:
        return
    parts = _DETAIL_SEPARATOR.split(decode_html_entities(match.group(1)))
    if len(parts) >= 2:
        info.set_category(parts[0].strip() or None)
        info.address = ', '.join(parts[1:]).strip() or None
    elif parts[0].strip():
        info.address = parts[0].strip()


def parse_local_result(card: str) -> Optional[BusinessRecord]:
    """Parse one local search result card; None when no name is present."""
    name = LOCAL_NAME.extract(card)
    if not name:
        return None

    info = new_listing(name)
    info.rating = LOCAL_RATING.extract(card)
    info.review_count = LOCAL_REVIEW_COUNT.extract(card)
    info.price_level = LOCAL_PRICE.extract(card)
    _apply_local_details(card, info)
    info.place_id = LOCAL_PLACE_ID.extract(card) or ''
    return info


def extract_from_local_search(html: str) -> List[BusinessRecord]:
    """
    Extract businesses from Google local search results (tbm=lcl, gbv=1).

    Returns:
        Valid, name-deduplicated listings in page order
    """
    collector = ListingCollector()
    if not html:
        return collector.businesses

    for card in split_fragments(html, LOCAL_RESULT_DELIMITERS):
        info = parse_local_result(card)
        if info:
            collector.add(info)

    logger.info("Local search extraction found %d businesses", len(collector))
    return collector.businesses
