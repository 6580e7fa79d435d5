"""
Business Info Extractor

Extracts business details from a Google Maps place page, and a reduced set
of details from the Google Search knowledge panel used as a fallback.

Each field has its own cascade, ordered from most to least reliable:
    1. Embedded structured data ("ratingValue", "telephone", "geo", ...)
    2. Accessibility attributes (aria-label, data-item-id)
    3. Generated class names (DUwDvf, Io6YTe, F7nice, ...), which change often

Fields are filled in a fixed order: name, rating, review count, address,
phone, website, category, hours, coordinates, price level, closure status,
photos.
"""

import json
import logging
import re
from typing import Dict, List, Optional

from .. import config
from ..models import BusinessRecord, Coordinates
from .cascade import FieldCascade, Tier, pattern
from .text import decode_html_entities, parse_count

logger = logging.getLogger(__name__)

_I = re.IGNORECASE

DAYS = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')
_DAY_NAMES = '|'.join(DAYS)

PHOTO_URL = re.compile(r'https://lh[35]\.googleusercontent\.com/[a-zA-Z0-9_\-/=]+')
MAX_BUSINESS_PHOTOS = 10

# Helper types that appear next to the business type in structured data
_STRUCTURED_HELPER_TYPES = {
    'AggregateRating', 'Rating', 'Review', 'Person', 'Organization',
    'PostalAddress', 'GeoCoordinates', 'OpeningHoursSpecification',
    'ImageObject', 'WebPage', 'WebSite', 'BreadcrumbList', 'ListItem',
    'Offer', 'Menu', 'SearchAction',
}


# ==================== Acceptance predicates ====================

def valid_rating(value: float) -> bool:
    return 1 <= value <= 5


def valid_review_count(value: int) -> bool:
    return value > 0


def valid_name(value: str) -> bool:
    return len(value) > 1


def valid_address(value: str) -> bool:
    return len(value) > 5


def valid_phone(value: str) -> bool:
    return len(value) >= 7


def valid_category(value: str) -> bool:
    return 2 < len(value) < 100 and value not in _STRUCTURED_HELPER_TYPES


def valid_website(value: str) -> bool:
    """Absolute http(s) URL that does not point back at the source site."""
    return (
        value.startswith(('http://', 'https://'))
        and len(value) > len('https://')
        and config.SOURCE_DOMAIN not in value
    )


def valid_coordinates(value: Coordinates) -> bool:
    return -90 <= value.latitude <= 90 and -180 <= value.longitude <= 180


def to_coordinates(pair) -> Coordinates:
    latitude, longitude = pair
    return Coordinates(latitude=float(latitude), longitude=float(longitude))


def to_float(value: str) -> float:
    return float(value.strip())


def to_text(value: str) -> str:
    return value.strip()


# ==================== Maps place page cascades ====================

NAME = FieldCascade(
    'name',
    tiers=(
        pattern('og:title', r'<meta[^>]*property="og:title"[^>]*content="([^"]+)"', _I),
        pattern('title', r'<title>([^<]+?)(?:\s*[-–|·]\s*Google Maps)?</title>', _I),
        pattern('json name', r'"name"\s*:\s*"([^"]+)"'),
        pattern('header attribute', r'data-header-feature-name="([^"]+)"', _I),
        pattern('headline class', r'class="[^"]*DUwDvf[^"]*"[^>]*>([^<]+)', _I),
        pattern('reviews aria-label', r'aria-label="([^"]+?)(?:\s+reviews?)"', _I),
    ),
    convert=to_text,
    accept=valid_name,
)

RATING = FieldCascade(
    'rating',
    tiers=(
        pattern('json ratingValue', r'"ratingValue"\s*:\s*"?([\d.]+)"?'),
        pattern('stars aria-label', r'aria-label="([\d.]+)\s+stars?"', _I),
        pattern('display class', r'class="[^"]*(?:Aq14fc|fontDisplayLarge)[^"]*"[^>]*>([\d.]+)', _I),
        pattern('aggregateRating', r'"aggregateRating"[^}]*"ratingValue"\s*:\s*"?([\d.]+)"?'),
    ),
    convert=to_float,
    accept=valid_rating,
)

REVIEW_COUNT = FieldCascade(
    'review_count',
    tiers=(
        pattern('json reviewCount', r'"reviewCount"\s*:\s*"?(\d+)"?'),
        pattern('reviews text', r'([\d,]+)\s+reviews?', _I),
        pattern('stars aria-label', r'aria-label="[\d.]+ stars?,?\s*([\d,]+)\s+reviews?"', _I),
        pattern('count class', r'class="[^"]*(?:F7nice|fontBodyMedium)[^"]*"[^>]*>\(?([\d,]+)\)?', _I),
    ),
    convert=parse_count,
    accept=valid_review_count,
)

ADDRESS = FieldCascade(
    'address',
    tiers=(
        pattern('json address', r'"address"\s*:\s*"([^"]+)"'),
        pattern('json streetAddress', r'"streetAddress"\s*:\s*"([^"]+)"'),
        pattern('address item', r'data-item-id="address"[^>]*>[\s\S]*?<[^>]*>([^<]+)', _I),
        pattern('address aria-label', r'aria-label="Address[:\s]*([^"]+)"', _I),
        pattern('address class', r'class="[^"]*(?:Io6YTe|rogA2c)[^"]*"[^>]*>([^<]+)', _I),
    ),
    convert=to_text,
    accept=valid_address,
)

PHONE = FieldCascade(
    'phone',
    tiers=(
        pattern('json telephone', r'"telephone"\s*:\s*"([^"]+)"'),
        pattern('phone item', r'data-item-id="phone[^"]*"[^>]*>[\s\S]*?<[^>]*>([^<]+)', _I),
        pattern('phone aria-label', r'aria-label="Phone[:\s]*([^"]+)"', _I),
        pattern('tel link', r'href="tel:([^"]+)"', _I),
        pattern('phone text', r'(\+?1?\s*[-.(]?\d{3}[-.)]\s*\d{3}[-.\s]\d{4})'),
    ),
    convert=to_text,
    accept=valid_phone,
)

WEBSITE = FieldCascade(
    'website',
    tiers=(
        pattern('json url', r'"url"\s*:\s*"(https?://[^"]+)"'),
        pattern('authority link', r'<a[^>]*data-item-id="authority"[^>]*href="([^"]+)"', _I),
        pattern('authority item', r'data-item-id="authority"[^>]*>[\s\S]*?href="([^"]+)"', _I),
        pattern('website aria-label', r'aria-label="Website[:\s]*([^"]+)"', _I),
    ),
    convert=to_text,
    accept=valid_website,
)

_CATEGORY_WORDS = (
    r'restaurant|shop|store|bar|cafe|hotel|salon|gym|clinic|dentist|'
    r'hospital|pharmacy|bank|school'
)

CATEGORY = FieldCascade(
    'category',
    tiers=(
        pattern('json @type', r'"@type"\s*:\s*"([^"]+)"(?!.*"@context")'),
        pattern('category item', r'data-item-id="category"[^>]*>[\s\S]*?<[^>]*>([^<]+)', _I),
        pattern(
            'category class',
            r'class="[^"]*(?:DkEaL|fontBodyMedium)[^"]*"[^>]*>([^<]+(?:' + _CATEGORY_WORDS + r')[^<]*)',
            _I,
        ),
        pattern('category action', r'jsaction="pane\.rating\.category"[^>]*>([^<]+)', _I),
    ),
    convert=to_text,
    accept=valid_category,
)

COORDINATES = FieldCascade(
    'coordinates',
    tiers=(
        pattern(
            'json geo',
            r'"geo"\s*:\s*\{[^}]*"latitude"\s*:\s*([-\d.]+)[^}]*"longitude"\s*:\s*([-\d.]+)',
            group=(1, 2),
        ),
        pattern('url @lat,lng', r'@([-\d.]+),([-\d.]+)', group=(1, 2)),
        pattern('center param', r'center=([-\d.]+)%2C([-\d.]+)', group=(1, 2)),
        pattern('ll param', r'll=([-\d.]+),([-\d.]+)', group=(1, 2)),
    ),
    convert=to_coordinates,
    accept=valid_coordinates,
)

PRICE_LEVEL = FieldCascade(
    'price_level',
    tiers=(
        pattern('price aria-label', r'aria-label="Price[:\s]*([^"]+)"', _I),
        pattern('json priceRange', r'"priceRange"\s*:\s*"([^"]+)"'),
    ),
    convert=to_text,
    accept=bool,
)


# ==================== Hours ====================

_JSON_HOURS = re.compile(r'"openingHours"\s*:\s*\[([^\]]+)\]')
_JSON_HOURS_ENTRY = re.compile(r'^(\w+)[\s:]+(.+)$')
_HOURS_LABEL = re.compile(r'aria-label="([^"]*(?:' + _DAY_NAMES + r')[^"]*)"', _I)
_DAY_SCHEDULE = re.compile(
    r'(' + _DAY_NAMES + r')[,:\s]+(.+?)\s*'
    r'(?=[;,]?\s*(?:' + _DAY_NAMES + r')\b|[;.]?\s*$)',
    _I,
)


def _hours_from_json(document: str) -> Optional[Dict[str, str]]:
    """Hours from a structured-data "openingHours": ["Mo 09:00-17:00", ...] array."""
    match = _JSON_HOURS.search(document)
    if not match:
        return None
    try:
        entries = json.loads('[' + match.group(1) + ']')
    except ValueError:
        logger.debug("hours: malformed openingHours array")
        return None

    hours = {}
    for entry in entries:
        if not isinstance(entry, str):
            continue
        parts = _JSON_HOURS_ENTRY.match(entry.strip())
        if parts:
            hours[decode_html_entities(parts.group(1))] = decode_html_entities(parts.group(2))
    return hours or None


def _hours_from_aria_label(document: str) -> Optional[Dict[str, str]]:
    """Hours from an accessibility label listing every weekday."""
    match = _HOURS_LABEL.search(document)
    if not match:
        return None
    label = decode_html_entities(match.group(1))
    hours = {
        day.group(1): day.group(2).strip()
        for day in _DAY_SCHEDULE.finditer(label)
    }
    return hours or None


HOURS = FieldCascade(
    'hours',
    tiers=(
        Tier('json openingHours', _hours_from_json),
        Tier('hours aria-label', _hours_from_aria_label),
    ),
    accept=bool,
)


# ==================== Photos & closure ====================

def extract_photo_urls(fragment: str, limit: int) -> List[str]:
    """Unique googleusercontent photo URLs in first-seen order."""
    photos: List[str] = []
    for url in PHOTO_URL.findall(fragment or ''):
        if url not in photos:
            photos.append(url)
            if len(photos) >= limit:
                break
    return photos


_PERMANENTLY_CLOSED = re.compile(r'permanently closed', _I)


def is_permanently_closed(document: str) -> bool:
    return bool(_PERMANENTLY_CLOSED.search(document or ''))


# ==================== Public API ====================

def extract_business_info(html: str, place_id: str = '') -> BusinessRecord:
    """
    Extract business information from a Google Maps place page.

    Args:
        html: Raw page markup (or an embedded structured-data fragment)
        place_id: External id to carry on the record

    Returns:
        BusinessRecord; fields no strategy could recover stay absent and
        ``name`` stays empty
    """
    info = BusinessRecord(place_id=place_id or '')
    if not html:
        return info

    info.name = NAME.extract(html) or ''
    info.rating = RATING.extract(html)
    info.review_count = REVIEW_COUNT.extract(html)
    info.address = ADDRESS.extract(html)
    info.phone = PHONE.extract(html)
    info.website = WEBSITE.extract(html)
    info.set_category(CATEGORY.extract(html))
    info.hours = HOURS.extract(html)
    info.coordinates = COORDINATES.extract(html)
    info.price_level = PRICE_LEVEL.extract(html)
    info.permanently_closed = is_permanently_closed(html)
    info.photos = extract_photo_urls(html, MAX_BUSINESS_PHOTOS)

    return info


# ==================== Google Search knowledge panel ====================

_GENERIC_TITLES = re.compile(r'^(google|search|maps|place_id|sign in|error|404|not found)', _I)
_TITLE_SUFFIX = re.compile(r'\s*[-–|].*$')
_GOOGLE_SUFFIX = re.compile(r'\s*- Google.*$')


def to_panel_name(value: str) -> str:
    """Strip " - Google Search" style suffixes from a panel title."""
    name = _TITLE_SUFFIX.sub('', value.strip())
    return _GOOGLE_SUFFIX.sub('', name).strip()


def valid_panel_name(value: str) -> bool:
    return 1 < len(value) < 100 and not _GENERIC_TITLES.match(value)


PANEL_NAME = FieldCascade(
    'name',
    tiers=(
        pattern('title attrid div', r'<div[^>]*data-attrid="title"[^>]*>([^<]+)<', _I),
        pattern('title attrid h2', r'<h2[^>]*data-attrid="title"[^>]*>([^<]+)<', _I),
        pattern('panel title class', r'class="[^"]*(?:qrShPb|SPZz6b|PZPZlf)[^"]*"[^>]*>([^<]+)', _I),
        pattern('page title', r'<title>([^<]+?)(?:\s*[-–|].*)?</title>', _I),
    ),
    convert=to_panel_name,
    accept=valid_panel_name,
)

PANEL_RATING = FieldCascade(
    'rating',
    tiers=(
        pattern('rating class', r'class="[^"]*(?:Aq14fc|oqSTJd)[^"]*"[^>]*>([\d.]+)', _I),
        pattern('rated aria-label', r'aria-label="Rated ([\d.]+)', _I),
    ),
    convert=to_float,
    accept=valid_rating,
)

PANEL_REVIEW_COUNT = FieldCascade(
    'review_count',
    tiers=(
        pattern('parenthesised count', r'\(([\d,]+)\s*(?:review|rating)', _I),
        pattern('reviews text', r'([\d,]+)\s*(?:Google )?reviews?', _I),
    ),
    convert=parse_count,
    accept=valid_review_count,
)

_STREET_SUFFIXES = r'St|Ave|Blvd|Rd|Dr|Ln|Way|Ct|Pl'

PANEL_ADDRESS = FieldCascade(
    'address',
    tiers=(
        pattern(
            'address attrid',
            r'data-attrid="kc:/location/address"[^>]*>[\s\S]*?class="[^"]*(?:LrzXr|hgKElc)[^"]*"[^>]*>([^<]+)',
            _I,
        ),
        pattern(
            'street text',
            r'class="[^"]*LrzXr[^"]*"[^>]*>([^<]*\d[^<]*(?:' + _STREET_SUFFIXES + r')[^<]*)',
            _I,
        ),
    ),
    convert=to_text,
    accept=valid_address,
)

PANEL_PHONE = FieldCascade(
    'phone',
    tiers=(
        pattern(
            'phone attrid',
            r'data-attrid="kc:/collection/knowledge_panels/has_phone[^"]*"[^>]*>[\s\S]*?(\+?[\d\s\-().]{10,})',
            _I,
        ),
        pattern('phone class', r'class="[^"]*LrzXr[^"]*"[^>]*>(\+?1?\s*[\d\s\-().]{10,})', _I),
    ),
    convert=to_text,
    accept=valid_phone,
)

PANEL_CATEGORY = FieldCascade(
    'category',
    tiers=(
        pattern(
            'subtitle attrid',
            r'data-attrid="subtitle"[^>]*>[\s\S]*?class="[^"]*(?:YhemCb|hgKElc)[^"]*"[^>]*>([^<]+)',
            _I,
        ),
        pattern('subtitle class', r'class="[^"]*(?:YhemCb)[^"]*"[^>]*>([^<]+)', _I),
    ),
    convert=to_text,
    accept=bool,
)


def extract_business_from_search(html: str, place_id: str = '') -> BusinessRecord:
    """
    Extract basic business info from a Google Search results page.

    Used when the Maps page comes back sparse (no name). Only the knowledge
    panel fields are read: name, rating, review count, address, phone and
    category.
    """
    info = BusinessRecord(place_id=place_id or '')
    if not html:
        return info

    info.name = PANEL_NAME.extract(html) or ''
    info.rating = PANEL_RATING.extract(html)
    info.review_count = PANEL_REVIEW_COUNT.extract(html)
    info.address = PANEL_ADDRESS.extract(html)
    info.phone = PANEL_PHONE.extract(html)
    info.set_category(PANEL_CATEGORY.extract(html))

    logger.info(
        "Search fallback extracted: %r, rating=%s, reviews=%s",
        info.name, info.rating, info.review_count,
    )
    return info
