"""
Reviews Extractor

Extracts individual reviews from Google Maps place pages.

Three sources are tried in order, and the first that yields reviews wins:
    1. Embedded structured data: a "review": [...] array of objects with
       author, reviewRating.ratingValue, reviewBody, datePublished
    2. Review blocks in the page markup, split with REVIEW_DELIMITERS and
       parsed field by field
    3. Review snippets quoted on Google Search result pages

Each review block field has its own cascade:
    author -> rating -> text -> date -> likes -> owner response -> photos
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from ..models import ANONYMOUS_AUTHOR, ReviewRecord
from .business import extract_photo_urls
from .cascade import FieldCascade, pattern
from .dates import parse_relative_date
from .segments import REVIEW_DELIMITERS, SNIPPET_DELIMITERS, split_fragments
from .text import clean_text, parse_optional_int, safe_get, strip_tags

logger = logging.getLogger(__name__)

_I = re.IGNORECASE

MAX_REVIEW_PHOTOS = 5
DEFAULT_LIMIT = 20

_REVIEW_JSON = re.compile(r'"review"\s*:\s*\[([\s\S]*?)\](?=\s*[,}])')


def _to_text(value: str) -> str:
    return value.strip()


def _to_plain_text(value: str) -> str:
    return strip_tags(value).strip()


def _valid_star(value: int) -> bool:
    return 1 <= value <= 5


def _anything(value: Any) -> bool:
    return True


# ==================== Review block cascades ====================

AUTHOR = FieldCascade(
    'review author',
    tiers=(
        pattern('author class', r'class="[^"]*(?:d4r55|TSUbDb|lTi8oc)[^"]*"[^>]*>([^<]+)', _I),
        pattern('review aria-label', r'aria-label="([^"]+)\'s? review', _I),
        pattern('generic author class', r'class="[^"]*author[^"]*"[^>]*>([^<]+)', _I),
    ),
    convert=_to_text,
    accept=bool,
)

REVIEW_RATING = FieldCascade(
    'review rating',
    tiers=(
        pattern('stars aria-label', r'aria-label="(\d)\s+stars?"', _I),
        pattern('stars class', r'class="[^"]*(?:kvMYJc|hCCjke)[^"]*"[^>]*aria-label="[^"]*?(\d)', _I),
        pattern('data-rating', r'data-rating="(\d)"', _I),
    ),
    convert=int,
    accept=_valid_star,
)

# An empty body is still a match: a review can be a bare star rating.
REVIEW_TEXT = FieldCascade(
    'review text',
    tiers=(
        pattern(
            'full text class',
            r'class="[^"]*(?:wiI7pd|review-full-text|Jtu6Td)[^"]*"[^>]*>([\s\S]*?)</(?:span|div)',
            _I,
        ),
        pattern('text class', r'class="[^"]*(?:rsqaWe)[^"]*"[^>]*>([\s\S]*?)</(?:span|div)', _I),
    ),
    convert=_to_plain_text,
    accept=_anything,
)

REVIEW_DATE = FieldCascade(
    'review date',
    tiers=(
        pattern(
            'date class',
            r'class="[^"]*(?:rsqaWe|dehysf)[^"]*"[^>]*>([^<]*(?:ago|week|month|year|day|hour)[^<]*)',
            _I,
        ),
        pattern('iso date', r'(\d{4}-\d{2}-\d{2})'),
    ),
    convert=_to_text,
    accept=bool,
)

LIKES = FieldCascade(
    'review likes',
    tiers=(
        pattern('helpful text', r'(\d+)\s+(?:people|person)?\s*(?:found this|helpful)', _I),
        pattern('likes class', r'class="[^"]*(?:pkWtMe)[^"]*"[^>]*>(\d+)', _I),
    ),
    convert=int,
    accept=lambda value: value >= 0,
)

OWNER_RESPONSE = FieldCascade(
    'owner response',
    tiers=(
        pattern(
            'response block',
            r'class="[^"]*(?:CDe7pd|owner-response)[^"]*"[\s\S]*?'
            r'class="[^"]*(?:wiI7pd|review-full-text)[^"]*"[^>]*>([\s\S]*?)</(?:span|div)',
            _I,
        ),
    ),
    convert=_to_plain_text,
    accept=bool,
)

OWNER_RESPONSE_DATE = FieldCascade(
    'owner response date',
    tiers=(
        pattern(
            'response date',
            r'class="[^"]*(?:CDe7pd|owner-response)[^"]*"[\s\S]*?'
            r'class="[^"]*(?:rsqaWe|dehysf)[^"]*"[^>]*>([^<]+)',
            _I,
        ),
    ),
    convert=_to_text,
    accept=bool,
)


def parse_review_block(block: str) -> Optional[ReviewRecord]:
    """
    Parse a single review block from a Google Maps page.

    Returns:
        ReviewRecord, or None when neither an author nor any text could be
        recovered from the block
    """
    author = AUTHOR.extract(block)
    rating = REVIEW_RATING.extract(block) or 0
    text = REVIEW_TEXT.extract(block) or ''
    relative_date = REVIEW_DATE.extract(block)
    date = parse_relative_date(relative_date)
    likes = LIKES.extract(block) or 0
    owner_response = OWNER_RESPONSE.extract(block)
    owner_response_date = OWNER_RESPONSE_DATE.extract(block)
    photos = extract_photo_urls(block, MAX_REVIEW_PHOTOS)

    if not author and not text:
        return None

    return ReviewRecord(
        author=author or ANONYMOUS_AUTHOR,
        rating=rating,
        text=text,
        date=date,
        relative_date=relative_date,
        likes=likes,
        owner_response=owner_response,
        owner_response_date=owner_response_date,
        photos=photos,
    )


# ==================== Search result snippets ====================

SNIPPET_AUTHOR = FieldCascade(
    'snippet author',
    tiers=(
        pattern('wrote text', r'>([^<]+?)\s*(?:wrote|posted|reviewed)', _I),
        pattern('author class', r'class="[^"]*(?:TSUbDb|lTi8oc)[^"]*"[^>]*>([^<]+)', _I),
    ),
    convert=_to_text,
    accept=bool,
)

SNIPPET_TEXT = FieldCascade(
    'snippet text',
    tiers=(
        # quoted text outside of attribute values
        pattern('quoted text', r'(?<![=\w])"([^"<>=]{20,})"'),
        pattern('snippet class', r'class="[^"]*(?:Jtu6Td|OA1nbd)[^"]*"[^>]*>([^<]+)', _I),
    ),
    convert=_to_text,
    accept=bool,
)

SNIPPET_RATING = FieldCascade(
    'snippet rating',
    tiers=(
        pattern('rating text', r'(\d)\s*(?:/5|stars?|out of)', _I),
    ),
    convert=int,
    accept=_valid_star,
)


def parse_review_snippet(snippet: str) -> Optional[ReviewRecord]:
    """Parse a review snippet from a search results page; None without text."""
    text = SNIPPET_TEXT.extract(snippet)
    if not text:
        return None

    return ReviewRecord(
        author=SNIPPET_AUTHOR.extract(snippet) or ANONYMOUS_AUTHOR,
        rating=SNIPPET_RATING.extract(snippet) or 0,
        text=text,
    )


# ==================== Structured data ====================

def _json_author_name(entry: Dict) -> str:
    author = entry.get('author')
    if isinstance(author, dict):
        author = author.get('name')
    return clean_text(author) if isinstance(author, str) else ''


def _json_author(entry: Dict) -> str:
    return _json_author_name(entry) or ANONYMOUS_AUTHOR


def _json_has_content(entry: Dict) -> bool:
    """False when neither an author name nor a review body is present."""
    if _json_author_name(entry):
        return True
    body = entry.get('reviewBody') or entry.get('text')
    return isinstance(body, str) and bool(clean_text(body))


def _json_owner_response(entry: Dict) -> Optional[str]:
    response = entry.get('ownerResponse')
    if isinstance(response, dict):
        response = response.get('text')
    if not response:
        response = entry.get('owner_response')
    return clean_text(response) if isinstance(response, str) and response else None


def review_from_json(entry: Dict) -> ReviewRecord:
    """Build a review from an embedded structured-data review object."""
    rating = parse_optional_int(
        safe_get(entry, 'reviewRating', 'ratingValue') or entry.get('rating')
    )
    body = entry.get('reviewBody') or entry.get('text') or ''
    date = entry.get('datePublished') or entry.get('date') or ''

    return ReviewRecord(
        author=_json_author(entry),
        rating=rating if 0 <= rating <= 5 else 0,
        text=clean_text(body) if isinstance(body, str) else '',
        date=date if isinstance(date, str) else '',
        relative_date=None,
        likes=max(parse_optional_int(entry.get('likes')), 0),
        owner_response=_json_owner_response(entry),
        owner_response_date=safe_get(entry, 'ownerResponse', 'datePublished'),
        photos=[],
    )


def extract_reviews_from_json(html: str, limit: int) -> List[ReviewRecord]:
    """Reviews from an embedded "review": [...] array; [] if absent or malformed."""
    match = _REVIEW_JSON.search(html)
    if not match:
        return []

    try:
        entries = json.loads('[' + match.group(1) + ']')
    except (ValueError, RecursionError):
        logger.debug("Embedded review array is not valid JSON, falling back to markup")
        return []

    reviews = []
    for entry in entries:
        if len(reviews) >= limit:
            break
        if isinstance(entry, dict) and _json_has_content(entry):
            reviews.append(review_from_json(entry))
    return reviews


# ==================== Public API ====================

def extract_reviews(html: str, limit: int = DEFAULT_LIMIT) -> List[ReviewRecord]:
    """
    Extract individual reviews from a Google Maps page.

    Args:
        html: Raw page markup
        limit: Maximum number of reviews to return

    Returns:
        Reviews in the order they were found, at most ``limit``
    """
    if not html or limit <= 0:
        return []

    reviews = extract_reviews_from_json(html, limit)
    if reviews:
        logger.debug("Reviews: %d from structured data", len(reviews))
        return reviews

    for block in split_fragments(html, REVIEW_DELIMITERS):
        if len(reviews) >= limit:
            break
        review = parse_review_block(block)
        if review:
            reviews.append(review)
    if reviews:
        logger.debug("Reviews: %d from review blocks", len(reviews))
        return reviews

    for snippet in split_fragments(html, SNIPPET_DELIMITERS):
        if len(reviews) >= limit:
            break
        review = parse_review_snippet(snippet)
        if review:
            reviews.append(review)
    logger.debug("Reviews: %d from search snippets", len(reviews))
    return reviews
