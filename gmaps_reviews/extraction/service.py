"""
Extraction Service

The four request-level operations: fetch the page(s), run the parsers, apply
the source fallbacks and build the result dicts returned by the library,
API server and CLI.

All operations accept an optional ``httpx.Client`` (reused for every request
of the operation) and a retry count for the fetch layer.
"""

import logging
from functools import partial
from typing import Any, Dict, Optional

import httpx

from ..config import (
    DEFAULT_REVIEWS_LIMIT,
    DEFAULT_SEARCH_LIMIT,
    DETAILS_REVIEWS_LIMIT,
    LANGUAGE,
    MAX_RETRIES,
)
from ..parsers.business import extract_business_info
from ..parsers.reviews import extract_reviews
from ..parsers.search import extract_search_results
from ..parsers.summary import calculate_summary, extract_rating_distribution
from .fallback import resolve_business, resolve_listings
from .fetch import client_scope, fetch_page
from .urls import (
    build_local_search_url,
    build_place_url,
    build_reviews_url,
    build_search_fallback_url,
    build_search_url,
)

logger = logging.getLogger(__name__)


def _warn_empty(place_id: str) -> None:
    logger.warning(
        'All extraction strategies failed for place_id="%s". '
        'Google may require a different proxy for this request.',
        place_id,
    )


def _place_details(place_id: str, fetch, language: str):
    """Business, reviews and distribution from the place page (+ search fallback)."""
    html = fetch(build_place_url(place_id, language))

    business = extract_business_info(html, place_id)
    reviews = extract_reviews(html, DETAILS_REVIEWS_LIMIT)
    distribution = extract_rating_distribution(html)

    business = resolve_business(
        business, lambda: fetch(build_search_fallback_url(place_id, language))
    )
    if not business.name:
        _warn_empty(place_id)
    return business, reviews, distribution


def fetch_reviews(
    place_id: str,
    sort: str = 'newest',
    limit: int = DEFAULT_REVIEWS_LIMIT,
    client: Optional[httpx.Client] = None,
    language: str = LANGUAGE,
    max_retries: int = MAX_RETRIES,
) -> Dict[str, Any]:
    """
    Fetch reviews for a place.

    Args:
        place_id: Google place ID (ChIJ...)
        sort: relevant, newest, highest or lowest
        limit: Maximum number of reviews
        client: Optional httpx client to reuse
        language: Interface language (hl parameter)
        max_retries: Fetch retries per page

    Returns:
        Dict with business, reviews and pagination (total, returned, sort)
    """
    with client_scope(client) as http:
        fetch = partial(fetch_page, client=http, max_retries=max_retries)
        html = fetch(build_reviews_url(place_id, sort, language))

        business = extract_business_info(html, place_id)
        reviews = extract_reviews(html, limit)

        business = resolve_business(
            business, lambda: fetch(build_search_fallback_url(place_id, language))
        )

    if not business.name and not reviews:
        _warn_empty(place_id)

    logger.info('Extracted: %d reviews for "%s"', len(reviews), business.name or '(unknown)')

    return {
        'business': business.to_dict(),
        'reviews': [review.to_dict() for review in reviews],
        'pagination': {
            'total': business.review_count or len(reviews),
            'returned': len(reviews),
            'sort': sort,
        },
    }


def fetch_business_details(
    place_id: str,
    client: Optional[httpx.Client] = None,
    language: str = LANGUAGE,
    max_retries: int = MAX_RETRIES,
) -> Dict[str, Any]:
    """Full business record plus a review summary built from up to 50 reviews."""
    with client_scope(client) as http:
        fetch = partial(fetch_page, client=http, max_retries=max_retries)
        business, reviews, distribution = _place_details(place_id, fetch, language)

    summary = calculate_summary(reviews, business, distribution)
    logger.info('Business: "%s" %s stars (%s reviews)',
                business.name or '(unknown)', business.rating, business.review_count)

    return {'business': business.to_dict(), 'summary': summary.to_dict()}


def fetch_review_summary(
    place_id: str,
    client: Optional[httpx.Client] = None,
    language: str = LANGUAGE,
    max_retries: int = MAX_RETRIES,
) -> Dict[str, Any]:
    """Short business identity plus the review summary."""
    with client_scope(client) as http:
        fetch = partial(fetch_page, client=http, max_retries=max_retries)
        business, reviews, distribution = _place_details(place_id, fetch, language)

    summary = calculate_summary(reviews, business, distribution)
    logger.info('Summary: "%s" response rate: %d%%',
                business.name or '(unknown)', summary.response_rate)

    return {
        'business': {
            'name': business.name,
            'place_id': business.place_id,
            'rating': business.rating,
            'review_count': business.review_count,
        },
        'summary': summary.to_dict(),
    }


def search_businesses(
    query: str,
    location: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
    client: Optional[httpx.Client] = None,
    language: str = LANGUAGE,
    max_retries: int = MAX_RETRIES,
) -> Dict[str, Any]:
    """
    Search businesses on Google Maps, falling back to local web search.

    Returns:
        Dict with query, location, businesses and total_found
    """
    with client_scope(client) as http:
        fetch = partial(fetch_page, client=http, max_retries=max_retries)
        html = fetch(build_search_url(query, location, language))
        businesses = resolve_listings(
            extract_search_results(html),
            lambda: fetch(build_local_search_url(query, location, language)),
            limit,
        )

    if not businesses:
        logger.warning(
            'All search strategies returned 0 results for "%s in %s". '
            'Google may require a different proxy or the query has no local results.',
            query, location,
        )

    logger.info('Search: "%s in %s" found %d businesses', query, location, len(businesses))

    return {
        'query': query,
        'location': location,
        'businesses': [business.to_dict() for business in businesses],
        'total_found': len(businesses),
    }
