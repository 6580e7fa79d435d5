"""
Source Fallback

When the primary document yields nothing useful, fetch an alternate one and
run the alternate-source extractor on it.

``fetch_alternate`` is any zero-argument callable returning the alternate
document, so the decision logic is independent of how pages are fetched.
"""

import logging
from typing import Callable, List

from ..exceptions import FetchError
from ..models import BusinessRecord
from ..parsers.business import extract_business_from_search
from ..parsers.search import extract_from_local_search

logger = logging.getLogger(__name__)

AlternateFetcher = Callable[[], str]


def resolve_business(business: BusinessRecord, fetch_alternate: AlternateFetcher) -> BusinessRecord:
    """
    Fall back to the search knowledge panel when the place page had no name.

    The alternate record replaces the original only when it recovers a name.
    A failed alternate fetch keeps the original record.
    """
    if business.name:
        return business

    logger.info("Maps returned sparse data for %s, trying Google Search fallback...",
                business.place_id or '(unknown)')
    try:
        html = fetch_alternate()
    except FetchError as e:
        logger.warning("Search fallback failed: %s", e)
        return business

    alternate = extract_business_from_search(html, business.place_id)
    if alternate.name:
        return alternate
    return business


def resolve_listings(
    businesses: List[BusinessRecord],
    fetch_alternate: AlternateFetcher,
    limit: int,
) -> List[BusinessRecord]:
    """
    Fall back to local web search when the Maps search page had no listings.

    Both results are truncated to ``limit``. Fetch errors propagate.
    """
    if businesses:
        return businesses[:limit]

    logger.info("Maps search returned 0 results, trying local web search...")
    html = fetch_alternate()
    return extract_from_local_search(html)[:limit]
