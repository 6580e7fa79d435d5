"""
Extraction module for fetching pages and orchestrating the parsers.

- urls.py: Build Maps / Search URLs
- fetch.py: Fetch pages with retry and typed errors
- fallback.py: Alternate-source fallbacks
- service.py: Reviews, business, summary and search operations
"""

from .fetch import fetch_page
from .fallback import resolve_business, resolve_listings
from .service import fetch_reviews, fetch_business_details, fetch_review_summary, search_businesses
