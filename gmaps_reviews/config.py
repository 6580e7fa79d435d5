"""
Default configuration for the Google Maps reviews extractor.

Values can be overridden with environment variables, or per instance with
``GMapsReviews(...)`` / ``ExtractorConfig``.
"""

import os

# Proxy Configuration
PROXY_HOST = os.environ.get("GMAPS_PROXY_HOST", "")
PROXY_USER = os.environ.get("GMAPS_PROXY_USER", "")
PROXY_PASS = os.environ.get("GMAPS_PROXY_PASS", "")


def get_proxy_url():
    """Get proxy URL. Returns single URL string for httpx."""
    if PROXY_HOST and PROXY_USER and PROXY_PASS:
        return f"http://{PROXY_USER}:{PROXY_PASS}@{PROXY_HOST}"
    return None


# Fetching
REQUEST_TIMEOUT = float(os.environ.get("GMAPS_TIMEOUT", "45"))
MAX_RETRIES = int(os.environ.get("GMAPS_MAX_RETRIES", "2"))
RETRY_BACKOFF = 1.0          # seconds, doubled after every failed attempt
RETRY_MAX_DELAY = 10.0
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)

LANGUAGE = os.environ.get("GMAPS_LANGUAGE", "en")

USER_AGENT = os.environ.get(
    "GMAPS_USER_AGENT",
    "Mozilla/5.0 (Linux; Android 14; Pixel 8 Pro) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Mobile Safari/537.36",
)

DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "DNT": "1",
    "Upgrade-Insecure-Requests": "1",
}

# Body markers of an anti-bot interstitial
CHALLENGE_MARKERS = ("captcha", "unusual traffic")

# Websites on this domain are links back to Google, not the business site
SOURCE_DOMAIN = "google.com"

# Limits
DEFAULT_REVIEWS_LIMIT = 20
DETAILS_REVIEWS_LIMIT = 50
DEFAULT_SEARCH_LIMIT = 10

# API Server
API_HOST = os.environ.get("GMAPS_API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("GMAPS_API_PORT", "8000"))

# Logging
LOG_LEVEL = os.environ.get("GMAPS_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Output Schema
OUTPUT_SCHEMA = {
    "name": "string",
    "place_id": "string",
    "rating": "float",
    "review_count": "integer",
    "address": "string",
    "phone": "string",
    "website": "string",
    "hours": "dict",
    "category": "string",
    "categories": "list[string]",
    "price_level": "string",
    "photos": "list[string]",
    "coordinates": "dict",
    "permanently_closed": "boolean",
}
