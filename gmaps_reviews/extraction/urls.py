"""
URL Builders

Builds the Google Maps and Google Search URLs the extractor fetches.
"""

from urllib.parse import quote

from ..config import LANGUAGE

SORT_PARAMS = {
    'relevant': '1',
    'newest': '2',
    'highest': '3',
    'lowest': '4',
}


def build_place_url(place_id: str, language: str = LANGUAGE) -> str:
    """Maps place page for a place ID."""
    return f"https://www.google.com/maps/place/?q=place_id:{quote(place_id, safe='')}&hl={language}"


def build_reviews_url(place_id: str, sort: str = 'newest', language: str = LANGUAGE) -> str:
    """Maps place page with reviews sorted by ``sort`` (relevant/newest/highest/lowest)."""
    sort_param = SORT_PARAMS.get(sort, '2')
    return f"{build_place_url(place_id, language)}&sort={sort_param}"


def build_search_url(query: str, location: str, language: str = LANGUAGE) -> str:
    """Maps search page for "<query> in <location>"."""
    search_term = quote(f"{query} in {location}", safe='')
    return f"https://www.google.com/maps/search/{search_term}?hl={language}"


def build_local_search_url(query: str, location: str, language: str = LANGUAGE) -> str:
    """Basic-HTML Google local search for "<query> in <location>"."""
    search_term = quote(f"{query} in {location}", safe='')
    return f"https://www.google.com/search?q={search_term}&tbm=lcl&gbv=1&hl={language}"


def build_search_fallback_url(place_id: str, language: str = LANGUAGE) -> str:
    """Basic-HTML Google Search page whose knowledge panel describes the place."""
    return f"https://www.google.com/search?q=place_id:{quote(place_id, safe='')}&gbv=1&hl={language}"
