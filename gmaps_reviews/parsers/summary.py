"""
Rating Distribution & Summary Calculation

Recovers the 1-5 star histogram from a place page and derives aggregate
review statistics (response rate, sentiment) from extracted reviews.
"""

import logging
import re
from typing import Dict, List

from ..models import (
    STAR_KEYS,
    BusinessRecord,
    ReviewRecord,
    ReviewSummary,
    SentimentBreakdown,
    empty_distribution,
)
from .text import parse_count, round_half_up

logger = logging.getLogger(__name__)

_STAR_COUNT_LABEL = re.compile(r'aria-label="(\d)\s+stars?,?\s*(\d[\d,]*)\s+reviews?"', re.IGNORECASE)
_TOTAL_REVIEWS = re.compile(r'([\d,]+)\s+(?:total\s+)?reviews?', re.IGNORECASE)
_STAR_PERCENT = re.compile(r'(\d)\s+stars?\s*[\s\S]*?(\d+)%', re.IGNORECASE)


def _all_zero(distribution: Dict[str, int]) -> bool:
    return not any(distribution.values())


def _from_star_labels(html: str) -> Dict[str, int]:
    """Tier 1: aria-label="5 stars, 1,234 reviews" rows."""
    distribution = empty_distribution()
    for match in _STAR_COUNT_LABEL.finditer(html):
        star = match.group(1)
        if star in distribution:
            distribution[star] = parse_count(match.group(2))
    return distribution


def _from_star_proximity(html: str) -> Dict[str, int]:
    """Tier 2: the first number after a literal "<n> star(s)" label."""
    distribution = empty_distribution()
    for star in STAR_KEYS:
        match = re.search(star + r'\s+stars?[\s\S]*?(\d[\d,]*)', html, re.IGNORECASE)
        if match:
            distribution[star] = parse_count(match.group(1))
    return distribution


def _from_percentages(html: str) -> Dict[str, int]:
    """Tier 3: "<n> stars ... <pct>%" bars scaled by the total review count."""
    distribution = empty_distribution()
    total_match = _TOTAL_REVIEWS.search(html)
    if not total_match:
        return distribution
    try:
        total = parse_count(total_match.group(1))
    except ValueError:
        return distribution
    if total <= 0:
        return distribution

    for match in _STAR_PERCENT.finditer(html):
        star = match.group(1)
        if star in distribution:
            distribution[star] = round_half_up(total * int(match.group(2)) / 100)
    return distribution


def extract_rating_distribution(html: str) -> Dict[str, int]:
    """
    Extract the rating distribution (1-5 star breakdown) from a place page.

    The three tiers are alternatives, never merged: a later tier only runs
    when every star count of the previous one is zero.

    Returns:
        Dict keyed "5".."1" with review counts (all zero when nothing matched)
    """
    if not html:
        return empty_distribution()

    for tier in (_from_star_labels, _from_star_proximity, _from_percentages):
        distribution = tier(html)
        if not _all_zero(distribution):
            logger.debug("Rating distribution from %s", tier.__name__)
            return distribution

    return empty_distribution()


def calculate_summary(
    reviews: List[ReviewRecord],
    business: BusinessRecord,
    distribution: Dict[str, int],
) -> ReviewSummary:
    """
    Calculate review summary statistics from reviews and business info.

    Response rate is the share of extracted reviews with an owner response.
    Sentiment only counts reviews whose rating is known (> 0): 4-5 positive,
    3 neutral, 1-2 negative.
    """
    with_response = sum(1 for review in reviews if review.owner_response is not None)
    response_rate = round_half_up(with_response / len(reviews) * 100) if reviews else 0

    rated = [review for review in reviews if review.rating > 0]
    positive = sum(1 for review in rated if review.rating >= 4)
    neutral = sum(1 for review in rated if review.rating == 3)
    negative = sum(1 for review in rated if review.rating <= 2)
    total_rated = len(rated) or 1

    return ReviewSummary(
        avg_rating=business.rating,
        total_reviews=business.review_count,
        rating_distribution=dict(distribution),
        response_rate=response_rate,
        avg_response_time_days=None,
        sentiment=SentimentBreakdown(
            positive=round_half_up(positive / total_rated * 100),
            neutral=round_half_up(neutral / total_rated * 100),
            negative=round_half_up(negative / total_rated * 100),
        ),
    )
