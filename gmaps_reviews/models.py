"""
Result Models

Value objects produced by the parsers. Every record is created and fully
owned by the extraction call that built it; ``to_dict()`` gives the plain
dictionary form used by the CLI and the API server.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

STAR_KEYS = ('5', '4', '3', '2', '1')

ANONYMOUS_AUTHOR = 'Anonymous'


def empty_distribution() -> Dict[str, int]:
    """Rating distribution with every star count at zero."""
    return {star: 0 for star in STAR_KEYS}


@dataclass
class Coordinates:
    """Latitude/longitude pair within valid Earth bounds."""
    latitude: float
    longitude: float


@dataclass
class BusinessRecord:
    """One business (place) as recovered from a page.

    Fields start absent and are filled by the field extractors in a fixed
    order. ``name`` is empty when no strategy could recover it.
    """
    name: str = ""
    place_id: str = ""
    rating: Optional[float] = None
    review_count: Optional[int] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    hours: Optional[Dict[str, str]] = None
    category: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    price_level: Optional[str] = None
    photos: List[str] = field(default_factory=list)
    coordinates: Optional[Coordinates] = None
    permanently_closed: bool = False

    def set_category(self, category: Optional[str]) -> None:
        """Set the primary category and the (single-valued) categories list."""
        self.category = category
        self.categories = [category] if category else []

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ReviewRecord:
    """One authored review. ``rating`` 0 means the rating is unknown."""
    author: str = ANONYMOUS_AUTHOR
    rating: int = 0
    text: str = ""
    date: str = ""
    relative_date: Optional[str] = None
    likes: int = 0
    owner_response: Optional[str] = None
    owner_response_date: Optional[str] = None
    photos: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SentimentBreakdown:
    """Percentages of rated reviews that are positive/neutral/negative."""
    positive: int = 0
    neutral: int = 0
    negative: int = 0


@dataclass
class ReviewSummary:
    """Aggregate statistics derived from reviews and business fields.

    ``avg_response_time_days`` is always None for now.
    """
    avg_rating: Optional[float]
    total_reviews: Optional[int]
    rating_distribution: Dict[str, int]
    response_rate: int
    sentiment: SentimentBreakdown
    avg_response_time_days: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
