"""
Parsers module for extracting data from Google Maps HTML.

- business.py: Business details from place pages and search knowledge panels
- reviews.py: Individual reviews
- search.py: Search listings (Maps search and local web search)
- summary.py: Rating distribution and review summary
"""

from .business import extract_business_info, extract_business_from_search
from .reviews import extract_reviews
from .search import extract_search_results, extract_from_local_search
from .summary import extract_rating_distribution, calculate_summary
