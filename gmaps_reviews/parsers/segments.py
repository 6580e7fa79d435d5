"""
Document Segmentation

Splits listing and review pages into per-entity fragments.

Google's markup has no stable block delimiter, so each page type has an
ordered list of candidate delimiters. The first delimiter that matches at
least once is used for the whole document; the rest are ignored.
"""

import itertools
import re
from typing import Iterator, Sequence

_I = re.IGNORECASE


def _marker_blocks(marker: str) -> str:
    """Fragment from one class marker up to the next one (or end of page)."""
    marker_class = r'class="[^"]*(?:' + marker + r')[^"]*"'
    return marker_class + r'[\s\S]*?(?=' + marker_class + r'|$)'


# Individual reviews on a place page
REVIEW_DELIMITERS = (
    re.compile(
        r'class="[^"]*(?:jftiEf|gws-localreviews__google-review)[^"]*"[\s\S]*?'
        r'(?=class="[^"]*(?:jftiEf|gws-localreviews__google-review)[^"]*"'
        r'|</div>\s*</div>\s*</div>\s*$)',
        _I,
    ),
    re.compile(r'data-review-id="[^"]*"[\s\S]*?(?=data-review-id="|$)', _I),
    re.compile(
        r'class="[^"]*review-dialog-list[^"]*"[\s\S]*?class="[^"]*(?:review-snippet)[^"]*"',
        _I,
    ),
)

# Review snippets quoted on web-search result pages
SNIPPET_DELIMITERS = (
    re.compile(r'class="[^"]*(?:review-snippet|Jtu6Td|OA1nbd)[^"]*"[\s\S]*?</div>', _I),
)

# Result cards on a Maps search page
LISTING_DELIMITERS = (
    re.compile(_marker_blocks(r'Nv2PK|qBF1Pd'), _I),
    re.compile(r'data-result-index="\d+"[\s\S]*?(?=data-result-index="|$)', _I),
)

# Embedded structured-data objects, one per business type declaration
STRUCTURED_DATA_DELIMITERS = (
    re.compile(
        r'"@type"\s*:\s*"(?:LocalBusiness|Restaurant|Store|Hotel|[A-Z]\w+)"[\s\S]*?(?="@type"|$)'
    ),
)

# Result cards on the basic-HTML local web search page
LOCAL_RESULT_DELIMITERS = (
    re.compile(
        r'class="X7NTVe"[\s\S]*?(?=class="X7NTVe"|class="Q0HXG"></div></div>|</footer>)',
        _I,
    ),
)


def split_fragments(document: str, delimiters: Sequence['re.Pattern']) -> Iterator[str]:
    """
    Lazily yield entity fragments using the first delimiter that matches.

    Args:
        document: Raw page markup
        delimiters: Compiled fragment patterns in priority order

    Yields:
        Fragment strings in document order
    """
    if not document:
        return

    for delimiter in delimiters:
        matches = delimiter.finditer(document)
        first = next(matches, None)
        if first is None:
            continue
        for match in itertools.chain((first,), matches):
            yield match.group(0)
        return
