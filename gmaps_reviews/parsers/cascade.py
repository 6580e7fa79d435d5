"""
Pattern Cascade

Generic "try each recognition strategy in order" machinery used by every
field extractor.

A tier is a named pure function ``document -> candidate | None``. A
``FieldCascade`` bundles the ordered tiers for one field with a conversion
step and an acceptance predicate:

    RATING = FieldCascade(
        'rating',
        tiers=(
            pattern('json', r'"ratingValue"\\s*:\\s*"?([\\d.]+)"?'),
            pattern('aria', r'aria-label="([\\d.]+)\\s+stars?"', re.I),
        ),
        convert=float,
        accept=lambda value: 1 <= value <= 5,
    )
    RATING.extract(html)  # -> 4.6 or None

Candidates are HTML-entity-decoded, then converted, then accepted. A
conversion error counts as "no candidate" and the next tier is tried. The
first accepted value wins; when nothing is accepted the field stays absent.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple, Optional, Sequence, Tuple, Union

from .text import decode_html_entities

logger = logging.getLogger(__name__)

Extractor = Callable[[str], Any]


class Tier(NamedTuple):
    """One ranked strategy inside a cascade."""
    name: str
    extract: Extractor


def pattern(
    name: str,
    regex: str,
    flags: int = 0,
    group: Union[int, Tuple[int, ...]] = 1,
) -> Tier:
    """
    Build a tier from a regular expression.

    Only the first match in the document is considered. ``group`` may be
    a tuple, in which case the tier yields a tuple of groups.

    Args:
        name: Tier label used in debug logging
        regex: Pattern source
        flags: ``re`` flags
        group: Group index (or indices) to return

    Returns:
        Tier whose extract function returns the group(s) or None
    """
    compiled = re.compile(regex, flags)

    def extract(document: str):
        match = compiled.search(document)
        if not match:
            return None
        if isinstance(group, tuple):
            return tuple(match.group(i) for i in group)
        return match.group(group)

    return Tier(name, extract)


def _decode(candidate: Any) -> Any:
    if isinstance(candidate, str):
        return decode_html_entities(candidate)
    if isinstance(candidate, tuple):
        return tuple(_decode(item) for item in candidate)
    return candidate


def _identity(value: Any) -> Any:
    return value


def _always(value: Any) -> bool:
    return True


@dataclass(frozen=True)
class FieldCascade:
    """Ordered strategies for one field plus its conversion and acceptance."""

    field: str
    tiers: Sequence[Tier]
    convert: Callable[[Any], Any] = _identity
    accept: Callable[[Any], bool] = _always

    def extract(self, document: str) -> Optional[Any]:
        """Return the first accepted value, or None when every tier fails."""
        if not document:
            return None

        for tier in self.tiers:
            candidate = tier.extract(document)
            if candidate is None:
                continue
            try:
                value = self.convert(_decode(candidate))
            except (TypeError, ValueError):
                continue
            if value is not None and self.accept(value):
                logger.debug("%s: accepted tier '%s'", self.field, tier.name)
                return value

        logger.debug("%s: no tier matched", self.field)
        return None

