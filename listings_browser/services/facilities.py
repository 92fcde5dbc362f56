"""Facility matching with smart-category synonyms."""
from __future__ import annotations

from functools import lru_cache
from typing import Sequence

from ..data.facilities import SMART_FILTERS
from .text import normalize


@lru_cache
def _category_keywords(category: str) -> tuple[str, ...]:
    """Normalised keywords for a smart category, computed once per category."""

    normalised = (normalize(keyword) for keyword in SMART_FILTERS.get(category, ()))
    return tuple(keyword for keyword in normalised if keyword)


def is_smart_category(facility: str) -> bool:
    return facility in SMART_FILTERS


def matches(listing_facilities: Sequence[str], requested: str) -> bool:
    """Return True when a listing offers ``requested``.

    A verbatim facility label always matches. A smart category matches when any
    normalised listing facility contains one of the category's normalised
    keywords. Anything else does not match.
    """

    if requested in listing_facilities:
        return True
    if not is_smart_category(requested):
        return False

    keywords = _category_keywords(requested)
    for facility in listing_facilities:
        normalised = normalize(facility)
        if normalised and any(keyword in normalised for keyword in keywords):
            return True
    return False
