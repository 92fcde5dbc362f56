"""Predicate filtering for the public listings page."""
from __future__ import annotations

import math
import re
from typing import Iterable, Sequence

from ..data.facilities import ALL_OPTION
from ..repositories.listings import Listing
from ..schemas.listings import FilterState
from . import facilities as facility_matcher

_ARABIC_DIGITS = str.maketrans("٠١٢٣٤٥٦٧٨٩۰۱۲۳۴۵۶۷۸۹٫", "01234567890123456789.")
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_price(raw: str | None) -> float | None:
    """Parse a sheet price cell, returning None for anything unusable.

    Accepts a leading numeric prefix ("500 ريال" -> 500), Arabic-Indic digits and
    thousands separators. Non-numeric, non-finite and non-positive values are
    treated as absent.
    """

    if raw is None:
        return None
    text = str(raw).strip().translate(_ARABIC_DIGITS).replace(",", "").replace("٬", "")
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    try:
        value = float(match.group(0))
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def min_price(listing: Listing) -> float | None:
    """Cheapest valid price across the four price fields, or None without price data."""

    valid = [price for price in (parse_price(raw) for raw in listing.prices.values()) if price is not None]
    return min(valid) if valid else None


def matches_query(listing: Listing, query: str) -> bool:
    needle = query.strip().casefold()
    if not needle:
        return True
    if needle in listing.title.casefold():
        return True
    if needle in listing.id.casefold():
        return True
    if needle in listing.city.casefold():
        return True
    return any(needle in facility.casefold() for facility in listing.facilities)


def matches_category(value: str, selected: str | None) -> bool:
    if not selected or selected == ALL_OPTION:
        return True
    return value == selected


def matches_facilities(listing: Listing, requested: Iterable[str]) -> bool:
    return all(facility_matcher.matches(listing.facilities, facility) for facility in requested)


def matches_price(listing: Listing, price_range: tuple[float, float]) -> bool:
    cheapest = min_price(listing)
    if cheapest is None:
        return True
    low, high = price_range
    return low <= cheapest <= high


def matches(listing: Listing, state: FilterState) -> bool:
    """Return True when ``listing`` passes every active filter in ``state``."""

    return (
        matches_query(listing, state.query)
        and matches_category(listing.city, state.city)
        and matches_category(listing.direction, state.direction)
        and matches_category(listing.type, state.type)
        and matches_facilities(listing, state.facilities)
        and matches_price(listing, state.price_range)
    )


def apply(listings: Sequence[Listing], state: FilterState) -> list[Listing]:
    """Return the listings passing ``state``, preserving input order."""

    return [listing for listing in listings if matches(listing, state)]
